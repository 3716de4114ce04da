import logging
import uuid

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from src.auditaction.models import AuditAction, AuditCategory
from src.auditaction.services import audit_action_create
from src.common.languages import normalize_language
from src.common.sanitize import sanitize_text
from src.core.exceptions import DomainValidationError, NotFoundError, PermissionDeniedError
from src.core.policies import ensure_permission, has_permission
from src.core.ratelimit import enforce_min_interval
from src.forum import selectors
from src.forum.models import ForumCategory, ForumPost, ForumTopic
from src.forum.schemas import (
    CategoryCreatePayload,
    CategoryUpdatePayload,
    PostCreatePayload,
    TopicCreatePayload,
    TopicUpdatePayload,
)
from src.moderation.services import post_auto_moderate
from src.notifications.models import NotificationType
from src.notifications.services import notification_create
from src.users.models import User

log = logging.getLogger(__name__)


def _clean_required(value: str, field: str) -> str:
    """Sanitize a required field; markup-only input leaves nothing to store."""
    cleaned = sanitize_text(value)
    if not cleaned:
        raise DomainValidationError(message=f"{field} is required", errors={field: [f"{field} is required"]})
    return cleaned


def _ensure_author_or_moderator(*, user, author_id) -> None:
    if author_id == user.id:
        return
    if not has_permission(user, "forum.moderate"):
        raise PermissionDeniedError(message="Only the author or a moderator can change this content")


# Categories


@transaction.atomic
def category_create(*, created_by: User, payload: CategoryCreatePayload) -> ForumCategory:
    return ForumCategory.objects.create(
        name=_clean_required(payload.name, "name"),
        description=sanitize_text(payload.description) or "",
        language=normalize_language(payload.language),
        is_public=payload.is_public,
        created_by=created_by,
    )


@transaction.atomic
def category_update(*, category_id: uuid.UUID, payload: CategoryUpdatePayload) -> ForumCategory:
    category = ForumCategory.objects.select_for_update().filter(id=category_id, is_active=True).first()
    if category is None:
        raise NotFoundError(message="Forum category not found", code="CATEGORY_NOT_FOUND")

    data = payload.dict(exclude_unset=True, exclude_none=True)
    if "name" in data:
        category.name = _clean_required(data["name"], "name")
    if "description" in data:
        category.description = sanitize_text(data["description"])
    if "language" in data:
        category.language = normalize_language(data["language"])
    if "is_public" in data:
        category.is_public = data["is_public"]
    category.save()
    return category


@transaction.atomic
def category_delete(*, category_id: uuid.UUID) -> None:
    updated = ForumCategory.objects.filter(id=category_id, is_active=True).update(
        is_active=False, updated_at=timezone.now()
    )
    if not updated:
        raise NotFoundError(message="Forum category not found", code="CATEGORY_NOT_FOUND")


# Topics


@transaction.atomic
def topic_create(*, created_by: User, payload: TopicCreatePayload) -> ForumTopic:
    ensure_permission(created_by, "forum.participate")
    category = selectors.category_get(category_id=payload.category_id, user=created_by)
    return ForumTopic.objects.create(
        category=category,
        title=_clean_required(payload.title, "title"),
        content=_clean_required(payload.content, "content"),
        language=normalize_language(payload.language),
        is_public=payload.is_public,
        created_by=created_by,
    )


@transaction.atomic
def topic_update(*, topic_id: uuid.UUID, user: User, payload: TopicUpdatePayload) -> ForumTopic:
    topic = selectors.topic_get_for_update(topic_id=topic_id)
    _ensure_author_or_moderator(user=user, author_id=topic.created_by_id)

    data = payload.dict(exclude_unset=True, exclude_none=True)
    for field in ("title", "content"):
        if field in data:
            setattr(topic, field, _clean_required(data[field], field))
    if "language" in data:
        topic.language = normalize_language(data["language"])
    if "is_public" in data:
        topic.is_public = data["is_public"]
    topic.save()
    return topic


@transaction.atomic
def topic_delete(*, topic_id: uuid.UUID, user: User, request=None) -> None:
    topic = selectors.topic_get_for_update(topic_id=topic_id)
    _ensure_author_or_moderator(user=user, author_id=topic.created_by_id)
    topic.is_active = False
    topic.save(update_fields=["is_active", "updated_at"])
    audit_action_create(
        user=user,
        category=AuditCategory.FORUM,
        action=AuditAction.FORUM_TOPIC_DELETED,
        target_type="forum_topic",
        target_id=str(topic.id),
        request=request,
    )


@transaction.atomic
def topic_set_flags(*, topic_id: uuid.UUID, user: User, is_pinned: bool | None = None,
                    is_locked: bool | None = None) -> ForumTopic:
    """Pin/unpin and lock/unlock are moderator actions."""
    ensure_permission(user, "forum.moderate")
    topic = selectors.topic_get_for_update(topic_id=topic_id)
    if is_pinned is not None:
        topic.is_pinned = is_pinned
    if is_locked is not None:
        topic.is_locked = is_locked
    topic.save(update_fields=["is_pinned", "is_locked", "updated_at"])
    return topic


# Posts


@transaction.atomic
def post_create(*, created_by: User, payload: PostCreatePayload) -> ForumPost:
    """
    Reply to a topic.

    Locked topics refuse new posts (403); a reply's parent must be an active post
    of the same topic. The topic author is notified of replies from others.
    """
    ensure_permission(created_by, "forum.participate")
    enforce_min_interval(
        selectors.last_post_at(user=created_by),
        seconds=settings.FORUM_MIN_POST_INTERVAL_SECONDS,
        code="POSTING_TOO_FAST",
        message="You are posting too fast. Please wait a moment.",
    )

    topic = selectors.topic_get(topic_id=payload.topic_id, user=created_by)
    if topic.is_locked:
        raise PermissionDeniedError(message="Topic is locked", code="TOPIC_LOCKED")

    parent = None
    if payload.parent_post_id:
        parent = ForumPost.objects.filter(id=payload.parent_post_id, topic=topic, is_active=True).first()
        if parent is None:
            raise NotFoundError(message="Parent post not found", code="POST_NOT_FOUND")

    post = ForumPost.objects.create(
        topic=topic,
        content=_clean_required(payload.content, "content"),
        language=normalize_language(payload.language),
        parent_post=parent,
        created_by=created_by,
    )
    if settings.FORUM_AUTO_MODERATION_ENABLED:
        post_auto_moderate(post=post)
        if not post.is_active:
            return post

    ForumTopic.objects.filter(id=topic.id).update(last_activity_at=post.created_at)

    if topic.created_by_id and topic.created_by_id != created_by.id:
        notification_create(
            recipient=topic.created_by,
            type=NotificationType.REPLY,
            content=f"{created_by.username} replied to your topic \"{topic.title}\"",
            related_url=f"/forum/topics/{topic.id}",
        )
    return post


@transaction.atomic
def post_update(*, post_id: uuid.UUID, user: User, content: str) -> ForumPost:
    post = selectors.post_get_for_update(post_id=post_id)
    _ensure_author_or_moderator(user=user, author_id=post.created_by_id)
    post.content = _clean_required(content, "content")
    post.save(update_fields=["content", "updated_at"])
    return post


@transaction.atomic
def post_delete(*, post_id: uuid.UUID, user: User, request=None) -> None:
    post = selectors.post_get_for_update(post_id=post_id)
    _ensure_author_or_moderator(user=user, author_id=post.created_by_id)
    post.is_active = False
    post.save(update_fields=["is_active", "updated_at"])
    audit_action_create(
        user=user,
        category=AuditCategory.FORUM,
        action=AuditAction.FORUM_POST_DELETED,
        target_type="forum_post",
        target_id=str(post.id),
        details={"topic_id": post.topic_id},
        request=request,
    )


@transaction.atomic
def post_flag(*, post_id: uuid.UUID, user: User, reason: str = "") -> ForumPost:
    ensure_permission(user, "forum.participate")
    post = selectors.post_get_for_update(post_id=post_id)
    post.is_flagged = True
    post.flagged_by = user
    post.flag_reason = sanitize_text(reason) or ""
    post.save(update_fields=["is_flagged", "flagged_by", "flag_reason", "updated_at"])
    log.info("Post %s flagged by %s", post.id, user.id)
    return post
