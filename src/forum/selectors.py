import uuid

from django.db.models import Count, Q, QuerySet

from src.core.exceptions import NotFoundError
from src.core.policies import has_permission
from src.forum.models import ForumCategory, ForumPost, ForumTopic


def _sees_private(user) -> bool:
    return has_permission(user, "forum.participate")


def category_visible_queryset(*, user) -> QuerySet[ForumCategory]:
    qs = ForumCategory.objects.filter(is_active=True)
    if not _sees_private(user):
        qs = qs.filter(is_public=True)
    return qs


def category_list(*, user, language: str | None = None) -> QuerySet[ForumCategory]:
    qs = category_visible_queryset(user=user).annotate(
        topic_count=Count("topics", filter=Q(topics__is_active=True))
    )
    if language:
        qs = qs.filter(language=language.lower())
    return qs.order_by("name")


def category_get(*, category_id: uuid.UUID, user) -> ForumCategory:
    try:
        return category_visible_queryset(user=user).get(id=category_id)
    except ForumCategory.DoesNotExist:
        raise NotFoundError(message="Forum category not found", code="CATEGORY_NOT_FOUND")


def topic_visible_queryset(*, user) -> QuerySet[ForumTopic]:
    qs = ForumTopic.objects.filter(is_active=True, category__is_active=True).select_related("category", "created_by")
    if not _sees_private(user):
        qs = qs.filter(is_public=True, category__is_public=True)
    return qs


def topic_list(
    *,
    user,
    category_id: uuid.UUID | None = None,
    language: str | None = None,
    search: str | None = None,
) -> QuerySet[ForumTopic]:
    """Pinned topics first, then the most recently active."""
    qs = topic_visible_queryset(user=user).annotate(
        post_count=Count("posts", filter=Q(posts__is_active=True))
    )
    if category_id:
        qs = qs.filter(category_id=category_id)
    if language:
        qs = qs.filter(language=language.lower())
    if search and search.strip():
        s = search.strip()
        qs = qs.filter(Q(title__icontains=s) | Q(content__icontains=s))
    return qs.order_by("-is_pinned", "-last_activity_at")


def topic_get(*, topic_id: uuid.UUID, user) -> ForumTopic:
    try:
        return topic_visible_queryset(user=user).get(id=topic_id)
    except ForumTopic.DoesNotExist:
        raise NotFoundError(message="Forum topic not found", code="TOPIC_NOT_FOUND")


def topic_get_for_update(*, topic_id: uuid.UUID) -> ForumTopic:
    try:
        return ForumTopic.objects.select_for_update().get(id=topic_id, is_active=True)
    except ForumTopic.DoesNotExist:
        raise NotFoundError(message="Forum topic not found", code="TOPIC_NOT_FOUND")


def post_list(*, topic: ForumTopic) -> QuerySet[ForumPost]:
    return topic.posts.filter(is_active=True).select_related("created_by").order_by("created_at")


def post_get_for_update(*, post_id: uuid.UUID) -> ForumPost:
    try:
        return ForumPost.objects.select_for_update().select_related("topic").get(id=post_id, is_active=True)
    except ForumPost.DoesNotExist:
        raise NotFoundError(message="Forum post not found", code="POST_NOT_FOUND")


def last_post_at(*, user):
    post = ForumPost.objects.filter(created_by=user).order_by("-created_at").only("created_at").first()
    return post.created_at if post else None
