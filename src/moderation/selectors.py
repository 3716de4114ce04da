import uuid
from datetime import datetime, timedelta

from django.db.models import Count, QuerySet
from django.utils import timezone

from src.core.exceptions import NotFoundError
from src.forum.models import ForumPost, ForumTopic
from src.moderation.models import CommunityReport, ModerationHistory


def topic_status(topic) -> str:
    if not topic.is_active:
        return "DELETED"
    if topic.is_locked:
        return "LOCKED"
    if topic.is_pinned:
        return "PINNED"
    return "ACTIVE"


def post_status(post) -> str:
    if not post.is_active:
        return "DELETED"
    if post.is_flagged:
        return "FLAGGED"
    return "ACTIVE"


def history_list(
    *,
    moderator_id: uuid.UUID | None = None,
    content_type: str | None = None,
    action_type: str | None = None,
    since: datetime | None = None,
    until: datetime | None = None,
) -> QuerySet[ModerationHistory]:
    qs = ModerationHistory.objects.select_related("moderator")
    if moderator_id:
        qs = qs.filter(moderator_id=moderator_id)
    if content_type:
        qs = qs.filter(content_type=content_type.upper())
    if action_type:
        qs = qs.filter(action_type=action_type.upper())
    if since:
        qs = qs.filter(created_at__gte=since)
    if until:
        qs = qs.filter(created_at__lte=until)
    return qs.order_by("-created_at")


def history_for_content(*, content_type: str, content_id: uuid.UUID) -> QuerySet[ModerationHistory]:
    return (
        ModerationHistory.objects.select_related("moderator")
        .filter(content_type=content_type.upper(), content_id=content_id)
        .order_by("-created_at")
    )


def flagged_posts() -> QuerySet[ForumPost]:
    return ForumPost.objects.filter(is_active=True, is_flagged=True).select_related("topic", "created_by",
                                                                                    "flagged_by")


def reported_topics() -> QuerySet[ForumTopic]:
    reported_ids = CommunityReport.objects.filter(is_resolved=False, content_type="TOPIC").values("content_id")
    return ForumTopic.objects.filter(id__in=reported_ids, is_active=True)


def moderation_stats(*, days: int = 7) -> dict:
    recent_since = timezone.now() - timedelta(days=days)
    qs = ModerationHistory.objects.all()
    return {
        "total_actions": qs.count(),
        "recent_actions": qs.filter(created_at__gte=recent_since).count(),
        "automated_actions": qs.filter(automated=True).count(),
        "by_action_type": {
            row["action_type"]: row["count"]
            for row in qs.values("action_type").annotate(count=Count("id")).order_by()
        },
        "flagged_posts": flagged_posts().count(),
        "unresolved_reports": CommunityReport.objects.filter(is_resolved=False).count(),
    }


def report_list(*, is_resolved: bool | None = None, content_type: str | None = None) -> QuerySet[CommunityReport]:
    qs = CommunityReport.objects.select_related("reporter", "resolved_by")
    if is_resolved is not None:
        qs = qs.filter(is_resolved=is_resolved)
    if content_type:
        qs = qs.filter(content_type=content_type.upper())
    return qs.order_by("-reported_at")


def report_get(*, report_id: uuid.UUID) -> CommunityReport:
    try:
        return CommunityReport.objects.select_related("reporter", "resolved_by").get(id=report_id)
    except CommunityReport.DoesNotExist:
        raise NotFoundError(message="Report not found", code="REPORT_NOT_FOUND")
