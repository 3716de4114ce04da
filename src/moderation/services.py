import logging
import uuid

from django.db import transaction
from django.utils import timezone

from src.auditaction.models import AuditAction, AuditCategory
from src.auditaction.services import audit_action_create
from src.common.sanitize import sanitize_text
from src.core.exceptions import BusinessRuleError, DomainConflictError, NotFoundError
from src.forum.models import ForumPost, ForumTopic
from src.moderation import selectors
from src.moderation.content_filter import Recommendation, analyze_content
from src.moderation.models import (
    CommunityReport,
    ModeratedContentType,
    ModerationActionType as Action,
    ModerationHistory,
    ReportedContentType,
)
from src.notifications.models import NotificationType
from src.notifications.services import notification_create
from src.users.models import User

log = logging.getLogger(__name__)

TOPIC_ACTIONS = {Action.APPROVE, Action.REJECT, Action.DELETE, Action.LOCK, Action.PIN, Action.FLAG}
POST_ACTIONS = {Action.APPROVE, Action.REJECT, Action.DELETE, Action.FLAG}


def _apply_topic_action(topic: ForumTopic, action: str) -> None:
    if action == Action.APPROVE:
        topic.is_active = True
        topic.is_public = True
    elif action in (Action.REJECT, Action.DELETE):
        topic.is_active = False
    elif action == Action.LOCK:
        topic.is_locked = True
    elif action == Action.PIN:
        topic.is_pinned = True
    # FLAG is recorded in the history only


def _apply_post_action(post: ForumPost, action: str, *, moderator: User, reason: str) -> None:
    if action == Action.APPROVE:
        post.is_active = True
        post.is_flagged = False
    elif action in (Action.REJECT, Action.DELETE):
        post.is_active = False
    elif action == Action.FLAG:
        post.is_flagged = True
        post.flagged_by = moderator
        post.flag_reason = reason


def _load_content(content_type: str, content_id: uuid.UUID):
    model = {ModeratedContentType.TOPIC: ForumTopic, ModeratedContentType.POST: ForumPost}.get(content_type)
    if model is None:
        raise BusinessRuleError(message=f"Moderation of {content_type} content is not supported",
                                code="UNSUPPORTED_MODERATION_ACTION")
    content = model.objects.select_for_update().filter(id=content_id).first()
    if content is None:
        raise NotFoundError(message=f"{content_type.title()} not found", code="CONTENT_NOT_FOUND")
    return content


def _moderate_one(*, moderator: User, content_type: str, content_id: uuid.UUID, action: str, reason: str,
                  bulk_action_id: uuid.UUID | None = None) -> ModerationHistory:
    content_type = content_type.upper()
    action = action.upper()
    allowed = {ModeratedContentType.TOPIC: TOPIC_ACTIONS, ModeratedContentType.POST: POST_ACTIONS}.get(content_type)
    if not allowed or action not in allowed:
        raise BusinessRuleError(
            message=f"Action {action} is not supported for {content_type}",
            code="UNSUPPORTED_MODERATION_ACTION",
        )

    content = _load_content(content_type, content_id)
    if content_type == ModeratedContentType.TOPIC:
        previous = selectors.topic_status(content)
        _apply_topic_action(content, action)
        new = selectors.topic_status(content)
    else:
        previous = selectors.post_status(content)
        _apply_post_action(content, action, moderator=moderator, reason=reason)
        new = selectors.post_status(content)
    content.save()

    entry = ModerationHistory.objects.create(
        moderator=moderator,
        content_type=content_type,
        content_id=content.id,
        action_type=action,
        reason=reason,
        previous_status=previous,
        new_status=new,
        bulk_action_id=bulk_action_id,
    )

    label = "topic" if content_type == ModeratedContentType.TOPIC else "post"
    message = f"A moderator applied {action.lower()} to your {label}"
    notification_create(
        recipient=content.created_by,
        type=NotificationType.MODERATION,
        content=f"{message}: {reason}" if reason else message,
        related_url=f"/forum/topics/{content.id if label == 'topic' else content.topic_id}",
    )
    return entry


def post_auto_moderate(*, post: ForumPost) -> ModerationHistory | None:
    """
    Screen a freshly created post. Flagged posts stay visible with a flag reason;
    rejected posts are hidden and the author is told why. Approved posts leave no history.
    """
    analysis = analyze_content(post.content)
    recommendation = analysis.recommendation
    if recommendation == Recommendation.APPROVE:
        return None

    previous = selectors.post_status(post)
    if recommendation == Recommendation.REJECT:
        post.is_active = False
        post.save(update_fields=["is_active", "updated_at"])
        action, message = Action.REJECT, "Your post was automatically removed"
    else:
        post.is_flagged = True
        post.flag_reason = analysis.reason
        post.save(update_fields=["is_flagged", "flag_reason", "updated_at"])
        action, message = Action.FLAG, "Your post was automatically flagged for review"

    entry = ModerationHistory.objects.create(
        moderator=None,
        content_type=ModeratedContentType.POST,
        content_id=post.id,
        action_type=action,
        reason=analysis.reason,
        previous_status=previous,
        new_status=selectors.post_status(post),
        automated=True,
        confidence_score=analysis.confidence_score,
    )
    log.info("Auto-moderation applied %s to post %s (score %s)", action, post.id, analysis.confidence_score)
    notification_create(
        recipient=post.created_by,
        type=NotificationType.MODERATION,
        content=f"{message}: {analysis.reason}",
        related_url=f"/forum/topics/{post.topic_id}",
    )
    return entry


@transaction.atomic
def moderate(*, moderator: User, content_type: str, content_id: uuid.UUID, action: str, reason: str = "",
             request=None) -> ModerationHistory:
    """Apply one moderation action, record it and notify the content author."""
    entry = _moderate_one(
        moderator=moderator,
        content_type=content_type,
        content_id=content_id,
        action=action,
        reason=sanitize_text(reason) or "",
    )
    log.info("Moderator %s applied %s to %s %s", moderator.id, entry.action_type, entry.content_type, content_id)
    audit_action_create(
        user=moderator,
        category=AuditCategory.MODERATION,
        action=AuditAction.MODERATION_ACTION,
        target_type=entry.content_type.lower(),
        target_id=str(content_id),
        details={"action": entry.action_type, "previous": entry.previous_status, "new": entry.new_status},
        request=request,
    )
    return entry


def moderate_bulk(*, moderator: User, content_type: str, content_ids: list[uuid.UUID], action: str,
                  reason: str = "", request=None) -> dict:
    """
    Apply the same action to several items. Each item commits or fails on its own;
    a BULK_ACTION row summarises the run.
    """
    bulk_action_id = uuid.uuid4()
    reason = sanitize_text(reason) or ""
    successes, failures = [], []

    for content_id in content_ids:
        try:
            with transaction.atomic():
                _moderate_one(
                    moderator=moderator,
                    content_type=content_type,
                    content_id=content_id,
                    action=action,
                    reason=reason,
                    bulk_action_id=bulk_action_id,
                )
        except (BusinessRuleError, NotFoundError) as exc:
            failures.append({"id": str(content_id), "reason": exc.message})
        else:
            successes.append(str(content_id))

    ModerationHistory.objects.create(
        moderator=moderator,
        content_type=content_type.upper(),
        action_type=Action.BULK_ACTION,
        reason=reason or f"Bulk {action.lower()}",
        new_status=action.upper(),
        bulk_action_id=bulk_action_id,
        affected_count=len(successes),
    )
    audit_action_create(
        user=moderator,
        category=AuditCategory.MODERATION,
        action=AuditAction.MODERATION_BULK_ACTION,
        details={
            "bulk_action_id": bulk_action_id,
            "action": action.upper(),
            "succeeded": len(successes),
            "failed": len(failures),
        },
        request=request,
    )
    return {
        "bulk_action_id": str(bulk_action_id),
        "action": action.upper(),
        "total": len(content_ids),
        "succeeded": successes,
        "failed": failures,
    }


def _reported_content_exists(content_type: str, content_id: uuid.UUID) -> bool:
    model = ForumTopic if content_type == ReportedContentType.TOPIC else ForumPost
    return model.objects.filter(id=content_id, is_active=True).exists()


@transaction.atomic
def report_create(*, reporter: User, content_type: str, content_id: uuid.UUID, reason: str,
                  description: str = "") -> CommunityReport:
    content_type = content_type.upper()
    if not _reported_content_exists(content_type, content_id):
        raise NotFoundError(message="Reported content not found", code="CONTENT_NOT_FOUND")

    if CommunityReport.objects.filter(
        reporter=reporter, content_type=content_type, content_id=content_id, is_resolved=False
    ).exists():
        raise DomainConflictError(message="You have already reported this content", code="ALREADY_REPORTED")

    return CommunityReport.objects.create(
        content_type=content_type,
        content_id=content_id,
        reporter=reporter,
        reason=reason,
        description=sanitize_text(description) or "",
    )


@transaction.atomic
def report_resolve(*, report_id: uuid.UUID, resolved_by: User, action: str | None = None, notes: str = "",
                   request=None) -> CommunityReport:
    """Close a report, optionally moderating the reported content in the same transaction."""
    report = CommunityReport.objects.select_for_update().filter(id=report_id).first()
    if report is None:
        raise NotFoundError(message="Report not found", code="REPORT_NOT_FOUND")
    if report.is_resolved:
        raise BusinessRuleError(message="Report is already resolved", code="REPORT_ALREADY_RESOLVED")

    notes = sanitize_text(notes) or ""
    if action:
        moderate(
            moderator=resolved_by,
            content_type=report.content_type,
            content_id=report.content_id,
            action=action,
            reason=notes or f"Report {report.reason.lower()}",
            request=request,
        )

    report.is_resolved = True
    report.resolved_by = resolved_by
    report.resolution_action = (action or "DISMISS").upper()
    report.resolution_notes = notes
    report.resolved_at = timezone.now()
    report.save()

    audit_action_create(
        user=resolved_by,
        category=AuditCategory.MODERATION,
        action=AuditAction.REPORT_RESOLVED,
        target_type="community_report",
        target_id=str(report.id),
        details={"resolution_action": report.resolution_action},
        request=request,
    )
    return report
