import logging
import uuid
from datetime import timedelta

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from src.core.exceptions import PermissionDeniedError
from src.notifications import selectors
from src.notifications.models import Notification, NotificationType

log = logging.getLogger(__name__)


def notification_create(*, recipient, type: str = NotificationType.SYSTEM, content: str,
                        related_url: str = "") -> Notification | None:
    """Internal hook for other apps. Inactive or missing recipients are skipped."""
    if recipient is None or not getattr(recipient, "is_active", False):
        return None
    return Notification.objects.create(recipient=recipient, type=type, content=content, related_url=related_url)


def _owned(*, notification_id: uuid.UUID, user) -> Notification:
    notification = selectors.notification_get(notification_id=notification_id)
    if notification.recipient_id != user.id:
        raise PermissionDeniedError(message="This notification belongs to another user")
    return notification


@transaction.atomic
def notification_mark_read(*, notification_id: uuid.UUID, user) -> Notification:
    notification = _owned(notification_id=notification_id, user=user)
    if not notification.is_read:
        notification.is_read = True
        notification.read_at = timezone.now()
        notification.save(update_fields=["is_read", "read_at", "updated_at"])
    return notification


@transaction.atomic
def notification_mark_all_read(*, user) -> int:
    now = timezone.now()
    return Notification.objects.filter(recipient=user, is_active=True, is_read=False).update(
        is_read=True, read_at=now, updated_at=now
    )


@transaction.atomic
def notification_delete(*, notification_id: uuid.UUID, user) -> None:
    notification = _owned(notification_id=notification_id, user=user)
    notification.is_active = False
    notification.save(update_fields=["is_active", "updated_at"])


def notification_purge_read(*, days: int | None = None) -> int:
    """Hard delete read notifications older than the retention window."""
    days = settings.NOTIFICATION_RETENTION_DAYS if days is None else days
    cutoff = timezone.now() - timedelta(days=days)
    deleted, _ = Notification.objects.filter(is_read=True, created_at__lt=cutoff).delete()
    log.info("Purged %s read notifications older than %s days", deleted, days)
    return deleted
