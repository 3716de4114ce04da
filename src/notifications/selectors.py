import uuid

from django.db.models import QuerySet

from src.core.exceptions import NotFoundError
from src.notifications.models import Notification


def notification_list(*, user, unread_only: bool = False) -> QuerySet[Notification]:
    qs = Notification.objects.filter(recipient=user, is_active=True)
    if unread_only:
        qs = qs.filter(is_read=False)
    return qs.order_by("-created_at")


def notification_unread_count(*, user) -> int:
    return Notification.objects.filter(recipient=user, is_active=True, is_read=False).count()


def notification_get(*, notification_id: uuid.UUID) -> Notification:
    try:
        return Notification.objects.get(id=notification_id, is_active=True)
    except Notification.DoesNotExist:
        raise NotFoundError(message="Notification not found", code="NOTIFICATION_NOT_FOUND")
