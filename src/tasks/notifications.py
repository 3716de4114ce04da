from celery import shared_task

from src.notifications.services import notification_purge_read


@shared_task(name="notifications.purge_read")
def purge_read_notifications() -> int:
    return notification_purge_read()
