from datetime import timedelta

import pytest
from django.utils import timezone

from src.notifications.models import Notification, NotificationType
from src.notifications.services import notification_create
from src.tasks.notifications import purge_read_notifications

pytestmark = pytest.mark.django_db

BASE = "/api/notifications"


@pytest.fixture
def inbox(member):
    return [
        notification_create(recipient=member, type=NotificationType.REPLY, content=f"reply {i}",
                            related_url="/forum/topics/1")
        for i in range(3)
    ]


def test_create_skips_inactive_recipient(make_user):
    suspended = make_user(status="SUSPENDED")
    assert notification_create(recipient=suspended, content="hello") is None
    assert notification_create(recipient=None, content="hello") is None


def test_list_and_unread_count(client, member, inbox, auth):
    headers = auth(member)
    listing = client.get(f"{BASE}/", **headers).json()["data"]
    assert listing["pagination"]["count"] == 3
    assert listing["items"][0]["type"] == "reply"

    assert client.get(f"{BASE}/unread/count", **headers).json()["data"] == {"count": 3}


def test_mark_read_and_read_all(client, member, inbox, auth):
    headers = auth(member)
    resp = client.post(f"{BASE}/{inbox[0].id}/read", **headers)
    assert resp.json()["data"]["is_read"] is True
    assert client.get(f"{BASE}/unread", **headers).json()["data"]["pagination"]["count"] == 2

    resp = client.post(f"{BASE}/read-all", **headers)
    assert resp.json()["data"] == {"updated": 2}
    assert client.get(f"{BASE}/unread/count", **headers).json()["data"]["count"] == 0


def test_other_users_notifications_are_off_limits(client, make_user, inbox, auth):
    other = make_user()
    assert client.post(f"{BASE}/{inbox[0].id}/read", **auth(other)).status_code == 403
    assert client.delete(f"{BASE}/{inbox[0].id}", **auth(other)).status_code == 403


def test_delete_hides_notification(client, member, inbox, auth):
    headers = auth(member)
    assert client.delete(f"{BASE}/{inbox[0].id}", **headers).status_code == 200
    assert client.get(f"{BASE}/", **headers).json()["data"]["pagination"]["count"] == 2
    assert client.post(f"{BASE}/{inbox[0].id}/read", **headers).status_code == 404


def test_purge_task_removes_old_read_notifications(member, inbox, settings):
    settings.NOTIFICATION_RETENTION_DAYS = 30
    old = timezone.now() - timedelta(days=31)
    Notification.objects.filter(id=inbox[0].id).update(is_read=True, created_at=old)
    Notification.objects.filter(id=inbox[1].id).update(created_at=old)

    assert purge_read_notifications() == 1
    assert set(Notification.objects.values_list("id", flat=True)) == {inbox[1].id, inbox[2].id}
