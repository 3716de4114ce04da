import uuid

import pytest

from src.forum.models import ForumCategory, ForumPost, ForumTopic
from src.moderation.models import CommunityReport, ModerationHistory
from src.notifications.models import Notification, NotificationType

pytestmark = pytest.mark.django_db


@pytest.fixture
def topic(member, content_manager):
    category = ForumCategory.objects.create(name="Dance", created_by=content_manager)
    return ForumTopic.objects.create(category=category, title="Intore", content="Dance history", created_by=member)


@pytest.fixture
def post(topic, member):
    return ForumPost.objects.create(topic=topic, content="Spam link", created_by=member)


def _moderate(client, auth, user, content_type, content_id, action, reason=""):
    payload = {"content_type": content_type, "content_id": str(content_id), "action": action, "reason": reason}
    return client.post("/api/moderation/actions", payload, content_type="application/json", **auth(user))


def test_moderation_requires_role(client, member, post, auth):
    assert _moderate(client, auth, member, "POST", post.id, "DELETE").status_code == 403


def test_delete_post_records_history_and_notifies_author(client, content_manager, member, post, auth):
    resp = _moderate(client, auth, content_manager, "post", post.id, "delete", reason="spam")
    assert resp.status_code == 200, resp.content
    data = resp.json()["data"]
    assert data["previous_status"] == "ACTIVE"
    assert data["new_status"] == "DELETED"

    post.refresh_from_db()
    assert post.is_active is False
    notification = Notification.objects.get(recipient=member)
    assert notification.type == NotificationType.MODERATION
    assert "spam" in notification.content


def test_lock_topic(client, content_manager, topic, auth):
    resp = _moderate(client, auth, content_manager, "TOPIC", topic.id, "LOCK")
    assert resp.json()["data"]["new_status"] == "LOCKED"
    topic.refresh_from_db()
    assert topic.is_locked


def test_unsupported_action_for_content_type(client, content_manager, post, topic, auth):
    resp = _moderate(client, auth, content_manager, "POST", post.id, "PIN")
    assert resp.status_code == 400
    assert resp.json()["code"] == "UNSUPPORTED_MODERATION_ACTION"

    resp = _moderate(client, auth, content_manager, "USER", uuid.uuid4(), "FLAG")
    assert resp.status_code == 400


def test_missing_content(client, content_manager, auth):
    resp = _moderate(client, auth, content_manager, "POST", uuid.uuid4(), "DELETE")
    assert resp.status_code == 404


def test_bulk_moderation_with_partial_failure(client, content_manager, topic, member, auth):
    posts = [ForumPost.objects.create(topic=topic, content=f"p{i}", created_by=member) for i in range(2)]
    missing = uuid.uuid4()
    resp = client.post(
        "/api/moderation/actions/bulk",
        {"content_type": "POST", "content_ids": [str(p.id) for p in posts] + [str(missing)], "action": "DELETE"},
        content_type="application/json",
        **auth(content_manager),
    )
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["total"] == 3
    assert sorted(data["succeeded"]) == sorted(str(p.id) for p in posts)
    assert data["failed"] == [{"id": str(missing), "reason": "Post not found"}]

    rows = ModerationHistory.objects.filter(bulk_action_id=data["bulk_action_id"])
    assert rows.count() == 3
    summary = rows.get(action_type="BULK_ACTION")
    assert summary.affected_count == 2


def test_history_and_statistics(client, content_manager, post, topic, auth):
    _moderate(client, auth, content_manager, "POST", post.id, "FLAG", reason="check")
    _moderate(client, auth, content_manager, "TOPIC", topic.id, "PIN")

    history = client.get("/api/moderation/history?content_type=post", **auth(content_manager)).json()["data"]
    assert history["pagination"]["count"] == 1

    per_item = client.get(f"/api/moderation/history/topic/{topic.id}", **auth(content_manager)).json()["data"]
    assert [h["action_type"] for h in per_item] == ["PIN"]

    flagged = client.get("/api/moderation/flagged", **auth(content_manager)).json()["data"]
    assert [p["id"] for p in flagged["posts"]] == [str(post.id)]

    stats = client.get("/api/moderation/statistics", **auth(content_manager)).json()["data"]
    assert stats["total_actions"] == 2
    assert stats["by_action_type"] == {"FLAG": 1, "PIN": 1}
    assert stats["flagged_posts"] == 1


def test_report_lifecycle(client, make_user, content_manager, post, auth):
    reporter = make_user(username="watcher")
    payload = {"content_type": "post", "content_id": str(post.id), "reason": "spam", "description": "ads"}

    resp = client.post("/api/community-reports/", payload, content_type="application/json", **auth(reporter))
    assert resp.status_code == 201, resp.content
    report_id = resp.json()["data"]["id"]

    dup = client.post("/api/community-reports/", payload, content_type="application/json", **auth(reporter))
    assert dup.status_code == 409
    assert dup.json()["code"] == "ALREADY_REPORTED"

    assert client.get("/api/community-reports/", **auth(reporter)).status_code == 403
    listing = client.get("/api/community-reports/?is_resolved=false", **auth(content_manager)).json()["data"]
    assert listing["pagination"]["count"] == 1

    resolved = client.post(f"/api/community-reports/{report_id}/resolve", {"action": "delete", "notes": "confirmed"},
                           content_type="application/json", **auth(content_manager))
    assert resolved.status_code == 200
    data = resolved.json()["data"]
    assert data["is_resolved"] is True
    assert data["resolution_action"] == "DELETE"
    post.refresh_from_db()
    assert post.is_active is False

    again = client.post(f"/api/community-reports/{report_id}/resolve", {},
                        content_type="application/json", **auth(content_manager))
    assert again.status_code == 400


def test_dismiss_report_without_action(client, member, content_manager, topic, auth):
    report = CommunityReport.objects.create(content_type="TOPIC", content_id=topic.id, reporter=member,
                                            reason="OFF_TOPIC")
    resp = client.post(f"/api/community-reports/{report.id}/resolve", {"notes": "fine"},
                       content_type="application/json", **auth(content_manager))
    assert resp.json()["data"]["resolution_action"] == "DISMISS"
    topic.refresh_from_db()
    assert topic.is_active


def test_report_unknown_content(client, member, auth):
    payload = {"content_type": "TOPIC", "content_id": str(uuid.uuid4()), "reason": "SPAM"}
    resp = client.post("/api/community-reports/", payload, content_type="application/json", **auth(member))
    assert resp.status_code == 404
