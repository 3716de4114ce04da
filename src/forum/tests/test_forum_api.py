import pytest

from src.forum.models import ForumCategory, ForumPost, ForumTopic
from src.moderation.models import ModerationHistory
from src.notifications.models import Notification, NotificationType

pytestmark = pytest.mark.django_db


@pytest.fixture
def category(content_manager):
    return ForumCategory.objects.create(name="Oral traditions", language="en", created_by=content_manager)


def _topic(client, auth, user, category, title="Imigani stories", **extra):
    payload = {"category_id": str(category.id), "title": title, "content": "Share your favourite tale", **extra}
    return client.post("/api/forum/topics/", payload, content_type="application/json", **auth(user))


def _post(client, auth, user, topic_id, content="Great topic", **extra):
    payload = {"topic_id": str(topic_id), "content": content, **extra}
    return client.post("/api/forum/posts/", payload, content_type="application/json", **auth(user))


def test_category_management_is_restricted(client, member, content_manager, auth):
    payload = {"name": "Crafts", "language": "RW"}
    assert client.post("/api/forum/categories/", payload, content_type="application/json",
                       **auth(member)).status_code == 403
    resp = client.post("/api/forum/categories/", payload, content_type="application/json",
                       **auth(content_manager))
    assert resp.status_code == 201
    assert resp.json()["data"]["language"] == "rw"


def test_private_category_hidden_from_anonymous(client, content_manager, category):
    ForumCategory.objects.create(name="Staff room", is_public=False, created_by=content_manager)
    names = [c["name"] for c in client.get("/api/forum/categories/").json()["data"]]
    assert names == ["Oral traditions"]


def test_member_creates_topic_guest_cannot(client, member, guest, category, auth):
    resp = _topic(client, auth, member, category, title="<b>Imigani</b>")
    assert resp.status_code == 201
    assert resp.json()["data"]["title"] == "Imigani"
    assert _topic(client, auth, guest, category).status_code == 403


def test_reply_notifies_topic_author(client, member, make_user, category, auth):
    topic_id = _topic(client, auth, member, category).json()["data"]["id"]
    replier = make_user(username="replier")

    assert _post(client, auth, replier, topic_id).status_code == 201
    notification = Notification.objects.get(recipient=member)
    assert notification.type == NotificationType.REPLY
    assert topic_id in notification.related_url

    # replying to your own topic does not notify
    _post(client, auth, member, topic_id, content="Thanks!")
    assert Notification.objects.filter(recipient=member).count() == 1


def test_parent_post_must_belong_to_topic(client, member, category, auth):
    first = _topic(client, auth, member, category, title="First").json()["data"]["id"]
    second = _topic(client, auth, member, category, title="Second").json()["data"]["id"]
    parent_id = _post(client, auth, member, first).json()["data"]["id"]

    ok = _post(client, auth, member, first, parent_post_id=parent_id)
    assert ok.status_code == 201
    assert ok.json()["data"]["parent_post_id"] == parent_id

    resp = _post(client, auth, member, second, parent_post_id=parent_id)
    assert resp.status_code == 404
    assert resp.json()["code"] == "POST_NOT_FOUND"


def test_locked_topic_refuses_posts(client, member, content_manager, category, auth):
    topic_id = _topic(client, auth, member, category).json()["data"]["id"]
    assert client.post(f"/api/forum/topics/{topic_id}/lock", **auth(member)).status_code == 403
    assert client.post(f"/api/forum/topics/{topic_id}/lock", **auth(content_manager)).status_code == 200

    resp = _post(client, auth, member, topic_id)
    assert resp.status_code == 403
    assert resp.json()["code"] == "TOPIC_LOCKED"

    client.post(f"/api/forum/topics/{topic_id}/unlock", **auth(content_manager))
    assert _post(client, auth, member, topic_id).status_code == 201


def test_pinned_topics_come_first(client, member, content_manager, category, auth):
    old = _topic(client, auth, member, category, title="Old").json()["data"]["id"]
    _topic(client, auth, member, category, title="New")
    client.post(f"/api/forum/topics/{old}/pin", **auth(content_manager))

    titles = [t["title"] for t in client.get("/api/forum/topics/").json()["data"]["items"]]
    assert titles == ["Old", "New"]


def test_only_author_or_moderator_edits(client, member, make_user, content_manager, category, auth):
    topic_id = _topic(client, auth, member, category).json()["data"]["id"]
    post_id = _post(client, auth, member, topic_id).json()["data"]["id"]
    stranger = make_user(username="stranger")

    assert client.patch(f"/api/forum/posts/{post_id}", {"content": "hijack"},
                        content_type="application/json", **auth(stranger)).status_code == 403
    assert client.patch(f"/api/forum/posts/{post_id}", {"content": "edited"},
                        content_type="application/json", **auth(member)).status_code == 200
    assert client.delete(f"/api/forum/posts/{post_id}", **auth(content_manager)).status_code == 200
    assert not ForumPost.objects.get(id=post_id).is_active

    posts = client.get(f"/api/forum/topics/{topic_id}/posts").json()["data"]
    assert posts["pagination"]["count"] == 0


def test_flag_post(client, member, make_user, category, auth):
    topic_id = _topic(client, auth, member, category).json()["data"]["id"]
    post_id = _post(client, auth, member, topic_id).json()["data"]["id"]
    reporter = make_user(username="reporter")

    resp = client.post(f"/api/forum/posts/{post_id}/flag", {"reason": "off topic"},
                       content_type="application/json", **auth(reporter))
    assert resp.status_code == 200
    post = ForumPost.objects.get(id=post_id)
    assert post.is_flagged and post.flagged_by == reporter


def test_topic_delete_hides_it(client, member, category, auth):
    topic_id = _topic(client, auth, member, category).json()["data"]["id"]
    assert client.delete(f"/api/forum/topics/{topic_id}", **auth(member)).status_code == 200
    assert not ForumTopic.objects.get(id=topic_id).is_active
    assert client.get(f"/api/forum/topics/{topic_id}").status_code == 404


def test_posting_too_fast(client, member, category, auth, settings):
    settings.FORUM_MIN_POST_INTERVAL_SECONDS = 60
    topic_id = _topic(client, auth, member, category).json()["data"]["id"]
    assert _post(client, auth, member, topic_id).status_code == 201
    resp = _post(client, auth, member, topic_id)
    assert resp.status_code == 429
    assert resp.json()["code"] == "POSTING_TOO_FAST"
    assert 0 < int(resp["Retry-After"]) <= 60


def test_markup_only_text_is_rejected(client, member, content_manager, category, auth):
    resp = client.post("/api/forum/categories/", {"name": "<b></b>"}, content_type="application/json",
                       **auth(content_manager))
    assert resp.status_code == 422
    assert resp.json()["errors"]["name"]

    resp = _topic(client, auth, member, category, title="<i> </i>")
    assert resp.status_code == 422
    assert resp.json()["errors"]["title"]
    assert not ForumTopic.objects.exists()

    topic_id = _topic(client, auth, member, category).json()["data"]["id"]
    resp = _post(client, auth, member, topic_id, content="<script></script>")
    assert resp.status_code == 422
    assert resp.json()["errors"]["content"]
    assert not ForumPost.objects.exists()

    post_id = _post(client, auth, member, topic_id).json()["data"]["id"]
    resp = client.patch(f"/api/forum/posts/{post_id}", {"content": "<p></p>"},
                        content_type="application/json", **auth(member))
    assert resp.status_code == 422
    assert ForumPost.objects.get(id=post_id).content == "Great topic"

    resp = client.patch(f"/api/forum/topics/{topic_id}", {"title": "<em></em>"},
                        content_type="application/json", **auth(member))
    assert resp.status_code == 422
    assert ForumTopic.objects.get(id=topic_id).title == "Imigani stories"


def test_suspicious_post_is_flagged_automatically(client, member, make_user, category, auth):
    topic_id = _topic(client, auth, member, category).json()["data"]["id"]
    author = make_user(username="promoter")

    resp = _post(client, auth, author, topic_id, content="Click here for free money, act now")
    assert resp.status_code == 201
    assert resp.json()["data"]["is_flagged"] is True

    post = ForumPost.objects.get(id=resp.json()["data"]["id"])
    assert post.is_active and post.flagged_by is None
    assert "free money" in post.flag_reason

    entry = ModerationHistory.objects.get(content_id=post.id)
    assert entry.automated and entry.moderator is None
    assert (entry.action_type, entry.previous_status, entry.new_status) == ("FLAG", "ACTIVE", "FLAGGED")
    assert entry.confidence_score == 0.7
    assert Notification.objects.filter(recipient=author, type=NotificationType.MODERATION).exists()


def test_inappropriate_post_is_removed_automatically(client, member, make_user, category, auth, settings):
    topic_id = _topic(client, auth, member, category).json()["data"]["id"]
    author = make_user(username="lottery")

    resp = _post(client, auth, author, topic_id,
                 content="Buy now! Winner of the lottery, urgent, limited time, act now")
    assert resp.status_code == 201
    assert resp.json()["data"]["is_active"] is False

    entry = ModerationHistory.objects.get(content_id=resp.json()["data"]["id"])
    assert (entry.action_type, entry.new_status) == ("REJECT", "DELETED")
    assert Notification.objects.get(recipient=author).content.startswith("Your post was automatically removed")
    # a removed reply does not reach the topic author
    assert not Notification.objects.filter(recipient=member).exists()

    settings.FORUM_AUTO_MODERATION_ENABLED = False
    resp = _post(client, auth, author, topic_id, content="Buy now! Winner of the lottery, urgent, act now")
    assert resp.json()["data"]["is_active"] is True


def test_clean_post_leaves_no_moderation_history(client, member, category, auth):
    topic_id = _topic(client, auth, member, category).json()["data"]["id"]
    assert _post(client, auth, member, topic_id).status_code == 201
    assert not ModerationHistory.objects.exists()
