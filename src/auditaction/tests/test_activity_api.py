import uuid
from datetime import datetime, timezone

import pytest

from src.auditaction.models import AuditAction, AuditCategory, AuditLog
from src.auditaction.services import audit_action_create

pytestmark = pytest.mark.django_db

BASE = "/api/activity"


def test_details_are_json_sanitized(admin_user):
    target = uuid.uuid4()
    entry = audit_action_create(
        user=admin_user,
        action=AuditAction.SITE_ARCHIVED,
        details={"site_id": target, "when": datetime(2024, 5, 1, tzinfo=timezone.utc), "tags": {"a"}},
    )
    entry.refresh_from_db()
    assert entry.category == AuditCategory.SITE
    assert entry.details == {"site_id": str(target), "when": "2024-05-01T00:00:00+00:00", "tags": ["a"]}


def test_unknown_prefix_falls_back_to_system():
    entry = audit_action_create(user=None, action="EMAIL_SENT")
    assert entry.category == AuditCategory.SYSTEM
    assert entry.user is None


def test_admin_lists_and_filters(client, admin_user, member, auth):
    audit_action_create(user=member, action=AuditAction.USER_PROFILE_UPDATED, category=AuditCategory.USER)
    audit_action_create(user=admin_user, action=AuditAction.SITE_CREATED, target_type="heritage_site",
                        target_id="abc")
    headers = auth(admin_user)

    everything = client.get(f"{BASE}/actions", **headers).json()["data"]
    assert everything["pagination"]["count"] == 2

    sites = client.get(f"{BASE}/actions?category=SITE&target_id=abc", **headers).json()["data"]
    assert [i["action"] for i in sites["items"]] == ["SITE_CREATED"]

    stats = client.get(f"{BASE}/stats/by-category", **headers).json()["data"]["items"]
    assert {row["category"]: row["count"] for row in stats} == {"USER": 1, "SITE": 1}

    entry = AuditLog.objects.get(action="SITE_CREATED")
    detail = client.get(f"{BASE}/actions/{entry.id}", **headers).json()["data"]
    assert detail["target_type"] == "heritage_site"
    assert "details" in detail


def test_members_see_only_their_own_activity(client, admin_user, member, auth):
    audit_action_create(user=member, action=AuditAction.USER_PROFILE_UPDATED)
    audit_action_create(user=admin_user, action=AuditAction.SITE_CREATED)
    headers = auth(member)

    assert client.get(f"{BASE}/actions", **headers).status_code == 403
    mine = client.get(f"{BASE}/me", **headers).json()["data"]
    assert [i["action"] for i in mine["items"]] == ["USER_PROFILE_UPDATED"]


def test_missing_entry(client, admin_user, auth):
    resp = client.get(f"{BASE}/actions/{uuid.uuid4()}", **auth(admin_user))
    assert resp.status_code == 404
