import pytest

from src.auditaction.models import AuditAction, AuditLog
from src.users.models import User, UserRole, UserStatus

pytestmark = pytest.mark.django_db


def test_admin_creates_user_with_role(client, admin_user, auth):
    resp = client.post(
        "/api/users/",
        {
            "username": "keeper",
            "email": "Keeper@Heritage.test",
            "password": "Herit@ge2024!",
            "role": "heritage_manager",
        },
        content_type="application/json",
        **auth(admin_user),
    )
    assert resp.status_code == 201, resp.content
    body = resp.json()
    assert body["success"] is True
    assert body["data"]["email"] == "keeper@heritage.test"
    assert body["data"]["role"] == UserRole.HERITAGE_MANAGER
    assert AuditLog.objects.filter(action=AuditAction.USER_CREATED, user=admin_user).exists()


def test_non_admin_cannot_list_users(client, member, auth):
    resp = client.get("/api/users/", **auth(member))
    assert resp.status_code == 403
    assert resp.json()["success"] is False


def test_list_users_is_paginated_and_filterable(client, admin_user, make_user, auth):
    for _ in range(3):
        make_user(role=UserRole.CONTENT_MANAGER)
    resp = client.get("/api/users/?role=CONTENT_MANAGER&page_size=2", **auth(admin_user))
    data = resp.json()["data"]
    assert resp.status_code == 200
    assert len(data["items"]) == 2
    assert data["pagination"]["count"] == 3
    assert data["pagination"]["has_next"] is True


def test_statistics_are_public(client, admin_user, member):
    data = client.get("/api/users/statistics").json()["data"]
    assert data["all"] == 2
    assert data["by_role"]["system_administrator"] == 1


def test_suspend_then_reactivate(client, admin_user, member, auth):
    resp = client.post(f"/api/users/{member.id}/suspend", {"reason": "spam"},
                       content_type="application/json", **auth(admin_user))
    assert resp.status_code == 200
    member.refresh_from_db()
    assert member.status == UserStatus.SUSPENDED
    assert member.is_active is False

    resp = client.post(f"/api/users/{member.id}/reactivate", {"reason": ""},
                       content_type="application/json", **auth(admin_user))
    assert resp.status_code == 200
    member.refresh_from_db()
    assert member.status == UserStatus.ACTIVE


def test_reactivate_requires_suspended_user(client, admin_user, member, auth):
    resp = client.post(f"/api/users/{member.id}/reactivate", {"reason": ""},
                       content_type="application/json", **auth(admin_user))
    assert resp.status_code == 400
    assert resp.json()["code"] == "INVALID_STATUS_TRANSITION"


def test_disabled_user_cannot_be_reactivated(client, admin_user, member, auth):
    client.post(f"/api/users/{member.id}/disable", {"reason": "fraud"},
                content_type="application/json", **auth(admin_user))
    resp = client.post(f"/api/users/{member.id}/restore", {"reason": ""},
                       content_type="application/json", **auth(admin_user))
    assert resp.status_code == 400


def test_admin_cannot_suspend_self(client, admin_user, auth):
    resp = client.post(f"/api/users/{admin_user.id}/suspend", {"reason": "x"},
                       content_type="application/json", **auth(admin_user))
    assert resp.status_code == 400
    assert resp.json()["code"] == "CANNOT_CHANGE_OWN_STATUS"


def test_delete_and_restore(client, admin_user, member, auth):
    resp = client.delete(f"/api/users/{member.id}?reason=left", **auth(admin_user))
    assert resp.status_code == 200
    assert User.objects.get(id=member.id).status == UserStatus.DELETED

    resp = client.post(f"/api/users/{member.id}/restore", {"reason": ""},
                       content_type="application/json", **auth(admin_user))
    assert resp.status_code == 200
    assert User.objects.get(id=member.id).status == UserStatus.ACTIVE


def test_unknown_user_is_404(client, admin_user, auth):
    resp = client.get("/api/users/00000000-0000-0000-0000-000000000000", **auth(admin_user))
    assert resp.status_code == 404
    assert resp.json()["code"] == "USER_NOT_FOUND"


def test_profile_update_and_language_validation(client, member, auth):
    resp = client.patch("/api/users/profile/me", {"preferred_language": "RW", "first_name": "<b>Aline</b>"},
                        content_type="application/json", **auth(member))
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["preferred_language"] == "rw"
    assert data["first_name"] == "Aline"

    resp = client.patch("/api/users/profile/me", {"preferred_language": "de"},
                        content_type="application/json", **auth(member))
    assert resp.status_code == 422


def test_change_password_checks_current(client, member, auth):
    resp = client.post("/api/users/profile/me/password",
                       {"current_password": "wrong", "new_password": "N3w!Passw0rdx"},
                       content_type="application/json", **auth(member))
    assert resp.status_code == 403

    resp = client.post("/api/users/profile/me/password",
                       {"current_password": "Herit@ge2024!", "new_password": "N3w!Kigali#x"},
                       content_type="application/json", **auth(member))
    assert resp.status_code == 200
    member.refresh_from_db()
    assert member.check_password("N3w!Kigali#x")
