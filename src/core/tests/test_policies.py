from types import SimpleNamespace as NS

import pytest

from src.core.exceptions import AuthenticationError, PermissionDeniedError
from src.core.policies import PERMISSIONS, ensure_permission, has_permission, is_admin


def make_user(role, authenticated=True):
    return NS(role=role, is_authenticated=authenticated)


ANON = NS(is_authenticated=False)


@pytest.mark.parametrize(
    "role,permission,expected",
    [
        ("SYSTEM_ADMINISTRATOR", "users.manage", True),
        ("HERITAGE_MANAGER", "users.manage", False),
        ("HERITAGE_MANAGER", "sites.manage", True),
        ("CONTENT_MANAGER", "sites.manage", False),
        ("CONTENT_MANAGER", "moderation.manage", True),
        ("COMMUNITY_MEMBER", "forum.participate", True),
        ("GUEST", "forum.participate", False),
        ("GUEST", "documents.view_private", False),
        ("CONTENT_MANAGER", "quizzes.view_statistics", True),
        ("HERITAGE_MANAGER", "quizzes.view_statistics", False),
    ],
)
def test_has_permission_follows_role_table(role, permission, expected):
    assert has_permission(make_user(role), permission) is expected


def test_unknown_permission_is_denied_even_for_admin():
    assert has_permission(make_user("SYSTEM_ADMINISTRATOR"), "does.not_exist") is False


def test_anonymous_never_has_permission():
    for permission in PERMISSIONS:
        assert has_permission(ANON, permission) is False


def test_ensure_permission_distinguishes_401_and_403():
    with pytest.raises(AuthenticationError):
        ensure_permission(ANON, "forum.participate")
    with pytest.raises(PermissionDeniedError) as exc:
        ensure_permission(make_user("GUEST"), "forum.participate")
    assert exc.value.status == 403


def test_is_admin():
    assert is_admin(make_user("SYSTEM_ADMINISTRATOR"))
    assert not is_admin(make_user("CONTENT_MANAGER"))
    assert not is_admin(None)
