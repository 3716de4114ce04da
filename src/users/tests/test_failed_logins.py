import pytest

from src.users.models import User

pytestmark = pytest.mark.django_db


def test_concurrent_failures_are_all_counted(member):
    # two requests that loaded the same row before either one saved
    first = User.objects.get(pk=member.pk)
    second = User.objects.get(pk=member.pk)

    assert first.register_failed_login() is False
    assert second.register_failed_login() is False

    member.refresh_from_db()
    assert member.failed_login_attempts == 2
    assert second.failed_login_attempts == 2


def test_lock_is_persisted_when_threshold_is_reached(member, settings):
    settings.AUTH_MAX_FAILED_LOGINS = 3
    stale = [User.objects.get(pk=member.pk) for _ in range(3)]

    results = [user.register_failed_login() for user in stale]

    assert results == [False, False, True]
    member.refresh_from_db()
    assert member.failed_login_attempts == 3
    assert member.is_locked


def test_reset_after_failures(member):
    member.register_failed_login()
    member.reset_failed_logins()
    member.save(update_fields=["failed_login_attempts", "locked_until", "updated_at"])
    member.refresh_from_db()
    assert member.failed_login_attempts == 0
    assert member.locked_until is None
