import pytest
from django.core.management import CommandError, call_command

from src.users.models import User, UserRole

pytestmark = pytest.mark.django_db


def test_creates_administrator():
    call_command("superuser", email="root@heritage.test", username="root", password="Herit@ge2024!")
    user = User.objects.get(email="root@heritage.test")
    assert user.role == UserRole.SYSTEM_ADMINISTRATOR
    assert user.is_superuser
    assert user.check_password("Herit@ge2024!")


def test_promotes_existing_account(member):
    call_command("superuser", email=member.email, password="N3w-Passw0rd!")
    member.refresh_from_db()
    assert member.role == UserRole.SYSTEM_ADMINISTRATOR
    assert member.is_staff


def test_refuses_second_administrator(admin_user):
    with pytest.raises(CommandError):
        call_command("superuser", email="other@heritage.test", password="Herit@ge2024!")
