import itertools

import pytest
from django.core.cache import cache
from ninja_jwt.tokens import RefreshToken

from src.users.models import User, UserRole, UserStatus

PASSWORD = "Herit@ge2024!"

_seq = itertools.count(1)


@pytest.fixture(autouse=True)
def _clear_cache():
    # rate-limit counters and throttles live in the locmem cache
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def make_user(db):
    def _make(role=UserRole.COMMUNITY_MEMBER, status=UserStatus.ACTIVE, password=PASSWORD, **kw):
        n = next(_seq)
        kw.setdefault("username", f"user{n}")
        kw.setdefault("email", f"user{n}@heritage.test")
        return User.objects.create_user(password=password, role=role, status=status, **kw)

    return _make


@pytest.fixture
def admin_user(make_user):
    return make_user(role=UserRole.SYSTEM_ADMINISTRATOR, username="sysadmin", email="admin.admin@heritage.test")


@pytest.fixture
def heritage_manager(make_user):
    return make_user(role=UserRole.HERITAGE_MANAGER, username="hmanager")


@pytest.fixture
def content_manager(make_user):
    return make_user(role=UserRole.CONTENT_MANAGER, username="cmanager")


@pytest.fixture
def member(make_user):
    return make_user(role=UserRole.COMMUNITY_MEMBER, username="member")


@pytest.fixture
def guest(make_user):
    return make_user(role=UserRole.GUEST, username="visitor")


@pytest.fixture
def auth():
    """Build the Authorization header kwargs for the test client."""

    def _auth(user) -> dict:
        token = RefreshToken.for_user(user).access_token
        return {"HTTP_AUTHORIZATION": f"Bearer {token}"}

    return _auth


@pytest.fixture
def make_site(db, admin_user):
    from src.heritage_sites.models import HeritageSite, SiteStatus

    def _make(name="Nyanza King's Palace", status=SiteStatus.ACTIVE, **kw):
        kw.setdefault("region", "Southern")
        return HeritageSite.objects.create(
            name={"en": name, "rw": f"{name} (rw)"},
            status=status,
            created_by=admin_user,
            updated_by=admin_user,
            **kw,
        )

    return _make
