import uuid

from django.db.models import QuerySet, Q, Count

from src.core.exceptions import NotFoundError
from src.users.models import User, UserRole


def user_list(
    *,
    status: str | None = None,
    role: str | None = None,
    search: str | None = None,
) -> QuerySet[User]:
    qs = User.objects.select_related("status_changed_by")

    if status:
        qs = qs.filter(status=status)

    if role:
        qs = qs.filter(role=role)

    if search:
        s = search.strip()
        qs = qs.filter(
            Q(username__icontains=s)
            | Q(email__icontains=s)
            | Q(first_name__icontains=s)
            | Q(last_name__icontains=s)
        )

    return qs.order_by("-created_at")


def users_stats() -> dict:
    base_qs = User.objects.all()

    by_status = {
        row["status"].lower(): row["count"]
        for row in base_qs.values("status").annotate(count=Count("id")).order_by()
    }
    by_role = {
        row["role"].lower(): row["count"]
        for row in base_qs.values("role").annotate(count=Count("id")).order_by()
    }

    return {
        "all": base_qs.count(),
        "by_status": by_status,
        "by_role": by_role,
    }


def user_get_by_id(*, user_id: uuid.UUID) -> User:
    """Get user by ID"""
    try:
        return User.objects.get(id=user_id)
    except User.DoesNotExist:
        raise NotFoundError(message="User not found", code="USER_NOT_FOUND")


def user_get_for_update(*, user_id: uuid.UUID) -> User:
    """Get user with select_for_update lock"""
    try:
        return User.objects.select_for_update().get(id=user_id)
    except User.DoesNotExist:
        raise NotFoundError(message="User not found", code="USER_NOT_FOUND")


def user_get_by_email(*, email: str) -> User | None:
    """Get user by email - returns None if not found"""
    return User.objects.filter(email=email.strip().lower()).first()


def user_get_by_login(*, identifier: str) -> User | None:
    """Resolve a login identifier that may be either the username or the email."""
    identifier = (identifier or "").strip()
    if not identifier:
        return None
    if "@" in identifier:
        return user_get_by_email(email=identifier)
    return User.objects.filter(username=identifier).first()


def admin_exists() -> bool:
    return User.objects.filter(role=UserRole.SYSTEM_ADMINISTRATOR).exists()
