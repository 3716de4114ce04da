from src.core.exceptions import AuthenticationError, PermissionDeniedError
from src.users.models import UserRole

ADMIN = UserRole.SYSTEM_ADMINISTRATOR
HERITAGE = UserRole.HERITAGE_MANAGER
CONTENT = UserRole.CONTENT_MANAGER
MEMBER = UserRole.COMMUNITY_MEMBER

# Every role except GUEST.
MEMBERS = frozenset({ADMIN, HERITAGE, CONTENT, MEMBER})

PERMISSIONS: dict[str, frozenset] = {
    "users.manage": frozenset({ADMIN}),
    "sites.create": frozenset({ADMIN}),
    "sites.archive": frozenset({ADMIN}),
    "sites.bulk_status": frozenset({ADMIN}),
    "sites.assign_manager": frozenset({ADMIN}),
    "sites.manage": frozenset({ADMIN, HERITAGE}),
    "artifacts.manage": frozenset({ADMIN, HERITAGE}),
    "artifacts.view_private": frozenset({ADMIN, HERITAGE}),
    "documents.manage": frozenset({ADMIN, HERITAGE, CONTENT}),
    "documents.view_private": MEMBERS,
    "forum.manage_categories": frozenset({ADMIN, CONTENT}),
    "forum.participate": MEMBERS,
    "forum.moderate": frozenset({ADMIN, HERITAGE, CONTENT}),
    "moderation.manage": frozenset({ADMIN, CONTENT}),
    "reports.manage": frozenset({ADMIN, CONTENT}),
    "quizzes.manage": frozenset({ADMIN, CONTENT, HERITAGE}),
    "quizzes.view_statistics": frozenset({ADMIN, CONTENT}),
    "translations.manage": frozenset({ADMIN, CONTENT, HERITAGE}),
    "activity.view_all": frozenset({ADMIN}),
}


def user_role(user) -> str | None:
    if not user or not getattr(user, "is_authenticated", False):
        return None
    return getattr(user, "role", None)


def has_permission(user, permission: str) -> bool:
    """Check a named permission against the role table. Unknown names are denied."""
    allowed = PERMISSIONS.get(permission)
    if allowed is None:
        return False
    return user_role(user) in allowed


def ensure_authenticated(user) -> None:
    if not user or not getattr(user, "is_authenticated", False):
        raise AuthenticationError()


def ensure_permission(user, permission: str) -> None:
    ensure_authenticated(user)
    if not has_permission(user, permission):
        raise PermissionDeniedError()


def ensure_role_in(user, *roles) -> None:
    ensure_authenticated(user)
    if user_role(user) not in roles:
        raise PermissionDeniedError()


def is_admin(user) -> bool:
    return user_role(user) == ADMIN
