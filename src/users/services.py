import logging
import uuid

from django.db import transaction
from django.utils import timezone

from src.auditaction.models import AuditAction, AuditCategory, Severity
from src.auditaction.services import audit_action_create
from src.auth.services import revoke_all_refresh_tokens
from src.common.languages import normalize_language
from src.common.sanitize import sanitize_text
from src.core.exceptions import BusinessRuleError, DomainConflictError, DomainValidationError, PermissionDeniedError
from src.users.models import User, UserRole, UserStatus, user_status_can_transition
from src.users.schemas import ProfileUpdatePayload, UserUpdatePayload
from src.users.validators import validate_password_policy
from . import selectors

log = logging.getLogger(__name__)

PROFILE_FIELDS = (
    "first_name",
    "last_name",
    "preferred_language",
    "additional_languages",
    "email_notifications",
    "push_notifications",
)

# Status action → (target status, audit action)
STATUS_ACTIONS = {
    "suspend": (UserStatus.SUSPENDED, AuditAction.USER_SUSPENDED),
    "disable": (UserStatus.DISABLED, AuditAction.USER_DISABLED),
    "delete": (UserStatus.DELETED, AuditAction.USER_DELETED),
    "reactivate": (UserStatus.ACTIVE, AuditAction.USER_REACTIVATED),
    "restore": (UserStatus.ACTIVE, AuditAction.USER_RESTORED),
}

# reactivate and restore both lead to ACTIVE but each only from one state
REQUIRED_SOURCE_STATUS = {
    "reactivate": UserStatus.SUSPENDED,
    "restore": UserStatus.DELETED,
}

PROTECTED_ACTIONS = {"suspend", "disable", "delete"}


def _ensure_unique_identity(*, username: str | None = None, email: str | None = None, exclude_id=None) -> None:
    qs = User.objects.all()
    if exclude_id:
        qs = qs.exclude(id=exclude_id)
    if username and qs.filter(username__iexact=username).exists():
        raise DomainConflictError(message="Username already in use", code="USERNAME_TAKEN",
                                  errors={"username": ["already taken"]})
    if email and qs.filter(email__iexact=email).exists():
        raise DomainConflictError(message="Email already in use", code="EMAIL_TAKEN",
                                  errors={"email": ["already taken"]})


def _normalize_languages(values: list[str] | None) -> list[str]:
    return sorted({normalize_language(v, field="additional_languages") for v in values or []})


@transaction.atomic
def user_create_by_admin(
    *,
    created_by: User,
    username: str,
    email: str,
    password: str,
    first_name: str = "",
    last_name: str = "",
    role: str = UserRole.COMMUNITY_MEMBER,
    status: str = UserStatus.ACTIVE,
    preferred_language: str | None = None,
    request=None,
) -> User:
    """Administrator creates an account with an explicit role."""
    validate_password_policy(password)
    _ensure_unique_identity(username=username, email=email)

    user = User.objects.create_user(
        email=email,
        password=password,
        username=username,
        first_name=sanitize_text(first_name) or "",
        last_name=sanitize_text(last_name) or "",
        role=role,
        status=status,
        preferred_language=normalize_language(preferred_language),
        created_by=created_by,
    )

    audit_action_create(
        user=created_by,
        category=AuditCategory.USER,
        action=AuditAction.USER_CREATED,
        details={"user_id": user.id, "email": user.email, "role": role, "status": status},
        target_type="user",
        target_id=str(user.id),
        request=request,
    )
    return user


@transaction.atomic
def user_update(*, user_id: uuid.UUID, updated_by: User, payload: UserUpdatePayload, request=None) -> User:
    """Administrator edits another account (identity, role, preferences)."""
    user = selectors.user_get_for_update(user_id=user_id)

    update_data = payload.dict(exclude_unset=True, exclude_none=True)

    if "email" in update_data:
        _ensure_unique_identity(email=update_data["email"], exclude_id=user.id)
    if "role" in update_data and user.id == updated_by.id and update_data["role"] != user.role:
        raise BusinessRuleError(message="You cannot change your own role", code="CANNOT_CHANGE_OWN_ROLE")
    if "preferred_language" in update_data:
        update_data["preferred_language"] = normalize_language(update_data["preferred_language"])
    if "additional_languages" in update_data:
        update_data["additional_languages"] = _normalize_languages(update_data["additional_languages"])
    for name in ("first_name", "last_name"):
        if name in update_data:
            update_data[name] = sanitize_text(update_data[name])

    for field, value in update_data.items():
        setattr(user, field, value)

    if update_data:
        user.save(update_fields=[*update_data.keys(), "updated_at"])

    audit_action_create(
        user=updated_by,
        category=AuditCategory.USER,
        action=AuditAction.USER_UPDATED,
        target_type="user",
        target_id=str(user.id),
        details={"updated_fields": list(update_data.keys()), "user_id": str(user.id)},
        request=request,
    )
    return user


@transaction.atomic
def user_change_status(*, user_id: uuid.UUID, action: str, changed_by: User, reason: str = "", request=None) -> User:
    """
    Apply one of the account workflow actions (suspend, disable, delete, reactivate, restore).

    Rules:
      - the move must be allowed by the user status table;
      - reactivate only from SUSPENDED, restore only from DELETED;
      - suspend/disable/delete are refused for system administrators and for yourself.
    """
    if action not in STATUS_ACTIONS:
        raise DomainValidationError(message=f"Unknown status action: {action}", code="INVALID_STATUS_ACTION")

    target_status, audit_action = STATUS_ACTIONS[action]
    user = selectors.user_get_for_update(user_id=user_id)

    if action in PROTECTED_ACTIONS:
        if user.id == changed_by.id:
            raise BusinessRuleError(message="You cannot change the status of your own account",
                                    code="CANNOT_CHANGE_OWN_STATUS")
        if user.is_system_admin:
            raise BusinessRuleError(message=f"Cannot {action} a system administrator account",
                                    code="ADMIN_ACCOUNT_PROTECTED")

    required = REQUIRED_SOURCE_STATUS.get(action)
    if required and user.status != required:
        raise BusinessRuleError(
            message=f"Only {required.label.lower()} users can be {action}d",
            code="INVALID_STATUS_TRANSITION",
        )

    if not user_status_can_transition(user.status, target_status):
        raise BusinessRuleError(
            message=f"Cannot change user status from {user.status} to {target_status}",
            code="INVALID_STATUS_TRANSITION",
        )

    previous_status = user.status
    user.status = target_status
    user.status_reason = sanitize_text(reason) or ""
    user.status_changed_by = changed_by
    user.status_changed_at = timezone.now()
    if target_status == UserStatus.ACTIVE:
        user.reset_failed_logins()
    user.save()

    if target_status != UserStatus.ACTIVE:
        revoke_all_refresh_tokens(user=user)

    log.info("User %s status %s -> %s by %s", user.id, previous_status, target_status, changed_by.id)
    audit_action_create(
        user=changed_by,
        category=AuditCategory.USER,
        action=audit_action,
        severity=Severity.WARNING if target_status != UserStatus.ACTIVE else Severity.INFO,
        target_type="user",
        target_id=str(user.id),
        details={
            "user_id": user.id,
            "previous_status": previous_status,
            "new_status": target_status,
            "reason": user.status_reason,
        },
        request=request,
    )
    return user


@transaction.atomic
def user_unlock(*, user_id: uuid.UUID, unlocked_by: User, request=None) -> User:
    user = selectors.user_get_for_update(user_id=user_id)
    user.reset_failed_logins()
    user.save(update_fields=["failed_login_attempts", "locked_until", "updated_at"])
    audit_action_create(
        user=unlocked_by,
        category=AuditCategory.USER,
        action=AuditAction.USER_UNLOCKED,
        target_type="user",
        target_id=str(user.id),
        details={"user_id": user.id},
        request=request,
    )
    return user


@transaction.atomic
def profile_update(*, user: User, payload: ProfileUpdatePayload, request=None) -> User:
    """A user edits their own names, languages and notification preferences."""
    update_data = {
        field: value
        for field, value in payload.dict(exclude_unset=True, exclude_none=True).items()
        if field in PROFILE_FIELDS
    }
    if "preferred_language" in update_data:
        update_data["preferred_language"] = normalize_language(update_data["preferred_language"])
    if "additional_languages" in update_data:
        update_data["additional_languages"] = _normalize_languages(update_data["additional_languages"])
    for name in ("first_name", "last_name"):
        if name in update_data:
            update_data[name] = sanitize_text(update_data[name])

    for field, value in update_data.items():
        setattr(user, field, value)
    user.last_profile_update = timezone.now()
    user.save(update_fields=[*update_data.keys(), "last_profile_update", "updated_at"])

    audit_action_create(
        user=user,
        category=AuditCategory.USER,
        action=AuditAction.USER_PROFILE_UPDATED,
        target_type="user",
        target_id=str(user.id),
        details={"updated_fields": list(update_data.keys())},
        request=request,
    )
    return user


@transaction.atomic
def user_change_password(*, user: User, current_password: str, new_password: str, request=None) -> User:
    if not user.check_password(current_password):
        raise PermissionDeniedError(message="Current password is incorrect", code="INVALID_CURRENT_PASSWORD")
    if current_password == new_password:
        raise DomainValidationError(
            message="New password must be different from the current one",
            code="PASSWORD_UNCHANGED",
            errors={"new_password": ["must differ from the current password"]},
        )
    validate_password_policy(new_password)

    user.set_password(new_password)
    user.save(update_fields=["password", "updated_at"])

    revoke_all_refresh_tokens(user=user)
    audit_action_create(
        user=user,
        category=AuditCategory.USER,
        action=AuditAction.USER_PASSWORD_CHANGED,
        target_type="user",
        target_id=str(user.id),
        request=request,
    )
    return user
