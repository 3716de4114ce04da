from ninja import Schema
from pydantic import field_validator

from src.users.models import UserRole, UserStatus


ALLOWED_ROLES = set(UserRole.values)
ALLOWED_STATUSES = set(UserStatus.values)
# Accounts created by an administrator start in one of these.
CREATABLE_STATUSES = {UserStatus.ACTIVE.value, UserStatus.SUSPENDED.value}


def _email(v: str) -> str:
    v = (v or "").strip().lower()
    if "@" not in v or "." not in v.split("@")[-1]:
        raise ValueError("Invalid email format")
    return v


def _role(v: str | None) -> str | None:
    if v is None:
        return v
    role = v.upper().strip()
    if role not in ALLOWED_ROLES:
        raise ValueError(f"role must be one of {sorted(ALLOWED_ROLES)}")
    return role


class UserCreatePayload(Schema):
    username: str
    email: str
    password: str
    first_name: str = ""
    last_name: str = ""
    role: str = UserRole.COMMUNITY_MEMBER.value
    status: str = UserStatus.ACTIVE.value
    preferred_language: str | None = None

    @field_validator("email")
    @classmethod
    def _validate_email(cls, v: str) -> str:
        return _email(v)

    @field_validator("username")
    @classmethod
    def _validate_username(cls, v: str) -> str:
        v = (v or "").strip()
        if not 3 <= len(v) <= 50:
            raise ValueError("username must be between 3 and 50 characters")
        return v

    @field_validator("role")
    @classmethod
    def _validate_role(cls, v: str) -> str:
        return _role(v)

    @field_validator("status")
    @classmethod
    def _validate_status(cls, v: str) -> str:
        s = (v or "").upper().strip()
        if s not in CREATABLE_STATUSES:
            raise ValueError(f"status must be one of {sorted(CREATABLE_STATUSES)}")
        return s


class UserUpdatePayload(Schema):
    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    role: str | None = None
    preferred_language: str | None = None
    additional_languages: list[str] | None = None
    email_notifications: bool | None = None
    push_notifications: bool | None = None

    @field_validator("email")
    @classmethod
    def _validate_email_optional(cls, v: str | None) -> str | None:
        return _email(v) if v is not None else v

    @field_validator("role")
    @classmethod
    def _validate_role_optional(cls, v: str | None) -> str | None:
        return _role(v)


class ProfileUpdatePayload(Schema):
    first_name: str | None = None
    last_name: str | None = None
    preferred_language: str | None = None
    additional_languages: list[str] | None = None
    email_notifications: bool | None = None
    push_notifications: bool | None = None


class PasswordChangePayload(Schema):
    current_password: str
    new_password: str


class StatusChangePayload(Schema):
    reason: str = ""


class UserFilterParams(Schema):
    """Filter and search parameters"""

    status: str | None = None
    role: str | None = None
    search: str | None = None

    @field_validator("status")
    @classmethod
    def _validate_status(cls, v: str | None) -> str | None:
        if v is None:
            return v
        s = v.upper().strip()
        if s not in ALLOWED_STATUSES:
            raise ValueError(f"status must be one of {sorted(ALLOWED_STATUSES)}")
        return s

    @field_validator("role")
    @classmethod
    def _validate_role(cls, v: str | None) -> str | None:
        return _role(v)
