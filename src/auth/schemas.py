from ninja import Schema
from pydantic import field_validator


class LoginPayload(Schema):
    """`username` accepts either the username or the email address."""

    username: str
    password: str

    @field_validator("username")
    @classmethod
    def _strip(cls, v: str) -> str:
        v = (v or "").strip()
        if not v:
            raise ValueError("username is required")
        return v


class RegisterPayload(Schema):
    username: str
    email: str
    password: str
    first_name: str = ""
    last_name: str = ""
    preferred_language: str | None = None

    @field_validator("email")
    @classmethod
    def _validate_email(cls, v: str) -> str:
        v = (v or "").strip().lower()
        if "@" not in v or "." not in v.split("@")[-1]:
            raise ValueError("Invalid email format")
        return v

    @field_validator("username")
    @classmethod
    def _validate_username(cls, v: str) -> str:
        v = (v or "").strip()
        if not 3 <= len(v) <= 50:
            raise ValueError("username must be between 3 and 50 characters")
        return v


class RefreshPayload(Schema):
    refresh: str


class LogoutPayload(Schema):
    refresh: str = ""
    all: bool = False
