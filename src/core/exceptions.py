from __future__ import annotations
from typing import Any


class APIError(Exception):
    def __init__(self, *, message: str, code: str, status: int, errors: Any = None, extra: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status = status
        self.errors = errors
        self.extra = extra or {}


class BusinessRuleError(APIError):
    """A request that is well formed but breaks a workflow rule."""

    def __init__(self, *, message: str, code: str = "BAD_REQUEST", errors: Any = None, extra: dict[str, Any] | None = None):
        super().__init__(message=message, code=code, status=400, errors=errors, extra=extra)


class AuthenticationError(APIError):
    def __init__(self, *, message: str = "Authentication required", code: str = "AUTHENTICATION_FAILED",
                 errors: Any = None, extra: dict[str, Any] | None = None):
        super().__init__(message=message, code=code, status=401, errors=errors, extra=extra)


class PermissionDeniedError(APIError):
    def __init__(self, *, message: str = "Permission denied", code: str = "FORBIDDEN", errors: Any = None,
                 extra: dict[str, Any] | None = None):
        super().__init__(message=message, code=code, status=403, errors=errors, extra=extra)


class AccountLockedError(PermissionDeniedError):
    def __init__(self, *, message: str = "User account is locked", extra: dict[str, Any] | None = None):
        super().__init__(message=message, code="ACCOUNT_LOCKED", extra=extra)


class NotFoundError(APIError):
    def __init__(self, *, message: str = "Resource not found", code: str = "NOT_FOUND", errors: Any = None,
                 extra: dict[str, Any] | None = None):
        super().__init__(message=message, code=code, status=404, errors=errors, extra=extra)


class DomainConflictError(APIError):
    def __init__(self, *, message: str, code: str, errors: Any = None, extra: dict[str, Any] | None = None):
        super().__init__(message=message, code=code, status=409, errors=errors, extra=extra)


class DomainValidationError(APIError):
    def __init__(self, *, message: str, code: str = "VALIDATION_ERROR", errors: Any = None, extra: dict[str, Any] | None = None):
        super().__init__(message=message, code=code, status=422, errors=errors, extra=extra)


class RateLimitedError(APIError):
    """Too many requests; `retry_after` seconds end up in `extra` and the Retry-After header."""

    def __init__(self, *, message: str = "Too many requests", code: str = "RATE_LIMITED", retry_after: int = 60,
                 extra: dict[str, Any] | None = None):
        super().__init__(message=message, code=code, status=429, extra={**(extra or {}), "retry_after": retry_after})
