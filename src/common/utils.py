import uuid

from src.core.exceptions import DomainValidationError


def validate_uuid(value: str | uuid.UUID, *, field: str = "id") -> uuid.UUID:
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError):
        raise DomainValidationError(
            message=f"Invalid {field}",
            code="INVALID_ID",
            errors={field: ["must be a valid UUID"]},
        )


def get_client_ip(request) -> str | None:
    """Extract client IP from Django request, handling reverse proxies."""
    if not request:
        return None
    x_forwarded_for = request.META.get("HTTP_X_FORWARDED_FOR")
    if x_forwarded_for:
        return x_forwarded_for.split(",")[0].strip()
    return request.META.get("REMOTE_ADDR")


def get_request_id(request) -> str:
    if not request:
        return ""
    req_id = (
        getattr(request, "request_id", "")
        or request.headers.get("X-Request-Id", "")
        or request.META.get("HTTP_X_REQUEST_ID", "")
        or ""
    )
    return str(req_id)
