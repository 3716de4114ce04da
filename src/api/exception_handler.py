import logging
import traceback

from django.conf import settings
from django.core.exceptions import ObjectDoesNotExist, ValidationError as DjangoValidationError
from django.db import IntegrityError
from django.http import Http404
from ninja.errors import AuthenticationError as NinjaAuthenticationError
from ninja.errors import HttpError
from ninja.errors import ValidationError as NinjaValidationError
from ninja_extra import NinjaExtraAPI
from ninja_extra.exceptions import APIException

# psycopg 3: use error classes under psycopg.errors (no "errorcodes" module)
from psycopg import errors as pg_errors

from src.common.utils import get_request_id
from src.core.exceptions import APIError

log = logging.getLogger(__name__)

# Unique constraint / column → (code, message, field)
UNIQUE_VIOLATIONS = {
    "users_username_key": ("USERNAME_TAKEN", "Username already in use", "username"),
    "users.username": ("USERNAME_TAKEN", "Username already in use", "username"),
    "users_email_key": ("EMAIL_TAKEN", "Email already in use", "email"),
    "users.email": ("EMAIL_TAKEN", "Email already in use", "email"),
    "artifact_site_name_unique": ("ARTIFACT_NAME_TAKEN", "An artifact with this name already exists for the site", "name"),
    "translation_unique_field": ("TRANSLATION_EXISTS", "Translation already exists", "field_name"),
    "translations.language_code": ("TRANSLATION_EXISTS", "Translation already exists", "field_name"),
    "site_manager_active_unique": ("MANAGER_ALREADY_ASSIGNED", "User already manages this site", "user_id"),
}


def _describe_unique_violation(exc: IntegrityError) -> tuple[str, str, str | None]:
    cause = getattr(exc, "__cause__", None)
    # psycopg 3 diagnostics (may be None depending on backend/driver)
    diag = getattr(cause, "diag", None) if cause else None
    constraint = getattr(diag, "constraint_name", "") if diag else ""
    pgcode = getattr(cause, "pgcode", "") or getattr(diag, "sqlstate", "") or ""

    is_unique = isinstance(cause, pg_errors.UniqueViolation) if cause else False
    if not is_unique:
        is_unique = pgcode == "23505" or "UNIQUE constraint failed" in str(exc)

    if not is_unique:
        return "CONFLICT", "Conflict", None

    if constraint in UNIQUE_VIOLATIONS:
        return UNIQUE_VIOLATIONS[constraint]

    # SQLite reports "UNIQUE constraint failed: table.column[, table.column]"
    message = str(exc)
    for key, described in UNIQUE_VIOLATIONS.items():
        if key in message:
            return described
    return "CONFLICT", "Resource already exists", None


def attach_exception_handlers(api: NinjaExtraAPI) -> None:
    def _envelope(request, *, message: str, status: int, code: str, data=None, errors=None, extra=None,):
        return api.create_response(
            request,
            {
                "success": 200 <= status < 400,
                "message": message,
                "data": data or {},
                "extra": extra or {},
                "errors": errors,
                "code": code,
                "request_id": get_request_id(request),
            },
            status=status,
        )

    @api.exception_handler(APIError)
    def on_api_error(request, exc: APIError):
        response = _envelope(
            request,
            message=exc.message,
            status=exc.status,
            code=exc.code,
            errors=exc.errors,
            extra=exc.extra,
        )
        if "retry_after" in exc.extra:
            response["Retry-After"] = str(exc.extra["retry_after"])
        return response

    @api.exception_handler(NinjaAuthenticationError)
    def on_authentication_error(request, exc: NinjaAuthenticationError):
        return _envelope(
            request,
            message="Authentication credentials were not provided or are invalid",
            status=401,
            code="AUTHENTICATION_FAILED",
        )

    @api.exception_handler(APIException)
    def on_framework_error(request, exc: APIException):
        # ninja_jwt token errors and ninja_extra permission/throttle errors
        detail = exc.detail
        message = detail if isinstance(detail, str) else str(getattr(exc, "default_detail", "Error"))
        status = exc.status_code
        code = "AUTHENTICATION_FAILED" if status == 401 else getattr(exc, "default_code", "ERROR").upper()
        return _envelope(request, message=message, status=status, code=code,
                         errors=None if isinstance(detail, str) else detail)

    @api.exception_handler(HttpError)
    def on_http_error(request, exc: HttpError):
        return _envelope(request, message=str(exc), status=exc.status_code, code="HTTP_ERROR")

    @api.exception_handler(Http404)
    def on_not_found(request, exc: Http404):
        return _envelope(request, message=str(exc) or "Not found", status=404, code="NOT_FOUND")

    @api.exception_handler(ObjectDoesNotExist)
    def on_object_does_not_exist(request, exc: ObjectDoesNotExist):
        return _envelope(request, message="Resource not found", status=404, code="NOT_FOUND")

    @api.exception_handler(IntegrityError)
    def on_integrity_error(request, exc: IntegrityError):
        code, msg, field = _describe_unique_violation(exc)
        log.info("Integrity error mapped to %s", code)
        errors = {field: ["already taken"]} if field else None
        return _envelope(request, message=msg, status=409, code=code, errors=errors)

    @api.exception_handler(DjangoValidationError)
    def on_django_validation_error(request, exc: DjangoValidationError):
        errors = exc.message_dict if hasattr(exc, "error_dict") else exc.messages
        return _envelope(
            request,
            message="Validation error",
            status=422,
            code="VALIDATION_ERROR",
            errors=errors,
        )

    @api.exception_handler(NinjaValidationError)
    def on_ninja_validation_error(request, exc: NinjaValidationError):
        return _envelope(
            request,
            message="Validation error",
            status=422,
            code="VALIDATION_ERROR",
            errors=exc.errors,
        )

    @api.exception_handler(Exception)
    def on_unexpected_error(request, exc: Exception):
        log.exception("Unhandled error on %s %s", request.method, request.path)
        err = None
        extra = {}
        if settings.DEBUG:
            err = str(exc)
            extra["trace"] = traceback.format_exc(limit=20)
        return _envelope(
            request,
            message="Unexpected error",
            status=500,
            code="INTERNAL_ERROR",
            errors=err,
            extra=extra if settings.DEBUG else None,
        )
