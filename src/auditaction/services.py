import logging
import uuid
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any

from django.db import transaction
from django.http import HttpRequest

from src.auditaction.models import AuditCategory, AuditLog, Severity
from src.common.utils import get_client_ip, get_request_id

log = logging.getLogger(__name__)

# action prefixes that do not match a category name
CATEGORY_ALIASES = {
    "REPORT": AuditCategory.MODERATION,
}

USER_AGENT_MAX_LENGTH = 512


def category_for_action(action: str) -> str:
    """SITE_ARCHIVED -> SITE, REPORT_RESOLVED -> MODERATION, anything unknown -> SYSTEM."""
    prefix = (action or "").split("_", 1)[0].upper()
    if prefix in AuditCategory.values:
        return prefix
    return CATEGORY_ALIASES.get(prefix, AuditCategory.SYSTEM)


def to_json_safe(value: Any) -> Any:
    """Make service-level values (ids, dates, decimals, model rows) storable in a JSONField."""
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, uuid.UUID):
        return str(value)
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, dict):
        return {str(k): to_json_safe(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [to_json_safe(v) for v in value]
    if hasattr(value, "pk"):
        return to_json_safe(value.pk)
    return str(value)


def _request_context(request: HttpRequest | None) -> dict[str, Any]:
    if request is None:
        return {"ip_address": None, "user_agent": "", "request_id": ""}
    return {
        "ip_address": get_client_ip(request) or None,
        "user_agent": request.META.get("HTTP_USER_AGENT", "")[:USER_AGENT_MAX_LENGTH],
        "request_id": get_request_id(request)[:64],
    }


@transaction.atomic
def audit_action_create(
    *,
    user,
    action: str,
    details: dict[str, Any] | None = None,
    category: str | None = None,
    target_type: str = "",
    target_id: str | None = None,
    severity: str = Severity.INFO,
    request: HttpRequest | None = None,
) -> AuditLog:
    """
    Append one entry to the activity journal.

    Anonymous actors (failed logins, background jobs) are stored with no user.
    The category is derived from the action name when not given.
    """
    entry = AuditLog.objects.create(
        user=user if getattr(user, "pk", None) else None,
        category=category or category_for_action(action),
        action=action,
        target_type=target_type,
        target_id=str(target_id) if target_id is not None else None,
        details=to_json_safe(details or {}),
        severity=severity,
        **_request_context(request),
    )
    if severity != Severity.INFO:
        log.info("Audit %s %s target=%s:%s", entry.severity, entry.action, target_type, target_id)
    return entry
