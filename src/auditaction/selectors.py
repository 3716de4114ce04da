from __future__ import annotations

from datetime import datetime
from typing import Any

from django.db.models import QuerySet, Q, Count
from django.utils.dateparse import parse_datetime

from src.auditaction.models import AuditLog
from src.core.exceptions import NotFoundError


def _parse_dt(value: str | None) -> datetime | None:
    if not value:
        return None
    # Accept ISO strings; malformed values are ignored
    try:
        return parse_datetime(value)
    except ValueError:
        return None


def audit_actions_queryset(
    *,
    category: str | None = None,
    action: str | None = None,
    user_id: str | None = None,
    severity: str | None = None,
    target_type: str | None = None,
    target_id: str | None = None,
    date_from: str | None = None,
    date_to: str | None = None,
    q: str | None = None,
) -> QuerySet[AuditLog]:
    qs = AuditLog.objects.select_related("user")

    if category:
        qs = qs.filter(category=category)
    if action:
        qs = qs.filter(action__icontains=action)
    if user_id:
        qs = qs.filter(user_id=user_id)
    if severity:
        qs = qs.filter(severity=severity)
    if target_type:
        qs = qs.filter(target_type=target_type)
    if target_id:
        qs = qs.filter(target_id=target_id)

    df = _parse_dt(date_from)
    dt = _parse_dt(date_to)
    if df:
        qs = qs.filter(created_at__gte=df)
    if dt:
        qs = qs.filter(created_at__lte=dt)

    if q:
        qs = qs.filter(
            Q(action__icontains=q)
            | Q(user__email__icontains=q)
            | Q(target_type__icontains=q)
        )

    return qs.order_by("-created_at")


def audit_action_get(*, audit_id) -> AuditLog:
    try:
        return AuditLog.objects.select_related("user").get(id=audit_id)
    except AuditLog.DoesNotExist:
        raise NotFoundError(message="Audit entry not found", code="AUDIT_NOT_FOUND")


def audit_stats_by_category(
    *,
    date_from: str | None = None,
    date_to: str | None = None,
) -> list[dict[str, Any]]:
    qs = audit_actions_queryset(date_from=date_from, date_to=date_to)
    data = qs.values("category").annotate(count=Count("id")).order_by("-count")
    return list(data)
