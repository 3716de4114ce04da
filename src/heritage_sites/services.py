import logging
import uuid

from django.db import transaction
from django.utils import timezone

from src.auditaction.models import AuditAction, AuditCategory, Severity
from src.auditaction.services import audit_action_create
from src.common.languages import validate_localized
from src.common.sanitize import sanitize_localized, sanitize_text
from src.common.utils import validate_uuid
from src.core.exceptions import BusinessRuleError, DomainConflictError, DomainValidationError, NotFoundError, \
    PermissionDeniedError
from src.core.policies import ensure_permission
from src.heritage_sites import selectors
from src.heritage_sites.models import (
    HeritageSite,
    HeritageSiteManager,
    SiteManagerStatus,
    SiteStatus,
    SiteStatusHistory,
    site_status_can_transition,
)
from src.heritage_sites.schemas import SiteCreatePayload, SiteUpdatePayload
from src.users.models import User, UserRole, UserStatus

log = logging.getLogger(__name__)

LOCALIZED_FIELDS = ("name", "description", "significance")
TEXT_FIELDS = ("address", "region", "ownership_type", "contact_info")


def _clean_site_data(data: dict) -> dict:
    for field in LOCALIZED_FIELDS:
        if field in data:
            data[field] = validate_localized(sanitize_localized(data[field]), field=field, required=field == "name")
    for field in TEXT_FIELDS:
        if field in data:
            data[field] = sanitize_text(data[field]) or ""
    return data


def _ensure_can_manage(*, user, site: HeritageSite) -> None:
    ensure_permission(user, "sites.manage")
    if not selectors.can_manage_site(user=user, site=site):
        raise PermissionDeniedError(message="You are not assigned to manage this site")


@transaction.atomic
def site_create(*, created_by: User, payload: SiteCreatePayload, request=None) -> HeritageSite:
    """New sites always start as PROPOSED."""
    data = _clean_site_data(payload.dict())
    site = HeritageSite.objects.create(
        **data,
        status=SiteStatus.PROPOSED,
        created_by=created_by,
        updated_by=created_by,
    )
    SiteStatusHistory.objects.create(
        site=site,
        previous_status="",
        new_status=site.status,
        reason="Site created",
        changed_by=created_by,
    )
    audit_action_create(
        user=created_by,
        category=AuditCategory.SITE,
        action=AuditAction.SITE_CREATED,
        target_type="heritage_site",
        target_id=str(site.id),
        details={"name": site.name, "region": site.region},
        request=request,
    )
    return site


@transaction.atomic
def site_update(*, site_id: uuid.UUID, updated_by: User, payload: SiteUpdatePayload, request=None) -> HeritageSite:
    site = selectors.site_get_for_update(site_id=site_id)
    if not site.is_active:
        raise NotFoundError(message="Heritage site not found", code="SITE_NOT_FOUND")
    _ensure_can_manage(user=updated_by, site=site)

    update_data = _clean_site_data(payload.dict(exclude_unset=True, exclude_none=True))
    for field, value in update_data.items():
        setattr(site, field, value)
    site.updated_by = updated_by
    site.save()

    audit_action_create(
        user=updated_by,
        category=AuditCategory.SITE,
        action=AuditAction.SITE_UPDATED,
        target_type="heritage_site",
        target_id=str(site.id),
        details={"updated_fields": list(update_data.keys())},
        request=request,
    )
    return site


@transaction.atomic
def site_archive(*, site_id: uuid.UUID, archived_by: User, reason: str, request=None) -> HeritageSite:
    """Soft delete: the site leaves every listing but keeps its history."""
    reason = sanitize_text(reason)
    if not reason:
        raise DomainValidationError(message="Archive reason is required", code="ARCHIVE_REASON_REQUIRED",
                                    errors={"reason": ["required"]})

    site = selectors.site_get_for_update(site_id=site_id)
    if not site.is_active:
        raise BusinessRuleError(message="Site is already archived", code="SITE_ALREADY_ARCHIVED")

    previous_status = site.status
    site.status = SiteStatus.ARCHIVED
    site.is_active = False
    site.archive_reason = reason
    site.archive_date = timezone.now()
    site.updated_by = archived_by
    site.save()

    SiteStatusHistory.objects.create(
        site=site,
        previous_status=previous_status,
        new_status=SiteStatus.ARCHIVED,
        reason=reason,
        changed_by=archived_by,
    )
    log.info("Site %s archived by %s", site.id, archived_by.id)
    audit_action_create(
        user=archived_by,
        category=AuditCategory.SITE,
        action=AuditAction.SITE_ARCHIVED,
        severity=Severity.WARNING,
        target_type="heritage_site",
        target_id=str(site.id),
        details={"reason": reason, "previous_status": previous_status},
        request=request,
    )
    return site


@transaction.atomic
def site_restore(*, site_id: uuid.UUID, restored_by: User, request=None) -> HeritageSite:
    site = selectors.site_get_for_update(site_id=site_id)
    if site.status != SiteStatus.ARCHIVED:
        raise BusinessRuleError(message="Only archived sites can be restored", code="SITE_NOT_ARCHIVED")

    site.status = SiteStatus.ACTIVE
    site.is_active = True
    site.archive_reason = ""
    site.archive_date = None
    site.updated_by = restored_by
    site.save()

    SiteStatusHistory.objects.create(
        site=site,
        previous_status=SiteStatus.ARCHIVED,
        new_status=SiteStatus.ACTIVE,
        reason="Site restored",
        changed_by=restored_by,
    )
    audit_action_create(
        user=restored_by,
        category=AuditCategory.SITE,
        action=AuditAction.SITE_RESTORED,
        target_type="heritage_site",
        target_id=str(site.id),
        request=request,
    )
    return site


def _status_result(site, *, success: bool, previous: str, message: str, changed_at=None) -> dict:
    return {
        "success": success,
        "site_id": str(site.id),
        "previous_status": previous,
        "new_status": site.status,
        "message": message,
        "changed_at": changed_at.isoformat() if changed_at else None,
    }


def _apply_status_change(*, site: HeritageSite, new_status: str, changed_by: User, reason: str, notes: str,
                         request=None) -> dict:
    previous = site.status
    if previous == new_status:
        return _status_result(site, success=False, previous=previous, message=f"Site is already {new_status}")

    if not site_status_can_transition(previous, new_status):
        raise BusinessRuleError(
            message=f"Cannot change site status from {previous} to {new_status}",
            code="INVALID_STATUS_TRANSITION",
        )

    site.status = new_status
    if new_status == SiteStatus.ARCHIVED:
        site.is_active = False
        site.archive_reason = reason
        site.archive_date = timezone.now()
    elif previous == SiteStatus.ARCHIVED:
        site.is_active = True
        site.archive_reason = ""
        site.archive_date = None
    site.updated_by = changed_by
    site.save()

    history = SiteStatusHistory.objects.create(
        site=site,
        previous_status=previous,
        new_status=new_status,
        reason=reason,
        notes=notes,
        changed_by=changed_by,
    )
    log.info("Site %s status %s -> %s by %s", site.id, previous, new_status, changed_by.id)
    audit_action_create(
        user=changed_by,
        category=AuditCategory.SITE,
        action=AuditAction.SITE_STATUS_CHANGED,
        target_type="heritage_site",
        target_id=str(site.id),
        details={"previous_status": previous, "new_status": new_status, "reason": reason},
        request=request,
    )
    return _status_result(
        site,
        success=True,
        previous=previous,
        message=f"Status changed from {previous} to {new_status}",
        changed_at=history.changed_at,
    )


@transaction.atomic
def site_change_status(*, site_id: uuid.UUID, new_status: str, changed_by: User, reason: str = "", notes: str = "",
                       request=None) -> dict:
    """
    Move a site through its status workflow.

    Same status is reported as an unsuccessful result without writing anything; an illegal
    move raises INVALID_STATUS_TRANSITION.
    """
    site = selectors.site_get_for_update(site_id=site_id)
    _ensure_can_manage(user=changed_by, site=site)
    return _apply_status_change(
        site=site,
        new_status=new_status,
        changed_by=changed_by,
        reason=sanitize_text(reason) or "",
        notes=sanitize_text(notes) or "",
        request=request,
    )


def site_bulk_change_status(*, site_ids: list[str], new_status: str, changed_by: User, reason: str = "",
                            notes: str = "", request=None) -> dict:
    """Apply one status to many sites; each site succeeds or fails on its own."""
    results, errors = [], []
    for raw_id in site_ids:
        try:
            with transaction.atomic():
                site = selectors.site_get_for_update(site_id=validate_uuid(raw_id, field="site_ids"))
                result = _apply_status_change(
                    site=site,
                    new_status=new_status,
                    changed_by=changed_by,
                    reason=sanitize_text(reason) or "",
                    notes=sanitize_text(notes) or "",
                    request=request,
                )
        except (BusinessRuleError, NotFoundError, DomainValidationError) as exc:
            errors.append({"site_id": str(raw_id), "error": exc.message, "code": exc.code})
            continue
        results.append(result)
        if not result["success"]:
            errors.append({"site_id": str(raw_id), "error": result["message"], "code": "STATUS_UNCHANGED"})

    successful = sum(1 for r in results if r["success"])
    return {
        "total_requested": len(site_ids),
        "successful": successful,
        "failed": len(site_ids) - successful,
        "results": results,
        "errors": errors,
    }


@transaction.atomic
def site_assign_manager(*, site_id: uuid.UUID, user_id: uuid.UUID, assigned_by: User, notes: str = "",
                        request=None) -> HeritageSiteManager:
    site = selectors.site_get_for_update(site_id=site_id)
    if not site.is_active:
        raise BusinessRuleError(message="Cannot assign a manager to an archived site", code="SITE_ARCHIVED")

    manager = User.objects.filter(id=validate_uuid(user_id, field="user_id")).first()
    if manager is None:
        raise NotFoundError(message="User not found", code="USER_NOT_FOUND")
    if manager.role != UserRole.HERITAGE_MANAGER:
        raise BusinessRuleError(message="Only heritage managers can be assigned to a site", code="NOT_A_SITE_MANAGER")
    if manager.status != UserStatus.ACTIVE:
        raise BusinessRuleError(message="Cannot assign an inactive user", code="USER_NOT_ACTIVE")

    if HeritageSiteManager.objects.filter(site=site, user=manager, status=SiteManagerStatus.ACTIVE).exists():
        raise DomainConflictError(message="User already manages this site", code="MANAGER_ALREADY_ASSIGNED")

    assignment = HeritageSiteManager.objects.create(
        site=site,
        user=manager,
        assigned_by=assigned_by,
        notes=sanitize_text(notes) or "",
    )
    audit_action_create(
        user=assigned_by,
        category=AuditCategory.SITE,
        action=AuditAction.SITE_MANAGER_ASSIGNED,
        target_type="heritage_site",
        target_id=str(site.id),
        details={"manager_id": manager.id},
        request=request,
    )
    return assignment


@transaction.atomic
def site_remove_manager(*, site_id: uuid.UUID, user_id: uuid.UUID, removed_by: User, request=None) -> None:
    site = selectors.site_get_any(site_id=site_id)
    updated = HeritageSiteManager.objects.filter(
        site=site, user_id=user_id, status=SiteManagerStatus.ACTIVE
    ).update(status=SiteManagerStatus.INACTIVE, updated_at=timezone.now())
    if not updated:
        raise NotFoundError(message="No active assignment for this user", code="ASSIGNMENT_NOT_FOUND")

    audit_action_create(
        user=removed_by,
        category=AuditCategory.SITE,
        action=AuditAction.SITE_MANAGER_REMOVED,
        target_type="heritage_site",
        target_id=str(site.id),
        details={"manager_id": user_id},
        request=request,
    )
