import logging
import uuid

from django.db import transaction

from src.artifacts import selectors
from src.artifacts.models import Artifact
from src.artifacts.schemas import ArtifactCreatePayload, ArtifactUpdatePayload
from src.auditaction.models import AuditAction, AuditCategory
from src.auditaction.services import audit_action_create
from src.common.languages import default_language, validate_localized
from src.common.sanitize import sanitize_localized
from src.core.exceptions import BusinessRuleError, DomainConflictError, NotFoundError
from src.heritage_sites.models import HeritageSite
from src.users.models import User

log = logging.getLogger(__name__)


def _active_site(site_id: uuid.UUID) -> HeritageSite:
    site = HeritageSite.objects.filter(id=site_id).first()
    if site is None:
        raise NotFoundError(message="Heritage site not found", code="SITE_NOT_FOUND")
    if not site.is_active:
        raise BusinessRuleError(message="Cannot attach artifacts to an archived site", code="SITE_ARCHIVED")
    return site


def _ensure_name_free(*, site_id: uuid.UUID, name_key: str, exclude_id: uuid.UUID | None = None) -> None:
    if selectors.artifact_name_taken(site_id=site_id, name=name_key, exclude_id=exclude_id):
        raise DomainConflictError(
            message="An artifact with this name already exists for the site",
            code="ARTIFACT_NAME_TAKEN",
            errors={"name": ["already used on this site"]},
        )


@transaction.atomic
def artifact_create(*, created_by: User, payload: ArtifactCreatePayload, request=None) -> Artifact:
    name = validate_localized(sanitize_localized(payload.name), field="name")
    description = validate_localized(sanitize_localized(payload.description), field="description", required=False)
    site = _active_site(payload.heritage_site_id)
    name_key = name[default_language()]
    _ensure_name_free(site_id=site.id, name_key=name_key)

    artifact = Artifact.objects.create(
        name=name,
        name_key=name_key,
        description=description,
        category=payload.category,
        heritage_site=site,
        is_public=payload.is_public,
        created_by=created_by,
        updated_by=created_by,
    )
    audit_action_create(
        user=created_by,
        category=AuditCategory.ARTIFACT,
        action=AuditAction.ARTIFACT_CREATED,
        target_type="artifact",
        target_id=str(artifact.id),
        details={"site_id": site.id, "name": name_key},
        request=request,
    )
    return artifact


@transaction.atomic
def artifact_update(*, artifact_id: uuid.UUID, updated_by: User, payload: ArtifactUpdatePayload,
                    request=None) -> Artifact:
    artifact = selectors.artifact_get_for_update(artifact_id=artifact_id)
    data = payload.dict(exclude_unset=True, exclude_none=True)

    if "name" in data:
        artifact.name = validate_localized(sanitize_localized(data["name"]), field="name")
        artifact.name_key = artifact.name[default_language()]
    if "description" in data:
        artifact.description = validate_localized(sanitize_localized(data["description"]), field="description",
                                                  required=False)
    if "heritage_site_id" in data:
        artifact.heritage_site = _active_site(data["heritage_site_id"])
    if "category" in data:
        artifact.category = data["category"]
    if "is_public" in data:
        artifact.is_public = data["is_public"]

    if "name" in data or "heritage_site_id" in data:
        _ensure_name_free(site_id=artifact.heritage_site_id, name_key=artifact.name_key, exclude_id=artifact.id)

    artifact.updated_by = updated_by
    artifact.save()

    audit_action_create(
        user=updated_by,
        category=AuditCategory.ARTIFACT,
        action=AuditAction.ARTIFACT_UPDATED,
        target_type="artifact",
        target_id=str(artifact.id),
        details={"updated_fields": list(data.keys())},
        request=request,
    )
    return artifact


@transaction.atomic
def artifact_delete(*, artifact_id: uuid.UUID, deleted_by: User, request=None) -> None:
    artifact = selectors.artifact_get_for_update(artifact_id=artifact_id)
    artifact.is_active = False
    artifact.updated_by = deleted_by
    artifact.save(update_fields=["is_active", "updated_by", "updated_at"])

    audit_action_create(
        user=deleted_by,
        category=AuditCategory.ARTIFACT,
        action=AuditAction.ARTIFACT_DELETED,
        target_type="artifact",
        target_id=str(artifact.id),
        request=request,
    )
