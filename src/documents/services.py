import uuid

from django.db import transaction

from src.auditaction.models import AuditAction, AuditCategory
from src.auditaction.services import audit_action_create
from src.common.languages import normalize_language, validate_localized
from src.common.sanitize import sanitize_localized, sanitize_text
from src.core.exceptions import NotFoundError
from src.documents import selectors
from src.documents.models import Document
from src.documents.schemas import DocumentCreatePayload, DocumentUpdatePayload
from src.heritage_sites.models import HeritageSite
from src.users.models import User


def _site_or_none(site_id: uuid.UUID | None) -> HeritageSite | None:
    if site_id is None:
        return None
    site = HeritageSite.objects.filter(id=site_id, is_active=True).first()
    if site is None:
        raise NotFoundError(message="Heritage site not found", code="SITE_NOT_FOUND")
    return site


@transaction.atomic
def document_create(*, created_by: User, payload: DocumentCreatePayload, request=None) -> Document:
    document = Document.objects.create(
        title=validate_localized(sanitize_localized(payload.title), field="title"),
        description=validate_localized(sanitize_localized(payload.description), field="description", required=False),
        author=sanitize_text(payload.author) or "",
        document_type=payload.document_type,
        tags=payload.tags,
        language=normalize_language(payload.language),
        heritage_site=_site_or_none(payload.heritage_site_id),
        is_public=payload.is_public,
        created_by=created_by,
        updated_by=created_by,
    )
    audit_action_create(
        user=created_by,
        category=AuditCategory.DOCUMENT,
        action=AuditAction.DOCUMENT_CREATED,
        target_type="document",
        target_id=str(document.id),
        details={"document_type": document.document_type, "is_public": document.is_public},
        request=request,
    )
    return document


@transaction.atomic
def document_update(*, document_id: uuid.UUID, updated_by: User, payload: DocumentUpdatePayload,
                    request=None) -> Document:
    document = selectors.document_get_for_update(document_id=document_id)
    data = payload.dict(exclude_unset=True)

    if data.get("title") is not None:
        document.title = validate_localized(sanitize_localized(data["title"]), field="title")
    if data.get("description") is not None:
        document.description = validate_localized(sanitize_localized(data["description"]), field="description",
                                                  required=False)
    if data.get("author") is not None:
        document.author = sanitize_text(data["author"])
    if data.get("document_type") is not None:
        document.document_type = data["document_type"]
    if data.get("tags") is not None:
        document.tags = data["tags"]
    if data.get("language") is not None:
        document.language = normalize_language(data["language"])
    if "heritage_site_id" in data:
        # explicit null detaches the document from its site
        document.heritage_site = _site_or_none(data["heritage_site_id"])
    if data.get("is_public") is not None:
        document.is_public = data["is_public"]

    document.updated_by = updated_by
    document.save()

    audit_action_create(
        user=updated_by,
        category=AuditCategory.DOCUMENT,
        action=AuditAction.DOCUMENT_UPDATED,
        target_type="document",
        target_id=str(document.id),
        details={"updated_fields": list(data.keys())},
        request=request,
    )
    return document


@transaction.atomic
def document_delete(*, document_id: uuid.UUID, deleted_by: User, request=None) -> None:
    document = selectors.document_get_for_update(document_id=document_id)
    document.is_active = False
    document.updated_by = deleted_by
    document.save(update_fields=["is_active", "updated_by", "updated_at"])
    audit_action_create(
        user=deleted_by,
        category=AuditCategory.DOCUMENT,
        action=AuditAction.DOCUMENT_DELETED,
        target_type="document",
        target_id=str(document.id),
        request=request,
    )
