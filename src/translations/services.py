import logging
import uuid

from django.db import transaction

from src.auditaction.models import AuditAction, AuditCategory
from src.auditaction.services import audit_action_create
from src.common.languages import normalize_language
from src.common.sanitize import sanitize_text
from src.core.exceptions import DomainValidationError
from src.translations import selectors
from src.translations.models import Translation, TranslationStatus
from src.translations.schemas import TranslationPayload
from src.users.models import User

log = logging.getLogger(__name__)


def _upsert(*, payload: TranslationPayload, user: User) -> tuple[Translation, bool]:
    text = sanitize_text(payload.translated_text)
    if not text:
        raise DomainValidationError(message="translated_text is required", errors={"translated_text": ["required"]})

    translation, created = Translation.objects.select_for_update().get_or_create(
        content_type=payload.content_type,
        content_id=payload.content_id.strip(),
        field_name=payload.field_name.strip(),
        language_code=normalize_language(payload.language_code, field="language_code"),
        defaults={
            "translated_text": text,
            "status": payload.status or TranslationStatus.PUBLISHED,
            "created_by": user,
            "updated_by": user,
        },
    )
    if not created:
        translation.translated_text = text
        if payload.status:
            translation.status = payload.status
        translation.updated_by = user
        translation.save()
    return translation, created


@transaction.atomic
def translation_save(*, payload: TranslationPayload, user: User, request=None) -> Translation:
    """Create the translation or overwrite the existing one for the same field and language."""
    translation, created = _upsert(payload=payload, user=user)
    audit_action_create(
        user=user,
        category=AuditCategory.TRANSLATION,
        action=AuditAction.TRANSLATION_SAVED,
        target_type="translation",
        target_id=str(translation.id),
        details={"created": created, "key": str(translation)},
        request=request,
    )
    return translation


@transaction.atomic
def translation_save_batch(*, payloads: list[TranslationPayload], user: User, request=None) -> list[Translation]:
    saved = [_upsert(payload=p, user=user)[0] for p in payloads]
    audit_action_create(
        user=user,
        category=AuditCategory.TRANSLATION,
        action=AuditAction.TRANSLATION_SAVED,
        details={"batch_size": len(saved)},
        request=request,
    )
    return saved


@transaction.atomic
def translation_set_status(*, translation_id: uuid.UUID, status: str, user: User) -> Translation:
    translation = selectors.translation_get_for_update(translation_id=translation_id)
    translation.status = status
    translation.updated_by = user
    translation.save(update_fields=["status", "updated_by", "updated_at"])
    return translation


@transaction.atomic
def translation_delete(*, translation_id: uuid.UUID, user: User, request=None) -> None:
    translation = selectors.translation_get_for_update(translation_id=translation_id)
    key = str(translation)
    translation.delete()
    audit_action_create(
        user=user,
        category=AuditCategory.TRANSLATION,
        action=AuditAction.TRANSLATION_DELETED,
        target_type="translation",
        target_id=str(translation_id),
        details={"key": key},
        request=request,
    )
