import uuid

from django.db.models import QuerySet

from src.common.languages import default_language
from src.core.exceptions import NotFoundError
from src.core.policies import has_permission
from src.translations.models import Translation, TranslationStatus


def translation_visible_queryset(*, user) -> QuerySet[Translation]:
    """Non-managers only ever see published rows."""
    qs = Translation.objects.all()
    if not has_permission(user, "translations.manage"):
        qs = qs.filter(status=TranslationStatus.PUBLISHED)
    return qs


def translation_text(
    *,
    user,
    content_type: str,
    content_id: str,
    field_name: str,
    language: str,
    fallback: bool = True,
) -> Translation | None:
    qs = translation_visible_queryset(user=user).filter(
        content_type=content_type, content_id=content_id, field_name=field_name
    )
    found = qs.filter(language_code=language).first()
    if found is None and fallback and language != default_language():
        found = qs.filter(language_code=default_language()).first()
    return found


def translations_for_content(*, user, content_type: str, content_id: str,
                             language: str | None = None) -> QuerySet[Translation]:
    qs = translation_visible_queryset(user=user).filter(content_type=content_type, content_id=content_id)
    if language:
        qs = qs.filter(language_code=language)
    return qs.order_by("field_name", "language_code")


def translations_by_type(*, user, content_type: str, language: str) -> QuerySet[Translation]:
    return (
        translation_visible_queryset(user=user)
        .filter(content_type=content_type, language_code=language)
        .order_by("content_id", "field_name")
    )


def translation_exists(*, user, content_type: str, content_id: str, field_name: str, language: str) -> bool:
    return translation_visible_queryset(user=user).filter(
        content_type=content_type, content_id=content_id, field_name=field_name, language_code=language
    ).exists()


def translation_get_for_update(*, translation_id: uuid.UUID) -> Translation:
    try:
        return Translation.objects.select_for_update().get(id=translation_id)
    except Translation.DoesNotExist:
        raise NotFoundError(message="Translation not found", code="TRANSLATION_NOT_FOUND")
