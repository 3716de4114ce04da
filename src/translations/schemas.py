from ninja import Schema
from pydantic import Field, field_validator

from src.core.exceptions import DomainValidationError
from src.translations.models import TranslatableContentType, TranslationStatus


def _content_type(v: str) -> str:
    value = (v or "").strip().upper()
    if value not in TranslatableContentType.values:
        raise ValueError(f"content_type must be one of {TranslatableContentType.values}")
    return value


def _status(v: str | None) -> str | None:
    if v is None:
        return v
    value = v.strip().upper()
    if value not in TranslationStatus.values:
        raise ValueError(f"status must be one of {TranslationStatus.values}")
    return value


class TranslationPayload(Schema):
    content_type: str
    content_id: str = Field(min_length=1, max_length=255)
    language_code: str
    field_name: str = Field(min_length=1, max_length=100)
    translated_text: str
    status: str | None = None

    @field_validator("content_type")
    @classmethod
    def _validate_content_type(cls, v: str) -> str:
        return _content_type(v)

    @field_validator("status")
    @classmethod
    def _validate_status(cls, v: str | None) -> str | None:
        return _status(v)


class BatchTranslationPayload(Schema):
    translations: list[TranslationPayload] = Field(min_length=1, max_length=500)


class TranslationStatusPayload(Schema):
    status: str

    @field_validator("status")
    @classmethod
    def _validate_status(cls, v: str) -> str:
        return _status(v)


def content_type_param(v: str) -> str:
    """Validate a content type taken from the path or query string."""
    try:
        return _content_type(v)
    except ValueError as exc:
        raise DomainValidationError(message=str(exc), errors={"content_type": [str(exc)]})
