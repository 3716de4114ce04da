import uuid

from ninja import Schema
from pydantic import Field, field_validator

from src.documents.models import DocumentType


def _document_type(v: str | None) -> str | None:
    if v is None:
        return v
    value = v.strip().upper()
    if value not in DocumentType.values:
        raise ValueError(f"document_type must be one of {DocumentType.values}")
    return value


def _tags(v: list[str] | None) -> list[str] | None:
    if v is None:
        return v
    return sorted({t.strip().lower() for t in v if t and t.strip()})


class DocumentCreatePayload(Schema):
    title: dict[str, str]
    description: dict[str, str] = Field(default_factory=dict)
    author: str = ""
    document_type: str = DocumentType.OTHER.value
    tags: list[str] = Field(default_factory=list)
    language: str | None = None
    heritage_site_id: uuid.UUID | None = None
    is_public: bool = False

    @field_validator("document_type")
    @classmethod
    def _validate_type(cls, v: str) -> str:
        return _document_type(v)

    @field_validator("tags")
    @classmethod
    def _validate_tags(cls, v: list[str]) -> list[str]:
        return _tags(v)


class DocumentUpdatePayload(Schema):
    title: dict[str, str] | None = None
    description: dict[str, str] | None = None
    author: str | None = None
    document_type: str | None = None
    tags: list[str] | None = None
    language: str | None = None
    heritage_site_id: uuid.UUID | None = None
    is_public: bool | None = None

    @field_validator("document_type")
    @classmethod
    def _validate_type(cls, v: str | None) -> str | None:
        return _document_type(v)

    @field_validator("tags")
    @classmethod
    def _validate_tags(cls, v: list[str] | None) -> list[str] | None:
        return _tags(v)


class DocumentFilterParams(Schema):
    document_type: str | None = None
    language: str | None = None
    tag: str | None = None
    site_id: uuid.UUID | None = None
    search: str | None = None
