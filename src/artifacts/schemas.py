import uuid

from ninja import Schema
from pydantic import Field, field_validator

from src.artifacts.models import ArtifactCategory


def _category(v: str | None) -> str | None:
    if v is None:
        return v
    category = v.strip().upper()
    if category not in ArtifactCategory.values:
        raise ValueError(f"category must be one of {ArtifactCategory.values}")
    return category


class ArtifactCreatePayload(Schema):
    name: dict[str, str]
    description: dict[str, str] = Field(default_factory=dict)
    category: str = ArtifactCategory.OTHER.value
    heritage_site_id: uuid.UUID
    is_public: bool = True

    @field_validator("category")
    @classmethod
    def _validate_category(cls, v: str) -> str:
        return _category(v)


class ArtifactUpdatePayload(Schema):
    name: dict[str, str] | None = None
    description: dict[str, str] | None = None
    category: str | None = None
    heritage_site_id: uuid.UUID | None = None
    is_public: bool | None = None

    @field_validator("category")
    @classmethod
    def _validate_category(cls, v: str | None) -> str | None:
        return _category(v)


class ArtifactFilterParams(Schema):
    search: str | None = None
    category: str | None = None
    site_id: uuid.UUID | None = None
    is_public: bool | None = None

    @field_validator("category")
    @classmethod
    def _validate_category(cls, v: str | None) -> str | None:
        return _category(v)
