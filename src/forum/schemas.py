import uuid

from ninja import Schema
from pydantic import Field, field_validator


def _required_text(v: str, field: str, max_length: int | None = None) -> str:
    v = (v or "").strip()
    if not v:
        raise ValueError(f"{field} is required")
    if max_length and len(v) > max_length:
        raise ValueError(f"{field} must be at most {max_length} characters")
    return v


class CategoryCreatePayload(Schema):
    name: str
    description: str = ""
    language: str | None = None
    is_public: bool = True

    @field_validator("name")
    @classmethod
    def _validate_name(cls, v: str) -> str:
        return _required_text(v, "name", 150)


class CategoryUpdatePayload(Schema):
    name: str | None = None
    description: str | None = None
    language: str | None = None
    is_public: bool | None = None


class TopicCreatePayload(Schema):
    category_id: uuid.UUID
    title: str
    content: str
    language: str | None = None
    is_public: bool = True

    @field_validator("title")
    @classmethod
    def _validate_title(cls, v: str) -> str:
        return _required_text(v, "title", 255)

    @field_validator("content")
    @classmethod
    def _validate_content(cls, v: str) -> str:
        return _required_text(v, "content")


class TopicUpdatePayload(Schema):
    title: str | None = None
    content: str | None = None
    language: str | None = None
    is_public: bool | None = None


class TopicFilterParams(Schema):
    category_id: uuid.UUID | None = None
    language: str | None = None
    search: str | None = None


class PostCreatePayload(Schema):
    topic_id: uuid.UUID
    content: str
    language: str | None = None
    parent_post_id: uuid.UUID | None = None

    @field_validator("content")
    @classmethod
    def _validate_content(cls, v: str) -> str:
        return _required_text(v, "content")


class PostUpdatePayload(Schema):
    content: str

    @field_validator("content")
    @classmethod
    def _validate_content(cls, v: str) -> str:
        return _required_text(v, "content")


class FlagPayload(Schema):
    reason: str = Field(default="", max_length=1000)
