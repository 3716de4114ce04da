import uuid
from datetime import datetime

from ninja import Schema
from pydantic import Field, field_validator

from src.moderation.models import ModeratedContentType, ModerationActionType, ReportReason, ReportedContentType


def _choice(v: str | None, choices, field: str) -> str | None:
    if v is None:
        return v
    value = v.strip().upper()
    if value not in choices.values:
        raise ValueError(f"{field} must be one of {choices.values}")
    return value


class ModerationPayload(Schema):
    content_type: str
    content_id: uuid.UUID
    action: str
    reason: str = ""

    @field_validator("content_type")
    @classmethod
    def _validate_content_type(cls, v: str) -> str:
        return _choice(v, ModeratedContentType, "content_type")

    @field_validator("action")
    @classmethod
    def _validate_action(cls, v: str) -> str:
        return _choice(v, ModerationActionType, "action")


class BulkModerationPayload(Schema):
    content_type: str
    content_ids: list[uuid.UUID] = Field(min_length=1, max_length=100)
    action: str
    reason: str = ""

    @field_validator("content_type")
    @classmethod
    def _validate_content_type(cls, v: str) -> str:
        return _choice(v, ModeratedContentType, "content_type")

    @field_validator("action")
    @classmethod
    def _validate_action(cls, v: str) -> str:
        return _choice(v, ModerationActionType, "action")


class HistoryFilterParams(Schema):
    moderator_id: uuid.UUID | None = None
    content_type: str | None = None
    action_type: str | None = None
    since: datetime | None = None
    until: datetime | None = None


class ReportCreatePayload(Schema):
    content_type: str
    content_id: uuid.UUID
    reason: str
    description: str = Field(default="", max_length=2000)

    @field_validator("content_type")
    @classmethod
    def _validate_content_type(cls, v: str) -> str:
        return _choice(v, ReportedContentType, "content_type")

    @field_validator("reason")
    @classmethod
    def _validate_reason(cls, v: str) -> str:
        return _choice(v, ReportReason, "reason")


class ReportResolvePayload(Schema):
    action: str | None = None
    notes: str = ""

    @field_validator("action")
    @classmethod
    def _validate_action(cls, v: str | None) -> str | None:
        return _choice(v, ModerationActionType, "action")
