from decimal import Decimal

from ninja import Schema
from pydantic import Field, field_validator

from src.heritage_sites.models import SiteCategory, SiteStatus


def _status(v: str | None) -> str | None:
    if v is None:
        return v
    status = SiteStatus.from_string(v)
    if status is None:
        raise ValueError(f"status must be one of {SiteStatus.values}")
    return status.value


def _category(v: str | None) -> str | None:
    if v is None or v == "":
        return v
    category = v.strip().upper()
    if category not in SiteCategory.values:
        raise ValueError(f"category must be one of {SiteCategory.values}")
    return category


class SiteCreatePayload(Schema):
    name: dict[str, str]
    description: dict[str, str] = Field(default_factory=dict)
    significance: dict[str, str] = Field(default_factory=dict)
    address: str = ""
    region: str = ""
    gps_latitude: Decimal | None = Field(default=None, ge=-90, le=90)
    gps_longitude: Decimal | None = Field(default=None, ge=-180, le=180)
    category: str = ""
    ownership_type: str = ""
    established_year: int | None = Field(default=None, ge=0, le=9999)
    contact_info: str = ""

    @field_validator("category")
    @classmethod
    def _validate_category(cls, v: str) -> str:
        return _category(v)


class SiteUpdatePayload(Schema):
    name: dict[str, str] | None = None
    description: dict[str, str] | None = None
    significance: dict[str, str] | None = None
    address: str | None = None
    region: str | None = None
    gps_latitude: Decimal | None = Field(default=None, ge=-90, le=90)
    gps_longitude: Decimal | None = Field(default=None, ge=-180, le=180)
    category: str | None = None
    ownership_type: str | None = None
    established_year: int | None = Field(default=None, ge=0, le=9999)
    contact_info: str | None = None

    @field_validator("category")
    @classmethod
    def _validate_category(cls, v: str | None) -> str | None:
        return _category(v)


class SiteStatusChangePayload(Schema):
    new_status: str
    reason: str = ""
    notes: str = ""

    @field_validator("new_status")
    @classmethod
    def _validate_status(cls, v: str) -> str:
        return _status(v)


class BulkStatusPayload(Schema):
    site_ids: list[str] = Field(min_length=1)
    new_status: str
    reason: str = ""
    notes: str = ""

    @field_validator("new_status")
    @classmethod
    def _validate_status(cls, v: str) -> str:
        return _status(v)


class AssignManagerPayload(Schema):
    user_id: str
    notes: str = ""


class SiteFilterParams(Schema):
    status: str | None = None
    category: str | None = None
    region: str | None = None
    search: str | None = None

    @field_validator("status")
    @classmethod
    def _validate_status(cls, v: str | None) -> str | None:
        return _status(v)

    @field_validator("category")
    @classmethod
    def _validate_category(cls, v: str | None) -> str | None:
        return _category(v)
