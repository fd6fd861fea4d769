"""Support schemas — abuse reports, contact requests and daily tips."""

from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from kringp.core.domain_types import ReportedType


def _strip_required(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("cannot be empty or whitespace")
    return v


class AbuseReportCreate(BaseModel):
    reported_user_id: UUID
    reported_type: ReportedType
    reason: str | None = None


class ContactCreate(BaseModel):
    title: str = Field(min_length=1, max_length=300)
    description: str = Field(min_length=1)
    name: str | None = Field(None, max_length=200)
    email_address: str | None = Field(None, max_length=320)
    contact_number: str | None = Field(None, max_length=30)

    @field_validator("title", "description")
    @classmethod
    def not_blank(cls, v: str) -> str:
        return _strip_required(v)


class DailyTipCreate(BaseModel):
    title: str = Field(min_length=1, max_length=300)
    description: str | None = None
    image: str | None = Field(None, max_length=500)
    status: bool = True

    @field_validator("title")
    @classmethod
    def not_blank(cls, v: str) -> str:
        return _strip_required(v)


class DailyTipUpdate(BaseModel):
    title: str | None = Field(None, min_length=1, max_length=300)
    description: str | None = None
    image: str | None = Field(None, max_length=500)
    status: bool | None = None
