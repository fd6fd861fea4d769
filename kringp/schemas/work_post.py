"""Work Post Schemas — briefs published by businesses and the applications they receive.

Invariants:
    - List fields accept a JSON array or a comma-separated string; both normalize to a list
    - end_date, when both dates are given, is not before start_date
"""

from datetime import date
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field, field_validator, model_validator

from kringp.core.categories import split_list_field
from kringp.core.domain_types import ApplicationStatus

_LIST_FIELDS = ("deliverables", "platforms", "tags", "attachments")


class WorkPostFields(BaseModel):
    description: str | None = None
    deliverables: list[str] | str | None = None
    platforms: list[str] | str | None = None
    tags: list[str] | str | None = None
    attachments: list[str] | str | None = None
    budget: Decimal | None = Field(None, ge=0)
    start_date: date | None = None
    end_date: date | None = None
    is_draft: bool | None = None

    @field_validator(*_LIST_FIELDS)
    @classmethod
    def normalize_list(cls, v):
        return None if v is None else split_list_field(v)

    @model_validator(mode="after")
    def dates_in_order(self):
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("end_date cannot be before start_date")
        return self


class WorkPostCreate(WorkPostFields):
    title: str = Field(min_length=1, max_length=300)
    subcategory_id: UUID


class WorkPostUpdate(WorkPostFields):
    title: str | None = Field(None, min_length=1, max_length=300)
    subcategory_id: UUID | None = None


class ApplicationCreate(BaseModel):
    group_id: UUID | None = None
    offer_amount: Decimal | None = Field(None, ge=0)
    message: str | None = None


class ApplicationStatusUpdate(BaseModel):
    status: ApplicationStatus

    @field_validator("status")
    @classmethod
    def decided(cls, v: ApplicationStatus) -> ApplicationStatus:
        if v is ApplicationStatus.PENDING:
            raise ValueError("status must be ACCEPTED or REJECTED")
        return v
