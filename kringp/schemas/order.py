"""Order Schemas — offers, submissions, status changes and ratings.

Invariants:
    - An offer targets exactly one of influencer_id / group_id
    - Amounts are non-negative; status travels as its numeric code (0..6)
    - completion_date is a day count or a date/datetime
    - A rating targets a group or a user, never both
"""

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field, model_validator


class OrderCreate(BaseModel):
    business_id: UUID
    influencer_id: UUID | None = None
    group_id: UUID | None = None
    title: str | None = Field(None, max_length=300)
    description: str | None = None
    completion_date: int | datetime | date | None = None
    total_amount: Decimal = Field(Decimal("0"), ge=0)
    discount_amount: Decimal = Field(Decimal("0"), ge=0)
    final_amount: Decimal | None = Field(None, ge=0)
    status: int = 0
    payment_reference: str | None = Field(None, max_length=100)

    @model_validator(mode="after")
    def one_target(self):
        if (self.influencer_id is None) == (self.group_id is None):
            raise ValueError("Exactly one of influencer_id or group_id is required")
        return self


class OrderSubmit(BaseModel):
    submitted_description: str | None = None
    social_media_link: str | None = Field(None, max_length=500)
    submitted_attachment: list[str] = Field(default_factory=list)


class OrderStatusUpdate(BaseModel):
    status: int
    reason: str | None = None
    payment_reference: str | None = Field(None, max_length=100)


class RatingCreate(BaseModel):
    order_id: UUID
    group_id: UUID | None = None
    rated_to_user_id: UUID | None = None
    rating: int
    review: str | None = None

    @model_validator(mode="after")
    def one_target(self):
        if self.group_id is None and self.rated_to_user_id is None:
            raise ValueError("Either group_id or rated_to_user_id is required")
        if self.group_id is not None and self.rated_to_user_id is not None:
            raise ValueError("Rate either a group or a user, not both")
        return self
