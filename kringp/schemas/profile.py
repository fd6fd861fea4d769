"""Profile Schemas — linked social accounts and payout bank details.

Invariants:
    - Metrics are non-negative; engagement_rate is a percentage (0..100)
    - Account numbers are digits only (6..20); IFSC is 11 chars, uppercased
"""

from decimal import Decimal

from pydantic import BaseModel, Field, field_validator

from kringp.core.domain_types import Platform


class SocialMediaMetrics(BaseModel):
    user_name: str | None = Field(None, max_length=200)
    image: str | None = Field(None, max_length=500)
    followers: int | None = Field(None, ge=0)
    engagement_rate: Decimal | None = Field(None, ge=0, le=100)
    average_likes: int | None = Field(None, ge=0)
    average_comments: int | None = Field(None, ge=0)
    average_shares: int | None = Field(None, ge=0)
    view_count: int | None = Field(None, ge=0)
    price: Decimal | None = Field(None, ge=0)
    status: bool | None = None


class SocialMediaCreate(SocialMediaMetrics):
    platform: Platform


class BankDetailCreate(BaseModel):
    account_holder_name: str = Field(min_length=1, max_length=200)
    account_number: str = Field(pattern=r"^\d{6,20}$")
    ifsc_code: str = Field(min_length=11, max_length=11)
    bank_name: str | None = Field(None, max_length=200)
    account_type: str | None = Field(None, max_length=20)

    @field_validator("ifsc_code")
    @classmethod
    def upper_ifsc(cls, v: str) -> str:
        return v.strip().upper()


class BankDetailUpdate(BaseModel):
    account_holder_name: str | None = Field(None, min_length=1, max_length=200)
    account_number: str | None = Field(None, pattern=r"^\d{6,20}$")
    ifsc_code: str | None = Field(None, min_length=11, max_length=11)
    bank_name: str | None = Field(None, max_length=200)
    account_type: str | None = Field(None, max_length=20)

    @field_validator("ifsc_code")
    @classmethod
    def upper_ifsc(cls, v: str | None) -> str | None:
        return v.strip().upper() if v is not None else v
