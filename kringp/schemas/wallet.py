"""Wallet Schemas — cash withdrawals, coin withdrawals, coin credits and product redemption."""

from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field

from kringp.core.domain_types import PurchaseStatus


class WithdrawRequest(BaseModel):
    amount: Decimal


class CoinCreditRequest(BaseModel):
    user_id: UUID
    amount: Decimal = Field(gt=0)
    source: str | None = Field(None, max_length=200)
    unlock: bool = False


class ProductCreate(BaseModel):
    title: str = Field(min_length=1, max_length=300)
    description: str | None = None
    images: list[str] = Field(default_factory=list)
    coins: Decimal = Field(Decimal("0"), ge=0)
    status: bool = True


class ProductUpdate(BaseModel):
    title: str | None = Field(None, min_length=1, max_length=300)
    description: str | None = None
    images: list[str] | None = None
    coins: Decimal | None = Field(None, ge=0)
    status: bool | None = None


class PurchaseCreate(BaseModel):
    product_id: UUID
    name: str | None = Field(None, max_length=200)
    phone_number: str | None = Field(None, max_length=30)
    address_line1: str = Field(min_length=1, max_length=300)
    address_line2: str | None = Field(None, max_length=300)
    city: str | None = Field(None, max_length=120)
    state: str | None = Field(None, max_length=120)
    pincode: str | None = Field(None, max_length=12)


class PurchaseStatusUpdate(BaseModel):
    status: PurchaseStatus
