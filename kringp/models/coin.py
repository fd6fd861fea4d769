"""Coin ORM — reward coin ledger, per-user balance summary and coin cash-outs.

Invariants:
    - CoinTransaction amounts are signed: credits positive, purchases negative
    - ReferralCoinSummary is one row per user; net_amount = total_amount - withdraw_amount
    - Summary starts locked; the first cash-out bonus unlocks it
"""

import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy import Boolean, DateTime, ForeignKey, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from kringp.db.base import Base, IdMixin, Money, TimestampMixin


class CoinTransaction(IdMixin, TimestampMixin, Base):
    __tablename__ = "coin_transactions"

    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    amount: Mapped[Decimal] = mapped_column(Money, nullable=False)
    type: Mapped[str] = mapped_column(String(20), nullable=False)
    status: Mapped[str] = mapped_column(String(10), nullable=False, default="LOCKED")
    source: Mapped[str | None] = mapped_column(String(300), nullable=True)


class ReferralCoinSummary(IdMixin, TimestampMixin, Base):
    __tablename__ = "referral_coin_summaries"

    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False, unique=True,
    )
    total_amount: Mapped[Decimal] = mapped_column(Money, nullable=False, default=Decimal("0"))
    withdraw_amount: Mapped[Decimal] = mapped_column(Money, nullable=False, default=Decimal("0"))
    net_amount: Mapped[Decimal] = mapped_column(Money, nullable=False, default=Decimal("0"))
    unlocked: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    unlocked_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    redeem_email_sent: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)


class CoinWithdrawal(IdMixin, TimestampMixin, Base):
    __tablename__ = "coin_withdrawals"

    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    amount: Mapped[Decimal] = mapped_column(Money, nullable=False)
    payout_reference: Mapped[str | None] = mapped_column(String(100), nullable=True)
