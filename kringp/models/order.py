"""Order ORM — offers from a business to an influencer or a group, and their money trail.

Invariants:
    - Exactly one of influencer_id / group_id is set
    - status holds an OfferStatus name; clients see the numeric code
    - Earnings are written once, when the order reaches COMPLETED
    - Withdrawals are DEBIT rows against the user's total earnings

Design Decisions:
    - final_amount (after negotiation/discount) wins over total_amount when present
    - payment_reference is the gateway payment id used for refunds
"""

import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy import DateTime, ForeignKey, JSON, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from kringp.db.base import Base, IdMixin, Money, TimestampMixin


class Order(IdMixin, TimestampMixin, Base):
    __tablename__ = "orders"

    business_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    influencer_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True, index=True,
    )
    group_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("groups.id", ondelete="SET NULL"),
        nullable=True, index=True,
    )
    title: Mapped[str | None] = mapped_column(String(300), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    completion_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    total_amount: Mapped[Decimal] = mapped_column(Money, nullable=False, default=Decimal("0"))
    discount_amount: Mapped[Decimal] = mapped_column(Money, nullable=False, default=Decimal("0"))
    final_amount: Mapped[Decimal | None] = mapped_column(Money, nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="PENDING")
    payment_status: Mapped[str] = mapped_column(String(20), nullable=False, default="PENDING")
    payment_reference: Mapped[str | None] = mapped_column(String(100), nullable=True)
    submitted_description: Mapped[str | None] = mapped_column(Text, nullable=True)
    social_media_link: Mapped[str | None] = mapped_column(String(500), nullable=True)
    submitted_attachment: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    reason: Mapped[str | None] = mapped_column(Text, nullable=True)

    business: Mapped["User"] = relationship(
        "User", foreign_keys=[business_id], lazy="selectin",
    )
    influencer: Mapped["User | None"] = relationship(
        "User", foreign_keys=[influencer_id], lazy="selectin",
    )
    group: Mapped["Group | None"] = relationship("Group", lazy="selectin")

    @property
    def payable_amount(self) -> Decimal:
        return self.final_amount if self.final_amount is not None else self.total_amount


class Earning(IdMixin, TimestampMixin, Base):
    __tablename__ = "earnings"

    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    order_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("orders.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    group_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("groups.id", ondelete="SET NULL"), nullable=True,
    )
    business_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False,
    )
    amount: Mapped[Decimal] = mapped_column(Money, nullable=False)
    earning_amount: Mapped[Decimal] = mapped_column(Money, nullable=False)
    is_admin_share: Mapped[bool] = mapped_column(nullable=False, default=False)
    payment_status: Mapped[str] = mapped_column(String(20), nullable=False, default="COMPLETED")


class Withdrawal(IdMixin, TimestampMixin, Base):
    __tablename__ = "withdrawals"

    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    amount: Mapped[Decimal] = mapped_column(Money, nullable=False)
    transaction_type: Mapped[str] = mapped_column(String(10), nullable=False, default="DEBIT")
    payout_reference: Mapped[str | None] = mapped_column(String(100), nullable=True)
