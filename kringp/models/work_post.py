"""Work Post ORM — briefs published by brands and the applications they receive.

Invariants:
    - Drafts are visible to their owner only and cannot be applied to
    - One application per (post, influencer) for solo applications and per (post, group)
      for group applications
"""

import uuid
from datetime import date
from decimal import Decimal

from sqlalchemy import Boolean, Date, ForeignKey, JSON, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from kringp.db.base import Base, IdMixin, Money, TimestampMixin


class WorkPost(IdMixin, TimestampMixin, Base):
    __tablename__ = "work_posts"

    business_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    subcategory_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("sub_categories.id", ondelete="RESTRICT"),
        nullable=False, index=True,
    )
    title: Mapped[str] = mapped_column(String(300), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    deliverables: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    platforms: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    tags: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    attachments: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    budget: Mapped[Decimal | None] = mapped_column(Money, nullable=True)
    start_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    end_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    is_draft: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    business: Mapped["User"] = relationship("User", lazy="selectin")
    subcategory: Mapped["SubCategory"] = relationship("SubCategory", lazy="selectin")


class WorkPostApplication(IdMixin, TimestampMixin, Base):
    __tablename__ = "work_post_applications"

    work_post_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("work_posts.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    influencer_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    group_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("groups.id", ondelete="CASCADE"),
        nullable=True, index=True,
    )
    offer_amount: Mapped[Decimal | None] = mapped_column(Money, nullable=True)
    message: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(10), nullable=False, default="PENDING")

    work_post: Mapped["WorkPost"] = relationship("WorkPost", lazy="selectin")
    influencer: Mapped["User"] = relationship("User", lazy="selectin")
