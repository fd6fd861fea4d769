"""Social Media ORM — linked creator accounts with audience metrics.

Invariants:
    - One row per (user, platform)
    - view_count is internal (engagement badge input) and never exposed publicly
"""

import uuid
from decimal import Decimal

from sqlalchemy import Boolean, ForeignKey, Integer, Numeric, String, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from kringp.db.base import Base, IdMixin, Money, TimestampMixin


class SocialMediaPlatform(IdMixin, TimestampMixin, Base):
    __tablename__ = "social_media_platforms"
    __table_args__ = (UniqueConstraint("user_id", "platform"),)

    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    platform: Mapped[str] = mapped_column(String(20), nullable=False)
    user_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    image: Mapped[str | None] = mapped_column(String(500), nullable=True)
    followers: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    engagement_rate: Mapped[Decimal] = mapped_column(
        Numeric(5, 2), nullable=False, default=Decimal("0"),
    )
    average_likes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    average_comments: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    average_shares: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    view_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    price: Mapped[Decimal] = mapped_column(Money, nullable=False, default=Decimal("0"))
    status: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    user: Mapped["User"] = relationship("User", back_populates="social_platforms")
