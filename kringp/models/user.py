"""User ORM — marketplace accounts (brands, creators, admins) and their satellite rows.

Invariants:
    - email_address is unique; password holds an argon2 hash (or the social-login sentinel)
    - referral_code is unique and generated at signup
    - At most one stored access token and one stats row per user
    - profile_completion is denormalized: recomputed whenever its inputs change

Design Decisions:
    - Subcategories, platforms, badges and stats eager-loaded (selectin): every
      user payload needs them and async sessions cannot lazy-load
    - ratings column caches the average of received ratings for listing/sorting
"""

import uuid
from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import (
    Boolean, Date, DateTime, ForeignKey, Integer, Numeric, String, Text,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from kringp.db.base import Base, IdMixin, Money, TimestampMixin, utcnow


def _fk(target: str, nullable: bool = True, ondelete: str = "SET NULL"):
    return mapped_column(
        UUID(as_uuid=True), ForeignKey(target, ondelete=ondelete),
        nullable=nullable, index=True,
    )


class User(IdMixin, TimestampMixin, Base):
    __tablename__ = "users"

    type: Mapped[str] = mapped_column(String(20), nullable=False, default="BUSINESS")
    name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    email_address: Mapped[str] = mapped_column(String(320), nullable=False, unique=True)
    password: Mapped[str | None] = mapped_column(String(255), nullable=True)
    login_type: Mapped[str] = mapped_column(String(20), nullable=False, default="NONE")
    social_id: Mapped[str | None] = mapped_column(String(255), nullable=True)

    country_id: Mapped[uuid.UUID | None] = _fk("countries.id")
    state_id: Mapped[uuid.UUID | None] = _fk("states.id")
    city_id: Mapped[uuid.UUID | None] = _fk("cities.id")
    brand_type_id: Mapped[uuid.UUID | None] = _fk("brand_types.id")

    user_image: Mapped[str | None] = mapped_column(String(500), nullable=True)
    contact_person_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    contact_person_phone_number: Mapped[str | None] = mapped_column(String(30), nullable=True)
    birth_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    gender: Mapped[str | None] = mapped_column(String(10), nullable=True, default="MALE")
    sample_work_link: Mapped[str | None] = mapped_column(String(500), nullable=True)
    about_you: Mapped[str | None] = mapped_column(Text, nullable=True)
    application_link: Mapped[str | None] = mapped_column(String(500), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    gst_number: Mapped[str | None] = mapped_column(String(30), nullable=True)

    referral_code: Mapped[str | None] = mapped_column(String(16), nullable=True, unique=True)
    referred_by_id: Mapped[uuid.UUID | None] = _fk("users.id")
    fcm_token: Mapped[str | None] = mapped_column(String(500), nullable=True)

    view_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    ratings: Mapped[Decimal] = mapped_column(
        Numeric(3, 2), nullable=False, default=Decimal("0"),
    )
    profile_completion: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    status: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    # Relationships
    subcategory_links: Mapped[list["UserSubCategory"]] = relationship(
        "UserSubCategory", back_populates="user",
        cascade="all, delete-orphan", lazy="selectin",
    )
    social_platforms: Mapped[list["SocialMediaPlatform"]] = relationship(
        "SocialMediaPlatform", back_populates="user",
        cascade="all, delete-orphan", lazy="selectin",
    )
    user_badges: Mapped[list["UserBadge"]] = relationship(
        "UserBadge", cascade="all, delete-orphan", lazy="selectin",
    )
    stats: Mapped["UserStats | None"] = relationship(
        "UserStats", uselist=False, cascade="all, delete-orphan", lazy="selectin",
    )
    country: Mapped["Country | None"] = relationship("Country", lazy="selectin")
    state: Mapped["State | None"] = relationship("State", lazy="selectin")
    city: Mapped["City | None"] = relationship("City", lazy="selectin")
    brand_type: Mapped["BrandType | None"] = relationship("BrandType", lazy="selectin")


class UserAuthToken(IdMixin, Base):
    """Latest issued access token; a token not stored here is revoked."""
    __tablename__ = "user_auth_tokens"

    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False, unique=True,
    )
    token: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow,
    )


class UserSubCategory(IdMixin, Base):
    __tablename__ = "user_sub_categories"
    __table_args__ = (UniqueConstraint("user_id", "subcategory_id"),)

    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    subcategory_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("sub_categories.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )

    user: Mapped["User"] = relationship("User", back_populates="subcategory_links")
    subcategory: Mapped["SubCategory"] = relationship("SubCategory", lazy="selectin")


class UserStats(IdMixin, Base):
    """Running totals maintained on order completion and withdrawal."""
    __tablename__ = "user_stats"

    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False, unique=True,
    )
    total_deals: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    on_time_delivery: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    repeat_clients: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_earnings: Mapped[Decimal] = mapped_column(Money, nullable=False, default=Decimal("0"))
    total_withdraw: Mapped[Decimal] = mapped_column(Money, nullable=False, default=Decimal("0"))
    average_value: Mapped[Decimal] = mapped_column(Money, nullable=False, default=Decimal("0"))
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow,
    )


class RecentView(IdMixin, Base):
    """Who looked at whose profile; one row per (viewer, viewed), bumped on revisit."""
    __tablename__ = "recent_views"
    __table_args__ = (UniqueConstraint("viewer_id", "viewed_user_id"),)

    viewer_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False,
    )
    viewed_user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False,
    )
    viewed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow,
    )

    viewed_user: Mapped["User"] = relationship(
        "User", foreign_keys=[viewed_user_id], lazy="selectin",
    )


class PasswordReset(IdMixin, Base):
    __tablename__ = "password_resets"

    email_address: Mapped[str] = mapped_column(String(320), nullable=False, unique=True)
    otp: Mapped[str] = mapped_column(String(6), nullable=False)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow,
    )
