"""Category ORM — two-level taxonomy (category > subcategory) plus brand types.

Invariants:
    - Subcategory names are unique within their category
    - SubCategory.category is eager-loaded (selectin): formatting never lazy-loads
"""

import uuid

from sqlalchemy import ForeignKey, String, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from kringp.db.base import Base, IdMixin, TimestampMixin


class Category(IdMixin, TimestampMixin, Base):
    __tablename__ = "categories"

    name: Mapped[str] = mapped_column(String(120), nullable=False, unique=True)
    image: Mapped[str | None] = mapped_column(String(500), nullable=True)


class SubCategory(IdMixin, TimestampMixin, Base):
    __tablename__ = "sub_categories"
    __table_args__ = (UniqueConstraint("category_id", "name"),)

    name: Mapped[str] = mapped_column(String(120), nullable=False)
    category_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("categories.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )

    category: Mapped["Category"] = relationship("Category", lazy="selectin")


class BrandType(IdMixin, TimestampMixin, Base):
    __tablename__ = "brand_types"

    name: Mapped[str] = mapped_column(String(120), nullable=False, unique=True)
