"""Location ORM — countries, states and cities referenced by user profiles.

Invariants:
    - State belongs to one country, city to one state
    - Names are unique within their parent
"""

import uuid

from sqlalchemy import ForeignKey, String, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from kringp.db.base import Base, IdMixin, TimestampMixin


class Country(IdMixin, TimestampMixin, Base):
    __tablename__ = "countries"

    name: Mapped[str] = mapped_column(String(120), nullable=False, unique=True)
    code: Mapped[str | None] = mapped_column(String(8), nullable=True)


class State(IdMixin, TimestampMixin, Base):
    __tablename__ = "states"
    __table_args__ = (UniqueConstraint("country_id", "name"),)

    name: Mapped[str] = mapped_column(String(120), nullable=False)
    country_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("countries.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )


class City(IdMixin, TimestampMixin, Base):
    __tablename__ = "cities"
    __table_args__ = (UniqueConstraint("state_id", "name"),)

    name: Mapped[str] = mapped_column(String(120), nullable=False)
    state_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("states.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
