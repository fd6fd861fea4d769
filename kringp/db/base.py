"""SQLAlchemy Declarative Base — shared base class and column helpers for all ORM models.

Invariants:
    - All models inherit from Base
    - Base is the single source of truth for table metadata
    - Every table has a UUID primary key and a timezone-aware created_at

Design Decisions:
    - Base lives apart from the models so they can import it without cycles
    - Money and coins use Numeric(12, 2): Decimal end-to-end, no float drift
"""

import uuid
from datetime import datetime

from sqlalchemy import DateTime, Numeric
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from kringp.core.clock import utcnow

Money = Numeric(12, 2)


class Base(DeclarativeBase):
    """Base class for all KringP ORM models."""
    pass


class IdMixin:
    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )


class TimestampMixin:
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow,
    )
