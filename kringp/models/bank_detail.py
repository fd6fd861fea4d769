"""Bank Detail ORM — payout destination for earnings and coin withdrawals.

Invariants:
    - account_number is Fernet ciphertext, never plaintext
    - Payouts and offer creation require a row with status=True
"""

import uuid

from sqlalchemy import Boolean, ForeignKey, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from kringp.db.base import Base, IdMixin, TimestampMixin


class BankDetail(IdMixin, TimestampMixin, Base):
    __tablename__ = "bank_details"

    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    account_holder_name: Mapped[str] = mapped_column(String(200), nullable=False)
    account_number: Mapped[str] = mapped_column(Text, nullable=False)
    ifsc_code: Mapped[str] = mapped_column(String(20), nullable=False)
    bank_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    account_type: Mapped[str | None] = mapped_column(String(20), nullable=True)
    status: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
