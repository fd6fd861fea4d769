"""App Setting ORM — admin-editable key/value pairs (dashboard banner and friends)."""

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from kringp.db.base import Base, IdMixin, TimestampMixin


class AppSetting(IdMixin, TimestampMixin, Base):
    __tablename__ = "app_settings"

    slug: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    value: Mapped[str | None] = mapped_column(Text, nullable=True)
