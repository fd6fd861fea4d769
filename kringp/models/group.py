"""Group ORM — creator collectives that take offers together.

Invariants:
    - group_name is globally unique
    - The admin owns the group; members are invites with request_status ACCEPTED
    - One invite per (group, user)

Design Decisions:
    - subcategory_ids as JSON list: groups are filtered by owner/member, never
      by subcategory, so a join table buys nothing
"""

import uuid

from sqlalchemy import Boolean, ForeignKey, JSON, String, Text, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from kringp.db.base import Base, IdMixin, TimestampMixin


class Group(IdMixin, TimestampMixin, Base):
    __tablename__ = "groups"

    group_name: Mapped[str] = mapped_column(String(200), nullable=False, unique=True)
    group_image: Mapped[str | None] = mapped_column(String(500), nullable=True)
    group_bio: Mapped[str | None] = mapped_column(Text, nullable=True)
    visibility: Mapped[str] = mapped_column(String(10), nullable=False, default="PUBLIC")
    subcategory_ids: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    social_platforms: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    admin_user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    status: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    admin: Mapped["User"] = relationship("User", lazy="selectin")
    invites: Mapped[list["GroupInvite"]] = relationship(
        "GroupInvite", back_populates="group",
        cascade="all, delete-orphan", lazy="selectin",
    )

    def member_ids(self) -> list[uuid.UUID]:
        """Accepted members, excluding the admin."""
        return [
            i.invited_user_id for i in self.invites
            if i.request_status == "ACCEPTED" and i.status
        ]

    def participant_ids(self) -> list[uuid.UUID]:
        """Admin first, then accepted members."""
        return list(dict.fromkeys([self.admin_user_id, *self.member_ids()]))


class GroupInvite(IdMixin, TimestampMixin, Base):
    __tablename__ = "group_invites"
    __table_args__ = (UniqueConstraint("group_id", "invited_user_id"),)

    group_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("groups.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    invited_user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    request_status: Mapped[str] = mapped_column(String(10), nullable=False, default="PENDING")
    status: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    group: Mapped["Group"] = relationship("Group", back_populates="invites")
    invited_user: Mapped["User"] = relationship("User", lazy="selectin")
