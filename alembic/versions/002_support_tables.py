"""Support tables — abuse reports, contact requests, daily tips.

Revision ID: 002_support
Revises: 001_initial
Create Date: 2026-10-17

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID

revision: str = "002_support"
down_revision: Union[str, None] = "001_initial"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def _user_fk(name: str) -> sa.Column:
    return sa.Column(name, UUID(as_uuid=True), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False)


def upgrade() -> None:
    op.create_table(
        "abuse_reports",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        _user_fk("reported_by_id"),
        _user_fk("reported_user_id"),
        sa.Column("reported_type", sa.String(20), nullable=False),
        sa.Column("reason", sa.Text, nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_abuse_reports_reported_by_id", "abuse_reports", ["reported_by_id"])
    op.create_index("ix_abuse_reports_reported_user_id", "abuse_reports", ["reported_user_id"])

    op.create_table(
        "contact_requests",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        _user_fk("user_id"),
        sa.Column("name", sa.String(200), nullable=True),
        sa.Column("title", sa.String(300), nullable=False),
        sa.Column("description", sa.Text, nullable=False),
        sa.Column("email_address", sa.String(320), nullable=True),
        sa.Column("contact_number", sa.String(30), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_contact_requests_user_id", "contact_requests", ["user_id"])

    op.create_table(
        "daily_tips",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("title", sa.String(300), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("image", sa.String(500), nullable=True),
        sa.Column("status", sa.Boolean, nullable=False, server_default=sa.true()),
        *_timestamps(),
    )


def downgrade() -> None:
    for table in ("daily_tips", "contact_requests", "abuse_reports"):
        op.drop_table(table)
