"""Initial schema — users, catalog, groups, orders, wallet, rewards, work posts.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-17

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

MONEY = sa.Numeric(12, 2)


def _id() -> sa.Column:
    return sa.Column("id", UUID(as_uuid=True), primary_key=True)


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def _fk(name: str, target: str, ondelete: str = "CASCADE", nullable: bool = False) -> sa.Column:
    return sa.Column(name, UUID(as_uuid=True), sa.ForeignKey(target, ondelete=ondelete), nullable=nullable)


def upgrade() -> None:
    # ─── Reference data ──────────────────────────────────────────
    op.create_table(
        "countries", _id(),
        sa.Column("name", sa.String(120), nullable=False, unique=True),
        sa.Column("code", sa.String(8), nullable=True),
        *_timestamps(),
    )
    op.create_table(
        "states", _id(),
        sa.Column("name", sa.String(120), nullable=False),
        _fk("country_id", "countries.id"),
        *_timestamps(),
        sa.UniqueConstraint("country_id", "name"),
    )
    op.create_table(
        "cities", _id(),
        sa.Column("name", sa.String(120), nullable=False),
        _fk("state_id", "states.id"),
        *_timestamps(),
        sa.UniqueConstraint("state_id", "name"),
    )
    op.create_table(
        "categories", _id(),
        sa.Column("name", sa.String(120), nullable=False, unique=True),
        sa.Column("image", sa.String(500), nullable=True),
        *_timestamps(),
    )
    op.create_table(
        "sub_categories", _id(),
        sa.Column("name", sa.String(120), nullable=False),
        _fk("category_id", "categories.id"),
        *_timestamps(),
        sa.UniqueConstraint("category_id", "name"),
    )
    op.create_table(
        "brand_types", _id(),
        sa.Column("name", sa.String(120), nullable=False, unique=True),
        *_timestamps(),
    )
    for table, column in (
        ("states", "country_id"), ("cities", "state_id"), ("sub_categories", "category_id"),
    ):
        op.create_index(f"ix_{table}_{column}", table, [column])

    # ─── Users ───────────────────────────────────────────────────
    op.create_table(
        "users", _id(),
        sa.Column("type", sa.String(20), nullable=False, server_default="BUSINESS"),
        sa.Column("name", sa.String(200), nullable=True),
        sa.Column("email_address", sa.String(320), nullable=False, unique=True),
        sa.Column("password", sa.String(255), nullable=True),
        sa.Column("login_type", sa.String(20), nullable=False, server_default="NONE"),
        sa.Column("social_id", sa.String(255), nullable=True),
        _fk("country_id", "countries.id", "SET NULL", True),
        _fk("state_id", "states.id", "SET NULL", True),
        _fk("city_id", "cities.id", "SET NULL", True),
        _fk("brand_type_id", "brand_types.id", "SET NULL", True),
        sa.Column("user_image", sa.String(500), nullable=True),
        sa.Column("contact_person_name", sa.String(200), nullable=True),
        sa.Column("contact_person_phone_number", sa.String(30), nullable=True),
        sa.Column("birth_date", sa.Date, nullable=True),
        sa.Column("gender", sa.String(10), nullable=True, server_default="MALE"),
        sa.Column("sample_work_link", sa.String(500), nullable=True),
        sa.Column("about_you", sa.Text, nullable=True),
        sa.Column("application_link", sa.String(500), nullable=True),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("gst_number", sa.String(30), nullable=True),
        sa.Column("referral_code", sa.String(16), nullable=True, unique=True),
        _fk("referred_by_id", "users.id", "SET NULL", True),
        sa.Column("fcm_token", sa.String(500), nullable=True),
        sa.Column("view_count", sa.Integer, nullable=False, server_default="0"),
        sa.Column("ratings", sa.Numeric(3, 2), nullable=False, server_default="0"),
        sa.Column("profile_completion", sa.Integer, nullable=False, server_default="0"),
        sa.Column("status", sa.Boolean, nullable=False, server_default="true"),
        *_timestamps(),
    )
    for column in ("country_id", "state_id", "city_id", "brand_type_id", "referred_by_id"):
        op.create_index(f"ix_users_{column}", "users", [column])

    op.create_table(
        "user_auth_tokens", _id(),
        sa.Column("user_id", UUID(as_uuid=True), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True),
        sa.Column("token", sa.Text, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_table(
        "user_sub_categories", _id(),
        _fk("user_id", "users.id"),
        _fk("subcategory_id", "sub_categories.id"),
        sa.UniqueConstraint("user_id", "subcategory_id"),
    )
    op.create_index("ix_user_sub_categories_user_id", "user_sub_categories", ["user_id"])
    op.create_table(
        "user_stats", _id(),
        sa.Column("user_id", UUID(as_uuid=True), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True),
        sa.Column("total_deals", sa.Integer, nullable=False, server_default="0"),
        sa.Column("on_time_delivery", sa.Integer, nullable=False, server_default="0"),
        sa.Column("repeat_clients", sa.Integer, nullable=False, server_default="0"),
        sa.Column("total_earnings", MONEY, nullable=False, server_default="0"),
        sa.Column("total_withdraw", MONEY, nullable=False, server_default="0"),
        sa.Column("average_value", MONEY, nullable=False, server_default="0"),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_table(
        "recent_views", _id(),
        _fk("viewer_id", "users.id"),
        _fk("viewed_user_id", "users.id"),
        sa.Column("viewed_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("viewer_id", "viewed_user_id"),
    )
    op.create_table(
        "password_resets", _id(),
        sa.Column("email_address", sa.String(320), nullable=False, unique=True),
        sa.Column("otp", sa.String(6), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("verified", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    # ─── Profile extras ──────────────────────────────────────────
    op.create_table(
        "social_media_platforms", _id(),
        _fk("user_id", "users.id"),
        sa.Column("platform", sa.String(20), nullable=False),
        sa.Column("user_name", sa.String(200), nullable=True),
        sa.Column("image", sa.String(500), nullable=True),
        sa.Column("followers", sa.Integer, nullable=False, server_default="0"),
        sa.Column("engagement_rate", sa.Numeric(5, 2), nullable=False, server_default="0"),
        sa.Column("average_likes", sa.Integer, nullable=False, server_default="0"),
        sa.Column("average_comments", sa.Integer, nullable=False, server_default="0"),
        sa.Column("average_shares", sa.Integer, nullable=False, server_default="0"),
        sa.Column("view_count", sa.Integer, nullable=False, server_default="0"),
        sa.Column("price", MONEY, nullable=False, server_default="0"),
        sa.Column("status", sa.Boolean, nullable=False, server_default="true"),
        *_timestamps(),
        sa.UniqueConstraint("user_id", "platform"),
    )
    op.create_table(
        "bank_details", _id(),
        _fk("user_id", "users.id"),
        sa.Column("account_holder_name", sa.String(200), nullable=False),
        sa.Column("account_number", sa.Text, nullable=False),
        sa.Column("ifsc_code", sa.String(20), nullable=False),
        sa.Column("bank_name", sa.String(200), nullable=True),
        sa.Column("account_type", sa.String(20), nullable=True),
        sa.Column("status", sa.Boolean, nullable=False, server_default="true"),
        *_timestamps(),
    )
    op.create_table(
        "badges", _id(),
        sa.Column("type", sa.String(10), nullable=False, unique=True),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("image", sa.String(500), nullable=True),
        sa.Column("description", sa.Text, nullable=True),
        *_timestamps(),
    )
    op.create_table(
        "user_badges", _id(),
        _fk("user_id", "users.id"),
        _fk("badge_id", "badges.id"),
        sa.Column("awarded_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("user_id", "badge_id"),
    )
    for table in ("social_media_platforms", "bank_details", "user_badges"):
        op.create_index(f"ix_{table}_user_id", table, ["user_id"])

    # ─── Groups and orders ───────────────────────────────────────
    op.create_table(
        "groups", _id(),
        sa.Column("group_name", sa.String(200), nullable=False, unique=True),
        sa.Column("group_image", sa.String(500), nullable=True),
        sa.Column("group_bio", sa.Text, nullable=True),
        sa.Column("visibility", sa.String(10), nullable=False, server_default="PUBLIC"),
        sa.Column("subcategory_ids", sa.JSON, nullable=False),
        sa.Column("social_platforms", sa.JSON, nullable=False),
        _fk("admin_user_id", "users.id"),
        sa.Column("status", sa.Boolean, nullable=False, server_default="true"),
        *_timestamps(),
    )
    op.create_index("ix_groups_admin_user_id", "groups", ["admin_user_id"])
    op.create_table(
        "group_invites", _id(),
        _fk("group_id", "groups.id"),
        _fk("invited_user_id", "users.id"),
        sa.Column("request_status", sa.String(10), nullable=False, server_default="PENDING"),
        sa.Column("status", sa.Boolean, nullable=False, server_default="true"),
        *_timestamps(),
        sa.UniqueConstraint("group_id", "invited_user_id"),
    )
    op.create_index("ix_group_invites_group_id", "group_invites", ["group_id"])
    op.create_index("ix_group_invites_invited_user_id", "group_invites", ["invited_user_id"])

    op.create_table(
        "orders", _id(),
        _fk("business_id", "users.id"),
        _fk("influencer_id", "users.id", "SET NULL", True),
        _fk("group_id", "groups.id", "SET NULL", True),
        sa.Column("title", sa.String(300), nullable=True),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("completion_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("total_amount", MONEY, nullable=False, server_default="0"),
        sa.Column("discount_amount", MONEY, nullable=False, server_default="0"),
        sa.Column("final_amount", MONEY, nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="PENDING"),
        sa.Column("payment_status", sa.String(20), nullable=False, server_default="PENDING"),
        sa.Column("payment_reference", sa.String(100), nullable=True),
        sa.Column("submitted_description", sa.Text, nullable=True),
        sa.Column("social_media_link", sa.String(500), nullable=True),
        sa.Column("submitted_attachment", sa.JSON, nullable=False),
        sa.Column("reason", sa.Text, nullable=True),
        *_timestamps(),
    )
    for column in ("business_id", "influencer_id", "group_id"):
        op.create_index(f"ix_orders_{column}", "orders", [column])

    op.create_table(
        "earnings", _id(),
        _fk("user_id", "users.id"),
        _fk("order_id", "orders.id"),
        _fk("group_id", "groups.id", "SET NULL", True),
        _fk("business_id", "users.id"),
        sa.Column("amount", MONEY, nullable=False),
        sa.Column("earning_amount", MONEY, nullable=False),
        sa.Column("is_admin_share", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("payment_status", sa.String(20), nullable=False, server_default="COMPLETED"),
        *_timestamps(),
    )
    op.create_index("ix_earnings_user_id", "earnings", ["user_id"])
    op.create_index("ix_earnings_order_id", "earnings", ["order_id"])
    op.create_table(
        "withdrawals", _id(),
        _fk("user_id", "users.id"),
        sa.Column("amount", MONEY, nullable=False),
        sa.Column("transaction_type", sa.String(10), nullable=False, server_default="DEBIT"),
        sa.Column("payout_reference", sa.String(100), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_withdrawals_user_id", "withdrawals", ["user_id"])

    op.create_table(
        "ratings", _id(),
        _fk("order_id", "orders.id"),
        _fk("group_id", "groups.id", "CASCADE", True),
        _fk("rated_by_user_id", "users.id"),
        _fk("rated_to_user_id", "users.id", "CASCADE", True),
        sa.Column("type_to_user", sa.String(20), nullable=False),
        sa.Column("rating", sa.Integer, nullable=False),
        sa.Column("review", sa.Text, nullable=True),
        sa.Column("status", sa.Boolean, nullable=False, server_default="true"),
        *_timestamps(),
    )
    for column in ("order_id", "group_id", "rated_by_user_id", "rated_to_user_id"):
        op.create_index(f"ix_ratings_{column}", "ratings", [column])

    op.create_table(
        "notifications", _id(),
        _fk("user_id", "users.id"),
        sa.Column("title", sa.String(300), nullable=False),
        sa.Column("body", sa.Text, nullable=False),
        sa.Column("type", sa.String(40), nullable=False),
        _fk("order_id", "orders.id", "SET NULL", True),
        sa.Column("status", sa.String(10), nullable=False, server_default="SENT"),
        sa.Column("error", sa.Text, nullable=True),
        sa.Column("is_read", sa.Boolean, nullable=False, server_default="false"),
        *_timestamps(),
    )
    op.create_index("ix_notifications_user_id", "notifications", ["user_id"])

    # ─── Coins and rewards ───────────────────────────────────────
    op.create_table(
        "coin_transactions", _id(),
        _fk("user_id", "users.id"),
        sa.Column("amount", MONEY, nullable=False),
        sa.Column("type", sa.String(20), nullable=False),
        sa.Column("status", sa.String(10), nullable=False, server_default="LOCKED"),
        sa.Column("source", sa.String(300), nullable=True),
        *_timestamps(),
    )
    op.create_table(
        "referral_coin_summaries", _id(),
        sa.Column("user_id", UUID(as_uuid=True), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True),
        sa.Column("total_amount", MONEY, nullable=False, server_default="0"),
        sa.Column("withdraw_amount", MONEY, nullable=False, server_default="0"),
        sa.Column("net_amount", MONEY, nullable=False, server_default="0"),
        sa.Column("unlocked", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("unlocked_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("redeem_email_sent", sa.Boolean, nullable=False, server_default="false"),
        *_timestamps(),
    )
    op.create_table(
        "coin_withdrawals", _id(),
        _fk("user_id", "users.id"),
        sa.Column("amount", MONEY, nullable=False),
        sa.Column("payout_reference", sa.String(100), nullable=True),
        *_timestamps(),
    )
    for table in ("coin_transactions", "coin_withdrawals"):
        op.create_index(f"ix_{table}_user_id", table, ["user_id"])

    op.create_table(
        "products", _id(),
        sa.Column("product_code", sa.String(30), nullable=False, unique=True),
        sa.Column("title", sa.String(300), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("images", sa.JSON, nullable=False),
        sa.Column("coins", MONEY, nullable=False, server_default="0"),
        sa.Column("status", sa.Boolean, nullable=False, server_default="true"),
        *_timestamps(),
    )
    op.create_table(
        "product_purchases", _id(),
        _fk("user_id", "users.id"),
        _fk("product_id", "products.id"),
        sa.Column("coins", MONEY, nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="PENDING"),
        sa.Column("name", sa.String(200), nullable=True),
        sa.Column("phone_number", sa.String(30), nullable=True),
        sa.Column("address_line1", sa.String(300), nullable=False),
        sa.Column("address_line2", sa.String(300), nullable=True),
        sa.Column("city", sa.String(120), nullable=True),
        sa.Column("state", sa.String(120), nullable=True),
        sa.Column("pincode", sa.String(12), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_product_purchases_user_id", "product_purchases", ["user_id"])
    op.create_index("ix_product_purchases_product_id", "product_purchases", ["product_id"])

    # ─── Work posts and settings ─────────────────────────────────
    op.create_table(
        "work_posts", _id(),
        _fk("business_id", "users.id"),
        _fk("subcategory_id", "sub_categories.id", "RESTRICT"),
        sa.Column("title", sa.String(300), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("deliverables", sa.JSON, nullable=False),
        sa.Column("platforms", sa.JSON, nullable=False),
        sa.Column("tags", sa.JSON, nullable=False),
        sa.Column("attachments", sa.JSON, nullable=False),
        sa.Column("budget", MONEY, nullable=True),
        sa.Column("start_date", sa.Date, nullable=True),
        sa.Column("end_date", sa.Date, nullable=True),
        sa.Column("is_draft", sa.Boolean, nullable=False, server_default="false"),
        *_timestamps(),
    )
    op.create_index("ix_work_posts_business_id", "work_posts", ["business_id"])
    op.create_index("ix_work_posts_subcategory_id", "work_posts", ["subcategory_id"])
    op.create_table(
        "work_post_applications", _id(),
        _fk("work_post_id", "work_posts.id"),
        _fk("influencer_id", "users.id"),
        _fk("group_id", "groups.id", "CASCADE", True),
        sa.Column("offer_amount", MONEY, nullable=True),
        sa.Column("message", sa.Text, nullable=True),
        sa.Column("status", sa.String(10), nullable=False, server_default="PENDING"),
        *_timestamps(),
    )
    for column in ("work_post_id", "influencer_id", "group_id"):
        op.create_index(f"ix_work_post_applications_{column}", "work_post_applications", [column])

    op.create_table(
        "app_settings", _id(),
        sa.Column("slug", sa.String(100), nullable=False, unique=True),
        sa.Column("value", sa.Text, nullable=True),
        *_timestamps(),
    )


def downgrade() -> None:
    for table in (
        "app_settings", "work_post_applications", "work_posts",
        "product_purchases", "products", "coin_withdrawals",
        "referral_coin_summaries", "coin_transactions", "notifications",
        "ratings", "withdrawals", "earnings", "orders", "group_invites",
        "groups", "user_badges", "badges", "bank_details",
        "social_media_platforms", "password_resets", "recent_views",
        "user_stats", "user_sub_categories", "user_auth_tokens", "users",
        "brand_types", "sub_categories", "categories", "cities", "states",
        "countries",
    ):
        op.drop_table(table)
