"""Order services — participants, access checks and the completion side effects.

Invariants:
    - Participants: the influencer for solo orders; the group admin plus accepted
      members for group orders
    - Completion runs stats, earnings and badges in the caller's session; the
      caller commits once, so a failure leaves nothing half-written
    - The platform fee goes to the ADMIN account; no ADMIN account means completion fails

Design Decisions:
    - Repeat client is counted from earlier earnings rows with the same business,
      which covers both solo and group orders without walking group history
"""

import logging
from datetime import datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import distinct, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from kringp.core.badges import ORDER_BADGES
from kringp.core.domain_types import PaymentStatus, RequestStatus, UserType
from kringp.core.earnings import (
    EarningShare, apply_earning, is_on_time, next_stats, split_earnings,
)
from kringp.core.errors import BusinessRuleError, PermissionDeniedError
from kringp.models import Earning, Group, GroupInvite, Order, User
from kringp.services.badges import award_badges
from kringp.services.users import ensure_stats, stats_snapshot, store_stats

logger = logging.getLogger(__name__)


def participant_ids(order: Order) -> list[UUID]:
    if order.group_id and order.group is not None:
        return order.group.participant_ids()
    return [order.influencer_id] if order.influencer_id else []


async def participant_users(db: AsyncSession, order: Order) -> list[User]:
    ids = participant_ids(order)
    if not ids:
        return []
    result = await db.execute(select(User).where(User.id.in_(ids)))
    return list(result.scalars().all())


def can_view(order: Order, user: User) -> bool:
    return (
        user.type == UserType.ADMIN.value
        or order.business_id == user.id
        or user.id in participant_ids(order)
    )


def require_access(order: Order, user: User) -> None:
    if not can_view(order, user):
        raise PermissionDeniedError("You are not part of this order")


def visible_orders_filter(user_id: UUID):
    """WHERE clause for orders the user is party to (business, influencer or group)."""
    member_groups = select(GroupInvite.group_id).where(
        GroupInvite.invited_user_id == user_id,
        GroupInvite.request_status == RequestStatus.ACCEPTED.value,
        GroupInvite.status.is_(True),
    )
    admin_groups = select(Group.id).where(Group.admin_user_id == user_id)
    return (
        (Order.business_id == user_id)
        | (Order.influencer_id == user_id)
        | Order.group_id.in_(member_groups)
        | Order.group_id.in_(admin_groups)
    )


async def platform_admin(db: AsyncSession) -> User:
    result = await db.execute(
        select(User)
        .where(User.type == UserType.ADMIN.value)
        .order_by(User.created_at)
        .limit(1),
    )
    admin = result.scalar_one_or_none()
    if admin is None:
        raise BusinessRuleError("Admin user not found", "ADMIN_NOT_FOUND")
    return admin


async def _previous_completed_with_business(
    db: AsyncSession, user_id: UUID, order: Order,
) -> int:
    count = await db.scalar(
        select(func.count(distinct(Earning.order_id))).where(
            Earning.user_id == user_id,
            Earning.business_id == order.business_id,
            Earning.order_id != order.id,
            Earning.is_admin_share.is_(False),
        ),
    )
    return count or 0


async def complete_order(
    db: AsyncSession, order: Order, fee_rate: Decimal, now: datetime,
) -> list[EarningShare]:
    """Apply stats, earnings and badges for a freshly completed order."""
    participants = participant_ids(order)
    admin = await platform_admin(db)
    on_time = is_on_time(order.completion_date, now)

    for uid in participants:
        stats = await ensure_stats(db, uid)
        previous = await _previous_completed_with_business(db, uid, order)
        store_stats(stats, next_stats(stats_snapshot(stats), on_time, previous))

    shares = split_earnings(order.payable_amount, admin.id, participants, fee_rate)
    for share in shares:
        db.add(Earning(
            user_id=share.user_id,
            order_id=order.id,
            group_id=order.group_id,
            business_id=order.business_id,
            amount=order.payable_amount,
            earning_amount=share.amount,
            is_admin_share=share.is_admin_share,
            payment_status=PaymentStatus.COMPLETED.value,
        ))
        stats = await ensure_stats(db, share.user_id)
        store_stats(stats, apply_earning(stats_snapshot(stats), share.amount))
    await db.flush()

    for uid in participants:
        await award_badges(db, uid, ORDER_BADGES)

    logger.info(
        f"Order completed, {len(shares)} earning rows written",
        extra={"order_id": str(order.id)},
    )
    return shares


def share_for(shares: list[EarningShare], user_id: UUID) -> Decimal | None:
    for share in shares:
        if share.user_id == user_id and not share.is_admin_share:
            return share.amount
    return None
