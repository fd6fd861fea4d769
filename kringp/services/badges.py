"""Badge awarding — gathers BadgeFacts from the DB and grants newly earned badges.

Invariants:
    - Awarding is idempotent: an existing (user, badge) pair is never duplicated
    - Only rule codes passed in `consider` are evaluated (order events vs social events)
    - A rule code with no catalog row is skipped, not an error
    - Earnings-based rules read the current stats balance, not withdrawn money
"""

import logging
from decimal import Decimal
from typing import Iterable
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from kringp.core.badges import BadgeFacts, PlatformMetrics, eligible_badge_types
from kringp.models import Badge, Rating, SocialMediaPlatform, UserBadge, UserStats, User

logger = logging.getLogger(__name__)


async def collect_badge_facts(db: AsyncSession, user_id: UUID) -> BadgeFacts:
    user = await db.get(User, user_id)
    stats = (await db.execute(
        select(UserStats).where(UserStats.user_id == user_id),
    )).scalar_one_or_none()
    ratings_received = await db.scalar(
        select(func.count(Rating.id)).where(
            Rating.rated_to_user_id == user_id,
            Rating.rated_by_user_id != user_id,
        ),
    )
    platforms = (await db.execute(
        select(SocialMediaPlatform).where(
            SocialMediaPlatform.user_id == user_id,
            SocialMediaPlatform.status.is_(True),
        ),
    )).scalars().all()
    return BadgeFacts(
        completed_orders=stats.total_deals if stats else 0,
        on_time_orders=stats.on_time_delivery if stats else 0,
        rating=Decimal(user.ratings or 0) if user else Decimal("0"),
        ratings_received=ratings_received or 0,
        total_earnings=stats.total_earnings if stats else Decimal("0"),
        platforms=[
            PlatformMetrics(p.average_likes, p.average_comments, p.view_count)
            for p in platforms
        ],
    )


async def award_badges(
    db: AsyncSession, user_id: UUID, consider: Iterable[str],
) -> list[str]:
    """Grant every earned badge among `consider`; returns the newly granted codes."""
    facts = await collect_badge_facts(db, user_id)
    earned = eligible_badge_types(facts) & set(consider)
    if not earned:
        return []
    badges = (await db.execute(
        select(Badge).where(Badge.type.in_(earned)),
    )).scalars().all()
    owned = set((await db.execute(
        select(UserBadge.badge_id).where(UserBadge.user_id == user_id),
    )).scalars().all())
    granted = []
    for badge in badges:
        if badge.id in owned:
            continue
        db.add(UserBadge(user_id=user_id, badge_id=badge.id))
        granted.append(badge.type)
    missing = earned - {b.type for b in badges}
    if missing:
        logger.warning(
            f"Earned badge codes without catalog rows: {sorted(missing)}",
            extra={"user_id": str(user_id)},
        )
    if granted:
        logger.info(f"Awarded badges {granted}", extra={"user_id": str(user_id)})
        await db.flush()
    return sorted(granted)
