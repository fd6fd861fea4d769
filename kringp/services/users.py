"""User services — profile scoring, subcategory links and stats rows.

Invariants:
    - profile_completion is recomputed from a freshly loaded user (links and platforms current)
    - Subcategory id lists are validated as a whole: one unknown id rejects the request
    - ensure_stats() creates the stats row lazily, at most once per user
"""

import logging
from decimal import Decimal
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from kringp.core.clock import utcnow
from kringp.core.earnings import StatsSnapshot
from kringp.core.errors import ValidationFailedError
from kringp.core.profile_completion import ProfileFacts, profile_completion
from kringp.models import RecentView, SubCategory, User, UserStats, UserSubCategory
from kringp.services.common import reload

logger = logging.getLogger(__name__)


def profile_facts(user: User) -> ProfileFacts:
    return ProfileFacts(
        type=user.type,
        name=user.name,
        email_address=user.email_address,
        password=user.password,
        country_id=user.country_id,
        state_id=user.state_id,
        city_id=user.city_id,
        subcategory_count=len(user.subcategory_links),
        user_image=user.user_image,
        contact_person_name=user.contact_person_name,
        social_platform_count=len(user.social_platforms),
        birth_date=user.birth_date,
        gender=user.gender,
        sample_work_link=user.sample_work_link,
        about_you=user.about_you,
        brand_type_id=user.brand_type_id,
        application_link=user.application_link,
        description=user.description,
        contact_person_phone_number=user.contact_person_phone_number,
        gst_number=user.gst_number,
    )


async def refresh_completion(db: AsyncSession, user_id: UUID) -> User:
    """Reload the user, store its completion score and return it (uncommitted)."""
    user = await reload(db, User, user_id)
    user.profile_completion = profile_completion(profile_facts(user))
    return user


async def validate_subcategory_ids(db: AsyncSession, ids: list[UUID]) -> list[UUID]:
    unique_ids = list(dict.fromkeys(ids))
    if not unique_ids:
        return []
    result = await db.execute(
        select(SubCategory.id).where(SubCategory.id.in_(unique_ids)),
    )
    found = set(result.scalars().all())
    missing = [str(i) for i in unique_ids if i not in found]
    if missing:
        logger.warning(f"Rejected unknown subcategory ids: {missing}")
        raise ValidationFailedError(
            f"Invalid subcategory id(s): {', '.join(missing)}", "subcategory_ids",
        )
    return unique_ids


async def replace_subcategories(
    db: AsyncSession, user_id: UUID, subcategory_ids: list[UUID],
) -> None:
    await db.execute(delete(UserSubCategory).where(UserSubCategory.user_id == user_id))
    for sid in subcategory_ids:
        db.add(UserSubCategory(user_id=user_id, subcategory_id=sid))
    await db.flush()


async def ensure_stats(db: AsyncSession, user_id: UUID) -> UserStats:
    result = await db.execute(select(UserStats).where(UserStats.user_id == user_id))
    stats = result.scalar_one_or_none()
    if stats is None:
        stats = UserStats(
            user_id=user_id, total_deals=0, on_time_delivery=0, repeat_clients=0,
            total_earnings=Decimal("0"), total_withdraw=Decimal("0"),
            average_value=Decimal("0"),
        )
        db.add(stats)
        await db.flush()
    return stats


async def record_view(db: AsyncSession, viewer_id: UUID, viewed_user_id: UUID) -> None:
    """Remember that viewer opened a profile; revisits bump the timestamp."""
    if viewer_id == viewed_user_id:
        return
    result = await db.execute(
        select(RecentView).where(
            RecentView.viewer_id == viewer_id,
            RecentView.viewed_user_id == viewed_user_id,
        ),
    )
    view = result.scalar_one_or_none()
    if view is None:
        db.add(RecentView(viewer_id=viewer_id, viewed_user_id=viewed_user_id))
    else:
        view.viewed_at = utcnow()


def stats_snapshot(stats: UserStats) -> StatsSnapshot:
    return StatsSnapshot(
        total_deals=stats.total_deals,
        on_time_delivery=stats.on_time_delivery,
        repeat_clients=stats.repeat_clients,
        total_earnings=Decimal(stats.total_earnings),
        total_withdraw=Decimal(stats.total_withdraw),
        average_value=Decimal(stats.average_value),
    )


def store_stats(stats: UserStats, snap: StatsSnapshot) -> None:
    stats.total_deals = snap.total_deals
    stats.on_time_delivery = snap.on_time_delivery
    stats.repeat_clients = snap.repeat_clients
    stats.total_earnings = snap.total_earnings
    stats.total_withdraw = snap.total_withdraw
    stats.average_value = snap.average_value
