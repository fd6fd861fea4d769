"""Rating services — keep the cached average on users in step with their ratings."""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from kringp.core.ratings import average_rating
from kringp.models import Rating, User


async def refresh_user_rating(db: AsyncSession, user_id: UUID):
    """Recompute and store a user's average received rating (self-ratings excluded)."""
    result = await db.execute(
        select(Rating.rating).where(
            Rating.rated_to_user_id == user_id,
            Rating.rated_by_user_id != user_id,
            Rating.status.is_(True),
        ),
    )
    average = average_rating(result.scalars().all())
    user = await db.get(User, user_id)
    if user is not None:
        user.ratings = average
    return average
