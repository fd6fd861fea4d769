"""Social media — linked creator accounts and their audience metrics.

Invariants:
    - One account per (user, platform) → 409 on a second link
    - Every change recomputes profile completion and re-evaluates the social badges
    - view_count is accepted on input but never returned
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from kringp.api.deps import get_current_user
from kringp.core.badges import SOCIAL_BADGES
from kringp.core.envelope import success
from kringp.core.errors import ConflictError, PermissionDeniedError
from kringp.infrastructure.database import get_db
from kringp.models import SocialMediaPlatform, User
from kringp.schemas.profile import SocialMediaCreate, SocialMediaMetrics
from kringp.services.badges import award_badges
from kringp.services.common import get_or_404
from kringp.services.serializers import social_platform_payload
from kringp.services.users import refresh_completion

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/social-media", tags=["social-media"])


async def _owned(db: AsyncSession, platform_id: UUID, user: User) -> SocialMediaPlatform:
    platform = await get_or_404(db, SocialMediaPlatform, platform_id, "Social media platform")
    if platform.user_id != user.id:
        raise PermissionDeniedError("You can only manage your own social media accounts")
    return platform


async def _after_change(db: AsyncSession, user_id: UUID) -> list[str]:
    await refresh_completion(db, user_id)
    return await award_badges(db, user_id, SOCIAL_BADGES)


@router.post("", status_code=status.HTTP_201_CREATED)
async def link_platform(
    body: SocialMediaCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    exists = await db.scalar(
        select(SocialMediaPlatform.id).where(
            SocialMediaPlatform.user_id == user.id,
            SocialMediaPlatform.platform == body.platform.value,
        ),
    )
    if exists:
        raise ConflictError(f"{body.platform.value} account is already linked")

    values = body.model_dump(exclude_none=True, exclude={"platform"})
    platform = SocialMediaPlatform(user_id=user.id, platform=body.platform.value, **values)
    db.add(platform)
    await db.flush()
    granted = await _after_change(db, user.id)
    await db.commit()
    await db.refresh(platform)
    logger.info(f"Linked {platform.platform}", extra={"user_id": str(user.id)})
    return success("Social media account linked successfully", {
        **social_platform_payload(platform),
        "badges_awarded": granted,
    })


@router.patch("/{platform_id}")
async def update_platform(
    platform_id: UUID,
    body: SocialMediaMetrics,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    platform = await _owned(db, platform_id, user)
    for field, value in body.model_dump(exclude_unset=True).items():
        if value is not None:
            setattr(platform, field, value)
    await db.flush()
    granted = await _after_change(db, user.id)
    await db.commit()
    await db.refresh(platform)
    return success("Social media account updated successfully", {
        **social_platform_payload(platform),
        "badges_awarded": granted,
    })


@router.delete("/{platform_id}")
async def unlink_platform(
    platform_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    platform = await _owned(db, platform_id, user)
    await db.delete(platform)
    await db.flush()
    await refresh_completion(db, user.id)
    await db.commit()
    return success("Social media account removed successfully")


@router.get("/users/{user_id}")
async def list_user_platforms(user_id: UUID, db: AsyncSession = Depends(get_db)):
    await get_or_404(db, User, user_id, "User")
    result = await db.execute(
        select(SocialMediaPlatform)
        .where(SocialMediaPlatform.user_id == user_id)
        .order_by(SocialMediaPlatform.created_at),
    )
    platforms = [social_platform_payload(p) for p in result.scalars().all()]
    return success("Social media accounts fetched successfully", {"platforms": platforms})
