"""Badges — the badge catalog and the badges a user holds."""

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from kringp.api.deps import page_params, require_admin
from kringp.core.envelope import success
from kringp.core.errors import ConflictError
from kringp.core.pagination import PageParams
from kringp.infrastructure.database import get_db
from kringp.models import Badge, User, UserBadge
from kringp.schemas.content import BadgeCreate
from kringp.services.common import get_or_404, paginate
from kringp.services.serializers import badge_payload

router = APIRouter(prefix="/api/v1/badges", tags=["badges"])


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_badge(
    body: BadgeCreate,
    _: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    if await db.scalar(select(Badge.id).where(Badge.type == body.type)):
        raise ConflictError(f"Badge type '{body.type}' already exists")
    badge = Badge(**body.model_dump())
    db.add(badge)
    await db.commit()
    await db.refresh(badge)
    return success("Badge created successfully", badge_payload(badge))


@router.get("")
async def list_badges(
    params: PageParams = Depends(page_params), db: AsyncSession = Depends(get_db),
):
    query = select(Badge).order_by(Badge.type)
    data = await paginate(db, query, params, "badges", badge_payload)
    return success("Badges fetched successfully", data)


@router.get("/users/{user_id}")
async def user_badges(user_id: UUID, db: AsyncSession = Depends(get_db)):
    await get_or_404(db, User, user_id, "User")
    result = await db.execute(
        select(UserBadge)
        .where(UserBadge.user_id == user_id)
        .order_by(UserBadge.awarded_at),
    )
    badges = [
        {**badge_payload(ub.badge), "awarded_at": ub.awarded_at}
        for ub in result.scalars().all()
    ]
    return success("User badges fetched successfully", {"badges": badges})
