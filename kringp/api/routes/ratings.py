"""Ratings — 1..5 star reviews after an order, for a group or a single user.

Invariants:
    - Only parties to the order may rate, and nobody rates themselves
    - A group rating fans out: one GROUP row plus one INFLUENCER row per admin/member
    - One GROUP rating per (rater, order); duplicate user ratings are skipped
    - Every rated user's cached average is recomputed in the same transaction
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from kringp.api.deps import get_current_user, page_params
from kringp.core.badges import ORDER_BADGES
from kringp.core.domain_types import RatingTarget
from kringp.core.envelope import success
from kringp.core.errors import BusinessRuleError, ValidationFailedError
from kringp.core.pagination import PageParams, paginate_items
from kringp.core.ratings import (
    average_rating, check_rating_value, rated_by_type, rating_targets,
)
from kringp.infrastructure.database import get_db
from kringp.models import Group, Order, Rating, User
from kringp.schemas.order import RatingCreate
from kringp.services.badges import award_badges
from kringp.services.common import get_or_404, paginate
from kringp.services.groups import format_group
from kringp.services.orders import participant_ids, require_access
from kringp.services.ratings import refresh_user_rating
from kringp.services.serializers import rating_payload, user_brief

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/ratings", tags=["ratings"])


async def _rated_ids(db: AsyncSession, rater_id: UUID, order_id: UUID) -> set:
    result = await db.execute(
        select(Rating.rated_to_user_id).where(
            Rating.rated_by_user_id == rater_id,
            Rating.order_id == order_id,
            Rating.rated_to_user_id.is_not(None),
        ),
    )
    return set(result.scalars().all())


async def _group_targets(
    db: AsyncSession, user: User, order: Order, group_id: UUID,
) -> list[tuple[RatingTarget, UUID | None]]:
    group = await get_or_404(db, Group, group_id, "Group")
    if order.group_id != group.id:
        raise ValidationFailedError("Order does not belong to this group", "group_id")
    already_rated_group = await db.scalar(
        select(Rating.id).where(
            Rating.rated_by_user_id == user.id,
            Rating.order_id == order.id,
            Rating.type_to_user == RatingTarget.GROUP.value,
        ),
    )
    if already_rated_group:
        raise BusinessRuleError("You have already rated this group for this order", "DUPLICATE_RATING")
    targets = rating_targets(
        user.id, group.admin_user_id, group.member_ids(),
        await _rated_ids(db, user.id, order.id),
    )
    return [(t.type, t.user_id) for t in targets]


async def _user_target(
    db: AsyncSession, user: User, order: Order, rated_to_id: UUID,
) -> list[tuple[RatingTarget, UUID | None]]:
    if rated_to_id == user.id:
        raise ValidationFailedError("You cannot rate yourself", "rated_to_user_id")
    await get_or_404(db, User, rated_to_id, "User")
    if rated_to_id == order.business_id:
        kind = RatingTarget.BUSINESS
    elif rated_to_id in participant_ids(order):
        kind = RatingTarget.INFLUENCER
    else:
        raise ValidationFailedError("This user is not part of the order", "rated_to_user_id")
    if rated_to_id in await _rated_ids(db, user.id, order.id):
        return []
    return [(kind, rated_to_id)]


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_rating(
    body: RatingCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    check_rating_value(body.rating)
    order = await get_or_404(db, Order, body.order_id, "Order")
    require_access(order, user)
    if body.group_id is not None:
        targets = await _group_targets(db, user, order, body.group_id)
    else:
        targets = await _user_target(db, user, order, body.rated_to_user_id)

    created = []
    for kind, rated_to in targets:
        rating = Rating(
            order_id=order.id,
            group_id=body.group_id,
            rated_by_user_id=user.id,
            rated_to_user_id=rated_to,
            type_to_user=kind.value,
            rating=body.rating,
            review=body.review,
            status=True,
        )
        db.add(rating)
        created.append(rating)
    await db.flush()

    for rated_to in {r.rated_to_user_id for r in created if r.rated_to_user_id}:
        await refresh_user_rating(db, rated_to)
        await award_badges(db, rated_to, ORDER_BADGES)
    await db.commit()

    logger.info(
        f"{len(created)} rating(s) created",
        extra={"order_id": str(order.id), "user_id": str(user.id)},
    )
    return success("Rating submitted successfully", {
        "ratings": [rating_payload(r) for r in created],
    })


async def _group_admins_by_order(db: AsyncSession, order_ids: set) -> dict:
    if not order_ids:
        return {}
    result = await db.execute(
        select(Order.id, Group.admin_user_id)
        .join(Group, Order.group_id == Group.id)
        .where(Order.id.in_(order_ids)),
    )
    return {order_id: admin_id for order_id, admin_id in result.all()}


@router.get("/users/{user_id}")
async def user_ratings(
    user_id: UUID,
    rating_type: RatingTarget | None = Query(None, alias="type"),
    params: PageParams = Depends(page_params),
    db: AsyncSession = Depends(get_db),
):
    await get_or_404(db, User, user_id, "User")
    query = (
        select(Rating)
        .where(
            Rating.rated_to_user_id == user_id,
            Rating.rated_by_user_id != user_id,
            Rating.status.is_(True),
        )
        .order_by(Rating.created_at.desc())
    )
    if rating_type is not None:
        query = query.where(Rating.type_to_user == rating_type.value)
    ratings = list((await db.execute(query)).scalars().all())

    admins = await _group_admins_by_order(db, {r.order_id for r in ratings})
    items = [
        {
            **rating_payload(r),
            "rated_by": user_brief(r.rated_by),
            "rated_by_type": rated_by_type(
                r.type_to_user, r.rated_by_user_id,
                r.rated_by.type if r.rated_by else None,
                {admins[r.order_id]} if r.order_id in admins else set(),
            ),
        }
        for r in ratings
    ]
    average = await refresh_user_rating(db, user_id)
    await db.commit()
    data = paginate_items(items, params, "ratings")
    data.update(total_ratings=len(items), average_rating=average)
    return success("Ratings fetched successfully", data)


@router.get("/groups/{group_id}")
async def group_ratings(
    group_id: UUID,
    params: PageParams = Depends(page_params),
    db: AsyncSession = Depends(get_db),
):
    group = await get_or_404(db, Group, group_id, "Group")
    result = await db.execute(
        select(Rating)
        .where(
            Rating.group_id == group.id,
            Rating.type_to_user == RatingTarget.GROUP.value,
            Rating.status.is_(True),
        )
        .order_by(Rating.created_at.desc()),
    )
    ratings = list(result.scalars().all())
    data = paginate_items(
        [{**rating_payload(r), "rated_by": user_brief(r.rated_by)} for r in ratings],
        params, "ratings",
    )
    data.update(
        group=await format_group(db, group),
        total_ratings=len(ratings),
        average_rating=average_rating(r.rating for r in ratings),
    )
    return success("Group ratings fetched successfully", data)


@router.get("/orders/{order_id}")
async def order_ratings(
    order_id: UUID,
    params: PageParams = Depends(page_params),
    db: AsyncSession = Depends(get_db),
):
    order = await get_or_404(db, Order, order_id, "Order")
    data = await paginate(
        db,
        select(Rating).where(Rating.order_id == order.id).order_by(Rating.created_at.desc()),
        params, "ratings",
        lambda r: {**rating_payload(r), "rated_by": user_brief(r.rated_by)},
    )
    return success("Order ratings fetched successfully", data)
