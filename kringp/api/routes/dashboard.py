"""Dashboard — home screen aggregates and the admin overview."""

from decimal import Decimal

from fastapi import APIRouter, Depends
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from kringp.api.deps import get_current_user, require_admin
from kringp.core.domain_types import UserType
from kringp.core.envelope import success
from kringp.core.order_status import code_for
from kringp.infrastructure.database import get_db
from kringp.models import AppSetting, Earning, Order, RecentView, User
from kringp.services.serializers import user_brief, user_profile

router = APIRouter(prefix="/api/v1/dashboard", tags=["dashboard"])

BANNER_SLUGS = ("banner-image", "banner-title", "banner-button-text", "banner-button-link")
TOP_INFLUENCER_LIMIT = 4
TOP_RATING = Decimal("5")
RECENT_VIEW_LIMIT = 5


async def _top_influencers(db: AsyncSession) -> list[dict]:
    result = await db.execute(
        select(User)
        .where(
            User.type == UserType.INFLUENCER.value,
            User.status.is_(True),
            User.ratings == TOP_RATING,
        )
        .order_by(User.created_at.desc())
        .limit(TOP_INFLUENCER_LIMIT),
    )
    return [user_profile(u) for u in result.scalars().all()]


@router.get("/top-influencers")
async def top_influencers(db: AsyncSession = Depends(get_db)):
    return success("Top influencers fetched successfully", {
        "influencers": await _top_influencers(db),
    })


@router.get("")
async def home(
    user: User = Depends(get_current_user), db: AsyncSession = Depends(get_db),
):
    settings = (await db.execute(
        select(AppSetting).where(AppSetting.slug.in_(BANNER_SLUGS)),
    )).scalars().all()
    by_slug = {s.slug: s.value for s in settings}
    views = (await db.execute(
        select(RecentView)
        .where(RecentView.viewer_id == user.id)
        .order_by(RecentView.viewed_at.desc())
        .limit(RECENT_VIEW_LIMIT),
    )).scalars().all()
    return success("Dashboard fetched successfully", {
        "banner": {slug: by_slug.get(slug) for slug in BANNER_SLUGS},
        "top_influencers": await _top_influencers(db),
        "recent_views": [
            {**user_brief(v.viewed_user), "viewed_at": v.viewed_at} for v in views
        ],
    })


@router.get("/admin")
async def admin_overview(
    _: User = Depends(require_admin), db: AsyncSession = Depends(get_db),
):
    users_by_type = dict((await db.execute(
        select(User.type, func.count(User.id)).group_by(User.type),
    )).all())
    orders_by_status = (await db.execute(
        select(Order.status, func.count(Order.id)).group_by(Order.status),
    )).all()
    platform_earnings = await db.scalar(
        select(func.coalesce(func.sum(Earning.earning_amount), 0))
        .where(Earning.is_admin_share.is_(True)),
    )
    return success("Admin dashboard fetched successfully", {
        "users": {t.value: users_by_type.get(t.value, 0) for t in UserType},
        "orders": [
            {"status": code_for(s), "status_name": s, "count": n}
            for s, n in orders_by_status
        ],
        "platform_earnings": Decimal(str(platform_earnings or 0)),
    })
