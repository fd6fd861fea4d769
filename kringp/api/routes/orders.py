"""Orders — offers between a business and an influencer or a group, through to completion.

Invariants:
    - Only parties to an order (business, influencer, group admin or member) or an
      admin can read or change it
    - Status travels as its numeric code; unknown codes → 400
    - COMPLETED only from ORDERSUBMITTED, exactly once; completion writes stats,
      earnings and badges in the same transaction as the status change
    - A refund failure at the gateway aborts the decline (nothing committed, 502)

Design Decisions:
    - Participants get their own share in the completion notification text
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from kringp.api.deps import get_current_user, page_params, require_admin
from kringp.config import get_settings
from kringp.core.clock import utcnow
from kringp.core.domain_types import (
    NotificationType, OfferStatus, PaymentStatus, UserType,
)
from kringp.core.envelope import success
from kringp.core.errors import (
    BusinessRuleError, PermissionDeniedError, ValidationFailedError,
)
from kringp.core.order_status import (
    check_transition, notification_for, resolve_completion_date, status_from_code,
)
from kringp.core.pagination import PageParams
from kringp.infrastructure.database import get_db
from kringp.infrastructure.payment_gateway import PaymentGateway, get_payment_gateway
from kringp.infrastructure.push_client import PushClient, get_push_client
from kringp.models import Group, Order, User
from kringp.schemas.order import OrderCreate, OrderStatusUpdate, OrderSubmit
from kringp.services.common import get_or_404, paginate, reload
from kringp.services.groups import format_group
from kringp.services.notifications import notify_users
from kringp.services.orders import (
    complete_order, participant_ids, participant_users, require_access, share_for,
    visible_orders_filter,
)
from kringp.services.serializers import order_payload, user_profile
from kringp.services.wallet import active_bank_detail

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/orders", tags=["orders"])


async def _order_detail(db: AsyncSession, order: Order) -> dict:
    return {
        **order_payload(order),
        "influencer": user_profile(order.influencer) if order.influencer else None,
        "group": await format_group(db, order.group) if order.group else None,
    }


def _filter_status(query, code: int | None):
    if code is None:
        return query
    return query.where(Order.status == status_from_code(code).value)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_order(
    body: OrderCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    push: PushClient = Depends(get_push_client),
):
    business = await get_or_404(db, User, body.business_id, "Business")
    group_admin_id = None
    sender = "an influencer"
    if body.influencer_id is not None:
        influencer = await db.get(User, body.influencer_id)
        if influencer is None or not influencer.status:
            raise ValidationFailedError("Invalid influencer ID provided.", "influencer_id")
        if await active_bank_detail(db, influencer.id) is None:
            raise BusinessRuleError(
                "Influencer must add bank details before Creating offers.",
                "BANK_DETAILS_REQUIRED",
            )
        sender = influencer.name or sender
    else:
        group = await get_or_404(db, Group, body.group_id, "Group")
        group_admin_id = group.admin_user_id
        sender = (group.admin.name if group.admin else None) or "a group"

    parties = {business.id, body.influencer_id, group_admin_id}
    if user.id not in parties and user.type != UserType.ADMIN.value:
        raise PermissionDeniedError("You can only create offers you are part of")

    order = Order(
        business_id=business.id,
        influencer_id=body.influencer_id,
        group_id=body.group_id,
        title=body.title,
        description=body.description,
        completion_date=resolve_completion_date(body.completion_date, utcnow()),
        total_amount=body.total_amount,
        discount_amount=body.discount_amount,
        final_amount=body.final_amount,
        status=status_from_code(body.status).value,
        payment_status=PaymentStatus.PENDING.value,
        payment_reference=body.payment_reference,
        submitted_attachment=[],
    )
    db.add(order)
    await db.flush()
    await notify_users(
        db, push, [business], "New Offer Received",
        f"You have received a new Offer from {sender}",
        NotificationType.ORDER_CREATED, order.id,
    )
    await db.commit()

    order = await reload(db, Order, order.id)
    logger.info("Order created", extra={"order_id": str(order.id), "user_id": str(user.id)})
    return success("Order created successfully!", await _order_detail(db, order))


@router.get("")
async def list_my_orders(
    status_code: int | None = Query(None, alias="status"),
    params: PageParams = Depends(page_params),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    query = (
        select(Order)
        .where(visible_orders_filter(user.id))
        .order_by(Order.created_at.desc())
    )
    query = _filter_status(query, status_code)
    data = await paginate(db, query, params, "orders", order_payload)
    return success("Orders fetched successfully", data)


@router.get("/admin")
async def list_all_orders(
    status_code: int | None = Query(None, alias="status"),
    params: PageParams = Depends(page_params),
    _: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    query = _filter_status(select(Order).order_by(Order.created_at.desc()), status_code)
    data = await paginate(db, query, params, "orders", order_payload)
    return success("Orders fetched successfully", data)


@router.get("/{order_id}")
async def get_order(
    order_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    order = await get_or_404(db, Order, order_id, "Order")
    require_access(order, user)
    return success("Order fetched successfully", await _order_detail(db, order))


@router.post("/{order_id}/submit")
async def submit_order(
    order_id: UUID,
    body: OrderSubmit,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    push: PushClient = Depends(get_push_client),
):
    order = await get_or_404(db, Order, order_id, "Order")
    if user.id not in participant_ids(order):
        raise PermissionDeniedError("Only the influencer or group on this order can submit work")
    if order.status == OfferStatus.COMPLETED.value:
        raise BusinessRuleError("Order is already completed", "ORDER_ALREADY_COMPLETED")

    order.submitted_description = body.submitted_description
    order.social_media_link = body.social_media_link
    order.submitted_attachment = body.submitted_attachment
    order.status = OfferStatus.ORDERSUBMITTED.value
    await notify_users(
        db, push, [order.business], "Order Submitted",
        f"{user.name or 'The creator'} submitted work for your order",
        NotificationType.ORDER_SUBMITTED, order.id,
    )
    await db.commit()

    order = await reload(db, Order, order.id)
    logger.info("Order submitted", extra={"order_id": str(order.id)})
    return success("Order submitted successfully", order_payload(order))


@router.post("/{order_id}/status")
async def update_order_status(
    order_id: UUID,
    body: OrderStatusUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    push: PushClient = Depends(get_push_client),
    gateway: PaymentGateway = Depends(get_payment_gateway),
):
    order = await get_or_404(db, Order, order_id, "Order")
    require_access(order, user)
    target = status_from_code(body.status)
    check_transition(order.status, target)

    if body.reason is not None:
        order.reason = body.reason
    if body.payment_reference is not None:
        order.payment_reference = body.payment_reference

    shares = []
    if target is OfferStatus.ACTIVATED:
        order.payment_status = PaymentStatus.COMPLETED.value
    elif target is OfferStatus.DECLINED:
        if order.payment_status == PaymentStatus.COMPLETED.value and order.payment_reference:
            await gateway.refund(order.payment_reference, order.payable_amount)
            order.payment_status = PaymentStatus.REFUND.value
            logger.info("Order refunded", extra={
                "order_id": str(order.id), "amount": str(order.payable_amount),
            })
    elif target is OfferStatus.COMPLETED:
        shares = await complete_order(
            db, order, get_settings().platform_fee_rate, utcnow(),
        )
    order.status = target.value

    if notification_for(target) is not None:
        for member in await participant_users(db, order):
            notice = notification_for(target, share_for(shares, member.id))
            await notify_users(
                db, push, [member], notice.title, notice.body, notice.type, order.id,
            )
    await db.commit()

    order = await reload(db, Order, order.id)
    logger.info(
        f"Order status -> {target.value}",
        extra={"order_id": str(order.id), "user_id": str(user.id)},
    )
    return success("Order status updated successfully", order_payload(order))
