"""Notifications — admin broadcasts to a user, the inbox and read receipts.

Invariants:
    - Users only see and mark their own notifications
    - The inbox defaults to 50 per page, newest first
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from kringp.api.deps import get_current_user, require_admin
from kringp.core.domain_types import NotificationType
from kringp.core.envelope import success
from kringp.core.errors import BusinessRuleError, PermissionDeniedError
from kringp.core.pagination import MAX_LIMIT, PageParams
from kringp.infrastructure.database import get_db
from kringp.infrastructure.push_client import PushClient, get_push_client
from kringp.models import Notification, User
from kringp.schemas.content import NotificationSend
from kringp.services.common import get_or_404, paginate
from kringp.services.notifications import notify_users
from kringp.services.serializers import notification_payload

router = APIRouter(prefix="/api/v1/notifications", tags=["notifications"])

INBOX_LIMIT = 50


@router.post("", status_code=status.HTTP_201_CREATED)
async def send_notification(
    body: NotificationSend,
    _: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
    push: PushClient = Depends(get_push_client),
):
    target = await get_or_404(db, User, body.user_id, "User")
    if not target.fcm_token:
        raise BusinessRuleError("User has no registered device", "NO_PUSH_TOKEN")
    rows = await notify_users(
        db, push, [target], body.title, body.body, NotificationType.ADMIN,
    )
    await db.commit()
    return success("Notification processed", notification_payload(rows[0]))


@router.get("")
async def my_notifications(
    page: int = Query(1, ge=1),
    limit: int = Query(INBOX_LIMIT, ge=1, le=MAX_LIMIT),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    query = (
        select(Notification)
        .where(Notification.user_id == user.id)
        .order_by(Notification.created_at.desc())
    )
    data = await paginate(
        db, query, PageParams(page=page, limit=limit), "notifications", notification_payload,
    )
    return success("Notifications fetched successfully", data)


@router.post("/{notification_id}/read")
async def mark_read(
    notification_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    notification = await get_or_404(db, Notification, notification_id, "Notification")
    if notification.user_id != user.id:
        raise PermissionDeniedError("You can only update your own notifications")
    notification.is_read = True
    await db.commit()
    return success("Notification marked as read", notification_payload(notification))
