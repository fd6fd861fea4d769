"""Notification fan-out — push to devices and persist every attempt.

Invariants:
    - Users without a push token are skipped (no row written)
    - Each attempt is stored: status SENT, or FAILED with the error text
    - Push failures never propagate to the caller; the request that triggered
      the notification still succeeds
    - Rows are added to the caller's session; the caller commits
"""

import logging
from typing import Iterable
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from kringp.core.domain_types import NotificationStatus, NotificationType
from kringp.core.errors import ExternalServiceError
from kringp.infrastructure.push_client import PushClient
from kringp.models import Notification, User

logger = logging.getLogger(__name__)


async def notify_users(
    db: AsyncSession,
    push: PushClient,
    users: Iterable[User],
    title: str,
    body: str,
    type: NotificationType,
    order_id: UUID | None = None,
) -> list[Notification]:
    created = []
    for user in users:
        if user is None or not user.fcm_token:
            continue
        status, error = NotificationStatus.SENT, None
        try:
            await push.send(
                user.fcm_token, title, body,
                {"type": type.value, "order_id": order_id or ""},
            )
        except ExternalServiceError as e:
            status, error = NotificationStatus.FAILED, e.message
            logger.warning(
                f"Push failed: {e.message}",
                extra={"user_id": str(user.id), "notification_type": type.value},
            )
        row = Notification(
            user_id=user.id, title=title, body=body, type=type.value,
            order_id=order_id, status=status.value, error=error, is_read=False,
        )
        db.add(row)
        created.append(row)
    return created
