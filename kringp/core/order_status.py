"""Order Status — wire codes, transitions and notification texts for offers.

Invariants:
    - Wire codes: 0 PENDING, 1 ACCEPTED, 2 CANCELED, 3 ACTIVATED,
      4 ORDERSUBMITTED, 5 COMPLETED, 6 DECLINED — anything else is rejected
    - COMPLETED is reachable only from ORDERSUBMITTED, and only once
    - A completion date given as a day count is relative to "now"

Design Decisions:
    - Codes kept as the public contract because mobile clients send numbers;
      the DB stores the OfferStatus name
"""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from decimal import Decimal

from kringp.core.domain_types import NotificationType, OfferStatus
from kringp.core.errors import BusinessRuleError, ValidationFailedError

STATUS_BY_CODE: dict[int, OfferStatus] = {
    0: OfferStatus.PENDING,
    1: OfferStatus.ACCEPTED,
    2: OfferStatus.CANCELED,
    3: OfferStatus.ACTIVATED,
    4: OfferStatus.ORDERSUBMITTED,
    5: OfferStatus.COMPLETED,
    6: OfferStatus.DECLINED,
}
CODE_BY_STATUS: dict[OfferStatus, int] = {v: k for k, v in STATUS_BY_CODE.items()}


def status_from_code(code: int) -> OfferStatus:
    try:
        return STATUS_BY_CODE[code]
    except KeyError:
        raise ValidationFailedError(f"Invalid status code: {code}", "status")


def code_for(status: OfferStatus | str) -> int:
    return CODE_BY_STATUS[OfferStatus(status)]


def resolve_completion_date(
    value: int | date | datetime | None, now: datetime,
) -> datetime | None:
    """Day counts become now + N days; dates become midnight UTC."""
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValidationFailedError("Invalid completion date", "completion_date")
    if isinstance(value, int):
        if value < 0:
            raise ValidationFailedError(
                "Completion days cannot be negative", "completion_date",
            )
        return now + timedelta(days=value)
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    return datetime.combine(value, time.min, tzinfo=timezone.utc)


def check_transition(current: OfferStatus | str, target: OfferStatus) -> None:
    """Reject transitions the marketplace never allows."""
    current = OfferStatus(current)
    if target is OfferStatus.COMPLETED:
        if current is OfferStatus.COMPLETED:
            raise BusinessRuleError("Order is already completed", "ORDER_ALREADY_COMPLETED")
        if current is not OfferStatus.ORDERSUBMITTED:
            raise BusinessRuleError(
                "Order must be submitted before it can be completed",
                "ORDER_NOT_SUBMITTED",
            )


@dataclass(frozen=True)
class StatusNotice:
    title: str
    body: str
    type: NotificationType


def notification_for(target: OfferStatus, amount: Decimal | None = None) -> StatusNotice | None:
    """Push text sent to participants after a status change, if any."""
    if target is OfferStatus.ACCEPTED:
        return StatusNotice(
            "Order Accepted!", "Your order has been accepted.",
            NotificationType.ORDER_ACCEPTED,
        )
    if target is OfferStatus.CANCELED:
        return StatusNotice(
            "Order Canceled", "Your order has been canceled.",
            NotificationType.ORDER_CANCELED,
        )
    if target is OfferStatus.COMPLETED:
        body = "Your order has been completed."
        if amount is not None:
            body = f"Your order has been completed. ₹{amount} has been credited to your earnings."
        return StatusNotice("Order Completed!", body, NotificationType.ORDER_COMPLETED)
    return None
