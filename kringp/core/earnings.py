"""Earnings & Stats — how a completed order's amount is split and how user stats move.

Invariants:
    - The platform ADMIN account receives amount * fee_rate as the platform share
    - The remaining amount * (1 - fee_rate) is split equally among participants
    - Participants are de-duplicated, first occurrence wins
    - All money is Decimal, quantized to 2 places (ROUND_HALF_UP)

Design Decisions:
    - Stats as an immutable snapshot: callers write the new values back to the ORM row
"""

from dataclasses import dataclass, replace
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Hashable, Sequence

from kringp.core.clock import ensure_utc
from kringp.core.errors import BusinessRuleError

CENTS = Decimal("0.01")
DEFAULT_FEE_RATE = Decimal("0.20")


def quantize(value: Decimal) -> Decimal:
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class EarningShare:
    user_id: Hashable
    amount: Decimal
    is_admin_share: bool = False


def split_earnings(
    amount: Decimal,
    admin_id: Hashable | None,
    participant_ids: Sequence[Hashable],
    fee_rate: Decimal = DEFAULT_FEE_RATE,
) -> list[EarningShare]:
    """Split an order amount into the admin share plus equal participant shares."""
    participants = list(dict.fromkeys(participant_ids))
    shares: list[EarningShare] = []
    if admin_id is not None:
        shares.append(EarningShare(admin_id, quantize(amount * fee_rate), True))
    if participants:
        per_user = quantize(amount * (1 - fee_rate) / len(participants))
        shares.extend(EarningShare(uid, per_user) for uid in participants)
    return shares


def is_on_time(completion_date: datetime | None, now: datetime) -> bool:
    """An order with no deadline is always on time."""
    if completion_date is None:
        return True
    return ensure_utc(completion_date) >= ensure_utc(now)


@dataclass(frozen=True)
class StatsSnapshot:
    total_deals: int = 0
    on_time_delivery: int = 0
    repeat_clients: int = 0
    total_earnings: Decimal = Decimal("0")
    total_withdraw: Decimal = Decimal("0")
    average_value: Decimal = Decimal("0")


def next_stats(
    stats: StatsSnapshot, on_time: bool, previous_completed_with_business: int,
) -> StatsSnapshot:
    """Count one more completed deal.

    A business becomes a repeat client on its second completed order with
    the same user, i.e. when exactly one earlier completed order exists.
    """
    return replace(
        stats,
        total_deals=stats.total_deals + 1,
        on_time_delivery=stats.on_time_delivery + (1 if on_time else 0),
        repeat_clients=stats.repeat_clients + (
            1 if previous_completed_with_business == 1 else 0
        ),
    )


def apply_earning(stats: StatsSnapshot, earning: Decimal) -> StatsSnapshot:
    total = stats.total_earnings + earning
    average = quantize(total / stats.total_deals) if stats.total_deals else Decimal("0")
    return replace(stats, total_earnings=total, average_value=average)


def apply_withdrawal(stats: StatsSnapshot, amount: Decimal) -> StatsSnapshot:
    if amount <= 0:
        raise BusinessRuleError("Withdrawal amount must be greater than zero")
    if amount > stats.total_earnings:
        raise BusinessRuleError(
            "Insufficient balance for withdrawal", "INSUFFICIENT_BALANCE",
        )
    return replace(
        stats,
        total_earnings=stats.total_earnings - amount,
        total_withdraw=stats.total_withdraw + amount,
    )
