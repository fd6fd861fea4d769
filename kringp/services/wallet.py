"""Wallet services — coin summaries, coin ledger rows and payout destinations.

Invariants:
    - Every coin movement writes a CoinTransaction and updates the summary in the same session
    - Summary rows are created on first use (locked, all zeros)
    - Payouts resolve the active bank detail and decrypt the account number only here
"""

import logging
from decimal import Decimal
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from kringp.core.clock import utcnow
from kringp.core.coins import CoinBalance, credit
from kringp.core.domain_types import CoinStatus, CoinType
from kringp.core.errors import BusinessRuleError
from kringp.core.referral import REFERRAL_REWARD_COINS
from kringp.infrastructure.security import get_cipher
from kringp.models import BankDetail, CoinTransaction, ReferralCoinSummary

logger = logging.getLogger(__name__)


async def get_summary(db: AsyncSession, user_id: UUID) -> ReferralCoinSummary | None:
    result = await db.execute(
        select(ReferralCoinSummary).where(ReferralCoinSummary.user_id == user_id),
    )
    return result.scalar_one_or_none()


async def ensure_summary(db: AsyncSession, user_id: UUID) -> ReferralCoinSummary:
    summary = await get_summary(db, user_id)
    if summary is None:
        summary = ReferralCoinSummary(
            user_id=user_id,
            total_amount=Decimal("0"),
            withdraw_amount=Decimal("0"),
            net_amount=Decimal("0"),
            unlocked=False,
            redeem_email_sent=False,
        )
        db.add(summary)
        await db.flush()
    return summary


def balance_of(summary: ReferralCoinSummary) -> CoinBalance:
    return CoinBalance(
        total_amount=Decimal(summary.total_amount),
        withdraw_amount=Decimal(summary.withdraw_amount),
        unlocked=summary.unlocked,
    )


def store_balance(summary: ReferralCoinSummary, balance: CoinBalance) -> None:
    if balance.unlocked and not summary.unlocked:
        summary.unlocked_at = utcnow()
    summary.total_amount = balance.total_amount
    summary.withdraw_amount = balance.withdraw_amount
    summary.net_amount = balance.net_amount
    summary.unlocked = balance.unlocked


def record_coins(
    db: AsyncSession,
    user_id: UUID,
    amount: Decimal,
    type: CoinType,
    status: CoinStatus,
    source: str,
) -> CoinTransaction:
    tx = CoinTransaction(
        user_id=user_id, amount=amount, type=type.value,
        status=status.value, source=source,
    )
    db.add(tx)
    logger.info(
        f"Coin transaction {type.value} {amount}",
        extra={"user_id": str(user_id), "amount": str(amount)},
    )
    return tx


async def active_bank_detail(db: AsyncSession, user_id: UUID) -> BankDetail | None:
    result = await db.execute(
        select(BankDetail)
        .where(BankDetail.user_id == user_id, BankDetail.status.is_(True))
        .order_by(BankDetail.created_at.desc())
        .limit(1),
    )
    return result.scalar_one_or_none()


async def require_bank_detail(db: AsyncSession, user_id: UUID) -> BankDetail:
    detail = await active_bank_detail(db, user_id)
    if detail is None:
        raise BusinessRuleError("Please add bank details first", "BANK_DETAILS_REQUIRED")
    return detail


def payout_account(detail: BankDetail) -> str:
    return get_cipher().decrypt(detail.account_number)


async def reward_referral(db: AsyncSession, referrer_id: UUID, new_user_label: str) -> None:
    """Credit the referrer with locked referral coins for a completed signup."""
    coins = Decimal(REFERRAL_REWARD_COINS)
    summary = await ensure_summary(db, referrer_id)
    store_balance(summary, credit(balance_of(summary), coins))
    record_coins(
        db, referrer_id, coins, CoinType.REFERRAL, CoinStatus.LOCKED,
        f"Referral reward for inviting {new_user_label}",
    )
