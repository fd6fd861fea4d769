"""Wallet — earnings withdrawals, transaction history and the referral coin ledger.

Invariants:
    - A cash withdrawal never exceeds current total earnings; bank details come first
    - Money leaves only after the payout call succeeds; a gateway error commits nothing
    - Every cash withdrawal of ₹100 or more earns unlocked cash-out bonus coins
    - Coins are withdrawable only once unlocked and only up to the net balance
"""

import logging
from decimal import Decimal

from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from kringp.api.deps import get_current_user, page_params, require_admin
from kringp.core.coins import (
    cashout_bonus_coins, cashout_bonus_source, check_coin_withdrawal, credit,
    merge_coin_history, should_reset_redeem_email,
)
from kringp.core.domain_types import CoinStatus, CoinType, TransactionType
from kringp.core.earnings import apply_withdrawal
from kringp.core.envelope import success
from kringp.core.errors import BusinessRuleError
from kringp.core.pagination import PageParams, paginate_items
from kringp.infrastructure.database import get_db
from kringp.infrastructure.payment_gateway import PaymentGateway, get_payment_gateway
from kringp.models import CoinTransaction, CoinWithdrawal, Earning, User, Withdrawal
from kringp.schemas.wallet import CoinCreditRequest, WithdrawRequest
from kringp.services.common import get_or_404
from kringp.services.serializers import stats_payload
from kringp.services.users import ensure_stats, stats_snapshot, store_stats
from kringp.services.wallet import (
    balance_of, ensure_summary, get_summary, payout_account, record_coins,
    require_bank_detail, store_balance,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/wallet", tags=["wallet"])


def _summary_payload(summary) -> dict:
    return {
        "total_amount": summary.total_amount,
        "withdraw_amount": summary.withdraw_amount,
        "net_amount": summary.net_amount,
        "unlocked": summary.unlocked,
        "unlocked_at": summary.unlocked_at,
    }


@router.post("/withdraw")
async def withdraw_earnings(
    body: WithdrawRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    gateway: PaymentGateway = Depends(get_payment_gateway),
):
    stats = await ensure_stats(db, user.id)
    after = apply_withdrawal(stats_snapshot(stats), body.amount)
    detail = await require_bank_detail(db, user.id)

    payout = await gateway.payout(
        body.amount, payout_account(detail), detail.account_holder_name,
        purpose="earnings_withdrawal",
    )
    withdrawal = Withdrawal(
        user_id=user.id,
        amount=body.amount,
        transaction_type=TransactionType.DEBIT.value,
        payout_reference=payout.get("id"),
    )
    db.add(withdrawal)
    store_stats(stats, after)

    bonus = cashout_bonus_coins(body.amount)
    if bonus > 0:
        summary = await ensure_summary(db, user.id)
        store_balance(summary, credit(balance_of(summary), Decimal(bonus), unlock=True))
        record_coins(
            db, user.id, Decimal(bonus), CoinType.CASHOUT_BONUS, CoinStatus.UNLOCKED,
            cashout_bonus_source(body.amount),
        )
    await db.commit()
    await db.refresh(withdrawal)

    logger.info(
        "Earnings withdrawn",
        extra={"user_id": str(user.id), "amount": str(body.amount)},
    )
    return success("Withdrawal successful", {
        "withdrawal": {
            "id": withdrawal.id,
            "amount": withdrawal.amount,
            "transaction_type": withdrawal.transaction_type,
            "payout_reference": withdrawal.payout_reference,
            "created_at": withdrawal.created_at,
        },
        "stats": stats_payload(stats),
        "bonus_coins": bonus,
    })


@router.get("/transactions")
async def list_transactions(
    params: PageParams = Depends(page_params),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    earnings = (await db.execute(
        select(Earning).where(Earning.user_id == user.id),
    )).scalars().all()
    withdrawals = (await db.execute(
        select(Withdrawal).where(Withdrawal.user_id == user.id),
    )).scalars().all()
    entries = [
        {
            "id": e.id,
            "transaction_type": TransactionType.CREDIT.value,
            "amount": e.earning_amount,
            "order_id": e.order_id,
            "group_id": e.group_id,
            "is_admin_share": e.is_admin_share,
            "created_at": e.created_at,
        }
        for e in earnings
    ] + [
        {
            "id": w.id,
            "transaction_type": TransactionType.DEBIT.value,
            "amount": w.amount,
            "payout_reference": w.payout_reference,
            "created_at": w.created_at,
        }
        for w in withdrawals
    ]
    entries.sort(key=lambda entry: entry["created_at"], reverse=True)
    data = paginate_items(entries, params, "transactions")
    data["totals"] = {
        "total_credit": sum((e.earning_amount for e in earnings), Decimal("0")),
        "total_debit": sum((w.amount for w in withdrawals), Decimal("0")),
    }
    return success("Transactions fetched successfully", data)


@router.get("/coins")
async def coin_summary(
    user: User = Depends(get_current_user), db: AsyncSession = Depends(get_db),
):
    summary = await ensure_summary(db, user.id)
    await db.commit()
    transactions = (await db.execute(
        select(CoinTransaction).where(CoinTransaction.user_id == user.id),
    )).scalars().all()
    withdrawals = (await db.execute(
        select(CoinWithdrawal).where(CoinWithdrawal.user_id == user.id),
    )).scalars().all()
    history = merge_coin_history(
        [
            {
                "id": t.id, "amount": t.amount, "type": t.type,
                "status": t.status, "source": t.source, "created_at": t.created_at,
            }
            for t in transactions
        ],
        [
            {"id": w.id, "amount": w.amount, "created_at": w.created_at}
            for w in withdrawals
        ],
    )
    return success("Coin summary fetched successfully", {
        "summary": _summary_payload(summary),
        "history": history,
    })


@router.post("/coins/withdraw")
async def withdraw_coins(
    body: WithdrawRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    gateway: PaymentGateway = Depends(get_payment_gateway),
):
    summary = await get_summary(db, user.id)
    if summary is None:
        raise BusinessRuleError("No coins available to withdraw", "INSUFFICIENT_BALANCE")
    after = check_coin_withdrawal(balance_of(summary), body.amount)
    detail = await require_bank_detail(db, user.id)

    payout = await gateway.payout(
        body.amount, payout_account(detail), detail.account_holder_name,
        purpose="coin_withdrawal",
    )
    db.add(CoinWithdrawal(
        user_id=user.id, amount=body.amount, payout_reference=payout.get("id"),
    ))
    store_balance(summary, after)
    if should_reset_redeem_email(after):
        summary.redeem_email_sent = False
    await db.commit()

    logger.info(
        "Coins withdrawn",
        extra={"user_id": str(user.id), "amount": str(body.amount)},
    )
    return success("Coins withdrawn successfully", _summary_payload(summary))


@router.post("/coins", status_code=status.HTTP_201_CREATED)
async def credit_coins(
    body: CoinCreditRequest,
    _: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    await get_or_404(db, User, body.user_id, "User")
    summary = await ensure_summary(db, body.user_id)
    store_balance(summary, credit(balance_of(summary), body.amount, unlock=body.unlock))
    record_coins(
        db, body.user_id, body.amount, CoinType.ADMIN_CREDIT,
        CoinStatus.UNLOCKED if summary.unlocked else CoinStatus.LOCKED,
        body.source or "Admin credit",
    )
    await db.commit()
    return success("Coins credited successfully", _summary_payload(summary))
