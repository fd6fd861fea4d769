"""Coin bookkeeping — withdrawals, purchases, bonus coins and history merge."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from kringp.core.coins import (
    CoinBalance, cashout_bonus_coins, check_coin_withdrawal, check_purchase,
    credit, merge_coin_history, should_reset_redeem_email,
)
from kringp.core.errors import BusinessRuleError


def _balance(total="500", withdrawn="0", unlocked=True) -> CoinBalance:
    return CoinBalance(Decimal(total), Decimal(withdrawn), unlocked)


def test_net_amount_is_total_minus_withdrawn():
    assert _balance("500", "120").net_amount == Decimal("380")


@pytest.mark.parametrize("amount,bonus", [
    (Decimal("99.99"), 0), (Decimal("100"), 1), (Decimal("1050"), 10),
])
def test_cashout_bonus_is_one_coin_per_hundred(amount, bonus):
    assert cashout_bonus_coins(amount) == bonus


def test_credit_keeps_unlock_sticky():
    after = credit(_balance(unlocked=True), Decimal("50"), unlock=False)
    assert after.total_amount == Decimal("550")
    assert after.unlocked is True


def test_credit_can_unlock():
    assert credit(_balance(unlocked=False), Decimal("1"), unlock=True).unlocked is True


def test_coin_withdrawal_moves_amount_to_withdrawn():
    after = check_coin_withdrawal(_balance("500", "100"), Decimal("400"))
    assert after.withdraw_amount == Decimal("500")
    assert after.net_amount == Decimal("0")


def test_coin_withdrawal_rejects_locked_coins():
    with pytest.raises(BusinessRuleError) as exc:
        check_coin_withdrawal(_balance(unlocked=False), Decimal("10"))
    assert exc.value.code == "COINS_LOCKED"


def test_coin_withdrawal_rejects_overdraw():
    with pytest.raises(BusinessRuleError) as exc:
        check_coin_withdrawal(_balance("500", "450"), Decimal("51"))
    assert exc.value.code == "INSUFFICIENT_BALANCE"


def test_coin_withdrawal_rejects_non_positive():
    with pytest.raises(BusinessRuleError):
        check_coin_withdrawal(_balance(), Decimal("0"))


def test_purchase_does_not_require_unlocked_coins():
    after = check_purchase(_balance("300", unlocked=False), Decimal("300"))
    assert after.net_amount == Decimal("0")
    assert after.unlocked is False


def test_purchase_rejects_insufficient_balance():
    with pytest.raises(BusinessRuleError, match="Insufficient coins"):
        check_purchase(_balance("299"), Decimal("300"))


def test_redeem_email_rearms_below_threshold():
    assert should_reset_redeem_email(_balance("3499.99")) is True
    assert should_reset_redeem_email(_balance("3500")) is False


def test_history_is_merged_newest_first():
    now = datetime(2026, 1, 10, tzinfo=timezone.utc)
    transactions = [
        {"id": 1, "type": "REFERRAL", "created_at": now - timedelta(days=2)},
        {"id": 2, "type": "PURCHASE", "created_at": now},
    ]
    withdrawals = [{"id": 3, "created_at": now - timedelta(days=1)}]

    merged = merge_coin_history(transactions, withdrawals)

    assert [e["id"] for e in merged] == [2, 3, 1]
    assert merged[1]["type"] == "WITHDRAWAL"
    assert merged[1]["is_withdrawal"] is True
    assert merged[0]["is_withdrawal"] is False
