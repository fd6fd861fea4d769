"""Coin bookkeeping — reward coins, coin withdrawals and product redemption.

Invariants:
    - net_amount = total_amount - withdraw_amount on every summary update
    - A coin withdrawal never takes withdraw_amount above total_amount
    - Coin withdrawals require an unlocked summary; purchases only require balance
    - Cash-out bonus is one coin per full 100 withdrawn

Design Decisions:
    - CoinBalance is a plain snapshot: routes copy the ORM summary in and the
      returned values back out, so the rules stay testable without a DB
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from kringp.core.errors import BusinessRuleError

REDEEM_EMAIL_THRESHOLD = Decimal("3500")
_CASHOUT_BONUS_UNIT = Decimal("100")


@dataclass(frozen=True)
class CoinBalance:
    total_amount: Decimal
    withdraw_amount: Decimal
    unlocked: bool

    @property
    def net_amount(self) -> Decimal:
        return self.total_amount - self.withdraw_amount


def cashout_bonus_coins(amount: Decimal) -> int:
    """Bonus coins granted for a cash withdrawal of `amount`."""
    return int(amount // _CASHOUT_BONUS_UNIT)


def cashout_bonus_source(amount: Decimal) -> str:
    return f"Withdrawal reward for ₹{amount}"


def credit(balance: CoinBalance, coins: Decimal, unlock: bool = False) -> CoinBalance:
    return CoinBalance(
        total_amount=balance.total_amount + coins,
        withdraw_amount=balance.withdraw_amount,
        unlocked=balance.unlocked or unlock,
    )


def check_coin_withdrawal(balance: CoinBalance, amount: Decimal) -> CoinBalance:
    """Validate a coin withdrawal and return the balance after it."""
    if amount <= 0:
        raise BusinessRuleError("Withdrawal amount must be greater than zero")
    if not balance.unlocked:
        raise BusinessRuleError("Coins are locked and cannot be withdrawn yet", "COINS_LOCKED")
    if balance.withdraw_amount + amount > balance.total_amount:
        raise BusinessRuleError("Insufficient coin balance", "INSUFFICIENT_BALANCE")
    return CoinBalance(
        total_amount=balance.total_amount,
        withdraw_amount=balance.withdraw_amount + amount,
        unlocked=True,
    )


def check_purchase(balance: CoinBalance, price: Decimal) -> CoinBalance:
    """Validate a product redemption and return the balance after it."""
    if balance.net_amount < price:
        raise BusinessRuleError(
            "Insufficient coins to purchase this product", "INSUFFICIENT_BALANCE",
        )
    return CoinBalance(
        total_amount=balance.total_amount,
        withdraw_amount=balance.withdraw_amount + price,
        unlocked=balance.unlocked,
    )


def should_reset_redeem_email(balance: CoinBalance) -> bool:
    """Below the threshold the 'you can redeem' email may be sent again."""
    return balance.net_amount < REDEEM_EMAIL_THRESHOLD


def merge_coin_history(
    transactions: list[dict], withdrawals: list[dict],
) -> list[dict]:
    """Interleave coin transactions and coin withdrawals, newest first.

    Both inputs are serialized dicts carrying a `created_at` datetime.
    """
    tagged = [{**t, "is_withdrawal": False} for t in transactions] + [
        {**w, "type": "WITHDRAWAL", "status": "PROCESSED", "is_withdrawal": True}
        for w in withdrawals
    ]
    return sorted(tagged, key=_created_at, reverse=True)


def _created_at(entry: dict) -> datetime:
    return entry["created_at"]
