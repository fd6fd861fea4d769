"""Referral codes — human-readable codes derived from a user's name."""

import random
import re

REFERRAL_REWARD_COINS = 50
_PREFIX_LENGTH = 4


def generate_referral_code(name: str | None, rng: random.Random | None = None) -> str:
    """First four letters of the name (uppercased, X-padded) plus four digits.

    >>> generate_referral_code("Jo-hn Smith", random.Random(1))[:4]
    'JOHN'
    """
    rng = rng or random.SystemRandom()
    letters = re.sub(r"[^A-Za-z]", "", name or "").upper()
    prefix = letters[:_PREFIX_LENGTH].ljust(_PREFIX_LENGTH, "X")
    return f"{prefix}{rng.randint(0, 9999):04d}"
