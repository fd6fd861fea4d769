"""Badge Rules — which achievement badges a user has earned.

Invariants:
    - Badge codes are strings "1".."6" matching badges.type
    - Rules are pure threshold checks over BadgeFacts; awarding is idempotent upstream

Badges:
    "1" multi-platform   — at least 2 linked social accounts
    "2" rising star      — >= 3 completed orders and rating >= 4.5
    "3" top earner       — earnings >= 100000, >= 10 completed orders, rating >= 4.7
    "4" fan favourite    — rating 5 with >= 20 ratings received
    "5" punctual         — >= 10 orders delivered on or before their deadline
    "6" high engagement  — every active account has >= 300 avg likes,
                           >= 100 avg comments and >= 500 views
"""

from dataclasses import dataclass, field
from decimal import Decimal

MULTI_PLATFORM = "1"
RISING_STAR = "2"
TOP_EARNER = "3"
FAN_FAVOURITE = "4"
PUNCTUAL = "5"
HIGH_ENGAGEMENT = "6"

ORDER_BADGES = frozenset({RISING_STAR, TOP_EARNER, FAN_FAVOURITE, PUNCTUAL})
SOCIAL_BADGES = frozenset({MULTI_PLATFORM, HIGH_ENGAGEMENT})


@dataclass(frozen=True)
class PlatformMetrics:
    average_likes: int = 0
    average_comments: int = 0
    view_count: int = 0


@dataclass(frozen=True)
class BadgeFacts:
    completed_orders: int = 0
    on_time_orders: int = 0
    rating: Decimal = Decimal("0")
    ratings_received: int = 0
    total_earnings: Decimal = Decimal("0")
    platforms: list[PlatformMetrics] = field(default_factory=list)


def _is_engaged(p: PlatformMetrics) -> bool:
    return p.average_likes >= 300 and p.average_comments >= 100 and p.view_count >= 500


def eligible_badge_types(facts: BadgeFacts) -> set[str]:
    earned: set[str] = set()
    if len(facts.platforms) >= 2:
        earned.add(MULTI_PLATFORM)
    if facts.completed_orders >= 3 and facts.rating >= Decimal("4.5"):
        earned.add(RISING_STAR)
    if (
        facts.total_earnings >= 100_000
        and facts.completed_orders >= 10
        and facts.rating >= Decimal("4.7")
    ):
        earned.add(TOP_EARNER)
    if facts.rating >= 5 and facts.ratings_received >= 20:
        earned.add(FAN_FAVOURITE)
    if facts.on_time_orders >= 10:
        earned.add(PUNCTUAL)
    if facts.platforms and all(_is_engaged(p) for p in facts.platforms):
        earned.add(HIGH_ENGAGEMENT)
    return earned
