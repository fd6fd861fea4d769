"""Ratings aggregation — averages, rater labels and group fan-out.

Invariants:
    - Ratings are integers 1..5
    - Average is rounded to 2 decimals, 0 when nobody rated
    - A group rating fans out to the group itself, its admin and accepted members,
      never to the rater and never twice to the same user
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Hashable, Iterable, Sequence

from kringp.core.domain_types import RatingTarget, UserType
from kringp.core.errors import ValidationFailedError

MIN_RATING = 1
MAX_RATING = 5


def check_rating_value(value: int) -> None:
    if not MIN_RATING <= value <= MAX_RATING:
        raise ValidationFailedError("Rating must be between 1 and 5", "rating")


def average_rating(values: Iterable[int | Decimal]) -> Decimal:
    values = [Decimal(v) for v in values]
    if not values:
        return Decimal("0")
    avg = sum(values) / len(values)
    return avg.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def rated_by_type(
    rating_type: RatingTarget | str,
    rated_by_id: Hashable,
    rater_type: UserType | str | None,
    group_admin_ids: set,
) -> str:
    """Label who gave a rating.

    A BUSINESS rating from the admin of the order's group is shown as
    coming from the GROUP; otherwise the rater's own user type.
    """
    if RatingTarget(rating_type) is RatingTarget.BUSINESS and rated_by_id in group_admin_ids:
        return RatingTarget.GROUP.value
    if rater_type is None:
        return UserType.INFLUENCER.value
    return UserType(rater_type).value


@dataclass(frozen=True)
class RatingTargetSpec:
    type: RatingTarget
    user_id: Hashable | None


def rating_targets(
    rater_id: Hashable,
    admin_id: Hashable,
    member_ids: Sequence[Hashable],
    already_rated_ids: set,
) -> list[RatingTargetSpec]:
    """Ratings to create when a business rates a group order.

    The GROUP entry carries no user; INFLUENCER entries cover the admin
    followed by accepted members.
    """
    targets = [RatingTargetSpec(RatingTarget.GROUP, None)]
    seen = set(already_rated_ids) | {rater_id}
    for uid in [admin_id, *member_ids]:
        if uid in seen:
            continue
        seen.add(uid)
        targets.append(RatingTargetSpec(RatingTarget.INFLUENCER, uid))
    return targets
