"""Pagination — skip/take arithmetic and the pagination block shared by all list endpoints.

Invariants:
    - page and limit are >= 1; offset = (page - 1) * limit
    - total_pages = ceil(total / limit), 0 for an empty result

Design Decisions:
    - Pure dataclass + function: routes own the query, core owns the math
"""

import math
from dataclasses import dataclass
from typing import Any

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100


@dataclass(frozen=True)
class PageParams:
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT

    def __post_init__(self):
        if self.page < 1:
            raise ValueError("page must be >= 1")
        if not 1 <= self.limit <= MAX_LIMIT:
            raise ValueError(f"limit must be between 1 and {MAX_LIMIT}")

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def total_pages(total: int, limit: int) -> int:
    return math.ceil(total / limit) if total else 0


def build_page(
    items: list[Any], total: int, params: PageParams, result_key: str,
) -> dict:
    """Wrap a window of items with its pagination block."""
    return {
        "pagination": {
            "total": total,
            "page": params.page,
            "limit": params.limit,
            "total_pages": total_pages(total, params.limit),
        },
        result_key: items,
    }


def paginate_items(items: list[Any], params: PageParams, result_key: str) -> dict:
    """Page through a list already held in memory."""
    window = items[params.offset:params.offset + params.limit]
    return build_page(window, len(items), params, result_key)
