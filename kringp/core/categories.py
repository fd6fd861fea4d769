"""Category grouping — nest subcategories under their parent category."""

from typing import Iterable, Protocol


class _Named(Protocol):
    id: object
    name: str


def group_subcategories(rows: Iterable[tuple[_Named, _Named | None]]) -> list[dict]:
    """Group (subcategory, category) pairs by category, first-seen order.

    Rows whose category is missing are dropped.
    """
    grouped: dict[object, dict] = {}
    for sub, category in rows:
        if category is None:
            continue
        entry = grouped.setdefault(category.id, {
            "category_id": str(category.id),
            "category_name": category.name,
            "subcategories": [],
        })
        entry["subcategories"].append({
            "subcategory_id": str(sub.id),
            "subcategory_name": sub.name,
        })
    return list(grouped.values())


def split_list_field(value: list[str] | str | None) -> list[str]:
    """Accept a JSON list or a comma-separated string; return trimmed items."""
    if value is None:
        return []
    if isinstance(value, str):
        value = value.split(",")
    return [item.strip() for item in value if item and item.strip()]
