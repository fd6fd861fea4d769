"""Category grouping and list-field normalization."""

from types import SimpleNamespace

from kringp.core.categories import group_subcategories, split_list_field


def _named(id_, name):
    return SimpleNamespace(id=id_, name=name)


def test_subcategories_are_grouped_in_first_seen_order():
    fashion, food = _named(1, "Fashion"), _named(2, "Food")
    rows = [
        (_named(10, "Streetwear"), fashion),
        (_named(20, "Vegan"), food),
        (_named(11, "Luxury"), fashion),
    ]
    grouped = group_subcategories(rows)
    assert [g["category_name"] for g in grouped] == ["Fashion", "Food"]
    assert [s["subcategory_name"] for s in grouped[0]["subcategories"]] == [
        "Streetwear", "Luxury",
    ]
    assert grouped[0]["category_id"] == "1"


def test_rows_without_category_are_dropped():
    assert group_subcategories([(_named(1, "Orphan"), None)]) == []


def test_split_list_field_accepts_comma_string():
    assert split_list_field(" reel, story ,,post ") == ["reel", "story", "post"]


def test_split_list_field_accepts_list_and_none():
    assert split_list_field(["a ", " ", "b"]) == ["a", "b"]
    assert split_list_field(None) == []
