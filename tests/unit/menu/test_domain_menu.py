from __future__ import annotations

import sys
from decimal import Decimal
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[3] / "src"))

from foodorder.domain.common.ids import MenuItemId, RestaurantId
from foodorder.domain.common.money import Money, sum_money
from foodorder.domain.menu.entities import (
    DIETARY_TAGS,
    DISH_CATEGORIES,
    MenuItem,
    filter_menu_items,
)
from foodorder.tools.seed import demo_menu_items


def _dish(item_id: str, category: str | None, tags: tuple[str, ...] = ()) -> MenuItem:
    return MenuItem(
        item_id=MenuItemId(item_id),
        restaurant_id=RestaurantId("rst_001"),
        restaurant_name="La Cocina Verde",
        name=f"Dish {item_id}",
        price_money=Money(amount_cents=5000),
        category=category,
        dietary_tags=tags,
    )


def test_money_invariants() -> None:
    with pytest.raises(ValueError):
        Money(amount_cents=-1, currency="MXN")
    with pytest.raises(ValueError):
        Money(amount_cents=100, currency="mxn")
    with pytest.raises(ValueError):
        Money(amount_cents=100, currency="MX")


def test_money_rejects_mixed_currencies() -> None:
    with pytest.raises(ValueError):
        Money(amount_cents=100, currency="MXN") + Money(amount_cents=100, currency="USD")


def test_money_decimal_has_two_places() -> None:
    assert Money(amount_cents=12000).to_decimal() == Decimal("120.00")
    assert str(Money(amount_cents=3005).to_decimal()) == "30.05"
    assert sum_money([]) == Money.zero()


def test_menu_item_name_must_be_non_empty() -> None:
    with pytest.raises(ValueError):
        MenuItem(
            item_id=MenuItemId("dsh_001"),
            restaurant_id=RestaurantId("rst_001"),
            restaurant_name="La Cocina Verde",
            name="   ",
            price_money=Money(amount_cents=100),
        )


def test_menu_item_requires_restaurant() -> None:
    with pytest.raises(ValueError):
        MenuItem(
            item_id=MenuItemId("dsh_001"),
            restaurant_id=RestaurantId(""),
            restaurant_name="",
            name="Tacos",
            price_money=Money(amount_cents=100),
        )


def test_filter_by_category_and_any_tag() -> None:
    items = [
        _dish("a", "Comida", ("Vegano",)),
        _dish("b", "Comida", ("Sin gluten",)),
        _dish("c", "Postre", ("Vegano",)),
        _dish("d", None),
    ]

    assert [item.item_id for item in filter_menu_items(items)] == ["a", "b", "c", "d"]
    assert [item.item_id for item in filter_menu_items(items, category="Comida")] == ["a", "b"]
    assert [item.item_id for item in filter_menu_items(items, tags=["Vegano", "Paleo"])] == [
        "a",
        "c",
    ]
    assert [
        item.item_id for item in filter_menu_items(items, category="Comida", tags=["Vegano"])
    ] == ["a"]


def test_demo_catalog_uses_known_categories_and_tags() -> None:
    items = demo_menu_items(currency="MXN")

    assert {item.restaurant_id for item in items} == {"rst_001", "rst_002"}
    for item in items:
        assert item.category in DISH_CATEGORIES
        assert set(item.dietary_tags) <= set(DIETARY_TAGS)
        assert item.price_money.currency == "MXN"
