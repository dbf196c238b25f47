from __future__ import annotations

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[3] / "src"))

from foodorder.application.use_cases.browse_menu import (
    BrowseMenu,
    RestaurantMenuNotFoundError,
    menu_cache_key,
)
from foodorder.domain.common.ids import RestaurantId
from foodorder.domain.menu.entities import MenuItem
from foodorder.infrastructure.memory.cache_store import InMemoryCacheStore
from foodorder.tools.seed import demo_menu_items


class CountingDishRepository:
    def __init__(self, items: list[MenuItem]) -> None:
        self._items = items
        self.list_calls = 0

    def get(self, item_id):
        return next((item for item in self._items if item.item_id == item_id), None)

    def list_for_restaurant(self, restaurant_id: RestaurantId) -> list[MenuItem]:
        self.list_calls += 1
        return [item for item in self._items if item.restaurant_id == restaurant_id]


class BrokenCache:
    def get(self, key: str) -> str | None:
        raise ConnectionError("redis down")

    def set(self, key: str, value: str, ttl_seconds: int) -> None:
        raise ConnectionError("redis down")


def test_menu_is_cached_after_first_load() -> None:
    repository = CountingDishRepository(demo_menu_items())
    cache = InMemoryCacheStore()
    use_case = BrowseMenu(repository=repository, cache=cache, ttl_seconds=60)

    first = use_case.execute(RestaurantId("rst_001"))
    second = use_case.execute(RestaurantId("rst_001"))

    assert repository.list_calls == 1
    assert first == second
    assert cache.get(menu_cache_key(RestaurantId("rst_001"))) is not None
    assert [dish.itemId for dish in first.items] == ["dsh_001", "dsh_002", "dsh_003"]


def test_filters_apply_to_cached_menu() -> None:
    repository = CountingDishRepository(demo_menu_items())
    use_case = BrowseMenu(repository=repository, cache=InMemoryCacheStore())
    use_case.execute(RestaurantId("rst_001"))

    vegan = use_case.execute(RestaurantId("rst_001"), tags=["Vegano"])
    drinks = use_case.execute(RestaurantId("rst_001"), category="Bebida")

    assert [dish.itemId for dish in vegan.items] == ["dsh_001", "dsh_003"]
    assert [dish.itemId for dish in drinks.items] == ["dsh_003"]
    assert str(drinks.items[0].price) == "35.00"
    assert repository.list_calls == 1


def test_cache_failures_fall_back_to_repository() -> None:
    repository = CountingDishRepository(demo_menu_items())
    use_case = BrowseMenu(repository=repository, cache=BrokenCache())

    result = use_case.execute(RestaurantId("rst_002"))

    assert [dish.itemId for dish in result.items] == ["dsh_004", "dsh_005"]


def test_unknown_restaurant_raises() -> None:
    use_case = BrowseMenu(
        repository=CountingDishRepository(demo_menu_items()),
        cache=InMemoryCacheStore(),
    )

    with pytest.raises(RestaurantMenuNotFoundError):
        use_case.execute(RestaurantId("rst_404"))
