from __future__ import annotations

from collections.abc import Iterable

from pydantic import ValidationError

from foodorder.application.dto.responses import MenuResponse
from foodorder.application.mappers.menu_mapper import from_dish_response, to_menu_response
from foodorder.application.ports.cache import CacheStore
from foodorder.application.ports.repositories import DishRepository
from foodorder.domain.common.ids import RestaurantId
from foodorder.domain.menu.entities import MenuItem, filter_menu_items


class RestaurantMenuNotFoundError(Exception):
    pass


def menu_cache_key(restaurant_id: RestaurantId) -> str:
    return f"dishes:{restaurant_id}"


class BrowseMenu:
    def __init__(
        self,
        repository: DishRepository,
        cache: CacheStore,
        ttl_seconds: int = 300,
    ) -> None:
        self._repository = repository
        self._cache = cache
        self._ttl_seconds = ttl_seconds

    def _cache_get(self, key: str) -> str | None:
        try:
            return self._cache.get(key)
        except Exception:
            return None

    def _cache_set(self, key: str, value: str) -> None:
        try:
            self._cache.set(key, value, ttl_seconds=self._ttl_seconds)
        except Exception:
            return

    def execute(
        self,
        restaurant_id: RestaurantId,
        category: str | None = None,
        tags: Iterable[str] = (),
    ) -> MenuResponse:
        items = self._load(restaurant_id)
        return to_menu_response(restaurant_id, filter_menu_items(items, category, tags))

    def _load(self, restaurant_id: RestaurantId) -> list[MenuItem]:
        key = menu_cache_key(restaurant_id)
        payload = self._cache_get(key)
        if payload:
            try:
                cached = MenuResponse.model_validate_json(payload)
            except ValidationError:
                cached = None
            if cached is not None:
                return [from_dish_response(dish) for dish in cached.items]

        items = self._repository.list_for_restaurant(restaurant_id)
        if not items:
            raise RestaurantMenuNotFoundError(f"no dishes found for restaurant_id={restaurant_id}")

        self._cache_set(key, to_menu_response(restaurant_id, items).model_dump_json())
        return items
