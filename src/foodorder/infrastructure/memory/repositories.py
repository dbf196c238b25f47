from __future__ import annotations

import threading
import time
from collections.abc import Callable, Iterable
from dataclasses import replace

from foodorder.application.ports.repositories import (
    DishRepository,
    DuplicateOrderError,
    OrderRepository,
)
from foodorder.domain.common.clock import EpochMillis
from foodorder.domain.common.ids import MenuItemId, OrderId, RestaurantId, UserId
from foodorder.domain.menu.entities import MenuItem
from foodorder.domain.order.entities import Order, OrderStatus


def _wall_clock_millis() -> int:
    return time.time_ns() // 1_000_000


class InMemoryDishRepository(DishRepository):
    def __init__(self, items: Iterable[MenuItem] = ()) -> None:
        self._items: dict[str, MenuItem] = {}
        self._lock = threading.Lock()
        for item in items:
            self.put(item)

    def put(self, item: MenuItem) -> None:
        with self._lock:
            self._items[str(item.item_id)] = item

    def get(self, item_id: MenuItemId) -> MenuItem | None:
        with self._lock:
            return self._items.get(str(item_id))

    def list_for_restaurant(self, restaurant_id: RestaurantId) -> list[MenuItem]:
        with self._lock:
            return [
                item for item in self._items.values() if item.restaurant_id == restaurant_id
            ]


class InMemoryOrderRepository(OrderRepository):
    """Order store used when no database is configured.

    It plays the role of the backend clock: every write is stamped with a
    strictly increasing epoch-millisecond value.
    """

    def __init__(self, clock: Callable[[], int] | None = None) -> None:
        self._orders: dict[str, Order] = {}
        self._lock = threading.Lock()
        self._clock = clock or _wall_clock_millis
        self._last_stamp = 0

    def _stamp(self) -> EpochMillis:
        stamp = max(self._clock(), self._last_stamp + 1)
        self._last_stamp = stamp
        return EpochMillis(stamp)

    def add(self, order: Order) -> Order:
        with self._lock:
            if str(order.order_id) in self._orders:
                raise DuplicateOrderError(f"order {order.order_id} already exists")
            now = self._stamp()
            stored = replace(order, created_at=now, updated_at=now)
            self._orders[str(order.order_id)] = stored
        return stored

    def get(self, order_id: OrderId) -> Order | None:
        with self._lock:
            return self._orders.get(str(order_id))

    def update_status(self, order_id: OrderId, status: OrderStatus) -> Order | None:
        with self._lock:
            existing = self._orders.get(str(order_id))
            if existing is None:
                return None
            updated = existing.with_status(status, updated_at=self._stamp())
            self._orders[str(order_id)] = updated
        return updated

    def list_for_customer(self, user_id: UserId) -> list[Order]:
        with self._lock:
            return [order for order in self._orders.values() if order.user_id == user_id]

    def list_for_restaurant(self, restaurant_id: RestaurantId) -> list[Order]:
        with self._lock:
            return [
                order for order in self._orders.values() if order.restaurant_id == restaurant_id
            ]
