from __future__ import annotations

from typing import Protocol

from foodorder.domain.common.ids import MenuItemId, OrderId, RestaurantId, UserId
from foodorder.domain.menu.entities import MenuItem
from foodorder.domain.order.entities import Order, OrderStatus


class DishRepository(Protocol):
    def get(self, item_id: MenuItemId) -> MenuItem | None: ...

    def list_for_restaurant(self, restaurant_id: RestaurantId) -> list[MenuItem]: ...


class OrderRepository(Protocol):
    def add(self, order: Order) -> Order:
        """Create-if-absent write; returns the order with store timestamps."""
        ...

    def get(self, order_id: OrderId) -> Order | None: ...

    def update_status(self, order_id: OrderId, status: OrderStatus) -> Order | None:
        """Write ``status`` and a fresh ``updated_at``; ``None`` if the order is unknown."""
        ...

    def list_for_customer(self, user_id: UserId) -> list[Order]: ...

    def list_for_restaurant(self, restaurant_id: RestaurantId) -> list[Order]: ...


class DuplicateOrderError(Exception):
    pass


class OrderStoreError(Exception):
    pass
