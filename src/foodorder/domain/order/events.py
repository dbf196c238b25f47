from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from foodorder.domain.common.ids import OrderId, RestaurantId, UserId
from foodorder.domain.common.money import Money
from foodorder.domain.order.entities import OrderStatus


@dataclass(frozen=True)
class OrderPlaced:
    order_id: OrderId
    user_id: UserId
    restaurant_id: RestaurantId
    total: Money
    occurred_at: datetime


@dataclass(frozen=True)
class OrderStatusChanged:
    order_id: OrderId
    user_id: UserId
    restaurant_id: RestaurantId
    from_status: OrderStatus
    to_status: OrderStatus
    occurred_at: datetime
