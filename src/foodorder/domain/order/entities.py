from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum

from foodorder.domain.common.clock import EpochMillis
from foodorder.domain.common.ids import MenuItemId, OrderId, RestaurantId, UserId
from foodorder.domain.common.money import Money, sum_money

DEFAULT_PAYMENT_METHOD = "Efectivo"


class OrderStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PREPARING = "preparing"
    ON_DELIVERY = "on_delivery"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (OrderStatus.DELIVERED, OrderStatus.CANCELLED)

    @property
    def label(self) -> str:
        return _STATUS_LABELS[self]


_STATUS_LABELS: dict[OrderStatus, str] = {
    OrderStatus.PENDING: "Pendiente",
    OrderStatus.CONFIRMED: "Confirmado",
    OrderStatus.PREPARING: "En preparación",
    OrderStatus.ON_DELIVERY: "En camino",
    OrderStatus.DELIVERED: "Entregado",
    OrderStatus.CANCELLED: "Cancelado",
}


@dataclass(frozen=True)
class OrderLine:
    dish_id: MenuItemId
    dish_name: str
    dish_image_url: str
    quantity: int
    unit_price: Money
    line_total: Money

    def __post_init__(self) -> None:
        if self.quantity < 1:
            raise ValueError("quantity must be >= 1")
        if self.unit_price.currency != self.line_total.currency:
            raise ValueError("line_total currency must match unit_price currency")
        if self.line_total != self.unit_price.times(self.quantity):
            raise ValueError("line_total must equal unit_price * quantity")


@dataclass(frozen=True)
class Order:
    order_id: OrderId
    user_id: UserId
    user_name: str
    user_email: str
    restaurant_id: RestaurantId
    restaurant_name: str
    lines: list[OrderLine]
    subtotal: Money
    delivery_fee: Money
    total: Money
    delivery_address: str
    delivery_instructions: str
    payment_method: str
    status: OrderStatus
    created_at: EpochMillis | None = None
    updated_at: EpochMillis | None = None

    def __post_init__(self) -> None:
        if not self.lines:
            raise ValueError("order must contain at least one line")
        if not self.delivery_address.strip():
            raise ValueError("delivery_address must be non-empty")
        if self.subtotal != sum_money([line.line_total for line in self.lines]):
            raise ValueError("order subtotal must equal sum of line totals")
        if self.total != self.subtotal + self.delivery_fee:
            raise ValueError("order total must equal subtotal plus delivery fee")

    def with_status(self, status: OrderStatus, updated_at: EpochMillis | None) -> Order:
        return replace(self, status=status, updated_at=updated_at)


def create_pending_order(
    order_id: OrderId,
    user_id: UserId,
    user_name: str,
    user_email: str,
    restaurant_id: RestaurantId,
    restaurant_name: str,
    lines: list[OrderLine],
    delivery_fee: Money,
    delivery_address: str,
    delivery_instructions: str = "",
    payment_method: str = DEFAULT_PAYMENT_METHOD,
) -> Order:
    if not lines:
        raise ValueError("order must contain at least one line")

    subtotal = sum_money([line.line_total for line in lines])
    return Order(
        order_id=order_id,
        user_id=user_id,
        user_name=user_name,
        user_email=user_email,
        restaurant_id=restaurant_id,
        restaurant_name=restaurant_name,
        lines=lines,
        subtotal=subtotal,
        delivery_fee=delivery_fee,
        total=subtotal + delivery_fee,
        delivery_address=delivery_address,
        delivery_instructions=delivery_instructions,
        payment_method=payment_method,
        status=OrderStatus.PENDING,
    )


class OrderTransitionError(Exception):
    pass
