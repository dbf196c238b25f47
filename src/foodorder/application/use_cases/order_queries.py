"""Read paths over the order store: single order and filtered order lists."""

from __future__ import annotations

from foodorder.application.dto.responses import OrderListResponse, OrderResponse
from foodorder.application.mappers.order_mapper import to_order_list_response, to_order_response
from foodorder.application.ports.identity import CustomerIdentity
from foodorder.application.ports.repositories import OrderRepository
from foodorder.application.use_cases.submit_order import NotAuthenticatedError
from foodorder.domain.common.ids import OrderId, RestaurantId
from foodorder.domain.order.entities import Order, OrderStatus
from foodorder.domain.order.lifecycle import sort_customer_orders, sort_restaurant_queue

_STATUS_MAP: dict[str, OrderStatus | None] = {"ALL": None}
_STATUS_MAP.update({status.name: status for status in OrderStatus})


class OrderNotFoundError(Exception):
    pass


class InvalidOrderStatusFilterError(Exception):
    pass


def _status_filter(status: str) -> OrderStatus | None:
    normalized_status = status.strip().upper()
    if normalized_status not in _STATUS_MAP:
        raise InvalidOrderStatusFilterError(f"invalid order status filter: {status}")
    return _STATUS_MAP[normalized_status]


def _filtered(orders: list[Order], status: OrderStatus | None) -> list[Order]:
    if status is None:
        return orders
    return [order for order in orders if order.status == status]


class GetOrder:
    """One-shot fetch for order detail screens; does not stay subscribed."""

    def __init__(self, order_repository: OrderRepository) -> None:
        self._order_repository = order_repository

    def execute(self, order_id: OrderId) -> OrderResponse:
        order = self._order_repository.get(order_id)
        if order is None:
            raise OrderNotFoundError(f"order {order_id} not found")
        return to_order_response(order)


class ListCustomerOrders:
    def __init__(self, order_repository: OrderRepository) -> None:
        self._order_repository = order_repository

    def execute(
        self,
        identity: CustomerIdentity | None,
        *,
        status: str = "ALL",
    ) -> OrderListResponse:
        if identity is None:
            raise NotAuthenticatedError("you must be signed in to list your orders")
        wanted = _status_filter(status)
        orders = self._order_repository.list_for_customer(identity.user_id)
        return to_order_list_response(sort_customer_orders(_filtered(orders, wanted)))


class ListRestaurantOrders:
    def __init__(self, order_repository: OrderRepository) -> None:
        self._order_repository = order_repository

    def execute(
        self,
        restaurant_id: RestaurantId,
        *,
        status: str = "ALL",
    ) -> OrderListResponse:
        wanted = _status_filter(status)
        orders = self._order_repository.list_for_restaurant(restaurant_id)
        return to_order_list_response(sort_restaurant_queue(_filtered(orders, wanted)))
