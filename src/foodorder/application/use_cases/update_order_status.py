from __future__ import annotations

import logging
from datetime import datetime, timezone

from foodorder.application.dto.requests import UpdateOrderStatusRequest
from foodorder.application.dto.responses import OrderResponse
from foodorder.application.mappers.order_mapper import to_order_response
from foodorder.application.metrics.order_lifecycle import (
    record_order_status,
    record_time_to_delivered,
    record_transition,
)
from foodorder.application.ports.publisher import EventPublisher
from foodorder.application.ports.repositories import OrderRepository, OrderStoreError
from foodorder.application.use_cases.order_events import TraceContext, publish_order_change
from foodorder.application.use_cases.order_queries import OrderNotFoundError
from foodorder.domain.common.ids import OrderId
from foodorder.domain.order.entities import Order, OrderStatus, OrderTransitionError
from foodorder.domain.order.events import OrderStatusChanged
from foodorder.domain.order.lifecycle import Actor, TransitionPolicy, validate_transition

logger = logging.getLogger(__name__)


class InvalidOrderStatusError(Exception):
    pass


class InvalidOrderTransitionError(Exception):
    pass


class OrderStatusWriteError(Exception):
    pass


def parse_order_status(value: str) -> OrderStatus:
    try:
        return OrderStatus(value.strip().lower())
    except ValueError as exc:
        raise InvalidOrderStatusError(f"invalid order status: {value}") from exc


class UpdateOrderStatus:
    def __init__(
        self,
        order_repository: OrderRepository,
        publisher: EventPublisher,
        policy: TransitionPolicy = TransitionPolicy.PERMISSIVE,
    ) -> None:
        self._order_repository = order_repository
        self._publisher = publisher
        self._policy = policy

    def execute(
        self,
        order_id: OrderId,
        request_dto: UpdateOrderStatusRequest,
        trace_ctx: TraceContext,
    ) -> OrderResponse:
        target = parse_order_status(request_dto.status)
        order = self._order_repository.get(order_id)
        if order is None:
            raise OrderNotFoundError(f"order {order_id} not found")

        return write_order_status(
            order_repository=self._order_repository,
            publisher=self._publisher,
            order=order,
            target=target,
            actor=Actor.RESTAURANT,
            policy=self._policy,
            trace_ctx=trace_ctx,
        )


def write_order_status(
    *,
    order_repository: OrderRepository,
    publisher: EventPublisher,
    order: Order,
    target: OrderStatus,
    actor: Actor,
    policy: TransitionPolicy,
    trace_ctx: TraceContext,
) -> OrderResponse:
    """Write only ``status`` and ``updated_at``; live views pick the change up."""
    try:
        validate_transition(order.status, target, actor=actor, policy=policy)
    except OrderTransitionError as exc:
        raise InvalidOrderTransitionError(str(exc)) from exc

    try:
        updated = order_repository.update_status(order.order_id, target)
    except OrderStoreError as exc:
        logger.warning(
            "order_status_write_failed",
            extra={"order_id": str(order.order_id), "status": target.value},
        )
        raise OrderStatusWriteError(f"status of order {order.order_id} was not saved") from exc
    if updated is None:
        raise OrderNotFoundError(f"order {order.order_id} not found")

    event = OrderStatusChanged(
        order_id=updated.order_id,
        user_id=updated.user_id,
        restaurant_id=updated.restaurant_id,
        from_status=order.status,
        to_status=target,
        occurred_at=datetime.now(timezone.utc),
    )
    record_transition(from_status=event.from_status, to_status=event.to_status)
    record_order_status(updated)
    if target == OrderStatus.DELIVERED and order.status != OrderStatus.DELIVERED:
        record_time_to_delivered(updated, now=event.occurred_at)
    logger.info(
        "order_status_changed",
        extra={
            "order_id": str(updated.order_id),
            "restaurant_id": str(updated.restaurant_id),
            "status": target.value,
        },
    )

    publish_order_change(
        publisher,
        updated,
        event_type="order.status_changed",
        occurred_at=event.occurred_at,
        trace_ctx=trace_ctx,
        previous_status=event.from_status.value,
    )
    return to_order_response(updated)
