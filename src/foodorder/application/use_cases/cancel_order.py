from __future__ import annotations

from foodorder.application.dto.responses import OrderResponse
from foodorder.application.ports.identity import CustomerIdentity
from foodorder.application.ports.publisher import EventPublisher
from foodorder.application.ports.repositories import OrderRepository
from foodorder.application.use_cases.order_events import TraceContext
from foodorder.application.use_cases.order_queries import OrderNotFoundError
from foodorder.application.use_cases.submit_order import NotAuthenticatedError
from foodorder.application.use_cases.update_order_status import write_order_status
from foodorder.domain.common.ids import OrderId
from foodorder.domain.order.entities import OrderStatus
from foodorder.domain.order.lifecycle import Actor, TransitionPolicy


class CancelOrder:
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
        identity: CustomerIdentity | None,
        trace_ctx: TraceContext,
    ) -> OrderResponse:
        if identity is None:
            raise NotAuthenticatedError("you must be signed in to cancel an order")

        order = self._order_repository.get(order_id)
        # Other customers' orders are reported as missing.
        if order is None or order.user_id != identity.user_id:
            raise OrderNotFoundError(f"order {order_id} not found")

        return write_order_status(
            order_repository=self._order_repository,
            publisher=self._publisher,
            order=order,
            target=OrderStatus.CANCELLED,
            actor=Actor.CUSTOMER,
            policy=self._policy,
            trace_ctx=trace_ctx,
        )
