from __future__ import annotations

import hashlib
import logging
from datetime import datetime, timezone
from uuid import uuid4

from foodorder.application.dto.requests import CheckoutRequest
from foodorder.application.dto.responses import OrderResponse
from foodorder.application.mappers.order_mapper import to_order_response
from foodorder.application.metrics.order_lifecycle import (
    record_order_status,
    record_submission_failure,
)
from foodorder.application.ports.identity import CustomerIdentity
from foodorder.application.ports.publisher import EventPublisher
from foodorder.application.ports.repositories import (
    DuplicateOrderError,
    OrderRepository,
    OrderStoreError,
)
from foodorder.application.session import SessionRegistry
from foodorder.application.use_cases.order_events import TraceContext, publish_order_change
from foodorder.domain.cart.entities import Cart
from foodorder.domain.common.ids import OrderId, RestaurantId, SessionId
from foodorder.domain.common.money import Money
from foodorder.domain.order.entities import Order, OrderLine, create_pending_order
from foodorder.domain.order.events import OrderPlaced

DEFAULT_DELIVERY_FEE = Money(amount_cents=3000)

logger = logging.getLogger(__name__)


class NotAuthenticatedError(Exception):
    pass


class EmptyCartError(Exception):
    pass


class MissingDeliveryAddressError(Exception):
    pass


class OrderSubmissionError(Exception):
    pass


class SubmitOrder:
    """Turn a cart into a persisted ``pending`` order.

    Validation happens before any write and in a fixed order: identity, cart,
    delivery address. The cart is cleared only after the store accepted the
    order, so a failed submission can be retried from the same cart.
    """

    def __init__(
        self,
        order_repository: OrderRepository,
        publisher: EventPublisher,
        delivery_fee: Money = DEFAULT_DELIVERY_FEE,
    ) -> None:
        self._order_repository = order_repository
        self._publisher = publisher
        self._delivery_fee = delivery_fee

    def execute(
        self,
        cart: Cart,
        identity: CustomerIdentity | None,
        request_dto: CheckoutRequest,
        trace_ctx: TraceContext,
        idempotency_key: str | None = None,
    ) -> OrderResponse:
        if identity is None:
            record_submission_failure("not_authenticated")
            raise NotAuthenticatedError("you must be signed in to place an order")
        if cart.is_empty or cart.restaurant_id is None:
            record_submission_failure("empty_cart")
            raise EmptyCartError("cart is empty")
        if not request_dto.delivery_address.strip():
            record_submission_failure("missing_address")
            raise MissingDeliveryAddressError("delivery address is required")

        order_id = (
            _idempotent_order_id(str(identity.user_id), idempotency_key)
            if idempotency_key
            else OrderId(f"ord_{uuid4().hex[:12]}")
        )
        order = create_pending_order(
            order_id=order_id,
            user_id=identity.user_id,
            user_name=identity.name,
            user_email=identity.email,
            restaurant_id=RestaurantId(cart.restaurant_id),
            restaurant_name=cart.restaurant_name or "",
            lines=_snapshot_lines(cart),
            delivery_fee=self._delivery_fee,
            delivery_address=request_dto.delivery_address.strip(),
            delivery_instructions=request_dto.delivery_instructions.strip(),
            payment_method=request_dto.payment_method,
        )

        created = True
        try:
            persisted_order = self._order_repository.add(order)
        except DuplicateOrderError as exc:
            try:
                existing = self._order_repository.get(order_id) if idempotency_key else None
            except OrderStoreError as read_exc:
                record_submission_failure("store_error")
                raise OrderSubmissionError(str(read_exc)) from read_exc
            if existing is None or existing.user_id != identity.user_id:
                record_submission_failure("duplicate_id")
                raise OrderSubmissionError(str(exc)) from exc
            persisted_order = existing
            created = False
        except OrderStoreError as exc:
            record_submission_failure("store_error")
            logger.warning("order_submit_failed", extra={"order_id": str(order_id)})
            raise OrderSubmissionError(f"order could not be saved: {exc}") from exc

        cart.clear()

        if created:
            record_order_status(persisted_order)
            logger.info(
                "order_submitted",
                extra={
                    "order_id": str(persisted_order.order_id),
                    "restaurant_id": str(persisted_order.restaurant_id),
                },
            )
            self._publish_placed(persisted_order, trace_ctx)

        return to_order_response(persisted_order)

    def _publish_placed(self, order: Order, trace_ctx: TraceContext) -> None:
        event = OrderPlaced(
            order_id=order.order_id,
            user_id=order.user_id,
            restaurant_id=order.restaurant_id,
            total=order.total,
            occurred_at=datetime.now(timezone.utc),
        )
        publish_order_change(
            self._publisher,
            order,
            event_type="order.placed",
            occurred_at=event.occurred_at,
            trace_ctx=trace_ctx,
        )


class CheckoutSession:
    """Submit the cart of one client session.

    The session lock is held from the line snapshot to the cart clear, so a
    concurrent cart edit lands either in the order or in the emptied cart.
    """

    def __init__(self, sessions: SessionRegistry, submit_order: SubmitOrder) -> None:
        self._sessions = sessions
        self._submit_order = submit_order

    def execute(
        self,
        session_id: SessionId,
        identity: CustomerIdentity | None,
        request_dto: CheckoutRequest,
        trace_ctx: TraceContext,
        idempotency_key: str | None = None,
    ) -> OrderResponse:
        with self._sessions.locked(session_id) as session:
            return self._submit_order.execute(
                cart=session.cart,
                identity=identity,
                request_dto=request_dto,
                trace_ctx=trace_ctx,
                idempotency_key=idempotency_key,
            )


def _snapshot_lines(cart: Cart) -> list[OrderLine]:
    return [
        OrderLine(
            dish_id=line.item.item_id,
            dish_name=line.item.name,
            dish_image_url=line.item.image_url,
            quantity=line.quantity,
            unit_price=line.item.price_money,
            line_total=line.line_total,
        )
        for line in cart.lines
    ]


def _idempotent_order_id(user_id: str, idempotency_key: str) -> OrderId:
    digest = hashlib.sha256(f"{user_id}:{idempotency_key}".encode("utf-8")).hexdigest()
    return OrderId(f"ord_{digest[:12]}")
