from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime

from foodorder.application.mappers.event_envelope import serialize_order_event
from foodorder.application.ports.publisher import (
    EventPublisher,
    customer_orders_channel,
    restaurant_orders_channel,
)
from foodorder.domain.order.entities import Order

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TraceContext:
    """Correlation ids copied into every change notification."""

    trace_id: str | None
    request_id: str | None


def publish_order_change(
    publisher: EventPublisher,
    order: Order,
    *,
    event_type: str,
    occurred_at: datetime,
    trace_ctx: TraceContext,
    previous_status: str | None = None,
) -> None:
    """Notify both live views that can contain ``order``.

    Publishing is best-effort: the order write already succeeded and views
    resynchronise on the next change.
    """
    message = serialize_order_event(
        event_type=event_type,
        occurred_at=occurred_at,
        order=order,
        trace_id=trace_ctx.trace_id,
        request_id=trace_ctx.request_id,
        previous_status=previous_status,
    )
    for channel in (
        customer_orders_channel(str(order.user_id)),
        restaurant_orders_channel(str(order.restaurant_id)),
    ):
        try:
            publisher.publish(channel=channel, message=message)
        except Exception:
            logger.warning(
                "order_change_publish_failed",
                extra={"order_id": str(order.order_id), "channel": channel},
                exc_info=True,
            )
