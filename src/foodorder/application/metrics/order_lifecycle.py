from __future__ import annotations

from datetime import datetime, timezone

from prometheus_client import Counter, Gauge, Histogram

from foodorder.domain.common.clock import from_epoch_millis
from foodorder.domain.order.entities import Order, OrderStatus

ORDERS_TOTAL = Counter(
    "foodorder_orders_total",
    "Total number of orders observed by status.",
    ["restaurant_id", "status"],
)

ORDER_TRANSITION_TOTAL = Counter(
    "foodorder_order_transition_total",
    "Total number of order lifecycle transitions.",
    ["from", "to"],
)

ORDER_SUBMISSION_FAILURES_TOTAL = Counter(
    "foodorder_order_submission_failures_total",
    "Total number of order submissions rejected or failed.",
    ["reason"],
)

ORDER_TIME_TO_DELIVERED_SECONDS = Histogram(
    "foodorder_order_time_to_delivered_seconds",
    "Time between order placement and delivery.",
)

CART_CONFLICTS_TOTAL = Counter(
    "foodorder_cart_conflicts_total",
    "Total number of cart additions rejected for mixing restaurants.",
)

LIVE_ORDER_VIEWS = Gauge(
    "foodorder_live_order_views",
    "Number of currently attached live order views.",
    ["kind"],
)


def record_order_status(order: Order) -> None:
    ORDERS_TOTAL.labels(
        restaurant_id=str(order.restaurant_id),
        status=order.status.value,
    ).inc()


def record_transition(from_status: OrderStatus, to_status: OrderStatus) -> None:
    ORDER_TRANSITION_TOTAL.labels(**{"from": from_status.value, "to": to_status.value}).inc()


def record_submission_failure(reason: str) -> None:
    ORDER_SUBMISSION_FAILURES_TOTAL.labels(reason=reason).inc()


def record_time_to_delivered(order: Order, now: datetime | None = None) -> None:
    if order.created_at is None:
        return
    current = now or datetime.now(timezone.utc)
    elapsed = (current - from_epoch_millis(order.created_at)).total_seconds()
    ORDER_TIME_TO_DELIVERED_SECONDS.observe(max(elapsed, 0.0))


def record_cart_conflict() -> None:
    CART_CONFLICTS_TOTAL.inc()


def record_live_view_attached(kind: str) -> None:
    LIVE_ORDER_VIEWS.labels(kind=kind).inc()


def record_live_view_detached(kind: str) -> None:
    LIVE_ORDER_VIEWS.labels(kind=kind).dec()
