"""Order status transitions and the display ordering of order lists."""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum

from foodorder.domain.order.entities import Order, OrderStatus, OrderTransitionError


class TransitionPolicy(str, Enum):
    # Any status may overwrite any non-terminal status, including jumps such
    # as pending -> delivered. Matches how the mobile clients write statuses.
    PERMISSIVE = "permissive"
    # Only the next step of DELIVERY_PROGRESS, or cancellation.
    STRICT = "strict"


class Actor(str, Enum):
    CUSTOMER = "customer"
    RESTAURANT = "restaurant"


DELIVERY_PROGRESS: tuple[OrderStatus, ...] = (
    OrderStatus.PENDING,
    OrderStatus.CONFIRMED,
    OrderStatus.PREPARING,
    OrderStatus.ON_DELIVERY,
    OrderStatus.DELIVERED,
)

STATUS_PRIORITY: dict[OrderStatus, int] = {
    OrderStatus.PENDING: 0,
    OrderStatus.CONFIRMED: 1,
    OrderStatus.PREPARING: 2,
    OrderStatus.ON_DELIVERY: 3,
    OrderStatus.DELIVERED: 4,
    OrderStatus.CANCELLED: 5,
}


def validate_transition(
    current: OrderStatus,
    target: OrderStatus,
    *,
    actor: Actor,
    policy: TransitionPolicy = TransitionPolicy.PERMISSIVE,
) -> None:
    """Raise ``OrderTransitionError`` if ``actor`` may not write ``target``.

    Rewriting the current status is always accepted; the store only refreshes
    the update timestamp in that case.
    """
    if target == current:
        return
    if current.is_terminal:
        raise OrderTransitionError(
            f"cannot move order from terminal status={current.value} to {target.value}"
        )

    if actor == Actor.CUSTOMER:
        if target != OrderStatus.CANCELLED:
            raise OrderTransitionError(f"customers cannot set status={target.value}")
        if current != OrderStatus.PENDING:
            raise OrderTransitionError(f"customers cannot cancel from status={current.value}")
        return

    if target == OrderStatus.CANCELLED or policy == TransitionPolicy.PERMISSIVE:
        return
    if target != _next_step(current):
        raise OrderTransitionError(
            f"cannot move order from status={current.value} to {target.value}"
        )


def next_statuses(
    current: OrderStatus,
    policy: TransitionPolicy = TransitionPolicy.PERMISSIVE,
) -> list[OrderStatus]:
    """Statuses a restaurant can move ``current`` to, in display order."""
    if current.is_terminal:
        return []
    if policy == TransitionPolicy.PERMISSIVE:
        return [status for status in STATUS_PRIORITY if status != current]
    following = _next_step(current)
    candidates = [following] if following is not None else []
    return candidates + [OrderStatus.CANCELLED]


def progress_step(status: OrderStatus) -> int:
    if status == OrderStatus.CANCELLED:
        return -1
    return DELIVERY_PROGRESS.index(status)


def _next_step(current: OrderStatus) -> OrderStatus | None:
    position = DELIVERY_PROGRESS.index(current)
    if position + 1 >= len(DELIVERY_PROGRESS):
        return None
    return DELIVERY_PROGRESS[position + 1]


def _created_at(order: Order) -> int:
    return order.created_at if order.created_at is not None else 0


def sort_restaurant_queue(orders: Iterable[Order]) -> list[Order]:
    return sorted(
        orders,
        key=lambda order: (STATUS_PRIORITY[order.status], -_created_at(order)),
    )


def sort_customer_orders(orders: Iterable[Order]) -> list[Order]:
    return sorted(orders, key=_created_at, reverse=True)
