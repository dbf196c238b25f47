from __future__ import annotations

import sys
from dataclasses import replace
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[3] / "src"))

from foodorder.domain.common.clock import EpochMillis
from foodorder.domain.common.ids import MenuItemId, OrderId, RestaurantId, UserId
from foodorder.domain.common.money import Money
from foodorder.domain.order.entities import (
    Order,
    OrderLine,
    OrderStatus,
    OrderTransitionError,
    create_pending_order,
)
from foodorder.domain.order.lifecycle import (
    Actor,
    TransitionPolicy,
    next_statuses,
    progress_step,
    sort_customer_orders,
    sort_restaurant_queue,
    validate_transition,
)


def _order(order_id: str, status: OrderStatus, created_at: int | None) -> Order:
    unit_price = Money(amount_cents=10000)
    order = create_pending_order(
        order_id=OrderId(order_id),
        user_id=UserId("usr_001"),
        user_name="Ana",
        user_email="",
        restaurant_id=RestaurantId("rst_001"),
        restaurant_name="La Cocina Verde",
        lines=[
            OrderLine(
                dish_id=MenuItemId("dsh_001"),
                dish_name="Bowl",
                dish_image_url="",
                quantity=1,
                unit_price=unit_price,
                line_total=unit_price,
            )
        ],
        delivery_fee=Money(amount_cents=3000),
        delivery_address="Av. Reforma 123",
    )
    stamp = EpochMillis(created_at) if created_at is not None else None
    return replace(order, status=status, created_at=stamp, updated_at=stamp)


def test_restaurant_queue_orders_by_priority_then_newest_first() -> None:
    a = _order("a", OrderStatus.DELIVERED, 100)
    b = _order("b", OrderStatus.PENDING, 50)
    c = _order("c", OrderStatus.PENDING, 200)

    assert [order.order_id for order in sort_restaurant_queue([a, b, c])] == ["c", "b", "a"]


def test_restaurant_queue_groups_pending_ahead_of_newer_preparing() -> None:
    orders = [
        _order("o1", OrderStatus.DELIVERED, 1_000),
        _order("o2", OrderStatus.PENDING, 2_000),
        _order("o3", OrderStatus.PREPARING, 3_000),
        _order("o4", OrderStatus.PENDING, 4_000),
    ]

    assert [order.order_id for order in sort_restaurant_queue(orders)] == [
        "o4",
        "o2",
        "o3",
        "o1",
    ]


def test_restaurant_queue_puts_cancelled_last() -> None:
    orders = [
        _order("cancelled", OrderStatus.CANCELLED, 900),
        _order("delivered", OrderStatus.DELIVERED, 100),
        _order("on_delivery", OrderStatus.ON_DELIVERY, 100),
        _order("preparing", OrderStatus.PREPARING, 100),
        _order("confirmed", OrderStatus.CONFIRMED, 100),
        _order("pending", OrderStatus.PENDING, 100),
    ]

    assert [order.order_id for order in sort_restaurant_queue(orders)] == [
        "pending",
        "confirmed",
        "preparing",
        "on_delivery",
        "delivered",
        "cancelled",
    ]


def test_customer_orders_newest_first_and_missing_timestamp_last() -> None:
    orders = [
        _order("old", OrderStatus.DELIVERED, 100),
        _order("unknown", OrderStatus.PENDING, None),
        _order("new", OrderStatus.CANCELLED, 300),
    ]

    assert [order.order_id for order in sort_customer_orders(orders)] == ["new", "old", "unknown"]


def test_same_status_rewrite_is_always_allowed() -> None:
    for status in OrderStatus:
        validate_transition(status, status, actor=Actor.RESTAURANT)
    validate_transition(OrderStatus.CANCELLED, OrderStatus.CANCELLED, actor=Actor.CUSTOMER)


def test_permissive_policy_allows_jumps_for_restaurant() -> None:
    validate_transition(OrderStatus.PENDING, OrderStatus.DELIVERED, actor=Actor.RESTAURANT)
    validate_transition(OrderStatus.ON_DELIVERY, OrderStatus.CONFIRMED, actor=Actor.RESTAURANT)


def test_strict_policy_allows_only_next_step_or_cancel() -> None:
    validate_transition(
        OrderStatus.CONFIRMED,
        OrderStatus.PREPARING,
        actor=Actor.RESTAURANT,
        policy=TransitionPolicy.STRICT,
    )
    validate_transition(
        OrderStatus.PREPARING,
        OrderStatus.CANCELLED,
        actor=Actor.RESTAURANT,
        policy=TransitionPolicy.STRICT,
    )
    with pytest.raises(OrderTransitionError):
        validate_transition(
            OrderStatus.PENDING,
            OrderStatus.DELIVERED,
            actor=Actor.RESTAURANT,
            policy=TransitionPolicy.STRICT,
        )


def test_terminal_statuses_cannot_change() -> None:
    with pytest.raises(OrderTransitionError):
        validate_transition(OrderStatus.DELIVERED, OrderStatus.PENDING, actor=Actor.RESTAURANT)
    with pytest.raises(OrderTransitionError):
        validate_transition(OrderStatus.CANCELLED, OrderStatus.CONFIRMED, actor=Actor.RESTAURANT)


def test_customer_may_only_cancel_pending_orders() -> None:
    validate_transition(OrderStatus.PENDING, OrderStatus.CANCELLED, actor=Actor.CUSTOMER)
    with pytest.raises(OrderTransitionError):
        validate_transition(OrderStatus.CONFIRMED, OrderStatus.CANCELLED, actor=Actor.CUSTOMER)
    with pytest.raises(OrderTransitionError):
        validate_transition(OrderStatus.PENDING, OrderStatus.CONFIRMED, actor=Actor.CUSTOMER)


def test_next_statuses_and_progress_track() -> None:
    assert next_statuses(OrderStatus.DELIVERED) == []
    assert next_statuses(OrderStatus.PREPARING, TransitionPolicy.STRICT) == [
        OrderStatus.ON_DELIVERY,
        OrderStatus.CANCELLED,
    ]
    assert OrderStatus.PENDING not in next_statuses(OrderStatus.PENDING)
    assert progress_step(OrderStatus.PENDING) == 0
    assert progress_step(OrderStatus.DELIVERED) == 4
    assert progress_step(OrderStatus.CANCELLED) == -1
