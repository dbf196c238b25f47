from __future__ import annotations

import asyncio
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[3] / "src"))

from foodorder.application.observation.order_views import (
    LiveOrderView,
    OrderSubscriptionError,
    OrderViewKind,
)
from foodorder.application.ports.publisher import customer_orders_channel
from foodorder.application.ports.repositories import OrderStoreError
from foodorder.domain.common.ids import MenuItemId, OrderId, RestaurantId, UserId
from foodorder.domain.common.money import Money
from foodorder.domain.order.entities import OrderLine, OrderStatus, create_pending_order
from foodorder.infrastructure.messaging.memory_bus import InMemoryEventBus
from foodorder.infrastructure.memory.repositories import InMemoryOrderRepository


class TickingClock:
    def __init__(self) -> None:
        self.now = 0

    def __call__(self) -> int:
        self.now += 1_000
        return self.now


class UnavailableSubscriber:
    async def subscribe(self, channel: str):
        raise ConnectionError("redis down")


class BrokenSubscription:
    def __aiter__(self):
        return self._messages()

    async def _messages(self):
        raise ConnectionError("connection reset")
        yield ""

    async def aclose(self) -> None:
        return None


class BrokenStreamSubscriber:
    async def subscribe(self, channel: str) -> BrokenSubscription:
        return BrokenSubscription()


class UnreachableOrderRepository(InMemoryOrderRepository):
    def list_for_restaurant(self, restaurant_id):
        raise OrderStoreError("connection refused")


def _place(repository: InMemoryOrderRepository, order_id: str, user_id: str = "usr_001") -> None:
    unit_price = Money(amount_cents=12000)
    repository.add(
        create_pending_order(
            order_id=OrderId(order_id),
            user_id=UserId(user_id),
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
    )


def test_restaurant_view_resorts_after_each_change() -> None:
    async def scenario() -> list[list[str]]:
        repository = InMemoryOrderRepository(clock=TickingClock())
        bus = InMemoryEventBus()
        _place(repository, "ord_001")
        _place(repository, "ord_002")

        seen: list[list[str]] = []
        view = LiveOrderView.for_restaurant(repository, bus, RestaurantId("rst_001"))
        async with view:
            snapshots = view.snapshots()
            seen.append([order.order_id for order in await snapshots.__anext__()])

            repository.update_status(OrderId("ord_002"), OrderStatus.DELIVERED)
            bus.publish("orders:restaurant:rst_001", "{}")
            seen.append([order.order_id for order in await snapshots.__anext__()])

            _place(repository, "ord_003")
            bus.publish("orders:restaurant:rst_001", "{}")
            seen.append([order.order_id for order in await snapshots.__anext__()])
            await snapshots.aclose()

        assert [order.order_id for order in view.current] == ["ord_003", "ord_001", "ord_002"]
        assert not view.attached
        assert bus.subscriber_count("orders:restaurant:rst_001") == 0
        return seen

    seen = asyncio.run(scenario())

    assert seen == [
        ["ord_002", "ord_001"],
        ["ord_001", "ord_002"],
        ["ord_003", "ord_001", "ord_002"],
    ]


def test_customer_view_only_contains_own_orders() -> None:
    async def scenario() -> list[str]:
        repository = InMemoryOrderRepository(clock=TickingClock())
        bus = InMemoryEventBus()
        _place(repository, "ord_001")
        _place(repository, "ord_002", user_id="usr_002")
        _place(repository, "ord_003")

        view = LiveOrderView.for_customer(repository, bus, UserId("usr_001"))
        assert view.kind == OrderViewKind.CUSTOMER
        assert view.channel == customer_orders_channel("usr_001")
        async with view:
            snapshots = view.snapshots()
            first = await snapshots.__anext__()
            await snapshots.aclose()
        return [order.order_id for order in first]

    assert asyncio.run(scenario()) == ["ord_003", "ord_001"]


def test_publish_from_worker_thread_reaches_view() -> None:
    async def scenario() -> list[str]:
        repository = InMemoryOrderRepository(clock=TickingClock())
        bus = InMemoryEventBus()

        view = LiveOrderView.for_customer(repository, bus, UserId("usr_001"))
        async with view:
            snapshots = view.snapshots()
            assert await snapshots.__anext__() == []

            def place_and_notify() -> None:
                _place(repository, "ord_001")
                bus.publish("orders:user:usr_001", "{}")

            await asyncio.to_thread(place_and_notify)
            latest = await asyncio.wait_for(snapshots.__anext__(), timeout=2.0)
            await snapshots.aclose()
        return [order.order_id for order in latest]

    assert asyncio.run(scenario()) == ["ord_001"]


def test_subscribe_failure_raises_subscription_error() -> None:
    async def scenario() -> None:
        view = LiveOrderView.for_customer(
            InMemoryOrderRepository(),
            UnavailableSubscriber(),
            UserId("usr_001"),
        )
        async with view:
            pass

    with pytest.raises(OrderSubscriptionError):
        asyncio.run(scenario())


def test_stream_failure_raises_subscription_error() -> None:
    async def scenario() -> None:
        view = LiveOrderView.for_restaurant(
            InMemoryOrderRepository(),
            BrokenStreamSubscriber(),
            RestaurantId("rst_001"),
        )
        async with view:
            async for _ in view.snapshots():
                pass

    with pytest.raises(OrderSubscriptionError):
        asyncio.run(scenario())


def test_snapshots_require_attached_view() -> None:
    async def scenario() -> None:
        view = LiveOrderView.for_customer(
            InMemoryOrderRepository(),
            InMemoryEventBus(),
            UserId("usr_001"),
        )
        await view.snapshots().__anext__()

    with pytest.raises(OrderSubscriptionError):
        asyncio.run(scenario())


def test_first_load_failure_raises_subscription_error() -> None:
    async def scenario() -> None:
        view = LiveOrderView.for_restaurant(
            UnreachableOrderRepository(),
            InMemoryEventBus(),
            RestaurantId("rst_001"),
        )
        async with view:
            await view.snapshots().__anext__()

    with pytest.raises(OrderSubscriptionError) as exc_info:
        asyncio.run(scenario())

    assert isinstance(exc_info.value.__cause__, OrderStoreError)
