from __future__ import annotations

import asyncio
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[3] / "src"))

from foodorder.application.ports.repositories import DuplicateOrderError
from foodorder.domain.common.ids import MenuItemId, OrderId, RestaurantId, UserId
from foodorder.domain.common.money import Money
from foodorder.domain.order.entities import Order, OrderLine, OrderStatus, create_pending_order
from foodorder.infrastructure.memory.cache_store import InMemoryCacheStore
from foodorder.infrastructure.memory.repositories import (
    InMemoryDishRepository,
    InMemoryOrderRepository,
)
from foodorder.infrastructure.messaging.memory_bus import InMemoryEventBus
from foodorder.tools.seed import demo_menu_items


def _order(order_id: str) -> Order:
    unit_price = Money(amount_cents=8000)
    return create_pending_order(
        order_id=OrderId(order_id),
        user_id=UserId("usr_001"),
        user_name="Ana",
        user_email="",
        restaurant_id=RestaurantId("rst_002"),
        restaurant_name="Tacos El Güero",
        lines=[
            OrderLine(
                dish_id=MenuItemId("dsh_004"),
                dish_name="Tacos al pastor",
                dish_image_url="",
                quantity=1,
                unit_price=unit_price,
                line_total=unit_price,
            )
        ],
        delivery_fee=Money(amount_cents=3000),
        delivery_address="Av. Reforma 123",
    )


def test_order_store_stamps_monotonic_timestamps() -> None:
    repository = InMemoryOrderRepository(clock=lambda: 5_000)

    first = repository.add(_order("ord_001"))
    second = repository.add(_order("ord_002"))
    updated = repository.update_status(OrderId("ord_001"), OrderStatus.CONFIRMED)

    assert first.created_at == 5_000
    assert first.updated_at == first.created_at
    assert second.created_at == 5_001
    assert updated.updated_at == 5_002
    assert updated.created_at == 5_000


def test_order_store_is_create_if_absent() -> None:
    repository = InMemoryOrderRepository()
    repository.add(_order("ord_001"))

    with pytest.raises(DuplicateOrderError):
        repository.add(_order("ord_001"))


def test_update_of_unknown_order_returns_none() -> None:
    assert InMemoryOrderRepository().update_status(OrderId("ord_404"), OrderStatus.CONFIRMED) is None


def test_dish_store_lookup() -> None:
    repository = InMemoryDishRepository(demo_menu_items())

    assert repository.get(MenuItemId("dsh_004")).restaurant_name == "Tacos El Güero"
    assert repository.get(MenuItemId("missing")) is None
    assert len(repository.list_for_restaurant(RestaurantId("rst_001"))) == 3


def test_cache_entries_expire(monkeypatch) -> None:
    cache = InMemoryCacheStore()
    now = [100.0]
    monkeypatch.setattr(
        "foodorder.infrastructure.memory.cache_store.time.monotonic",
        lambda: now[0],
    )

    cache.set("dishes:rst_001", "payload", ttl_seconds=10)
    assert cache.get("dishes:rst_001") == "payload"

    now[0] = 111.0
    assert cache.get("dishes:rst_001") is None


def test_event_bus_delivers_to_channel_subscribers_only() -> None:
    async def scenario() -> list[str]:
        bus = InMemoryEventBus()
        subscription = await bus.subscribe("orders:user:usr_001")
        bus.publish("orders:user:usr_002", "other")
        bus.publish("orders:user:usr_001", "mine")
        await subscription.aclose()

        received = [message async for message in subscription]
        assert bus.subscriber_count("orders:user:usr_001") == 0
        return received

    assert asyncio.run(scenario()) == ["mine"]
