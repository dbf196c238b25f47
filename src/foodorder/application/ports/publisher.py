from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Protocol


class EventPublisher(Protocol):
    def publish(self, channel: str, message: str) -> None: ...


class ChannelSubscription(Protocol):
    def __aiter__(self) -> AsyncIterator[str]: ...

    async def aclose(self) -> None: ...


class EventSubscriber(Protocol):
    async def subscribe(self, channel: str) -> ChannelSubscription: ...


def customer_orders_channel(user_id: str) -> str:
    return f"orders:user:{user_id}"


def restaurant_orders_channel(restaurant_id: str) -> str:
    return f"orders:restaurant:{restaurant_id}"
