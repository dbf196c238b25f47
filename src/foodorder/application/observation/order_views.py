"""Live order lists backed by change notifications.

A ``LiveOrderView`` attaches to one notification channel when entered and
detaches when exited. It publishes the full, freshly sorted result set once on
attach and again after every notification; notifications only say that
something changed, the view always re-reads the record store.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Callable
from enum import Enum
from types import TracebackType

from foodorder.application.metrics.order_lifecycle import (
    record_live_view_attached,
    record_live_view_detached,
)
from foodorder.application.ports.publisher import (
    ChannelSubscription,
    EventSubscriber,
    customer_orders_channel,
    restaurant_orders_channel,
)
from foodorder.application.ports.repositories import OrderRepository
from foodorder.domain.common.ids import RestaurantId, UserId
from foodorder.domain.order.entities import Order
from foodorder.domain.order.lifecycle import sort_customer_orders, sort_restaurant_queue

logger = logging.getLogger(__name__)


class OrderViewKind(str, Enum):
    CUSTOMER = "customer"
    RESTAURANT = "restaurant"


class OrderSubscriptionError(Exception):
    pass


class LiveOrderView:
    def __init__(
        self,
        kind: OrderViewKind,
        channel: str,
        load: Callable[[], list[Order]],
        sort: Callable[[list[Order]], list[Order]],
        subscriber: EventSubscriber,
    ) -> None:
        self.kind = kind
        self.channel = channel
        self._load = load
        self._sort = sort
        self._subscriber = subscriber
        self._subscription: ChannelSubscription | None = None
        self.current: list[Order] = []

    @classmethod
    def for_customer(
        cls,
        repository: OrderRepository,
        subscriber: EventSubscriber,
        user_id: UserId,
    ) -> LiveOrderView:
        return cls(
            kind=OrderViewKind.CUSTOMER,
            channel=customer_orders_channel(str(user_id)),
            load=lambda: repository.list_for_customer(user_id),
            sort=sort_customer_orders,
            subscriber=subscriber,
        )

    @classmethod
    def for_restaurant(
        cls,
        repository: OrderRepository,
        subscriber: EventSubscriber,
        restaurant_id: RestaurantId,
    ) -> LiveOrderView:
        return cls(
            kind=OrderViewKind.RESTAURANT,
            channel=restaurant_orders_channel(str(restaurant_id)),
            load=lambda: repository.list_for_restaurant(restaurant_id),
            sort=sort_restaurant_queue,
            subscriber=subscriber,
        )

    @property
    def attached(self) -> bool:
        return self._subscription is not None

    async def __aenter__(self) -> LiveOrderView:
        try:
            self._subscription = await self._subscriber.subscribe(self.channel)
        except Exception as exc:
            raise OrderSubscriptionError(f"could not subscribe to {self.channel}") from exc
        record_live_view_attached(self.kind.value)
        logger.info("live_view_attached", extra={"channel": self.channel})
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        subscription = self._subscription
        if subscription is None:
            return
        self._subscription = None
        record_live_view_detached(self.kind.value)
        logger.info("live_view_detached", extra={"channel": self.channel})
        await subscription.aclose()

    async def refresh(self) -> list[Order]:
        orders = await asyncio.to_thread(self._load)
        self.current = self._sort(orders)
        return self.current

    async def snapshots(self) -> AsyncIterator[list[Order]]:
        if self._subscription is None:
            raise OrderSubscriptionError("live view is not attached")
        subscription = self._subscription

        try:
            yield await self.refresh()
            async for _ in subscription:
                yield await self.refresh()
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            logger.warning("live_view_subscription_failed", extra={"channel": self.channel})
            raise OrderSubscriptionError(f"subscription to {self.channel} failed") from exc
