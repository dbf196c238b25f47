from __future__ import annotations

import asyncio
import logging
import threading
from collections import defaultdict
from collections.abc import AsyncIterator

from foodorder.application.ports.publisher import EventPublisher, EventSubscriber

logger = logging.getLogger(__name__)


class InMemoryChannelSubscription:
    def __init__(self, bus: InMemoryEventBus, channel: str, loop: asyncio.AbstractEventLoop) -> None:
        self.channel = channel
        self._bus = bus
        self._loop = loop
        self._queue: asyncio.Queue[str | None] = asyncio.Queue()
        self._closed = False

    def deliver(self, message: str) -> None:
        # Publishers run on worker threads; the queue belongs to the loop.
        if self._loop.is_closed():
            return
        self._loop.call_soon_threadsafe(self._queue.put_nowait, message)

    def __aiter__(self) -> AsyncIterator[str]:
        return self._messages()

    async def _messages(self) -> AsyncIterator[str]:
        while True:
            message = await self._queue.get()
            if message is None:
                return
            yield message

    async def aclose(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._bus.remove(self)
        # Queued behind deliveries already scheduled from other threads.
        self._loop.call_soon(self._queue.put_nowait, None)


class InMemoryEventBus(EventPublisher, EventSubscriber):
    """Process-local pub/sub used when Redis is not configured."""

    def __init__(self) -> None:
        self._subscriptions: dict[str, set[InMemoryChannelSubscription]] = defaultdict(set)
        self._lock = threading.Lock()

    def publish(self, channel: str, message: str) -> None:
        with self._lock:
            targets = list(self._subscriptions.get(channel, set()))
        for subscription in targets:
            subscription.deliver(message)

    async def subscribe(self, channel: str) -> InMemoryChannelSubscription:
        subscription = InMemoryChannelSubscription(
            bus=self,
            channel=channel,
            loop=asyncio.get_running_loop(),
        )
        with self._lock:
            self._subscriptions[channel].add(subscription)
        logger.debug("memory_channel_subscribed", extra={"channel": channel})
        return subscription

    def remove(self, subscription: InMemoryChannelSubscription) -> None:
        with self._lock:
            subscriptions = self._subscriptions.get(subscription.channel)
            if not subscriptions:
                return
            subscriptions.discard(subscription)
            if not subscriptions:
                self._subscriptions.pop(subscription.channel, None)

    def subscriber_count(self, channel: str) -> int:
        with self._lock:
            return len(self._subscriptions.get(channel, set()))
