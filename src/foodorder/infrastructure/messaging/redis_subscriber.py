from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator

from redis import asyncio as redis_asyncio

from foodorder.application.ports.publisher import EventSubscriber
from foodorder.infrastructure.cache.redis_client import new_async_redis_client

logger = logging.getLogger(__name__)


def _decode_value(value: bytes | str | None) -> str | None:
    if value is None:
        return None
    if isinstance(value, bytes):
        return value.decode("utf-8")
    return value


async def _aclose(resource: object) -> None:
    aclose = getattr(resource, "aclose", None)
    if callable(aclose):
        await aclose()
    else:
        await resource.close()  # type: ignore[attr-defined]


class RedisChannelSubscription:
    """One Redis pub/sub connection subscribed to a single channel.

    A dropped connection ends iteration with the underlying error; callers
    decide whether to attach again.
    """

    def __init__(
        self,
        client: redis_asyncio.Redis,
        pubsub: redis_asyncio.client.PubSub,
        channel: str,
    ) -> None:
        self.channel = channel
        self._client = client
        self._pubsub = pubsub
        self._closed = False

    def __aiter__(self) -> AsyncIterator[str]:
        return self._messages()

    async def _messages(self) -> AsyncIterator[str]:
        while not self._closed:
            message = await self._pubsub.get_message(ignore_subscribe_messages=True, timeout=1.0)
            if message is None:
                await asyncio.sleep(0.05)
                continue

            payload = _decode_value(message.get("data"))
            if payload:
                yield payload

    async def aclose(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            await self._pubsub.unsubscribe(self.channel)
        finally:
            await _aclose(self._pubsub)
            await _aclose(self._client)
        logger.info("redis_channel_unsubscribed", extra={"channel": self.channel})


class RedisEventSubscriber(EventSubscriber):
    def __init__(self, redis_url: str | None = None) -> None:
        self._redis_url = redis_url

    async def subscribe(self, channel: str) -> RedisChannelSubscription:
        client = new_async_redis_client(self._redis_url)
        pubsub = client.pubsub()
        try:
            await pubsub.subscribe(channel)
        except Exception:
            await _aclose(pubsub)
            await _aclose(client)
            raise
        logger.info("redis_channel_subscribed", extra={"channel": channel})
        return RedisChannelSubscription(client=client, pubsub=pubsub, channel=channel)
