from __future__ import annotations

import logging

from foodorder.application.ports.publisher import EventPublisher
from foodorder.infrastructure.cache.redis_client import get_redis_client

logger = logging.getLogger(__name__)


class RedisEventPublisher(EventPublisher):
    def __init__(self, timeout_seconds: float = 1.0) -> None:
        self._timeout_seconds = timeout_seconds

    def publish(self, channel: str, message: str) -> None:
        receivers = get_redis_client(timeout_seconds=self._timeout_seconds).publish(channel, message)
        logger.debug(
            "order_change_published",
            extra={"channel": channel, "receivers": int(receivers or 0)},
        )
