from __future__ import annotations

from foodorder.application.ports.cache import CacheStore
from foodorder.infrastructure.cache.redis_client import get_redis_client

KEY_PREFIX = "foodorder:"


class RedisCacheStore(CacheStore):
    """Menu cache in Redis; every key is namespaced under ``foodorder:``."""

    def __init__(self, timeout_seconds: float = 1.0, key_prefix: str = KEY_PREFIX) -> None:
        self._timeout_seconds = timeout_seconds
        self._key_prefix = key_prefix

    def get(self, key: str) -> str | None:
        value = get_redis_client(timeout_seconds=self._timeout_seconds).get(self._key_prefix + key)
        if value is None:
            return None
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return str(value)

    def set(self, key: str, value: str, ttl_seconds: int) -> None:
        get_redis_client(timeout_seconds=self._timeout_seconds).set(
            name=self._key_prefix + key,
            value=value,
            ex=ttl_seconds,
        )
