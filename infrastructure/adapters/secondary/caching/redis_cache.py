"""Redis-backed distributed cache.

Suitable for applications running several instances that must share cached
entries. Registered in place of the in-memory stand-in by
``infrastructure.bootstrap.add_redis_cache``.
"""

import threading
from typing import Any, Optional

import redis
from loguru import logger

from application.ports.secondary.cache import TTL, ttl_seconds


class RedisDistributedCache:
    """``DistributedCache`` stored in Redis.

    The client is created on first use so that building the container never
    opens a connection.
    """

    def __init__(
        self,
        url: str = "redis://localhost:6379/0",
        key_prefix: str = "",
        client: Optional[Any] = None,
    ):
        """Initialize Redis cache.

        Args:
            url: Redis connection URL
            key_prefix: Prefix added to every key
            client: Pre-built ``redis.Redis`` client, mainly for tests
        """
        self._url = url
        self._key_prefix = key_prefix
        self._client = client
        self._lock = threading.Lock()

    def _get_client(self) -> Any:
        """Get or create Redis client."""
        if self._client is None:
            with self._lock:
                if self._client is None:
                    self._client = redis.Redis.from_url(self._url)
                    logger.info(f"Connected distributed cache to {self._url}")
        return self._client

    def _key(self, key: str) -> str:
        return f"{self._key_prefix}{key}"

    def get(self, key: str) -> Optional[bytes]:
        return self._get_client().get(self._key(key))

    def set(self, key: str, value: bytes, ttl: TTL = None) -> None:
        seconds = ttl_seconds(ttl)
        if seconds is None:
            self._get_client().set(self._key(key), value)
        else:
            # Redis expiry granularity is a millisecond and must be positive
            self._get_client().set(self._key(key), value, px=max(1, int(seconds * 1000)))

    def evict(self, key: str) -> None:
        self._get_client().delete(self._key(key))

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None
