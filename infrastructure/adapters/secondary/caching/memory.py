"""In-process cache adapters.

``InMemoryCache`` backs the ``MemoryCache`` port. ``DistributedMemoryCache``
is the default ``DistributedCache``: it has the distributed contract (bytes in,
bytes out) but lives in one process, so it is only suitable for a single
instance deployment. Production deployments replace it with
``RedisDistributedCache``.
"""

import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable, Optional

from loguru import logger

from application.ports.secondary.cache import TTL, ttl_seconds

_MISSING = object()


@dataclass
class CacheEntry:
    """A cached value and its absolute expiry time."""
    value: Any
    expires_at: Optional[float] = None

    def is_expired(self, now: float) -> bool:
        return self.expires_at is not None and now >= self.expires_at


class InMemoryCache:
    """Thread-safe LRU cache with per-entry TTL.

    Args:
        max_entries: Evict least recently used entries beyond this size, None for unbounded
        default_ttl: TTL applied when ``set`` is called without one
        clock: Monotonic time source in seconds
        purge_interval: Minimum seconds between sweeps of expired entries during ``set``
    """

    def __init__(
        self,
        max_entries: Optional[int] = None,
        default_ttl: TTL = None,
        clock: Callable[[], float] = time.monotonic,
        purge_interval: float = 60.0,
    ):
        if max_entries is not None and max_entries <= 0:
            raise ValueError("max_entries must be positive")
        self._max_entries = max_entries
        self._default_ttl = ttl_seconds(default_ttl)
        self._clock = clock
        self._entries: "OrderedDict[str, CacheEntry]" = OrderedDict()
        self._lock = threading.Lock()
        self._purge_interval = purge_interval
        self._next_purge = clock() + purge_interval

    def _lookup(self, key: str) -> Any:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return _MISSING
            if entry.is_expired(self._clock()):
                del self._entries[key]
                return _MISSING
            self._entries.move_to_end(key)
            return entry.value

    def get(self, key: str) -> Optional[Any]:
        value = self._lookup(key)
        return None if value is _MISSING else value

    def set(self, key: str, value: Any, ttl: TTL = None) -> None:
        seconds = ttl_seconds(ttl) if ttl is not None else self._default_ttl
        now = self._clock()
        expires_at = now + seconds if seconds is not None else None
        with self._lock:
            if now >= self._next_purge:
                self._purge_expired(now)
            self._entries[key] = CacheEntry(value, expires_at)
            self._entries.move_to_end(key)
            if self._max_entries is not None:
                while len(self._entries) > self._max_entries:
                    evicted, _ = self._entries.popitem(last=False)
                    logger.debug(f"Evicted least recently used cache key '{evicted}'")

    def evict(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def purge_expired(self) -> int:
        """Drop every expired entry and return how many were dropped."""
        with self._lock:
            return self._purge_expired(self._clock())

    def _purge_expired(self, now: float) -> int:
        # caller holds the lock
        expired = [key for key, entry in self._entries.items() if entry.is_expired(now)]
        for key in expired:
            del self._entries[key]
        self._next_purge = now + self._purge_interval
        if expired:
            logger.debug(f"Purged {len(expired)} expired cache entries")
        return len(expired)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            now = self._clock()
            return sum(1 for entry in self._entries.values() if not entry.is_expired(now))

    def __contains__(self, key: str) -> bool:
        return self._lookup(key) is not _MISSING


class DistributedMemoryCache:
    """Process-local stand-in for a distributed cache.

    Not shared between application instances.
    """

    def __init__(self, cache: Optional[InMemoryCache] = None):
        self._cache = cache or InMemoryCache()
        logger.warning(
            "Using the in-memory distributed cache; entries are not shared between "
            "instances. Configure Redis for multi-instance deployments."
        )

    def get(self, key: str) -> Optional[bytes]:
        return self._cache.get(key)

    def set(self, key: str, value: bytes, ttl: TTL = None) -> None:
        if not isinstance(value, (bytes, bytearray)):
            raise TypeError(f"Distributed cache values must be bytes, got {type(value).__name__}")
        self._cache.set(key, bytes(value), ttl)

    def evict(self, key: str) -> None:
        self._cache.evict(key)
