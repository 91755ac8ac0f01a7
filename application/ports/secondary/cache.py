"""Secondary cache ports - caches the application reads from and writes to.

Two capabilities are exposed. ``MemoryCache`` is local to the process and
holds arbitrary objects. ``DistributedCache`` is meant to be shared between
application instances and therefore only stores bytes.
"""

from datetime import timedelta
from typing import Any, Optional, Protocol, Union, runtime_checkable

from typing_extensions import TypeAlias

# Seconds or a timedelta; None means no expiry
TTL: TypeAlias = Union[float, timedelta, None]


def ttl_seconds(ttl: TTL) -> Optional[float]:
    """Normalize a TTL to seconds."""
    if ttl is None:
        return None
    if isinstance(ttl, timedelta):
        return ttl.total_seconds()
    return float(ttl)


@runtime_checkable
class MemoryCache(Protocol):
    """Fast in-process cache."""

    def get(self, key: str) -> Optional[Any]:
        """Return the cached value, or None when absent or expired."""
        ...

    def set(self, key: str, value: Any, ttl: TTL = None) -> None:
        """Store a value, optionally expiring after ``ttl``."""
        ...

    def evict(self, key: str) -> None:
        """Remove a key; missing keys are ignored."""
        ...


@runtime_checkable
class DistributedCache(Protocol):
    """Cache shared by every instance of the application."""

    def get(self, key: str) -> Optional[bytes]:
        ...

    def set(self, key: str, value: bytes, ttl: TTL = None) -> None:
        ...

    def evict(self, key: str) -> None:
        ...
