"""Cache adapters implementing MemoryCache and DistributedCache."""

from .memory import DistributedMemoryCache, InMemoryCache
from .redis_cache import RedisDistributedCache

__all__ = ["InMemoryCache", "DistributedMemoryCache", "RedisDistributedCache"]
