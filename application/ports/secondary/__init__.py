"""Secondary ports for hexagonal architecture.

Secondary ports (driven ports) are interfaces the application core depends on
and that infrastructure adapters implement.
"""

from .cache import TTL, DistributedCache, MemoryCache, ttl_seconds
from .repository import CarRepository
from .translator import Translator

__all__ = [
    # Caching
    "MemoryCache",
    "DistributedCache",
    "TTL",
    "ttl_seconds",
    # Storage
    "CarRepository",
    # Mapping
    "Translator",
]
