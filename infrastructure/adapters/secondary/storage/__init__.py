"""Storage adapters for persistence operations."""

from .car_repository import InMemoryCarStore, StoreCarRepository

__all__ = ["InMemoryCarStore", "StoreCarRepository"]
