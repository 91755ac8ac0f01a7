"""Tests for the in-process cache adapters."""

from datetime import timedelta

import pytest

from application.ports.secondary import DistributedCache, MemoryCache
from infrastructure.adapters.secondary.caching import DistributedMemoryCache, InMemoryCache


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


class TestInMemoryCache:
    """Test suite for InMemoryCache."""

    def setup_method(self):
        self.clock = FakeClock()
        self.cache = InMemoryCache(clock=self.clock)

    def test_satisfies_port(self):
        """Test that the adapter implements MemoryCache."""
        assert isinstance(self.cache, MemoryCache)

    def test_set_get_evict(self):
        """Test basic operations."""
        self.cache.set("car:1", {"make": "Honda"})

        assert self.cache.get("car:1") == {"make": "Honda"}
        assert "car:1" in self.cache

        self.cache.evict("car:1")
        self.cache.evict("car:1")

        assert self.cache.get("car:1") is None

    def test_ttl_expiry(self):
        """Test that entries expire after their TTL."""
        self.cache.set("short", 1, ttl=10)
        self.cache.set("delta", 2, ttl=timedelta(minutes=1))
        self.cache.set("forever", 3)

        self.clock.advance(10)

        assert self.cache.get("short") is None
        assert self.cache.get("delta") == 2
        assert self.cache.get("forever") == 3
        assert len(self.cache) == 2

    def test_default_ttl(self):
        """Test that the default TTL applies when none is given."""
        cache = InMemoryCache(default_ttl=5, clock=self.clock)
        cache.set("key", "value")

        self.clock.advance(5)

        assert cache.get("key") is None

    def test_lru_eviction(self):
        """Test that the least recently used entry is evicted first."""
        cache = InMemoryCache(max_entries=2, clock=self.clock)
        cache.set("a", 1)
        cache.set("b", 2)
        cache.get("a")

        cache.set("c", 3)

        assert cache.get("a") == 1
        assert cache.get("b") is None
        assert cache.get("c") == 3

    def test_invalid_size(self):
        """Test that max_entries must be positive."""
        with pytest.raises(ValueError):
            InMemoryCache(max_entries=0)

    def test_cached_none_is_contained(self):
        """Test that a stored None counts as present."""
        self.cache.set("nothing", None)

        assert "nothing" in self.cache
        assert "other" not in self.cache
        assert self.cache.get("nothing") is None

    def test_expired_entry_is_not_contained(self):
        """Test membership after expiry."""
        self.cache.set("short", 1, ttl=10)
        self.clock.advance(10)

        assert "short" not in self.cache

    def test_set_purges_expired_entries(self):
        """Test that writes sweep entries that expired without being read."""
        cache = InMemoryCache(clock=self.clock, purge_interval=30)
        for i in range(5):
            cache.set(f"car:{i}", i, ttl=10)

        self.clock.advance(30)
        cache.set("fresh", "value")

        assert list(cache._entries) == ["fresh"]

    def test_set_skips_purge_within_interval(self):
        """Test that sweeps run at most once per interval."""
        cache = InMemoryCache(clock=self.clock, purge_interval=30)
        cache.set("short", 1, ttl=10)

        self.clock.advance(20)
        cache.set("fresh", "value")

        assert "short" in cache._entries

    def test_purge_expired(self):
        """Test an explicit sweep."""
        self.cache.set("short", 1, ttl=10)
        self.cache.set("forever", 2)
        self.clock.advance(10)

        assert self.cache.purge_expired() == 1
        assert self.cache.get("forever") == 2

    def test_clear(self):
        """Test clearing the cache."""
        self.cache.set("a", 1)
        self.cache.clear()

        assert len(self.cache) == 0


class TestDistributedMemoryCache:
    """Test suite for the in-process distributed cache stand-in."""

    def test_satisfies_port(self):
        """Test that the adapter implements DistributedCache."""
        assert isinstance(DistributedMemoryCache(), DistributedCache)

    def test_stores_bytes(self):
        """Test byte round trip and eviction."""
        cache = DistributedMemoryCache()
        cache.set("token", b"abc", ttl=60)

        assert cache.get("token") == b"abc"

        cache.evict("token")
        assert cache.get("token") is None

    def test_rejects_non_bytes(self):
        """Test that only bytes can be stored."""
        with pytest.raises(TypeError):
            DistributedMemoryCache().set("token", "abc")
