"""Tests for the in-memory and no-op cache backends."""

from datetime import timedelta
from unittest.mock import AsyncMock

import pytest

from devportal.application.cache import NoOpCache
from devportal.application.services import LandscapeService
from devportal.config.settings import CacheConfig
from devportal.infrastructure import cache as backends
from devportal.infrastructure.cache import InMemoryCache, create_cache_service


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class TestInMemoryCache:
    @pytest.fixture
    def clock(self):
        return FakeClock()

    @pytest.fixture
    def memory_cache(self, clock):
        return InMemoryCache(default_ttl=timedelta(seconds=60), clock=clock)

    async def test_set_and_get(self, memory_cache):
        await memory_cache.set("k", b"v")
        assert await memory_cache.get("k") == b"v"
        assert await memory_cache.get("missing") is None

    async def test_entries_expire_after_ttl(self, memory_cache, clock):
        await memory_cache.set("k", b"v", timedelta(seconds=10))
        clock.advance(9)
        assert await memory_cache.get("k") == b"v"
        clock.advance(1)
        assert await memory_cache.get("k") is None

    async def test_none_ttl_uses_default(self, memory_cache, clock):
        await memory_cache.set("k", b"v")
        clock.advance(59)
        assert await memory_cache.get("k") == b"v"
        clock.advance(1)
        assert await memory_cache.get("k") is None

    async def test_non_positive_ttl_never_expires(self, memory_cache, clock):
        await memory_cache.set("k", b"v", timedelta(0))
        clock.advance(10_000)
        assert await memory_cache.get("k") == b"v"

    async def test_overwrite_restarts_lifetime(self, memory_cache, clock):
        await memory_cache.set("k", b"old", timedelta(seconds=30))
        clock.advance(20)
        await memory_cache.set("k", b"new", timedelta(seconds=30))
        clock.advance(20)
        assert await memory_cache.get("k") == b"new"

    async def test_delete_prefix_only_touches_matching_keys(self, memory_cache):
        await memory_cache.set("landscape:list:1", b"a")
        await memory_cache.set("landscape:list:2", b"b")
        await memory_cache.set("landscape:id:1", b"c")

        removed = await memory_cache.delete_prefix("landscape:list")

        assert removed == 2
        assert await memory_cache.get("landscape:id:1") == b"c"

    async def test_delete_missing_key_is_silent(self, memory_cache):
        await memory_cache.delete("nothing")

    async def test_expired_entries_are_not_counted(self, memory_cache, clock):
        await memory_cache.set("old", b"1", timedelta(seconds=5))
        clock.advance(6)
        await memory_cache.set("new", b"2")
        assert memory_cache.stats()["item_count"] == 1

    async def test_least_recently_used_entry_is_evicted(self, clock):
        small = InMemoryCache(max_entries=2, clock=clock)
        await small.set("a", b"1")
        await small.set("b", b"2")
        await small.get("a")
        await small.set("c", b"3")

        assert await small.get("b") is None
        assert await small.get("a") == b"1"
        assert await small.get("c") == b"3"

    async def test_disabled_cache_stores_nothing(self, memory_cache):
        await memory_cache.set("k", b"v")
        memory_cache.disable()
        assert not memory_cache.enabled
        await memory_cache.set("k2", b"v")
        assert await memory_cache.get("k") is None
        memory_cache.enable()
        assert await memory_cache.get("k2") is None

    async def test_stats_count_hits_and_misses(self, memory_cache):
        await memory_cache.set("k", b"v")
        await memory_cache.get("k")
        await memory_cache.get("nope")
        stats = memory_cache.stats()
        assert stats["hits"] == 1
        assert stats["misses"] == 1
        assert stats["type"] == "memory"


class TestNoOpCache:
    async def test_every_lookup_misses(self):
        cache = NoOpCache()
        await cache.set("k", b"v")
        assert await cache.get("k") is None
        assert await cache.delete_prefix("k") == 0
        assert cache.stats()["enabled"] is False

    def test_services_default_to_application_noop_cache(self):
        service = LandscapeService(AsyncMock(), AsyncMock())

        assert backends.NoOpCache is NoOpCache
        assert isinstance(service._cache, NoOpCache)


class TestCreateCacheService:
    def test_memory_backend(self):
        cache = create_cache_service(CacheConfig(backend="memory", max_entries=50))

        assert isinstance(cache, InMemoryCache)
        assert cache.stats()["max_entries"] == 50

    @pytest.mark.parametrize(
        "config", [CacheConfig(backend="none"), CacheConfig(enabled=False)]
    )
    def test_disabled_falls_back_to_noop(self, config):
        assert isinstance(create_cache_service(config), NoOpCache)
