"""Tests for the typed read-through cache wrapper and key construction."""

from datetime import timedelta
from unittest.mock import AsyncMock
from uuid import uuid4

from pydantic import BaseModel
import pytest

from devportal.application.cache import (
    CacheKeyBuilder,
    CacheWrapper,
    KeyPrefix,
    TTLConfig,
    build_key,
    invalidate_keys,
    invalidate_prefixes,
)
from devportal.config.settings import CacheTTLConfig
from devportal.domain.errors import NotFoundError
from devportal.infrastructure.cache import InMemoryCache


class Widget(BaseModel):
    id: int
    name: str


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class TestCacheWrapper:
    """Get-or-compute semantics over a real in-memory cache."""

    @pytest.fixture
    def wrapper(self, cache):
        return CacheWrapper[Widget](cache, Widget, default_ttl=timedelta(minutes=1))

    async def test_loader_runs_once_within_ttl(self, wrapper):
        loader = AsyncMock(return_value=Widget(id=1, name="gear"))

        first = await wrapper.get_or_fetch("widget:1", None, loader)
        second = await wrapper.get_or_fetch("widget:1", None, loader)

        assert first == second == Widget(id=1, name="gear")
        loader.assert_awaited_once()

    async def test_hit_returns_typed_value(self, wrapper, cache):
        await cache.set("widget:2", b'{"id":2,"name":"cog"}')
        loader = AsyncMock()

        result = await wrapper.get_or_fetch("widget:2", None, loader)

        assert isinstance(result, Widget)
        assert result.name == "cog"
        loader.assert_not_awaited()

    async def test_loader_errors_propagate_and_are_not_cached(self, wrapper, cache):
        loader = AsyncMock(side_effect=NotFoundError("widget"))

        with pytest.raises(NotFoundError):
            await wrapper.get_or_fetch("widget:3", None, loader)

        assert await cache.get("widget:3") is None

    async def test_corrupt_entry_is_treated_as_miss(self, wrapper, cache):
        await cache.set("widget:4", b"not json")
        loader = AsyncMock(return_value=Widget(id=4, name="fresh"))

        result = await wrapper.get_or_fetch("widget:4", None, loader)

        assert result.name == "fresh"
        assert await cache.get("widget:4") == b'{"id":4,"name":"fresh"}'

    async def test_backend_failures_degrade_to_loader(self):
        broken = AsyncMock()
        broken.get.side_effect = ConnectionError("down")
        broken.set.side_effect = ConnectionError("down")
        wrapper = CacheWrapper[Widget](broken, Widget)
        loader = AsyncMock(return_value=Widget(id=5, name="direct"))

        assert (await wrapper.get_or_fetch("widget:5", None, loader)).name == "direct"

    async def test_explicit_ttl_overrides_default(self):
        clock = FakeClock()
        wrapper = CacheWrapper[Widget](
            InMemoryCache(clock=clock), Widget, default_ttl=timedelta(minutes=1)
        )
        loader = AsyncMock(return_value=Widget(id=6, name="x"))

        await wrapper.get_or_fetch("widget:6", timedelta(seconds=5), loader)
        clock.advance(5)
        await wrapper.get_or_fetch("widget:6", timedelta(seconds=5), loader)

        assert loader.await_count == 2

    async def test_list_result_types(self, cache):
        wrapper = CacheWrapper[list[Widget]](cache, list[Widget])
        loader = AsyncMock(return_value=[Widget(id=1, name="a"), Widget(id=2, name="b")])

        await wrapper.get_or_fetch("widgets", None, loader)
        cached = await wrapper.get_or_fetch("widgets", None, loader)

        assert [w.name for w in cached] == ["a", "b"]
        loader.assert_awaited_once()


class TestInvalidation:
    async def test_invalidation_failures_are_swallowed(self):
        broken = AsyncMock()
        broken.delete.side_effect = ConnectionError("down")
        broken.delete_prefix.side_effect = ConnectionError("down")

        await invalidate_keys(broken, "a", "b")
        await invalidate_prefixes(broken, "c")

        assert broken.delete.await_count == 2

    async def test_prefix_invalidation_keeps_other_keys(self, cache):
        await cache.set("team:id:1", b"1")
        await cache.set("teams:org:1:page=1:size=20", b"2")

        await invalidate_prefixes(cache, KeyPrefix.TEAMS_BY_ORG)

        assert await cache.get("team:id:1") == b"1"
        assert await cache.get("teams:org:1:page=1:size=20") is None

    async def test_backend_without_prefix_support_is_cleared(self):
        class KeyValueOnly:
            cleared = False

            async def clear(self):
                self.cleared = True

        backend = KeyValueOnly()

        await invalidate_prefixes(backend, KeyPrefix.PLUGIN_LIST)

        assert backend.cleared is True

    async def test_wrapper_invalidation(self, cache):
        wrapper = CacheWrapper[Widget](cache, Widget)
        await cache.set("widget:1", b"{}")
        await cache.set("widgets:page=1", b"[]")
        await cache.set("other", b"x")

        await wrapper.invalidate("widget:1")
        await wrapper.invalidate_prefix("widgets:")

        assert await cache.get("widget:1") is None
        assert await cache.get("widgets:page=1") is None
        assert await cache.get("other") == b"x"


class TestCacheKeys:
    def test_build_key_is_deterministic(self):
        id_ = uuid4()
        assert build_key(KeyPrefix.LANDSCAPE_BY_ID, id_) == f"landscape:id:{id_}"
        assert build_key(KeyPrefix.LANDSCAPE_BY_ID, id_) == build_key("landscape:id", str(id_))

    def test_distinct_queries_do_not_collide(self):
        a = build_key(KeyPrefix.LANDSCAPE_SEARCH, "q:eu:page:1:size:20")
        b = build_key(KeyPrefix.LANDSCAPE_SEARCH, "q:eu:page:2:size:20")
        assert a != b

    def test_builder_sorts_params(self):
        one = CacheKeyBuilder("github").add("prs").add_params({"state": "open", "a": 1}).build()
        two = CacheKeyBuilder("github").add("prs").add_params({"a": 1, "state": "open"}).build()
        assert one == two == "github:prs:a=1&state=open"

    def test_builder_hash_is_namespaced(self):
        key = CacheKeyBuilder("search").add("x" * 500).hash()
        assert key.startswith("search:hash:")
        assert len(key) == len("search:hash:") + 64


class TestTTLConfig:
    def test_from_settings_converts_seconds(self):
        ttl = TTLConfig.from_settings(CacheTTLConfig(component_health=15, team=60))
        assert ttl.component_health == timedelta(seconds=15)
        assert ttl.team == timedelta(minutes=1)
