"""Typed read-through cache wrapper.

``CacheWrapper[T]`` memoizes loader results under a key with a TTL. Payloads
are serialized with a pydantic ``TypeAdapter`` for the declared result type,
so hits come back as fully typed objects.

Caching is purely an optimization: backend failures and undecodable entries
are logged and treated as misses, and invalidation never raises. There is no
single-flight protection; concurrent misses may each run the loader and the
last write wins.
"""

from collections.abc import Awaitable, Callable
from datetime import timedelta
from typing import Any, Final

from pydantic import TypeAdapter, ValidationError

from devportal.config import get_logger
from devportal.domain.repositories.interfaces import CacheServiceProtocol

logger = get_logger(__name__)

_MISS: Final = object()


async def invalidate_keys(cache: CacheServiceProtocol, *keys: str) -> None:
    """Delete ``keys``, logging (never raising) backend failures."""
    for key in keys:
        try:
            await cache.delete(key)
        except Exception as e:
            logger.warning("Failed to invalidate cache key", cache_key=key, error=str(e))


async def invalidate_prefixes(cache: CacheServiceProtocol, *prefixes: str) -> None:
    """Delete every key under ``prefixes``.

    Backends without prefix support are cleared entirely. Failures are logged.
    """
    if not hasattr(cache, "delete_prefix"):
        await clear_cache(cache)
        return
    for prefix in prefixes:
        try:
            await cache.delete_prefix(prefix)
        except Exception as e:
            logger.warning("Failed to invalidate cache prefix", prefix=prefix, error=str(e))


async def clear_cache(cache: CacheServiceProtocol) -> None:
    """Drop all cached entries, logging (never raising) backend failures."""
    try:
        await cache.clear()
    except Exception as e:
        logger.warning("Failed to clear cache", error=str(e))


class CacheWrapper[T]:
    """Get-or-compute access to a cache for one result type."""

    def __init__(
        self,
        cache: CacheServiceProtocol,
        result_type: Any,
        default_ttl: timedelta | None = None,
    ) -> None:
        self._cache = cache
        self._adapter: TypeAdapter[T] = TypeAdapter(result_type)
        self._default_ttl = default_ttl

    async def get_or_fetch(
        self,
        key: str,
        ttl: timedelta | None,
        fetcher: Callable[[], Awaitable[T]],
    ) -> T:
        """Return the cached value for ``key`` or load, store and return it.

        Errors raised by ``fetcher`` propagate unchanged and nothing is cached.
        """
        cached = await self._read(key)
        if cached is not _MISS:
            logger.debug("Cache hit", cache_key=key)
            return cached  # type: ignore[return-value]

        logger.debug("Cache miss", cache_key=key)
        result = await fetcher()
        await self._write(key, result, ttl if ttl is not None else self._default_ttl)
        return result

    async def invalidate(self, *keys: str) -> None:
        await invalidate_keys(self._cache, *keys)

    async def invalidate_prefix(self, *prefixes: str) -> None:
        await invalidate_prefixes(self._cache, *prefixes)

    async def _read(self, key: str) -> Any:
        try:
            payload = await self._cache.get(key)
        except Exception as e:
            logger.warning("Cache lookup failed, treating as miss", cache_key=key, error=str(e))
            return _MISS
        if payload is None:
            return _MISS
        try:
            return self._adapter.validate_json(payload)
        except ValidationError as e:
            logger.warning(
                "Cached data is corrupted, treating as cache miss",
                cache_key=key,
                error=str(e),
            )
            return _MISS

    async def _write(self, key: str, value: T, ttl: timedelta | None) -> None:
        try:
            payload = self._adapter.dump_json(value, by_alias=True)
            await self._cache.set(key, payload, ttl)
        except Exception as e:
            logger.warning("Failed to cache response", cache_key=key, error=str(e))
            return
        logger.debug("Cached response", cache_key=key)
