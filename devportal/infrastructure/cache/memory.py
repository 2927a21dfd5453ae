"""In-process TTL cache backend on ``cachetools.TLRUCache``.

Each entry carries its own lifetime; ``TLRUCache`` drops expired entries on
access and on every write, so the backend never runs background work.
"""

from collections.abc import Callable
from datetime import timedelta
import math
import time
from typing import Any, NamedTuple

from cachetools import TLRUCache

from devportal.config import get_logger

logger = get_logger(__name__)

DEFAULT_TTL = timedelta(minutes=5)
DEFAULT_MAX_ENTRIES = 10_000


class _Stored(NamedTuple):
    payload: bytes
    lifetime: float


def _expires_at(_key: str, value: _Stored, now: float) -> float:
    return now + value.lifetime if value.lifetime > 0 else math.inf


class InMemoryCache:
    """Per-entry TTL cache with an enable switch and hit/miss counters.

    Operations never await, so concurrent coroutines on one event loop see a
    consistent store. When ``max_entries`` is reached the least recently used
    entry is evicted.
    """

    def __init__(
        self,
        default_ttl: timedelta = DEFAULT_TTL,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        *,
        enabled: bool = True,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._store: TLRUCache[str, _Stored] = TLRUCache(
            maxsize=max_entries, ttu=_expires_at, timer=clock
        )
        self._default_ttl = default_ttl
        self._enabled = enabled
        self._hits = 0
        self._misses = 0
        logger.debug(
            "Initialized in-memory cache",
            default_ttl_s=default_ttl.total_seconds(),
            max_entries=max_entries,
        )

    # -------------------------------------------------------------------------
    # CACHE SERVICE PROTOCOL
    # -------------------------------------------------------------------------

    async def get(self, key: str) -> bytes | None:
        """Return the stored payload, or ``None`` on miss/expiry/disabled."""
        stored = self._store.get(key) if self._enabled else None
        if stored is None:
            self._misses += 1
            return None
        self._hits += 1
        return stored.payload

    async def set(self, key: str, value: bytes, ttl: timedelta | None = None) -> None:
        """Store ``value``; ``None`` TTL uses the default, non-positive never expires."""
        if not self._enabled:
            return
        lifetime = self._default_ttl if ttl is None else ttl
        self._store[key] = _Stored(value, lifetime.total_seconds())

    async def delete(self, key: str) -> None:
        self._store.pop(key, None)

    async def delete_prefix(self, prefix: str) -> int:
        """Remove every key starting with ``prefix``."""
        doomed = [key for key in list(self._store.keys()) if key.startswith(prefix)]
        for key in doomed:
            self._store.pop(key, None)
        if doomed:
            logger.debug("Invalidated cache prefix", prefix=prefix, removed=len(doomed))
        return len(doomed)

    async def clear(self) -> None:
        self._store.clear()

    def stats(self) -> dict[str, Any]:
        """Snapshot of cache usage; expired entries are not counted."""
        self._store.expire()
        return {
            "type": "memory",
            "enabled": self._enabled,
            "item_count": len(self._store),
            "max_entries": self._store.maxsize,
            "hits": self._hits,
            "misses": self._misses,
        }

    # -------------------------------------------------------------------------
    # SWITCHES
    # -------------------------------------------------------------------------

    @property
    def enabled(self) -> bool:
        return self._enabled

    def enable(self) -> None:
        self._enabled = True

    def disable(self) -> None:
        """Stop caching and drop everything stored so far."""
        self._enabled = False
        self._store.clear()
