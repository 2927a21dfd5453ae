"""Cache backend that stores nothing."""

from datetime import timedelta
from typing import Any


class NoOpCache:
    """Every lookup misses and every store is discarded.

    Default backend when caching is not configured, so services behave
    identically with or without a cache.
    """

    async def get(self, key: str) -> bytes | None:
        return None

    async def set(self, key: str, value: bytes, ttl: timedelta | None = None) -> None:
        return None

    async def delete(self, key: str) -> None:
        return None

    async def delete_prefix(self, prefix: str) -> int:
        return 0

    async def clear(self) -> None:
        return None

    def stats(self) -> dict[str, Any]:
        return {"type": "noop", "enabled": False, "item_count": 0}
