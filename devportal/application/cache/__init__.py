"""Read-through caching for the service layer."""

from .keys import LANDSCAPE_NAMESPACE, CacheKeyBuilder, KeyPrefix, build_key
from .noop import NoOpCache
from .ttl import TTLConfig
from .wrapper import CacheWrapper, clear_cache, invalidate_keys, invalidate_prefixes

__all__ = [
    "LANDSCAPE_NAMESPACE",
    "CacheKeyBuilder",
    "CacheWrapper",
    "KeyPrefix",
    "NoOpCache",
    "TTLConfig",
    "build_key",
    "clear_cache",
    "invalidate_keys",
    "invalidate_prefixes",
]
