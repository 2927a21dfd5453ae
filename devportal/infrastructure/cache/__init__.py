"""Cache backends and their settings-driven factory."""

from datetime import timedelta

from devportal.application.cache import NoOpCache
from devportal.config import get_logger, settings
from devportal.config.settings import CacheConfig
from devportal.domain.repositories.interfaces import CacheServiceProtocol

from .memory import InMemoryCache

logger = get_logger(__name__)


def create_cache_service(config: CacheConfig | None = None) -> CacheServiceProtocol:
    """Build the configured cache backend, falling back to ``NoOpCache``."""
    config = config or settings.cache
    if not config.enabled or config.backend == "none":
        logger.info("Caching disabled; using no-op cache")
        return NoOpCache()

    logger.info("Using in-memory cache", default_ttl_s=config.default_ttl)
    return InMemoryCache(
        default_ttl=timedelta(seconds=config.default_ttl),
        max_entries=config.max_entries,
    )


__all__ = ["InMemoryCache", "NoOpCache", "create_cache_service"]
