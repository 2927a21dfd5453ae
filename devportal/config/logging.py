"""Loguru setup for the developer portal service layer.

Modules obtain a bound logger once at import time::

    from devportal.config import get_logger
    logger = get_logger(__name__)
    logger.info("Landscape created", landscape_id=str(landscape.id))

Keyword arguments become structured ``extra`` fields, which the JSON file
sink keeps and the console sink drops.
"""

from collections.abc import Awaitable, Callable
import functools
from pathlib import Path
import sys
from typing import Any

from loguru import logger

from .settings import settings

SERVICE_NAME = "devportal"

CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{extra[module]}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)


def setup_loguru_logger(verbose: bool = False) -> None:
    """Replace loguru's default handler with a console and a JSON file sink.

    Args:
        verbose: Log DEBUG to the console with full tracebacks and variable values.
    """
    logger.remove()
    logger.configure(extra={"service": SERVICE_NAME, "module": "root"})

    logger.add(
        sink=sys.stdout,
        level="DEBUG" if verbose else settings.logging.console_level,
        format=CONSOLE_FORMAT,
        colorize=True,
        backtrace=verbose,
        diagnose=verbose,
    )

    log_file = Path(settings.logging.log_file)
    log_file.parent.mkdir(parents=True, exist_ok=True)
    logger.add(
        sink=str(log_file),
        level=settings.logging.file_level,
        serialize=True,
        rotation="10 MB",
        retention="1 week",
        compression="zip",
        # Queued writes lag behind the console; real-time debugging disables the queue
        enqueue=not settings.logging.real_time_debug,
        backtrace=True,
        diagnose=True,
        catch=True,
    )


def get_logger(name: str) -> Any:
    """Logger bound to ``name`` and the service; loguru exposes no public logger type."""
    return logger.bind(module=name, service=SERVICE_NAME)


def log_startup_info(cache: Any = None) -> None:
    """Announce startup, dump every settings group at DEBUG and report the cache backend."""
    startup = get_logger(__name__)
    rule = "=" * 50

    startup.info(rule)
    startup.info("Developer Portal service layer")
    startup.info(rule)

    for group, values in settings.model_dump().items():
        startup.debug("  {}:", group.upper())
        if not isinstance(values, dict):
            startup.debug("    {}", values)
            continue
        for key, value in values.items():
            startup.debug("    {} = {}", key, value)

    if cache is not None:
        startup.info("Cache backend ready", **cache.stats())


def resilient_operation(operation_name: str | None = None):
    """Log a failing boundary call with its traceback, then re-raise it unchanged.

    Translation into the error taxonomy stays with the caller.

    Example:
        @resilient_operation("plugin_content_fetch")
        async def fetch(provider, path): ...
    """

    def decorator[**P, R](
        func: Callable[P, Awaitable[R]],
    ) -> Callable[P, Awaitable[R]]:
        label = operation_name or func.__name__

        @functools.wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            try:
                return await func(*args, **kwargs)
            except Exception as e:
                logger.exception(f"Error in {label}: {e!s}")
                raise

        return wrapper

    return decorator
