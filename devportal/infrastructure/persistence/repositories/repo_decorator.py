"""Logging and error translation for repository methods.

``@db_operation`` times each call and logs failures at a level chosen by
error class. SQLAlchemy's ``NoResultFound`` becomes the domain's
``RecordNotFoundError``; every other exception propagates unchanged.
"""

from collections.abc import Callable, Coroutine
import functools
import inspect
import time
from typing import Any

from sqlalchemy.exc import (
    DatabaseError,
    IntegrityError,
    MultipleResultsFound,
    NoResultFound,
    OperationalError,
    SQLAlchemyError,
    TimeoutError,
)

from devportal.config import get_logger
from devportal.domain.errors import RecordNotFoundError

logger = get_logger(__name__)

# First match wins: (error classes, log level, message prefix)
_FAILURE_LEVELS: tuple[tuple[tuple[type[BaseException], ...], str, str], ...] = (
    ((RecordNotFoundError, NoResultFound), "DEBUG", "DB record not found:"),
    ((MultipleResultsFound, IntegrityError), "WARNING", "DB integrity error:"),
    ((TimeoutError, OperationalError, DatabaseError), "ERROR", "DB error:"),
    ((SQLAlchemyError,), "ERROR", "SQLAlchemy error:"),
)


def _classify(error: BaseException) -> tuple[str, str]:
    for classes, level, label in _FAILURE_LEVELS:
        if isinstance(error, classes):
            return level, label
    return "ERROR", "Unhandled exception in"


def db_operation(operation_name: str | None = None):
    """Wrap an async repository method with timing and failure logging.

    Example:
        @db_operation("get_landscape_by_name")
        async def get_by_name(self, name: str) -> Landscape: ...
    """

    def decorator[**P, T](
        func: Callable[P, Coroutine[Any, Any, T]],
    ) -> Callable[P, Coroutine[Any, Any, T]]:
        name = operation_name or func.__name__

        if not inspect.iscoroutinefunction(func):
            raise TypeError(f"db_operation requires an async function, got {name}")

        @functools.wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            owner = type(args[0]).__name__ if args else "Repository"
            qualified = f"{owner}.{name}"
            fields = {"operation": name, **_loggable(kwargs)}
            started = time.perf_counter()

            logger.trace(f"DB operation starting: {qualified}", **fields)
            try:
                result = await func(*args, **kwargs)
            except Exception as e:
                level, label = _classify(e)
                elapsed = (time.perf_counter() - started) * 1000
                log = logger.opt(exception=level == "ERROR" and _unexpected(e))
                log.log(
                    level,
                    f"{label} {qualified}",
                    error=str(e),
                    exec_time_ms=elapsed,
                    **fields,
                )
                if isinstance(e, NoResultFound):
                    raise RecordNotFoundError(str(e)) from e
                raise

            logger.trace(
                f"DB operation completed: {qualified}",
                exec_time_ms=(time.perf_counter() - started) * 1000,
                **fields,
            )
            return result

        return wrapper

    return decorator


def _unexpected(error: BaseException) -> bool:
    """Non-SQLAlchemy failures get a traceback in the log."""
    return not isinstance(error, SQLAlchemyError | RecordNotFoundError)


def _loggable(kwargs: dict[str, Any]) -> dict[str, str]:
    """Scalar keyword arguments rendered as strings; private and collection values skipped."""
    return {
        key: str(value)
        for key, value in kwargs.items()
        if not key.startswith("_") and not isinstance(value, dict | list | set | tuple)
    }
