"""Helpers shared by the entity services."""

from collections.abc import Awaitable, Iterator
from contextlib import contextmanager

from devportal.domain.errors import (
    InternalError,
    NotFoundError,
    PortalError,
    RecordNotFoundError,
)


@contextmanager
def repository_errors(entity: str | None, prefix: str) -> Iterator[None]:
    """Translate repository failures raised inside the block.

    ``RecordNotFoundError`` becomes ``NotFoundError(entity)`` (or an internal
    error when ``entity`` is ``None``); taxonomy errors pass through; anything
    else is wrapped as ``InternalError(prefix)`` with the cause chained.
    """
    try:
        yield
    except RecordNotFoundError as e:
        if entity is None:
            raise InternalError(prefix, e) from e
        raise NotFoundError(entity) from e
    except PortalError:
        raise
    except Exception as e:
        raise InternalError(prefix, e) from e


async def find_existing[T](lookup: Awaitable[T], prefix: str) -> T | None:
    """Await a repository lookup, returning ``None`` when the row is absent.

    Used for uniqueness checks, where absence is the expected outcome.
    """
    try:
        return await lookup
    except RecordNotFoundError:
        return None
    except PortalError:
        raise
    except Exception as e:
        raise InternalError(prefix, e) from e
