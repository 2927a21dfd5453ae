"""Shared utilities and helper functions for domain entities."""

from datetime import UTC, datetime
from typing import Any, Self

import attrs

from devportal.domain.metadata import load_metadata

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(UTC)


def ensure_utc(dt: datetime | None) -> datetime | None:
    """Ensure datetime is timezone-aware with UTC."""
    if dt is None:
        return None
    return dt.replace(tzinfo=UTC) if dt.tzinfo is None else dt


def format_timestamp(dt: datetime) -> str:
    """Render a timestamp the way API consumers expect it."""
    return ensure_utc(dt).astimezone(UTC).strftime(TIMESTAMP_FORMAT)


class EntityMixin:
    """Copy-on-write helpers shared by every portal entity."""

    __slots__ = ()

    def updated(self, **changes: Any) -> Self:
        """Create a copy with ``changes`` applied and ``updated_at`` refreshed."""
        return attrs.evolve(self, updated_at=utc_now(), **changes)

    def with_metadata(self, metadata: str | None) -> Self:
        """Create a copy carrying a new raw metadata document."""
        return self.updated(metadata=metadata)

    @property
    def metadata_dict(self) -> dict[str, Any]:
        """Metadata parsed leniently; unreadable documents read as empty."""
        return load_metadata(self.metadata)  # type: ignore[attr-defined]
