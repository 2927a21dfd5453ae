"""Pagination clamping shared by the entity services."""

from attrs import define

from devportal.config import settings


@define(frozen=True, slots=True)
class PageRequest:
    """Effective page after clamping."""

    page: int
    page_size: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size


def clamp_page(
    page: int,
    page_size: int,
    default_size: int | None = None,
    max_size: int | None = None,
) -> PageRequest:
    """Clamp page to >= 1 and page size to (0, max], else the default size."""
    default_size = default_size or settings.pagination.default_page_size
    max_size = max_size or settings.pagination.max_page_size
    if page < 1:
        page = 1
    if page_size < 1 or page_size > max_size:
        page_size = default_size
    return PageRequest(page=page, page_size=page_size)


def clamp_limit(limit: int, default_size: int | None = None, max_size: int | None = None) -> int:
    """Clamp a raw limit to (0, max], else the default size."""
    return clamp_page(1, limit, default_size, max_size).page_size


def clamp_offset(offset: int) -> int:
    return max(offset, 0)
