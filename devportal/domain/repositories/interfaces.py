"""Domain repository interfaces.

These interfaces define the contracts for data access without depending on
infrastructure implementations. Lookups of a single row raise
``RecordNotFoundError`` when the row is absent; paginated listings return
``(rows, total)``.
"""

from collections.abc import Awaitable, Mapping
from datetime import timedelta
from typing import TYPE_CHECKING, Any, Protocol
from uuid import UUID

if TYPE_CHECKING:
    from devportal.domain.entities import (
        Component,
        Group,
        Landscape,
        Link,
        Organization,
        Plugin,
        Project,
        Team,
        User,
    )


class LandscapeRepositoryProtocol(Protocol):
    """Repository interface for landscape persistence."""

    def get_by_id(self, id_: UUID) -> Awaitable["Landscape"]: ...

    def get_by_name(self, name: str) -> Awaitable["Landscape"]: ...

    def create(self, landscape: "Landscape") -> Awaitable["Landscape"]: ...

    def update(self, landscape: "Landscape") -> Awaitable["Landscape"]: ...

    def delete(self, id_: UUID) -> Awaitable[None]: ...

    def get_active_landscapes(
        self, limit: int, offset: int
    ) -> Awaitable[tuple[list["Landscape"], int]]: ...

    def get_landscapes_by_project_id(
        self, project_id: UUID, limit: int, offset: int
    ) -> Awaitable[tuple[list["Landscape"], int]]: ...

    def search(
        self, query: str, limit: int, offset: int
    ) -> Awaitable[tuple[list["Landscape"], int]]: ...

    def set_status(self, id_: UUID, status: str) -> Awaitable[None]:
        """Retained for API compatibility; landscapes carry no status."""
        ...


class PluginRepositoryProtocol(Protocol):
    """Repository interface for plugin persistence."""

    def get_by_id(self, id_: UUID) -> Awaitable["Plugin"]: ...

    def get_by_name(self, name: str) -> Awaitable["Plugin"]: ...

    def get_all(self, limit: int, offset: int) -> Awaitable[tuple[list["Plugin"], int]]: ...

    def create(self, plugin: "Plugin") -> Awaitable["Plugin"]: ...

    def update(self, plugin: "Plugin") -> Awaitable["Plugin"]: ...

    def delete(self, id_: UUID) -> Awaitable[None]: ...


class OrganizationRepositoryProtocol(Protocol):
    """Repository interface for organization lookups."""

    def get_by_id(self, id_: UUID) -> Awaitable["Organization"]: ...


class GroupRepositoryProtocol(Protocol):
    """Repository interface for group lookups."""

    def get_by_id(self, id_: UUID) -> Awaitable["Group"]: ...


class TeamRepositoryProtocol(Protocol):
    """Repository interface for team persistence."""

    def get_by_id(self, id_: UUID) -> Awaitable["Team"]: ...

    def get_by_name(self, group_id: UUID, name: str) -> Awaitable["Team"]:
        """Team named ``name`` within ``group_id``."""
        ...

    def get_by_name_global(self, name: str) -> Awaitable["Team"]: ...

    def get_by_organization_id(
        self, organization_id: UUID, limit: int, offset: int
    ) -> Awaitable[tuple[list["Team"], int]]: ...

    def get_all(self) -> Awaitable[list["Team"]]: ...

    def create(self, team: "Team") -> Awaitable["Team"]: ...

    def update(self, team: "Team") -> Awaitable["Team"]: ...

    def delete(self, id_: UUID) -> Awaitable[None]: ...


class ProjectRepositoryProtocol(Protocol):
    """Repository interface for project lookups."""

    def get_by_id(self, id_: UUID) -> Awaitable["Project"]: ...

    def get_by_name(self, name: str) -> Awaitable["Project"]: ...

    def get_all_projects(self) -> Awaitable[list["Project"]]: ...

    def get_health_metadata(self, project_id: UUID) -> Awaitable[tuple[str, str]]:
        """Health URL template and success regex for a project (empty when unset)."""
        ...


class ComponentRepositoryProtocol(Protocol):
    """Repository interface for component persistence."""

    def get_by_id(self, id_: UUID) -> Awaitable["Component"]: ...

    def get_by_name(self, name: str) -> Awaitable["Component"]: ...

    def get_all(self, limit: int, offset: int) -> Awaitable[tuple[list["Component"], int]]: ...

    def get_components_by_project_id(
        self, project_id: UUID, limit: int, offset: int
    ) -> Awaitable[tuple[list["Component"], int]]: ...

    def get_components_by_team_id(
        self, team_id: UUID, limit: int, offset: int
    ) -> Awaitable[tuple[list["Component"], int]]: ...

    def create(self, component: "Component") -> Awaitable["Component"]: ...

    def update(self, component: "Component") -> Awaitable["Component"]: ...

    def delete(self, id_: UUID) -> Awaitable[None]: ...


class UserRepositoryProtocol(Protocol):
    """Repository interface for user persistence."""

    def get_by_id(self, id_: UUID) -> Awaitable["User"]: ...

    def get_by_user_id(self, user_id: str) -> Awaitable["User"]: ...

    def get_by_name(self, name: str) -> Awaitable["User"]: ...

    def get_by_email(self, email: str) -> Awaitable["User"]: ...

    def get_by_team_id(
        self, team_id: UUID, limit: int, offset: int
    ) -> Awaitable[tuple[list["User"], int]]: ...

    def get_by_organization_id(
        self, organization_id: UUID, limit: int, offset: int
    ) -> Awaitable[tuple[list["User"], int]]: ...

    def search_by_organization(
        self, organization_id: UUID, query: str, limit: int, offset: int
    ) -> Awaitable[tuple[list["User"], int]]: ...

    def get_active_by_organization(
        self, organization_id: UUID, limit: int, offset: int
    ) -> Awaitable[tuple[list["User"], int]]: ...

    def search_by_name_or_title_global(
        self, query: str, limit: int, offset: int
    ) -> Awaitable[tuple[list["User"], int]]: ...

    def get_all(self, limit: int, offset: int) -> Awaitable[tuple[list["User"], int]]: ...

    def create(self, user: "User") -> Awaitable["User"]: ...

    def update(self, user: "User") -> Awaitable["User"]: ...

    def delete(self, id_: UUID) -> Awaitable[None]: ...


class LinkRepositoryProtocol(Protocol):
    """Repository interface for link lookups."""

    def get_by_owner(self, owner_id: UUID) -> Awaitable[list["Link"]]: ...

    def get_by_ids(self, ids: list[UUID]) -> Awaitable[list["Link"]]: ...


class CacheServiceProtocol(Protocol):
    """Key-value cache holding serialized payloads.

    ``delete``/``clear`` failures are the caller's to log; they must never
    fail the write operation that triggered them.
    """

    def get(self, key: str) -> Awaitable[bytes | None]: ...

    def set(self, key: str, value: bytes, ttl: timedelta | None = None) -> Awaitable[None]: ...

    def delete(self, key: str) -> Awaitable[None]: ...

    def delete_prefix(self, prefix: str) -> Awaitable[int]:
        """Remove every key starting with ``prefix``; returns the count removed."""
        ...

    def clear(self) -> Awaitable[None]: ...

    def stats(self) -> dict[str, Any]: ...


class RepositoryContentProvider(Protocol):
    """Fetches file content from a source-hosting provider on a user's behalf."""

    def get_repository_content(
        self,
        user_uuid: str,
        provider: str,
        owner: str,
        repo: str,
        path: str,
        ref: str,
    ) -> Awaitable[Mapping[str, Any]]: ...
