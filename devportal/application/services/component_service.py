"""Component service: CRUD and the project-level component view."""

from collections.abc import Mapping
from datetime import timedelta
from typing import Any
from uuid import UUID

from devportal.application.cache import (
    CacheWrapper,
    KeyPrefix,
    NoOpCache,
    build_key,
    invalidate_keys,
    invalidate_prefixes,
)
from devportal.application.schemas import (
    ComponentListResponse,
    ComponentProjectView,
    ComponentResponse,
    CreateComponentRequest,
    UpdateComponentRequest,
)
from devportal.application.services.base import repository_errors
from devportal.application.services.converters import to_component_response
from devportal.application.utilities.pagination import clamp_page
from devportal.application.validation import RequestValidator
from devportal.config import get_logger, settings
from devportal.domain.entities import Component
from devportal.domain.metadata import (
    get_bool,
    get_nested_str,
    load_metadata,
    merge_metadata,
    normalize_metadata,
)
from devportal.domain.repositories.interfaces import (
    CacheServiceProtocol,
    ComponentRepositoryProtocol,
    ProjectRepositoryProtocol,
)

logger = get_logger(__name__)

# Effectively unbounded: a project view lists every component
PROJECT_VIEW_LIMIT = 1_000_000


def to_project_view(component: Component) -> ComponentProjectView:
    """Minimal view enriched with CI, Sonar, GitHub and flag metadata."""
    meta = load_metadata(component.metadata)
    sonar_project = get_nested_str(meta, "sonar", "project_id")
    return ComponentProjectView(
        id=component.id,
        owner_id=component.owner_id,
        name=component.name,
        title=component.title,
        description=component.description,
        qos=get_nested_str(meta, "ci", "qos"),
        sonar=f"{settings.components.sonar_dashboard_url}{sonar_project}" if sonar_project else None,
        github=get_nested_str(meta, "github", "url"),
        central_service=get_bool(meta, "central-service"),
        is_library=get_bool(meta, "isLibrary"),
        health=get_bool(meta, "health"),
    )


class ComponentService:
    """Component business logic with read-through caching."""

    def __init__(
        self,
        component_repo: ComponentRepositoryProtocol,
        project_repo: ProjectRepositoryProtocol,
        cache: CacheServiceProtocol | None = None,
        validator: RequestValidator | None = None,
        ttl: timedelta | None = None,
    ) -> None:
        self._repo = component_repo
        self._project_repo = project_repo
        self._cache = cache or NoOpCache()
        self._validator = validator or RequestValidator()
        self._ttl = ttl or timedelta(seconds=settings.cache.ttl.component)

        self._single = CacheWrapper[ComponentResponse](self._cache, ComponentResponse, self._ttl)
        self._lists = CacheWrapper[ComponentListResponse](
            self._cache, ComponentListResponse, self._ttl
        )
        self._views = CacheWrapper[list[ComponentProjectView]](
            self._cache, list[ComponentProjectView], self._ttl
        )
        self._titles = CacheWrapper[str](self._cache, str, self._ttl)

    async def create_component(
        self, request: CreateComponentRequest | Mapping[str, Any]
    ) -> ComponentResponse:
        req = self._validator.validate(CreateComponentRequest, request)
        component = Component(
            name=req.name,
            title=req.title,
            project_id=req.project_id,
            owner_id=req.owner_id,
            description=req.description,
            metadata=normalize_metadata(req.metadata),
            created_by=req.created_by,
            updated_by=req.created_by,
        )
        with repository_errors(None, "failed to create component"):
            created = await self._repo.create(component)

        await self._invalidate(created)
        logger.info("Component created", component_id=str(created.id), name=created.name)
        return to_component_response(created)

    async def get_by_id(self, id_: UUID) -> ComponentResponse:
        async def fetch() -> ComponentResponse:
            return to_component_response(await self._get_entity(id_))

        return await self._single.get_or_fetch(
            build_key(KeyPrefix.COMPONENT_BY_ID, id_), None, fetch
        )

    async def get_by_name(self, name: str) -> ComponentResponse:
        async def fetch() -> ComponentResponse:
            with repository_errors("component", "failed to get component"):
                return to_component_response(await self._repo.get_by_name(name))

        return await self._single.get_or_fetch(
            build_key(KeyPrefix.COMPONENT_BY_NAME, name), None, fetch
        )

    async def list_components(self, page: int, page_size: int) -> ComponentListResponse:
        window = clamp_page(page, page_size)

        async def fetch() -> ComponentListResponse:
            with repository_errors(None, "failed to get components"):
                components, total = await self._repo.get_all(window.page_size, window.offset)
            return ComponentListResponse(
                components=[to_component_response(c) for c in components],
                total=total,
                page=window.page,
                page_size=window.page_size,
            )

        key = build_key(KeyPrefix.COMPONENT_LIST, f"page:{window.page}:size:{window.page_size}")
        return await self._lists.get_or_fetch(key, None, fetch)

    async def get_by_project_name_all_view(self, project_name: str) -> list[ComponentProjectView]:
        """Every component of a project in the project view; empty name yields []."""
        if not project_name:
            return []

        async def fetch() -> list[ComponentProjectView]:
            with repository_errors("project", "failed to get project"):
                project = await self._project_repo.get_by_name(project_name)
            with repository_errors(None, "failed to get components by project"):
                components, _ = await self._repo.get_components_by_project_id(
                    project.id, PROJECT_VIEW_LIMIT, 0
                )
            return [to_project_view(component) for component in components]

        key = f"{KeyPrefix.COMPONENTS_BY_PROJECT}={project_name}:all"
        return await self._views.get_or_fetch(key, None, fetch)

    async def get_project_title_by_id(self, project_id: UUID) -> str:
        async def fetch() -> str:
            with repository_errors("project", "failed to get project"):
                project = await self._project_repo.get_by_id(project_id)
            return project.title

        return await self._titles.get_or_fetch(
            build_key(KeyPrefix.PROJECT_TITLE, project_id), None, fetch
        )

    async def update_component(
        self, id_: UUID, request: UpdateComponentRequest | Mapping[str, Any]
    ) -> ComponentResponse:
        """Partial update; supplied metadata is merged into the stored bag."""
        req = self._validator.validate(UpdateComponentRequest, request)
        component = await self._get_entity(id_)

        changes = req.model_dump(exclude_none=True, exclude={"metadata"})
        if req.metadata is not None:
            changes["metadata"] = merge_metadata(component.metadata, req.metadata)

        with repository_errors("component", "failed to update component"):
            updated = await self._repo.update(component.updated(**changes))

        await self._invalidate(component, updated)
        return to_component_response(updated)

    async def delete_component(self, id_: UUID) -> None:
        component = await self._get_entity(id_)
        with repository_errors("component", "failed to delete component"):
            await self._repo.delete(id_)
        await self._invalidate(component)
        logger.info("Component deleted", component_id=str(id_))

    async def get_entity(self, id_: UUID) -> Component:
        """Domain entity by id, uncached; used by health URL resolution."""
        return await self._get_entity(id_)

    async def _get_entity(self, id_: UUID) -> Component:
        with repository_errors("component", "failed to get component"):
            return await self._repo.get_by_id(id_)

    async def _invalidate(self, *components: Component) -> None:
        keys: list[str] = []
        for component in components:
            keys += [
                build_key(KeyPrefix.COMPONENT_BY_ID, component.id),
                build_key(KeyPrefix.COMPONENT_BY_NAME, component.name),
            ]
        await invalidate_keys(self._cache, *keys)
        await invalidate_prefixes(
            self._cache, KeyPrefix.COMPONENT_LIST, KeyPrefix.COMPONENTS_BY_PROJECT
        )
