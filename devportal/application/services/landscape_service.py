"""Landscape service: CRUD, search and cached projections over landscapes.

Reads go through the typed cache wrapper; writes go straight to the
repository and then invalidate the entity's by-id and by-name entries plus
the list, search and by-project prefixes.
"""

from collections.abc import Mapping
from typing import Any
from uuid import UUID

from devportal.application.cache import (
    LANDSCAPE_NAMESPACE,
    CacheKeyBuilder,
    CacheWrapper,
    KeyPrefix,
    NoOpCache,
    TTLConfig,
    build_key,
    invalidate_keys,
    invalidate_prefixes,
)
from devportal.application.schemas import (
    CreateLandscapeRequest,
    LandscapeListResponse,
    LandscapeMinimalResponse,
    LandscapePage,
    LandscapeResponse,
    UpdateLandscapeRequest,
)
from devportal.application.services.base import find_existing, repository_errors
from devportal.application.services.converters import metadata_object
from devportal.application.utilities.pagination import (
    clamp_limit,
    clamp_offset,
    clamp_page,
)
from devportal.application.validation import RequestValidator
from devportal.config import get_logger, settings
from devportal.domain.entities import Landscape, format_timestamp
from devportal.domain.errors import AlreadyExistsError
from devportal.domain.metadata import get_bool, get_str, load_metadata, normalize_metadata
from devportal.domain.repositories.interfaces import (
    CacheServiceProtocol,
    LandscapeRepositoryProtocol,
    ProjectRepositoryProtocol,
)

logger = get_logger(__name__)

PROJECT_PAGE_SIZE = 100
PROJECT_ALL_LIMIT = 1000

# Metadata keys copied verbatim into the minimal projection
_MINIMAL_STRING_KEYS = {
    "auditlog": "auditlog",
    "cam": "cam",
    "cockpit": "cockpit",
    "concourse": "concourse",
    "control-center": "control_center",
    "dynatrace": "dynatrace",
    "gardener": "gardener",
    "git": "git",
    "grafana": "grafana",
    "health": "health",
    "iaas-console": "iaas_console",
    "kibana": "kibana",
    "monitoring": "monitoring",
    "operation-console": "operation_console",
    "plutono": "plutono",
    "prometheus": "prometheus",
    "type": "type",
}
_MINIMAL_BOOL_KEYS = {
    "extension": "extension",
    "is-central-region": "is_central_region",
}


def to_landscape_response(landscape: Landscape) -> LandscapeResponse:
    return LandscapeResponse(
        id=landscape.id,
        name=landscape.name,
        title=landscape.title,
        description=landscape.description,
        project_id=landscape.project_id,
        domain=landscape.domain,
        environment=landscape.environment,
        metadata=metadata_object(landscape.metadata),
        created_at=format_timestamp(landscape.created_at),
        updated_at=format_timestamp(landscape.updated_at),
    )


def to_minimal_response(landscape: Landscape) -> LandscapeMinimalResponse:
    """Trimmed projection enriched from well-known metadata keys.

    Empty strings and ``false`` flags are left unset so they are omitted.
    """
    meta = load_metadata(landscape.metadata)
    enrichment: dict[str, Any] = {}
    for key, attribute in _MINIMAL_STRING_KEYS.items():
        if (value := get_str(meta, key)) is not None:
            enrichment[attribute] = value
    for key, attribute in _MINIMAL_BOOL_KEYS.items():
        if get_bool(meta, key):
            enrichment[attribute] = True

    return LandscapeMinimalResponse(
        id=landscape.id,
        name=landscape.name,
        title=landscape.title,
        description=landscape.description,
        domain=landscape.domain,
        environment=landscape.environment,
        **enrichment,
    )


class LandscapeService:
    """Landscape business logic with read-through caching."""

    def __init__(
        self,
        landscape_repo: LandscapeRepositoryProtocol,
        project_repo: ProjectRepositoryProtocol,
        cache: CacheServiceProtocol | None = None,
        ttl_config: TTLConfig | None = None,
        validator: RequestValidator | None = None,
    ) -> None:
        self._repo = landscape_repo
        self._project_repo = project_repo
        self._cache = cache or NoOpCache()
        self._ttl = ttl_config or TTLConfig.from_settings(settings.cache.ttl)
        self._validator = validator or RequestValidator()

        self._single = CacheWrapper[LandscapeResponse](self._cache, LandscapeResponse)
        self._pages = CacheWrapper[LandscapePage](self._cache, LandscapePage)
        self._lists = CacheWrapper[LandscapeListResponse](self._cache, LandscapeListResponse)
        self._minimal = CacheWrapper[list[LandscapeMinimalResponse]](
            self._cache, list[LandscapeMinimalResponse]
        )

    # -------------------------------------------------------------------------
    # WRITES
    # -------------------------------------------------------------------------

    async def create_landscape(
        self, request: CreateLandscapeRequest | Mapping[str, Any]
    ) -> LandscapeResponse:
        """Create a landscape with a globally unique name."""
        req = self._validator.validate(CreateLandscapeRequest, request)

        existing = await find_existing(
            self._repo.get_by_name(req.name),
            "failed to check existing landscape by name",
        )
        if existing is not None:
            raise AlreadyExistsError("landscape", "with this name")

        landscape = Landscape(
            name=req.name,
            title=req.title,
            description=req.description,
            project_id=req.project_id,
            domain=req.domain,
            environment=req.environment,
            metadata=normalize_metadata(req.metadata),
        )
        with repository_errors(None, "failed to create landscape"):
            created = await self._repo.create(landscape)

        await self._invalidate(created)
        logger.info("Landscape created", landscape_id=str(created.id), name=created.name)
        return to_landscape_response(created)

    async def update_landscape(
        self, id_: UUID, request: UpdateLandscapeRequest | Mapping[str, Any]
    ) -> LandscapeResponse:
        """Apply an update; title and description always, the rest when supplied."""
        req = self._validator.validate(UpdateLandscapeRequest, request)
        landscape = await self._get_entity(id_)

        changes: dict[str, Any] = {"title": req.title, "description": req.description}
        if req.project_id is not None:
            changes["project_id"] = req.project_id
        if req.domain:
            changes["domain"] = req.domain
        if req.environment:
            changes["environment"] = req.environment
        if req.metadata is not None:
            changes["metadata"] = normalize_metadata(req.metadata)

        with repository_errors("landscape", "failed to update landscape"):
            updated = await self._repo.update(landscape.updated(**changes))

        await self._invalidate(updated)
        return to_landscape_response(updated)

    async def delete_landscape(self, id_: UUID) -> None:
        landscape = await self._get_entity(id_)
        with repository_errors("landscape", "failed to delete landscape"):
            await self._repo.delete(id_)
        await self._invalidate(landscape)
        logger.info("Landscape deleted", landscape_id=str(id_))

    async def set_status(self, id_: UUID, status: str) -> None:
        """Kept for API compatibility; landscapes have no persisted status."""
        landscape = await self._get_entity(id_)
        with repository_errors("landscape", "failed to set landscape status"):
            await self._repo.set_status(id_, status)
        await self._invalidate(landscape)

    async def invalidate_all_caches(self) -> None:
        await invalidate_prefixes(self._cache, LANDSCAPE_NAMESPACE)

    # -------------------------------------------------------------------------
    # READS
    # -------------------------------------------------------------------------

    async def get_landscape_by_id(self, id_: UUID) -> LandscapeResponse:
        async def fetch() -> LandscapeResponse:
            return to_landscape_response(await self._get_entity(id_))

        key = build_key(KeyPrefix.LANDSCAPE_BY_ID, id_)
        return await self._single.get_or_fetch(key, self._ttl.landscape_by_id, fetch)

    async def get_by_name(self, name: str) -> LandscapeResponse:
        async def fetch() -> LandscapeResponse:
            with repository_errors("landscape", "failed to get landscape"):
                return to_landscape_response(await self._repo.get_by_name(name))

        key = build_key(KeyPrefix.LANDSCAPE_BY_NAME, name)
        return await self._single.get_or_fetch(key, self._ttl.landscape_by_name, fetch)

    async def get_landscapes_by_organization(
        self, organization_id: UUID | None, limit: int, offset: int
    ) -> tuple[list[LandscapeResponse], int]:
        """Paginated active landscapes.

        Landscapes are not scoped by organization, so ``organization_id`` is
        accepted for interface compatibility only.
        """
        limit = clamp_limit(limit)
        offset = clamp_offset(offset)

        async def fetch() -> LandscapePage:
            with repository_errors(None, "failed to get landscapes"):
                landscapes, total = await self._repo.get_active_landscapes(limit, offset)
            return LandscapePage(
                responses=[to_landscape_response(item) for item in landscapes],
                total=total,
            )

        key = build_key(KeyPrefix.LANDSCAPE_LIST, f"limit:{limit}:offset:{offset}")
        page = await self._pages.get_or_fetch(key, self._ttl.landscape_list, fetch)
        return page.responses, page.total

    async def get_by_project_name(self, project_name: str) -> LandscapeListResponse:
        async def fetch() -> LandscapeListResponse:
            project_id = await self._project_id(project_name)
            with repository_errors(None, "failed to get landscapes by project"):
                landscapes, total = await self._repo.get_landscapes_by_project_id(
                    project_id, PROJECT_PAGE_SIZE, 0
                )
            return LandscapeListResponse(
                landscapes=[to_landscape_response(item) for item in landscapes],
                total=total,
                page=1,
                page_size=PROJECT_PAGE_SIZE,
            )

        key = build_key(KeyPrefix.LANDSCAPE_BY_PROJECT, project_name)
        return await self._lists.get_or_fetch(key, self._ttl.landscape_by_project, fetch)

    async def get_by_project_name_all(self, project_name: str) -> list[LandscapeMinimalResponse]:
        """Every landscape of a project in the minimal projection."""

        async def fetch() -> list[LandscapeMinimalResponse]:
            project_id = await self._project_id(project_name)
            with repository_errors(None, "failed to get landscapes by project"):
                landscapes, _ = await self._repo.get_landscapes_by_project_id(
                    project_id, PROJECT_ALL_LIMIT, 0
                )
            return [to_minimal_response(item) for item in landscapes]

        key = build_key(KeyPrefix.LANDSCAPE_BY_PROJECT, project_name, "all")
        return await self._minimal.get_or_fetch(key, self._ttl.landscape_by_project, fetch)

    async def list_by_query(
        self,
        q: str,
        domains: list[str] | None = None,
        environments: list[str] | None = None,
        limit: int = 20,
        offset: int = 0,
    ) -> LandscapeListResponse:
        """Offset-based search; domain and environment filters are not applied yet."""
        if limit < 1:
            limit = settings.pagination.default_page_size
        page = max(offset, 0) // limit + 1
        return await self.search(q, page, limit)

    async def search(self, query: str, page: int, page_size: int) -> LandscapeListResponse:
        """Search by name, title or description."""
        window = clamp_page(page, page_size)

        async def fetch() -> LandscapeListResponse:
            with repository_errors(None, "failed to search landscapes"):
                landscapes, total = await self._repo.search(
                    query, window.page_size, window.offset
                )
            return LandscapeListResponse(
                landscapes=[to_landscape_response(item) for item in landscapes],
                total=total,
                page=window.page,
                page_size=window.page_size,
            )

        key = (
            CacheKeyBuilder(KeyPrefix.LANDSCAPE_SEARCH)
            .add_params({"q": query, "page": window.page, "size": window.page_size})
            .build()
        )
        return await self._lists.get_or_fetch(key, self._ttl.landscape_search, fetch)

    # -------------------------------------------------------------------------
    # INTERNALS
    # -------------------------------------------------------------------------

    async def _get_entity(self, id_: UUID) -> Landscape:
        with repository_errors("landscape", "failed to get landscape"):
            return await self._repo.get_by_id(id_)

    async def _project_id(self, project_name: str) -> UUID:
        with repository_errors("project", "failed to resolve project by name"):
            project = await self._project_repo.get_by_name(project_name)
        return project.id

    async def _invalidate(self, landscape: Landscape) -> None:
        await invalidate_keys(
            self._cache,
            build_key(KeyPrefix.LANDSCAPE_BY_ID, landscape.id),
            build_key(KeyPrefix.LANDSCAPE_BY_NAME, landscape.name),
        )
        await invalidate_prefixes(
            self._cache,
            KeyPrefix.LANDSCAPE_LIST,
            KeyPrefix.LANDSCAPE_SEARCH,
            KeyPrefix.LANDSCAPE_BY_PROJECT,
        )
