"""Plugin service: registry CRUD, viewer subscriptions and UI content fetching."""

import asyncio
from collections.abc import Mapping
from typing import Any
from uuid import UUID

from devportal.application.cache import (
    CacheWrapper,
    KeyPrefix,
    NoOpCache,
    TTLConfig,
    build_key,
    invalidate_keys,
    invalidate_prefixes,
)
from devportal.application.schemas import (
    CreatePluginRequest,
    PluginListResponse,
    PluginResponse,
    PluginUIResponse,
    UpdatePluginRequest,
)
from devportal.application.services.base import find_existing, repository_errors
from devportal.application.services.converters import to_plugin_response
from devportal.application.utilities.github_url import parse_github_blob_url
from devportal.application.utilities.pagination import clamp_limit, clamp_offset
from devportal.application.validation import RequestValidator
from devportal.config import get_logger, resilient_operation, settings
from devportal.domain.entities import Plugin
from devportal.domain.errors import (
    AlreadyExistsError,
    InternalError,
    InvalidGitHubURLError,
    MalformedInputError,
    RecordNotFoundError,
)
from devportal.domain.metadata import SUBSCRIBED_KEY, load_metadata, parse_uuid_list, read_string_list
from devportal.domain.repositories.interfaces import (
    CacheServiceProtocol,
    PluginRepositoryProtocol,
    RepositoryContentProvider,
    UserRepositoryProtocol,
)

logger = get_logger(__name__)


@resilient_operation("plugin_content_fetch")
async def _fetch_content(
    content_provider: RepositoryContentProvider,
    user_uuid: str,
    provider: str,
    owner: str,
    repo: str,
    path: str,
    ref: str,
) -> Mapping[str, Any]:
    async with asyncio.timeout(settings.plugins.content_timeout):
        return await content_provider.get_repository_content(
            user_uuid, provider, owner, repo, path, ref
        )


class PluginService:
    """Plugin business logic."""

    def __init__(
        self,
        plugin_repo: PluginRepositoryProtocol,
        user_repo: UserRepositoryProtocol,
        cache: CacheServiceProtocol | None = None,
        ttl_config: TTLConfig | None = None,
        validator: RequestValidator | None = None,
    ) -> None:
        self._repo = plugin_repo
        self._user_repo = user_repo
        self._cache = cache or NoOpCache()
        self._ttl = ttl_config or TTLConfig.from_settings(settings.cache.ttl)
        self._validator = validator or RequestValidator()
        self._single = CacheWrapper[PluginResponse](self._cache, PluginResponse)
        self._lists = CacheWrapper[PluginListResponse](self._cache, PluginListResponse)

    async def get_all_plugins(self, limit: int, offset: int) -> PluginListResponse:
        """Plugins in the limit/offset window, unmarked."""

        async def fetch() -> PluginListResponse:
            plugins, total, lim, off = await self._window(limit, offset)
            return PluginListResponse(
                plugins=[to_plugin_response(plugin) for plugin in plugins],
                total=total,
                limit=lim,
                offset=off,
            )

        key = build_key(KeyPrefix.PLUGIN_LIST, f"limit:{limit}:offset:{offset}")
        return await self._lists.get_or_fetch(key, self._ttl.plugin, fetch)

    async def get_all_plugins_with_viewer(
        self, limit: int, offset: int, viewer_name: str
    ) -> PluginListResponse:
        """Plugins marked ``subscribed`` for the viewer.

        A blank or unknown viewer yields the plain, unmarked listing.
        """
        viewer_name = viewer_name.strip()
        if not viewer_name:
            return await self.get_all_plugins(limit, offset)

        try:
            viewer = await self._user_repo.get_by_name(viewer_name)
        except RecordNotFoundError:
            logger.debug("Viewer not found, listing plugins unmarked", viewer=viewer_name)
            return await self.get_all_plugins(limit, offset)
        except Exception as e:
            raise InternalError("failed to get viewer", e) from e

        subscribed = set(
            parse_uuid_list(read_string_list(load_metadata(viewer.metadata), SUBSCRIBED_KEY))
        )
        plugins, total, limit, offset = await self._window(limit, offset)
        return PluginListResponse(
            plugins=[to_plugin_response(p, subscribed=p.id in subscribed) for p in plugins],
            total=total,
            limit=limit,
            offset=offset,
        )

    async def get_plugin_by_id(self, id_: UUID) -> PluginResponse:
        async def fetch() -> PluginResponse:
            return to_plugin_response(await self._get_entity(id_))

        key = build_key(KeyPrefix.PLUGIN_BY_ID, id_)
        return await self._single.get_or_fetch(key, self._ttl.plugin, fetch)

    async def create_plugin(
        self, request: CreatePluginRequest | Mapping[str, Any]
    ) -> PluginResponse:
        req = self._validator.validate(CreatePluginRequest, request)
        await self._ensure_name_available(req.name)

        plugin = Plugin(
            name=req.name,
            title=req.title,
            description=req.description,
            icon=req.icon,
            react_component_path=req.react_component_path,
            backend_server_url=req.backend_server_url,
            owner=req.owner,
        )
        with repository_errors(None, "failed to create plugin"):
            created = await self._repo.create(plugin)

        await invalidate_prefixes(self._cache, KeyPrefix.PLUGIN_LIST)
        logger.info("Plugin created", plugin_id=str(created.id), name=created.name)
        return to_plugin_response(created)

    async def update_plugin(
        self, id_: UUID, request: UpdatePluginRequest | Mapping[str, Any]
    ) -> PluginResponse:
        """Partial update; only supplied fields change."""
        req = self._validator.validate(UpdatePluginRequest, request)
        plugin = await self._get_entity(id_)

        if req.name is not None and req.name != plugin.name:
            await self._ensure_name_available(req.name)

        changes = req.model_dump(exclude_none=True)
        with repository_errors("plugin", "failed to update plugin"):
            updated = await self._repo.update(plugin.updated(**changes))

        await self._invalidate(id_)
        return to_plugin_response(updated)

    async def delete_plugin(self, id_: UUID) -> None:
        await self._get_entity(id_)
        with repository_errors("plugin", "failed to delete plugin"):
            await self._repo.delete(id_)
        await self._invalidate(id_)
        logger.info("Plugin deleted", plugin_id=str(id_))

    async def get_plugin_ui_content(
        self,
        plugin_id: UUID,
        content_provider: RepositoryContentProvider,
        user_uuid: str,
        provider: str = "",
    ) -> PluginUIResponse:
        """Fetch the plugin's React component source from its GitHub blob URL.

        Bounded by ``plugins.content_timeout``; cancellation of the caller
        cancels the fetch.

        Raises:
            NotFoundError: the plugin does not exist
            InvalidGitHubURLError: path missing or not a GitHub blob URL
            InternalError: the content provider failed or timed out
            MalformedInputError: the provider returned no content
        """
        plugin = await self._get_entity(plugin_id)
        if not plugin.react_component_path:
            raise InvalidGitHubURLError(
                "plugin does not have a react_component_path configured"
            )
        location = parse_github_blob_url(plugin.react_component_path)
        provider = provider or settings.plugins.default_provider

        try:
            payload = await _fetch_content(
                content_provider,
                user_uuid,
                provider,
                location.owner,
                location.repo,
                location.path,
                location.ref,
            )
        except Exception as e:
            raise InternalError("failed to fetch content from GitHub", e) from e

        content = payload.get("content") if isinstance(payload, Mapping) else None
        if not isinstance(content, str) or not content:
            raise MalformedInputError("no content found in GitHub response")

        return PluginUIResponse(content=content, content_type=settings.plugins.content_type)

    async def _window(self, limit: int, offset: int) -> tuple[list[Plugin], int, int, int]:
        limit = clamp_limit(limit)
        offset = clamp_offset(offset)
        with repository_errors(None, "failed to get plugins"):
            plugins, total = await self._repo.get_all(limit, offset)
        return plugins, total, limit, offset

    async def _get_entity(self, id_: UUID) -> Plugin:
        with repository_errors("plugin", "failed to get plugin"):
            return await self._repo.get_by_id(id_)

    async def _ensure_name_available(self, name: str) -> None:
        existing = await find_existing(
            self._repo.get_by_name(name), "failed to check existing plugin by name"
        )
        if existing is not None:
            raise AlreadyExistsError("plugin", "with this name")

    async def _invalidate(self, id_: UUID) -> None:
        await invalidate_keys(self._cache, build_key(KeyPrefix.PLUGIN_BY_ID, id_))
        await invalidate_prefixes(self._cache, KeyPrefix.PLUGIN_LIST)
