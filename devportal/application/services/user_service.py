"""User service.

Besides profile CRUD this service owns the list-valued metadata attributes:
``favorites`` (link ids), ``subscribed`` (plugin ids) and ``quick_links``.
Each is updated by fetch-modify-save on the user's metadata bag.
"""

from collections.abc import Awaitable, Callable, Mapping
from typing import Any
from uuid import UUID

from pydantic import ValidationError

from devportal.application.cache import (
    CacheWrapper,
    KeyPrefix,
    NoOpCache,
    TTLConfig,
    build_key,
    invalidate_keys,
)
from devportal.application.schemas import (
    AddQuickLinkRequest,
    CreateUserRequest,
    LinkResponse,
    PluginResponse,
    QuickLink,
    QuickLinksResponse,
    UpdateUserRequest,
    UserListResponse,
    UserResponse,
    UserWithLinksResponse,
)
from devportal.application.services.base import find_existing, repository_errors
from devportal.application.services.converters import (
    to_link_response,
    to_plugin_response,
    to_user_response,
)
from devportal.application.utilities.pagination import clamp_limit, clamp_offset
from devportal.application.validation import RequestValidator
from devportal.config import get_logger, settings
from devportal.domain.entities import User
from devportal.domain.errors import (
    AlreadyExistsError,
    FieldViolation,
    InternalError,
    RecordNotFoundError,
    ValidationFailedError,
)
from devportal.domain.metadata import (
    FAVORITES_KEY,
    PORTAL_ADMIN_KEY,
    QUICK_LINKS_KEY,
    SUBSCRIBED_KEY,
    add_to_list,
    dump_metadata,
    is_truthy,
    load_metadata,
    parse_uuid_list,
    read_string_list,
    remove_from_list,
)
from devportal.domain.repositories.interfaces import (
    CacheServiceProtocol,
    LinkRepositoryProtocol,
    PluginRepositoryProtocol,
    UserRepositoryProtocol,
)

logger = get_logger(__name__)


def _required(field: str, message: str) -> ValidationFailedError:
    return ValidationFailedError([FieldViolation(field, message)])


def _read_quick_links(meta: Mapping[str, Any]) -> list[QuickLink]:
    """Stored quick links; entries that are not well-formed objects are skipped."""
    raw = meta.get(QUICK_LINKS_KEY)
    if not isinstance(raw, list):
        return []
    links: list[QuickLink] = []
    for item in raw:
        if not isinstance(item, Mapping):
            continue
        try:
            links.append(QuickLink.model_validate(item))
        except ValidationError:
            continue
    return links


class UserService:
    """User business logic."""

    def __init__(
        self,
        user_repo: UserRepositoryProtocol,
        link_repo: LinkRepositoryProtocol,
        plugin_repo: PluginRepositoryProtocol,
        validator: RequestValidator | None = None,
        cache: CacheServiceProtocol | None = None,
        ttl_config: TTLConfig | None = None,
    ) -> None:
        self._repo = user_repo
        self._link_repo = link_repo
        self._plugin_repo = plugin_repo
        self._validator = validator or RequestValidator()
        self._cache = cache or NoOpCache()
        self._ttl = ttl_config or TTLConfig.from_settings(settings.cache.ttl)
        self._single = CacheWrapper[UserResponse](self._cache, UserResponse)

    # -------------------------------------------------------------------------
    # PROFILE
    # -------------------------------------------------------------------------

    async def create_user(self, request: CreateUserRequest | Mapping[str, Any]) -> UserResponse:
        """Create a user with a unique email; ``name`` defaults to the user id."""
        req = self._validator.validate(CreateUserRequest, request)
        await self._ensure_email_available(req.email)

        user = User(
            user_id=req.user_id,
            email=req.email,
            name=req.name or req.user_id,
            title=req.title or "",
            first_name=req.first_name,
            last_name=req.last_name,
            mobile=req.mobile,
            team_domain=req.team_domain,
            team_role=req.team_role,
            team_id=req.team_id,
            created_by=req.created_by,
            updated_by=req.created_by,
        )
        with repository_errors(None, "failed to create user"):
            created = await self._repo.create(user)

        logger.info("User created", user_id=created.user_id)
        return to_user_response(created)

    async def get_user_by_id(self, id_: UUID) -> UserResponse:
        async def fetch() -> UserResponse:
            return to_user_response(await self._get_entity(id_))

        return await self._single.get_or_fetch(
            build_key(KeyPrefix.USER_BY_ID, id_), self._ttl.user, fetch
        )

    async def get_user_by_user_id(self, user_id: str) -> UserResponse:
        return to_user_response(await self._get_by_user_id(user_id))

    async def update_user(
        self, id_: UUID, request: UpdateUserRequest | Mapping[str, Any]
    ) -> UserResponse:
        """Partial update; a changed email must still be unique."""
        req = self._validator.validate(UpdateUserRequest, request)
        user = await self._get_entity(id_)

        if req.email is not None and req.email != user.email:
            await self._ensure_email_available(req.email)

        changes = req.model_dump(exclude_none=True)
        return await self._save(user.updated(**changes))

    async def update_user_team(self, id_: UUID, team_id: UUID, updated_by: str) -> UserResponse:
        user = await self._get_entity(id_)
        return await self._save(user.updated(team_id=team_id, updated_by=updated_by))

    async def delete_user(self, id_: UUID) -> None:
        await self._get_entity(id_)
        with repository_errors("user", "failed to delete user"):
            await self._repo.delete(id_)
        await self._invalidate(id_)
        logger.info("User deleted", id=str(id_))

    # -------------------------------------------------------------------------
    # LISTINGS
    # -------------------------------------------------------------------------

    async def get_users_by_organization(
        self, organization_id: UUID, limit: int, offset: int
    ) -> UserListResponse:
        return await self._list(
            "failed to get users",
            lambda lim, off: self._repo.get_by_organization_id(organization_id, lim, off),
            limit,
            offset,
        )

    async def search_users(
        self, organization_id: UUID, query: str, limit: int, offset: int
    ) -> UserListResponse:
        return await self._list(
            "failed to search users",
            lambda lim, off: self._repo.search_by_organization(organization_id, query, lim, off),
            limit,
            offset,
        )

    async def get_active_users(
        self, organization_id: UUID, limit: int, offset: int
    ) -> UserListResponse:
        return await self._list(
            "failed to get active users",
            lambda lim, off: self._repo.get_active_by_organization(organization_id, lim, off),
            limit,
            offset,
        )

    async def search_users_global(self, query: str, limit: int, offset: int) -> UserListResponse:
        """Search every user by name or title."""
        return await self._list(
            "failed to search users",
            lambda lim, off: self._repo.search_by_name_or_title_global(query, lim, off),
            limit,
            offset,
        )

    async def get_all_users(self, limit: int, offset: int) -> UserListResponse:
        return await self._list("failed to get users", self._repo.get_all, limit, offset)

    # -------------------------------------------------------------------------
    # FAVORITES AND SUBSCRIPTIONS
    # -------------------------------------------------------------------------

    async def add_favorite_link_by_user_id(self, user_id: str, link_id: UUID | str) -> UserResponse:
        return await self._update_list(user_id, add_to_list, FAVORITES_KEY, link_id)

    async def remove_favorite_link_by_user_id(
        self, user_id: str, link_id: UUID | str
    ) -> UserResponse:
        return await self._update_list(user_id, remove_from_list, FAVORITES_KEY, link_id)

    async def add_subscribed_plugin_by_user_id(
        self, user_id: str, plugin_id: UUID | str
    ) -> UserResponse:
        return await self._update_list(user_id, add_to_list, SUBSCRIBED_KEY, plugin_id)

    async def remove_subscribed_plugin_by_user_id(
        self, user_id: str, plugin_id: UUID | str
    ) -> UserResponse:
        return await self._update_list(user_id, remove_from_list, SUBSCRIBED_KEY, plugin_id)

    async def get_subscribed_plugins_from_user(self, user: User) -> list[PluginResponse]:
        """Plugins the user subscribed to; ids of deleted plugins are skipped."""
        ids = parse_uuid_list(read_string_list(load_metadata(user.metadata), SUBSCRIBED_KEY))
        plugins: list[PluginResponse] = []
        for plugin_id in ids:
            try:
                plugin = await self._plugin_repo.get_by_id(plugin_id)
            except RecordNotFoundError:
                logger.debug("Subscribed plugin no longer exists", plugin_id=str(plugin_id))
                continue
            except Exception as e:
                raise InternalError("failed to get subscribed plugins", e) from e
            plugins.append(to_plugin_response(plugin, subscribed=True))
        return plugins

    # -------------------------------------------------------------------------
    # COMPOSITE VIEWS
    # -------------------------------------------------------------------------

    async def get_user_by_name_with_links(self, name: str) -> UserWithLinksResponse:
        """User with favorite and owned links; ``plugins`` is left empty."""
        user = await self._get_by_name(name)
        return await self._with_links(user, [])

    async def get_user_by_name_with_links_and_plugins(self, name: str) -> UserWithLinksResponse:
        user = await self._get_by_name(name)
        return await self._with_links(user, await self.get_subscribed_plugins_from_user(user))

    async def get_user_by_user_id_with_plugins(self, user_id: str) -> list[PluginResponse]:
        user = await self._get_by_user_id(user_id)
        return await self.get_subscribed_plugins_from_user(user)

    # -------------------------------------------------------------------------
    # QUICK LINKS
    # -------------------------------------------------------------------------

    async def get_quick_links(self, id_: UUID) -> QuickLinksResponse:
        user = await self._get_entity(id_)
        return QuickLinksResponse(quick_links=_read_quick_links(load_metadata(user.metadata)))

    async def add_quick_link(
        self, id_: UUID, request: AddQuickLinkRequest | Mapping[str, Any]
    ) -> UserResponse:
        """Add a quick link; an existing link with the same URL is replaced."""
        req = self._validator.validate(AddQuickLinkRequest, request)
        user = await self._get_entity(id_)

        meta = load_metadata(user.metadata)
        links = [link for link in _read_quick_links(meta) if link.url != req.url]
        links.append(QuickLink(**req.model_dump()))
        meta[QUICK_LINKS_KEY] = [link.model_dump() for link in links]
        return await self._save(user.with_metadata(dump_metadata(meta)))

    async def remove_quick_link(self, id_: UUID, url: str) -> UserResponse:
        if not url:
            raise _required("url", "link URL is required")
        user = await self._get_entity(id_)

        meta = load_metadata(user.metadata)
        meta[QUICK_LINKS_KEY] = [
            link.model_dump() for link in _read_quick_links(meta) if link.url != url
        ]
        return await self._save(user.with_metadata(dump_metadata(meta)))

    # -------------------------------------------------------------------------
    # INTERNALS
    # -------------------------------------------------------------------------

    async def _list(
        self,
        prefix: str,
        query: Callable[[int, int], Awaitable[tuple[list[User], int]]],
        limit: int,
        offset: int,
    ) -> UserListResponse:
        limit = clamp_limit(limit)
        offset = clamp_offset(offset)
        with repository_errors(None, prefix):
            users, total = await query(limit, offset)
        return UserListResponse(
            users=[to_user_response(user) for user in users],
            total=total,
            limit=limit,
            offset=offset,
        )

    async def _update_list(
        self,
        user_id: str,
        update: Callable[[str | None, str, Any], str],
        key: str,
        value: UUID | str,
    ) -> UserResponse:
        user = await self._get_by_user_id(user_id)
        return await self._save(user.with_metadata(update(user.metadata, key, value)))

    async def _with_links(
        self, user: User, plugins: list[PluginResponse]
    ) -> UserWithLinksResponse:
        meta = load_metadata(user.metadata)
        favorite_ids = parse_uuid_list(read_string_list(meta, FAVORITES_KEY))

        links: list[LinkResponse] = []
        seen: set[UUID] = set()
        if favorite_ids:
            with repository_errors(None, "failed to get favorite links"):
                favorites = await self._link_repo.get_by_ids(favorite_ids)
            for link in favorites:
                seen.add(link.id)
                links.append(to_link_response(link, favorite=True))

        with repository_errors(None, "failed to get user links"):
            owned = await self._link_repo.get_by_owner(user.id)
        links.extend(to_link_response(link) for link in owned if link.id not in seen)

        return UserWithLinksResponse(
            **to_user_response(user).model_dump(),
            portal_admin=is_truthy(meta.get(PORTAL_ADMIN_KEY)),
            links=links,
            plugins=plugins,
        )

    async def _save(self, user: User) -> UserResponse:
        with repository_errors("user", "failed to update user"):
            updated = await self._repo.update(user)
        await self._invalidate(updated.id)
        return to_user_response(updated)

    async def _get_entity(self, id_: UUID) -> User:
        with repository_errors("user", "failed to get user"):
            return await self._repo.get_by_id(id_)

    async def _get_by_user_id(self, user_id: str) -> User:
        with repository_errors("user", "failed to get user"):
            return await self._repo.get_by_user_id(user_id)

    async def _get_by_name(self, name: str) -> User:
        if not name:
            raise _required("name", "name is required")
        with repository_errors("user", "failed to get user"):
            return await self._repo.get_by_name(name)

    async def _ensure_email_available(self, email: str) -> None:
        existing = await find_existing(
            self._repo.get_by_email(email), "failed to check existing user by email"
        )
        if existing is not None:
            raise AlreadyExistsError("user", "with this email")

    async def _invalidate(self, id_: UUID) -> None:
        await invalidate_keys(self._cache, build_key(KeyPrefix.USER_BY_ID, id_))
