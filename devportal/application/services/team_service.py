"""Team service.

Team responses carry the owning organization, resolved through the team's
group; that lookup is mandatory and fails the whole operation. The reserved
technical team is filtered out of every listing.
"""

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
    ComponentResponse,
    CreateTeamRequest,
    LinkResponse,
    TeamListResponse,
    TeamResponse,
    TeamWithMembersResponse,
    UpdateTeamRequest,
)
from devportal.application.services.base import find_existing, repository_errors
from devportal.application.services.converters import (
    metadata_object,
    to_component_response,
    to_link_response,
    to_user_response,
)
from devportal.application.utilities.pagination import clamp_page
from devportal.application.validation import RequestValidator
from devportal.config import get_logger, settings
from devportal.domain.entities import Team, format_timestamp
from devportal.domain.errors import (
    AlreadyExistsError,
    FieldViolation,
    InternalError,
    ValidationFailedError,
)
from devportal.domain.metadata import (
    FAVORITES_KEY,
    RawMetadata,
    load_metadata,
    merge_metadata,
    normalize_metadata,
    parse_uuid_list,
    read_string_list,
)
from devportal.domain.repositories.interfaces import (
    CacheServiceProtocol,
    ComponentRepositoryProtocol,
    GroupRepositoryProtocol,
    LinkRepositoryProtocol,
    OrganizationRepositoryProtocol,
    TeamRepositoryProtocol,
    UserRepositoryProtocol,
)

logger = get_logger(__name__)

MEMBERS_LIMIT = 1000


class TeamService:
    """Team business logic with read-through caching."""

    def __init__(
        self,
        team_repo: TeamRepositoryProtocol,
        group_repo: GroupRepositoryProtocol,
        organization_repo: OrganizationRepositoryProtocol,
        user_repo: UserRepositoryProtocol,
        link_repo: LinkRepositoryProtocol,
        component_repo: ComponentRepositoryProtocol,
        cache: CacheServiceProtocol | None = None,
        validator: RequestValidator | None = None,
        ttl: timedelta | None = None,
    ) -> None:
        self._repo = team_repo
        self._group_repo = group_repo
        self._org_repo = organization_repo
        self._user_repo = user_repo
        self._link_repo = link_repo
        self._component_repo = component_repo
        self._cache = cache or NoOpCache()
        self._validator = validator or RequestValidator()
        self._ttl = ttl or timedelta(seconds=settings.cache.ttl.team)

        self._single = CacheWrapper[TeamResponse](self._cache, TeamResponse, self._ttl)
        self._lists = CacheWrapper[TeamListResponse](self._cache, TeamListResponse, self._ttl)
        self._members = CacheWrapper[TeamWithMembersResponse](
            self._cache, TeamWithMembersResponse, self._ttl
        )

    # -------------------------------------------------------------------------
    # WRITES
    # -------------------------------------------------------------------------

    async def create_team(self, request: CreateTeamRequest | Mapping[str, Any]) -> TeamResponse:
        """Create a team whose name is unique within its group."""
        req = self._validator.validate(CreateTeamRequest, request)
        await self._ensure_name_available(req.group_id, req.name)

        team = Team(
            name=req.name,
            title=req.title,
            group_id=req.group_id,
            owner=req.owner,
            email=req.email,
            picture_url=req.picture_url,
            description=req.description,
            metadata=normalize_metadata(req.metadata),
        )
        with repository_errors(None, "failed to create team"):
            created = await self._repo.create(team)

        await self._invalidate(created)
        logger.info("Team created", team_id=str(created.id), name=created.name)
        return await self._to_response(created)

    async def update_team(
        self, id_: UUID, request: UpdateTeamRequest | Mapping[str, Any]
    ) -> TeamResponse:
        """Partial update; supplied metadata is merged into the stored bag."""
        req = self._validator.validate(UpdateTeamRequest, request)
        team = await self._get_entity(id_)

        group_id = req.group_id or team.group_id
        name = req.name or team.name
        if (name, group_id) != (team.name, team.group_id):
            await self._ensure_name_available(group_id, name)

        changes = req.model_dump(exclude_none=True, exclude={"metadata"})
        if req.metadata is not None:
            changes["metadata"] = merge_metadata(team.metadata, req.metadata)

        with repository_errors("team", "failed to update team"):
            updated = await self._repo.update(team.updated(**changes))

        await self._invalidate(team, updated)
        return await self._to_response(updated)

    async def update_team_metadata(self, id_: UUID, new_metadata: RawMetadata) -> TeamResponse:
        """Shallow-merge ``new_metadata`` into the team's metadata."""
        team = await self._get_entity(id_)
        merged = merge_metadata(team.metadata, new_metadata)

        with repository_errors("team", "failed to update team metadata"):
            updated = await self._repo.update(team.with_metadata(merged))

        await self._invalidate(updated)
        return await self._to_response(updated)

    async def delete_team(self, id_: UUID) -> None:
        team = await self._get_entity(id_)
        with repository_errors("team", "failed to delete team"):
            await self._repo.delete(id_)
        await self._invalidate(team)
        logger.info("Team deleted", team_id=str(id_))

    # -------------------------------------------------------------------------
    # READS
    # -------------------------------------------------------------------------

    async def get_by_id(self, id_: UUID) -> TeamResponse:
        async def fetch() -> TeamResponse:
            return await self._to_response(await self._get_entity(id_))

        return await self._single.get_or_fetch(build_key(KeyPrefix.TEAM_BY_ID, id_), None, fetch)

    async def get_all_teams(
        self, organization_id: UUID | None, page: int, page_size: int
    ) -> TeamListResponse:
        """Teams of one organization (paginated) or of every organization.

        The technical team is removed from the rows and from the total.
        """
        if organization_id is None:
            return await self._lists.get_or_fetch(str(KeyPrefix.TEAMS_ALL), None, self._all_teams)

        async def fetch() -> TeamListResponse:
            with repository_errors("organization", "failed to get organization"):
                await self._org_repo.get_by_id(organization_id)

            window = clamp_page(page, page_size)
            with repository_errors(None, "failed to get teams"):
                teams, total = await self._repo.get_by_organization_id(
                    organization_id, window.page_size, window.offset
                )
            visible = [team for team in teams if not team.is_technical]
            return TeamListResponse(
                teams=await self._to_responses(visible),
                total=total - (len(teams) - len(visible)),
                page=window.page,
                page_size=window.page_size,
            )

        key = build_key(KeyPrefix.TEAMS_BY_ORG, organization_id, f"page={page}:size={page_size}")
        return await self._lists.get_or_fetch(key, None, fetch)

    async def get_team_components_by_id(
        self, id_: UUID, page: int, page_size: int
    ) -> tuple[list[ComponentResponse], int]:
        """Components owned by a team; page size defaults to (and caps at) 100."""
        await self._get_entity(id_)
        size = settings.pagination.team_components_page_size
        window = clamp_page(page, page_size, default_size=size, max_size=size)

        with repository_errors(None, "failed to get team components"):
            components, total = await self._component_repo.get_components_by_team_id(
                id_, window.page_size, window.offset
            )
        return [to_component_response(c) for c in components], total

    async def get_by_simple_name(self, team_name: str) -> TeamWithMembersResponse:
        """Team by its globally unique name, with members and owned links."""
        if not team_name:
            raise ValidationFailedError([FieldViolation("name", "team name is required")])

        key = build_key(KeyPrefix.TEAM_BY_NAME, team_name, "with-members")
        return await self._members.get_or_fetch(
            key, None, lambda: self._load_with_members(team_name)
        )

    async def get_by_simple_name_with_viewer(
        self, team_name: str, viewer_name: str
    ) -> TeamWithMembersResponse:
        """Like ``get_by_simple_name`` with links marked from the viewer's favorites.

        A blank or unknown viewer yields the unmarked response.
        """

        async def fetch() -> TeamWithMembersResponse:
            response = await self.get_by_simple_name(team_name)
            if not viewer_name:
                return response
            favorites = await self._viewer_favorites(viewer_name)
            if not favorites:
                return response
            links = [
                link.model_copy(update={"favorite": True}) if link.id in favorites else link
                for link in response.links
            ]
            return response.model_copy(update={"links": links})

        key = build_key(KeyPrefix.TEAM_BY_NAME, team_name, "viewer", viewer_name, "with-members")
        return await self._members.get_or_fetch(key, None, fetch)

    # -------------------------------------------------------------------------
    # INTERNALS
    # -------------------------------------------------------------------------

    async def _all_teams(self) -> TeamListResponse:
        with repository_errors(None, "failed to get teams"):
            teams = await self._repo.get_all()
        visible = [team for team in teams if not team.is_technical]
        return TeamListResponse(
            teams=await self._to_responses(visible),
            total=len(visible),
            page=1,
            page_size=len(visible),
        )

    async def _load_with_members(self, team_name: str) -> TeamWithMembersResponse:
        with repository_errors("team", "failed to get team"):
            team = await self._repo.get_by_name_global(team_name)
        base = await self._to_response(team)

        with repository_errors(None, "failed to get team members"):
            members, _ = await self._user_repo.get_by_team_id(team.id, MEMBERS_LIMIT, 0)

        return TeamWithMembersResponse(
            **base.model_dump(),
            members=[to_user_response(member) for member in members],
            links=await self._owned_links(team.id),
        )

    async def _owned_links(self, team_id: UUID) -> list[LinkResponse]:
        try:
            links = await self._link_repo.get_by_owner(team_id)
        except Exception as e:
            logger.warning("Failed to load team links", team_id=str(team_id), error=str(e))
            return []
        return [to_link_response(link) for link in links]

    async def _viewer_favorites(self, viewer_name: str) -> set[str]:
        try:
            viewer = await self._user_repo.get_by_name(viewer_name)
        except Exception as e:
            logger.debug("Viewer unavailable, links left unmarked", viewer=viewer_name, error=str(e))
            return set()
        favorites = read_string_list(load_metadata(viewer.metadata), FAVORITES_KEY)
        return {str(link_id) for link_id in parse_uuid_list(favorites)}

    async def _get_entity(self, id_: UUID) -> Team:
        with repository_errors("team", "failed to get team"):
            return await self._repo.get_by_id(id_)

    async def _ensure_name_available(self, group_id: UUID, name: str) -> None:
        existing = await find_existing(
            self._repo.get_by_name(group_id, name), "failed to check existing team by name"
        )
        if existing is not None:
            raise AlreadyExistsError("team", "with this name in the group")

    async def _to_response(self, team: Team) -> TeamResponse:
        with repository_errors("group", "failed to get group for team"):
            group = await self._group_repo.get_by_id(team.group_id)
        return TeamResponse(
            id=team.id,
            group_id=team.group_id,
            organization_id=group.org_id,
            name=team.name,
            title=team.title,
            description=team.description,
            owner=team.owner,
            email=team.email,
            picture_url=team.picture_url,
            metadata=metadata_object(team.metadata),
            created_at=format_timestamp(team.created_at),
            updated_at=format_timestamp(team.updated_at),
        )

    async def _to_responses(self, teams: list[Team]) -> list[TeamResponse]:
        try:
            return [await self._to_response(team) for team in teams]
        except Exception as e:
            raise InternalError("failed to convert team to response", e) from e

    async def _invalidate(self, *teams: Team) -> None:
        keys: list[str] = []
        for team in teams:
            keys += [
                build_key(KeyPrefix.TEAM_BY_ID, team.id),
                build_key(KeyPrefix.TEAM_BY_NAME, team.name, "with-members"),
            ]
        await invalidate_keys(self._cache, *keys, str(KeyPrefix.TEAMS_ALL))
        await invalidate_prefixes(self._cache, KeyPrefix.TEAMS_BY_ORG, KeyPrefix.TEAM_BY_NAME)
