"""Database Unit of Work implementation for transaction boundary management.

Every repository handed out by a unit of work shares its session, so the
writes of one service call commit or roll back together. Services built by
the unit of work share its repositories and the cache it was given.
"""

from typing import Self

from sqlalchemy.ext.asyncio import AsyncSession

from devportal.application.cache import TTLConfig
from devportal.application.services import (
    ComponentHealthService,
    ComponentService,
    LandscapeService,
    PluginService,
    ProjectService,
    TeamService,
    UserService,
)
from devportal.domain.repositories.interfaces import (
    CacheServiceProtocol,
    ComponentRepositoryProtocol,
    GroupRepositoryProtocol,
    LandscapeRepositoryProtocol,
    LinkRepositoryProtocol,
    OrganizationRepositoryProtocol,
    PluginRepositoryProtocol,
    ProjectRepositoryProtocol,
    TeamRepositoryProtocol,
    UserRepositoryProtocol,
)
from devportal.infrastructure.persistence.repositories import (
    ComponentRepository,
    GroupRepository,
    LandscapeRepository,
    LinkRepository,
    OrganizationRepository,
    PluginRepository,
    ProjectRepository,
    TeamRepository,
    UserRepository,
)


class DatabaseUnitOfWork:
    """Database implementation of the Unit of Work pattern.

    Commits on successful exit unless ``commit`` was already called, and
    rolls back when the block raises.
    """

    def __init__(
        self,
        session: AsyncSession,
        cache: CacheServiceProtocol | None = None,
        ttl_config: TTLConfig | None = None,
    ) -> None:
        self._session = session
        self._cache = cache
        self._ttl = ttl_config
        self._committed = False

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        if exc_type is not None:
            await self.rollback()
        elif not self._committed:
            await self.commit()

    async def commit(self) -> None:
        """Explicitly commit the current transaction."""
        await self._session.commit()
        self._committed = True

    async def rollback(self) -> None:
        """Explicitly rollback the current transaction."""
        await self._session.rollback()

    def get_landscape_repository(self) -> LandscapeRepositoryProtocol:
        return LandscapeRepository(self._session)

    def get_plugin_repository(self) -> PluginRepositoryProtocol:
        return PluginRepository(self._session)

    def get_organization_repository(self) -> OrganizationRepositoryProtocol:
        return OrganizationRepository(self._session)

    def get_group_repository(self) -> GroupRepositoryProtocol:
        return GroupRepository(self._session)

    def get_team_repository(self) -> TeamRepositoryProtocol:
        return TeamRepository(self._session)

    def get_project_repository(self) -> ProjectRepositoryProtocol:
        return ProjectRepository(self._session)

    def get_component_repository(self) -> ComponentRepositoryProtocol:
        return ComponentRepository(self._session)

    def get_user_repository(self) -> UserRepositoryProtocol:
        return UserRepository(self._session)

    def get_link_repository(self) -> LinkRepositoryProtocol:
        return LinkRepository(self._session)

    # -------------------------------------------------------------------------
    # SERVICES
    # -------------------------------------------------------------------------

    def get_landscape_service(self) -> LandscapeService:
        return LandscapeService(
            self.get_landscape_repository(),
            self.get_project_repository(),
            cache=self._cache,
            ttl_config=self._ttl,
        )

    def get_plugin_service(self) -> PluginService:
        return PluginService(
            self.get_plugin_repository(),
            self.get_user_repository(),
            cache=self._cache,
            ttl_config=self._ttl,
        )

    def get_team_service(self) -> TeamService:
        return TeamService(
            self.get_team_repository(),
            self.get_group_repository(),
            self.get_organization_repository(),
            self.get_user_repository(),
            self.get_link_repository(),
            self.get_component_repository(),
            cache=self._cache,
            ttl=self._ttl.team if self._ttl else None,
        )

    def get_component_service(self) -> ComponentService:
        return ComponentService(
            self.get_component_repository(),
            self.get_project_repository(),
            cache=self._cache,
            ttl=self._ttl.component if self._ttl else None,
        )

    def get_user_service(self) -> UserService:
        return UserService(
            self.get_user_repository(),
            self.get_link_repository(),
            self.get_plugin_repository(),
            cache=self._cache,
            ttl_config=self._ttl,
        )

    def get_project_service(self) -> ProjectService:
        return ProjectService(self.get_project_repository())

    def get_component_health_service(self) -> ComponentHealthService:
        return ComponentHealthService(
            self.get_component_service(),
            self.get_landscape_service(),
            self.get_project_service(),
            cache=self._cache,
            ttl_config=self._ttl,
        )
