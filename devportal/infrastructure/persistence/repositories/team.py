"""Organization, group and team persistence."""

from typing import override
from uuid import UUID

from attrs import define
from sqlalchemy.ext.asyncio import AsyncSession

from devportal.domain.entities import Group, Organization, Team
from devportal.infrastructure.persistence.database.db_models import (
    DBGroup,
    DBOrganization,
    DBTeam,
)
from devportal.infrastructure.persistence.repositories.base_repo import (
    BaseModelMapper,
    BaseRepository,
    common_db_fields,
    common_domain_fields,
)
from devportal.infrastructure.persistence.repositories.repo_decorator import db_operation


@define(frozen=True, slots=True)
class OrganizationMapper(BaseModelMapper[DBOrganization, Organization]):
    @staticmethod
    @override
    async def to_domain(db_model: DBOrganization) -> Organization:
        return Organization(**common_domain_fields(db_model))

    @staticmethod
    @override
    def to_db(domain_model: Organization) -> DBOrganization:
        return DBOrganization(**common_db_fields(domain_model))


@define(frozen=True, slots=True)
class GroupMapper(BaseModelMapper[DBGroup, Group]):
    @staticmethod
    @override
    async def to_domain(db_model: DBGroup) -> Group:
        return Group(org_id=db_model.org_id, **common_domain_fields(db_model))

    @staticmethod
    @override
    def to_db(domain_model: Group) -> DBGroup:
        return DBGroup(org_id=domain_model.org_id, **common_db_fields(domain_model))


@define(frozen=True, slots=True)
class TeamMapper(BaseModelMapper[DBTeam, Team]):
    """Bidirectional mapper between DB and domain models for Team."""

    @staticmethod
    @override
    async def to_domain(db_model: DBTeam) -> Team:
        return Team(
            group_id=db_model.group_id,
            owner=db_model.owner or "",
            email=db_model.email or "",
            picture_url=db_model.picture_url or "",
            **common_domain_fields(db_model),
        )

    @staticmethod
    @override
    def to_db(domain_model: Team) -> DBTeam:
        return DBTeam(
            group_id=domain_model.group_id,
            owner=domain_model.owner,
            email=domain_model.email,
            picture_url=domain_model.picture_url,
            **common_db_fields(domain_model),
        )


class OrganizationRepository(BaseRepository[DBOrganization, Organization]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session=session, model_class=DBOrganization, mapper=OrganizationMapper())


class GroupRepository(BaseRepository[DBGroup, Group]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session=session, model_class=DBGroup, mapper=GroupMapper())


class TeamRepository(BaseRepository[DBTeam, Team]):
    """Repository for team operations."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session=session, model_class=DBTeam, mapper=TeamMapper())

    @db_operation("get_team_by_name")
    async def get_by_name(self, group_id: UUID, name: str) -> Team:
        stmt = self.select().where(DBTeam.group_id == group_id, DBTeam.name == name)
        return await self._fetch_one(stmt)

    @db_operation("get_team_by_name_global")
    async def get_by_name_global(self, name: str) -> Team:
        return await self._fetch_one(self.select().where(DBTeam.name == name))

    @db_operation("get_teams_by_organization_id")
    async def get_by_organization_id(
        self, organization_id: UUID, limit: int, offset: int
    ) -> tuple[list[Team], int]:
        stmt = (
            self.select()
            .join(DBGroup, DBGroup.id == DBTeam.group_id)
            .where(DBGroup.org_id == organization_id)
            .order_by(DBTeam.name)
        )
        return await self._fetch_page(stmt, limit, offset)

    @db_operation("get_all_teams")
    async def get_all(self) -> list[Team]:
        return await self._fetch_many(self.select().order_by(DBTeam.name))
