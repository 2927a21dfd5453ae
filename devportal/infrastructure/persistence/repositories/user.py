"""User and link persistence."""

from typing import override
from uuid import UUID

from attrs import define
from sqlalchemy import Select, or_
from sqlalchemy.ext.asyncio import AsyncSession

from devportal.domain.entities import Link, User
from devportal.infrastructure.persistence.database.db_models import (
    DBGroup,
    DBLink,
    DBTeam,
    DBUser,
)
from devportal.infrastructure.persistence.repositories.base_repo import (
    BaseModelMapper,
    BaseRepository,
    common_db_fields,
    common_domain_fields,
)
from devportal.infrastructure.persistence.repositories.repo_decorator import db_operation


@define(frozen=True, slots=True)
class UserMapper(BaseModelMapper[DBUser, User]):
    """Bidirectional mapper between DB and domain models for User."""

    @staticmethod
    @override
    async def to_domain(db_model: DBUser) -> User:
        return User(
            user_id=db_model.user_id,
            email=db_model.email,
            first_name=db_model.first_name or "",
            last_name=db_model.last_name or "",
            mobile=db_model.mobile or "",
            team_domain=db_model.team_domain or "developer",
            team_role=db_model.team_role or "member",
            team_id=db_model.team_id,
            is_active=bool(db_model.is_active),
            **common_domain_fields(db_model),
        )

    @staticmethod
    @override
    def to_db(domain_model: User) -> DBUser:
        return DBUser(
            user_id=domain_model.user_id,
            email=domain_model.email,
            first_name=domain_model.first_name,
            last_name=domain_model.last_name,
            mobile=domain_model.mobile,
            team_domain=domain_model.team_domain,
            team_role=domain_model.team_role,
            team_id=domain_model.team_id,
            is_active=domain_model.is_active,
            **common_db_fields(domain_model),
        )


@define(frozen=True, slots=True)
class LinkMapper(BaseModelMapper[DBLink, Link]):
    @staticmethod
    @override
    async def to_domain(db_model: DBLink) -> Link:
        return Link(
            url=db_model.url,
            owner=db_model.owner,
            category_id=db_model.category_id,
            tags=db_model.tags or "",
            **common_domain_fields(db_model),
        )

    @staticmethod
    @override
    def to_db(domain_model: Link) -> DBLink:
        return DBLink(
            url=domain_model.url,
            owner=domain_model.owner,
            category_id=domain_model.category_id,
            tags=domain_model.tags,
            **common_db_fields(domain_model),
        )


def _matching(stmt: Select, query: str, *columns) -> Select:
    if not query:
        return stmt
    pattern = f"%{query}%"
    return stmt.where(or_(*(column.ilike(pattern) for column in columns)))


class UserRepository(BaseRepository[DBUser, User]):
    """Repository for user operations.

    Organization membership is derived through the user's team and its group.
    """

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session=session, model_class=DBUser, mapper=UserMapper())

    def _in_organization(self, organization_id: UUID) -> Select:
        return (
            self.select()
            .join(DBTeam, DBTeam.id == DBUser.team_id)
            .join(DBGroup, DBGroup.id == DBTeam.group_id)
            .where(DBGroup.org_id == organization_id)
            .order_by(DBUser.name)
        )

    @db_operation("get_user_by_user_id")
    async def get_by_user_id(self, user_id: str) -> User:
        return await self._fetch_one(self.select().where(DBUser.user_id == user_id))

    @db_operation("get_user_by_name")
    async def get_by_name(self, name: str) -> User:
        return await self._fetch_one(self.select().where(DBUser.name == name))

    @db_operation("get_user_by_email")
    async def get_by_email(self, email: str) -> User:
        return await self._fetch_one(self.select().where(DBUser.email == email))

    @db_operation("get_users_by_team_id")
    async def get_by_team_id(
        self, team_id: UUID, limit: int, offset: int
    ) -> tuple[list[User], int]:
        stmt = self.select().where(DBUser.team_id == team_id).order_by(DBUser.name)
        return await self._fetch_page(stmt, limit, offset)

    @db_operation("get_users_by_organization_id")
    async def get_by_organization_id(
        self, organization_id: UUID, limit: int, offset: int
    ) -> tuple[list[User], int]:
        return await self._fetch_page(self._in_organization(organization_id), limit, offset)

    @db_operation("search_users_by_organization")
    async def search_by_organization(
        self, organization_id: UUID, query: str, limit: int, offset: int
    ) -> tuple[list[User], int]:
        stmt = _matching(
            self._in_organization(organization_id),
            query,
            DBUser.name,
            DBUser.first_name,
            DBUser.last_name,
            DBUser.email,
        )
        return await self._fetch_page(stmt, limit, offset)

    @db_operation("get_active_users_by_organization")
    async def get_active_by_organization(
        self, organization_id: UUID, limit: int, offset: int
    ) -> tuple[list[User], int]:
        stmt = self._in_organization(organization_id).where(DBUser.is_active.is_(True))
        return await self._fetch_page(stmt, limit, offset)

    @db_operation("search_users_global")
    async def search_by_name_or_title_global(
        self, query: str, limit: int, offset: int
    ) -> tuple[list[User], int]:
        stmt = _matching(self.select().order_by(DBUser.name), query, DBUser.name, DBUser.title)
        return await self._fetch_page(stmt, limit, offset)

    @db_operation("get_all_users")
    async def get_all(self, limit: int, offset: int) -> tuple[list[User], int]:
        return await self._fetch_page(self.select().order_by(DBUser.name), limit, offset)


class LinkRepository(BaseRepository[DBLink, Link]):
    """Read access to links owned by teams and users."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session=session, model_class=DBLink, mapper=LinkMapper())

    @db_operation("get_links_by_owner")
    async def get_by_owner(self, owner_id: UUID) -> list[Link]:
        return await self._fetch_many(
            self.select().where(DBLink.owner == owner_id).order_by(DBLink.name)
        )
