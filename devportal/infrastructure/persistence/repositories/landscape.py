"""Landscape persistence."""

from typing import override
from uuid import UUID

from attrs import define
from sqlalchemy import or_
from sqlalchemy.ext.asyncio import AsyncSession

from devportal.domain.entities import Landscape
from devportal.infrastructure.persistence.database.db_models import DBLandscape
from devportal.infrastructure.persistence.repositories.base_repo import (
    BaseModelMapper,
    BaseRepository,
    common_db_fields,
    common_domain_fields,
)
from devportal.infrastructure.persistence.repositories.repo_decorator import db_operation


@define(frozen=True, slots=True)
class LandscapeMapper(BaseModelMapper[DBLandscape, Landscape]):
    """Bidirectional mapper between DB and domain models for Landscape."""

    @staticmethod
    @override
    async def to_domain(db_model: DBLandscape) -> Landscape:
        return Landscape(
            project_id=db_model.project_id,
            domain=db_model.domain or "",
            environment=db_model.environment or "",
            **common_domain_fields(db_model),
        )

    @staticmethod
    @override
    def to_db(domain_model: Landscape) -> DBLandscape:
        return DBLandscape(
            project_id=domain_model.project_id,
            domain=domain_model.domain,
            environment=domain_model.environment,
            **common_db_fields(domain_model),
        )


class LandscapeRepository(BaseRepository[DBLandscape, Landscape]):
    """Repository for landscape operations."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session=session, model_class=DBLandscape, mapper=LandscapeMapper())

    @db_operation("get_landscape_by_name")
    async def get_by_name(self, name: str) -> Landscape:
        return await self._fetch_one(self.select().where(DBLandscape.name == name))

    @db_operation("get_active_landscapes")
    async def get_active_landscapes(self, limit: int, offset: int) -> tuple[list[Landscape], int]:
        """Every landscape ordered by name; landscapes carry no status column."""
        return await self._fetch_page(self.select().order_by(DBLandscape.name), limit, offset)

    @db_operation("get_landscapes_by_project_id")
    async def get_landscapes_by_project_id(
        self, project_id: UUID, limit: int, offset: int
    ) -> tuple[list[Landscape], int]:
        stmt = self.select().where(DBLandscape.project_id == project_id).order_by(DBLandscape.name)
        return await self._fetch_page(stmt, limit, offset)

    @db_operation("search_landscapes")
    async def search(self, query: str, limit: int, offset: int) -> tuple[list[Landscape], int]:
        """Case-insensitive substring match on name, title or description."""
        stmt = self.select()
        if query:
            pattern = f"%{query}%"
            stmt = stmt.where(
                or_(
                    DBLandscape.name.ilike(pattern),
                    DBLandscape.title.ilike(pattern),
                    DBLandscape.description.ilike(pattern),
                )
            )
        return await self._fetch_page(stmt.order_by(DBLandscape.name), limit, offset)

    @db_operation("set_landscape_status")
    async def set_status(self, id_: UUID, status: str) -> None:
        """Only checks existence; there is no status to persist."""
        await self._execute_query_one(self.select_by_id(id_))
