"""Project and component persistence."""

from typing import override
from uuid import UUID

from attrs import define
from sqlalchemy.ext.asyncio import AsyncSession

from devportal.domain.entities import Component, Project
from devportal.domain.metadata import get_nested_str, load_metadata
from devportal.infrastructure.persistence.database.db_models import DBComponent, DBProject
from devportal.infrastructure.persistence.repositories.base_repo import (
    BaseModelMapper,
    BaseRepository,
    common_db_fields,
    common_domain_fields,
)
from devportal.infrastructure.persistence.repositories.repo_decorator import db_operation


@define(frozen=True, slots=True)
class ProjectMapper(BaseModelMapper[DBProject, Project]):
    @staticmethod
    @override
    async def to_domain(db_model: DBProject) -> Project:
        return Project(**common_domain_fields(db_model))

    @staticmethod
    @override
    def to_db(domain_model: Project) -> DBProject:
        return DBProject(**common_db_fields(domain_model))


@define(frozen=True, slots=True)
class ComponentMapper(BaseModelMapper[DBComponent, Component]):
    """Bidirectional mapper between DB and domain models for Component."""

    @staticmethod
    @override
    async def to_domain(db_model: DBComponent) -> Component:
        return Component(
            project_id=db_model.project_id,
            owner_id=db_model.owner_id,
            **common_domain_fields(db_model),
        )

    @staticmethod
    @override
    def to_db(domain_model: Component) -> DBComponent:
        return DBComponent(
            project_id=domain_model.project_id,
            owner_id=domain_model.owner_id,
            **common_db_fields(domain_model),
        )


class ProjectRepository(BaseRepository[DBProject, Project]):
    """Repository for project lookups."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session=session, model_class=DBProject, mapper=ProjectMapper())

    @db_operation("get_project_by_name")
    async def get_by_name(self, name: str) -> Project:
        return await self._fetch_one(self.select().where(DBProject.name == name))

    @db_operation("get_all_projects")
    async def get_all_projects(self) -> list[Project]:
        return await self._fetch_many(self.select().order_by(DBProject.name))

    @db_operation("get_project_health_metadata")
    async def get_health_metadata(self, project_id: UUID) -> tuple[str, str]:
        """``health.endpoint`` and ``health.success_regex`` from project metadata."""
        project = await self._execute_query_one(self.select_by_id(project_id))
        meta = load_metadata(project.metadata_)
        return (
            get_nested_str(meta, "health", "endpoint") or "",
            get_nested_str(meta, "health", "success_regex") or "",
        )


class ComponentRepository(BaseRepository[DBComponent, Component]):
    """Repository for component operations."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session=session, model_class=DBComponent, mapper=ComponentMapper())

    @db_operation("get_component_by_name")
    async def get_by_name(self, name: str) -> Component:
        return await self._fetch_one(self.select().where(DBComponent.name == name))

    @db_operation("get_all_components")
    async def get_all(self, limit: int, offset: int) -> tuple[list[Component], int]:
        return await self._fetch_page(self.select().order_by(DBComponent.name), limit, offset)

    @db_operation("get_components_by_project_id")
    async def get_components_by_project_id(
        self, project_id: UUID, limit: int, offset: int
    ) -> tuple[list[Component], int]:
        stmt = self.select().where(DBComponent.project_id == project_id).order_by(DBComponent.name)
        return await self._fetch_page(stmt, limit, offset)

    @db_operation("get_components_by_team_id")
    async def get_components_by_team_id(
        self, team_id: UUID, limit: int, offset: int
    ) -> tuple[list[Component], int]:
        stmt = self.select().where(DBComponent.owner_id == team_id).order_by(DBComponent.name)
        return await self._fetch_page(stmt, limit, offset)
