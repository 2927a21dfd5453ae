"""Base repository, mapper protocol and shared column helpers (SQLAlchemy 2.0)."""

from typing import Any, Protocol

from attrs import define
from sqlalchemy import Select, delete, func, inspect, select
from sqlalchemy.ext.asyncio import AsyncSession

from devportal.domain.entities import ensure_utc
from devportal.domain.errors import RecordNotFoundError
from devportal.infrastructure.persistence.database.db_models import DevPortalDBBase
from devportal.infrastructure.persistence.repositories.repo_decorator import db_operation

class ModelMapper[TDBModel: DevPortalDBBase, TDomainModel](Protocol):
    """Protocol for bidirectional mapping between models."""

    @staticmethod
    async def to_domain(db_model: TDBModel) -> TDomainModel:
        """Convert database model to domain model."""
        ...

    @staticmethod
    def to_db(domain_model: TDomainModel) -> TDBModel:
        """Convert domain model to database model."""
        ...


@define(frozen=True, slots=True)
class BaseModelMapper[TDBModel: DevPortalDBBase, TDomainModel]:
    """Base implementation of ModelMapper with common functionality.

    Usage:
        @define(frozen=True, slots=True)
        class PluginMapper(BaseModelMapper[DBPlugin, Plugin]):
            @staticmethod
            async def to_domain(db_model: DBPlugin) -> Plugin:
                return Plugin(...)

            @staticmethod
            def to_db(domain_model: Plugin) -> DBPlugin:
                return DBPlugin(...)
    """

    @staticmethod
    async def to_domain(db_model: TDBModel) -> TDomainModel:
        raise NotImplementedError("Subclasses must implement to_domain")

    @staticmethod
    def to_db(domain_model: TDomainModel) -> TDBModel:
        raise NotImplementedError("Subclasses must implement to_db")


def common_db_fields(entity: Any) -> dict[str, Any]:
    """Column values shared by every table, read from a domain entity."""
    return {
        "id": entity.id,
        "name": entity.name,
        "title": entity.title,
        "description": entity.description,
        "metadata_": entity.metadata,
        "created_at": entity.created_at,
        "updated_at": entity.updated_at,
        "created_by": entity.created_by,
        "updated_by": entity.updated_by,
    }


def common_domain_fields(db_model: DevPortalDBBase) -> dict[str, Any]:
    """Entity keyword arguments shared by every table; timestamps normalized to UTC."""
    return {
        "id": db_model.id,
        "name": db_model.name,
        "title": db_model.title or "",
        "description": db_model.description or "",
        "metadata": db_model.metadata_,
        "created_at": ensure_utc(db_model.created_at),
        "updated_at": ensure_utc(db_model.updated_at),
        "created_by": db_model.created_by or "",
        "updated_by": db_model.updated_by or "",
    }


class BaseRepository[TDBModel: DevPortalDBBase, TDomainModel]:
    """Base repository for database operations over one mapped table.

    Single-row lookups raise ``RecordNotFoundError``; paginated listings
    return ``(rows, total)`` where ``total`` ignores the window.
    """

    def __init__(
        self,
        session: AsyncSession,
        model_class: type[TDBModel],
        mapper: ModelMapper[TDBModel, TDomainModel],
    ) -> None:
        self.session = session
        self.model_class = model_class
        self.mapper = mapper
        self._entity_name = model_class.__tablename__

    # -------------------------------------------------------------------------
    # SELECT STATEMENT BUILDERS
    # -------------------------------------------------------------------------

    def select(self, *columns: Any) -> Select:
        return select(*columns) if columns else select(self.model_class)

    def select_by_id(self, id_: Any) -> Select:
        return select(self.model_class).where(self.model_class.id == id_)

    def select_by_ids(self, ids: list[Any]) -> Select:
        if not ids:
            return select(self.model_class).where(func.false())
        return select(self.model_class).where(self.model_class.id.in_(ids))

    # -------------------------------------------------------------------------
    # DIRECT DATABASE OPERATIONS (non-decorated helpers)
    # -------------------------------------------------------------------------

    async def _execute_query(self, stmt: Select) -> list[TDBModel]:
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def _execute_query_one(self, stmt: Select) -> TDBModel:
        """First row of ``stmt``; raises ``RecordNotFoundError`` when empty."""
        result = await self.session.execute(stmt.limit(1))
        db_entity = result.scalars().first()
        if db_entity is None:
            raise RecordNotFoundError(f"{self._entity_name} record not found")
        return db_entity

    async def _count(self, stmt: Select) -> int:
        count_stmt = select(func.count()).select_from(stmt.order_by(None).subquery())
        return int(await self.session.scalar(count_stmt) or 0)

    async def _fetch_one(self, stmt: Select) -> TDomainModel:
        return await self.mapper.to_domain(await self._execute_query_one(stmt))

    async def _fetch_many(self, stmt: Select) -> list[TDomainModel]:
        return [await self.mapper.to_domain(row) for row in await self._execute_query(stmt)]

    async def _fetch_page(
        self, stmt: Select, limit: int, offset: int
    ) -> tuple[list[TDomainModel], int]:
        """Rows in the limit/offset window together with the unwindowed total."""
        total = await self._count(stmt)
        rows = await self._fetch_many(stmt.limit(limit).offset(offset))
        return rows, total

    # -------------------------------------------------------------------------
    # CORE CRUD OPERATIONS
    # -------------------------------------------------------------------------

    @db_operation("get_by_id")
    async def get_by_id(self, id_: Any) -> TDomainModel:
        return await self._fetch_one(self.select_by_id(id_))

    @db_operation("get_by_ids")
    async def get_by_ids(self, ids: list[Any]) -> list[TDomainModel]:
        return await self._fetch_many(self.select_by_ids(ids))

    @db_operation("create")
    async def create(self, entity: TDomainModel) -> TDomainModel:
        db_entity = self.mapper.to_db(entity)
        self.session.add(db_entity)
        await self.session.flush()
        await self.session.refresh(db_entity)
        return await self.mapper.to_domain(db_entity)

    @db_operation("update")
    async def update(self, entity: TDomainModel) -> TDomainModel:
        """Overwrite every mapped column of the stored row with ``entity``."""
        update_db = self.mapper.to_db(entity)
        existing = await self._execute_query_one(self.select_by_id(update_db.id))

        for attr in inspect(self.model_class).column_attrs:
            if attr.key in ("id", "created_at"):
                continue
            setattr(existing, attr.key, getattr(update_db, attr.key))

        await self.session.flush()
        await self.session.refresh(existing)
        return await self.mapper.to_domain(existing)

    @db_operation("delete")
    async def delete(self, id_: Any) -> None:
        """Hard delete by id; raises ``RecordNotFoundError`` when absent."""
        stmt = (
            delete(self.model_class)
            .where(self.model_class.id == id_)
            .returning(self.model_class.id)
        )
        result = await self.session.execute(stmt)
        if not result.scalars().all():
            raise RecordNotFoundError(f"{self._entity_name} record not found")
