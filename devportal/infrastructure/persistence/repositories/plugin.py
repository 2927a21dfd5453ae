"""Plugin persistence."""

from typing import override

from attrs import define
from sqlalchemy.ext.asyncio import AsyncSession

from devportal.domain.entities import Plugin
from devportal.infrastructure.persistence.database.db_models import DBPlugin
from devportal.infrastructure.persistence.repositories.base_repo import (
    BaseModelMapper,
    BaseRepository,
    common_db_fields,
    common_domain_fields,
)
from devportal.infrastructure.persistence.repositories.repo_decorator import db_operation


@define(frozen=True, slots=True)
class PluginMapper(BaseModelMapper[DBPlugin, Plugin]):
    """Bidirectional mapper between DB and domain models for Plugin."""

    @staticmethod
    @override
    async def to_domain(db_model: DBPlugin) -> Plugin:
        return Plugin(
            icon=db_model.icon or "",
            react_component_path=db_model.react_component_path or "",
            backend_server_url=db_model.backend_server_url or "",
            owner=db_model.owner or "",
            **common_domain_fields(db_model),
        )

    @staticmethod
    @override
    def to_db(domain_model: Plugin) -> DBPlugin:
        return DBPlugin(
            icon=domain_model.icon,
            react_component_path=domain_model.react_component_path,
            backend_server_url=domain_model.backend_server_url,
            owner=domain_model.owner,
            **common_db_fields(domain_model),
        )


class PluginRepository(BaseRepository[DBPlugin, Plugin]):
    """Repository for plugin operations."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session=session, model_class=DBPlugin, mapper=PluginMapper())

    @db_operation("get_plugin_by_name")
    async def get_by_name(self, name: str) -> Plugin:
        return await self._fetch_one(self.select().where(DBPlugin.name == name))

    @db_operation("get_all_plugins")
    async def get_all(self, limit: int, offset: int) -> tuple[list[Plugin], int]:
        return await self._fetch_page(self.select().order_by(DBPlugin.name), limit, offset)
