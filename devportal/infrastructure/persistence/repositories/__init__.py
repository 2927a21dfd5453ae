"""Repository layer for database operations with SQLAlchemy 2.0."""

from devportal.infrastructure.persistence.repositories.base_repo import (
    BaseModelMapper,
    BaseRepository,
    ModelMapper,
)
from devportal.infrastructure.persistence.repositories.component import (
    ComponentRepository,
    ProjectRepository,
)
from devportal.infrastructure.persistence.repositories.landscape import LandscapeRepository
from devportal.infrastructure.persistence.repositories.plugin import PluginRepository
from devportal.infrastructure.persistence.repositories.repo_decorator import db_operation
from devportal.infrastructure.persistence.repositories.team import (
    GroupRepository,
    OrganizationRepository,
    TeamRepository,
)
from devportal.infrastructure.persistence.repositories.user import LinkRepository, UserRepository

__all__ = [
    "BaseModelMapper",
    "BaseRepository",
    "ComponentRepository",
    "GroupRepository",
    "LandscapeRepository",
    "LinkRepository",
    "ModelMapper",
    "OrganizationRepository",
    "PluginRepository",
    "ProjectRepository",
    "TeamRepository",
    "UserRepository",
    "db_operation",
]
