"""Repository and collaborator contracts for the domain layer."""

from .interfaces import (
    CacheServiceProtocol,
    ComponentRepositoryProtocol,
    GroupRepositoryProtocol,
    LandscapeRepositoryProtocol,
    LinkRepositoryProtocol,
    OrganizationRepositoryProtocol,
    PluginRepositoryProtocol,
    ProjectRepositoryProtocol,
    RepositoryContentProvider,
    TeamRepositoryProtocol,
    UserRepositoryProtocol,
)

__all__ = [
    "CacheServiceProtocol",
    "ComponentRepositoryProtocol",
    "GroupRepositoryProtocol",
    "LandscapeRepositoryProtocol",
    "LinkRepositoryProtocol",
    "OrganizationRepositoryProtocol",
    "PluginRepositoryProtocol",
    "ProjectRepositoryProtocol",
    "RepositoryContentProvider",
    "TeamRepositoryProtocol",
    "UserRepositoryProtocol",
]
