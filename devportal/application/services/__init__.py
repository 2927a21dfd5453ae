"""Entity services composing repositories, validation and caching."""

from .component_service import ComponentService
from .health_service import ComponentHealthService
from .landscape_service import LandscapeService
from .plugin_service import PluginService
from .project_service import ProjectService
from .team_service import TeamService
from .user_service import UserService

__all__ = [
    "ComponentHealthService",
    "ComponentService",
    "LandscapeService",
    "PluginService",
    "ProjectService",
    "TeamService",
    "UserService",
]
