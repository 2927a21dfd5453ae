"""Request and response payloads for every entity service."""

from .base import RequestModel, ResponseModel
from .component import (
    ComponentListResponse,
    ComponentProjectView,
    ComponentResponse,
    CreateComponentRequest,
    HealthTarget,
    ProjectResponse,
    UpdateComponentRequest,
)
from .landscape import (
    CreateLandscapeRequest,
    LandscapeListResponse,
    LandscapeMinimalResponse,
    LandscapePage,
    LandscapeResponse,
    UpdateLandscapeRequest,
)
from .plugin import (
    CreatePluginRequest,
    PluginListResponse,
    PluginResponse,
    PluginUIResponse,
    UpdatePluginRequest,
)
from .team import (
    CreateTeamRequest,
    TeamListResponse,
    TeamResponse,
    TeamWithMembersResponse,
    UpdateTeamRequest,
)
from .user import (
    AddQuickLinkRequest,
    CreateUserRequest,
    LinkResponse,
    QuickLink,
    QuickLinksResponse,
    UpdateUserRequest,
    UserListResponse,
    UserResponse,
    UserWithLinksResponse,
)

__all__ = [
    "AddQuickLinkRequest",
    "ComponentListResponse",
    "ComponentProjectView",
    "ComponentResponse",
    "CreateComponentRequest",
    "CreateLandscapeRequest",
    "CreatePluginRequest",
    "CreateTeamRequest",
    "CreateUserRequest",
    "HealthTarget",
    "LandscapeListResponse",
    "LandscapeMinimalResponse",
    "LandscapePage",
    "LandscapeResponse",
    "LinkResponse",
    "PluginListResponse",
    "PluginResponse",
    "PluginUIResponse",
    "ProjectResponse",
    "QuickLink",
    "QuickLinksResponse",
    "RequestModel",
    "ResponseModel",
    "TeamListResponse",
    "TeamResponse",
    "TeamWithMembersResponse",
    "UpdateComponentRequest",
    "UpdateLandscapeRequest",
    "UpdatePluginRequest",
    "UpdateTeamRequest",
    "UserListResponse",
    "UserResponse",
    "UserWithLinksResponse",
]
