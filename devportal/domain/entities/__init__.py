"""Core domain entities of the developer portal."""

from .component import Component, Project
from .landscape import Landscape
from .plugin import Plugin
from .shared import ensure_utc, format_timestamp, utc_now
from .team import TECHNICAL_TEAM_NAME, Group, Organization, Team
from .user import Link, User

__all__ = [
    "TECHNICAL_TEAM_NAME",
    "Component",
    "Group",
    "Landscape",
    "Link",
    "Organization",
    "Plugin",
    "Project",
    "Team",
    "User",
    "ensure_utc",
    "format_timestamp",
    "utc_now",
]
