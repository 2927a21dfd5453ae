"""Database engine, sessions and ORM models."""

from .db_connection import (
    create_db_engine,
    create_session_factory,
    dispose_engine,
    get_engine,
    get_session,
    get_session_factory,
)
from .db_models import (
    DBComponent,
    DBGroup,
    DBLandscape,
    DBLink,
    DBOrganization,
    DBPlugin,
    DBProject,
    DBTeam,
    DBUser,
    DevPortalDBBase,
    init_db,
)

__all__ = [
    "DBComponent",
    "DBGroup",
    "DBLandscape",
    "DBLink",
    "DBOrganization",
    "DBPlugin",
    "DBProject",
    "DBTeam",
    "DBUser",
    "DevPortalDBBase",
    "create_db_engine",
    "create_session_factory",
    "dispose_engine",
    "get_engine",
    "get_session",
    "get_session_factory",
    "init_db",
]
