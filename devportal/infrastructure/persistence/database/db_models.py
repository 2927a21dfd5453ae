"""SQLAlchemy database models for the developer portal.

Every table shares the identity, descriptive, metadata and audit columns of
``DevPortalDBBase``. Metadata is stored as raw JSON text; parsing and merging
happen in the service layer.
"""

from datetime import UTC, datetime
from uuid import UUID, uuid4

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    MetaData,
    String,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.ext.asyncio import AsyncAttrs
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from devportal.config import get_logger

logger = get_logger(__name__)

# Define naming convention for constraints
convention = {
    "ix": "ix_%(table_name)s_%(column_0_name)s",
    "uq": "uq_%(table_name)s_%(column_0_N_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

metadata = MetaData(naming_convention=convention)


class DevPortalDBBase(AsyncAttrs, DeclarativeBase):
    """Base class for all database models with identity and audit columns."""

    metadata = metadata

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    name: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(200), default="")
    description: Mapped[str] = mapped_column(Text, default="")
    # "metadata" is reserved on declarative classes
    metadata_: Mapped[str | None] = mapped_column("metadata", Text, default=None)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
        nullable=False,
    )
    created_by: Mapped[str] = mapped_column(String(40), default="")
    updated_by: Mapped[str] = mapped_column(String(40), default="")


class DBOrganization(DevPortalDBBase):
    __tablename__ = "organizations"


class DBGroup(DevPortalDBBase):
    __tablename__ = "groups"

    org_id: Mapped[UUID] = mapped_column(
        ForeignKey("organizations.id", ondelete="CASCADE"), index=True
    )


class DBTeam(DevPortalDBBase):
    """Team within a group; names are unique per group."""

    __tablename__ = "teams"
    __table_args__ = (UniqueConstraint("group_id", "name"),)

    group_id: Mapped[UUID] = mapped_column(ForeignKey("groups.id", ondelete="CASCADE"), index=True)
    owner: Mapped[str] = mapped_column(String(20), default="")
    email: Mapped[str] = mapped_column(String(50), default="")
    picture_url: Mapped[str] = mapped_column(String(200), default="")


class DBProject(DevPortalDBBase):
    __tablename__ = "projects"


class DBLandscape(DevPortalDBBase):
    """Deployment landscape; names are globally unique."""

    __tablename__ = "landscapes"
    __table_args__ = (UniqueConstraint("name"),)

    project_id: Mapped[UUID] = mapped_column(
        ForeignKey("projects.id", ondelete="CASCADE"), index=True
    )
    domain: Mapped[str] = mapped_column(String(200), default="")
    environment: Mapped[str] = mapped_column(String(20), default="", index=True)


class DBComponent(DevPortalDBBase):
    __tablename__ = "components"

    project_id: Mapped[UUID] = mapped_column(
        ForeignKey("projects.id", ondelete="CASCADE"), index=True
    )
    owner_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("teams.id", ondelete="SET NULL"), index=True, default=None
    )


class DBPlugin(DevPortalDBBase):
    """UI plugin; names are globally unique."""

    __tablename__ = "plugins"
    __table_args__ = (UniqueConstraint("name"),)

    icon: Mapped[str] = mapped_column(String(50), default="")
    react_component_path: Mapped[str] = mapped_column(String(500), default="")
    backend_server_url: Mapped[str] = mapped_column(String(500), default="")
    owner: Mapped[str] = mapped_column(String(100), default="")


class DBUser(DevPortalDBBase):
    """Portal user; emails and external user ids are unique."""

    __tablename__ = "users"
    __table_args__ = (UniqueConstraint("email"), UniqueConstraint("user_id"))

    user_id: Mapped[str] = mapped_column(String(40), nullable=False)
    email: Mapped[str] = mapped_column(String(100), nullable=False)
    first_name: Mapped[str] = mapped_column(String(100), default="")
    last_name: Mapped[str] = mapped_column(String(100), default="")
    mobile: Mapped[str] = mapped_column(String(20), default="")
    team_domain: Mapped[str] = mapped_column(String(50), default="developer")
    team_role: Mapped[str] = mapped_column(String(50), default="member")
    team_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("teams.id", ondelete="SET NULL"), index=True, default=None
    )
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, index=True)


class DBLink(DevPortalDBBase):
    """Bookmarked URL owned by a team or a user (no foreign key on ``owner``)."""

    __tablename__ = "links"

    url: Mapped[str] = mapped_column(String(2000), nullable=False)
    owner: Mapped[UUID] = mapped_column(Uuid, index=True)
    category_id: Mapped[UUID | None] = mapped_column(Uuid, default=None)
    tags: Mapped[str] = mapped_column(String(500), default="")


async def init_db() -> None:
    """Initialize database schema.

    Creates all tables if they don't exist.
    """
    from devportal.infrastructure.persistence.database.db_connection import get_engine

    engine = get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(DevPortalDBBase.metadata.create_all)
    logger.info("Database schema initialized")
