"""Organization, group and team entities."""

from datetime import datetime
from uuid import UUID, uuid4

from attrs import define, field, validators

from .shared import EntityMixin, utc_now

# Operationally reserved team hidden from every listing
TECHNICAL_TEAM_NAME = "team-developer-portal-technical"


@define(frozen=True, slots=True)
class Organization(EntityMixin):
    """Top-level tenant owning groups."""

    name: str = field(validator=validators.instance_of(str))
    title: str = ""
    description: str = ""
    metadata: str | None = None

    id: UUID = field(factory=uuid4)
    created_at: datetime = field(factory=utc_now)
    updated_at: datetime = field(factory=utc_now)
    created_by: str = ""
    updated_by: str = ""


@define(frozen=True, slots=True)
class Group(EntityMixin):
    """Group of teams; resolves a team to its organization."""

    name: str = field(validator=validators.instance_of(str))
    org_id: UUID = field(validator=validators.instance_of(UUID))
    title: str = ""
    description: str = ""
    metadata: str | None = None

    id: UUID = field(factory=uuid4)
    created_at: datetime = field(factory=utc_now)
    updated_at: datetime = field(factory=utc_now)
    created_by: str = ""
    updated_by: str = ""


@define(frozen=True, slots=True)
class Team(EntityMixin):
    """Engineering team belonging to a group."""

    name: str = field(validator=validators.instance_of(str))
    title: str = field(validator=validators.instance_of(str))
    group_id: UUID = field(validator=validators.instance_of(UUID))
    owner: str = ""
    email: str = ""
    picture_url: str = ""
    description: str = ""
    metadata: str | None = None

    id: UUID = field(factory=uuid4)
    created_at: datetime = field(factory=utc_now)
    updated_at: datetime = field(factory=utc_now)
    created_by: str = ""
    updated_by: str = ""

    @property
    def is_technical(self) -> bool:
        """Whether this is the reserved technical team."""
        return self.name == TECHNICAL_TEAM_NAME
