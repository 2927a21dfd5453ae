"""Project and component entities."""

from datetime import datetime
from uuid import UUID, uuid4

from attrs import define, field, validators

from .shared import EntityMixin, utc_now


@define(frozen=True, slots=True)
class Project(EntityMixin):
    """A product grouping components and landscapes.

    Health check configuration lives in metadata under ``health.endpoint``
    (URL template) and ``health.success_regex``.
    """

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
class Component(EntityMixin):
    """A deployable component owned by a team within a project."""

    name: str = field(validator=validators.instance_of(str))
    title: str = field(validator=validators.instance_of(str))
    project_id: UUID = field(validator=validators.instance_of(UUID))
    owner_id: UUID | None = None
    description: str = ""
    metadata: str | None = None

    id: UUID = field(factory=uuid4)
    created_at: datetime = field(factory=utc_now)
    updated_at: datetime = field(factory=utc_now)
    created_by: str = ""
    updated_by: str = ""
