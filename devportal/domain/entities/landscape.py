"""Landscape domain entity."""

from datetime import datetime
from uuid import UUID, uuid4

from attrs import define, field, validators

from .shared import EntityMixin, utc_now


@define(frozen=True, slots=True)
class Landscape(EntityMixin):
    """A deployment landscape (region/environment) belonging to a project.

    Names are globally unique. The metadata bag carries well-known optional
    links and flags used by the minimal list projection.
    """

    name: str = field(validator=validators.instance_of(str))
    title: str = field(validator=validators.instance_of(str))
    project_id: UUID = field(validator=validators.instance_of(UUID))
    domain: str = ""
    environment: str = ""
    description: str = ""
    metadata: str | None = None

    id: UUID = field(factory=uuid4)
    created_at: datetime = field(factory=utc_now)
    updated_at: datetime = field(factory=utc_now)
    created_by: str = ""
    updated_by: str = ""
