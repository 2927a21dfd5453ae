"""Plugin domain entity."""

from datetime import datetime
from uuid import UUID, uuid4

from attrs import define, field, validators

from .shared import EntityMixin, utc_now


@define(frozen=True, slots=True)
class Plugin(EntityMixin):
    """A portal UI plugin backed by a React component hosted on GitHub."""

    name: str = field(validator=validators.instance_of(str))
    title: str = field(validator=validators.instance_of(str))
    icon: str = ""
    react_component_path: str = ""
    backend_server_url: str = ""
    owner: str = ""
    description: str = ""
    metadata: str | None = None

    id: UUID = field(factory=uuid4)
    created_at: datetime = field(factory=utc_now)
    updated_at: datetime = field(factory=utc_now)
    created_by: str = ""
    updated_by: str = ""
