"""User and link entities."""

from datetime import datetime
from uuid import UUID, uuid4

from attrs import define, field, validators

from .shared import EntityMixin, utc_now


@define(frozen=True, slots=True)
class User(EntityMixin):
    """Portal user.

    ``id`` is the relational identity; ``user_id`` is the external account id.
    Metadata holds ``favorites`` (link ids), ``subscribed`` (plugin ids),
    ``quick_links`` and the ``portal_admin`` flag.
    """

    user_id: str = field(validator=validators.instance_of(str))
    email: str = field(validator=validators.instance_of(str))
    name: str = ""
    title: str = ""
    first_name: str = ""
    last_name: str = ""
    mobile: str = ""
    team_domain: str = "developer"
    team_role: str = "member"
    team_id: UUID | None = None
    is_active: bool = True
    description: str = ""
    metadata: str | None = None

    id: UUID = field(factory=uuid4)
    created_at: datetime = field(factory=utc_now)
    updated_at: datetime = field(factory=utc_now)
    created_by: str = ""
    updated_by: str = ""


@define(frozen=True, slots=True)
class Link(EntityMixin):
    """A bookmarked URL owned by a team or user."""

    name: str = field(validator=validators.instance_of(str))
    url: str = field(validator=validators.instance_of(str))
    owner: UUID = field(validator=validators.instance_of(UUID))
    title: str = ""
    description: str = ""
    category_id: UUID | None = None
    tags: str = ""
    metadata: str | None = None

    id: UUID = field(factory=uuid4)
    created_at: datetime = field(factory=utc_now)
    updated_at: datetime = field(factory=utc_now)
    created_by: str = ""
    updated_by: str = ""
