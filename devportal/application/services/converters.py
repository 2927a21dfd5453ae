"""Entity to response projections shared across services."""

from typing import Any

from devportal.application.schemas import (
    ComponentResponse,
    LinkResponse,
    PluginResponse,
    UserResponse,
)
from devportal.domain.entities import Component, Link, Plugin, User, format_timestamp
from devportal.domain.metadata import load_metadata


def metadata_object(raw: str | None) -> dict[str, Any] | None:
    """Metadata for responses: parsed leniently, ``None`` when empty or unreadable."""
    return load_metadata(raw) or None


def to_user_response(user: User) -> UserResponse:
    return UserResponse(
        id=user.user_id,
        uuid=user.id,
        name=user.name,
        title=user.title,
        first_name=user.first_name,
        last_name=user.last_name,
        email=user.email,
        mobile=user.mobile,
        team_domain=user.team_domain,
        team_role=user.team_role,
        team_id=user.team_id,
        metadata=metadata_object(user.metadata),
        created_at=format_timestamp(user.created_at),
        updated_at=format_timestamp(user.updated_at),
    )


def to_link_response(link: Link, favorite: bool = False) -> LinkResponse:
    return LinkResponse(
        id=str(link.id),
        name=link.name,
        title=link.title,
        description=link.description,
        url=link.url,
        category_id=str(link.category_id) if link.category_id else "",
        tags=link.tags,
        favorite=True if favorite else None,
    )


def to_plugin_response(plugin: Plugin, subscribed: bool = False) -> PluginResponse:
    return PluginResponse(
        id=plugin.id,
        name=plugin.name,
        title=plugin.title,
        description=plugin.description,
        icon=plugin.icon,
        react_component_path=plugin.react_component_path,
        backend_server_url=plugin.backend_server_url,
        owner=plugin.owner,
        subscribed=True if subscribed else None,
    )


def to_component_response(component: Component) -> ComponentResponse:
    return ComponentResponse(
        id=component.id,
        name=component.name,
        title=component.title,
        description=component.description,
        project_id=component.project_id,
        owner_id=component.owner_id,
        metadata=metadata_object(component.metadata),
        created_at=format_timestamp(component.created_at),
        updated_at=format_timestamp(component.updated_at),
    )
