"""Component and project payloads."""

from typing import Any
from uuid import UUID

from pydantic import Field

from .base import RequestModel, ResponseModel


class CreateComponentRequest(RequestModel):
    name: str = Field(min_length=1, max_length=40)
    title: str = Field(min_length=1, max_length=100)
    description: str = Field(default="", max_length=200)
    project_id: UUID
    owner_id: UUID | None = None
    metadata: dict[str, Any] | None = None
    created_by: str = Field(default="", max_length=40)


class UpdateComponentRequest(RequestModel):
    """Partial update; supplied metadata is merged into the stored bag."""

    name: str | None = Field(default=None, min_length=1, max_length=40)
    title: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=200)
    project_id: UUID | None = None
    owner_id: UUID | None = None
    metadata: dict[str, Any] | None = None
    updated_by: str = Field(default="", max_length=40)


class ComponentResponse(ResponseModel):
    id: UUID
    name: str
    title: str
    description: str
    project_id: UUID
    owner_id: UUID | None = None
    metadata: dict[str, Any] | None = None
    created_at: str
    updated_at: str


class ComponentListResponse(ResponseModel):
    components: list[ComponentResponse]
    total: int
    page: int
    page_size: int


class ComponentProjectView(ResponseModel):
    """Minimal component view for project listings, enriched from metadata.

    Boolean flags are rendered whenever the metadata carries them, including
    ``false``; missing flags are omitted.
    """

    id: UUID
    owner_id: UUID | None = None
    name: str
    title: str
    description: str
    qos: str | None = None
    sonar: str | None = None
    github: str | None = None
    central_service: bool | None = Field(default=None, alias="central-service")
    is_library: bool | None = Field(default=None, alias="is-library")
    health: bool | None = None


class ProjectResponse(ResponseModel):
    id: UUID
    name: str
    title: str
    description: str
    metadata: dict[str, Any] | None = None
    created_at: str
    updated_at: str


class HealthTarget(ResponseModel):
    """Resolved health endpoint for a component in a landscape."""

    url: str = Field(alias="healthURL")
    success_regex: str = Field(default="", alias="successRegex")
