"""Landscape request and response payloads."""

from typing import Any
from uuid import UUID

from pydantic import Field

from .base import RequestModel, ResponseModel


class CreateLandscapeRequest(RequestModel):
    name: str = Field(min_length=1, max_length=40)
    title: str = Field(min_length=1, max_length=100)
    description: str = Field(default="", max_length=200)
    project_id: UUID
    domain: str = Field(min_length=1, max_length=200)
    environment: str = Field(min_length=1, max_length=20)
    metadata: dict[str, Any] | None = None


class UpdateLandscapeRequest(RequestModel):
    """Title and description are always applied; other fields only when supplied."""

    title: str = Field(min_length=1, max_length=100)
    description: str = Field(default="", max_length=200)
    project_id: UUID | None = None
    domain: str = Field(default="", max_length=200)
    environment: str = Field(default="", max_length=20)
    metadata: dict[str, Any] | None = None


class LandscapeResponse(ResponseModel):
    id: UUID
    name: str
    title: str
    description: str
    project_id: UUID
    domain: str
    environment: str
    metadata: dict[str, Any] | None = None
    created_at: str
    updated_at: str


class LandscapeMinimalResponse(ResponseModel):
    """Trimmed projection for list endpoints, enriched from metadata.

    Optional links and flags are omitted entirely when absent or empty.
    """

    id: UUID
    name: str
    title: str
    description: str
    domain: str
    environment: str

    auditlog: str | None = None
    cam: str | None = None
    cockpit: str | None = None
    concourse: str | None = None
    control_center: str | None = Field(default=None, alias="control-center")
    dynatrace: str | None = None
    extension: bool | None = None
    gardener: str | None = None
    git: str | None = None
    grafana: str | None = None
    health: str | None = None
    iaas_console: str | None = Field(default=None, alias="iaas-console")
    is_central_region: bool | None = Field(default=None, alias="is-central-region")
    kibana: str | None = None
    monitoring: str | None = None
    operation_console: str | None = Field(default=None, alias="operation-console")
    plutono: str | None = None
    prometheus: str | None = None
    type: str | None = None


class LandscapeListResponse(ResponseModel):
    landscapes: list[LandscapeResponse]
    total: int
    page: int
    page_size: int


class LandscapePage(ResponseModel):
    """Landscapes for one limit/offset window plus the unpaginated total."""

    responses: list[LandscapeResponse]
    total: int
