"""Team request and response payloads."""

from typing import Any
from uuid import UUID

from pydantic import Field

from .base import EMAIL_PATTERN, RequestModel, ResponseModel
from .user import LinkResponse, UserResponse


class CreateTeamRequest(RequestModel):
    group_id: UUID
    name: str = Field(min_length=1, max_length=40)
    title: str = Field(min_length=1, max_length=100)
    description: str = Field(default="", max_length=200)
    owner: str = Field(min_length=5, max_length=20)
    email: str = Field(min_length=5, max_length=50, pattern=EMAIL_PATTERN)
    picture_url: str = Field(min_length=5, max_length=200)
    metadata: dict[str, Any] | None = None


class UpdateTeamRequest(RequestModel):
    """Partial update; supplied metadata is merged into the stored bag."""

    group_id: UUID | None = None
    name: str | None = Field(default=None, min_length=1, max_length=40)
    title: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=200)
    owner: str | None = Field(default=None, min_length=5, max_length=20)
    email: str | None = Field(default=None, min_length=5, max_length=50, pattern=EMAIL_PATTERN)
    picture_url: str | None = Field(default=None, min_length=5, max_length=200)
    metadata: dict[str, Any] | None = None


class TeamResponse(ResponseModel):
    id: UUID
    group_id: UUID
    organization_id: UUID
    name: str
    title: str
    description: str
    owner: str
    email: str
    picture_url: str
    metadata: dict[str, Any] | None = None
    created_at: str
    updated_at: str


class TeamListResponse(ResponseModel):
    teams: list[TeamResponse]
    total: int
    page: int
    page_size: int


class TeamWithMembersResponse(TeamResponse):
    members: list[UserResponse] = Field(default_factory=list)
    links: list[LinkResponse] = Field(default_factory=list)
