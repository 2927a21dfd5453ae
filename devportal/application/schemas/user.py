"""User, link and quick-link payloads."""

from typing import Any
from uuid import UUID

from pydantic import Field

from .base import EMAIL_PATTERN, HTTP_URL_PATTERN, RequestModel, ResponseModel
from .plugin import PluginResponse


class CreateUserRequest(RequestModel):
    user_id: str = Field(min_length=1, max_length=40)
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    email: str = Field(min_length=5, max_length=100, pattern=EMAIL_PATTERN)
    mobile: str = Field(default="", max_length=20)
    team_id: UUID | None = None
    team_domain: str = Field(default="developer", max_length=50)
    team_role: str = Field(default="member", max_length=50)
    name: str | None = Field(default=None, max_length=100)
    title: str | None = Field(default=None, max_length=100)
    created_by: str = Field(min_length=1, max_length=40)


class UpdateUserRequest(RequestModel):
    first_name: str | None = Field(default=None, min_length=1, max_length=100)
    last_name: str | None = Field(default=None, min_length=1, max_length=100)
    email: str | None = Field(default=None, min_length=5, max_length=100, pattern=EMAIL_PATTERN)
    mobile: str | None = Field(default=None, max_length=20)
    team_id: UUID | None = None
    team_domain: str | None = Field(default=None, max_length=50)
    team_role: str | None = Field(default=None, max_length=50)
    name: str | None = Field(default=None, max_length=100)
    title: str | None = Field(default=None, max_length=100)
    updated_by: str = Field(default="", max_length=40)


class AddQuickLinkRequest(RequestModel):
    url: str = Field(min_length=1, max_length=500, pattern=HTTP_URL_PATTERN)
    title: str = Field(min_length=1, max_length=100)
    icon: str = Field(default="", max_length=50)
    category: str = Field(default="", max_length=50)


class LinkResponse(ResponseModel):
    id: str
    name: str
    title: str
    description: str
    url: str
    category_id: str
    tags: str
    favorite: bool | None = None


class UserResponse(ResponseModel):
    """``id`` is the external user id; ``uuid`` the relational identity."""

    id: str
    uuid: UUID
    name: str
    title: str
    first_name: str
    last_name: str
    email: str
    mobile: str
    team_domain: str
    team_role: str
    team_id: UUID | None = None
    metadata: dict[str, Any] | None = None
    created_at: str
    updated_at: str


class UserListResponse(ResponseModel):
    users: list[UserResponse]
    total: int
    limit: int
    offset: int


class UserWithLinksResponse(UserResponse):
    portal_admin: bool = False
    links: list[LinkResponse] = Field(default_factory=list)
    plugins: list[PluginResponse] = Field(default_factory=list)


class QuickLink(ResponseModel):
    url: str
    title: str
    icon: str = ""
    category: str = ""


class QuickLinksResponse(ResponseModel):
    quick_links: list[QuickLink]
