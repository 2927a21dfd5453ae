"""Plugin request and response payloads."""

from uuid import UUID

from pydantic import Field

from .base import RequestModel, ResponseModel


class CreatePluginRequest(RequestModel):
    name: str = Field(min_length=1, max_length=40)
    title: str = Field(min_length=1, max_length=100)
    description: str = Field(default="", max_length=200)
    icon: str = Field(min_length=3, max_length=50)
    react_component_path: str = Field(min_length=1, max_length=500)
    backend_server_url: str = Field(min_length=1, max_length=500)
    owner: str = Field(default="", max_length=100)


class UpdatePluginRequest(RequestModel):
    name: str | None = Field(default=None, min_length=1, max_length=40)
    title: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=200)
    icon: str | None = Field(default=None, min_length=3, max_length=50)
    react_component_path: str | None = Field(default=None, max_length=500)
    backend_server_url: str | None = Field(default=None, max_length=500)
    owner: str | None = Field(default=None, max_length=100)


class PluginResponse(ResponseModel):
    id: UUID
    name: str
    title: str
    description: str
    icon: str
    react_component_path: str
    backend_server_url: str
    owner: str
    # Only rendered for viewers subscribed to the plugin
    subscribed: bool | None = None


class PluginListResponse(ResponseModel):
    plugins: list[PluginResponse]
    total: int
    limit: int
    offset: int


class PluginUIResponse(ResponseModel):
    content: str
    content_type: str
