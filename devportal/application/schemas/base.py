"""Base classes for request and response payloads."""

from typing import Any

from pydantic import BaseModel, ConfigDict

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"
HTTP_URL_PATTERN = r"^https?://\S+$"


class RequestModel(BaseModel):
    """Inbound payload; unknown keys are ignored."""

    model_config = ConfigDict(extra="ignore")


class ResponseModel(BaseModel):
    """Outbound payload with wire aliases and omit-if-empty rendering."""

    model_config = ConfigDict(populate_by_name=True)

    def to_payload(self) -> dict[str, Any]:
        """Wire representation: aliased keys, optional fields omitted when unset."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
