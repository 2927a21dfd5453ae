"""Error taxonomy for the developer portal service layer.

Services raise these exceptions; the transport layer maps ``code`` to its own
status codes. Repositories only ever raise ``RecordNotFoundError`` for absent
rows, which services translate to the entity-specific ``NotFoundError``.
"""

from typing import Any

from attrs import define


class PortalError(Exception):
    """Base exception for service-layer failures."""

    code = "PORTAL_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a transport-neutral error payload."""
        return {"code": self.code, "message": self.message, "details": self.details}


class RecordNotFoundError(Exception):
    """Raised by repositories when a requested row does not exist."""


class NotFoundError(PortalError):
    """A requested entity does not exist."""

    code = "NOT_FOUND"

    def __init__(self, entity: str) -> None:
        self.entity = entity
        super().__init__(f"{entity} not found", {"entity": entity})


class AlreadyExistsError(PortalError):
    """A uniqueness constraint would be violated."""

    code = "ALREADY_EXISTS"

    def __init__(self, entity: str, context: str = "") -> None:
        self.entity = entity
        self.context = context
        message = f"{entity} already exists {context}" if context else f"{entity} already exists"
        super().__init__(message, {"entity": entity})


@define(frozen=True, slots=True)
class FieldViolation:
    """A single failed field constraint."""

    field: str
    message: str

    def __str__(self) -> str:
        return f"{self.field} - {self.message}" if self.field else self.message


class ValidationFailedError(PortalError):
    """Request payload violates one or more field constraints."""

    code = "VALIDATION_FAILED"

    def __init__(self, violations: list[FieldViolation]) -> None:
        self.violations = list(violations)
        summary = "; ".join(str(v) for v in self.violations)
        super().__init__(
            f"validation failed: {summary}" if summary else "validation failed",
            {"fields": [{"field": v.field, "message": v.message} for v in self.violations]},
        )

    @property
    def fields(self) -> list[str]:
        """Names of every field that failed validation."""
        return [v.field for v in self.violations]


class MalformedInputError(PortalError):
    """Input could not be parsed (JSON, URL shape, identifier format)."""

    code = "MALFORMED_INPUT"


class MalformedMetadataError(MalformedInputError):
    """Metadata is present but not a JSON object."""


class InvalidGitHubURLError(MalformedInputError):
    """A source reference is not a GitHub blob URL."""

    def __init__(self, reason: str, url: str = "") -> None:
        self.url = url
        super().__init__(f"invalid GitHub URL in react_component_path: {reason}", {"url": url})


class InternalError(PortalError):
    """Unexpected infrastructure failure wrapped with operation context.

    Raise with ``from`` so the underlying cause stays available for diagnostics.
    """

    code = "INTERNAL"

    def __init__(self, prefix: str, cause: BaseException | None = None) -> None:
        self.prefix = prefix
        message = f"{prefix}: {cause}" if cause is not None else prefix
        super().__init__(message)


class HealthDisabledError(PortalError):
    """The component opted out of health checks through its metadata."""

    code = "HEALTH_DISABLED"

    def __init__(self) -> None:
        super().__init__("component 'health' flag is not set to 'true'")


class HealthNotConfiguredError(PortalError):
    """No health URL template is configured for the component's project."""

    code = "HEALTH_NOT_CONFIGURED"

    def __init__(self) -> None:
        super().__init__("component health URL template is not configured for the project")
