"""Request validation.

Request payloads are pydantic models with declarative field constraints.
``RequestValidator`` runs every constraint in one pass and reports all
violations together as a ``ValidationFailedError``.
"""

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ValidationError

from devportal.config import get_logger
from devportal.domain.errors import FieldViolation, ValidationFailedError

logger = get_logger(__name__)


def _violations(error: ValidationError) -> list[FieldViolation]:
    return [
        FieldViolation(
            field=".".join(str(part) for part in detail["loc"]),
            message=detail["msg"],
        )
        for detail in error.errors()
    ]


class RequestValidator:
    """Validates request payloads against their pydantic request models."""

    def validate[M: BaseModel](self, model_cls: type[M], payload: M | Mapping[str, Any]) -> M:
        """Return a validated ``model_cls`` instance.

        Accepts either a raw mapping or an already-built model; the latter is
        re-validated so models assembled with ``model_construct`` are checked too.

        Raises:
            ValidationFailedError: one or more field constraints failed
        """
        try:
            if isinstance(payload, BaseModel):
                return model_cls.model_validate(payload.model_dump(exclude_unset=True))
            return model_cls.model_validate(dict(payload))
        except ValidationError as e:
            violations = _violations(e)
            logger.debug(
                "Request validation failed",
                model=model_cls.__name__,
                fields=[v.field for v in violations],
            )
            raise ValidationFailedError(violations) from e
