"""
Validation Helpers

Schema validation for payloads arriving as plain dicts, plus the
form-level rules a client enforces before calling the services.

Invalid payloads fail fast with a SchemaValidationError that keeps the
pydantic error list for rendering.
"""

import logging
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


class SchemaValidationError(Exception):
    """Raised when schema validation fails."""

    def __init__(self, message: str, schema_name: str, errors: list[dict[str, Any]]) -> None:
        super().__init__(message)
        self.schema_name = schema_name
        self.errors = errors


def validate_schema(schema_class: type[T], data: T | dict[str, Any]) -> T:
    """
    Validate data against a Pydantic schema.

    Instances of the schema are returned unchanged.

    Args:
        schema_class: The Pydantic model class to validate against
        data: A dict payload or an already-built instance

    Returns:
        Validated Pydantic model instance

    Raises:
        SchemaValidationError: If validation fails
    """
    if isinstance(data, schema_class):
        return data
    try:
        return schema_class.model_validate(data)
    except ValidationError as e:
        logger.error(
            f"Schema validation failed for {schema_class.__name__}: {e.errors()}"
        )
        raise SchemaValidationError(
            message=f"Schema validation failed for {schema_class.__name__}",
            schema_name=schema_class.__name__,
            errors=e.errors(),
        ) from e


def require_rejection_notes(notes: str | None) -> str:
    """
    Return stripped rejection notes, refusing blank ones.

    Rejections must explain themselves to the student. The state machine
    tolerates blank notes; callers offering a reject action apply this first.
    """
    cleaned = (notes or "").strip()
    if not cleaned:
        raise SchemaValidationError(
            message="Notes are required when rejecting an achievement",
            schema_name="RejectionNotes",
            errors=[{"loc": ("notes",), "msg": "Notes are required", "type": "missing"}],
        )
    return cleaned
