"""
Portfolio API — Shared Store Helpers
=====================================

What:  Small helpers used by every record service: id parsing, the typed
       single-field setter lookup, and translation of driver errors into
       DatabaseError.
"""

import logging
import uuid
from contextlib import contextmanager
from enum import Enum
from typing import Any, Dict, Iterator, Tuple, Type

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import SQLAlchemyError

from app.exceptions import DatabaseError, ValidationError

logger = logging.getLogger(__name__)


def parse_record_id(raw_id: str, resource: str) -> uuid.UUID:
    """
    Convert a path segment into a record id.

    Raises:
        ValidationError: The segment is not a UUID (→ 400)
    """
    try:
        return uuid.UUID(raw_id)
    except (ValueError, AttributeError, TypeError):
        raise ValidationError(
            message=f"'{raw_id}' is not a valid {resource} id",
            field="id",
            context={"resource": resource},
        )


def resolve_field(
    fields: Type[Enum],
    setters: Dict[Any, Tuple[str, TypeAdapter]],
    key: str,
    resource: str,
) -> Tuple[str, TypeAdapter]:
    """
    Look up the ORM attribute and validator for an updatable field.

    Only names in the `fields` enum are accepted; anything else (including
    `id`) is rejected before it reaches the store.
    """
    try:
        field = fields(key)
    except ValueError:
        allowed = [f.value for f in fields]
        raise ValidationError(
            message=f"Unknown {resource} field '{key}'",
            field="key",
            context={"allowed": allowed},
        )
    return setters[field]


def coerce_value(adapter: TypeAdapter, key: str, value: Any) -> Any:
    """Validate `value` against the field's type; wrong types are a 400."""
    try:
        return adapter.validate_python(value)
    except PydanticValidationError as e:
        raise ValidationError(
            message=f"Invalid value for field '{key}'",
            field="value",
            context={"errors": [err["msg"] for err in e.errors()]},
        )


@contextmanager
def store_errors(action: str, **context: Any) -> Iterator[None]:
    """
    Translate SQLAlchemy failures raised inside the block into DatabaseError.

    Example:
        with store_errors("list pieces"):
            result = await db.execute(select(Piece))
    """
    try:
        yield
    except SQLAlchemyError as e:
        logger.error("Database error while trying to %s: %s", action, str(e), exc_info=True)
        raise DatabaseError(
            message=f"Could not {action}. Please try again.",
            context={**context, "error_type": type(e).__name__},
        ) from e
