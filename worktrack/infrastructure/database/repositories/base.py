"""Behavior shared by the repository implementations of every technology.

Each operation runs inside :func:`data_access_operation`, which opens a
tracing span, binds the technology to log records and converts backend
failures into :class:`~worktrack.core.exceptions.DataAccessError`.
"""

from collections.abc import Generator
from contextlib import contextmanager
from typing import Any

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError

from worktrack.core.exceptions import DataAccessError
from worktrack.core.observability import trace_operation
from worktrack.domain.entities import Entity, utc_now
from worktrack.domain.technology import DataAccessTechnology

AUDIT_FIELDS = frozenset({"id", "created_at", "updated_at"})


@contextmanager
def data_access_operation(
    technology: DataAccessTechnology, entity_name: str, operation: str
) -> Generator[None]:
    """Scope one repository call.

    Raises:
        DataAccessError: If SQLAlchemy or the driver fails, chained to the
            original exception.
    """
    with (
        logger.contextualize(technology=technology.value),
        trace_operation(
            f"repository.{operation}",
            technology=technology.value,
            entity=entity_name,
        ),
    ):
        try:
            yield
        except (SQLAlchemyError, OSError) as e:
            logger.error(
                "{} {} failed for {}: {}",
                technology.component_name,
                operation,
                entity_name,
                type(e).__name__,
            )
            msg = f"{technology.component_name} could not {operation} {entity_name}"
            raise DataAccessError(
                msg,
                context={
                    "technology": technology.value,
                    "entity": entity_name,
                    "operation": operation,
                },
                cause=e,
            ) from e


def insert_values(entity: Entity) -> dict[str, Any]:
    """Column values for a new row, stamped with ``created_at``.

    The caller's ``id`` and audit timestamps are ignored.
    """
    values = entity.model_dump(exclude=AUDIT_FIELDS)
    values["created_at"] = utc_now()
    values["updated_at"] = None
    return values


def update_values(entity: Entity) -> dict[str, Any]:
    """Column values for an update, stamped with ``updated_at``.

    ``created_at`` is never overwritten.
    """
    values = entity.model_dump(exclude=AUDIT_FIELDS)
    values["updated_at"] = utc_now()
    return values
