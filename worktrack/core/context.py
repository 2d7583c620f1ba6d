"""Request context management for correlation IDs."""

import uuid
from contextvars import ContextVar

# Survives await boundaries within one request
_correlation_id_var: ContextVar[str | None] = ContextVar("correlation_id", default=None)


class RequestContext:
    """Async-safe storage for request-scoped data."""

    @staticmethod
    def set_correlation_id(correlation_id: str) -> None:
        """Set the correlation ID for the current context."""
        _correlation_id_var.set(correlation_id)

    @staticmethod
    def get_correlation_id() -> str | None:
        """Get the correlation ID from the current context, if any."""
        return _correlation_id_var.get()

    @staticmethod
    def clear() -> None:
        """Reset the context at the end of a request."""
        _correlation_id_var.set(None)


def generate_correlation_id() -> str:
    """Generate a UUID4 correlation ID.

    Examples:
        >>> len(generate_correlation_id())
        36
    """
    return str(uuid.uuid4())
