"""Redaction of sensitive values before they reach logs or responses.

Used by the error handlers (request bodies and headers), the slow query
listener (bound SQL parameters) and the health endpoints (connection
strings).
"""

from __future__ import annotations

import re
from functools import lru_cache
from re import Pattern
from typing import Any, Final

from sqlalchemy.engine import URL, make_url
from sqlalchemy.exc import ArgumentError

from worktrack.core.config import get_settings
from worktrack.core.constants import REDACTED

SENSITIVE_HEADERS: Final[frozenset[str]] = frozenset(
    {
        "authorization",
        "cookie",
        "set-cookie",
        "x-api-key",
        "x-auth-token",
        "proxy-authorization",
    }
)

DEFAULT_SENSITIVE_PATTERN: Final[Pattern[str]] = re.compile(
    r"(password|passwd|pwd|secret|token|api[_-]?key|apikey|auth|authorization|"
    r"credential|private[_-]?key|session|connection[_-]?string)",
    re.IGNORECASE,
)

MAX_DEPTH: Final[int] = 10


@lru_cache(maxsize=1)
def _get_sensitive_fields() -> tuple[str, ...]:
    return tuple(f.lower() for f in get_settings().log_config.sensitive_fields)


def is_sensitive_field(field_name: str) -> bool:
    """Check a field name against the default pattern and configured names."""
    if DEFAULT_SENSITIVE_PATTERN.search(field_name):
        return True
    field_lower = field_name.lower()
    return any(sensitive in field_lower for sensitive in _get_sensitive_fields())


def sanitize_value(value: Any, field_name: str = "", depth: int = 0) -> Any:  # noqa: ANN401
    """Redact ``value`` when its field name is sensitive, recursing into containers."""
    if depth > MAX_DEPTH:
        return REDACTED

    if field_name and is_sensitive_field(field_name):
        return REDACTED

    if isinstance(value, dict):
        return {k: sanitize_value(v, str(k), depth + 1) for k, v in value.items()}
    if isinstance(value, list):
        return [sanitize_value(item, "", depth + 1) for item in value]
    if isinstance(value, tuple):
        return tuple(sanitize_value(item, "", depth + 1) for item in value)

    return value


def sanitize_dict(data: dict[str, Any]) -> dict[str, Any]:
    """Return a copy of ``data`` with sensitive values redacted."""
    return {key: sanitize_value(value, key) for key, value in data.items()}


def sanitize_headers(headers: dict[str, str]) -> dict[str, str]:
    """Return a copy of ``headers`` with credential headers redacted."""
    return {
        k: REDACTED if k.lower() in SENSITIVE_HEADERS else v
        for k, v in headers.items()
    }


def sanitize_sql_params(params: object) -> object:
    """Sanitize bound SQL parameters for logging.

    Named parameters are redacted by key, positional ones are kept as-is and
    anything else is replaced by the redaction marker.
    """
    if params is None:
        return None
    if isinstance(params, dict):
        return sanitize_dict(params)
    if isinstance(params, (list, tuple)):
        return params
    return REDACTED


def sanitize_connection_string(url: str) -> str | None:
    """Render a database URL without credentials or query options.

    Returns:
        str | None: ``driver://host:port/database``, or None when ``url`` is
            empty or cannot be parsed.
    """
    if not url:
        return None
    try:
        parsed = make_url(url)
    except ArgumentError:
        return None
    return URL.create(
        drivername=parsed.drivername,
        host=parsed.host,
        port=parsed.port,
        database=parsed.database,
    ).render_as_string()
