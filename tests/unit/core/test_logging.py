"""Unit tests for Loguru setup and formatters."""

import logging
from collections.abc import Generator
from datetime import UTC, datetime
from types import SimpleNamespace
from typing import Any

import orjson
import pytest
from loguru import logger

from worktrack.core.logging import (
    InterceptHandler,
    _state,
    format_console_with_context,
    serialize_for_json,
    setup_logging,
)


def make_record(**extra: object) -> dict[str, Any]:
    return {
        "time": datetime(2024, 1, 1, 12, 0, 0, 123000, tzinfo=UTC),
        "level": SimpleNamespace(name="INFO"),
        "message": "Inserted Employee row with ID: 1",
        "name": "worktrack.infrastructure.database.repositories.core",
        "function": "add",
        "line": 90,
        "extra": extra,
        "exception": None,
    }


@pytest.fixture
def captured() -> Generator[list[str]]:
    messages: list[str] = []
    handler_id = logger.add(messages.append, format="{message}", level="DEBUG")
    yield messages
    logger.remove(handler_id)


@pytest.mark.unit
class TestFormatters:
    def test_serialize_for_json_includes_context(self) -> None:
        record = make_record(technology="core", correlation_id="abc", _private=1)

        entry = orjson.loads(serialize_for_json(record))

        assert entry["level"] == "INFO"
        assert entry["technology"] == "core"
        assert entry["correlation_id"] == "abc"
        assert "_private" not in entry
        assert entry["function"] == "add"

    def test_console_format_puts_priority_fields_first(self) -> None:
        record = make_record(
            entity="Employee",
            technology="raw_sql",
            correlation_id="0123456789abcdef",
        )

        line = format_console_with_context(record)

        assert line.index("01234567") < line.index("raw_sql") < line.index("entity=")
        assert "0123456789abcdef" not in line

    def test_console_format_escapes_braces(self) -> None:
        record = make_record()
        record["message"] = "values {id}"

        assert "values {{id}}" in format_console_with_context(record)

    def test_console_format_redacts_sensitive_extras(self) -> None:
        line = format_console_with_context(make_record(password="hunter2"))

        assert "hunter2" not in line


@pytest.mark.unit
class TestSetup:
    def test_intercept_handler_routes_stdlib_records(
        self, captured: list[str]
    ) -> None:
        std_logger = logging.getLogger("worktrack.test.intercept")
        std_logger.handlers = [InterceptHandler()]
        std_logger.propagate = False
        std_logger.setLevel(logging.INFO)

        std_logger.info("from the standard library")

        assert any("from the standard library" in message for message in captured)

    def test_setup_logging_runs_once(self, mock_settings: object) -> None:
        original = _state.configured
        _state.configured = False
        try:
            setup_logging(mock_settings)  # type: ignore[arg-type]
            assert _state.configured is True
            handlers_after_first = len(logger._core.handlers)  # type: ignore[attr-defined]

            setup_logging(mock_settings)  # type: ignore[arg-type]

            assert len(logger._core.handlers) == handlers_after_first  # type: ignore[attr-defined]
        finally:
            logger.remove()
            _state.configured = original
