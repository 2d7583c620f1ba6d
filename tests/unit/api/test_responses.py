"""Unit tests for ORJSONResponse."""

from datetime import date
from decimal import Decimal

import orjson
import pytest

from worktrack.api.utils.responses import ORJSONResponse
from worktrack.domain.entities import Project


@pytest.mark.unit
class TestORJSONResponse:
    def test_renders_pydantic_model_in_json_mode(self) -> None:
        project = Project(
            id=1, name="P1", start_date=date(2024, 1, 1), budget=Decimal("1500")
        )

        body = orjson.loads(ORJSONResponse(content=project).body)

        assert body["budget"] == "1500.00"
        assert body["start_date"] == "2024-01-01"

    def test_renders_decimal_as_string(self) -> None:
        body = ORJSONResponse(content={"salary": Decimal("10.50")}).body

        assert body == b'{"salary":"10.50"}'

    def test_sorts_keys(self) -> None:
        assert ORJSONResponse(content={"b": 1, "a": 2}).body == b'{"a":2,"b":1}'

    def test_unsupported_type_raises(self) -> None:
        with pytest.raises(TypeError):
            ORJSONResponse(content={"value": object()})
