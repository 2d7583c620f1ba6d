"""Error response format, correlation IDs and production redaction."""

import pytest
import pytest_check
from httpx import ASGITransport, AsyncClient
from pytest_mock import MockerFixture

from worktrack.api.main import create_app
from worktrack.core.config import Settings, get_settings
from worktrack.core.exceptions import DataAccessError
from worktrack.infrastructure.database.repositories.core import CoreRepository
from worktrack.infrastructure.database.repositories.orm import OrmRepository
from worktrack.infrastructure.database.repositories.raw_sql import RawSqlRepository

pytestmark = pytest.mark.integration


def fail_get_all(mocker: MockerFixture) -> None:
    error = DataAccessError(
        "SQLAlchemy ORM could not get_all Employee",
        context={"technology": "orm", "operation": "get_all"},
    )
    for repository_type in (OrmRepository, CoreRepository, RawSqlRepository):
        mocker.patch.object(
            repository_type, "get_all", mocker.AsyncMock(side_effect=error)
        )


class TestErrorResponses:
    async def test_correlation_id_echoed(self, client: AsyncClient) -> None:
        response = await client.get(
            "/api/employees/1", headers={"X-Correlation-ID": "req-123"}
        )

        assert response.headers["X-Correlation-ID"] == "req-123"
        assert response.json()["correlation_id"] == "req-123"

    async def test_unknown_route_uses_error_format(self, client: AsyncClient) -> None:
        response = await client.get("/api/nothing-here")

        assert response.status_code == 404
        assert response.json()["error_code"] == "NOT_FOUND"

    async def test_data_access_error_returns_500(
        self, client: AsyncClient, mocker: MockerFixture
    ) -> None:
        fail_get_all(mocker)

        response = await client.get("/api/employees")

        body = response.json()
        with pytest_check.check:
            assert response.status_code == 500
        with pytest_check.check:
            assert body["error_code"] == "DATA_ACCESS_ERROR"
        with pytest_check.check:
            assert body["message"] == "SQLAlchemy ORM could not get_all Employee"
        with pytest_check.check:
            assert body["severity"] == "HIGH"

    async def test_data_access_error_opaque_in_production(
        self,
        settings: Settings,
        schema: None,
        mocker: MockerFixture,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        _ = schema
        monkeypatch.setenv("ENVIRONMENT", "production")
        get_settings.cache_clear()
        fail_get_all(mocker)
        app = create_app(settings)

        async with AsyncClient(
            transport=ASGITransport(app=app), base_url="http://test"
        ) as ac:
            response = await ac.get("/api/projects")
        await app.state.providers.close()

        body = response.json()
        assert response.status_code == 500
        assert body["message"] == "An internal server error occurred"
        assert body["details"] is None
        assert body["debug_info"] is None
