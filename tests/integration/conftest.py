"""Shared fixtures for integration tests.

Every test gets its own SQLite database file with the schema created from the
model metadata. Fixtures depending on ``technology`` run once per data access
technology.
"""

import os
from collections.abc import AsyncGenerator, Generator
from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient
from loguru import logger
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor

from worktrack.api.main import create_app
from worktrack.core.config import (
    DataAccessConfig,
    DatabaseConfig,
    ObservabilityConfig,
    Settings,
    get_settings,
)
from worktrack.core.context import RequestContext
from worktrack.core.logging import _state
from worktrack.domain.technology import DataAccessTechnology
from worktrack.infrastructure.database.base import Base
from worktrack.infrastructure.database.factory import (
    ConnectionProviders,
    RepositorySet,
    create_connection_providers,
    create_repository_set,
)
from worktrack.infrastructure.database.session import create_database_engine


@pytest.fixture(params=list(DataAccessTechnology), ids=lambda t: t.value)
def technology(request: pytest.FixtureRequest) -> DataAccessTechnology:
    """Run the requesting test once per data access technology."""
    return request.param


@pytest.fixture
def database_url(tmp_path: Path) -> str:
    return f"sqlite+aiosqlite:///{tmp_path / 'worktrack.db'}"


@pytest.fixture
def settings(database_url: str, technology: DataAccessTechnology) -> Settings:
    return Settings(
        database_config=DatabaseConfig(database_url=database_url),
        data_access_config=DataAccessConfig(technology=technology),
        observability_config=ObservabilityConfig(enable_tracing=False),
    )


@pytest.fixture
async def schema(database_url: str) -> None:
    """Create every table in the test database."""
    engine = create_database_engine(database_url, Settings())
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    await engine.dispose()


@pytest.fixture
async def providers(
    settings: Settings, schema: None
) -> AsyncGenerator[ConnectionProviders]:
    _ = schema
    connection_providers = create_connection_providers(settings)
    yield connection_providers
    await connection_providers.close()


@pytest.fixture
def repositories(
    technology: DataAccessTechnology, providers: ConnectionProviders
) -> RepositorySet:
    return create_repository_set(technology, providers)


@pytest.fixture
async def client(settings: Settings, schema: None) -> AsyncGenerator[AsyncClient]:
    """Test client for an application bound to the parametrized technology."""
    _ = schema
    app = create_app(settings)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    await app.state.providers.close()


@pytest.fixture(autouse=True)
def clean_app_env() -> Generator[None]:
    """Keep environment overrides made by a test from leaking."""
    original_env = os.environ.copy()
    yield
    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture(autouse=True)
def clear_settings_cache() -> Generator[None]:
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def clean_request_context() -> Generator[None]:
    RequestContext.clear()
    yield
    RequestContext.clear()


@pytest.fixture(autouse=True)
def reset_logging_and_tracing_state() -> Generator[None]:
    """Keep logging quiet and instrumentation from leaking between tests.

    Logging stays marked as configured so app creation does not add stdout
    handlers.
    """
    logger.remove()
    _state.configured = True

    yield

    logger.remove()
    for instrumentor in (FastAPIInstrumentor(), SQLAlchemyInstrumentor()):
        if instrumentor.is_instrumented_by_opentelemetry:
            instrumentor.uninstrument()
