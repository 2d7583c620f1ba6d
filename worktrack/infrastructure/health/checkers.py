"""Health checkers, one per data access technology plus a schema check.

Every checker probes through its own provider with its own mechanism, records
diagnostic facts in ``data`` and classifies the outcome:

- success is Healthy whether or not the technology is active;
- failure is Unhealthy for the active technology and Degraded for the others.

Checkers never raise. Each probe is bounded by ``asyncio.timeout`` and traced
as a ``health.check`` span.
"""

import asyncio
import time
from abc import ABC, abstractmethod
from typing import Final

from loguru import logger
from sqlalchemy import func, inspect, select, text
from sqlalchemy.engine import URL
from sqlalchemy.ext.asyncio import AsyncConnection

from worktrack.core.observability import trace_operation
from worktrack.core.types import HealthData
from worktrack.domain.health import HealthCheckResult, HealthStatus
from worktrack.domain.technology import DataAccessTechnology
from worktrack.infrastructure.constants import (
    DIAGNOSTIC_QUERY,
    ENTITY_TABLES,
    SERVER_VERSION_QUERIES,
)
from worktrack.infrastructure.database.base import Base
from worktrack.infrastructure.database.models import (
    EmployeeModel,
    ProjectModel,
    TicketModel,
)
from worktrack.infrastructure.database.providers import (
    ConnectionProvider,
    EngineProvider,
    OrmSessionProvider,
)

SCHEMA_COMPONENT_NAME: Final[str] = "Database Schema"


class ConnectionNotOpenError(RuntimeError):
    """The provider handed out a handle that is not usable."""


def describe_url(url: URL, data: HealthData) -> None:
    """Record connection facts that do not depend on a live connection."""
    data["Provider"] = f"{url.get_backend_name()}+{url.get_driver_name()}"
    data["Server"] = url.host or "local"
    data["Database"] = url.database


def format_version(version_info: tuple[int | str, ...] | None) -> str | None:
    if not version_info:
        return None
    return ".".join(str(part) for part in version_info)


def ensure_open(connection: AsyncConnection, data: HealthData) -> None:
    """Record the handle state and fail when it is not open."""
    if connection.closed or connection.invalidated:
        data["State"] = "Closed"
        msg = "Connection is not open"
        raise ConnectionNotOpenError(msg)
    data["State"] = "Open"


class TechnologyHealthChecker(ABC):
    """Template for a probe whose severity depends on the active technology.

    Args:
        provider: Provider the probe opens its handle through.
        active_technology: Technology currently serving CRUD traffic.
        timeout: Upper bound for the probe in seconds.
    """

    def __init__(
        self,
        provider: EngineProvider,
        active_technology: DataAccessTechnology,
        timeout: float,
    ) -> None:
        self.provider = provider
        self.active_technology = active_technology
        self.timeout = timeout

    @property
    def technology(self) -> DataAccessTechnology:
        return self.provider.technology

    @property
    def component_name(self) -> str:
        return self.technology.component_name

    @property
    def is_active(self) -> bool:
        """Whether this checker's technology serves CRUD traffic."""
        return self.technology is self.active_technology

    @abstractmethod
    async def probe(self, data: HealthData) -> HealthStatus:
        """Open a handle, run the diagnostic query and fill ``data``.

        Raises on any failure; the caller classifies it.
        """

    def success_description(self, status: HealthStatus, data: HealthData) -> str:  # noqa: ARG002
        return f"{self.component_name} connection is healthy"

    def failure_description(self) -> str:
        usage = "Current Technology" if self.is_active else "Not in use"
        return f"{self.component_name} connection failed ({usage})"

    async def check_health(self) -> HealthCheckResult:
        """Run the probe and classify its outcome. Never raises."""
        data: HealthData = {"TestQuery": DIAGNOSTIC_QUERY}
        start = time.perf_counter()

        with trace_operation(
            "health.check",
            component=self.component_name,
            technology=self.technology.value,
            active=self.is_active,
        ) as span:
            try:
                async with asyncio.timeout(self.timeout):
                    status = await self.probe(data)
            # Probes convert every failure into a result
            except Exception as e:  # noqa: BLE001
                duration = time.perf_counter() - start
                status = (
                    HealthStatus.UNHEALTHY if self.is_active else HealthStatus.DEGRADED
                )
                data["ExceptionType"] = type(e).__name__
                error = str(e) or f"Probe timed out after {self.timeout}s"
                span.set_attribute("health.status", status.value)
                logger.warning(
                    "{} health check failed: {}",
                    self.component_name,
                    error,
                    status=status.value,
                )
                return HealthCheckResult(
                    component=self.component_name,
                    status=status,
                    description=self.failure_description(),
                    duration=duration,
                    data=data,
                    error=error,
                )

            span.set_attribute("health.status", status.value)

        return HealthCheckResult(
            component=self.component_name,
            status=status,
            description=self.success_description(status, data),
            duration=time.perf_counter() - start,
            data=data,
        )


class OrmHealthChecker(TechnologyHealthChecker):
    """Probes through an ORM session and counts entities through the ORM."""

    provider: OrmSessionProvider

    async def probe(self, data: HealthData) -> HealthStatus:
        describe_url(self.provider.get_engine().url, data)
        async with self.provider.session() as session:
            ensure_open(await session.connection(), data)
            await session.execute(text(DIAGNOSTIC_QUERY))
            for key, model in (
                ("EmployeeCount", EmployeeModel),
                ("ProjectCount", ProjectModel),
                ("TicketCount", TicketModel),
            ):
                data[key] = await session.scalar(
                    select(func.count()).select_from(model)
                )
        return HealthStatus.HEALTHY


class CoreHealthChecker(TechnologyHealthChecker):
    """Probes with a Core ``select`` on a plain connection."""

    provider: ConnectionProvider

    async def probe(self, data: HealthData) -> HealthStatus:
        describe_url(self.provider.get_engine().url, data)
        async with self.provider.connect() as conn:
            ensure_open(conn, data)
            await conn.scalar(select(1))
            data["Dialect"] = conn.dialect.name
            data["ServerVersion"] = format_version(conn.dialect.server_version_info)
        return HealthStatus.HEALTHY


class RawSqlHealthChecker(TechnologyHealthChecker):
    """Probes with textual SQL, including a dialect-specific version query."""

    provider: ConnectionProvider

    async def probe(self, data: HealthData) -> HealthStatus:
        describe_url(self.provider.get_engine().url, data)
        async with self.provider.connect() as conn:
            ensure_open(conn, data)
            await conn.execute(text(DIAGNOSTIC_QUERY))
            data["Driver"] = conn.dialect.driver
            if version_query := SERVER_VERSION_QUERIES.get(conn.dialect.name):
                data["ServerVersion"] = await conn.scalar(text(version_query))
        return HealthStatus.HEALTHY


class SchemaHealthChecker(TechnologyHealthChecker):
    """Verifies required tables exist and records entity row counts.

    Runs on the active technology's provider, so a failure to reach the
    database is Unhealthy. Missing tables are Degraded.

    Args:
        provider: The active technology's provider.
        required_tables: Tables that must exist.
        timeout: Upper bound for the probe in seconds.
    """

    def __init__(
        self,
        provider: EngineProvider,
        required_tables: list[str],
        timeout: float,
    ) -> None:
        super().__init__(provider, provider.technology, timeout)
        self.required_tables = required_tables

    @property
    def component_name(self) -> str:
        return SCHEMA_COMPONENT_NAME

    async def probe(self, data: HealthData) -> HealthStatus:
        engine = self.provider.get_engine()
        describe_url(engine.url, data)
        async with engine.connect() as conn:
            ensure_open(conn, data)
            existing = await conn.run_sync(
                lambda sync_conn: sorted(inspect(sync_conn).get_table_names())
            )
            missing = [name for name in self.required_tables if name not in existing]
            data["RequiredTables"] = list(self.required_tables)
            data["ExistingTables"] = existing
            if missing:
                data["MissingTables"] = missing

            for name in ENTITY_TABLES:
                if name in existing:
                    table = Base.metadata.tables[name]
                    data[f"{name.capitalize()}Count"] = await conn.scalar(
                        select(func.count()).select_from(table)
                    )

        return HealthStatus.DEGRADED if missing else HealthStatus.HEALTHY

    def success_description(self, status: HealthStatus, data: HealthData) -> str:
        if status is HealthStatus.DEGRADED:
            return f"Missing tables: {', '.join(data['MissingTables'])}"
        return "All required tables are present"

    def failure_description(self) -> str:
        return f"{self.component_name} check failed ({self.technology.component_name})"
