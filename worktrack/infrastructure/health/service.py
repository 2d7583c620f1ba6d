"""Aggregation of health checkers into one report, plus database metadata."""

import asyncio
import time
from collections.abc import Sequence
from datetime import UTC, datetime

from loguru import logger
from sqlalchemy import func, inspect, select, text
from sqlalchemy.engine import make_url

from worktrack.core.config import Settings
from worktrack.core.error_context import sanitize_connection_string
from worktrack.domain.health import (
    DatabaseInfo,
    HealthChecker,
    HealthCheckResult,
    HealthReport,
    HealthStatus,
    reduce_statuses,
)
from worktrack.domain.technology import DataAccessTechnology
from worktrack.infrastructure.constants import (
    SCHEMA_MIGRATIONS_TABLE,
    SERVER_VERSION_QUERIES,
)
from worktrack.infrastructure.database.factory import ConnectionProviders
from worktrack.infrastructure.database.models import schema_migrations_table
from worktrack.infrastructure.database.providers import (
    CONNECTION_STRING_NOT_CONFIGURED,
    EngineProvider,
)
from worktrack.infrastructure.database.session import check_database_connection
from worktrack.infrastructure.health.checkers import (
    CoreHealthChecker,
    OrmHealthChecker,
    RawSqlHealthChecker,
    SchemaHealthChecker,
)


class HealthCheckService:
    """Runs every registered checker concurrently and reduces the results.

    Args:
        checkers: Checkers in reporting order.
        provider: The active technology's provider, used for connectivity and
            metadata queries.
        settings: Application settings.
    """

    def __init__(
        self,
        checkers: Sequence[HealthChecker],
        provider: EngineProvider,
        settings: Settings,
    ) -> None:
        self.checkers = list(checkers)
        self.provider = provider
        self.settings = settings

    @property
    def active_technology(self) -> DataAccessTechnology:
        return self.provider.technology

    async def _run_checker(self, checker: HealthChecker) -> HealthCheckResult:
        try:
            return await checker.check_health()
        # A misbehaving checker must not take the whole report down
        except Exception as e:  # noqa: BLE001
            logger.error("{} checker raised: {}", checker.component_name, e)
            return HealthCheckResult(
                component=checker.component_name,
                status=HealthStatus.UNHEALTHY,
                description=f"{checker.component_name} check raised an exception",
                data={"ExceptionType": type(e).__name__},
                error=str(e),
            )

    async def check_health(self) -> HealthReport:
        """Run all checkers and build the report.

        Results keep registration order regardless of completion order.
        """
        check_time = datetime.now(UTC)
        start = time.perf_counter()

        results = list(
            await asyncio.gather(*(self._run_checker(c) for c in self.checkers))
        )
        total_duration = time.perf_counter() - start
        overall_status = reduce_statuses([result.status for result in results])

        database_info = None
        if self.settings.health_config.include_database_info:
            database_info = await self.get_database_info()

        logger.info(
            "Health check completed: {}",
            overall_status.value,
            checks=len(results),
            duration_ms=round(total_duration * 1000, 2),
        )

        return HealthReport(
            overall_status=overall_status,
            check_time=check_time,
            total_duration=total_duration,
            results=results,
            data_access_technology=self.active_technology.component_name,
            database_info=database_info,
        )

    async def is_database_connected(self) -> bool:
        """Return True when ``SELECT 1`` succeeds. Never raises."""
        try:
            engine = self.provider.get_engine()
            async with asyncio.timeout(self.settings.health_config.probe_timeout_seconds):
                connected, error = await check_database_connection(engine)
        # Connectivity is reported, not raised
        except Exception as e:  # noqa: BLE001
            connected, error = False, str(e) or type(e).__name__

        if not connected:
            logger.warning("Database connectivity check failed: {}", error)
        return connected

    async def get_database_info(self) -> DatabaseInfo:
        """Describe the configured database. Never raises.

        Failures are reported under ``metadata`` as ``Error`` and ``ErrorType``.
        """
        connection_string = self.provider.connection_string
        if not connection_string:
            return DatabaseInfo(metadata={"Error": CONNECTION_STRING_NOT_CONFIGURED})

        info = DatabaseInfo()
        try:
            url = make_url(connection_string)
            info.server_name = url.host
            info.database_name = url.database
            info.provider = f"{url.get_backend_name()}+{url.get_driver_name()}"
            info.sanitized_connection_string = sanitize_connection_string(
                connection_string
            )

            engine = self.provider.get_engine()
            async with (
                asyncio.timeout(self.settings.health_config.probe_timeout_seconds),
                engine.connect() as conn,
            ):
                if version_query := SERVER_VERSION_QUERIES.get(conn.dialect.name):
                    info.server_version = await conn.scalar(text(version_query))
                info.tables = await conn.run_sync(
                    lambda sync_conn: sorted(inspect(sync_conn).get_table_names())
                )
                if SCHEMA_MIGRATIONS_TABLE in info.tables:
                    info.last_migration_time = await conn.scalar(
                        select(func.max(schema_migrations_table.c.applied_at))
                    )
        # Metadata gathering is best-effort
        except Exception as e:  # noqa: BLE001
            logger.warning("Could not gather database info: {}", e)
            info.metadata = {
                "Error": str(e) or type(e).__name__,
                "ErrorType": type(e).__name__,
            }

        return info


def create_health_service(
    settings: Settings, providers: ConnectionProviders
) -> HealthCheckService:
    """Register the technology checkers and the schema check, in that order."""
    active = settings.data_access_config.technology
    timeout = settings.health_config.probe_timeout_seconds
    active_provider = providers.for_technology(active)

    checkers: list[HealthChecker] = [
        OrmHealthChecker(providers.orm, active, timeout),
        CoreHealthChecker(providers.core, active, timeout),
        RawSqlHealthChecker(providers.raw_sql, active, timeout),
        SchemaHealthChecker(
            active_provider, settings.health_config.required_tables, timeout
        ),
    ]
    return HealthCheckService(checkers, active_provider, settings)
