"""Async engine construction shared by every connection provider.

Core functionality:
- **Dialect-aware pooling**: pool sizing and asyncpg options for PostgreSQL,
  plain defaults for SQLite
- **Foreign keys on SQLite**: ``PRAGMA foreign_keys=ON`` on every new DBAPI
  connection so cascades behave as on PostgreSQL
- **Slow query logging**: cursor event listeners with sanitized parameters
- **Connectivity probe**: ``SELECT 1`` used by startup and health checks
"""

import time
from collections.abc import Callable
from typing import Any
from weakref import WeakKeyDictionary

from loguru import logger
from sqlalchemy import event, text
from sqlalchemy.engine import Connection, make_url
from sqlalchemy.engine.interfaces import DBAPIConnection, DBAPICursor, ExecutionContext
from sqlalchemy.exc import ArgumentError, InvalidRequestError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import ConnectionPoolEntry

from worktrack.core.config import Settings, get_settings
from worktrack.core.context import RequestContext
from worktrack.core.error_context import sanitize_sql_params
from worktrack.infrastructure.constants import (
    COMMAND_TIMEOUT_SECONDS,
    DIAGNOSTIC_QUERY,
    POOL_RECYCLE_SECONDS,
)

_query_start_times: WeakKeyDictionary[ExecutionContext, float] = WeakKeyDictionary()


def _before_cursor_execute(
    _conn: Connection,
    _cursor: DBAPICursor,
    _statement: str,
    _parameters: dict[str, Any] | list[Any] | tuple[Any, ...] | None,
    context: ExecutionContext,
    _executemany: bool,
) -> None:
    """Record the statement start time."""
    _query_start_times[context] = time.perf_counter()


def _slow_query_listener(threshold_ms: int) -> Callable[..., None]:
    """Build an ``after_cursor_execute`` listener bound to ``threshold_ms``."""

    def _after_cursor_execute(
        _conn: Connection,
        cursor: DBAPICursor,
        statement: str,
        parameters: dict[str, Any] | list[Any] | tuple[Any, ...] | None,
        context: ExecutionContext,
        executemany: bool,
    ) -> None:
        start_time = _query_start_times.pop(context, None)
        if start_time is None:
            return
        duration_ms = (time.perf_counter() - start_time) * 1000

        if duration_ms < threshold_ms:
            return

        rows_affected = getattr(cursor, "rowcount", -1)
        clean_statement = " ".join(statement.split())[:500]

        logger.warning(
            "Slow query detected: {}... Duration: {:.2f}ms Rows: {}",
            clean_statement[:100],
            round(duration_ms, 2),
            rows_affected,
            query=clean_statement,
            duration_ms=round(duration_ms, 2),
            rows_affected=rows_affected,
            parameters=sanitize_sql_params(parameters),
            correlation_id=RequestContext.get_correlation_id(),
            executemany=executemany,
            threshold_ms=threshold_ms,
        )

    return _after_cursor_execute


def _enable_sqlite_foreign_keys(
    dbapi_connection: DBAPIConnection, _connection_record: ConnectionPoolEntry
) -> None:
    """Turn on foreign key enforcement for a new SQLite connection."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def _engine_options(url: str, settings: Settings) -> dict[str, Any]:
    """Build create_async_engine keyword arguments for the URL's dialect."""
    db_config = settings.database_config
    options: dict[str, Any] = {
        "pool_pre_ping": db_config.pool_pre_ping,
        "echo": db_config.echo,
    }

    if make_url(url).get_backend_name() == "postgresql":
        options.update(
            pool_size=db_config.pool_size,
            max_overflow=db_config.max_overflow,
            pool_timeout=db_config.pool_timeout,
            pool_recycle=POOL_RECYCLE_SECONDS,
            connect_args={
                "server_settings": {"jit": "off"},
                "command_timeout": COMMAND_TIMEOUT_SECONDS,
            },
        )

    return options


def create_database_engine(
    database_url: str | None = None, settings: Settings | None = None
) -> AsyncEngine:
    """Create an async SQLAlchemy engine for one connection string.

    Args:
        database_url: Connection string; the configured one when omitted.
        settings: Application settings; the cached settings when omitted.

    Returns:
        AsyncEngine: Configured async engine instance.

    Raises:
        sqlalchemy.exc.ArgumentError: If the URL cannot be parsed.
    """
    settings = settings or get_settings()
    url = database_url or settings.database_config.database_url

    engine = create_async_engine(url, **_engine_options(url, settings))

    if engine.dialect.name == "sqlite":
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)

    if settings.log_config.enable_sql_logging:
        try:
            event.listen(
                engine.sync_engine, "before_cursor_execute", _before_cursor_execute
            )
            event.listen(
                engine.sync_engine,
                "after_cursor_execute",
                _slow_query_listener(settings.log_config.slow_query_threshold_ms),
            )
            logger.info("Registered query performance event listeners")
        except (InvalidRequestError, ArgumentError) as e:
            logger.warning(
                "Failed to register query performance event listeners: {}: {}",
                type(e).__name__,
                str(e),
            )

    logger.info(
        "Created database engine - dialect: {}, sql_logging: {}",
        engine.dialect.name,
        settings.log_config.enable_sql_logging,
    )

    return engine


async def check_database_connection(engine: AsyncEngine) -> tuple[bool, str | None]:
    """Run ``SELECT 1`` through ``engine``.

    Returns:
        tuple[bool, str | None]: Success flag and, on failure, the error text.

    Example:
        is_healthy, error = await check_database_connection(engine)
        if not is_healthy:
            logger.error("Database unhealthy: {}", error)
    """
    try:
        async with engine.connect() as conn:
            result = await conn.execute(text(DIAGNOSTIC_QUERY))
            _ = result.scalar()
    except (SQLAlchemyError, OSError) as e:
        return False, str(e)
    else:
        return True, None
