"""Connection providers, one per data access technology.

A provider owns exactly one connection string and lazily builds one
``AsyncEngine`` from it. Every call to its factory method hands out a fresh
session or connection; the pooling behind it belongs to SQLAlchemy. Nothing
is cached between calls except the engine itself.

Example:
    provider = OrmSessionProvider("sqlite+aiosqlite:///./worktrack.db")
    async with provider.session() as session:
        total = await session.scalar(select(func.count(EmployeeModel.id)))
    await provider.close()
"""

import threading
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from loguru import logger
from sqlalchemy.exc import ArgumentError
from sqlalchemy.ext.asyncio import (
    AsyncConnection,
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
)

from worktrack.core.config import Settings
from worktrack.core.exceptions import DataAccessError
from worktrack.domain.technology import DataAccessTechnology
from worktrack.infrastructure.database.session import create_database_engine

CONNECTION_STRING_NOT_CONFIGURED = "Connection string is not configured"


class EngineProvider:
    """Lazily creates and disposes the engine behind one connection string.

    Args:
        connection_string: SQLAlchemy async URL.
        technology: Technology this provider serves, used in logs and errors.
        settings: Settings forwarded to the engine factory.
    """

    def __init__(
        self,
        connection_string: str,
        technology: DataAccessTechnology,
        settings: Settings | None = None,
    ) -> None:
        self.connection_string = connection_string
        self.technology = technology
        self._settings = settings
        self._engine: AsyncEngine | None = None
        self._lock = threading.Lock()

    def get_engine(self) -> AsyncEngine:
        """Get or create the engine.

        Raises:
            DataAccessError: If the connection string is empty or invalid.
        """
        if self._engine is None:
            with self._lock:
                # Double-checked locking pattern
                if self._engine is None:
                    self._engine = self._create_engine()
        return self._engine

    def _create_engine(self) -> AsyncEngine:
        context = {"technology": self.technology.value}
        if not self.connection_string:
            raise DataAccessError(CONNECTION_STRING_NOT_CONFIGURED, context=context)
        try:
            engine = create_database_engine(self.connection_string, self._settings)
        except ArgumentError as e:
            msg = f"Invalid connection string for {self.technology.component_name}"
            raise DataAccessError(msg, context=context, cause=e) from e
        logger.debug("Created engine for {}", self.technology.component_name)
        return engine

    async def close(self) -> None:
        """Dispose the engine, if one was created."""
        if self._engine is not None:
            await self._engine.dispose()
            logger.info("{} engine disposed", self.technology.component_name)
            self._engine = None


class OrmSessionProvider(EngineProvider):
    """Hands out ``AsyncSession`` objects for the ORM technology."""

    def __init__(self, connection_string: str, settings: Settings | None = None) -> None:
        super().__init__(connection_string, DataAccessTechnology.ORM, settings)
        self._session_factory: async_sessionmaker[AsyncSession] | None = None

    def get_session_factory(self) -> async_sessionmaker[AsyncSession]:
        """Get or create the session factory bound to this provider's engine."""
        if self._session_factory is None:
            engine = self.get_engine()
            with self._lock:
                if self._session_factory is None:
                    self._session_factory = async_sessionmaker(
                        engine,
                        class_=AsyncSession,
                        expire_on_commit=False,
                    )
        return self._session_factory

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession]:
        """Open a new session; commit on success, roll back on error.

        Yields:
            AsyncGenerator[AsyncSession]: A session used by one operation.
        """
        async with self.get_session_factory()() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                logger.debug("ORM session rolled back due to error")
                raise

    async def close(self) -> None:
        """Dispose the engine and forget the session factory."""
        await super().close()
        self._session_factory = None


class ConnectionProvider(EngineProvider):
    """Hands out ``AsyncConnection`` objects inside a transaction."""

    @asynccontextmanager
    async def connect(self) -> AsyncGenerator[AsyncConnection]:
        """Open a new connection with a transaction that commits on success.

        Yields:
            AsyncGenerator[AsyncConnection]: A connection used by one operation.
        """
        async with self.get_engine().begin() as connection:
            yield connection


class CoreConnectionProvider(ConnectionProvider):
    """Connections for the SQLAlchemy Core technology."""

    def __init__(self, connection_string: str, settings: Settings | None = None) -> None:
        super().__init__(connection_string, DataAccessTechnology.CORE, settings)


class RawSqlConnectionProvider(ConnectionProvider):
    """Connections for the raw SQL technology."""

    def __init__(self, connection_string: str, settings: Settings | None = None) -> None:
        super().__init__(connection_string, DataAccessTechnology.RAW_SQL, settings)
