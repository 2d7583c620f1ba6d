"""Technology selection: builds the providers and the active repository set.

The application calls :func:`create_connection_providers` and
:func:`create_repository_set` once at startup. The resulting set is immutable
and every request handler uses it for the lifetime of the process.
"""

from dataclasses import dataclass

from loguru import logger

from worktrack.core.config import Settings
from worktrack.domain.repositories import (
    EmployeeRepository,
    ProjectRepository,
    TicketRepository,
)
from worktrack.domain.technology import DataAccessTechnology
from worktrack.infrastructure.database.providers import (
    CoreConnectionProvider,
    EngineProvider,
    OrmSessionProvider,
    RawSqlConnectionProvider,
)
from worktrack.infrastructure.database.repositories import (
    EmployeeCoreRepository,
    EmployeeOrmRepository,
    EmployeeRawSqlRepository,
    ProjectCoreRepository,
    ProjectOrmRepository,
    ProjectRawSqlRepository,
    TicketCoreRepository,
    TicketOrmRepository,
    TicketRawSqlRepository,
)


@dataclass(frozen=True, slots=True)
class ConnectionProviders:
    """One provider per technology, all built from the same settings."""

    orm: OrmSessionProvider
    core: CoreConnectionProvider
    raw_sql: RawSqlConnectionProvider

    def for_technology(self, technology: DataAccessTechnology) -> EngineProvider:
        """Return the provider serving ``technology``."""
        match technology:
            case DataAccessTechnology.ORM:
                return self.orm
            case DataAccessTechnology.CORE:
                return self.core
            case DataAccessTechnology.RAW_SQL:
                return self.raw_sql

    async def close(self) -> None:
        """Dispose every engine that was created."""
        for provider in (self.orm, self.core, self.raw_sql):
            await provider.close()


@dataclass(frozen=True, slots=True)
class RepositorySet:
    """The employee, project and ticket repositories of one technology."""

    technology: DataAccessTechnology
    employees: EmployeeRepository
    projects: ProjectRepository
    tickets: TicketRepository


def create_connection_providers(settings: Settings) -> ConnectionProviders:
    """Build the three providers from the configured connection string."""
    url = settings.database_config.database_url
    return ConnectionProviders(
        orm=OrmSessionProvider(url, settings),
        core=CoreConnectionProvider(url, settings),
        raw_sql=RawSqlConnectionProvider(url, settings),
    )


def create_repository_set(
    technology: DataAccessTechnology, providers: ConnectionProviders
) -> RepositorySet:
    """Bind the repositories of ``technology`` to their provider.

    Args:
        technology: The active data access technology.
        providers: Providers created at startup.

    Returns:
        RepositorySet: Repositories that all use the same technology.
    """
    match technology:
        case DataAccessTechnology.ORM:
            repositories = RepositorySet(
                technology=technology,
                employees=EmployeeOrmRepository(providers.orm),
                projects=ProjectOrmRepository(providers.orm),
                tickets=TicketOrmRepository(providers.orm),
            )
        case DataAccessTechnology.CORE:
            repositories = RepositorySet(
                technology=technology,
                employees=EmployeeCoreRepository(providers.core),
                projects=ProjectCoreRepository(providers.core),
                tickets=TicketCoreRepository(providers.core),
            )
        case DataAccessTechnology.RAW_SQL:
            repositories = RepositorySet(
                technology=technology,
                employees=EmployeeRawSqlRepository(providers.raw_sql),
                projects=ProjectRawSqlRepository(providers.raw_sql),
                tickets=TicketRawSqlRepository(providers.raw_sql),
            )

    logger.info("Data access technology bound: {}", technology.component_name)
    return repositories
