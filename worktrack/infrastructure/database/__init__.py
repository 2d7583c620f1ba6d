"""Database access for every data access technology.

Core components:
- **base** / **models**: declarative base and table mappings
- **session**: engine construction, SQLite foreign keys, slow query logging
- **providers**: one lazily created engine per technology
- **repositories**: ORM, Core and raw SQL implementations
- **factory**: technology selection into an immutable repository set
- **dependencies**: FastAPI injection of the bound repositories
"""

from worktrack.infrastructure.database.base import Base, EntityModel
from worktrack.infrastructure.database.factory import (
    ConnectionProviders,
    RepositorySet,
    create_connection_providers,
    create_repository_set,
)
from worktrack.infrastructure.database.providers import (
    CoreConnectionProvider,
    OrmSessionProvider,
    RawSqlConnectionProvider,
)
from worktrack.infrastructure.database.session import (
    check_database_connection,
    create_database_engine,
)

__all__ = [
    "Base",
    "ConnectionProviders",
    "CoreConnectionProvider",
    "EntityModel",
    "OrmSessionProvider",
    "RawSqlConnectionProvider",
    "RepositorySet",
    "check_database_connection",
    "create_connection_providers",
    "create_database_engine",
    "create_repository_set",
]
