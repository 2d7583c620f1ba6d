"""Repository implementations, one module per data access technology.

- **orm**: mapped classes through an ``AsyncSession``
- **core**: ``Table`` expressions through an ``AsyncConnection``
- **raw_sql**: hand-written SQL text through an ``AsyncConnection``
"""

from worktrack.infrastructure.database.repositories.core import (
    EmployeeCoreRepository,
    ProjectCoreRepository,
    TicketCoreRepository,
)
from worktrack.infrastructure.database.repositories.orm import (
    EmployeeOrmRepository,
    ProjectOrmRepository,
    TicketOrmRepository,
)
from worktrack.infrastructure.database.repositories.raw_sql import (
    EmployeeRawSqlRepository,
    ProjectRawSqlRepository,
    TicketRawSqlRepository,
)

__all__ = [
    "EmployeeCoreRepository",
    "EmployeeOrmRepository",
    "EmployeeRawSqlRepository",
    "ProjectCoreRepository",
    "ProjectOrmRepository",
    "ProjectRawSqlRepository",
    "TicketCoreRepository",
    "TicketOrmRepository",
    "TicketRawSqlRepository",
]
