"""Health diagnostics for the data access technologies."""

from worktrack.infrastructure.health.checkers import (
    CoreHealthChecker,
    OrmHealthChecker,
    RawSqlHealthChecker,
    SchemaHealthChecker,
    TechnologyHealthChecker,
)
from worktrack.infrastructure.health.service import (
    HealthCheckService,
    create_health_service,
)

__all__ = [
    "CoreHealthChecker",
    "HealthCheckService",
    "OrmHealthChecker",
    "RawSqlHealthChecker",
    "SchemaHealthChecker",
    "TechnologyHealthChecker",
    "create_health_service",
]
