"""Health diagnostics models and the health checker contract."""

from datetime import datetime
from enum import Enum
from typing import Any, Protocol

from pydantic import BaseModel, Field

from worktrack.core.types import HealthData


class HealthStatus(Enum):
    """Severity of a single probe or of the whole report.

    Members are declared from least to most severe.
    """

    HEALTHY = "Healthy"
    DEGRADED = "Degraded"
    UNHEALTHY = "Unhealthy"


class HealthCheckResult(BaseModel):
    """Outcome of one health probe."""

    component: str
    status: HealthStatus = HealthStatus.HEALTHY
    description: str = ""
    duration: float = Field(default=0.0, description="Probe wall-clock time in seconds")
    data: HealthData = Field(default_factory=dict)
    error: str | None = None


class DatabaseInfo(BaseModel):
    """Descriptive metadata about the configured database.

    Gathering is best-effort: failures end up in ``metadata`` rather than
    being raised.
    """

    server_name: str | None = None
    database_name: str | None = None
    provider: str | None = None
    server_version: str | None = None
    tables: list[str] = Field(default_factory=list)
    last_migration_time: datetime | None = None
    sanitized_connection_string: str | None = None
    metadata: dict[str, Any] | None = None


class HealthReport(BaseModel):
    """Aggregated result of every registered health checker."""

    overall_status: HealthStatus
    check_time: datetime
    total_duration: float = Field(description="Fan-out/fan-in wall-clock time in seconds")
    results: list[HealthCheckResult] = Field(default_factory=list)
    data_access_technology: str
    database_info: DatabaseInfo | None = None


def reduce_statuses(statuses: list[HealthStatus]) -> HealthStatus:
    """Reduce individual statuses to one overall status.

    Any Unhealthy wins, then any Degraded; otherwise Healthy (including the
    empty case).
    """
    if HealthStatus.UNHEALTHY in statuses:
        return HealthStatus.UNHEALTHY
    if HealthStatus.DEGRADED in statuses:
        return HealthStatus.DEGRADED
    return HealthStatus.HEALTHY


class HealthChecker(Protocol):
    """A component that probes one backend and never raises."""

    @property
    def component_name(self) -> str:
        """Stable name identifying this checker in reports."""
        ...

    async def check_health(self) -> HealthCheckResult:
        """Run the probe and classify its outcome."""
        ...
