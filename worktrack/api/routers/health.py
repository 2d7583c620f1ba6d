"""Health and liveness endpoints.

The full report maps its overall status to the HTTP status code so load
balancers can act on it without parsing the body:

- Healthy -> 200
- Degraded -> 206
- Unhealthy -> 503
"""

import time
from datetime import UTC, datetime

from fastapi import APIRouter, Request, status
from fastapi.responses import Response

from worktrack.api.constants import (
    HTTP_206_PARTIAL_CONTENT,
    HTTP_503_SERVICE_UNAVAILABLE,
)
from worktrack.api.schemas.health import PingResponse
from worktrack.api.utils.responses import ORJSONResponse
from worktrack.domain.health import DatabaseInfo, HealthReport, HealthStatus
from worktrack.infrastructure.health import HealthCheckService

router = APIRouter(prefix="/health", tags=["health"])

STATUS_CODES: dict[HealthStatus, int] = {
    HealthStatus.HEALTHY: status.HTTP_200_OK,
    HealthStatus.DEGRADED: HTTP_206_PARTIAL_CONTENT,
    HealthStatus.UNHEALTHY: HTTP_503_SERVICE_UNAVAILABLE,
}


def get_health_service(request: Request) -> HealthCheckService:
    service: HealthCheckService = request.app.state.health_service
    return service


@router.get(
    "",
    response_model=HealthReport,
    responses={
        HTTP_206_PARTIAL_CONTENT: {"model": HealthReport},
        HTTP_503_SERVICE_UNAVAILABLE: {"model": HealthReport},
    },
)
async def health_report(request: Request) -> Response:
    """Run every health checker and return the aggregated report."""
    report = await get_health_service(request).check_health()
    return ORJSONResponse(
        status_code=STATUS_CODES[report.overall_status],
        content=report.model_dump(mode="json"),
    )


@router.get("/database", response_model=bool)
async def database_connected(request: Request) -> bool:
    return await get_health_service(request).is_database_connected()


@router.get("/database/info", response_model=DatabaseInfo)
async def database_info(request: Request) -> DatabaseInfo:
    return await get_health_service(request).get_database_info()


@router.get("/ping", response_model=PingResponse)
async def ping(request: Request) -> PingResponse:
    """Liveness probe; never touches the database."""
    service = get_health_service(request)
    started_at: float = request.app.state.started_at
    return PingResponse(
        timestamp=datetime.now(UTC),
        uptime_seconds=max(time.monotonic() - started_at, 0.0),
        data_access_technology=service.active_technology.component_name,
    )
