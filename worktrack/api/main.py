"""FastAPI application initialization and configuration module.

This module wires the application together:
- logging and tracing setup
- the data access technology, bound once into an immutable repository set
- the health check service with every technology's checker
- exception handlers, middleware and routers
- OpenTelemetry instrumentation

Middleware runs in reverse order of registration.
"""

import time
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from loguru import logger

from worktrack.api.constants import API_PREFIX
from worktrack.api.middleware.error_handler import register_exception_handlers
from worktrack.api.middleware.request_context import RequestContextMiddleware
from worktrack.api.middleware.request_logging import RequestLoggingMiddleware
from worktrack.api.routers import employees, health, projects, tickets
from worktrack.api.utils.responses import ORJSONResponse
from worktrack.core.config import Settings, get_settings
from worktrack.core.logging import setup_logging
from worktrack.core.observability import instrument_app, setup_tracing
from worktrack.infrastructure.database.factory import (
    ConnectionProviders,
    create_connection_providers,
    create_repository_set,
)
from worktrack.infrastructure.health import HealthCheckService, create_health_service


@asynccontextmanager
async def lifespan(app_instance: FastAPI) -> AsyncGenerator[None]:
    """Check the database on startup and dispose engines on shutdown.

    An unreachable database does not abort startup; the health endpoints
    report it instead.
    """
    health_service: HealthCheckService = app_instance.state.health_service
    if await health_service.is_database_connected():
        logger.info("Database connection successful")
    else:
        logger.error("Database connection failed during startup")

    logger.info(
        "Application startup complete - {} v{} using {}",
        app_instance.title,
        app_instance.version,
        health_service.active_technology.component_name,
    )

    yield

    logger.info("Application shutdown initiated")
    providers: ConnectionProviders = app_instance.state.providers
    await providers.close()
    logger.info("Application shutdown complete")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Optional settings instance. If not provided, will use get_settings().

    Returns:
        FastAPI: Configured FastAPI application instance.
    """
    if settings is None:
        settings = get_settings()

    setup_logging(settings)
    setup_tracing(settings)

    application = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        docs_url=settings.docs_url,
        redoc_url=settings.redoc_url,
        openapi_url=settings.openapi_url,
        default_response_class=ORJSONResponse,
        lifespan=lifespan,
    )

    # The technology is read once; the bound set never changes afterwards
    providers = create_connection_providers(settings)
    technology = settings.data_access_config.technology
    application.state.providers = providers
    application.state.repositories = create_repository_set(technology, providers)
    application.state.health_service = create_health_service(settings, providers)
    application.state.started_at = time.monotonic()

    # Register exception handlers BEFORE middleware
    register_exception_handlers(application)

    application.add_middleware(RequestLoggingMiddleware, log_config=settings.log_config)
    application.add_middleware(RequestContextMiddleware)

    for router in (employees.router, projects.router, tickets.router, health.router):
        application.include_router(router, prefix=API_PREFIX)

    instrument_app(application, settings)

    return application


app = create_app()
