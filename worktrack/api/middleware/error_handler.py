"""Global exception handlers producing a uniform ErrorResponse.

Status mapping:
- ValidationError -> 400, NotFoundError -> 404
- DataAccessError and unhandled exceptions -> 500, opaque in production
- RequestValidationError -> 422 with field level details
- HTTPException -> its own status code
"""

import traceback

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import Response
from loguru import logger
from starlette.exceptions import HTTPException

from worktrack.api.schemas.errors import ErrorResponse, ServiceInfo
from worktrack.api.utils.responses import ORJSONResponse
from worktrack.core.config import Settings, get_settings
from worktrack.core.context import RequestContext
from worktrack.core.error_context import sanitize_dict
from worktrack.core.exceptions import (
    DataAccessError,
    ErrorCode,
    NotFoundError,
    Severity,
    ValidationError,
    WorktrackError,
)

PRODUCTION_ERROR_MESSAGE = "An internal server error occurred"


def get_service_info(settings: Settings) -> ServiceInfo:
    """Create ServiceInfo from application settings."""
    return ServiceInfo(
        name=settings.app_name,
        version=settings.app_version,
        environment=settings.environment,
    )


def _status_code_for(exc: WorktrackError) -> int:
    if isinstance(exc, ValidationError):
        return status.HTTP_400_BAD_REQUEST
    if isinstance(exc, NotFoundError):
        return status.HTTP_404_NOT_FOUND
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def worktrack_error_handler(request: Request, exc: Exception) -> Response:
    """Handle WorktrackError exceptions.

    Raises:
        TypeError: If exc is not a WorktrackError instance
    """
    if not isinstance(exc, WorktrackError):
        raise TypeError(f"Expected WorktrackError, got {type(exc).__name__}")

    settings = get_settings()
    correlation_id = RequestContext.get_correlation_id()
    status_code = _status_code_for(exc)
    context = sanitize_dict(exc.context)

    log = logger.error if exc.should_alert else logger.warning
    log(
        "Handling {}: {}",
        type(exc).__name__,
        exc.message,
        error_code=exc.error_code,
        fingerprint=exc.fingerprint,
        request_path=request.url.path,
        error_context=context,
    )

    # Data access failures never expose backend details in production
    opaque = settings.environment == "production" and isinstance(exc, DataAccessError)
    message = PRODUCTION_ERROR_MESSAGE if opaque else exc.message
    details = None if opaque or not context else context

    debug_info = None
    if settings.environment == "development":
        debug_info = {
            "exception_type": type(exc).__name__,
            "fingerprint": exc.fingerprint,
        }
        if exc.cause:
            debug_info["cause"] = {
                "type": type(exc.cause).__name__,
                "message": str(exc.cause),
            }

    error_response = ErrorResponse(
        error_code=exc.error_code,
        message=message,
        details=details,
        correlation_id=correlation_id,
        severity=exc.severity.value,
        service_info=get_service_info(settings),
        debug_info=debug_info,
    )

    return ORJSONResponse(
        status_code=status_code,
        content=error_response.model_dump(mode="json"),
    )


async def validation_error_handler(request: Request, exc: Exception) -> Response:
    """Handle FastAPI RequestValidationError with field level details.

    Raises:
        TypeError: If exc is not a RequestValidationError instance
    """
    if not isinstance(exc, RequestValidationError):
        raise TypeError(f"Expected RequestValidationError, got {type(exc).__name__}")

    settings = get_settings()
    correlation_id = RequestContext.get_correlation_id()

    field_errors: dict[str, list[str]] = {}
    for error in exc.errors():
        # ('body', 'email') -> 'email'
        field_path = error.get("loc", ())
        field_name = ".".join(str(loc) for loc in field_path[1:]) or "root"
        field_errors.setdefault(field_name, []).append(
            error.get("msg", "Invalid value")
        )

    logger.warning(
        "Request validation failed",
        path=request.url.path,
        validation_errors=field_errors,
    )

    error_response = ErrorResponse(
        error_code=ErrorCode.VALIDATION_ERROR.value,
        message="Request validation failed",
        details={"validation_errors": field_errors},
        correlation_id=correlation_id,
        severity=Severity.LOW.value,
        service_info=get_service_info(settings),
    )

    return ORJSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=error_response.model_dump(mode="json"),
    )


async def http_exception_handler(request: Request, exc: Exception) -> Response:
    """Handle Starlette HTTPException, such as unknown routes.

    Raises:
        TypeError: If exc is not an HTTPException instance
    """
    if not isinstance(exc, HTTPException):
        raise TypeError(f"Expected HTTPException, got {type(exc).__name__}")

    settings = get_settings()

    error_code = ErrorCode.INTERNAL_ERROR.value
    severity = Severity.MEDIUM
    if exc.status_code == status.HTTP_400_BAD_REQUEST:
        error_code, severity = ErrorCode.VALIDATION_ERROR.value, Severity.LOW
    elif exc.status_code == status.HTTP_404_NOT_FOUND:
        error_code, severity = ErrorCode.NOT_FOUND.value, Severity.LOW
    elif exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        severity = Severity.HIGH

    logger.warning(
        "HTTP exception",
        status=exc.status_code,
        path=request.url.path,
        detail=exc.detail,
    )

    error_response = ErrorResponse(
        error_code=error_code,
        message=str(exc.detail),
        correlation_id=RequestContext.get_correlation_id(),
        severity=severity.value,
        service_info=get_service_info(settings),
    )

    return ORJSONResponse(
        status_code=exc.status_code,
        content=error_response.model_dump(mode="json"),
        headers=getattr(exc, "headers", None),
    )


async def generic_exception_handler(request: Request, exc: Exception) -> Response:
    """Handle any other exception, hiding internals in production."""
    settings = get_settings()

    logger.opt(exception=exc).error(
        "Unhandled exception: {}",
        type(exc).__name__,
        request_method=request.method,
        request_path=request.url.path,
    )

    if settings.environment == "production":
        message = PRODUCTION_ERROR_MESSAGE
        details = None
        debug_info = None
    else:
        message = f"Internal server error: {type(exc).__name__}"
        details = {"error": str(exc), "type": type(exc).__name__}
        debug_info = {
            "stack_trace": traceback.format_tb(exc.__traceback__),
            "exception_type": type(exc).__name__,
        }

    error_response = ErrorResponse(
        error_code=ErrorCode.INTERNAL_ERROR.value,
        message=message,
        details=details,
        correlation_id=RequestContext.get_correlation_id(),
        severity=Severity.CRITICAL.value,
        service_info=get_service_info(settings),
        debug_info=debug_info,
    )

    return ORJSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_response.model_dump(mode="json"),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI application."""
    app.add_exception_handler(WorktrackError, worktrack_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    logger.info("Exception handlers registered")
