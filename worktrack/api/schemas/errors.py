"""Error response schema shared by every exception handler."""

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, Field


class ServiceInfo(BaseModel):
    """Identifies the service instance that produced an error."""

    name: str = Field(..., description="Name of the service", examples=["Worktrack"])
    version: str = Field(..., description="Version of the service", examples=["0.1.0"])
    environment: str = Field(
        ...,
        description="Environment where the service is running",
        examples=["development", "production"],
    )


class ErrorResponse(BaseModel):
    """Standardized error body returned by the API."""

    error_code: str = Field(
        ...,
        description="Unique error code identifying the error type",
        examples=["VALIDATION_ERROR", "NOT_FOUND", "DATA_ACCESS_ERROR"],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
        examples=["Employee with ID 42 not found"],
    )
    details: dict[str, Any] | None = Field(
        default=None,
        description="Additional error details, such as field validation errors",
    )
    correlation_id: str | None = Field(
        default=None,
        description="Request correlation ID for tracing and debugging",
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        description="Timestamp when the error occurred (with timezone)",
    )
    severity: str | None = Field(
        default=None,
        description="Error severity level (LOW, MEDIUM, HIGH, CRITICAL)",
    )
    service_info: ServiceInfo | None = Field(
        default=None,
        description="Information about the service that generated the error",
    )
    debug_info: dict[str, Any] | None = Field(
        default=None,
        description="Debug information (only populated in development)",
    )

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "error_code": "NOT_FOUND",
                    "message": "Ticket with ID 7 not found",
                    "correlation_id": "550e8400-e29b-41d4-a716-446655440001",
                    "timestamp": "2024-06-14T12:00:01+00:00",
                    "severity": "LOW",
                },
                {
                    "error_code": "VALIDATION_ERROR",
                    "message": "Project with ID 3 does not exist",
                    "details": {"project_id": 3},
                    "timestamp": "2024-06-14T12:00:02+00:00",
                    "severity": "LOW",
                },
            ]
        }
    }
