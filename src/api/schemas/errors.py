"""Error response schemas.

Resource errors follow the catalog's public contract:

- **ValidationErrorResponse**: ``{"errors": [FieldError, ...]}`` (400)
- **NotFoundResponse**: ``{"error": "..."}`` (404)

Failures outside that contract (unhandled exceptions, unknown routes) use
the structured ``ErrorResponse`` envelope with correlation metadata.
"""

from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import BaseModel, Field


class FieldError(BaseModel):
    """One failing validation rule."""

    type: Literal["field"] = Field(
        default="field",
        description="Kind of validation error",
    )
    value: Any = Field(
        default=None,
        description="The offending value as received (null when absent)",
        examples=["abc", -10],
    )
    msg: str = Field(
        ...,
        description="Human-readable message of the failing rule",
        examples=["ID no valido", "Precio no valido"],
    )
    path: str = Field(
        ...,
        description="Name of the field or path parameter",
        examples=["id", "price"],
    )
    location: Literal["params", "body"] = Field(
        ...,
        description="Where the field was read from",
    )


class ValidationErrorResponse(BaseModel):
    """Body returned when request validation fails."""

    errors: list[FieldError] = Field(
        ...,
        description="Every failing rule, in evaluation order",
    )


class NotFoundResponse(BaseModel):
    """Body returned when the requested product does not exist."""

    error: str = Field(
        ...,
        description="Not-found message",
        examples=["Producto no Encontrado"],
    )


class ServiceInfo(BaseModel):
    """Service information for error context."""

    name: str = Field(..., description="Name of the service")
    version: str = Field(..., description="Version of the service")
    environment: str = Field(
        ...,
        description="Environment where the service is running",
        examples=["development", "staging", "production"],
    )


class ErrorResponse(BaseModel):
    """Structured envelope for unexpected and framework-level errors."""

    error_code: str = Field(
        ...,
        description="Unique error code identifying the error type",
        examples=["INTERNAL_ERROR", "NOT_FOUND"],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
        examples=["An internal server error occurred"],
    )
    details: dict[str, Any] | None = Field(
        default=None,
        description="Additional error details",
    )
    correlation_id: str | None = Field(
        default=None,
        description="Request correlation ID for tracing and debugging",
    )
    request_id: str | None = Field(
        default=None,
        description="Unique identifier of this HTTP request",
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        description="Timestamp when the error occurred (with timezone)",
    )
    severity: str | None = Field(
        default=None,
        description="Error severity level",
        examples=["LOW", "CRITICAL"],
    )
    service_info: ServiceInfo | None = Field(
        default=None,
        description="Information about the service that generated the error",
    )
    debug_info: dict[str, Any] | None = Field(
        default=None,
        description="Debug information (only populated outside production)",
    )
