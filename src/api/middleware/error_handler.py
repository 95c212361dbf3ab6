"""Global exception handlers for the FastAPI application.

- ``ValidationError`` and schema-level ``RequestValidationError`` → 400
  ``{"errors": [...]}``
- ``NotFoundError`` → 404 ``{"error": "..."}``
- Starlette ``HTTPException`` → its own status, ``ErrorResponse`` envelope
- anything else → 500, ``ErrorResponse`` envelope (details hidden in production)
"""

import traceback
from collections.abc import Sequence
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import Response
from loguru import logger
from starlette.exceptions import HTTPException

from src.api.schemas.errors import (
    ErrorResponse,
    FieldError,
    NotFoundResponse,
    ServiceInfo,
    ValidationErrorResponse,
)
from src.api.utils.responses import ORJSONResponse
from src.core.config import Settings, get_settings
from src.core.context import RequestContext, generate_request_id
from src.core.error_context import sanitize_dict, sanitize_error_context
from src.core.exceptions import (
    CatalogError,
    ErrorCode,
    NotFoundError,
    Severity,
    ValidationError,
)


def get_service_info(settings: Settings) -> ServiceInfo:
    """Create ServiceInfo from application settings."""
    return ServiceInfo(
        name=settings.app_name,
        version=settings.app_version,
        environment=settings.environment,
    )


def _build_error_response(
    error_code: str,
    message: str,
    severity: Severity,
    details: dict[str, Any] | None = None,
    debug_info: dict[str, Any] | None = None,
) -> ErrorResponse:
    """Fill the ErrorResponse envelope with request and service metadata."""
    settings = get_settings()
    return ErrorResponse(
        error_code=error_code,
        message=message,
        details=details,
        correlation_id=RequestContext.get_correlation_id(),
        request_id=RequestContext.get_request_id() or generate_request_id(),
        severity=severity.value,
        service_info=get_service_info(settings),
        debug_info=debug_info,
    )


def field_errors_from_pydantic(errors: Sequence[Any]) -> list[FieldError]:
    """Convert FastAPI/Pydantic error dicts into FieldError entries.

    Args:
        errors: The result of ``RequestValidationError.errors()``.

    Returns:
        list[FieldError]: One entry per schema error.
    """
    field_errors = []
    for error in errors:
        loc = tuple(error.get("loc", ()))
        source = str(loc[0]) if loc else "body"
        path = ".".join(str(part) for part in loc[1:]) or source
        value = None if error.get("type") == "missing" else error.get("input")
        field_errors.append(
            FieldError(
                value=value,
                msg=error.get("msg", "Invalid value"),
                path=path,
                location="params" if source == "path" else "body",
            )
        )
    return field_errors


async def catalog_error_handler(request: Request, exc: Exception) -> Response:
    """Handle application errors raised by validation rules and handlers.

    Args:
        request: The request that caused the exception
        exc: The CatalogError to handle

    Returns:
        Response: Response shaped for the error kind

    Raises:
        TypeError: If exc is not a CatalogError instance
    """
    if not isinstance(exc, CatalogError):
        raise TypeError(f"Expected CatalogError, got {type(exc).__name__}")

    error_context = sanitize_error_context(
        exc,
        {
            "request_method": request.method,
            "request_path": request.url.path,
            "error_code": exc.error_code,
            **exc.context,
        },
    )
    log = logger.info if exc.is_expected else logger.error
    log("Handling {}: {}", type(exc).__name__, exc.message, **error_context)

    if isinstance(exc, ValidationError):
        body = ValidationErrorResponse.model_validate({"errors": exc.errors})
        return ORJSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=body.model_dump(mode="json"),
        )

    if isinstance(exc, NotFoundError):
        return ORJSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content=NotFoundResponse(error=exc.message).model_dump(mode="json"),
        )

    error_response = _build_error_response(
        exc.error_code,
        exc.message,
        exc.severity,
        details=sanitize_dict(exc.context) or None,
    )
    return ORJSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_response.model_dump(mode="json"),
    )


async def request_validation_error_handler(
    request: Request, exc: Exception
) -> Response:
    """Report schema-level request errors with the validation error contract.

    Covers bodies the rule layer lets through but the payload schema cannot
    parse, such as malformed JSON or values of the wrong JSON type.

    Args:
        request: The request that caused the exception
        exc: The RequestValidationError to handle

    Returns:
        Response: 400 response listing every schema error

    Raises:
        TypeError: If exc is not a RequestValidationError instance
    """
    if not isinstance(exc, RequestValidationError):
        raise TypeError(f"Expected RequestValidationError, got {type(exc).__name__}")

    field_errors = field_errors_from_pydantic(exc.errors())

    logger.warning(
        "Request schema validation failed",
        request_method=request.method,
        request_path=request.url.path,
        failed_fields=sorted({error.path for error in field_errors}),
    )

    body = ValidationErrorResponse(errors=field_errors)
    return ORJSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=body.model_dump(mode="json"),
    )


async def http_exception_handler(request: Request, exc: Exception) -> Response:
    """Handle Starlette HTTPException (unknown routes, disallowed methods).

    Args:
        request: The request that caused the exception
        exc: The HTTPException to handle

    Returns:
        Response: ORJSONResponse with the ErrorResponse envelope

    Raises:
        TypeError: If exc is not an HTTPException instance
    """
    if not isinstance(exc, HTTPException):
        raise TypeError(f"Expected HTTPException, got {type(exc).__name__}")

    if exc.status_code == status.HTTP_404_NOT_FOUND:
        error_code, severity = ErrorCode.NOT_FOUND.value, Severity.LOW
    elif exc.status_code < status.HTTP_500_INTERNAL_SERVER_ERROR:
        error_code, severity = ErrorCode.VALIDATION_ERROR.value, Severity.LOW
    else:
        error_code, severity = ErrorCode.INTERNAL_ERROR.value, Severity.HIGH

    logger.warning(
        "HTTP exception",
        status=exc.status_code,
        request_method=request.method,
        request_path=request.url.path,
        detail=exc.detail,
    )

    error_response = _build_error_response(error_code, str(exc.detail), severity)
    return ORJSONResponse(
        status_code=exc.status_code,
        content=error_response.model_dump(mode="json"),
        headers=getattr(exc, "headers", None),
    )


async def generic_exception_handler(request: Request, exc: Exception) -> Response:
    """Handle any exception no other handler claimed.

    Args:
        request: The request that caused the exception
        exc: The unhandled exception

    Returns:
        Response: 500 response; internal details are hidden in production
    """
    settings = get_settings()

    error_context = sanitize_error_context(
        exc,
        {
            "request_method": request.method,
            "request_path": request.url.path,
        },
    )
    logger.opt(exception=exc).error(
        "Unhandled exception: {}", type(exc).__name__, **error_context
    )

    details = None
    debug_info = None
    if settings.environment == "production":
        message = "An internal server error occurred"
    else:
        message = f"Internal server error: {type(exc).__name__}"
        details = {"error": str(exc), "type": type(exc).__name__}
        debug_info = {
            "stack_trace": traceback.format_tb(exc.__traceback__),
            "exception_type": type(exc).__name__,
        }

    error_response = _build_error_response(
        ErrorCode.INTERNAL_ERROR.value,
        message,
        Severity.CRITICAL,
        details=details,
        debug_info=debug_info,
    )
    return ORJSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_response.model_dump(mode="json"),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI application.

    Args:
        app: The FastAPI application instance
    """
    app.add_exception_handler(CatalogError, catalog_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    logger.info("Exception handlers registered")
