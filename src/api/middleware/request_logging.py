"""HTTP request/response logging with performance monitoring.

Every request gets a request ID (the caller's ``X-Request-ID`` or a
generated ``req-<uuid4>``) which is stored in ``RequestContext``, bound to
the request's log lines and returned in the response headers.

Logged per request:
- start and completion, with method, path and client host
- status code, duration and response size
- a warning when the duration exceeds ``slow_request_threshold_ms``
- failures that escape the exception handlers, which are then re-raised

Paths listed in ``log_config.excluded_paths`` (health checks) are served
without logging.
"""

import time
from collections.abc import Awaitable, Callable

from fastapi import Request, Response
from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from src.api.constants import (
    MAX_REQUEST_ID_LENGTH,
    MAX_USER_AGENT_LENGTH,
    REQUEST_ID_HEADER,
)
from src.core.config import LogConfig, get_settings
from src.core.constants import MILLISECONDS_PER_SECOND
from src.core.context import RequestContext, generate_request_id


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for logging HTTP requests and responses.

    Args:
        app: The ASGI application.
        log_config: Logging configuration.
    """

    def __init__(self, app: ASGIApp, *, log_config: LogConfig) -> None:
        super().__init__(app)
        self.log_config = log_config
        self.excluded_paths = set(log_config.excluded_paths)
        self.settings = get_settings()

    def _get_client_ip(self, request: Request) -> str:
        """Extract the client IP, trusting proxy headers only in production.

        Args:
            request: The incoming request.

        Returns:
            str: The client IP address.
        """
        if self.settings.environment == "production":
            forwarded_for = request.headers.get("x-forwarded-for")
            if forwarded_for:
                return forwarded_for.split(",")[0].strip()

            real_ip = request.headers.get("x-real-ip")
            if real_ip:
                return real_ip.strip()

        if request.client:
            return request.client.host
        return "unknown"

    @staticmethod
    def _get_request_id(request: Request) -> str:
        """Reuse the caller's request ID or generate a new one."""
        incoming = request.headers.get(REQUEST_ID_HEADER, "").strip()
        if incoming:
            return incoming[:MAX_REQUEST_ID_LENGTH]
        return generate_request_id()

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        """Process the request and log details.

        Args:
            request: The incoming request.
            call_next: The next middleware/endpoint.

        Returns:
            Response: The response from the application.

        Raises:
            Exception: Any exception raised by the application is re-raised
                after logging.
        """
        request_id = self._get_request_id(request)
        RequestContext.set_request_id(request_id)

        if request.url.path in self.excluded_paths:
            response = await call_next(request)
            response.headers[REQUEST_ID_HEADER] = request_id
            return response

        user_agent = request.headers.get("user-agent", "")[:MAX_USER_AGENT_LENGTH]

        with logger.contextualize(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
            client_host=self._get_client_ip(request),
            user_agent=user_agent or "unknown",
        ):
            logger.info(
                "Request started",
                query_params=(
                    dict(request.query_params) if request.query_params else None
                ),
            )

            start_time = time.perf_counter()

            try:
                response = await call_next(request)
            except Exception as exc:
                elapsed = time.perf_counter() - start_time
                logger.error(
                    "Request failed",
                    duration_ms=round(elapsed * MILLISECONDS_PER_SECOND, 2),
                    error_type=type(exc).__name__,
                    error_message=str(exc),
                )
                raise

            duration_ms = (time.perf_counter() - start_time) * MILLISECONDS_PER_SECOND
            logger.info(
                "Request completed",
                status_code=response.status_code,
                duration_ms=round(duration_ms, 2),
                response_size=int(response.headers.get("content-length", 0)),
            )

            if duration_ms > self.log_config.slow_request_threshold_ms:
                logger.warning(
                    "Slow request detected",
                    duration_ms=round(duration_ms, 2),
                    threshold_ms=self.log_config.slow_request_threshold_ms,
                )

            response.headers[REQUEST_ID_HEADER] = request_id
            return response
