"""Correlation ID middleware.

Reuses the caller's ``X-Correlation-ID`` when present so a request can be
followed across services, otherwise generates one. The ID is stored in
``RequestContext``, bound to every log line emitted while the request is
processed and echoed back in the response headers. Incoming IDs are
truncated to ``MAX_CORRELATION_ID_LENGTH`` characters.
"""

from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from src.api.constants import CORRELATION_ID_HEADER, MAX_CORRELATION_ID_LENGTH
from src.core.context import RequestContext, generate_correlation_id


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Set up the correlation ID for the lifetime of a request."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        """Process the request with context management.

        Args:
            request: The incoming request.
            call_next: The next middleware/endpoint.

        Returns:
            Response: Response with correlation ID header.
        """
        incoming = request.headers.get(CORRELATION_ID_HEADER, "").strip()
        correlation_id = (
            incoming[:MAX_CORRELATION_ID_LENGTH]
            if incoming
            else generate_correlation_id()
        )
        RequestContext.set_correlation_id(correlation_id)

        # contextualize removes the binding once the request completes
        with logger.contextualize(correlation_id=correlation_id):
            response = await call_next(request)
            response.headers[CORRELATION_ID_HEADER] = correlation_id
            return response
