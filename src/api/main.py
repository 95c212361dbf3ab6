"""FastAPI application factory and lifecycle management.

``create_app`` wires logging, tracing, exception handlers, middleware, the
product router and the health endpoint. Middleware execute in reverse order
of registration, so the correlation ID is in place before request logging.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from loguru import logger
from sqlalchemy.pool import QueuePool

from src.api.middleware.error_handler import register_exception_handlers
from src.api.middleware.request_context import RequestContextMiddleware
from src.api.middleware.request_logging import RequestLoggingMiddleware
from src.api.routers.products import router as products_router
from src.api.utils.responses import ORJSONResponse
from src.core.config import Settings, get_settings
from src.core.logging import setup_logging
from src.core.observability import instrument_app, setup_tracing
from src.infrastructure.database.session import (
    check_database_connection,
    close_database,
    get_engine,
)


@asynccontextmanager
async def lifespan(app_instance: FastAPI) -> AsyncGenerator[None]:
    """Verify the database on startup and release it on shutdown.

    Args:
        app_instance: The FastAPI application instance.

    Yields:
        None: Nothing is yielded, this is just a lifespan context.

    Raises:
        RuntimeError: If database connection fails during startup.
    """
    is_healthy, error_msg = await check_database_connection()

    if is_healthy:
        logger.info("Database connection successful")
    else:
        logger.error("Database connection failed during startup: {}", error_msg)
        msg = f"Database connection failed: {error_msg}"
        raise RuntimeError(msg)

    logger.info(
        "Application startup complete - {} v{}",
        app_instance.title,
        app_instance.version,
    )

    yield

    logger.info("Application shutdown initiated")
    await close_database()
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
        description="REST API to manage a catalog of products",
        debug=settings.debug,
        docs_url=settings.docs_url,
        redoc_url=settings.redoc_url,
        openapi_url=settings.openapi_url,
        default_response_class=ORJSONResponse,
        lifespan=lifespan,
    )

    register_exception_handlers(application)

    application.add_middleware(RequestLoggingMiddleware, log_config=settings.log_config)
    application.add_middleware(RequestContextMiddleware)

    application.include_router(products_router)

    @application.get("/health", tags=["Health"])
    async def health() -> dict[str, object]:
        """Report service status and database connectivity.

        Returns:
            dict[str, object]: ``status`` is "healthy", or "degraded" when the
                database is unreachable.
        """
        is_healthy, error_msg = await check_database_connection()

        if not is_healthy:
            logger.warning("Database health check failed: {}", error_msg)
            return {"status": "degraded", "database": False}

        pool = get_engine().pool
        if isinstance(pool, QueuePool):
            logger.bind(
                metric_type="db.pool.health",
                checked_out=pool.checkedout(),
                size=pool.size(),
                overflow=pool.overflow(),
            ).info("Database pool health check")

        return {"status": "healthy", "database": True}

    instrument_app(application, settings)

    return application


app = create_app()
