"""Async database engine and session lifecycle management.

A single engine is created lazily and shared by the whole process through
``_DatabaseManager``. Sessions are handed out by ``get_async_session``, which
commits when the block exits cleanly and rolls back when it raises.

Engine options depend on the backend: PostgreSQL (asyncpg) gets connection
pooling, recycling, pre-ping and a command timeout; SQLite (aiosqlite) uses
SQLAlchemy's defaults.
"""

import threading
import time
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any
from weakref import WeakKeyDictionary

from loguru import logger
from sqlalchemy import event, text
from sqlalchemy.engine import Connection
from sqlalchemy.engine.interfaces import DBAPICursor, ExecutionContext
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from src.core.config import DatabaseConfig, get_settings
from src.core.constants import MILLISECONDS_PER_SECOND
from src.core.error_context import sanitize_sql_params
from src.infrastructure.constants import (
    COMMAND_TIMEOUT_SECONDS,
    MAX_LOGGED_STATEMENT_LENGTH,
    POOL_RECYCLE_SECONDS,
)

# Query start times keyed by execution context
_query_start_times: WeakKeyDictionary[ExecutionContext, float] = WeakKeyDictionary()


def _before_cursor_execute(
    _conn: Connection,
    _cursor: DBAPICursor,
    _statement: str,
    _parameters: Any,  # noqa: ANN401 - SQLAlchemy passes dict, list or tuple
    context: ExecutionContext,
    _executemany: bool,
) -> None:
    """Record when a statement starts executing."""
    _query_start_times[context] = time.perf_counter()


def _after_cursor_execute(
    _conn: Connection,
    cursor: DBAPICursor,
    statement: str,
    parameters: Any,  # noqa: ANN401 - SQLAlchemy passes dict, list or tuple
    context: ExecutionContext,
    _executemany: bool,
) -> None:
    """Log statements slower than the configured threshold.

    Args:
        _conn: Database connection (unused).
        cursor: Database cursor, used for the affected row count.
        statement: SQL statement that was executed.
        parameters: Query parameters.
        context: SQLAlchemy execution context.
        _executemany: Whether this was an executemany operation (unused).
    """
    start_time = _query_start_times.pop(context, None)
    if start_time is None:
        return

    duration_ms = (time.perf_counter() - start_time) * MILLISECONDS_PER_SECOND
    threshold_ms = get_settings().log_config.slow_query_threshold_ms
    if duration_ms < threshold_ms:
        return

    clean_statement = " ".join(statement.split())[:MAX_LOGGED_STATEMENT_LENGTH]
    logger.warning(
        "Slow query detected: {:.2f}ms",
        duration_ms,
        query=clean_statement,
        duration_ms=round(duration_ms, 2),
        rows_affected=getattr(cursor, "rowcount", -1),
        parameters=sanitize_sql_params(parameters),
        threshold_ms=threshold_ms,
    )


def _engine_options(db_config: DatabaseConfig) -> dict[str, Any]:
    """Build backend-specific keyword arguments for ``create_async_engine``."""
    if db_config.is_sqlite:
        return {}

    return {
        "pool_size": db_config.pool_size,
        "max_overflow": db_config.max_overflow,
        "pool_timeout": db_config.pool_timeout,
        "pool_pre_ping": db_config.pool_pre_ping,
        "pool_recycle": POOL_RECYCLE_SECONDS,
        "connect_args": {
            "server_settings": {"jit": "off"},
            "command_timeout": COMMAND_TIMEOUT_SECONDS,
        },
    }


def create_database_engine(database_url: str | None = None) -> AsyncEngine:
    """Create an async SQLAlchemy engine.

    Args:
        database_url: Optional database URL. If not provided, uses the
                     configured database URL from settings.

    Returns:
        AsyncEngine: Configured async engine instance.
    """
    settings = get_settings()
    db_config = settings.database_config
    if database_url is not None:
        db_config = db_config.model_copy(update={"database_url": database_url})

    engine = create_async_engine(
        db_config.database_url,
        echo=db_config.echo,
        **_engine_options(db_config),
    )

    if settings.log_config.enable_sql_logging:
        event.listen(engine.sync_engine, "before_cursor_execute", _before_cursor_execute)
        event.listen(engine.sync_engine, "after_cursor_execute", _after_cursor_execute)
        logger.info("Registered slow query event listeners")

    logger.info(
        "Created database engine - backend: {}, sql_logging: {}",
        engine.dialect.name,
        settings.log_config.enable_sql_logging,
    )

    return engine


class _DatabaseManager:
    """Holds the process-wide engine and session factory."""

    def __init__(self) -> None:
        self._engine: AsyncEngine | None = None
        self._async_session_factory: async_sessionmaker[AsyncSession] | None = None
        self._lock = threading.Lock()

    def get_engine(self) -> AsyncEngine:
        """Get or create the async engine instance."""
        if self._engine is None:
            with self._lock:
                if self._engine is None:
                    self._engine = create_database_engine()
        return self._engine

    def get_session_factory(self) -> async_sessionmaker[AsyncSession]:
        """Get or create the async session factory."""
        if self._async_session_factory is None:
            engine = self.get_engine()
            with self._lock:
                if self._async_session_factory is None:
                    self._async_session_factory = async_sessionmaker(
                        engine,
                        class_=AsyncSession,
                        expire_on_commit=False,
                    )
                    logger.info("Created async session factory")
        return self._async_session_factory

    async def close(self) -> None:
        """Dispose the engine and forget the session factory."""
        if self._engine is not None:
            await self._engine.dispose()
            logger.info("Database engine disposed")
        self.reset()

    def reset(self) -> None:
        """Reset the manager state. Used primarily for testing."""
        self._engine = None
        self._async_session_factory = None


_db_manager = _DatabaseManager()


def get_engine() -> AsyncEngine:
    """Get or create the global async engine instance."""
    return _db_manager.get_engine()


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Get or create the global async session factory."""
    return _db_manager.get_session_factory()


@asynccontextmanager
async def get_async_session() -> AsyncGenerator[AsyncSession]:
    """Provide a session that commits on success and rolls back on error.

    Yields:
        AsyncSession: Database session for performing operations.

    Example:
        async with get_async_session() as session:
            result = await session.execute(select(Product))
    """
    async_session_factory = get_session_factory()
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
            logger.debug("Database session committed")
        except Exception:
            await session.rollback()
            logger.debug("Database session rolled back due to error")
            raise


async def close_database() -> None:
    """Close the database engine during application shutdown."""
    await _db_manager.close()


async def check_database_connection() -> tuple[bool, str | None]:
    """Check if the database accepts connections.

    Returns:
        tuple[bool, str | None]: Whether the check passed, and the error
            message when it did not.
    """
    try:
        async with get_engine().connect() as conn:
            await conn.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError) as e:
        return False, str(e)
    else:
        return True, None
