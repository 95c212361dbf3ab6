"""Shared fixtures for integration tests.

Every test that needs a database gets a fresh SQLite file under ``tmp_path``.
The process-wide engine is rebuilt against it, so the application runs its
real session dependency, repositories and exception handlers unchanged.
"""

from collections.abc import AsyncGenerator, Generator
from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from src.api.main import app
from src.core.config import get_settings
from src.core.context import RequestContext
from src.core.logging import _state
from src.infrastructure.database import Base, close_database, get_async_session
from src.infrastructure.database.session import _db_manager, get_engine


@pytest.fixture(autouse=True)
def clear_settings_cache() -> Generator[None]:
    """Clear the settings cache before and after each test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def clean_request_context() -> Generator[None]:
    """Clear RequestContext before and after each test."""
    RequestContext.clear()
    yield
    RequestContext.clear()


@pytest.fixture(autouse=True)
def quiet_logging() -> Generator[None]:
    """Keep app creation from installing stdout sinks during tests."""
    logger.remove()
    _state.configured = True
    yield
    logger.remove()


@pytest.fixture
async def database(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> AsyncGenerator[AsyncEngine]:
    """Point the application at an empty SQLite database with the schema applied.

    Yields:
        AsyncEngine: The engine the application will use.
    """
    monkeypatch.setenv(
        "DATABASE_CONFIG__DATABASE_URL",
        f"sqlite+aiosqlite:///{tmp_path / 'catalog.db'}",
    )
    get_settings.cache_clear()
    _db_manager.reset()

    engine = get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await close_database()


@pytest.fixture
async def db_session(database: AsyncEngine) -> AsyncGenerator[AsyncSession]:
    """Provide a committing session on the test database."""
    _ = database
    async with get_async_session() as session:
        yield session


@pytest.fixture
async def client(database: AsyncEngine) -> AsyncGenerator[AsyncClient]:
    """Provide an HTTP client for the application backed by the test database."""
    _ = database
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
