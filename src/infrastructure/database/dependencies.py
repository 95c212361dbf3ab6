"""FastAPI dependency injection for database sessions.

Each request receives its own ``AsyncSession``; it is committed when the
handler returns, before the response is sent, and rolled back if the
handler raises.
"""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.infrastructure.database.session import get_async_session


async def get_db() -> AsyncGenerator[AsyncSession]:
    """Provide a request-scoped database session.

    Yields:
        AsyncSession: Session committed on success, rolled back on error.
    """
    async with get_async_session() as session:
        yield session


# Function scope closes the session before the response is sent
DatabaseSession = Annotated[AsyncSession, Depends(get_db, scope="function")]
