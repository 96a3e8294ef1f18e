"""
Process-wide engine and the request-scoped session dependency.

The engine is the only database global; every request gets its own
``AsyncSession`` through :func:`get_session`.
"""

from __future__ import annotations

from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession

from lockerroom.core.logging_config import get_logger
from lockerroom.server.core.config import settings

from .utils import create_engine, create_sessionmaker

logger = get_logger(__name__)

engine = create_engine(settings.database.url)
async_session_maker = create_sessionmaker(engine)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Yield a session for one request.

    Work left uncommitted when the request fails is rolled back before the
    session is closed.
    """
    async with async_session_maker() as session:
        try:
            yield session
        except Exception:
            logger.debug("Rolling back session after request failure")
            await session.rollback()
            raise
