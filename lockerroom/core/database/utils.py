"""
Engine and session factory helpers.

The server runs on PostgreSQL through asyncpg; tests and local runs use
SQLite through aiosqlite. ``normalize_database_url`` lets either be configured
with the plain URLs hosting providers hand out.
"""

from __future__ import annotations

import re

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from .base import Base

_POSTGRES_URL = re.compile(r"^postgres(?:ql)?(?:\+[a-z0-9_]+)?://")
_SQLITE_URL = re.compile(r"^sqlite(?:\+[a-z0-9_]+)?://")


def normalize_database_url(db_url: str) -> str:
    """Point a database URL at the async driver for its backend.

    Examples:
        ``postgres://u:p@host/db`` becomes ``postgresql+asyncpg://u:p@host/db``;
        ``sqlite:///local.db`` becomes ``sqlite+aiosqlite:///local.db``.
    """
    if _POSTGRES_URL.match(db_url):
        return _POSTGRES_URL.sub("postgresql+asyncpg://", db_url, count=1)
    if _SQLITE_URL.match(db_url):
        return _SQLITE_URL.sub("sqlite+aiosqlite://", db_url, count=1)
    return db_url


def is_memory_sqlite(db_url: str) -> bool:
    url = normalize_database_url(db_url)
    return url.startswith("sqlite+aiosqlite://") and (url.endswith("://") or ":memory:" in url)


def create_engine(db_url: str, echo: bool = False) -> AsyncEngine:
    """Create the async engine for ``db_url``.

    An in-memory SQLite database only lives as long as its connection, so it
    is served from a single shared connection.

    Args:
        db_url: Database connection URL
        echo: Log every SQL statement

    Returns:
        Configured AsyncEngine instance
    """
    url = normalize_database_url(db_url)
    if is_memory_sqlite(url):
        return create_async_engine(
            url, echo=echo, connect_args={"check_same_thread": False}, poolclass=StaticPool
        )
    return create_async_engine(url, echo=echo, pool_pre_ping=True)


def create_sessionmaker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory whose instances stay readable after commit."""
    return async_sessionmaker(engine, expire_on_commit=False)


async def create_all(engine: AsyncEngine) -> None:
    """Create any missing LockerRoom tables.

    Used by the server at startup and by tests; schema changes in deployed
    databases go through the Alembic revisions.
    """
    from . import entities  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
