"""
Centralized database layer for LockerRoom.

This package provides a unified location for all database entities and repositories,
organized by business domain and table relationships.

Structure:
- entities/: Database entity models organized by table/business logic
- repositories/: Data access layer organized by table/business logic
- session.py: Global engine and session factory management
- utils.py: Database utility functions (engine, session factory, schema creation)
"""

from .base import Base, new_id, utc_now
from .session import (
    async_session_maker,
    engine,
    get_session,
)
from .utils import (
    create_all,
    create_engine,
    create_sessionmaker,
    is_memory_sqlite,
    normalize_database_url,
)

__all__ = [
    "Base",
    "async_session_maker",
    "create_all",
    "create_engine",
    "create_sessionmaker",
    "engine",
    "get_session",
    "is_memory_sqlite",
    "new_id",
    "normalize_database_url",
    "utc_now",
]
