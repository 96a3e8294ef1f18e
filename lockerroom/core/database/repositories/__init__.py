"""
Database repository layer using SQLModel.

This package contains all repository classes organized by business domain
and table relationships. Each module provides type-safe data access operations
for its corresponding SQLModel entity models.

All repositories are built on SQLModel for:
- Type-safe ORM operations with Pydantic validation
- Async-first database access patterns
- Consistent CRUD interface via SqlRepository
- Query building utilities for filtering and pagination

Modules:
- base: Repository interface and QueryBuilder utilities
- bundle: SqlRepoBundle and the request-scoped ``get_repos`` dependency
- users, schools, posts, follows, notifications, banners, xen_watch,
  evaluation_forms, system_settings: per-domain repositories
"""

from .bundle import SqlRepoBundle, build_sql_repos_from_session, get_repos

__all__ = ["SqlRepoBundle", "build_sql_repos_from_session", "get_repos"]
