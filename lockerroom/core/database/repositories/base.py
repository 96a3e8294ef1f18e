"""
Repository foundations.

``AsyncBaseRepository`` is the contract every LockerRoom repository honours;
``SqlRepository`` implements it once over an ``AsyncSession`` so the
per-aggregate repositories only add their own queries. ``QueryBuilder``
holds the filter and pagination helpers those queries share.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, List, Optional, Sequence, Type, TypeVar

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel, select

EntityType = TypeVar("EntityType", bound=SQLModel)


class AsyncBaseRepository(ABC, Generic[EntityType]):
    """CRUD contract keyed by the string ids every table uses."""

    def __init__(self, session: AsyncSession, model: Type[EntityType]) -> None:
        self.session = session
        self.model = model

    @abstractmethod
    async def create(self, entity: EntityType) -> EntityType: ...

    @abstractmethod
    async def get_by_id(self, entity_id: str) -> Optional[EntityType]: ...

    @abstractmethod
    async def update(self, entity: EntityType) -> EntityType: ...

    @abstractmethod
    async def delete(self, entity_id: str) -> bool: ...

    @abstractmethod
    async def list(
        self, limit: Optional[int] = None, offset: Optional[int] = None, filters: Optional[Dict[str, Any]] = None
    ) -> List[EntityType]: ...

    @abstractmethod
    async def count(self, filters: Optional[Dict[str, Any]] = None) -> int: ...


class SqlRepository(AsyncBaseRepository[EntityType]):
    """Session-backed implementation shared by the concrete repositories.

    Every write commits immediately; callers that need several rows in one
    unit use :meth:`create_many`. Listing is newest first for tables that
    carry ``created_at``.
    """

    async def create(self, entity: EntityType) -> EntityType:
        self.session.add(entity)
        await self.session.commit()
        await self.session.refresh(entity)
        return entity

    async def create_many(self, entities: Sequence[EntityType]) -> List[EntityType]:
        rows = list(entities)
        self.session.add_all(rows)
        await self.session.commit()
        return rows

    async def get_by_id(self, entity_id: str) -> Optional[EntityType]:
        return await self.session.get(self.model, entity_id)

    async def update(self, entity: EntityType) -> EntityType:
        self.session.add(entity)
        await self.session.commit()
        await self.session.refresh(entity)
        return entity

    async def delete(self, entity_id: str) -> bool:
        """Delete a row by id; False when it does not exist."""
        entity = await self.get_by_id(entity_id)
        if entity is None:
            return False
        await self.session.delete(entity)
        await self.session.commit()
        return True

    async def list(
        self, limit: Optional[int] = None, offset: Optional[int] = None, filters: Optional[Dict[str, Any]] = None
    ) -> List[EntityType]:
        stmt = QueryBuilder.apply_filters(select(self.model), self.model, filters)
        if hasattr(self.model, "created_at"):
            stmt = stmt.order_by(self.model.created_at.desc())
        stmt = QueryBuilder.apply_pagination(stmt, limit, offset)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def count(self, filters: Optional[Dict[str, Any]] = None) -> int:
        stmt = QueryBuilder.apply_filters(select(func.count()).select_from(self.model), self.model, filters)
        result = await self.session.execute(stmt)
        return int(result.scalar_one())


class QueryBuilder:
    """Statement helpers for the repositories."""

    @staticmethod
    def apply_filters(stmt, model: Type[EntityType], filters: Optional[Dict[str, Any]]):
        """Narrow ``stmt`` by column filters.

        ``None`` values and keys that are not columns of ``model`` are skipped,
        so optional query parameters can be passed straight through. List,
        tuple and set values match any of their members.

        Args:
            stmt: Select statement to narrow
            model: Entity class the filter keys refer to
            filters: Column name to value mapping

        Returns:
            The filtered statement
        """
        for key, value in (filters or {}).items():
            if value is None or not hasattr(model, key):
                continue
            column = getattr(model, key)
            if isinstance(value, (list, tuple, set, frozenset)):
                stmt = stmt.where(column.in_(list(value)))
            else:
                stmt = stmt.where(column == value)
        return stmt

    @staticmethod
    def apply_pagination(stmt, limit: Optional[int], offset: Optional[int]):
        if limit is not None:
            stmt = stmt.limit(limit)
        if offset is not None:
            stmt = stmt.offset(offset)
        return stmt
