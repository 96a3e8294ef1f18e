"""
Banner repository.
"""

from __future__ import annotations

from datetime import datetime
from typing import List

from sqlalchemy import or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.banners import Banner
from .base import SqlRepository


class BannerRepository(SqlRepository[Banner]):
    """Repository for banners."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Banner)

    async def list_all(self) -> List[Banner]:
        stmt = select(Banner).order_by(Banner.priority.desc(), Banner.created_at.desc())
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_live(self, now: datetime) -> List[Banner]:
        """Active banners whose date window contains ``now``.

        Role and school targeting is stored as JSON and filtered by the caller.
        """
        stmt = (
            select(Banner)
            .where(
                Banner.is_active == True,  # noqa: E712
                or_(Banner.start_date.is_(None), Banner.start_date <= now),
                or_(Banner.end_date.is_(None), Banner.end_date >= now),
            )
            .order_by(Banner.priority.desc(), Banner.created_at.desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
