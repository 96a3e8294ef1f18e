"""
System settings repository.
"""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.system_settings import SystemSetting
from .base import SqlRepository


class SystemSettingRepository(SqlRepository[SystemSetting]):
    """Repository for runtime key/value settings."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, SystemSetting)

    async def get_by_key(self, key: str) -> Optional[SystemSetting]:
        result = await self.session.execute(select(SystemSetting).where(SystemSetting.key == key))
        return result.scalars().first()

    async def list_settings(self, category: Optional[str] = None) -> List[SystemSetting]:
        stmt = select(SystemSetting)
        if category:
            stmt = stmt.where(SystemSetting.category == category)
        result = await self.session.execute(stmt.order_by(SystemSetting.category, SystemSetting.key))
        return list(result.scalars().all())
