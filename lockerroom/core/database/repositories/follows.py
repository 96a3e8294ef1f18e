"""
Follow graph repository.
"""

from __future__ import annotations

from typing import List, Optional, Set

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.follows import UserFollow
from .base import SqlRepository


class FollowRepository(SqlRepository[UserFollow]):
    """Repository for follow relationships."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, UserFollow)

    async def get_pair(self, follower_id: str, following_id: str) -> Optional[UserFollow]:
        stmt = select(UserFollow).where(
            UserFollow.follower_id == follower_id, UserFollow.following_id == following_id
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def follower_ids(self, user_id: str) -> List[str]:
        stmt = (
            select(UserFollow.follower_id)
            .where(UserFollow.following_id == user_id)
            .order_by(UserFollow.created_at.desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def following_ids(self, user_id: str) -> List[str]:
        stmt = (
            select(UserFollow.following_id)
            .where(UserFollow.follower_id == user_id)
            .order_by(UserFollow.created_at.desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def followed_among(self, follower_id: str, user_ids: Set[str]) -> Set[str]:
        """Subset of ``user_ids`` that ``follower_id`` follows."""
        if not user_ids:
            return set()
        stmt = select(UserFollow.following_id).where(
            UserFollow.follower_id == follower_id, UserFollow.following_id.in_(list(user_ids))
        )
        result = await self.session.execute(stmt)
        return set(result.scalars().all())

    async def count_followers(self, user_id: str) -> int:
        stmt = select(func.count()).select_from(UserFollow).where(UserFollow.following_id == user_id)
        result = await self.session.execute(stmt)
        return int(result.scalar_one())

    async def count_following(self, user_id: str) -> int:
        stmt = select(func.count()).select_from(UserFollow).where(UserFollow.follower_id == user_id)
        result = await self.session.execute(stmt)
        return int(result.scalar_one())
