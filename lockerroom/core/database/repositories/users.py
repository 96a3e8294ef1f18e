"""
User repository.

Data access for accounts: lookup by e-mail (case-insensitive), role based
queries used for fan-out notifications and platform statistics.
"""

from __future__ import annotations

from datetime import datetime
from typing import Dict, Iterable, List, Optional

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.users import User
from .base import SqlRepository


class UserRepository(SqlRepository[User]):
    """Repository for user account data access operations using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, User)

    async def get_by_email(self, email: str) -> Optional[User]:
        """Get a user by e-mail, ignoring case.

        Args:
            email: E-mail address as typed by the user

        Returns:
            User instance or None
        """
        stmt = select(User).where(func.lower(User.email) == email.strip().lower())
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def get_many(self, user_ids: Iterable[str]) -> Dict[str, User]:
        ids = list(set(user_ids))
        if not ids:
            return {}
        result = await self.session.execute(select(User).where(User.id.in_(ids)))
        return {user.id: user for user in result.scalars().all()}

    async def list_by_roles(self, roles: Iterable[str], school_id: Optional[str] = None) -> List[User]:
        """List non-frozen users holding any of the given roles.

        Args:
            roles: Role values to match
            school_id: Restrict to members of this school

        Returns:
            Matching users ordered by name
        """
        stmt = select(User).where(User.role.in_(list(roles)), User.is_frozen == False)  # noqa: E712
        if school_id is not None:
            stmt = stmt.where(User.school_id == school_id)
        result = await self.session.execute(stmt.order_by(User.name))
        return list(result.scalars().all())

    async def count_by_role(self) -> Dict[str, int]:
        stmt = select(User.role, func.count()).group_by(User.role)
        result = await self.session.execute(stmt)
        return {role: int(count) for role, count in result.all()}

    async def count_created_between(self, start: datetime, end: datetime) -> int:
        stmt = select(func.count()).select_from(User).where(User.created_at >= start, User.created_at < end)
        result = await self.session.execute(stmt)
        return int(result.scalar_one())
