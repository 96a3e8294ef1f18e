"""
School repositories.

Data access for schools, enrolled students, subscription payment history
and onboarding applications.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy import func, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.follows import UserFollow
from ..entities.schools import School, SchoolApplication, SchoolPaymentRecord, Student
from .base import QueryBuilder, SqlRepository


class SchoolRepository(SqlRepository[School]):
    """Repository for schools."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, School)

    async def get_for_update(self, school_id: str) -> Optional[School]:
        """Load a school and hold a row lock on it until the transaction ends.

        SQLite has no row locks and ignores ``FOR UPDATE``.
        """
        stmt = (
            select(School)
            .where(School.id == school_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def list_schools(
        self, is_active: Optional[bool] = None, limit: Optional[int] = None, offset: Optional[int] = None
    ) -> List[School]:
        stmt = select(School)
        if is_active is not None:
            stmt = stmt.where(School.is_active == is_active)
        stmt = QueryBuilder.apply_pagination(stmt.order_by(School.name), limit, offset)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_expiring(self, now: datetime, until: datetime) -> List[School]:
        """Active schools whose subscription ends within ``[now, until]``."""
        stmt = (
            select(School)
            .where(
                School.is_active == True,  # noqa: E712
                School.subscription_expires_at.is_not(None),
                School.subscription_expires_at >= now,
                School.subscription_expires_at <= until,
            )
            .order_by(School.subscription_expires_at)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def count_created_between(self, start: datetime, end: datetime) -> int:
        stmt = select(func.count()).select_from(School).where(School.created_at >= start, School.created_at < end)
        result = await self.session.execute(stmt)
        return int(result.scalar_one())


class StudentRepository(SqlRepository[Student]):
    """Repository for student athlete profiles."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Student)

    async def get_by_user_id(self, user_id: str) -> Optional[Student]:
        result = await self.session.execute(select(Student).where(Student.user_id == user_id))
        return result.scalars().first()

    async def count_for_school(self, school_id: str) -> int:
        stmt = select(func.count()).select_from(Student).where(Student.school_id == school_id)
        result = await self.session.execute(stmt)
        return int(result.scalar_one())

    async def search(
        self,
        school_id: str,
        search: Optional[str] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> List[Student]:
        """List a school's students, optionally matching name, sport or position.

        Args:
            school_id: School to list
            search: Case-insensitive substring to match
            limit: Maximum records to return
            offset: Records to skip

        Returns:
            Students ordered by name
        """
        stmt = select(Student).where(Student.school_id == school_id)
        if search:
            pattern = f"%{search.strip().lower()}%"
            stmt = stmt.where(
                or_(
                    func.lower(Student.name).like(pattern),
                    func.lower(func.coalesce(Student.sport, "")).like(pattern),
                    func.lower(func.coalesce(Student.position, "")).like(pattern),
                )
            )
        stmt = QueryBuilder.apply_pagination(stmt.order_by(Student.name), limit, offset)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def search_ranked(self, term: str, limit: int) -> List[Tuple[Student, str, int]]:
        """Students on any school matching ``term``, most followed first.

        ``term`` is matched case-insensitively as a literal substring of the
        name, sport or position.

        Returns:
            ``(student, school_name, followers_count)`` tuples
        """
        escaped = term.lower().replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        pattern = f"%{escaped}%"
        followers = func.count(UserFollow.id)
        stmt = (
            select(Student, School.name, followers)
            .join(School, School.id == Student.school_id)
            .outerjoin(UserFollow, UserFollow.following_id == Student.user_id)
            .where(
                or_(
                    func.lower(Student.name).like(pattern, escape="\\"),
                    func.lower(func.coalesce(Student.sport, "")).like(pattern, escape="\\"),
                    func.lower(func.coalesce(Student.position, "")).like(pattern, escape="\\"),
                )
            )
            .group_by(Student.id, School.name)
            .order_by(followers.desc(), Student.name)
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return [(student, school_name, int(count)) for student, school_name, count in result.all()]


class SchoolPaymentRecordRepository(SqlRepository[SchoolPaymentRecord]):
    """Repository for the append-only payment history."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, SchoolPaymentRecord)

    async def list_records(
        self,
        school_id: Optional[str] = None,
        payment_type: Optional[str] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> List[SchoolPaymentRecord]:
        stmt = QueryBuilder.apply_filters(
            select(SchoolPaymentRecord),
            SchoolPaymentRecord,
            {"school_id": school_id, "payment_type": payment_type},
        )
        stmt = QueryBuilder.apply_pagination(stmt.order_by(SchoolPaymentRecord.recorded_at.desc()), limit, offset)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def has_records(self, school_id: str) -> bool:
        return await self.count({"school_id": school_id}) > 0

    async def sum_amount(self, payment_types: List[str]) -> float:
        stmt = select(func.coalesce(func.sum(SchoolPaymentRecord.payment_amount), 0)).where(
            SchoolPaymentRecord.payment_type.in_(payment_types)
        )
        result = await self.session.execute(stmt)
        return float(result.scalar_one())


class SchoolApplicationRepository(SqlRepository[SchoolApplication]):
    """Repository for school onboarding applications."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, SchoolApplication)
