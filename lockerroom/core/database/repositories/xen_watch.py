"""
XEN Watch repositories.

Data access for review submissions, scout reviews, consolidated feedback
and the payment transaction ledger.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.xen_watch import PaymentTransaction, XenWatchFeedback, XenWatchReview, XenWatchSubmission
from .base import QueryBuilder, SqlRepository


class XenWatchSubmissionRepository(SqlRepository[XenWatchSubmission]):
    """Repository for review submissions."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, XenWatchSubmission)

    async def list_submissions(
        self,
        student_id: Optional[str] = None,
        selected_scout_id: Optional[str] = None,
        statuses: Optional[Iterable[str]] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> List[XenWatchSubmission]:
        """List submissions newest first.

        Args:
            student_id: Restrict to one student's submissions
            selected_scout_id: Restrict to submissions assigned to one scout
            statuses: Restrict to these lifecycle states
            limit: Maximum records to return
            offset: Records to skip

        Returns:
            List of XenWatchSubmission instances
        """
        stmt = QueryBuilder.apply_filters(
            select(XenWatchSubmission),
            XenWatchSubmission,
            {"student_id": student_id, "selected_scout_id": selected_scout_id},
        )
        if statuses is not None:
            stmt = stmt.where(XenWatchSubmission.status.in_(list(statuses)))
        stmt = stmt.order_by(XenWatchSubmission.created_at.desc(), XenWatchSubmission.id.desc())
        stmt = QueryBuilder.apply_pagination(stmt, limit, offset)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def count_by_status(self) -> Dict[str, int]:
        stmt = select(XenWatchSubmission.status, func.count()).group_by(XenWatchSubmission.status)
        result = await self.session.execute(stmt)
        return {status: int(count) for status, count in result.all()}


class XenWatchReviewRepository(SqlRepository[XenWatchReview]):
    """Repository for scout reviews."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, XenWatchReview)

    async def get_pair(self, submission_id: str, scout_id: str) -> Optional[XenWatchReview]:
        stmt = select(XenWatchReview).where(
            XenWatchReview.submission_id == submission_id, XenWatchReview.scout_id == scout_id
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def list_for_submission(self, submission_id: str, submitted_only: bool = False) -> List[XenWatchReview]:
        stmt = select(XenWatchReview).where(XenWatchReview.submission_id == submission_id)
        if submitted_only:
            stmt = stmt.where(XenWatchReview.is_submitted == True)  # noqa: E712
        result = await self.session.execute(stmt.order_by(XenWatchReview.created_at))
        return list(result.scalars().all())


class XenWatchFeedbackRepository(SqlRepository[XenWatchFeedback]):
    """Repository for consolidated feedback."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, XenWatchFeedback)

    async def get_by_submission(self, submission_id: str) -> Optional[XenWatchFeedback]:
        result = await self.session.execute(
            select(XenWatchFeedback).where(XenWatchFeedback.submission_id == submission_id)
        )
        return result.scalars().first()

    async def average_final_rating(self) -> Optional[float]:
        result = await self.session.execute(select(func.avg(XenWatchFeedback.final_rating)))
        value = result.scalar_one()
        return float(value) if value is not None else None


class PaymentTransactionRepository(SqlRepository[PaymentTransaction]):
    """Repository for the payment ledger."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, PaymentTransaction)

    async def get_by_provider_id(self, provider_transaction_id: str) -> Optional[PaymentTransaction]:
        result = await self.session.execute(
            select(PaymentTransaction).where(PaymentTransaction.provider_transaction_id == provider_transaction_id)
        )
        return result.scalars().first()

    async def sum_completed_cents(self, type_: Optional[str] = None) -> int:
        stmt = select(func.coalesce(func.sum(PaymentTransaction.amount_cents), 0)).where(
            PaymentTransaction.status == "completed"
        )
        if type_ is not None:
            stmt = stmt.where(PaymentTransaction.type == type_)
        result = await self.session.execute(stmt)
        return int(result.scalar_one())
