"""
Repository bundle for dependency injection.

This module provides a convenience bundle of all repository instances
for easy dependency injection in services and application components.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import AsyncGenerator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..session import get_session
from .banners import BannerRepository
from .evaluation_forms import (
    EvaluationFormFieldRepository,
    EvaluationFormTemplateRepository,
    EvaluationResponseRepository,
    EvaluationSubmissionRepository,
)
from .follows import FollowRepository
from .notifications import NotificationRepository
from .posts import (
    PostCommentRepository,
    PostLikeRepository,
    PostRepository,
    PostViewRepository,
    ReportedPostRepository,
    SavedPostRepository,
)
from .schools import (
    SchoolApplicationRepository,
    SchoolPaymentRecordRepository,
    SchoolRepository,
    StudentRepository,
)
from .system_settings import SystemSettingRepository
from .users import UserRepository
from .xen_watch import (
    PaymentTransactionRepository,
    XenWatchFeedbackRepository,
    XenWatchReviewRepository,
    XenWatchSubmissionRepository,
)


@dataclass(frozen=True)
class SqlRepoBundle:
    """Convenience bundle of all SQL repositories for dependency injection."""

    session: AsyncSession
    users: UserRepository
    schools: SchoolRepository
    students: StudentRepository
    payment_records: SchoolPaymentRecordRepository
    school_applications: SchoolApplicationRepository
    posts: PostRepository
    likes: PostLikeRepository
    comments: PostCommentRepository
    views: PostViewRepository
    saved_posts: SavedPostRepository
    reports: ReportedPostRepository
    follows: FollowRepository
    notifications: NotificationRepository
    banners: BannerRepository
    submissions: XenWatchSubmissionRepository
    reviews: XenWatchReviewRepository
    feedback: XenWatchFeedbackRepository
    transactions: PaymentTransactionRepository
    form_templates: EvaluationFormTemplateRepository
    form_fields: EvaluationFormFieldRepository
    evaluations: EvaluationSubmissionRepository
    evaluation_responses: EvaluationResponseRepository
    settings: SystemSettingRepository


def build_sql_repos_from_session(*, session: AsyncSession) -> SqlRepoBundle:
    """Build a SqlRepoBundle from an existing session.

    Args:
        session: Existing async session

    Returns:
        Bundle containing all repository instances
    """
    return SqlRepoBundle(
        session=session,
        users=UserRepository(session),
        schools=SchoolRepository(session),
        students=StudentRepository(session),
        payment_records=SchoolPaymentRecordRepository(session),
        school_applications=SchoolApplicationRepository(session),
        posts=PostRepository(session),
        likes=PostLikeRepository(session),
        comments=PostCommentRepository(session),
        views=PostViewRepository(session),
        saved_posts=SavedPostRepository(session),
        reports=ReportedPostRepository(session),
        follows=FollowRepository(session),
        notifications=NotificationRepository(session),
        banners=BannerRepository(session),
        submissions=XenWatchSubmissionRepository(session),
        reviews=XenWatchReviewRepository(session),
        feedback=XenWatchFeedbackRepository(session),
        transactions=PaymentTransactionRepository(session),
        form_templates=EvaluationFormTemplateRepository(session),
        form_fields=EvaluationFormFieldRepository(session),
        evaluations=EvaluationSubmissionRepository(session),
        evaluation_responses=EvaluationResponseRepository(session),
        settings=SystemSettingRepository(session),
    )


async def get_repos(session: AsyncSession = Depends(get_session)) -> AsyncGenerator[SqlRepoBundle, None]:
    """
    Dependency yielding the repository bundle bound to the request session.

    Yields:
        SqlRepoBundle: Repositories sharing one AsyncSession.
    """
    yield build_sql_repos_from_session(session=session)
