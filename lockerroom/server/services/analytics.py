"""
Analytics Service.

Read-only platform reports for system admins, analysts and finance, plus
per-student engagement numbers for students and their school admins.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from lockerroom.core.database.base import utc_now
from lockerroom.core.database.entities.users import User
from lockerroom.core.database.repositories import SqlRepoBundle
from lockerroom.core.errors import DomainValidationError, PermissionDeniedError
from lockerroom.core.models.domain.enums import PaymentType
from lockerroom.core.models.domain.roles import Role, is_system_admin
from lockerroom.core.models.domain.submission_status import SubmissionStatus
from lockerroom.server.services.auth import ensure_roles
from lockerroom.server.services.schools import get_student
from lockerroom.server.services.subscriptions import add_months

MAX_GROWTH_MONTHS = 24
REVENUE_PAYMENT_TYPES = [PaymentType.initial.value, PaymentType.renewal.value]


async def platform_stats(repos: SqlRepoBundle, user: User) -> Dict[str, Any]:
    ensure_roles(user, Role.analyst)
    users_by_role = {r.value: 0 for r in Role}
    users_by_role.update(await repos.users.count_by_role())
    submissions = {s.value: 0 for s in SubmissionStatus}
    submissions.update(await repos.submissions.count_by_status())
    return {
        "users_by_role": users_by_role,
        "total_users": sum(users_by_role.values()),
        "schools_total": await repos.schools.count(),
        "schools_active": await repos.schools.count({"is_active": True}),
        "students": await repos.students.count(),
        "posts": await repos.posts.count({"type": "post"}),
        "likes": await repos.likes.count(),
        "comments": await repos.comments.count(),
        "views": await repos.views.count(),
        "submissions_by_status": submissions,
    }


async def revenue_summary(repos: SqlRepoBundle, user: User) -> Dict[str, Any]:
    """
    Revenue across both income streams.

    School subscription revenue sums ``initial`` and ``renewal`` payment
    records; XEN Watch revenue sums completed transactions (refunds excluded).
    """
    ensure_roles(user, Role.finance, Role.analyst)
    school_revenue = round(float(await repos.payment_records.sum_amount(REVENUE_PAYMENT_TYPES)), 2)
    xen_watch_cents = await repos.transactions.sum_completed_cents("xen_watch")
    xen_watch = round(xen_watch_cents / 100, 2)
    return {
        "school_subscription_revenue": school_revenue,
        "xen_watch_revenue_cents": xen_watch_cents,
        "xen_watch_revenue": xen_watch,
        "total_revenue": round(school_revenue + xen_watch, 2),
    }


async def student_analytics(repos: SqlRepoBundle, user: User, student_id: str) -> Dict[str, Any]:
    """
    Engagement totals for one student's posts.

    Engagement per post counts likes, comments and saves.
    """
    student = await get_student(repos, student_id)
    allowed = (
        student.user_id == user.id
        or is_system_admin(user.role)
        or user.role == Role.analyst.value
        or (user.role == Role.school_admin.value and user.school_id == student.school_id)
    )
    if not allowed:
        raise PermissionDeniedError("You cannot view analytics for this student")

    post_ids = await repos.posts.ids_for(student_id=student.id)
    likes = await repos.likes.total_for_posts(post_ids)
    comments = await repos.comments.total_for_posts(post_ids)
    saves = await repos.saved_posts.total_for_posts(post_ids)
    engagement = likes + comments + saves
    return {
        "student_id": student.id,
        "posts": len(post_ids),
        "likes": likes,
        "comments": comments,
        "views": await repos.views.total_for_posts(post_ids),
        "saves": saves,
        "followers": await repos.follows.count_followers(student.user_id),
        "average_engagement_per_post": round(engagement / len(post_ids), 2) if post_ids else 0.0,
    }


async def growth(
    repos: SqlRepoBundle, user: User, months: int = 6, now: Optional[datetime] = None
) -> Dict[str, List[Dict[str, Any]]]:
    """New users, posts and schools per calendar month, oldest month first."""
    ensure_roles(user, Role.analyst)
    if not 1 <= months <= MAX_GROWTH_MONTHS:
        raise DomainValidationError(f"months must be between 1 and {MAX_GROWTH_MONTHS}")
    now = now or utc_now()
    current = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)

    points = []
    for back in range(months - 1, -1, -1):
        start = add_months(current, -back)
        end = add_months(start, 1)
        points.append(
            {
                "month": start.strftime("%Y-%m"),
                "new_users": await repos.users.count_created_between(start, end),
                "new_posts": await repos.posts.count_created_between(start, end),
                "new_schools": await repos.schools.count_created_between(start, end),
            }
        )
    return {"months": points}
