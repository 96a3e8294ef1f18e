"""
Analytics Endpoints.

Platform-wide reports and per-student engagement. Report rows are plain
JSON; spreadsheet formatting is left to clients.
"""

from __future__ import annotations

from fastapi import APIRouter, Query

from lockerroom.core.models.io.analytics import GrowthReport, PlatformStats, RevenueSummary, StudentAnalytics
from lockerroom.server.services import analytics as analytics_service
from lockerroom.server.services.deps import CurrentUserDep, ReposDep

router = APIRouter(tags=["analytics"])


@router.get(
    "/platform",
    response_model=PlatformStats,
    summary="Get Platform Stats",
    description="User counts by role, schools, students, posts, engagement and XEN Watch submissions by status.",
)
async def platform_stats(user: CurrentUserDep, repos: ReposDep):
    return await analytics_service.platform_stats(repos, user)


@router.get(
    "/revenue",
    response_model=RevenueSummary,
    summary="Get Revenue Summary",
    description="School subscription revenue (initial and renewal payments) plus completed XEN Watch payments.",
)
async def revenue_summary(user: CurrentUserDep, repos: ReposDep):
    return await analytics_service.revenue_summary(repos, user)


@router.get("/students/{student_id}", response_model=StudentAnalytics, summary="Get Student Analytics")
async def student_analytics(student_id: str, user: CurrentUserDep, repos: ReposDep):
    return await analytics_service.student_analytics(repos, user, student_id)


@router.get("/growth", response_model=GrowthReport, summary="Get Growth Report")
async def growth(user: CurrentUserDep, repos: ReposDep, months: int = Query(6, ge=1, le=24)):
    """New users, posts and schools per calendar month, oldest first."""
    return await analytics_service.growth(repos, user, months=months)
