"""
Platform analytics I/O models.

Report rows are plain JSON; spreadsheet formatting happens client-side.
"""

from __future__ import annotations

from typing import Dict, List

from pydantic import BaseModel


class PlatformStats(BaseModel):
    users_by_role: Dict[str, int]
    total_users: int
    schools_total: int
    schools_active: int
    students: int
    posts: int
    likes: int
    comments: int
    views: int
    submissions_by_status: Dict[str, int]


class RevenueSummary(BaseModel):
    school_subscription_revenue: float
    xen_watch_revenue_cents: int
    xen_watch_revenue: float
    total_revenue: float


class StudentAnalytics(BaseModel):
    student_id: str
    posts: int
    likes: int
    comments: int
    views: int
    saves: int
    followers: int
    average_engagement_per_post: float


class GrowthPoint(BaseModel):
    month: str
    new_users: int
    new_posts: int
    new_schools: int


class GrowthReport(BaseModel):
    months: List[GrowthPoint]
