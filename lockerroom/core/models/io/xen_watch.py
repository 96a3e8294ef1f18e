"""
XEN Watch I/O models.
"""

from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class StatusBadge(BaseModel):
    label: str
    color: str
    icon: str


class SubmissionCreate(BaseModel):
    media_url: str = Field(min_length=1)
    caption: Optional[str] = None
    post_id: Optional[str] = None


class SubmissionRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    student_id: str
    school_id: Optional[str] = None
    post_id: Optional[str] = None
    media_url: str
    caption: Optional[str] = None
    amount_cents: int
    currency: str
    payment_provider: Optional[str] = None
    payment_intent_id: Optional[str] = None
    paid_at: Optional[datetime] = None
    status: str
    selected_scout_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    display: Optional[StatusBadge] = None


class AssignRequest(BaseModel):
    scout_id: str


class ReviewCreate(BaseModel):
    rating: int
    comment: Optional[str] = None
    is_submitted: bool = True


class ReviewRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    submission_id: str
    scout_id: str
    rating: int
    comment: Optional[str] = None
    is_submitted: bool
    created_at: datetime
    updated_at: datetime


class FeedbackCreate(BaseModel):
    message: Optional[str] = None


class FeedbackRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    submission_id: str
    admin_user_id: str
    final_rating: Optional[int] = None
    message: str
    sent_at: datetime


class SubmissionDetail(BaseModel):
    submission: SubmissionRead
    reviews: List[ReviewRead] = []
    feedback: Optional[FeedbackRead] = None


class XenWatchAnalytics(BaseModel):
    total_submissions: int
    by_status: Dict[str, int]
    revenue_cents: int
    average_final_rating: Optional[float] = None
