"""
XEN Watch entity models.

XEN Watch is the paid scout review marketplace. A student pays to have a
highlight video reviewed; scouts rate it and an admin consolidates the
ratings into final feedback.

Tables:
- ``xen_watch_submissions``: one row per paid review request
- ``xen_watch_reviews``: one row per scout per submission
- ``xen_watch_feedback``: consolidated feedback sent to the student
- ``payment_transactions``: ledger of payment attempts
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import DateTime, UniqueConstraint
from sqlmodel import JSON, Field, Text

from ..base import Base, new_id, utc_now


class XenWatchSubmission(Base, table=True):
    """Table: xen_watch_submissions"""

    __tablename__ = "xen_watch_submissions"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=32)
    student_id: str = Field(foreign_key="users.id", index=True, max_length=32)
    school_id: Optional[str] = Field(default=None, foreign_key="schools.id", max_length=32)
    post_id: Optional[str] = Field(default=None, foreign_key="posts.id", max_length=32)

    media_url: str = Field(max_length=1024)
    caption: Optional[str] = Field(default=None, sa_type=Text)

    amount_cents: int = Field(ge=0)
    currency: str = Field(default="USD", max_length=8)
    payment_provider: Optional[str] = Field(default=None, max_length=32)
    payment_intent_id: Optional[str] = Field(default=None, max_length=128)
    paid_at: Optional[datetime] = Field(default=None, sa_type=DateTime)

    status: str = Field(default="pending_payment", max_length=32, index=True)
    selected_scout_id: Optional[str] = Field(default=None, foreign_key="users.id", index=True, max_length=32)

    created_at: datetime = Field(default_factory=utc_now, index=True, sa_type=DateTime)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now}, sa_type=DateTime)

    def __repr__(self) -> str:
        return f"XenWatchSubmission(id={self.id}, status={self.status})"


class XenWatchReview(Base, table=True):
    """Table: xen_watch_reviews"""

    __tablename__ = "xen_watch_reviews"
    __table_args__ = (UniqueConstraint("submission_id", "scout_id", name="uq_xen_watch_reviews_submission_scout"),)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=32)
    submission_id: str = Field(foreign_key="xen_watch_submissions.id", index=True, max_length=32)
    scout_id: str = Field(foreign_key="users.id", index=True, max_length=32)
    rating: int = Field(ge=1, le=5)
    comment: Optional[str] = Field(default=None, sa_type=Text)
    is_submitted: bool = Field(default=False)

    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now}, sa_type=DateTime)


class XenWatchFeedback(Base, table=True):
    """Table: xen_watch_feedback"""

    __tablename__ = "xen_watch_feedback"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=32)
    submission_id: str = Field(foreign_key="xen_watch_submissions.id", unique=True, max_length=32)
    admin_user_id: str = Field(foreign_key="users.id", max_length=32)
    final_rating: Optional[int] = Field(default=None)
    message: str = Field(sa_type=Text)
    sent_at: datetime = Field(default_factory=utc_now, sa_type=DateTime)


class PaymentTransaction(Base, table=True):
    """Table: payment_transactions"""

    __tablename__ = "payment_transactions"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=32)
    user_id: str = Field(foreign_key="users.id", index=True, max_length=32)
    type: str = Field(default="xen_watch", max_length=32, index=True)
    amount_cents: int = Field(ge=0)
    currency: str = Field(default="USD", max_length=8)
    status: str = Field(default="pending", max_length=16, index=True)
    provider: str = Field(default="mock", max_length=32)
    provider_transaction_id: Optional[str] = Field(default=None, max_length=128)
    meta: Optional[Dict[str, Any]] = Field(default=None, sa_type=JSON)

    created_at: datetime = Field(default_factory=utc_now, index=True, sa_type=DateTime)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now}, sa_type=DateTime)
