"""
Post, feed and engagement I/O models.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .users import UserSummary


class PostCreate(BaseModel):
    media_url: Optional[str] = None
    media_type: Optional[str] = Field(default=None, description="image or video")
    caption: Optional[str] = None


class PostRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    author_id: str
    student_id: Optional[str] = None
    school_id: Optional[str] = None
    media_url: Optional[str] = None
    media_type: Optional[str] = None
    caption: Optional[str] = None
    status: str
    type: str
    title: Optional[str] = None
    scope: Optional[str] = None
    created_at: datetime


class FeedItem(PostRead):
    """A post as rendered in a feed, with engagement counts and viewer flags."""

    author: Optional[UserSummary] = None
    likes_count: int = 0
    comments_count: int = 0
    saves_count: int = 0
    views_count: int = 0
    is_liked: bool = False
    is_saved: bool = False
    is_following_author: bool = False


class FeedPage(BaseModel):
    items: List[FeedItem]
    next_cursor: Optional[str] = None
    has_more: bool


class CommentCreate(BaseModel):
    content: str


class CommentRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    post_id: str
    user_id: str
    content: str
    created_at: datetime
    author: Optional[UserSummary] = None


class ReportCreate(BaseModel):
    reason: str = Field(min_length=1)


class ReportRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    post_id: str
    reporter_id: str
    reason: str
    status: str
    created_at: datetime


class AnnouncementCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    message: str = Field(min_length=1)
    scope: str = "school"
    school_id: Optional[str] = None
    media_url: Optional[str] = None
    media_type: Optional[str] = None


class EngagementState(BaseModel):
    """Result of a like/save toggle."""

    post_id: str
    active: bool
    count: int
