"""
Post and engagement entity models.

Posts are the unit of the feed. Announcements are stored as posts with
``type='announcement'`` and a ``scope``. Engagement rows (likes, saves,
views) are unique per post and user.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, UniqueConstraint
from sqlmodel import Field, Text

from ..base import Base, new_id, utc_now


class Post(Base, table=True):
    """Entity for feed posts and announcements.

    Table: posts
    """

    __tablename__ = "posts"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=32)
    author_id: str = Field(foreign_key="users.id", index=True, max_length=32)
    student_id: Optional[str] = Field(default=None, foreign_key="students.id", index=True, max_length=32)
    school_id: Optional[str] = Field(default=None, foreign_key="schools.id", index=True, max_length=32)

    media_url: Optional[str] = Field(default=None, max_length=1024)
    media_type: Optional[str] = Field(default=None, max_length=16)
    caption: Optional[str] = Field(default=None, sa_type=Text)
    status: str = Field(default="ready", max_length=16, index=True)

    type: str = Field(default="post", max_length=16, index=True)
    title: Optional[str] = Field(default=None, max_length=255)
    scope: Optional[str] = Field(default=None, max_length=16)

    created_at: datetime = Field(default_factory=utc_now, index=True, sa_type=DateTime)


class PostLike(Base, table=True):
    """Table: post_likes"""

    __tablename__ = "post_likes"
    __table_args__ = (UniqueConstraint("post_id", "user_id", name="uq_post_likes_post_user"),)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=32)
    post_id: str = Field(foreign_key="posts.id", index=True, max_length=32)
    user_id: str = Field(foreign_key="users.id", index=True, max_length=32)
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime)


class PostComment(Base, table=True):
    """Table: post_comments"""

    __tablename__ = "post_comments"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=32)
    post_id: str = Field(foreign_key="posts.id", index=True, max_length=32)
    user_id: str = Field(foreign_key="users.id", index=True, max_length=32)
    content: str = Field(sa_type=Text)
    created_at: datetime = Field(default_factory=utc_now, index=True, sa_type=DateTime)


class PostView(Base, table=True):
    """Table: post_views"""

    __tablename__ = "post_views"
    __table_args__ = (UniqueConstraint("post_id", "user_id", name="uq_post_views_post_user"),)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=32)
    post_id: str = Field(foreign_key="posts.id", index=True, max_length=32)
    user_id: str = Field(foreign_key="users.id", index=True, max_length=32)
    viewed_at: datetime = Field(default_factory=utc_now, sa_type=DateTime)


class SavedPost(Base, table=True):
    """Table: saved_posts"""

    __tablename__ = "saved_posts"
    __table_args__ = (UniqueConstraint("post_id", "user_id", name="uq_saved_posts_post_user"),)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=32)
    post_id: str = Field(foreign_key="posts.id", index=True, max_length=32)
    user_id: str = Field(foreign_key="users.id", index=True, max_length=32)
    created_at: datetime = Field(default_factory=utc_now, index=True, sa_type=DateTime)


class ReportedPost(Base, table=True):
    """Table: reported_posts"""

    __tablename__ = "reported_posts"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=32)
    post_id: str = Field(foreign_key="posts.id", index=True, max_length=32)
    reporter_id: str = Field(foreign_key="users.id", max_length=32)
    reason: str = Field(sa_type=Text)
    status: str = Field(default="pending", max_length=16, index=True)
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime)
