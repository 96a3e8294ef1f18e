"""
Follow relationship entity.

A row means ``follower_id`` follows ``following_id``; the pair is unique.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, UniqueConstraint
from sqlmodel import Field

from ..base import Base, new_id, utc_now


class UserFollow(Base, table=True):
    """Table: user_follows"""

    __tablename__ = "user_follows"
    __table_args__ = (UniqueConstraint("follower_id", "following_id", name="uq_user_follows_pair"),)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=32)
    follower_id: str = Field(foreign_key="users.id", index=True, max_length=32)
    following_id: str = Field(foreign_key="users.id", index=True, max_length=32)
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime)
