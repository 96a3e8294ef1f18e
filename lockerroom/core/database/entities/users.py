"""
User account entity models.

A user is any authenticated person on the platform. The ``role`` column
drives every permission check; ``school_id`` ties students and school
admins to their academy.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime
from sqlmodel import Field, Text

from ..base import Base, new_id, utc_now


class UserBase(Base):
    """Profile fields shared by every account."""

    email: str = Field(max_length=255, index=True, unique=True)
    name: str = Field(max_length=255)
    role: str = Field(default="viewer", max_length=32, index=True)
    school_id: Optional[str] = Field(default=None, foreign_key="schools.id", index=True, max_length=32)
    bio: Optional[str] = Field(default=None, sa_type=Text)
    profile_pic_url: Optional[str] = Field(default=None, max_length=1024)
    is_frozen: bool = Field(default=False)


class User(UserBase, table=True):
    """Entity for user accounts.

    Table: users
    """

    __tablename__ = "users"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=32)
    password_hash: str = Field(max_length=255)

    created_at: datetime = Field(default_factory=utc_now, index=True, sa_type=DateTime)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now}, sa_type=DateTime)

    def __repr__(self) -> str:
        return f"User(id={self.id}, email={self.email}, role={self.role})"
