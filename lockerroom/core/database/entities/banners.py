"""
Banner entity model.

Banners are dismissible messages shown at the top of the client for a
set of roles, optionally narrowed to particular schools and a date window.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from sqlalchemy import DateTime
from sqlmodel import JSON, Field, Text

from ..base import Base, new_id, utc_now


class Banner(Base, table=True):
    """Table: banners"""

    __tablename__ = "banners"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=32)
    title: str = Field(max_length=255)
    message: str = Field(sa_type=Text)
    category: str = Field(default="info", max_length=32)

    target_roles: List[str] = Field(default_factory=list, sa_type=JSON)
    target_school_ids: Optional[List[str]] = Field(default=None, sa_type=JSON)

    start_date: Optional[datetime] = Field(default=None, sa_type=DateTime)
    end_date: Optional[datetime] = Field(default=None, sa_type=DateTime)
    is_active: bool = Field(default=True, index=True)
    priority: int = Field(default=0)

    created_by: str = Field(foreign_key="users.id", max_length=32)
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now}, sa_type=DateTime)
