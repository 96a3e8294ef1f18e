"""
System settings entity.

Key/value rows tunable by system admins at runtime (pricing, limits).
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime
from sqlmodel import Field, Text

from ..base import Base, new_id, utc_now


class SystemSetting(Base, table=True):
    """Table: system_settings"""

    __tablename__ = "system_settings"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=32)
    key: str = Field(max_length=128, index=True, unique=True)
    value: str = Field(sa_type=Text)
    category: str = Field(default="general", max_length=64)
    description: Optional[str] = Field(default=None, sa_type=Text)
    updated_by: Optional[str] = Field(default=None, foreign_key="users.id", max_length=32)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now}, sa_type=DateTime)
