"""
Notification entity model.

Notifications are per-user inbox rows. ``entity_type``/``entity_id`` point
at the object the notification is about; ``meta`` carries free-form
context rendered by the client.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import DateTime
from sqlmodel import JSON, Field, Text

from ..base import Base, new_id, utc_now


class Notification(Base, table=True):
    """Entity for in-app notifications.

    Table: notifications
    """

    __tablename__ = "notifications"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=32)
    user_id: str = Field(foreign_key="users.id", index=True, max_length=32)
    type: str = Field(max_length=64, index=True)
    title: str = Field(max_length=255)
    message: str = Field(sa_type=Text)

    entity_type: Optional[str] = Field(default=None, max_length=32)
    entity_id: Optional[str] = Field(default=None, max_length=32)
    related_user_id: Optional[str] = Field(default=None, foreign_key="users.id", max_length=32)
    meta: Optional[Dict[str, Any]] = Field(default=None, sa_type=JSON)

    is_read: bool = Field(default=False, index=True)
    created_at: datetime = Field(default_factory=utc_now, index=True, sa_type=DateTime)

    def __repr__(self) -> str:
        return f"Notification(id={self.id}, user_id={self.user_id}, type={self.type}, read={self.is_read})"
