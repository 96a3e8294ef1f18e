"""
Shared building blocks for LockerRoom tables.

Every table derives from :class:`Base`, keys rows with :func:`new_id` and
stores timestamps as naive UTC produced by :func:`utc_now`.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Optional

from pydantic import ConfigDict
from sqlmodel import SQLModel


class Base(SQLModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)


def new_id() -> str:
    """32-character hex primary key."""
    return uuid.uuid4().hex


def utc_now() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Convert an aware datetime to the naive UTC form stored in the database.

    Naive values are assumed to already be UTC and are returned unchanged.
    """
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)
