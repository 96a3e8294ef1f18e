"""
System setting I/O models.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class SettingUpsert(BaseModel):
    value: str
    category: str = "general"
    description: Optional[str] = None


class SettingRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    key: str = Field(description="Setting key, e.g. 'xen_watch_price_cents'")
    value: str
    category: str
    description: Optional[str] = None
    updated_by: Optional[str] = None
    updated_at: datetime
