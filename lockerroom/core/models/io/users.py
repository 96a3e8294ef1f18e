"""
Account I/O models for API requests and responses.

This module contains Pydantic-based I/O schemas for registration, login
and profile endpoints.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .schools import StudentRead


class UserRead(BaseModel):
    """Schema for reading the caller's own account."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    name: str
    role: str
    school_id: Optional[str] = None
    bio: Optional[str] = None
    profile_pic_url: Optional[str] = None
    is_frozen: bool = False
    created_at: datetime


class UserSummary(BaseModel):
    """Minimal public view of a user, embedded in other payloads."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    role: str
    profile_pic_url: Optional[str] = None


class UserUpdate(BaseModel):
    """Schema for updating the caller's profile."""

    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    bio: Optional[str] = None
    profile_pic_url: Optional[str] = None


class RegisterRequest(BaseModel):
    email: str = Field(min_length=3, max_length=255)
    password: str = Field(min_length=8)
    name: str = Field(min_length=1, max_length=255)
    role: str = Field(default="viewer", description="Only 'viewer' may self register")


class LoginRequest(BaseModel):
    email: str
    password: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserRead


class ChangePasswordRequest(BaseModel):
    current_password: str
    new_password: str


class StaffCreate(BaseModel):
    """Schema for a system admin creating a staff account (scouts, finance, ...)."""

    email: str = Field(min_length=3, max_length=255)
    password: str = Field(min_length=8)
    name: str = Field(min_length=1, max_length=255)
    role: str


class FollowCounts(BaseModel):
    followers_count: int
    following_count: int


class UserProfile(BaseModel):
    """Public profile with follow counts and, for students, the athlete profile."""

    id: str
    name: str
    role: str
    school_id: Optional[str] = None
    bio: Optional[str] = None
    profile_pic_url: Optional[str] = None
    created_at: datetime
    followers_count: int
    following_count: int
    is_following: bool = False
    student: Optional[StudentRead] = None


class FrozenUpdate(BaseModel):
    is_frozen: bool
