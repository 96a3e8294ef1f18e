"""
School administration I/O models.

Schemas for schools, enrolled students, enrollment status, subscription
payments and onboarding applications.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class SchoolCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    address: Optional[str] = None
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = None
    profile_pic_url: Optional[str] = None
    payment_amount: Decimal = Field(default=Decimal("0"), ge=0)
    payment_frequency: str = "monthly"
    max_students: Optional[int] = Field(default=None, ge=1)


class SchoolUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    address: Optional[str] = None
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = None
    profile_pic_url: Optional[str] = None


class SchoolRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    address: Optional[str] = None
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = None
    profile_pic_url: Optional[str] = None
    payment_amount: float
    payment_frequency: str
    subscription_expires_at: Optional[datetime] = None
    last_payment_date: Optional[datetime] = None
    is_active: bool
    max_students: int
    created_at: datetime
    updated_at: datetime


class EnrollmentStatus(BaseModel):
    current_count: int
    max_students: int
    available_slots: int
    utilization_percentage: float
    warning_level: str
    can_enroll: bool


class SchoolAdminCreate(BaseModel):
    email: str = Field(min_length=3, max_length=255)
    name: str = Field(min_length=1, max_length=255)
    password: str = Field(min_length=8)


class StudentCreate(BaseModel):
    """Schema for a school admin enrolling a student (creates the login too)."""

    email: str = Field(min_length=3, max_length=255)
    password: str = Field(min_length=8)
    name: str = Field(min_length=1, max_length=255)
    sport: Optional[str] = None
    position: Optional[str] = None
    role_number: Optional[str] = None
    grade: Optional[str] = None
    gender: Optional[str] = None
    height: Optional[str] = None
    weight: Optional[str] = None
    bio: Optional[str] = None
    profile_pic_url: Optional[str] = None


class StudentUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    sport: Optional[str] = None
    position: Optional[str] = None
    role_number: Optional[str] = None
    grade: Optional[str] = None
    gender: Optional[str] = None
    height: Optional[str] = None
    weight: Optional[str] = None
    bio: Optional[str] = None
    profile_pic_url: Optional[str] = None


class StudentRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    school_id: str
    name: str
    sport: Optional[str] = None
    position: Optional[str] = None
    role_number: Optional[str] = None
    grade: Optional[str] = None
    gender: Optional[str] = None
    height: Optional[str] = None
    weight: Optional[str] = None
    bio: Optional[str] = None
    profile_pic_url: Optional[str] = None
    created_at: datetime


class SchoolStats(BaseModel):
    students: int
    posts: int
    likes: int
    comments: int
    views: int


class RenewalRequest(BaseModel):
    amount: Decimal
    frequency: str
    notes: Optional[str] = None


class StudentLimitChange(BaseModel):
    new_limit: int
    amount: Decimal = Decimal("0")
    notes: Optional[str] = None


class FrequencyChange(BaseModel):
    frequency: str
    amount: Optional[Decimal] = None
    notes: Optional[str] = None


class PaymentRecordRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    school_id: str
    payment_amount: float
    payment_frequency: str
    payment_type: str
    student_limit_before: Optional[int] = None
    student_limit_after: Optional[int] = None
    old_frequency: Optional[str] = None
    new_frequency: Optional[str] = None
    notes: Optional[str] = None
    recorded_by: str
    recorded_at: datetime
    subscription_expires_at: Optional[datetime] = None


class SchoolApplicationCreate(BaseModel):
    school_name: str = Field(min_length=1, max_length=255)
    contact_name: str = Field(min_length=1, max_length=255)
    contact_email: str = Field(min_length=3, max_length=255)
    contact_phone: Optional[str] = None
    address: Optional[str] = None
    expected_students: int = Field(default=100, ge=1)
    message: Optional[str] = None


class SchoolApplicationRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    school_name: str
    contact_name: str
    contact_email: str
    contact_phone: Optional[str] = None
    address: Optional[str] = None
    expected_students: int
    message: Optional[str] = None
    status: str
    review_notes: Optional[str] = None
    reviewed_by: Optional[str] = None
    reviewed_at: Optional[datetime] = None
    school_id: Optional[str] = None
    created_at: datetime


class ApplicationDecision(BaseModel):
    notes: Optional[str] = None


class StudentSearchResult(StudentRead):
    """One hit of the platform-wide athlete search."""

    school_name: str
    followers_count: int = 0
    is_following: bool = False
