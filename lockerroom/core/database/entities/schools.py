"""
School (academy) entity models.

This module contains the tables backing school administration:

- ``School``: the academy itself together with its subscription state
- ``Student``: the athlete profile enrolled in a school
- ``SchoolPaymentRecord``: append-only history of subscription changes
- ``SchoolApplication``: public requests to join the platform
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import DateTime
from sqlmodel import Field, Text

from ..base import Base, new_id, utc_now


class School(Base, table=True):
    """Entity for schools and their subscription.

    Table: schools
    """

    __tablename__ = "schools"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=32)
    name: str = Field(max_length=255, index=True)
    address: Optional[str] = Field(default=None, sa_type=Text)
    contact_email: Optional[str] = Field(default=None, max_length=255)
    contact_phone: Optional[str] = Field(default=None, max_length=64)
    profile_pic_url: Optional[str] = Field(default=None, max_length=1024)

    # Subscription state
    payment_amount: Decimal = Field(default=Decimal("0"), max_digits=10, decimal_places=2)
    payment_frequency: str = Field(default="monthly", max_length=16)
    subscription_expires_at: Optional[datetime] = Field(default=None, index=True, sa_type=DateTime)
    last_payment_date: Optional[datetime] = Field(default=None, sa_type=DateTime)
    is_active: bool = Field(default=True, index=True)
    max_students: int = Field(default=100, ge=0)

    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now}, sa_type=DateTime)

    def __repr__(self) -> str:
        return f"School(id={self.id}, name={self.name}, active={self.is_active})"


class Student(Base, table=True):
    """Entity for student athlete profiles.

    Table: students
    """

    __tablename__ = "students"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=32)
    user_id: str = Field(foreign_key="users.id", index=True, max_length=32, unique=True)
    school_id: str = Field(foreign_key="schools.id", index=True, max_length=32)

    name: str = Field(max_length=255)
    sport: Optional[str] = Field(default=None, max_length=64)
    position: Optional[str] = Field(default=None, max_length=64)
    role_number: Optional[str] = Field(default=None, max_length=16)
    grade: Optional[str] = Field(default=None, max_length=32)
    gender: Optional[str] = Field(default=None, max_length=16)
    height: Optional[str] = Field(default=None, max_length=16)
    weight: Optional[str] = Field(default=None, max_length=16)
    bio: Optional[str] = Field(default=None, sa_type=Text)
    profile_pic_url: Optional[str] = Field(default=None, max_length=1024)

    created_at: datetime = Field(default_factory=utc_now, index=True, sa_type=DateTime)


class SchoolPaymentRecord(Base, table=True):
    """Entity for the subscription payment history of a school.

    Table: school_payment_records
    """

    __tablename__ = "school_payment_records"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=32)
    school_id: str = Field(foreign_key="schools.id", index=True, max_length=32)

    payment_amount: Decimal = Field(default=Decimal("0"), max_digits=10, decimal_places=2)
    payment_frequency: str = Field(max_length=16)
    payment_type: str = Field(max_length=32, index=True)

    student_limit_before: Optional[int] = Field(default=None)
    student_limit_after: Optional[int] = Field(default=None)
    old_frequency: Optional[str] = Field(default=None, max_length=16)
    new_frequency: Optional[str] = Field(default=None, max_length=16)
    notes: Optional[str] = Field(default=None, sa_type=Text)

    recorded_by: str = Field(foreign_key="users.id", max_length=32)
    recorded_at: datetime = Field(default_factory=utc_now, index=True, sa_type=DateTime)
    subscription_expires_at: Optional[datetime] = Field(default=None, sa_type=DateTime)


class SchoolApplication(Base, table=True):
    """Entity for school onboarding applications.

    Table: school_applications
    """

    __tablename__ = "school_applications"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=32)
    school_name: str = Field(max_length=255)
    contact_name: str = Field(max_length=255)
    contact_email: str = Field(max_length=255)
    contact_phone: Optional[str] = Field(default=None, max_length=64)
    address: Optional[str] = Field(default=None, sa_type=Text)
    expected_students: int = Field(default=100, ge=1)
    message: Optional[str] = Field(default=None, sa_type=Text)

    status: str = Field(default="pending", max_length=16, index=True)
    review_notes: Optional[str] = Field(default=None, sa_type=Text)
    reviewed_by: Optional[str] = Field(default=None, foreign_key="users.id", max_length=32)
    reviewed_at: Optional[datetime] = Field(default=None, sa_type=DateTime)
    school_id: Optional[str] = Field(default=None, foreign_key="schools.id", max_length=32)

    created_at: datetime = Field(default_factory=utc_now, index=True, sa_type=DateTime)
