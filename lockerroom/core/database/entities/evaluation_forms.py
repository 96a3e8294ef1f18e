"""
Evaluation form entity models.

Admins design form templates made of typed fields; scouts fill them in
about a student. Responses are stored per field as JSON-encoded text so
every field type shares one column.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import DateTime, UniqueConstraint
from sqlmodel import JSON, Field, Text

from ..base import Base, new_id, utc_now


class EvaluationFormTemplate(Base, table=True):
    """Table: evaluation_form_templates"""

    __tablename__ = "evaluation_form_templates"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=32)
    name: str = Field(max_length=255)
    description: Optional[str] = Field(default=None, sa_type=Text)
    status: str = Field(default="draft", max_length=16, index=True)
    version: int = Field(default=1)

    created_by: str = Field(foreign_key="users.id", max_length=32)
    published_at: Optional[datetime] = Field(default=None, sa_type=DateTime)
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now}, sa_type=DateTime)


class EvaluationFormField(Base, table=True):
    """Table: evaluation_form_fields"""

    __tablename__ = "evaluation_form_fields"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=32)
    form_template_id: str = Field(foreign_key="evaluation_form_templates.id", index=True, max_length=32)
    field_type: str = Field(max_length=32)
    label: str = Field(max_length=255)
    placeholder: Optional[str] = Field(default=None, max_length=255)
    help_text: Optional[str] = Field(default=None, sa_type=Text)
    required: bool = Field(default=False)
    order_index: int = Field(default=0)
    options: Optional[List[str]] = Field(default=None, sa_type=JSON)
    validation_rules: Optional[Dict[str, Any]] = Field(default=None, sa_type=JSON)


class EvaluationSubmission(Base, table=True):
    """Table: evaluation_submissions"""

    __tablename__ = "evaluation_submissions"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=32)
    form_template_id: str = Field(foreign_key="evaluation_form_templates.id", index=True, max_length=32)
    submitted_by: str = Field(foreign_key="users.id", index=True, max_length=32)
    student_id: Optional[str] = Field(default=None, foreign_key="students.id", max_length=32)

    # Snapshot of the student profile at evaluation time
    student_name: Optional[str] = Field(default=None, max_length=255)
    student_sport: Optional[str] = Field(default=None, max_length=64)
    student_position: Optional[str] = Field(default=None, max_length=64)
    student_school_id: Optional[str] = Field(default=None, max_length=32)

    status: str = Field(default="draft", max_length=16, index=True)
    submitted_at: Optional[datetime] = Field(default=None, sa_type=DateTime)
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now}, sa_type=DateTime)


class EvaluationSubmissionResponse(Base, table=True):
    """Table: evaluation_submission_responses"""

    __tablename__ = "evaluation_submission_responses"
    __table_args__ = (UniqueConstraint("submission_id", "field_id", name="uq_evaluation_responses_submission_field"),)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=32)
    submission_id: str = Field(foreign_key="evaluation_submissions.id", index=True, max_length=32)
    field_id: str = Field(foreign_key="evaluation_form_fields.id", max_length=32)
    response_value: str = Field(sa_type=Text)
