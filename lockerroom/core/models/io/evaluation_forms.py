"""
Evaluation form I/O models.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class FieldCreate(BaseModel):
    field_type: str
    label: str = Field(min_length=1, max_length=255)
    placeholder: Optional[str] = None
    help_text: Optional[str] = None
    required: bool = False
    order_index: Optional[int] = None
    options: Optional[List[str]] = None
    validation_rules: Optional[Dict[str, Any]] = None


class FieldRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    form_template_id: str
    field_type: str
    label: str
    placeholder: Optional[str] = None
    help_text: Optional[str] = None
    required: bool
    order_index: int
    options: Optional[List[str]] = None
    validation_rules: Optional[Dict[str, Any]] = None


class TemplateCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    fields: List[FieldCreate] = []


class TemplateUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    fields: Optional[List[FieldCreate]] = None


class TemplateRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    description: Optional[str] = None
    status: str
    version: int
    created_by: str
    published_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
    fields: List[FieldRead] = []


class EvaluationCreate(BaseModel):
    form_template_id: str
    student_id: Optional[str] = None
    responses: Dict[str, Any] = {}
    status: str = "draft"


class EvaluationUpdate(BaseModel):
    student_id: Optional[str] = None
    responses: Optional[Dict[str, Any]] = None
    status: Optional[str] = None


class EvaluationRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    form_template_id: str
    submitted_by: str
    student_id: Optional[str] = None
    student_name: Optional[str] = None
    student_sport: Optional[str] = None
    student_position: Optional[str] = None
    student_school_id: Optional[str] = None
    status: str
    submitted_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
    responses: Dict[str, Any] = {}


class TemplateStats(BaseModel):
    template_id: str
    submission_count: int
    submitted_count: int
    rating_averages: Dict[str, Optional[float]]
