"""
Evaluation form repositories.
"""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy import func, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.evaluation_forms import (
    EvaluationFormField,
    EvaluationFormTemplate,
    EvaluationSubmission,
    EvaluationSubmissionResponse,
)
from .base import QueryBuilder, SqlRepository


class EvaluationFormTemplateRepository(SqlRepository[EvaluationFormTemplate]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, EvaluationFormTemplate)

    async def list_templates(self, status: Optional[str] = None) -> List[EvaluationFormTemplate]:
        stmt = QueryBuilder.apply_filters(select(EvaluationFormTemplate), EvaluationFormTemplate, {"status": status})
        result = await self.session.execute(stmt.order_by(EvaluationFormTemplate.created_at.desc()))
        return list(result.scalars().all())


class EvaluationFormFieldRepository(SqlRepository[EvaluationFormField]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, EvaluationFormField)

    async def list_for_template(self, template_id: str) -> List[EvaluationFormField]:
        stmt = (
            select(EvaluationFormField)
            .where(EvaluationFormField.form_template_id == template_id)
            .order_by(EvaluationFormField.order_index, EvaluationFormField.id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def delete_for_template(self, template_id: str) -> None:
        for field in await self.list_for_template(template_id):
            await self.session.delete(field)


class EvaluationSubmissionRepository(SqlRepository[EvaluationSubmission]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, EvaluationSubmission)

    async def list_submissions(
        self,
        form_template_id: Optional[str] = None,
        submitted_by: Optional[str] = None,
        status: Optional[str] = None,
    ) -> List[EvaluationSubmission]:
        stmt = QueryBuilder.apply_filters(
            select(EvaluationSubmission),
            EvaluationSubmission,
            {"form_template_id": form_template_id, "submitted_by": submitted_by, "status": status},
        )
        result = await self.session.execute(stmt.order_by(EvaluationSubmission.created_at.desc()))
        return list(result.scalars().all())

    async def count_for_template(self, template_id: str, status: Optional[str] = None) -> int:
        stmt = select(func.count()).select_from(EvaluationSubmission).where(
            EvaluationSubmission.form_template_id == template_id
        )
        if status is not None:
            stmt = stmt.where(EvaluationSubmission.status == status)
        result = await self.session.execute(stmt)
        return int(result.scalar_one())

    async def detach_student(self, student_id: str) -> None:
        """Clear the student link; the profile snapshot columns are kept."""
        await self.session.execute(
            update(EvaluationSubmission)
            .where(EvaluationSubmission.student_id == student_id)
            .values(student_id=None)
        )


class EvaluationResponseRepository(SqlRepository[EvaluationSubmissionResponse]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, EvaluationSubmissionResponse)

    async def list_for_submission(self, submission_id: str) -> List[EvaluationSubmissionResponse]:
        stmt = select(EvaluationSubmissionResponse).where(EvaluationSubmissionResponse.submission_id == submission_id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_for_field(self, field_id: str, submitted_only: bool = True) -> List[EvaluationSubmissionResponse]:
        stmt = select(EvaluationSubmissionResponse).where(EvaluationSubmissionResponse.field_id == field_id)
        if submitted_only:
            stmt = stmt.join(
                EvaluationSubmission, EvaluationSubmission.id == EvaluationSubmissionResponse.submission_id
            ).where(EvaluationSubmission.status == "submitted")
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def delete_for_submission(self, submission_id: str) -> None:
        for response in await self.list_for_submission(submission_id):
            await self.session.delete(response)
