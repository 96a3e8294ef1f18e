"""
Evaluation Form Endpoints.

Form templates designed by scout admins and the evaluations scouts fill in
with them. Evaluation routes live under ``/submissions``.
"""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Response, status

from lockerroom.core.models.io.evaluation_forms import (
    EvaluationCreate,
    EvaluationRead,
    EvaluationUpdate,
    TemplateCreate,
    TemplateRead,
    TemplateStats,
    TemplateUpdate,
)
from lockerroom.server.services import evaluation_forms as form_service
from lockerroom.server.services.deps import CurrentUserDep, ReposDep

router = APIRouter(tags=["evaluation-forms"])


@router.get(
    "",
    response_model=List[TemplateRead],
    summary="List Forms",
    description="Scout admins see every form; scouts only active ones.",
)
async def list_templates(user: CurrentUserDep, repos: ReposDep, status: Optional[str] = None):
    return await form_service.list_templates(repos, user, status)


@router.post(
    "",
    response_model=TemplateRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Form",
    responses={400: {"description": "Unknown field type or choice field without options"}},
)
async def create_template(body: TemplateCreate, user: CurrentUserDep, repos: ReposDep):
    """
    Create a draft form.

    Field types: `short_text`, `paragraph`, `star_rating`, `multiple_choice`,
    `multiple_selection`, `number`, `date`, `dropdown`. Choice fields need
    `options`; `validation_rules` may set `min`/`max` for numbers and
    `min_length`/`max_length` for text.
    """
    return await form_service.create_template(repos, user, body)


@router.get("/submissions", response_model=List[EvaluationRead], summary="List Evaluations")
async def list_evaluations(
    user: CurrentUserDep,
    repos: ReposDep,
    form_template_id: Optional[str] = None,
    status: Optional[str] = None,
):
    return await form_service.list_evaluations(repos, user, form_template_id=form_template_id, status=status)


@router.post(
    "/submissions",
    response_model=EvaluationRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Evaluation",
    description=(
        "Fill in an active form. `responses` maps field ids to values. "
        "With `status=submitted` every required field must be answered."
    ),
    responses={
        400: {"description": "Missing required answer or invalid value"},
        409: {"description": "Form is not active"},
    },
)
async def create_evaluation(body: EvaluationCreate, user: CurrentUserDep, repos: ReposDep):
    return await form_service.create_evaluation(repos, user, body)


@router.get("/submissions/{evaluation_id}", response_model=EvaluationRead, summary="Get Evaluation")
async def get_evaluation(evaluation_id: str, user: CurrentUserDep, repos: ReposDep):
    return await form_service.get_evaluation(repos, user, evaluation_id)


@router.patch(
    "/submissions/{evaluation_id}",
    response_model=EvaluationRead,
    summary="Update Evaluation",
    description="Update or submit one of the caller's draft evaluations.",
)
async def update_evaluation(evaluation_id: str, body: EvaluationUpdate, user: CurrentUserDep, repos: ReposDep):
    return await form_service.update_evaluation(repos, user, evaluation_id, body)


@router.delete("/submissions/{evaluation_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete Evaluation")
async def delete_evaluation(evaluation_id: str, user: CurrentUserDep, repos: ReposDep) -> Response:
    await form_service.delete_evaluation(repos, user, evaluation_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{template_id}", response_model=TemplateRead, summary="Get Form")
async def get_template(template_id: str, user: CurrentUserDep, repos: ReposDep):
    return await form_service.get_template(repos, user, template_id)


@router.patch(
    "/{template_id}",
    response_model=TemplateRead,
    summary="Update Form",
    description="Edit a draft or active form. Replacing the fields of an active form bumps its version.",
    responses={409: {"description": "Form is archived, or fields are referenced by evaluations"}},
)
async def update_template(template_id: str, body: TemplateUpdate, user: CurrentUserDep, repos: ReposDep):
    return await form_service.update_template(repos, user, template_id, body)


@router.post("/{template_id}/publish", response_model=TemplateRead, summary="Publish Form")
async def publish_template(template_id: str, user: CurrentUserDep, repos: ReposDep):
    return await form_service.publish_template(repos, user, template_id)


@router.post("/{template_id}/archive", response_model=TemplateRead, summary="Archive Form")
async def archive_template(template_id: str, user: CurrentUserDep, repos: ReposDep):
    return await form_service.archive_template(repos, user, template_id)


@router.delete(
    "/{template_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Form",
    responses={409: {"description": "Form has evaluations"}},
)
async def delete_template(template_id: str, user: CurrentUserDep, repos: ReposDep) -> Response:
    await form_service.delete_template(repos, user, template_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{template_id}/stats", response_model=TemplateStats, summary="Get Form Stats")
async def template_stats(template_id: str, user: CurrentUserDep, repos: ReposDep):
    return await form_service.template_stats(repos, user, template_id)
