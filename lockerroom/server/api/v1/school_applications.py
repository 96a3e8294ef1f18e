"""
School Application Endpoints.

Public onboarding requests from schools and their review by system admins.
"""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, status

from lockerroom.core.database.entities.schools import SchoolApplication
from lockerroom.core.models.io.schools import ApplicationDecision, SchoolApplicationCreate, SchoolApplicationRead
from lockerroom.server.services import school_applications as application_service
from lockerroom.server.services.deps import CurrentUserDep, ReposDep

router = APIRouter(tags=["school-applications"])


@router.post(
    "",
    response_model=SchoolApplicationRead,
    status_code=status.HTTP_201_CREATED,
    summary="Submit School Application",
    description="Apply for a school to join the platform. No authentication required.",
)
async def submit_application(body: SchoolApplicationCreate, repos: ReposDep) -> SchoolApplication:
    return await application_service.submit(repos, body)


@router.get("", response_model=List[SchoolApplicationRead], summary="List School Applications")
async def list_applications(
    user: CurrentUserDep, repos: ReposDep, status: Optional[str] = None
) -> List[SchoolApplication]:
    return await application_service.list_applications(repos, user, status)


@router.post(
    "/{application_id}/approve",
    response_model=SchoolApplicationRead,
    summary="Approve School Application",
    description="Create the school, with its enrollment limit set to the expected number of students.",
    responses={
        404: {"description": "Application not found"},
        409: {"description": "Application was already decided"},
    },
)
async def approve_application(
    application_id: str, user: CurrentUserDep, repos: ReposDep, body: Optional[ApplicationDecision] = None
) -> SchoolApplication:
    return await application_service.approve(repos, user, application_id, notes=body.notes if body else None)


@router.post(
    "/{application_id}/reject",
    response_model=SchoolApplicationRead,
    summary="Reject School Application",
    responses={
        404: {"description": "Application not found"},
        409: {"description": "Application was already decided"},
    },
)
async def reject_application(
    application_id: str, user: CurrentUserDep, repos: ReposDep, body: Optional[ApplicationDecision] = None
) -> SchoolApplication:
    return await application_service.reject(repos, user, application_id, notes=body.notes if body else None)
