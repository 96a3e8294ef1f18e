"""
School Admin Endpoints.

Roster management for the caller's own school. Every route resolves the
school from the authenticated school admin.
"""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Query, Response, status

from lockerroom.core.database.entities.schools import School, Student
from lockerroom.core.models.io.schools import (
    EnrollmentStatus,
    SchoolRead,
    SchoolStats,
    StudentCreate,
    StudentRead,
    StudentUpdate,
)
from lockerroom.server.services import schools as school_service
from lockerroom.server.services.deps import CurrentUserDep, ReposDep

router = APIRouter(tags=["school-admin"])


@router.get("/school", response_model=SchoolRead, summary="Get My School")
async def get_my_school(user: CurrentUserDep, repos: ReposDep) -> School:
    return await school_service.admin_school(repos, user)


@router.get("/enrollment", response_model=EnrollmentStatus, summary="Get Enrollment Status")
async def get_enrollment(user: CurrentUserDep, repos: ReposDep):
    """Current head count against the school's enrollment limit."""
    school = await school_service.admin_school(repos, user)
    return await school_service.enrollment_status(repos, school)


@router.get("/stats", response_model=SchoolStats, summary="Get School Stats")
async def get_stats(user: CurrentUserDep, repos: ReposDep):
    school = await school_service.admin_school(repos, user)
    return await school_service.school_stats(repos, user, school.id)


@router.post(
    "/students",
    response_model=StudentRead,
    status_code=status.HTTP_201_CREATED,
    summary="Add Student",
    description="Enroll a student in the caller's school, creating their login.",
    responses={
        201: {"description": "Student enrolled"},
        403: {"description": "Caller is not a school admin"},
        409: {"description": "Enrollment limit reached or e-mail already registered"},
    },
)
async def add_student(body: StudentCreate, user: CurrentUserDep, repos: ReposDep) -> Student:
    """
    Enroll a student.

    Fails with code `enrollment_limit_reached` once the school holds
    `max_students` students; a system admin has to raise the limit first.
    """
    return await school_service.add_student(repos, user, body)


@router.get("/students", response_model=List[StudentRead], summary="List Students")
async def list_students(
    user: CurrentUserDep,
    repos: ReposDep,
    search: Optional[str] = Query(None, description="Matches name, sport or position"),
    limit: Optional[int] = Query(None, ge=1),
    offset: Optional[int] = Query(None, ge=0),
) -> List[Student]:
    school = await school_service.admin_school(repos, user)
    return await school_service.list_students(repos, user, school.id, search=search, limit=limit, offset=offset)


@router.get("/students/{student_id}", response_model=StudentRead, summary="Get Student")
async def get_student(student_id: str, user: CurrentUserDep, repos: ReposDep) -> Student:
    student = await school_service.get_student(repos, student_id)
    school_service.ensure_school_access(user, student.school_id)
    return student


@router.patch("/students/{student_id}", response_model=StudentRead, summary="Update Student")
async def update_student(student_id: str, body: StudentUpdate, user: CurrentUserDep, repos: ReposDep) -> Student:
    return await school_service.update_student(repos, user, student_id, body)


@router.delete(
    "/students/{student_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove Student",
    description="Remove a student from the roster. Their login is frozen and their posts are kept.",
)
async def remove_student(student_id: str, user: CurrentUserDep, repos: ReposDep) -> Response:
    await school_service.remove_student(repos, user, student_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
