"""
School Management Endpoints.

System admin management of schools: onboarding, school admin accounts,
activation and the subscription bookkeeping (renewals, enrollment limit
and billing frequency changes, payment history and expiry reminders).
"""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from lockerroom.core.database.entities.schools import School, SchoolPaymentRecord, Student
from lockerroom.core.database.entities.users import User
from lockerroom.core.models.domain.roles import Role
from lockerroom.core.models.io.schools import (
    EnrollmentStatus,
    FrequencyChange,
    PaymentRecordRead,
    RenewalRequest,
    SchoolAdminCreate,
    SchoolCreate,
    SchoolRead,
    SchoolStats,
    SchoolUpdate,
    StudentLimitChange,
    StudentRead,
)
from lockerroom.core.models.io.users import UserRead
from lockerroom.server.services import schools as school_service
from lockerroom.server.services import subscriptions as subscription_service
from lockerroom.server.services.deps import CurrentUserDep, ReposDep, require_roles

router = APIRouter(tags=["schools"])


@router.post(
    "",
    response_model=SchoolRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create School",
    description="Onboard a school. `max_students` defaults to the configured enrollment limit.",
    responses={
        201: {"description": "School created"},
        400: {"description": "Invalid payment frequency"},
        403: {"description": "Caller is not a system admin"},
    },
)
async def create_school(body: SchoolCreate, user: CurrentUserDep, repos: ReposDep) -> School:
    return await school_service.create_school(repos, user, body)


@router.get("", response_model=List[SchoolRead], summary="List Schools")
async def list_schools(
    user: CurrentUserDep,
    repos: ReposDep,
    is_active: Optional[bool] = None,
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
) -> List[School]:
    return await school_service.list_schools(repos, user, is_active=is_active, limit=limit, offset=offset)


@router.get(
    "/payments",
    response_model=List[PaymentRecordRead],
    summary="List Payment Records",
    description="Payment history across schools, newest first. Filter by school or payment type.",
)
async def list_payment_records(
    user: CurrentUserDep,
    repos: ReposDep,
    school_id: Optional[str] = None,
    payment_type: Optional[str] = None,
    limit: Optional[int] = Query(None, ge=1),
    offset: Optional[int] = Query(None, ge=0),
) -> List[SchoolPaymentRecord]:
    return await subscription_service.list_payment_records(
        repos, user, school_id=school_id, payment_type=payment_type, limit=limit, offset=offset
    )


@router.get(
    "/expiring",
    response_model=List[SchoolRead],
    summary="List Expiring Subscriptions",
    description="Active schools whose subscription expires within `within_days` (default from configuration).",
    dependencies=[Depends(require_roles(Role.finance))],
)
async def list_expiring(
    repos: ReposDep,
    within_days: Optional[int] = Query(None, ge=1),
) -> List[School]:
    return await subscription_service.expiring_subscriptions(repos, within_days=within_days)


@router.post(
    "/expiring/notify",
    summary="Send Expiry Reminders",
    description="Notify the admins of every school whose subscription is about to expire.",
    dependencies=[Depends(require_roles(Role.finance))],
)
async def notify_expiring(
    repos: ReposDep,
    within_days: Optional[int] = Query(None, ge=1),
):
    return await subscription_service.notify_expiring_subscriptions(repos, within_days=within_days)


@router.get(
    "/{school_id}",
    response_model=SchoolRead,
    summary="Get School",
    responses={404: {"description": "School not found"}},
)
async def get_school(school_id: str, user: CurrentUserDep, repos: ReposDep) -> School:
    school_service.ensure_school_access(user, school_id)
    return await school_service.get_school(repos, school_id)


@router.patch("/{school_id}", response_model=SchoolRead, summary="Update School")
async def update_school(school_id: str, body: SchoolUpdate, user: CurrentUserDep, repos: ReposDep) -> School:
    return await school_service.update_school(repos, user, school_id, body)


@router.post("/{school_id}/disable", response_model=SchoolRead, summary="Disable School")
async def disable_school(school_id: str, user: CurrentUserDep, repos: ReposDep) -> School:
    """Disabled schools cannot enroll new students."""
    return await school_service.disable_school(repos, user, school_id)


@router.post("/{school_id}/enable", response_model=SchoolRead, summary="Enable School")
async def enable_school(school_id: str, user: CurrentUserDep, repos: ReposDep) -> School:
    return await school_service.enable_school(repos, user, school_id)


@router.post(
    "/{school_id}/admins",
    response_model=UserRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create School Admin",
    responses={409: {"description": "E-mail already registered"}},
)
async def create_school_admin(
    school_id: str, body: SchoolAdminCreate, user: CurrentUserDep, repos: ReposDep
) -> User:
    return await school_service.create_school_admin(
        repos, user, school_id, email=body.email, name=body.name, password=body.password
    )


@router.get("/{school_id}/admins", response_model=List[UserRead], summary="List School Admins")
async def list_school_admins(school_id: str, user: CurrentUserDep, repos: ReposDep) -> List[User]:
    school_service.ensure_school_access(user, school_id)
    return await school_service.list_school_admins(repos, school_id)


@router.get("/{school_id}/enrollment", response_model=EnrollmentStatus, summary="Get Enrollment Status")
async def get_enrollment(school_id: str, user: CurrentUserDep, repos: ReposDep):
    school_service.ensure_school_access(user, school_id)
    school = await school_service.get_school(repos, school_id)
    return await school_service.enrollment_status(repos, school)


@router.get("/{school_id}/students", response_model=List[StudentRead], summary="List School Students")
async def list_students(
    school_id: str,
    user: CurrentUserDep,
    repos: ReposDep,
    search: Optional[str] = None,
    limit: Optional[int] = Query(None, ge=1),
    offset: Optional[int] = Query(None, ge=0),
) -> List[Student]:
    return await school_service.list_students(repos, user, school_id, search=search, limit=limit, offset=offset)


@router.get("/{school_id}/stats", response_model=SchoolStats, summary="Get School Stats")
async def get_stats(school_id: str, user: CurrentUserDep, repos: ReposDep):
    return await school_service.school_stats(repos, user, school_id)


@router.post(
    "/{school_id}/renew",
    response_model=SchoolRead,
    summary="Renew Subscription",
    description=(
        "Record a subscription payment. Extends the expiry from the current expiry when still in the "
        "future, otherwise from now, and reactivates the school."
    ),
    responses={400: {"description": "Non-positive amount or invalid frequency"}},
)
async def renew(school_id: str, body: RenewalRequest, user: CurrentUserDep, repos: ReposDep) -> School:
    return await subscription_service.renew_subscription(
        repos, user, school_id, amount=body.amount, frequency=body.frequency, notes=body.notes
    )


@router.post(
    "/{school_id}/student-limit",
    response_model=SchoolRead,
    summary="Change Enrollment Limit",
    responses={400: {"description": "Limit below the number of enrolled students"}},
)
async def change_student_limit(
    school_id: str, body: StudentLimitChange, user: CurrentUserDep, repos: ReposDep
) -> School:
    return await subscription_service.change_student_limit(
        repos, user, school_id, new_limit=body.new_limit, amount=body.amount, notes=body.notes
    )


@router.post("/{school_id}/frequency", response_model=SchoolRead, summary="Change Billing Frequency")
async def change_frequency(school_id: str, body: FrequencyChange, user: CurrentUserDep, repos: ReposDep) -> School:
    return await subscription_service.change_frequency(
        repos, user, school_id, frequency=body.frequency, amount=body.amount, notes=body.notes
    )


@router.get("/{school_id}/payments", response_model=List[PaymentRecordRead], summary="List School Payment Records")
async def list_school_payments(
    school_id: str, user: CurrentUserDep, repos: ReposDep
) -> List[SchoolPaymentRecord]:
    return await subscription_service.list_payment_records(repos, user, school_id=school_id)
