"""
School Application Service.

Prospective schools apply publicly; system admins approve (which creates
the school) or reject. Only pending applications can be decided.
"""

from __future__ import annotations

from typing import List, Optional

from lockerroom.core.database.base import utc_now
from lockerroom.core.database.entities.schools import School, SchoolApplication
from lockerroom.core.database.entities.users import User
from lockerroom.core.database.repositories import SqlRepoBundle
from lockerroom.core.errors import ConflictError, DomainValidationError, NotFoundError
from lockerroom.core.logging_config import get_logger
from lockerroom.core.models.domain.enums import ApplicationStatus, NotificationType
from lockerroom.core.models.domain.roles import Role
from lockerroom.core.models.io.schools import SchoolApplicationCreate
from lockerroom.server.services import notifications
from lockerroom.server.services.auth import ensure_roles

logger = get_logger(__name__)


async def submit(repos: SqlRepoBundle, data: SchoolApplicationCreate) -> SchoolApplication:
    if "@" not in data.contact_email:
        raise DomainValidationError("A valid contact e-mail is required")
    application = await repos.school_applications.create(
        SchoolApplication(
            school_name=data.school_name.strip(),
            contact_name=data.contact_name.strip(),
            contact_email=data.contact_email.strip().lower(),
            contact_phone=data.contact_phone,
            address=data.address,
            expected_students=data.expected_students,
            message=data.message,
        )
    )
    logger.info(f"School application {application.id} received for '{application.school_name}'")
    return application


async def list_applications(repos: SqlRepoBundle, admin: User, status: Optional[str] = None) -> List[SchoolApplication]:
    ensure_roles(admin, Role.system_admin)
    if status is not None:
        try:
            ApplicationStatus(status)
        except ValueError as e:
            raise DomainValidationError(f"Unknown application status '{status}'") from e
    return await repos.school_applications.list(filters={"status": status})


async def _get_pending(repos: SqlRepoBundle, application_id: str) -> SchoolApplication:
    application = await repos.school_applications.get_by_id(application_id)
    if application is None:
        raise NotFoundError("School application", application_id)
    if application.status != ApplicationStatus.pending.value:
        raise ConflictError(f"Application has already been {application.status}")
    return application


async def approve(
    repos: SqlRepoBundle, admin: User, application_id: str, notes: Optional[str] = None
) -> SchoolApplication:
    """
    Approve an application and create its school.

    The new school's enrollment limit is the applicant's expected student count.

    Raises:
        ConflictError: If the application is no longer pending.
    """
    ensure_roles(admin, Role.system_admin)
    application = await _get_pending(repos, application_id)

    school = School(
        name=application.school_name,
        address=application.address,
        contact_email=application.contact_email,
        contact_phone=application.contact_phone,
        max_students=application.expected_students,
    )
    repos.session.add(school)
    await repos.session.flush()

    application.status = ApplicationStatus.approved.value
    application.review_notes = notes
    application.reviewed_by = admin.id
    application.reviewed_at = utc_now()
    application.school_id = school.id
    application = await repos.school_applications.update(application)

    await notifications.notify_roles(
        repos,
        [Role.system_admin],
        NotificationType.school_created,
        "New school",
        f"{school.name} was approved and added to the platform",
        entity_type="school",
        entity_id=school.id,
        related_user_id=admin.id,
        exclude_user_id=admin.id,
    )
    logger.info(f"School application {application.id} approved by {admin.id}, school {school.id} created")
    return application


async def reject(
    repos: SqlRepoBundle, admin: User, application_id: str, notes: Optional[str] = None
) -> SchoolApplication:
    ensure_roles(admin, Role.system_admin)
    application = await _get_pending(repos, application_id)
    application.status = ApplicationStatus.rejected.value
    application.review_notes = notes
    application.reviewed_by = admin.id
    application.reviewed_at = utc_now()
    logger.info(f"School application {application.id} rejected by {admin.id}")
    return await repos.school_applications.update(application)
