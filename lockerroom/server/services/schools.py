"""
School Service.

School administration: schools, their admins, the student roster and the
enrollment limit that caps it.

Enrollment rules:
- ``can_enroll`` is ``current_count < max_students``
- warning level is ``approaching`` from 80% utilization and ``at_limit`` from 100%
- adding a student when ``current_count >= max_students`` raises ``EnrollmentLimitError``
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from lockerroom.core.database.entities.schools import School, Student
from lockerroom.core.database.entities.users import User
from lockerroom.core.database.repositories import SqlRepoBundle
from lockerroom.core.errors import EnrollmentLimitError, NotFoundError, PermissionDeniedError
from lockerroom.core.logging_config import get_logger
from lockerroom.core.models.domain.enums import NotificationType, WarningLevel
from lockerroom.core.models.domain.roles import Role, is_system_admin
from lockerroom.core.models.io.schools import SchoolCreate, SchoolUpdate, StudentCreate, StudentUpdate
from lockerroom.server.core.config import settings
from lockerroom.server.services import notifications
from lockerroom.server.services.auth import create_user, ensure_roles
from lockerroom.server.services.subscriptions import validate_frequency

logger = get_logger(__name__)

APPROACHING_THRESHOLD = 80.0
AT_LIMIT_THRESHOLD = 100.0


def compute_enrollment_status(current_count: int, max_students: int) -> Dict[str, Any]:
    """
    Enrollment figures for a school.

    Args:
        current_count: Students currently enrolled.
        max_students: The school's enrollment limit.

    Returns:
        Dict with ``current_count``, ``max_students``, ``available_slots``,
        ``utilization_percentage`` (2 decimal places), ``warning_level`` and ``can_enroll``.
    """
    utilization = round(current_count / max_students * 100, 2) if max_students > 0 else 100.0
    if utilization >= AT_LIMIT_THRESHOLD:
        warning = WarningLevel.at_limit
    elif utilization >= APPROACHING_THRESHOLD:
        warning = WarningLevel.approaching
    else:
        warning = WarningLevel.none
    return {
        "current_count": current_count,
        "max_students": max_students,
        "available_slots": max(0, max_students - current_count),
        "utilization_percentage": utilization,
        "warning_level": warning.value,
        "can_enroll": current_count < max_students,
    }


async def get_school(repos: SqlRepoBundle, school_id: str) -> School:
    school = await repos.schools.get_by_id(school_id)
    if school is None:
        raise NotFoundError("School", school_id)
    return school


def ensure_school_access(user: User, school_id: str) -> None:
    """System admins see every school; school admins only their own."""
    if is_system_admin(user.role):
        return
    if user.role != Role.school_admin.value or user.school_id != school_id:
        raise PermissionDeniedError("You do not have access to this school")


async def admin_school(repos: SqlRepoBundle, admin: User) -> School:
    """The school managed by a school admin."""
    ensure_roles(admin, Role.school_admin)
    if not admin.school_id:
        raise PermissionDeniedError("No school is linked to this account")
    return await get_school(repos, admin.school_id)


async def enrollment_status(repos: SqlRepoBundle, school: School) -> Dict[str, Any]:
    count = await repos.students.count_for_school(school.id)
    return compute_enrollment_status(count, school.max_students)


async def create_school(repos: SqlRepoBundle, admin: User, data: SchoolCreate) -> School:
    ensure_roles(admin, Role.system_admin)
    frequency = validate_frequency(data.payment_frequency)
    school = await repos.schools.create(
        School(
            name=data.name.strip(),
            address=data.address,
            contact_email=data.contact_email,
            contact_phone=data.contact_phone,
            profile_pic_url=data.profile_pic_url,
            payment_amount=data.payment_amount,
            payment_frequency=frequency.value,
            max_students=data.max_students or settings.payments.default_max_students,
        )
    )
    await notifications.notify_roles(
        repos,
        [Role.system_admin],
        NotificationType.school_created,
        "New school",
        f"{school.name} was added to the platform",
        entity_type="school",
        entity_id=school.id,
        related_user_id=admin.id,
        exclude_user_id=admin.id,
    )
    logger.info(f"School {school.id} created by {admin.id}")
    return school


async def update_school(repos: SqlRepoBundle, user: User, school_id: str, data: SchoolUpdate) -> School:
    school = await get_school(repos, school_id)
    ensure_school_access(user, school.id)
    for key, value in data.model_dump(exclude_unset=True).items():
        setattr(school, key, value)
    return await repos.schools.update(school)


async def create_school_admin(
    repos: SqlRepoBundle, admin: User, school_id: str, *, email: str, name: str, password: str
) -> User:
    ensure_roles(admin, Role.system_admin)
    school = await get_school(repos, school_id)
    school_admin = await create_user(
        repos, email=email, password=password, name=name, role=Role.school_admin, school_id=school.id
    )
    await notifications.notify(
        repos,
        school_admin.id,
        NotificationType.school_admin_created,
        "Welcome to LockerRoom",
        f"You are now the administrator of {school.name}",
        entity_type="school",
        entity_id=school.id,
        related_user_id=admin.id,
    )
    logger.info(f"School admin {school_admin.id} created for school {school.id}")
    return school_admin


async def list_school_admins(repos: SqlRepoBundle, school_id: str) -> List[User]:
    return await repos.users.list_by_roles([Role.school_admin.value], school_id=school_id)


async def list_schools(
    repos: SqlRepoBundle, admin: User, *, is_active: Optional[bool] = None, limit: int = 100, offset: int = 0
) -> List[School]:
    ensure_roles(admin, Role.system_admin, Role.finance, Role.support, Role.analyst)
    return await repos.schools.list_schools(is_active=is_active, limit=limit, offset=offset)


async def set_school_active(repos: SqlRepoBundle, admin: User, school_id: str, active: bool) -> School:
    ensure_roles(admin, Role.system_admin)
    school = await get_school(repos, school_id)
    school.is_active = active
    logger.info(f"School {school_id} {'enabled' if active else 'disabled'} by {admin.id}")
    return await repos.schools.update(school)


async def disable_school(repos: SqlRepoBundle, admin: User, school_id: str) -> School:
    return await set_school_active(repos, admin, school_id, False)


async def enable_school(repos: SqlRepoBundle, admin: User, school_id: str) -> School:
    return await set_school_active(repos, admin, school_id, True)


async def add_student(repos: SqlRepoBundle, admin: User, data: StudentCreate) -> Student:
    """
    Enroll a student in the admin's school, creating their login.

    Raises:
        EnrollmentLimitError: If the school is already at its enrollment limit.
        ConflictError: If the e-mail is already taken.
    """
    school = await admin_school(repos, admin)
    # Serialises concurrent enrollments so the count below cannot go stale
    school = await repos.schools.get_for_update(school.id) or school
    if not school.is_active:
        raise PermissionDeniedError("School subscription is inactive")
    current = await repos.students.count_for_school(school.id)
    if current >= school.max_students:
        logger.info(f"Enrollment refused for school {school.id}: {current}/{school.max_students}")
        raise EnrollmentLimitError(current, school.max_students)

    user = await create_user(
        repos,
        email=data.email,
        password=data.password,
        name=data.name,
        role=Role.student,
        school_id=school.id,
        commit=False,
    )
    profile = data.model_dump(exclude={"email", "password"})
    profile["name"] = user.name
    student = Student(user_id=user.id, school_id=school.id, **profile)
    user.bio = student.bio
    user.profile_pic_url = student.profile_pic_url
    student = await repos.students.create(student)
    logger.info(f"Student {student.id} enrolled in school {school.id} ({current + 1}/{school.max_students})")
    return student


async def list_students(
    repos: SqlRepoBundle,
    user: User,
    school_id: str,
    *,
    search: Optional[str] = None,
    limit: Optional[int] = None,
    offset: Optional[int] = None,
) -> List[Student]:
    ensure_school_access(user, school_id)
    await get_school(repos, school_id)
    return await repos.students.search(school_id, search=search, limit=limit, offset=offset)


async def get_student(repos: SqlRepoBundle, student_id: str) -> Student:
    student = await repos.students.get_by_id(student_id)
    if student is None:
        raise NotFoundError("Student", student_id)
    return student


async def update_student(repos: SqlRepoBundle, user: User, student_id: str, data: StudentUpdate) -> Student:
    student = await get_student(repos, student_id)
    ensure_school_access(user, student.school_id)
    changes = data.model_dump(exclude_unset=True)
    for key, value in changes.items():
        setattr(student, key, value)
    account = await repos.users.get_by_id(student.user_id)
    if account is not None:
        for key in ("name", "bio", "profile_pic_url"):
            if key in changes:
                setattr(account, key, changes[key])
        repos.session.add(account)
    return await repos.students.update(student)


async def remove_student(repos: SqlRepoBundle, user: User, student_id: str) -> None:
    """
    Remove a student from their school.

    The login is frozen rather than deleted so posts and history stay intact.
    """
    student = await get_student(repos, student_id)
    ensure_school_access(user, student.school_id)
    account = await repos.users.get_by_id(student.user_id)
    if account is not None:
        account.is_frozen = True
        account.school_id = None
        repos.session.add(account)
    await repos.posts.detach_student(student.id)
    await repos.evaluations.detach_student(student.id)
    await repos.students.delete(student.id)
    logger.info(f"Student {student_id} removed from school {student.school_id} by {user.id}")


async def school_stats(repos: SqlRepoBundle, user: User, school_id: str) -> Dict[str, int]:
    ensure_school_access(user, school_id)
    school = await get_school(repos, school_id)
    post_ids = await repos.posts.ids_for(school_id=school.id)
    return {
        "students": await repos.students.count_for_school(school.id),
        "posts": len(post_ids),
        "likes": await repos.likes.total_for_posts(post_ids),
        "comments": await repos.comments.total_for_posts(post_ids),
        "views": await repos.views.total_for_posts(post_ids),
    }
