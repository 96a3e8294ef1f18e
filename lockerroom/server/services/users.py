"""
User Service.

Profile reads and edits, plus the staff-account administration used by
system admins (creating scouts and other staff, freezing accounts).
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from lockerroom.core.database.entities.users import User
from lockerroom.core.database.repositories import SqlRepoBundle
from lockerroom.core.errors import DomainValidationError, NotFoundError, PermissionDeniedError
from lockerroom.core.logging_config import get_logger
from lockerroom.core.models.domain.enums import NotificationType
from lockerroom.core.models.domain.roles import Role, STAFF_ROLES, is_scout_role
from lockerroom.core.models.io.users import UserUpdate
from lockerroom.server.services import follows, notifications
from lockerroom.server.services.auth import create_user, ensure_roles

logger = get_logger(__name__)


async def get_user(repos: SqlRepoBundle, user_id: str) -> User:
    user = await repos.users.get_by_id(user_id)
    if user is None:
        raise NotFoundError("User", user_id)
    return user


async def get_profile(repos: SqlRepoBundle, user_id: str, viewer: Optional[User] = None) -> Dict[str, Any]:
    """
    Public profile of a user.

    Includes follower/following counts, the student profile for students and
    whether ``viewer`` follows this user.
    """
    user = await get_user(repos, user_id)
    followers_count, following_count = await follows.follow_counts(repos, user.id)
    student = await repos.students.get_by_user_id(user.id) if user.role == Role.student.value else None
    return {
        "id": user.id,
        "name": user.name,
        "role": user.role,
        "school_id": user.school_id,
        "bio": user.bio,
        "profile_pic_url": user.profile_pic_url,
        "created_at": user.created_at,
        "followers_count": followers_count,
        "following_count": following_count,
        "is_following": bool(viewer) and await follows.is_following(repos, viewer.id, user.id),
        "student": student,
    }


async def update_profile(repos: SqlRepoBundle, user: User, data: UserUpdate) -> User:
    changes = data.model_dump(exclude_unset=True)
    if "name" in changes and not (changes["name"] or "").strip():
        raise DomainValidationError("Name cannot be empty")
    for key, value in changes.items():
        setattr(user, key, value.strip() if isinstance(value, str) and key == "name" else value)
    user = await repos.users.update(user)

    # Keep the student profile in sync with the account
    if user.role == Role.student.value:
        student = await repos.students.get_by_user_id(user.id)
        if student is not None:
            if "name" in changes:
                student.name = user.name
            if "profile_pic_url" in changes:
                student.profile_pic_url = user.profile_pic_url
            if "bio" in changes:
                student.bio = user.bio
            await repos.students.update(student)
    return user


async def create_staff_user(
    repos: SqlRepoBundle, admin: User, *, email: str, password: str, name: str, role: str
) -> User:
    """
    Create a staff account (scouts, moderators, finance, ...).

    Students and school admins are created through their school instead.

    Raises:
        PermissionDeniedError: Unless ``admin`` is a system admin.
        DomainValidationError: If ``role`` is not a staff role.
    """
    ensure_roles(admin, Role.system_admin)
    if role not in {r.value for r in STAFF_ROLES}:
        raise DomainValidationError(f"'{role}' is not a staff role")
    user = await create_user(repos, email=email, password=password, name=name, role=role)
    if is_scout_role(role):
        await notifications.notify_roles(
            repos,
            [Role.scout_admin, Role.system_admin],
            NotificationType.scout_created,
            "New scout added",
            f"{user.name} joined as {role.replace('_', ' ')}",
            entity_type="user",
            entity_id=user.id,
            related_user_id=user.id,
            exclude_user_id=admin.id,
        )
    logger.info(f"System admin {admin.id} created {role} account {user.id}")
    return user


async def list_users(
    repos: SqlRepoBundle, admin: User, *, role: Optional[str] = None, limit: int = 100, offset: int = 0
) -> List[User]:
    ensure_roles(admin, Role.system_admin, Role.support)
    return await repos.users.list(limit=limit, offset=offset, filters={"role": role})


async def set_frozen(repos: SqlRepoBundle, admin: User, user_id: str, frozen: bool) -> User:
    ensure_roles(admin, Role.system_admin)
    user = await get_user(repos, user_id)
    if user.id == admin.id:
        raise PermissionDeniedError("You cannot freeze your own account")
    user.is_frozen = frozen
    logger.info(f"User {user_id} {'frozen' if frozen else 'unfrozen'} by {admin.id}")
    return await repos.users.update(user)
