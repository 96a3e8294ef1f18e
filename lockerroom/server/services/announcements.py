"""
Announcement Service.

Announcements are posts with ``type='announcement'`` and a scope:

- ``school``: members of one school (its students and school admins)
- ``global``: everyone
- ``staff``: platform staff roles

School admins announce to their own school; system admins may use any scope.
"""

from __future__ import annotations

from typing import List, Optional

from lockerroom.core.database.entities.posts import Post
from lockerroom.core.database.entities.users import User
from lockerroom.core.database.repositories import SqlRepoBundle
from lockerroom.core.errors import DomainValidationError, NotFoundError, PermissionDeniedError
from lockerroom.core.logging_config import get_logger
from lockerroom.core.models.domain.enums import AnnouncementScope, NotificationType, PostStatus, PostType
from lockerroom.core.models.domain.roles import STAFF_ROLES, Role, is_staff_role, is_system_admin
from lockerroom.core.models.io.posts import AnnouncementCreate
from lockerroom.server.services import feed, notifications

logger = get_logger(__name__)


async def create_announcement(repos: SqlRepoBundle, author: User, data: AnnouncementCreate) -> Post:
    """
    Publish an announcement and notify its audience.

    Raises:
        PermissionDeniedError: If the author may not announce to the requested scope.
        DomainValidationError: On an unknown scope or a school scope without a school.
    """
    try:
        scope = AnnouncementScope(data.scope)
    except ValueError as e:
        raise DomainValidationError(f"Unknown announcement scope '{data.scope}'") from e

    if is_system_admin(author.role):
        school_id = data.school_id if scope is AnnouncementScope.school else None
    elif author.role == Role.school_admin.value:
        if scope is not AnnouncementScope.school:
            raise PermissionDeniedError("School admins can only announce to their own school")
        if data.school_id and data.school_id != author.school_id:
            raise PermissionDeniedError("School admins can only announce to their own school")
        school_id = author.school_id
    else:
        raise PermissionDeniedError("You do not have permission to create announcements")

    if scope is AnnouncementScope.school:
        if not school_id:
            raise DomainValidationError("A school is required for school announcements")
        if await repos.schools.get_by_id(school_id) is None:
            raise NotFoundError("School", school_id)

    post = await repos.posts.create(
        Post(
            author_id=author.id,
            school_id=school_id,
            title=data.title.strip(),
            caption=data.message.strip(),
            media_url=data.media_url,
            media_type=data.media_type,
            status=PostStatus.ready.value,
            type=PostType.announcement.value,
            scope=scope.value,
        )
    )

    if scope is AnnouncementScope.school:
        audience = await repos.users.list_by_roles([Role.student.value, Role.school_admin.value], school_id=school_id)
    elif scope is AnnouncementScope.staff:
        audience = await repos.users.list_by_roles([r.value for r in STAFF_ROLES])
    else:
        audience = await repos.users.list_by_roles([r.value for r in Role])
    await notifications.notify_many(
        repos,
        [u.id for u in audience],
        NotificationType.announcement,
        post.title or "Announcement",
        post.caption or "",
        entity_type="post",
        entity_id=post.id,
        related_user_id=author.id,
        exclude_user_id=author.id,
        metadata={"scope": scope.value},
    )
    logger.info(f"Announcement {post.id} ({scope.value}) published by {author.id} to {len(audience)} users")
    return post


async def list_announcements(repos: SqlRepoBundle, viewer: User, limit: Optional[int] = 50) -> List[Post]:
    """
    Announcements visible to ``viewer``, newest first.

    Global announcements are visible to everyone, school announcements to
    members of that school, staff announcements to staff roles. System
    admins see everything.
    """
    admin = is_system_admin(viewer.role)
    return await repos.posts.list_announcements(
        school_id=viewer.school_id,
        include_staff=admin or is_staff_role(viewer.role),
        include_all_schools=admin,
        limit=limit,
    )


async def delete_announcement(repos: SqlRepoBundle, user: User, post_id: str) -> None:
    post = await repos.posts.get_by_id(post_id)
    if post is None or post.type != PostType.announcement.value:
        raise NotFoundError("Announcement", post_id)
    await feed.delete_post(repos, user, post.id)
