"""
Notification Service.

Creates inbox rows for users and serves the inbox. Fan-out helpers write
all rows in a single commit.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

from lockerroom.core.database.entities.notifications import Notification
from lockerroom.core.database.entities.users import User
from lockerroom.core.database.repositories import SqlRepoBundle
from lockerroom.core.errors import NotFoundError
from lockerroom.core.logging_config import get_logger
from lockerroom.core.models.domain.enums import NotificationType
from lockerroom.core.models.domain.roles import Role

logger = get_logger(__name__)


def _build(
    user_id: str,
    type_: NotificationType | str,
    title: str,
    message: str,
    entity_type: Optional[str],
    entity_id: Optional[str],
    related_user_id: Optional[str],
    metadata: Optional[Dict[str, Any]],
) -> Notification:
    return Notification(
        user_id=user_id,
        type=NotificationType(type_).value,
        title=title,
        message=message,
        entity_type=entity_type,
        entity_id=entity_id,
        related_user_id=related_user_id,
        meta=metadata,
    )


async def notify(
    repos: SqlRepoBundle,
    user_id: str,
    type_: NotificationType | str,
    title: str,
    message: str,
    *,
    entity_type: Optional[str] = None,
    entity_id: Optional[str] = None,
    related_user_id: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> Notification:
    notification = _build(user_id, type_, title, message, entity_type, entity_id, related_user_id, metadata)
    return await repos.notifications.create(notification)


async def notify_many(
    repos: SqlRepoBundle,
    user_ids: Iterable[Optional[str]],
    type_: NotificationType | str,
    title: str,
    message: str,
    *,
    entity_type: Optional[str] = None,
    entity_id: Optional[str] = None,
    related_user_id: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None,
    exclude_user_id: Optional[str] = None,
) -> List[Notification]:
    """
    Notify several users at once.

    Duplicate and empty ids are dropped, as is ``exclude_user_id`` (usually the actor).

    Returns:
        The created notifications, in input order.
    """
    seen: set[str] = set()
    rows = []
    for user_id in user_ids:
        if not user_id or user_id in seen or user_id == exclude_user_id:
            continue
        seen.add(user_id)
        rows.append(_build(user_id, type_, title, message, entity_type, entity_id, related_user_id, metadata))
    if not rows:
        return []
    created = await repos.notifications.create_many(rows)
    logger.debug(f"Created {len(created)} '{NotificationType(type_).value}' notifications")
    return created


async def notify_roles(
    repos: SqlRepoBundle,
    roles: Iterable[Role | str],
    type_: NotificationType | str,
    title: str,
    message: str,
    *,
    school_id: Optional[str] = None,
    exclude_user_id: Optional[str] = None,
    **kwargs: Any,
) -> List[Notification]:
    """Notify every active user holding one of ``roles``, optionally within one school."""
    users = await repos.users.list_by_roles([Role(r).value for r in roles], school_id=school_id)
    return await notify_many(
        repos, [u.id for u in users], type_, title, message, exclude_user_id=exclude_user_id, **kwargs
    )


async def list_notifications(
    repos: SqlRepoBundle, user: User, *, unread_only: bool = False, limit: int = 50, offset: int = 0
) -> List[Notification]:
    return await repos.notifications.list_for_user(user.id, unread_only=unread_only, limit=limit, offset=offset)


async def unread_count(repos: SqlRepoBundle, user: User) -> int:
    return await repos.notifications.unread_count(user.id)


async def _get_owned(repos: SqlRepoBundle, user: User, notification_id: str) -> Notification:
    notification = await repos.notifications.get_by_id(notification_id)
    # Someone else's notification is reported as missing
    if notification is None or notification.user_id != user.id:
        raise NotFoundError("Notification", notification_id)
    return notification


async def mark_read(repos: SqlRepoBundle, user: User, notification_id: str) -> Notification:
    notification = await _get_owned(repos, user, notification_id)
    if notification.is_read:
        return notification
    notification.is_read = True
    return await repos.notifications.update(notification)


async def mark_all_read(repos: SqlRepoBundle, user: User) -> int:
    """
    Mark all of a user's notifications as read.

    Safe to repeat: a second call changes nothing and returns 0.

    Returns:
        Number of notifications that changed state.
    """
    updated = await repos.notifications.mark_all_read(user.id)
    logger.debug(f"Marked {updated} notifications read for user {user.id}")
    return updated


async def delete_notification(repos: SqlRepoBundle, user: User, notification_id: str) -> None:
    notification = await _get_owned(repos, user, notification_id)
    await repos.notifications.delete(notification.id)
