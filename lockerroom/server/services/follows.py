"""
Follow Service.

Maintains the follow graph between users. Following is idempotent and a
user can never follow themselves.
"""

from __future__ import annotations

from typing import List

from lockerroom.core.database.entities.follows import UserFollow
from lockerroom.core.database.entities.users import User
from lockerroom.core.database.repositories import SqlRepoBundle
from lockerroom.core.errors import DomainValidationError, NotFoundError
from lockerroom.core.logging_config import get_logger
from lockerroom.core.models.domain.enums import NotificationType
from lockerroom.server.services import notifications

logger = get_logger(__name__)


async def follow(repos: SqlRepoBundle, follower: User, target_id: str) -> UserFollow:
    """
    Make ``follower`` follow ``target_id``.

    Following someone already followed returns the existing edge and sends
    no second notification.

    Raises:
        DomainValidationError: On an attempt to follow oneself.
        NotFoundError: If the target user does not exist.
    """
    if follower.id == target_id:
        raise DomainValidationError("You cannot follow yourself")
    target = await repos.users.get_by_id(target_id)
    if target is None:
        raise NotFoundError("User", target_id)

    existing = await repos.follows.get_pair(follower.id, target_id)
    if existing is not None:
        return existing

    edge = await repos.follows.create(UserFollow(follower_id=follower.id, following_id=target_id))
    await notifications.notify(
        repos,
        target_id,
        NotificationType.new_follower,
        "New follower",
        f"{follower.name} started following you",
        entity_type="user",
        entity_id=follower.id,
        related_user_id=follower.id,
    )
    logger.debug(f"User {follower.id} followed {target_id}")
    return edge


async def unfollow(repos: SqlRepoBundle, follower: User, target_id: str) -> bool:
    existing = await repos.follows.get_pair(follower.id, target_id)
    if existing is None:
        return False
    return await repos.follows.delete(existing.id)


async def is_following(repos: SqlRepoBundle, follower_id: str, target_id: str) -> bool:
    return await repos.follows.get_pair(follower_id, target_id) is not None


async def _users_in_order(repos: SqlRepoBundle, ids: List[str]) -> List[User]:
    users = await repos.users.get_many(ids)
    return [users[i] for i in ids if i in users]


async def list_followers(repos: SqlRepoBundle, user_id: str) -> List[User]:
    if await repos.users.get_by_id(user_id) is None:
        raise NotFoundError("User", user_id)
    return await _users_in_order(repos, await repos.follows.follower_ids(user_id))


async def list_following(repos: SqlRepoBundle, user_id: str) -> List[User]:
    if await repos.users.get_by_id(user_id) is None:
        raise NotFoundError("User", user_id)
    return await _users_in_order(repos, await repos.follows.following_ids(user_id))


async def follow_counts(repos: SqlRepoBundle, user_id: str) -> tuple[int, int]:
    """Return ``(followers_count, following_count)``."""
    return await repos.follows.count_followers(user_id), await repos.follows.count_following(user_id)
