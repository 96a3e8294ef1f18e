"""
Banner Service.

System admins manage banners; every signed-in user gets the banners that
target them.

Targeting rules for :func:`active_banners`:
- the banner is active and ``now`` falls inside its date window (missing bounds are open)
- the user's role is listed in ``target_roles``; the ``xen_watch`` target covers students and viewers
- school admins additionally need their school listed when ``target_school_ids`` is non-empty
- results are ordered by priority (highest first), then newest first
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from lockerroom.core.database.base import to_naive_utc, utc_now
from lockerroom.core.database.entities.banners import Banner
from lockerroom.core.database.entities.users import User
from lockerroom.core.database.repositories import SqlRepoBundle
from lockerroom.core.errors import DomainValidationError, NotFoundError
from lockerroom.core.logging_config import get_logger
from lockerroom.core.models.domain.enums import BannerCategory, BannerTarget
from lockerroom.core.models.domain.roles import Role
from lockerroom.core.models.io.banners import BannerCreate, BannerUpdate
from lockerroom.server.services.auth import ensure_roles

logger = get_logger(__name__)

XEN_WATCH_AUDIENCE = frozenset({Role.student.value, Role.viewer.value})


def _validate(
    category: str,
    target_roles: List[str],
    start_date: Optional[datetime],
    end_date: Optional[datetime],
) -> None:
    try:
        BannerCategory(category)
    except ValueError as e:
        raise DomainValidationError(f"Unknown banner category '{category}'") from e
    if not target_roles:
        raise DomainValidationError("At least one target role is required")
    allowed = {t.value for t in BannerTarget}
    unknown = [r for r in target_roles if r not in allowed]
    if unknown:
        raise DomainValidationError(f"Invalid target roles: {', '.join(unknown)}")
    if start_date is not None and end_date is not None and end_date <= start_date:
        raise DomainValidationError("End date must be after start date")


def banner_targets_user(banner: Banner, user: User) -> bool:
    roles = set(banner.target_roles or [])
    matches = user.role in roles or (BannerTarget.xen_watch.value in roles and user.role in XEN_WATCH_AUDIENCE)
    if not matches:
        return False
    if user.role == Role.school_admin.value and banner.target_school_ids:
        return user.school_id in banner.target_school_ids
    return True


async def active_banners(repos: SqlRepoBundle, user: User, now: Optional[datetime] = None) -> List[Banner]:
    candidates = await repos.banners.list_live(now or utc_now())
    return [banner for banner in candidates if banner_targets_user(banner, user)]


async def list_banners(repos: SqlRepoBundle, admin: User) -> List[Banner]:
    ensure_roles(admin, Role.system_admin)
    return await repos.banners.list_all()


async def get_banner(repos: SqlRepoBundle, admin: User, banner_id: str) -> Banner:
    ensure_roles(admin, Role.system_admin)
    banner = await repos.banners.get_by_id(banner_id)
    if banner is None:
        raise NotFoundError("Banner", banner_id)
    return banner


async def create_banner(repos: SqlRepoBundle, admin: User, data: BannerCreate) -> Banner:
    ensure_roles(admin, Role.system_admin)
    start_date, end_date = to_naive_utc(data.start_date), to_naive_utc(data.end_date)
    _validate(data.category, data.target_roles, start_date, end_date)
    banner = await repos.banners.create(
        Banner(
            title=data.title.strip(),
            message=data.message.strip(),
            category=data.category,
            target_roles=list(dict.fromkeys(data.target_roles)),
            target_school_ids=data.target_school_ids or None,
            start_date=start_date,
            end_date=end_date,
            is_active=data.is_active,
            priority=data.priority,
            created_by=admin.id,
        )
    )
    logger.info(f"Banner {banner.id} created by {admin.id}")
    return banner


async def update_banner(repos: SqlRepoBundle, admin: User, banner_id: str, data: BannerUpdate) -> Banner:
    banner = await get_banner(repos, admin, banner_id)
    changes = data.model_dump(exclude_unset=True)
    for key in ("start_date", "end_date"):
        if key in changes:
            changes[key] = to_naive_utc(changes[key])
    merged = {
        "category": changes.get("category", banner.category),
        "target_roles": changes.get("target_roles", banner.target_roles),
        "start_date": changes.get("start_date", banner.start_date),
        "end_date": changes.get("end_date", banner.end_date),
    }
    _validate(**merged)
    for key, value in changes.items():
        setattr(banner, key, value)
    return await repos.banners.update(banner)


async def delete_banner(repos: SqlRepoBundle, admin: User, banner_id: str) -> None:
    banner = await get_banner(repos, admin, banner_id)
    await repos.banners.delete(banner.id)
