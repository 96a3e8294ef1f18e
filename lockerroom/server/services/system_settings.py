"""
System Settings Service.

Runtime key/value settings editable by system admins. Values are stored
as text; typed readers fall back to a default when a key is missing or
not parseable.
"""

from __future__ import annotations

from typing import List, Optional

from lockerroom.core.database.base import utc_now
from lockerroom.core.database.entities.system_settings import SystemSetting
from lockerroom.core.database.entities.users import User
from lockerroom.core.database.repositories import SqlRepoBundle
from lockerroom.core.errors import DomainValidationError, NotFoundError
from lockerroom.core.logging_config import get_logger
from lockerroom.core.models.domain.roles import Role
from lockerroom.server.services.auth import ensure_roles

logger = get_logger(__name__)

XEN_WATCH_PRICE_KEY = "xen_watch_price_cents"


async def list_settings(repos: SqlRepoBundle, admin: User, category: Optional[str] = None) -> List[SystemSetting]:
    ensure_roles(admin, Role.system_admin)
    return await repos.settings.list_settings(category)


async def get_setting(repos: SqlRepoBundle, admin: User, key: str) -> SystemSetting:
    ensure_roles(admin, Role.system_admin)
    setting = await repos.settings.get_by_key(key)
    if setting is None:
        raise NotFoundError("Setting", key)
    return setting


async def upsert_setting(
    repos: SqlRepoBundle,
    admin: User,
    key: str,
    *,
    value: str,
    category: str = "general",
    description: Optional[str] = None,
) -> SystemSetting:
    ensure_roles(admin, Role.system_admin)
    key = key.strip()
    if not key:
        raise DomainValidationError("Setting key cannot be empty")
    if key == XEN_WATCH_PRICE_KEY and not _is_non_negative_int(value):
        raise DomainValidationError(f"'{key}' must be a non-negative whole number of cents")

    setting = await repos.settings.get_by_key(key)
    if setting is None:
        setting = SystemSetting(key=key, value=value, category=category, description=description)
    else:
        setting.value = value
        setting.category = category
        if description is not None:
            setting.description = description
    setting.updated_by = admin.id
    setting.updated_at = utc_now()
    setting = await repos.settings.update(setting)
    logger.info(f"System setting '{key}' updated by {admin.id}")
    return setting


async def delete_setting(repos: SqlRepoBundle, admin: User, key: str) -> None:
    setting = await get_setting(repos, admin, key)
    await repos.settings.delete(setting.id)


def _is_non_negative_int(value: str) -> bool:
    try:
        return int(value) >= 0
    except (TypeError, ValueError):
        return False


async def get_int(repos: SqlRepoBundle, key: str, default: int) -> int:
    """Integer value of a setting, or ``default`` when unset or malformed."""
    setting = await repos.settings.get_by_key(key)
    if setting is None:
        return default
    try:
        return int(setting.value)
    except ValueError:
        logger.warning(f"System setting '{key}' is not an integer: {setting.value!r}")
        return default
