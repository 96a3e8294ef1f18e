"""Unit tests for runtime system settings."""

import pytest

from lockerroom.core.errors import DomainValidationError, NotFoundError, PermissionDeniedError
from lockerroom.server.services import system_settings

pytestmark = pytest.mark.asyncio


async def test_upsert_and_get(repos, factory):
    admin = await factory.user("system_admin")
    created = await system_settings.upsert_setting(repos, admin, " support_email ", value="help@example.com")
    assert created.key == "support_email"
    assert created.updated_by == admin.id

    updated = await system_settings.upsert_setting(
        repos, admin, "support_email", value="desk@example.com", category="contact"
    )
    assert updated.id == created.id
    assert (await system_settings.get_setting(repos, admin, "support_email")).value == "desk@example.com"
    assert [s.key for s in await system_settings.list_settings(repos, admin, category="contact")] == ["support_email"]


@pytest.mark.parametrize("value", ["-1", "ten", "9.99"])
async def test_price_must_be_whole_cents(repos, factory, value):
    admin = await factory.user("system_admin")
    with pytest.raises(DomainValidationError):
        await system_settings.upsert_setting(repos, admin, system_settings.XEN_WATCH_PRICE_KEY, value=value)


async def test_get_int_falls_back(repos, factory):
    admin = await factory.user("system_admin")
    assert await system_settings.get_int(repos, "max_uploads", 7) == 7
    await system_settings.upsert_setting(repos, admin, "max_uploads", value="many")
    assert await system_settings.get_int(repos, "max_uploads", 7) == 7
    await system_settings.upsert_setting(repos, admin, "max_uploads", value="12")
    assert await system_settings.get_int(repos, "max_uploads", 7) == 12


async def test_delete(repos, factory):
    admin = await factory.user("system_admin")
    await system_settings.upsert_setting(repos, admin, "flag", value="on")
    await system_settings.delete_setting(repos, admin, "flag")
    with pytest.raises(NotFoundError):
        await system_settings.get_setting(repos, admin, "flag")


async def test_requires_system_admin(repos, factory):
    finance = await factory.user("finance")
    with pytest.raises(PermissionDeniedError):
        await system_settings.upsert_setting(repos, finance, "flag", value="on")
