"""Unit tests for targeted banners."""

from datetime import datetime, timedelta, timezone

import pytest

from lockerroom.core.database.entities.banners import Banner
from lockerroom.core.database.entities.users import User
from lockerroom.core.errors import DomainValidationError, PermissionDeniedError
from lockerroom.core.models.io.banners import BannerCreate, BannerUpdate
from lockerroom.server.services import banners


def _user(role: str, school_id=None) -> User:
    return User(id="u", email="u@example.com", name="U", role=role, school_id=school_id, password_hash="x")


def _banner(target_roles, target_school_ids=None) -> Banner:
    return Banner(
        title="T",
        message="M",
        category="info",
        target_roles=target_roles,
        target_school_ids=target_school_ids,
        created_by="admin",
    )


class TestBannerTargeting:
    def test_direct_role_match(self):
        assert banners.banner_targets_user(_banner(["xen_scout"]), _user("xen_scout"))
        assert not banners.banner_targets_user(_banner(["xen_scout"]), _user("finance"))

    @pytest.mark.parametrize("role,expected", [("student", True), ("viewer", True), ("xen_scout", False)])
    def test_xen_watch_audience(self, role, expected):
        assert banners.banner_targets_user(_banner(["xen_watch"]), _user(role)) is expected

    def test_school_admins_filtered_by_school(self):
        banner = _banner(["school_admin"], target_school_ids=["s1"])
        assert banners.banner_targets_user(banner, _user("school_admin", "s1"))
        assert not banners.banner_targets_user(banner, _user("school_admin", "s2"))
        assert banners.banner_targets_user(_banner(["school_admin"]), _user("school_admin", "s2"))

    def test_school_filter_only_applies_to_school_admins(self):
        banner = _banner(["student", "school_admin"], target_school_ids=["s1"])
        assert banners.banner_targets_user(banner, _user("student", "s2"))


@pytest.mark.asyncio
class TestBannerService:
    async def test_active_banners_respect_window(self, repos, factory):
        admin = await factory.user("system_admin")
        now = datetime(2026, 5, 1, 12, 0)
        live = await banners.create_banner(
            repos,
            admin,
            BannerCreate(
                title="Live", message="Now", target_roles=["viewer"], start_date=now - timedelta(days=1), priority=1
            ),
        )
        await banners.create_banner(
            repos, admin, BannerCreate(title="Later", message="Soon", target_roles=["viewer"], start_date=now + timedelta(days=1))
        )
        await banners.create_banner(
            repos, admin, BannerCreate(title="Off", message="Off", target_roles=["viewer"], is_active=False)
        )
        always = await banners.create_banner(
            repos, admin, BannerCreate(title="Always", message="Hi", target_roles=["viewer", "student"])
        )
        await banners.create_banner(repos, admin, BannerCreate(title="Scouts", message="Hi", target_roles=["xen_scout"]))

        viewer = await factory.user("viewer")
        shown = await banners.active_banners(repos, viewer, now=now)
        assert [b.id for b in shown] == [live.id, always.id]

    async def test_timezone_aware_dates_are_normalised(self, repos, factory):
        admin = await factory.user("system_admin")
        start = datetime(2026, 5, 1, 12, 0, tzinfo=timezone(timedelta(hours=2)))
        banner = await banners.create_banner(
            repos, admin, BannerCreate(title="TZ", message="M", target_roles=["viewer"], start_date=start)
        )
        assert banner.start_date == datetime(2026, 5, 1, 10, 0)

    @pytest.mark.parametrize(
        "payload",
        [
            {"target_roles": []},
            {"target_roles": ["janitor"]},
            {"target_roles": ["viewer"], "category": "urgent"},
            {"target_roles": ["viewer"], "start_date": datetime(2026, 5, 2), "end_date": datetime(2026, 5, 1)},
        ],
    )
    async def test_invalid_banners(self, repos, factory, payload):
        admin = await factory.user("system_admin")
        with pytest.raises(DomainValidationError):
            await banners.create_banner(repos, admin, BannerCreate(title="T", message="M", **payload))

    async def test_update_is_revalidated(self, repos, factory):
        admin = await factory.user("system_admin")
        banner = await banners.create_banner(
            repos, admin, BannerCreate(title="T", message="M", target_roles=["viewer"], end_date=datetime(2026, 5, 1))
        )
        with pytest.raises(DomainValidationError):
            await banners.update_banner(repos, admin, banner.id, BannerUpdate(start_date=datetime(2026, 6, 1)))
        updated = await banners.update_banner(repos, admin, banner.id, BannerUpdate(priority=5, target_roles=["student"]))
        assert updated.priority == 5
        assert updated.target_roles == ["student"]

    async def test_only_system_admins_manage_banners(self, repos, factory):
        moderator = await factory.user("moderator")
        with pytest.raises(PermissionDeniedError):
            await banners.create_banner(repos, moderator, BannerCreate(title="T", message="M", target_roles=["viewer"]))
        with pytest.raises(PermissionDeniedError):
            await banners.list_banners(repos, moderator)
