"""Unit tests for scoped announcements."""

import pytest

from lockerroom.core.errors import DomainValidationError, NotFoundError, PermissionDeniedError
from lockerroom.core.models.io.posts import AnnouncementCreate
from lockerroom.server.services import announcements, feed

pytestmark = pytest.mark.asyncio


async def test_school_admin_announces_to_own_school(repos, factory):
    school = await factory.school()
    other_school = await factory.school()
    admin = await factory.user("school_admin", school_id=school.id)
    member, _ = await factory.student(school)
    outsider, _ = await factory.student(other_school)

    post = await announcements.create_announcement(
        repos, admin, AnnouncementCreate(title="Practice", message="Moved to 5pm")
    )
    assert post.type == "announcement"
    assert post.scope == "school"
    assert post.school_id == school.id
    assert await repos.notifications.unread_count(member.id) == 1
    assert await repos.notifications.unread_count(outsider.id) == 0
    assert await repos.notifications.unread_count(admin.id) == 0

    assert [a.id for a in await announcements.list_announcements(repos, member)] == [post.id]
    assert await announcements.list_announcements(repos, outsider) == []


async def test_school_admin_cannot_go_global(repos, factory):
    school = await factory.school()
    other = await factory.school()
    admin = await factory.user("school_admin", school_id=school.id)
    with pytest.raises(PermissionDeniedError):
        await announcements.create_announcement(repos, admin, AnnouncementCreate(title="T", message="M", scope="global"))
    with pytest.raises(PermissionDeniedError):
        await announcements.create_announcement(
            repos, admin, AnnouncementCreate(title="T", message="M", school_id=other.id)
        )


async def test_other_roles_cannot_announce(repos, factory):
    coach = await factory.user("coach")
    with pytest.raises(PermissionDeniedError):
        await announcements.create_announcement(repos, coach, AnnouncementCreate(title="T", message="M", scope="staff"))


async def test_system_admin_scopes(repos, factory):
    admin = await factory.user("system_admin")
    scout = await factory.user("xen_scout")
    viewer = await factory.user("viewer")

    staff = await announcements.create_announcement(
        repos, admin, AnnouncementCreate(title="Staff", message="Meeting", scope="staff")
    )
    everyone = await announcements.create_announcement(
        repos, admin, AnnouncementCreate(title="All", message="Welcome", scope="global")
    )
    assert await repos.notifications.unread_count(scout.id) == 2
    assert await repos.notifications.unread_count(viewer.id) == 1

    assert {a.id for a in await announcements.list_announcements(repos, scout)} == {staff.id, everyone.id}
    assert [a.id for a in await announcements.list_announcements(repos, viewer)] == [everyone.id]


async def test_school_scope_needs_a_school(repos, factory):
    admin = await factory.user("system_admin")
    with pytest.raises(DomainValidationError):
        await announcements.create_announcement(repos, admin, AnnouncementCreate(title="T", message="M"))
    with pytest.raises(NotFoundError):
        await announcements.create_announcement(
            repos, admin, AnnouncementCreate(title="T", message="M", school_id="missing")
        )
    with pytest.raises(DomainValidationError):
        await announcements.create_announcement(repos, admin, AnnouncementCreate(title="T", message="M", scope="town"))


async def test_announcements_stay_out_of_the_feed(repos, factory):
    admin = await factory.user("system_admin")
    post = await announcements.create_announcement(
        repos, admin, AnnouncementCreate(title="All", message="Welcome", scope="global")
    )
    assert (await feed.get_feed(repos, None))["items"] == []

    await announcements.delete_announcement(repos, admin, post.id)
    with pytest.raises(NotFoundError):
        await announcements.delete_announcement(repos, admin, post.id)
