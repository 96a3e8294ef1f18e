"""Unit tests for in-app notifications."""

import pytest

from lockerroom.core.errors import NotFoundError
from lockerroom.server.services import notifications

pytestmark = pytest.mark.asyncio


class TestNotify:
    async def test_notify_many_skips_duplicates_and_actor(self, repos, factory):
        actor = await factory.user("system_admin")
        a = await factory.user("viewer")
        b = await factory.user("viewer")
        created = await notifications.notify_many(
            repos,
            [a.id, None, b.id, a.id, actor.id],
            "announcement",
            "Hello",
            "World",
            exclude_user_id=actor.id,
        )
        assert [n.user_id for n in created] == [a.id, b.id]

    async def test_notify_many_with_nobody(self, repos):
        assert await notifications.notify_many(repos, [], "announcement", "t", "m") == []

    async def test_notify_roles_skips_frozen_users(self, repos, factory):
        active = await factory.user("finance")
        frozen = await factory.user("finance")
        frozen.is_frozen = True
        await repos.users.update(frozen)
        created = await notifications.notify_roles(repos, ["finance"], "xen_watch_payment", "Paid", "1 payment")
        assert [n.user_id for n in created] == [active.id]

    async def test_metadata_is_stored(self, repos, factory):
        user = await factory.user("viewer")
        note = await notifications.notify(
            repos, user.id, "post_liked", "Like", "Someone liked", metadata={"post_id": "p1"}
        )
        assert note.meta == {"post_id": "p1"}
        assert note.is_read is False


class TestReadState:
    async def test_mark_all_read_is_repeatable(self, repos, factory):
        user = await factory.user("viewer")
        for i in range(3):
            await notifications.notify(repos, user.id, "announcement", f"N{i}", "msg")
        assert await notifications.unread_count(repos, user) == 3
        assert await notifications.mark_all_read(repos, user) == 3
        assert await notifications.unread_count(repos, user) == 0
        assert await notifications.mark_all_read(repos, user) == 0

    async def test_mark_read_and_unread_filter(self, repos, factory):
        user = await factory.user("viewer")
        first = await notifications.notify(repos, user.id, "announcement", "A", "msg")
        await notifications.notify(repos, user.id, "announcement", "B", "msg")
        await notifications.mark_read(repos, user, first.id)
        unread = await notifications.list_notifications(repos, user, unread_only=True)
        assert [n.title for n in unread] == ["B"]

    async def test_other_users_notifications_are_hidden(self, repos, factory):
        owner = await factory.user("viewer")
        other = await factory.user("viewer")
        note = await notifications.notify(repos, owner.id, "announcement", "A", "msg")
        with pytest.raises(NotFoundError):
            await notifications.mark_read(repos, other, note.id)
        with pytest.raises(NotFoundError):
            await notifications.delete_notification(repos, other, note.id)
        await notifications.delete_notification(repos, owner, note.id)
        assert await notifications.list_notifications(repos, owner) == []
