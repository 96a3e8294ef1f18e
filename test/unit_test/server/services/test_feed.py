"""Unit tests for the post feed and engagement."""

from datetime import datetime, timedelta

import pytest

from lockerroom.core.errors import DomainValidationError, NotFoundError, PermissionDeniedError
from lockerroom.core.models.io.posts import PostCreate
from lockerroom.server.services import feed, follows


class TestCursor:
    @pytest.mark.parametrize("offset", [0, 1, 20, 12345])
    def test_roundtrip(self, offset):
        assert feed.decode_cursor(feed.encode_cursor(offset)) == offset

    def test_empty_cursor_starts_at_zero(self):
        assert feed.decode_cursor(None) == 0
        assert feed.decode_cursor("") == 0

    @pytest.mark.parametrize("cursor", ["not-a-cursor", "eDox", "!!!"])
    def test_invalid_cursor(self, cursor):
        with pytest.raises(DomainValidationError):
            feed.decode_cursor(cursor)


class TestDedupe:
    def test_keeps_first_occurrence(self):
        items = [{"id": "a", "n": 1}, {"id": "b", "n": 2}, {"id": "a", "n": 3}]
        assert feed.dedupe_by_id(items) == [{"id": "a", "n": 1}, {"id": "b", "n": 2}]


@pytest.mark.asyncio
class TestFeed:
    async def _seed(self, factory, count: int):
        school = await factory.school()
        user, student = await factory.student(school)
        base = datetime(2026, 1, 1)
        posts = [await factory.post(user, student, created_at=base + timedelta(minutes=i)) for i in range(count)]
        return user, student, posts

    async def test_newest_first_pagination(self, repos, factory):
        _, _, posts = await self._seed(factory, 5)
        first = await feed.get_feed(repos, None, limit=2)
        assert [i["id"] for i in first["items"]] == [posts[4].id, posts[3].id]
        assert first["has_more"] is True

        second = await feed.get_feed(repos, None, limit=2, cursor=first["next_cursor"])
        assert [i["id"] for i in second["items"]] == [posts[2].id, posts[1].id]

        last = await feed.get_feed(repos, None, limit=2, cursor=second["next_cursor"])
        assert [i["id"] for i in last["items"]] == [posts[0].id]
        assert last["has_more"] is False
        assert last["next_cursor"] is None

    async def test_cursor_walk_visits_every_post_once(self, repos, factory):
        user, student, posts = await self._seed(factory, 5)
        # Same timestamp as posts[2]; ties are broken by id
        tied = [await factory.post(user, student, created_at=posts[2].created_at) for _ in range(2)]
        await factory.post(user, student, status="processing")

        seen, cursor, pages = [], None, 0
        while True:
            page = await feed.get_feed(repos, None, limit=3, cursor=cursor)
            pages += 1
            seen.extend(i["id"] for i in page["items"])
            if not page["has_more"]:
                assert page["next_cursor"] is None
                break
            assert page["next_cursor"]
            cursor = page["next_cursor"]

        assert pages == 3
        assert len(seen) == len(set(seen)) == 7
        assert set(seen) == {p.id for p in posts + tied}
        assert seen[0] == posts[4].id and seen[-1] == posts[0].id

    async def test_excludes_ineligible_posts(self, repos, factory):
        user, student, posts = await self._seed(factory, 1)
        await factory.post(user, student, status="processing")
        await factory.post(user, student, caption=None)
        await factory.post(user, student, type="announcement", title="News")
        page = await feed.get_feed(repos, None)
        assert [i["id"] for i in page["items"]] == [posts[0].id]

    async def test_viewer_flags_and_counts(self, repos, factory):
        author, _, posts = await self._seed(factory, 1)
        fan = await factory.user("viewer")
        await feed.like(repos, fan, posts[0].id)
        await feed.save(repos, fan, posts[0].id)
        await follows.follow(repos, fan, author.id)

        item = (await feed.get_feed(repos, fan))["items"][0]
        assert item["likes_count"] == 1
        assert item["saves_count"] == 1
        assert item["is_liked"] and item["is_saved"] and item["is_following_author"]

        anonymous = (await feed.get_feed(repos, None))["items"][0]
        assert anonymous["is_liked"] is False

    async def test_following_feed(self, repos, factory):
        followed, _, posts = await self._seed(factory, 2)
        await self._seed(factory, 2)
        fan = await factory.user("viewer")

        assert (await feed.get_following_feed(repos, fan))["items"] == []
        await follows.follow(repos, fan, followed.id)
        page = await feed.get_following_feed(repos, fan)
        assert {i["id"] for i in page["items"]} == {p.id for p in posts}

    async def test_limit_is_clamped(self, repos, factory):
        await self._seed(factory, 3)
        page = await feed.get_feed(repos, None, limit=0)
        assert len(page["items"]) == 3


@pytest.mark.asyncio
class TestPosts:
    async def test_student_creates_post(self, repos, factory):
        school = await factory.school()
        user, student = await factory.student(school)
        post = await feed.create_post(repos, user, PostCreate(media_url=" https://cdn/x.mp4 ", media_type="video"))
        assert post.student_id == student.id
        assert post.school_id == school.id
        assert post.media_url == "https://cdn/x.mp4"
        assert post.media_type == "video"

    async def test_followers_are_notified(self, repos, factory):
        school = await factory.school()
        user, _ = await factory.student(school)
        fan = await factory.user("viewer")
        await follows.follow(repos, fan, user.id)
        await feed.create_post(repos, user, PostCreate(caption="Hello"))
        assert await repos.notifications.unread_count(fan.id) == 1

    async def test_non_student_cannot_post(self, repos, factory):
        coach = await factory.user("coach")
        with pytest.raises(PermissionDeniedError):
            await feed.create_post(repos, coach, PostCreate(caption="Hi"))

    async def test_empty_post_rejected(self, repos, factory):
        school = await factory.school()
        user, _ = await factory.student(school)
        with pytest.raises(DomainValidationError):
            await feed.create_post(repos, user, PostCreate(caption="   "))

    async def test_unknown_media_type(self, repos, factory):
        school = await factory.school()
        user, _ = await factory.student(school)
        with pytest.raises(DomainValidationError):
            await feed.create_post(repos, user, PostCreate(media_url="https://cdn/x", media_type="audio"))

    async def test_like_is_idempotent(self, repos, factory):
        school = await factory.school()
        user, student = await factory.student(school)
        post = await factory.post(user, student)
        fan = await factory.user("viewer")
        await feed.like(repos, fan, post.id)
        state = await feed.like(repos, fan, post.id)
        assert state == {"post_id": post.id, "active": True, "count": 1}
        assert await repos.notifications.unread_count(user.id) == 1

        state = await feed.unlike(repos, fan, post.id)
        assert state["active"] is False and state["count"] == 0
        state = await feed.unlike(repos, fan, post.id)
        assert state["count"] == 0

    async def test_own_like_does_not_notify(self, repos, factory):
        school = await factory.school()
        user, student = await factory.student(school)
        post = await factory.post(user, student)
        await feed.like(repos, user, post.id)
        assert await repos.notifications.unread_count(user.id) == 0

    async def test_record_view_once(self, repos, factory):
        school = await factory.school()
        user, student = await factory.student(school)
        post = await factory.post(user, student)
        fan = await factory.user("viewer")
        assert await feed.record_view(repos, fan, post.id) is True
        assert await feed.record_view(repos, fan, post.id) is False

    async def test_comments(self, repos, factory):
        school = await factory.school()
        user, student = await factory.student(school)
        post = await factory.post(user, student)
        fan = await factory.user("viewer")
        with pytest.raises(DomainValidationError):
            await feed.comment(repos, fan, post.id, "  ")
        with pytest.raises(DomainValidationError):
            await feed.comment(repos, fan, post.id, "x" * (feed.MAX_COMMENT_LENGTH + 1))
        await feed.comment(repos, fan, post.id, " Nice! ")
        comments = await feed.list_comments(repos, post.id)
        assert [c["content"] for c in comments] == ["Nice!"]
        assert comments[0]["author"].id == fan.id

    async def test_delete_post_cascades_engagement(self, repos, factory):
        school = await factory.school()
        user, student = await factory.student(school)
        post = await factory.post(user, student)
        fan = await factory.user("viewer")
        await feed.like(repos, fan, post.id)
        await feed.save(repos, fan, post.id)
        await feed.comment(repos, fan, post.id, "Nice")

        with pytest.raises(PermissionDeniedError):
            await feed.delete_post(repos, fan, post.id)
        await feed.delete_post(repos, user, post.id)
        with pytest.raises(NotFoundError):
            await feed.get_post(repos, None, post.id)
        assert await feed.list_saved(repos, fan) == []

    async def test_hidden_posts_only_visible_to_author_and_admins(self, repos, factory):
        school = await factory.school()
        user, student = await factory.student(school)
        pending = await factory.post(user, student, status="processing")
        announcement = await factory.post(user, student, type="announcement", title="News")
        fan = await factory.user("viewer")
        admin = await factory.user("system_admin")

        for viewer in (None, fan):
            for hidden in (pending, announcement):
                with pytest.raises(NotFoundError):
                    await feed.get_post(repos, viewer, hidden.id)
        assert (await feed.get_post(repos, user, pending.id))["id"] == pending.id
        assert (await feed.get_post(repos, admin, pending.id))["id"] == pending.id

    async def test_saved_list_skips_posts_outside_the_feed(self, repos, factory):
        school = await factory.school()
        user, student = await factory.student(school)
        visible = await factory.post(user, student)
        pending = await factory.post(user, student, status="processing")
        fan = await factory.user("viewer")
        await feed.save(repos, fan, visible.id)
        await feed.save(repos, fan, pending.id)

        assert [i["id"] for i in await feed.list_saved(repos, fan)] == [visible.id]

        pending.status = "ready"
        await repos.posts.update(pending)
        assert {i["id"] for i in await feed.list_saved(repos, fan)} == {visible.id, pending.id}

    async def test_report_requires_reason(self, repos, factory):
        school = await factory.school()
        user, student = await factory.student(school)
        post = await factory.post(user, student)
        fan = await factory.user("viewer")
        with pytest.raises(DomainValidationError):
            await feed.report(repos, fan, post.id, " ")
        report = await feed.report(repos, fan, post.id, "Spam")
        assert report.status == "pending"
