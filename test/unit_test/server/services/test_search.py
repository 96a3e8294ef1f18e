"""Unit tests for the platform-wide athlete search."""

import pytest

from lockerroom.core.errors import DomainValidationError
from lockerroom.server.services import follows, search


class TestNormalizeQuery:
    @pytest.mark.parametrize("q", [None, "", " ", "a", "  b  ", "x" * 51, "!!", "@#$"])
    def test_rejects_invalid_queries(self, q):
        with pytest.raises(DomainValidationError):
            search.normalize_query(q)

    @pytest.mark.parametrize("q,expected", [("  jo  ", "jo"), ("O'Neil", "O'Neil"), ("x" * 50, "x" * 50)])
    def test_strips_and_accepts(self, q, expected):
        assert search.normalize_query(q) == expected


@pytest.mark.asyncio
class TestSearchStudents:
    async def test_matches_name_sport_and_position_across_schools(self, repos, factory):
        north, south = await factory.school(name="North"), await factory.school(name="South")
        await factory.student(north, name="Jordan Lee", sport="Soccer")
        await factory.student(south, name="Casey Kim", sport="Basketball", position="Point Guard")
        await factory.student(south, name="Riley Fox", sport="Swimming")

        by_name = await search.search_students(repos, "jordan")
        by_sport = await search.search_students(repos, "BASKET")
        by_position = await search.search_students(repos, "guard")

        assert [(r["name"], r["school_name"]) for r in by_name] == [("Jordan Lee", "North")]
        assert [r["name"] for r in by_sport] == ["Casey Kim"]
        assert [r["name"] for r in by_position] == ["Casey Kim"]

    async def test_most_followed_first_and_viewer_flag(self, repos, factory):
        school = await factory.school()
        quiet_user, _ = await factory.student(school, name="Alex Quiet", sport="Track")
        star_user, _ = await factory.student(school, name="Alex Star", sport="Track")
        viewer = await factory.user("xen_scout")
        fan = await factory.user("viewer")
        await follows.follow(repos, viewer, star_user.id)
        await follows.follow(repos, fan, star_user.id)

        results = await search.search_students(repos, "alex", viewer=viewer)

        assert [(r["user_id"], r["followers_count"], r["is_following"]) for r in results] == [
            (star_user.id, 2, True),
            (quiet_user.id, 0, False),
        ]

    async def test_anonymous_viewer_follows_nobody(self, repos, factory):
        school = await factory.school()
        await factory.student(school, name="Morgan Hill")

        results = await search.search_students(repos, "morgan")

        assert results[0]["is_following"] is False

    async def test_limit_caps_results(self, repos, factory):
        school = await factory.school()
        for n in range(4):
            await factory.student(school, name=f"Taylor {n}")

        assert len(await search.search_students(repos, "taylor", limit=3)) == 3

    @pytest.mark.parametrize("limit", [0, 26])
    async def test_rejects_out_of_range_limit(self, repos, limit):
        with pytest.raises(DomainValidationError):
            await search.search_students(repos, "taylor", limit=limit)
