import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio

BASE = "/api/v1/announcements"


async def test_school_announcement_reaches_members(client: AsyncClient, factory):
    school = await factory.school()
    other = await factory.school()
    admin = await factory.user("school_admin", school_id=school.id)
    member, _ = await factory.student(school)
    outsider, _ = await factory.student(other)

    response = await client.post(
        BASE, json={"title": "Practice moved", "message": "Gym B at 5pm"}, headers=factory.headers(admin)
    )
    assert response.status_code == 201
    post = response.json()
    assert post["type"] == "announcement"
    assert post["scope"] == "school"
    assert post["school_id"] == school.id

    visible = await client.get(BASE, headers=factory.headers(member))
    assert [a["id"] for a in visible.json()] == [post["id"]]
    assert (await client.get(BASE, headers=factory.headers(outsider))).json() == []

    notifications = await client.get("/api/v1/notifications", headers=factory.headers(member))
    assert len(notifications.json()) == 1

    feed = await client.get("/api/v1/posts/feed")
    assert feed.json()["items"] == []


async def test_school_admin_cannot_announce_globally(client: AsyncClient, factory):
    school = await factory.school()
    admin = await factory.user("school_admin", school_id=school.id)
    response = await client.post(
        BASE, json={"title": "Hi", "message": "All", "scope": "global"}, headers=factory.headers(admin)
    )
    assert response.status_code == 403


async def test_unknown_scope(client: AsyncClient, factory):
    admin = await factory.user("system_admin")
    response = await client.post(
        BASE, json={"title": "Hi", "message": "All", "scope": "everyone"}, headers=factory.headers(admin)
    )
    assert response.status_code == 400


async def test_staff_announcement(client: AsyncClient, factory):
    admin = await factory.user("system_admin")
    coach = await factory.user("coach")
    viewer = await factory.user("viewer")
    response = await client.post(
        BASE, json={"title": "Staff", "message": "Meeting", "scope": "staff"}, headers=factory.headers(admin)
    )
    post_id = response.json()["id"]

    assert [a["id"] for a in (await client.get(BASE, headers=factory.headers(coach))).json()] == [post_id]
    assert (await client.get(BASE, headers=factory.headers(viewer))).json() == []

    assert (await client.delete(f"{BASE}/{post_id}", headers=factory.headers(admin))).status_code == 204
