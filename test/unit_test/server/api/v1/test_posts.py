from datetime import timedelta

import pytest
from httpx import AsyncClient

from lockerroom.core.database.base import utc_now

pytestmark = pytest.mark.asyncio


async def test_student_creates_post(client: AsyncClient, factory):
    school = await factory.school()
    student, profile = await factory.student(school)

    response = await client.post(
        "/api/v1/posts", json={"caption": "First game", "media_type": "video"}, headers=factory.headers(student)
    )
    assert response.status_code == 201
    data = response.json()
    assert data["student_id"] == profile.id
    assert data["school_id"] == school.id
    assert data["type"] == "post"


async def test_viewer_cannot_post(client: AsyncClient, factory):
    viewer = await factory.user("viewer")
    response = await client.post("/api/v1/posts", json={"caption": "hi"}, headers=factory.headers(viewer))
    assert response.status_code == 403


async def test_empty_post_rejected(client: AsyncClient, factory):
    school = await factory.school()
    student, _ = await factory.student(school)
    response = await client.post("/api/v1/posts", json={"caption": "  "}, headers=factory.headers(student))
    assert response.status_code == 400


async def test_feed_pages_with_cursor(client: AsyncClient, factory):
    author = await factory.user("student")
    base = utc_now() - timedelta(hours=1)
    for i in range(3):
        await factory.post(author, caption=f"p{i}", created_at=base + timedelta(minutes=i))

    first = await client.get("/api/v1/posts/feed", params={"limit": 2})
    assert first.status_code == 200
    page = first.json()
    assert [item["caption"] for item in page["items"]] == ["p2", "p1"]
    assert page["has_more"] is True

    second = await client.get("/api/v1/posts/feed", params={"limit": 2, "cursor": page["next_cursor"]})
    page = second.json()
    assert [item["caption"] for item in page["items"]] == ["p0"]
    assert page["has_more"] is False
    assert page["next_cursor"] is None


async def test_feed_rejects_bad_cursor(client: AsyncClient):
    response = await client.get("/api/v1/posts/feed", params={"cursor": "garbage"})
    assert response.status_code == 400


async def test_engagement_endpoints(client: AsyncClient, factory):
    author = await factory.user("student")
    fan = await factory.user("viewer")
    post = await factory.post(author)
    headers = factory.headers(fan)

    liked = await client.post(f"/api/v1/posts/{post.id}/like", headers=headers)
    assert liked.json() == {"post_id": post.id, "active": True, "count": 1}
    saved = await client.post(f"/api/v1/posts/{post.id}/save", headers=headers)
    assert saved.json()["active"] is True
    view = await client.post(f"/api/v1/posts/{post.id}/view", headers=headers)
    assert view.json() == {"recorded": True}
    view = await client.post(f"/api/v1/posts/{post.id}/view", headers=headers)
    assert view.json() == {"recorded": False}

    comment = await client.post(f"/api/v1/posts/{post.id}/comments", json={"content": "Nice"}, headers=headers)
    assert comment.status_code == 201

    item = (await client.get(f"/api/v1/posts/{post.id}", headers=headers)).json()
    assert item["likes_count"] == 1
    assert item["comments_count"] == 1
    assert item["views_count"] == 1
    assert item["is_liked"] is True
    assert item["is_saved"] is True

    saved_list = await client.get("/api/v1/posts/saved", headers=headers)
    assert [p["id"] for p in saved_list.json()] == [post.id]

    unliked = await client.delete(f"/api/v1/posts/{post.id}/like", headers=headers)
    assert unliked.json()["count"] == 0


async def test_anonymous_feed_has_no_viewer_flags(client: AsyncClient, factory):
    author = await factory.user("student")
    await factory.post(author)

    item = (await client.get("/api/v1/posts/feed")).json()["items"][0]
    assert item["is_liked"] is False
    assert item["author"]["id"] == author.id


async def test_delete_post_author_only(client: AsyncClient, factory):
    author = await factory.user("student")
    other = await factory.user("student")
    post = await factory.post(author)

    response = await client.delete(f"/api/v1/posts/{post.id}", headers=factory.headers(other))
    assert response.status_code == 403
    response = await client.delete(f"/api/v1/posts/{post.id}", headers=factory.headers(author))
    assert response.status_code == 204
    response = await client.get(f"/api/v1/posts/{post.id}")
    assert response.status_code == 404


async def test_report_post(client: AsyncClient, factory):
    author = await factory.user("student")
    post = await factory.post(author)
    viewer = await factory.user("viewer")

    response = await client.post(
        f"/api/v1/posts/{post.id}/report", json={"reason": "spam"}, headers=factory.headers(viewer)
    )
    assert response.status_code == 201
    assert response.json()["status"] == "pending"
