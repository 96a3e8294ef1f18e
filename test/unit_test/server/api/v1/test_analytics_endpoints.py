import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio

BASE = "/api/v1/analytics"


async def test_platform_stats(client: AsyncClient, factory):
    analyst = await factory.user("analyst")
    school = await factory.school()
    student, _ = await factory.student(school)
    await factory.post(student)

    response = await client.get(f"{BASE}/platform", headers=factory.headers(analyst))
    assert response.status_code == 200
    data = response.json()
    assert data["total_users"] == 2
    assert {role: n for role, n in data["users_by_role"].items() if n} == {"analyst": 1, "student": 1}
    assert data["users_by_role"]["school_admin"] == 0
    assert data["schools_total"] == 1
    assert data["students"] == 1
    assert data["posts"] == 1


async def test_platform_stats_forbidden_for_students(client: AsyncClient, factory):
    school = await factory.school()
    student, _ = await factory.student(school)
    response = await client.get(f"{BASE}/platform", headers=factory.headers(student))
    assert response.status_code == 403


async def test_revenue_summary(client: AsyncClient, factory):
    finance = await factory.user("finance")
    response = await client.get(f"{BASE}/revenue", headers=factory.headers(finance))
    assert response.json() == {
        "school_subscription_revenue": 0.0,
        "xen_watch_revenue_cents": 0,
        "xen_watch_revenue": 0.0,
        "total_revenue": 0.0,
    }


async def test_student_analytics(client: AsyncClient, factory):
    school = await factory.school()
    student, profile = await factory.student(school)
    post = await factory.post(student, profile)
    fan = await factory.user("viewer")
    await client.post(f"/api/v1/posts/{post.id}/like", headers=factory.headers(fan))

    response = await client.get(f"{BASE}/students/{profile.id}", headers=factory.headers(student))
    assert response.status_code == 200
    data = response.json()
    assert data["posts"] == 1
    assert data["likes"] == 1
    assert data["average_engagement_per_post"] == 1.0


async def test_growth_range(client: AsyncClient, factory):
    analyst = await factory.user("analyst")
    headers = factory.headers(analyst)

    response = await client.get(f"{BASE}/growth", params={"months": 3}, headers=headers)
    assert len(response.json()["months"]) == 3
    response = await client.get(f"{BASE}/growth", params={"months": 30}, headers=headers)
    assert response.status_code == 422
