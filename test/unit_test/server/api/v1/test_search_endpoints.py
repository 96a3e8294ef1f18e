import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio


async def test_search_students_is_public(client: AsyncClient, factory):
    school = await factory.school(name="Central High")
    await factory.student(school, name="Jamie Stone", sport="Soccer")

    response = await client.get("/api/v1/search/students", params={"q": "soc"})

    assert response.status_code == 200
    [hit] = response.json()
    assert hit["name"] == "Jamie Stone"
    assert hit["school_name"] == "Central High"
    assert hit["followers_count"] == 0
    assert hit["is_following"] is False


async def test_search_flags_followed_students(client: AsyncClient, factory):
    school = await factory.school()
    student_user, _ = await factory.student(school, name="Drew Banks")
    scout = await factory.user("xen_scout")
    headers = factory.headers(scout)
    await client.post(f"/api/v1/users/{student_user.id}/follow", headers=headers)

    response = await client.get("/api/v1/search/students", params={"q": "drew"}, headers=headers)

    assert response.status_code == 200
    assert response.json()[0]["is_following"] is True
    assert response.json()[0]["followers_count"] == 1


@pytest.mark.parametrize("params", [{}, {"q": "a"}, {"q": "   "}, {"q": "x" * 51}, {"q": "drew", "limit": 26}])
async def test_invalid_search_is_rejected(client: AsyncClient, params):
    response = await client.get("/api/v1/search/students", params=params)

    assert response.status_code == 400
    assert response.json()["code"] == "validation_error"
