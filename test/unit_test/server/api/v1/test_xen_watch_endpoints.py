import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio

BASE = "/api/v1/xen-watch"


async def test_statuses(client: AsyncClient):
    response = await client.get(f"{BASE}/statuses")
    assert response.status_code == 200
    data = response.json()
    assert set(data) >= {"pending_payment", "paid", "assigned", "in_review", "reviewed", "feedback_sent"}
    assert set(data["paid"]) == {"label", "color", "icon"}


async def test_review_workflow(client: AsyncClient, factory):
    school = await factory.school()
    student, _ = await factory.student(school)
    scout_admin = await factory.user("scout_admin")
    scout = await factory.user("xen_scout")
    as_student = factory.headers(student)
    as_admin = factory.headers(scout_admin)
    as_scout = factory.headers(scout)

    response = await client.post(f"{BASE}/submissions", json={"media_url": "https://cdn/v.mp4"}, headers=as_student)
    assert response.status_code == 201
    submission = response.json()
    assert submission["status"] == "pending_payment"
    assert submission["display"]["label"]
    sid = submission["id"]

    response = await client.post(f"{BASE}/submissions/{sid}/pay", headers=as_student)
    assert response.json()["status"] == "paid"
    response = await client.post(f"{BASE}/submissions/{sid}/pay", headers=as_student)
    assert response.status_code == 409

    response = await client.post(f"{BASE}/submissions/{sid}/assign", json={"scout_id": scout.id}, headers=as_admin)
    assert response.json()["status"] == "assigned"

    queue = await client.get(f"{BASE}/queue", headers=as_scout)
    assert [s["id"] for s in queue.json()] == [sid]

    response = await client.post(f"{BASE}/submissions/{sid}/start-review", headers=as_scout)
    assert response.json()["status"] == "in_review"

    response = await client.post(f"{BASE}/submissions/{sid}/reviews", json={"rating": 9}, headers=as_scout)
    assert response.status_code == 400

    response = await client.post(
        f"{BASE}/submissions/{sid}/reviews", json={"rating": 4, "comment": "Sharp passing"}, headers=as_scout
    )
    assert response.status_code == 200
    assert response.json()["is_submitted"] is True

    response = await client.post(f"{BASE}/submissions/{sid}/feedback", headers=as_admin)
    assert response.status_code == 201
    assert response.json()["final_rating"] == 4
    assert response.json()["message"] == "Sharp passing"

    detail = (await client.get(f"{BASE}/submissions/{sid}", headers=as_student)).json()
    assert detail["submission"]["status"] == "feedback_sent"
    assert detail["reviews"] == []
    assert detail["feedback"]["final_rating"] == 4

    feedback = await client.get(f"{BASE}/submissions/{sid}/feedback", headers=as_student)
    assert feedback.status_code == 200

    response = await client.post(f"{BASE}/submissions/{sid}/refund", headers=factory.headers(await factory.user("finance")))
    assert response.status_code == 409


async def test_only_students_submit(client: AsyncClient, factory):
    viewer = await factory.user("viewer")
    response = await client.post(f"{BASE}/submissions", json={"media_url": "https://v"}, headers=factory.headers(viewer))
    assert response.status_code == 403


async def test_other_students_cannot_see_submission(client: AsyncClient, factory):
    school = await factory.school()
    owner, _ = await factory.student(school)
    other, _ = await factory.student(school)
    sid = (
        await client.post(f"{BASE}/submissions", json={"media_url": "https://v"}, headers=factory.headers(owner))
    ).json()["id"]

    response = await client.get(f"{BASE}/submissions/{sid}", headers=factory.headers(other))
    assert response.status_code == 404

    mine = await client.get(f"{BASE}/submissions/mine", headers=factory.headers(owner))
    assert [s["id"] for s in mine.json()] == [sid]


async def test_cancel_before_payment(client: AsyncClient, factory):
    school = await factory.school()
    student, _ = await factory.student(school)
    headers = factory.headers(student)
    sid = (await client.post(f"{BASE}/submissions", json={"media_url": "https://v"}, headers=headers)).json()["id"]

    response = await client.post(f"{BASE}/submissions/{sid}/cancel", headers=headers)
    assert response.json()["status"] == "canceled"
    response = await client.post(f"{BASE}/submissions/{sid}/pay", headers=headers)
    assert response.status_code == 409
    assert response.json()["code"] == "invalid_transition"


async def test_admin_views(client: AsyncClient, factory):
    scout_admin = await factory.user("scout_admin")
    headers = factory.headers(scout_admin)

    listed = await client.get(f"{BASE}/admin/submissions", params={"status": "paid"}, headers=headers)
    assert listed.status_code == 200
    assert listed.json() == []

    analytics = await client.get(f"{BASE}/analytics", headers=headers)
    assert analytics.json()["total_submissions"] == 0

    viewer = await factory.user("viewer")
    response = await client.get(f"{BASE}/analytics", headers=factory.headers(viewer))
    assert response.status_code == 403
