"""Unit tests for school onboarding applications."""

import pytest

from lockerroom.core.errors import ConflictError, DomainValidationError, PermissionDeniedError
from lockerroom.core.models.io.schools import SchoolApplicationCreate
from lockerroom.server.services import school_applications

pytestmark = pytest.mark.asyncio


def _application(**kwargs) -> SchoolApplicationCreate:
    data = {
        "school_name": " Riverside Academy ",
        "contact_name": "Pat Lee",
        "contact_email": "Pat@Riverside.edu",
        "expected_students": 40,
    }
    data.update(kwargs)
    return SchoolApplicationCreate(**data)


async def test_submit_normalises(repos):
    application = await school_applications.submit(repos, _application())
    assert application.status == "pending"
    assert application.school_name == "Riverside Academy"
    assert application.contact_email == "pat@riverside.edu"


async def test_submit_requires_email(repos):
    with pytest.raises(DomainValidationError):
        await school_applications.submit(repos, _application(contact_email="nobody"))


async def test_approve_creates_school(repos, factory):
    admin = await factory.user("system_admin")
    other_admin = await factory.user("system_admin")
    application = await school_applications.submit(repos, _application())

    approved = await school_applications.approve(repos, admin, application.id, notes="Welcome")
    assert approved.status == "approved"
    assert approved.reviewed_by == admin.id
    assert approved.reviewed_at is not None
    school = await repos.schools.get_by_id(approved.school_id)
    assert school.name == "Riverside Academy"
    assert school.max_students == 40
    assert await repos.notifications.unread_count(other_admin.id) == 1
    assert await repos.notifications.unread_count(admin.id) == 0


async def test_decisions_are_final(repos, factory):
    admin = await factory.user("system_admin")
    application = await school_applications.submit(repos, _application())
    await school_applications.reject(repos, admin, application.id, notes="Incomplete")
    with pytest.raises(ConflictError):
        await school_applications.approve(repos, admin, application.id)
    with pytest.raises(ConflictError):
        await school_applications.reject(repos, admin, application.id)


async def test_list_by_status(repos, factory):
    admin = await factory.user("system_admin")
    first = await school_applications.submit(repos, _application())
    await school_applications.submit(repos, _application(school_name="Hillside"))
    await school_applications.approve(repos, admin, first.id)

    pending = await school_applications.list_applications(repos, admin, status="pending")
    assert [a.school_name for a in pending] == ["Hillside"]
    with pytest.raises(DomainValidationError):
        await school_applications.list_applications(repos, admin, status="maybe")


async def test_only_system_admin_decides(repos, factory):
    finance = await factory.user("finance")
    application = await school_applications.submit(repos, _application())
    with pytest.raises(PermissionDeniedError):
        await school_applications.approve(repos, finance, application.id)
