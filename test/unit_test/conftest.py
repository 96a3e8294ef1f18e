"""
Shared fixtures for unit tests.

Every test gets a fresh in-memory SQLite database, a session bound to it,
the repository bundle over that session and an HTTP client against the app
with ``get_session`` overridden to the same session.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import AsyncGenerator, Optional

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from lockerroom.core.database import create_all, create_engine, create_sessionmaker, get_session
from lockerroom.core.database.entities.posts import Post
from lockerroom.core.database.entities.schools import School, Student
from lockerroom.core.database.entities.users import User
from lockerroom.core.database.repositories import SqlRepoBundle, build_sql_repos_from_session
from lockerroom.server.services.auth import create_access_token, create_user

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
DEFAULT_PASSWORD = "password123"


@pytest_asyncio.fixture
async def test_engine():
    """Create a test database engine with all tables."""
    engine = create_engine(TEST_DATABASE_URL)
    await create_all(engine)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture(name="session")
async def session_fixture(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a new session for each test."""
    async with create_sessionmaker(test_engine)() as session:
        yield session


@pytest_asyncio.fixture
async def repos(session: AsyncSession) -> SqlRepoBundle:
    return build_sql_repos_from_session(session=session)


@pytest_asyncio.fixture(name="client")
async def client_fixture(session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create an async HTTP client with the database session overridden."""
    from lockerroom.server.main import app

    async def get_session_override() -> AsyncGenerator[AsyncSession, None]:
        yield session

    app.dependency_overrides[get_session] = get_session_override

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://localhost") as client:
        yield client

    app.dependency_overrides.clear()


class Factory:
    """Builds persisted test data."""

    def __init__(self, repos: SqlRepoBundle) -> None:
        self.repos = repos
        self._seq = 0

    def _next(self) -> int:
        self._seq += 1
        return self._seq

    async def user(
        self,
        role: str = "viewer",
        *,
        school_id: Optional[str] = None,
        email: Optional[str] = None,
        name: Optional[str] = None,
        password: str = DEFAULT_PASSWORD,
    ) -> User:
        n = self._next()
        return await create_user(
            self.repos,
            email=email or f"{role}{n}@example.com",
            password=password,
            name=name or f"{role.replace('_', ' ').title()} {n}",
            role=role,
            school_id=school_id,
        )

    @staticmethod
    def headers(user: User) -> dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token(user)}"}

    async def school(self, *, max_students: int = 100, **kwargs) -> School:
        kwargs.setdefault("name", f"School {self._next()}")
        kwargs.setdefault("payment_amount", Decimal("100.00"))
        return await self.repos.schools.create(School(max_students=max_students, **kwargs))

    async def student(self, school: School, **kwargs) -> tuple[User, Student]:
        user = await self.user("student", school_id=school.id, name=kwargs.pop("name", None))
        student = await self.repos.students.create(
            Student(user_id=user.id, school_id=school.id, name=user.name, **kwargs)
        )
        return user, student

    async def post(
        self,
        author: User,
        student: Optional[Student] = None,
        *,
        caption: Optional[str] = "Game day",
        created_at: Optional[datetime] = None,
        **kwargs,
    ) -> Post:
        post = Post(
            author_id=author.id,
            student_id=student.id if student else None,
            school_id=student.school_id if student else author.school_id,
            caption=caption,
            **kwargs,
        )
        if created_at is not None:
            post.created_at = created_at
        return await self.repos.posts.create(post)


@pytest_asyncio.fixture
async def factory(repos: SqlRepoBundle) -> Factory:
    return Factory(repos)
