from __future__ import annotations

from collections.abc import AsyncIterator

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool
from src.api.deps import get_db_session
from src.api.main import app
from src.core.auth import Role
from src.domain import Principal
from src.infrastructure.db.base import Base
from src.infrastructure.db.models import UserModel, UserRole

from tests.utils import OTHER_TUTOR_ID, STUDENT_ID, TUTOR_ID

SEED_USERS = [
    {
        "id": STUDENT_ID,
        "email": "ana@example.com",
        "full_name": "Ana Student",
        "role": UserRole.STUDENT,
        "expertise": [],
    },
    {
        "id": TUTOR_ID,
        "email": "ben@example.com",
        "full_name": "Ben Tutor",
        "role": UserRole.TUTOR,
        "expertise": ["algebra"],
    },
    {
        "id": OTHER_TUTOR_ID,
        "email": "cleo@example.com",
        "full_name": "Cleo Tutor",
        "role": UserRole.TUTOR,
        "expertise": ["physics"],
    },
]


@pytest.fixture()
async def engine() -> AsyncIterator[AsyncEngine]:
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture()
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest.fixture()
async def db(session_factory: async_sessionmaker[AsyncSession]) -> AsyncIterator[AsyncSession]:
    """Provide a database session for tests that need direct DB access."""
    async with session_factory() as session:
        yield session


@pytest.fixture()
async def seeded_users(session_factory: async_sessionmaker[AsyncSession]) -> list[dict]:
    async with session_factory() as session:
        for user in SEED_USERS:
            session.add(UserModel(hashed_password="not-a-real-hash", **user))
        await session.commit()
    return SEED_USERS


@pytest.fixture()
async def async_client(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncIterator[AsyncClient]:
    """Async HTTP client bound to the in-memory database."""

    async def override_db_session() -> AsyncIterator[AsyncSession]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db_session] = override_db_session
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.pop(get_db_session, None)


@pytest.fixture()
def student() -> Principal:
    return Principal(user_id=STUDENT_ID, role=Role.STUDENT.value)


@pytest.fixture()
def tutor() -> Principal:
    return Principal(user_id=TUTOR_ID, role=Role.TUTOR.value)


@pytest.fixture()
def other_tutor() -> Principal:
    return Principal(user_id=OTHER_TUTOR_ID, role=Role.TUTOR.value)
