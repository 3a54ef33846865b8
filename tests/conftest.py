"""
Pytest fixtures for test database, client, and authentication.

Uses in-memory SQLite (aiosqlite) on a single shared connection; tables are
created and dropped per test for isolation. Seed data mirrors the reference
scenario: one user, one type {1, "Type 1"}, two events {1, 2}.
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("REDIS_ENABLED", "false")

from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from homies.main import app
from homies.db.base import Base
from homies.db.session import get_db
from homies.core.security import create_access_token
from homies.models.user import User
from homies.models.event_type import EventType
from homies.models.event import Event

TEST_DATABASE_URL = "sqlite+aiosqlite://"

test_engine = create_async_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
    echo=False,
)
TestSessionLocal = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


def local_now() -> datetime:
    """Naive wall-clock time, the way form posts arrive."""
    return datetime.now().replace(microsecond=0)


@pytest_asyncio.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create tables, yield session, then drop tables for isolation."""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with TestSessionLocal() as session:
        yield session

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest_asyncio.fixture(scope="function")
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client that overrides the DB dependency with the test session."""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def test_user(db_session: AsyncSession) -> User:
    user = User(id="test-user", username="TestUser", email="test@example.com")
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


@pytest_asyncio.fixture
async def other_user(db_session: AsyncSession) -> User:
    user = User(id="other-user", username="OtherUser", email="other@example.com")
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


@pytest_asyncio.fixture
async def auth_headers(test_user: User) -> dict:
    token = create_access_token(data={"sub": test_user.id})
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture
async def other_auth_headers(other_user: User) -> dict:
    token = create_access_token(data={"sub": other_user.id})
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture
async def event_type(db_session: AsyncSession) -> EventType:
    event_type = EventType(id=1, name="Type 1")
    db_session.add(event_type)
    await db_session.commit()
    await db_session.refresh(event_type)
    return event_type


@pytest_asyncio.fixture
async def seeded_events(db_session: AsyncSession, test_user: User, event_type: EventType) -> list[Event]:
    """Two events organised by the test user."""
    now = local_now()
    events = [
        Event(
            id=1,
            name="Event 1",
            description="Description 1 for the first event",
            organiser_id=test_user.id,
            created_at=datetime.now(timezone.utc),
            start=now + timedelta(hours=1),
            end=now + timedelta(hours=2),
            type_id=event_type.id,
        ),
        Event(
            id=2,
            name="Event 2",
            description="Description 2 for the second event",
            organiser_id=test_user.id,
            created_at=datetime.now(timezone.utc),
            start=now + timedelta(hours=3),
            end=now + timedelta(hours=4),
            type_id=event_type.id,
        ),
    ]
    db_session.add_all(events)
    await db_session.commit()
    for event in events:
        await db_session.refresh(event)
    return events


def event_form(name="New Event", description="New Description", type_id=1, offset_hours=1) -> dict:
    start = local_now() + timedelta(hours=offset_hours)
    return {
        "name": name,
        "description": description,
        "start": start.isoformat(),
        "end": (start + timedelta(hours=1)).isoformat(),
        "type_id": type_id,
    }


@pytest.fixture
def make_form():
    """Factory for add/edit request bodies."""
    return event_form
