"""
Tests for joining and leaving an event's roster.
"""

import pytest
from httpx import AsyncClient
from sqlalchemy import select, func

from homies.models.event_participant import EventParticipant
from homies.services import participation_service


async def find_participant(db_session, event_id: int, user_id: str):
    return await db_session.scalar(
        select(EventParticipant).where(
            EventParticipant.event_id == event_id,
            EventParticipant.user_id == user_id,
        )
    )


@pytest.mark.asyncio
async def test_join_event(client: AsyncClient, auth_headers, seeded_events, db_session):
    """Joining adds the caller to the roster and redirects to the listing."""
    response = await client.post("/api/v1/events/1/join", headers=auth_headers)
    assert response.status_code == 303
    assert response.headers["location"].endswith("/api/v1/events/")
    assert await find_participant(db_session, 1, "test-user") is not None


@pytest.mark.asyncio
async def test_join_nonexistent_event(client: AsyncClient, auth_headers, seeded_events, db_session):
    """Joining a missing event is a bad request and creates no row."""
    response = await client.post("/api/v1/events/99/join", headers=auth_headers)
    assert response.status_code == 400
    count = await db_session.scalar(select(func.count()).select_from(EventParticipant))
    assert count == 0


@pytest.mark.asyncio
async def test_join_twice_keeps_single_row(client: AsyncClient, auth_headers, seeded_events, db_session):
    await client.post("/api/v1/events/1/join", headers=auth_headers)
    response = await client.post("/api/v1/events/1/join", headers=auth_headers)
    assert response.status_code == 303

    count = await db_session.scalar(
        select(func.count()).select_from(EventParticipant).where(EventParticipant.event_id == 1)
    )
    assert count == 1


@pytest.mark.asyncio
async def test_join_conflict_on_insert_is_noop(
    client: AsyncClient, auth_headers, seeded_events, db_session, monkeypatch
):
    """Two joins that both miss the roster check still leave one row."""
    monkeypatch.setattr(participation_service, "_find_participant", lambda event, user_id: None)

    assert await participation_service.join_event(db_session, 1, "test-user") is True
    assert await participation_service.join_event(db_session, 1, "test-user") is False

    response = await client.post("/api/v1/events/1/join", headers=auth_headers)
    assert response.status_code == 303

    count = await db_session.scalar(
        select(func.count()).select_from(EventParticipant).where(EventParticipant.event_id == 1)
    )
    assert count == 1


@pytest.mark.asyncio
async def test_leave_event(client: AsyncClient, auth_headers, seeded_events, db_session):
    """Leaving after joining removes the roster row."""
    await client.post("/api/v1/events/1/join", headers=auth_headers)

    response = await client.post("/api/v1/events/1/leave", headers=auth_headers)
    assert response.status_code == 303
    assert await find_participant(db_session, 1, "test-user") is None


@pytest.mark.asyncio
async def test_leave_without_joining(client: AsyncClient, auth_headers, seeded_events):
    response = await client.post("/api/v1/events/2/leave", headers=auth_headers)
    assert response.status_code == 303


@pytest.mark.asyncio
async def test_leave_nonexistent_event(client: AsyncClient, auth_headers, seeded_events):
    response = await client.post("/api/v1/events/99/leave", headers=auth_headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_joined_lists_only_joined_events(client: AsyncClient, auth_headers, seeded_events):
    await client.post("/api/v1/events/2/join", headers=auth_headers)

    response = await client.get("/api/v1/events/joined", headers=auth_headers)
    assert response.status_code == 200
    assert [e["id"] for e in response.json()] == [2]


@pytest.mark.asyncio
async def test_details_shows_participants(
    client: AsyncClient, auth_headers, other_auth_headers, seeded_events
):
    await client.post("/api/v1/events/1/join", headers=auth_headers)
    await client.post("/api/v1/events/1/join", headers=other_auth_headers)

    response = await client.get("/api/v1/events/1", headers=auth_headers)
    assert response.json()["participants"] == ["OtherUser", "TestUser"]
