"""
Participation service: joining and leaving an event's roster.

Both operations are idempotent from the caller's side:
- joining twice keeps a single roster row (the composite primary key on
  event_participants backs this up at the DB level)
- leaving without having joined is a no-op
"""

from sqlalchemy import insert
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from fastapi import HTTPException, status

from homies.models.event import Event
from homies.models.event_participant import EventParticipant
from homies.core.logging import get_logger
from homies.core.metrics import record_event_action

logger = get_logger(__name__)


def _find_participant(event: Event, user_id: str):
    for participant in event.participants:
        if participant.user_id == user_id:
            return participant
    return None


async def join_event(db: AsyncSession, event_id: int, user_id: str) -> bool:
    """
    Add the caller to the event's roster.
    Returns False when the caller had already joined.
    Raises 400 if the event does not exist.
    """
    event = await db.get(Event, event_id, populate_existing=True)
    if not event:
        logger.warning("join_failed_no_event", event_id=event_id, user_id=user_id)
        record_event_action("join", "not_found")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Event {event_id} does not exist",
        )

    if _find_participant(event, user_id) is not None:
        logger.info("event_already_joined", event_id=event_id, user_id=user_id)
        record_event_action("join", "noop")
        return False

    # a concurrent join can pass the check above; the primary key decides
    try:
        async with db.begin_nested():
            await db.execute(
                insert(EventParticipant).values(event_id=event_id, user_id=user_id)
            )
    except IntegrityError:
        logger.info("event_join_raced", event_id=event_id, user_id=user_id)
        record_event_action("join", "noop")
        return False

    logger.info("event_joined", event_id=event_id, user_id=user_id)
    record_event_action("join", "success")
    return True


async def leave_event(db: AsyncSession, event_id: int, user_id: str) -> bool:
    """
    Remove the caller from the event's roster.
    Returns False when the caller was not on it.
    Raises 404 if the event does not exist.
    """
    event = await db.get(Event, event_id, populate_existing=True)
    if not event:
        record_event_action("leave", "not_found")
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Event {event_id} not found",
        )

    participant = _find_participant(event, user_id)
    if participant is None:
        logger.info("event_not_joined", event_id=event_id, user_id=user_id)
        record_event_action("leave", "noop")
        return False

    # delete-orphan cascade removes the row on flush
    event.participants.remove(participant)
    await db.flush()

    logger.info("event_left", event_id=event_id, user_id=user_id)
    record_event_action("leave", "success")
    return True
