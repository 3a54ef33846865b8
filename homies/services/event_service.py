"""
Event service handling creation, listing and editing.

Add and edit share one foreign-key check (`type_exists`); a failed check is
reported as model state rather than raised, so the router can redisplay the
submitted form.
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import select, exists
from sqlalchemy.ext.asyncio import AsyncSession
from fastapi import HTTPException, status

from homies.models.event import Event
from homies.models.event_type import EventType
from homies.models.event_participant import EventParticipant
from homies.schemas.event import (
    EventForm,
    EventFormView,
    EventShortView,
    EventDetailsView,
    TypeView,
)
from homies.core.logging import get_logger
from homies.core.metrics import record_event_action

logger = get_logger(__name__)

INVALID_TYPE_MESSAGE = "Selected type does not exist"


async def get_types(db: AsyncSession) -> list[EventType]:
    result = await db.execute(select(EventType).order_by(EventType.id))
    return list(result.scalars().all())


async def type_exists(db: AsyncSession, type_id: int) -> bool:
    result = await db.execute(select(exists().where(EventType.id == type_id)))
    return bool(result.scalar())


async def validate_event_form(db: AsyncSession, form: EventForm) -> dict[str, list[str]]:
    """Model state for a submitted form. Empty dict means valid."""
    errors: dict[str, list[str]] = {}
    if not await type_exists(db, form.type_id):
        logger.warning("event_type_invalid", type_id=form.type_id)
        errors.setdefault("type_id", []).append(INVALID_TYPE_MESSAGE)
    return errors


async def build_form_view(
    db: AsyncSession,
    form: Optional[EventForm] = None,
    errors: Optional[dict[str, list[str]]] = None,
) -> EventFormView:
    """Form view with the current type list, optionally prefilled and with errors."""
    types = [TypeView.model_validate(t) for t in await get_types(db)]
    values = form.model_dump() if form else {}
    return EventFormView(**values, types=types, errors=errors or {})


def event_to_form(event: Event) -> EventForm:
    return EventForm.model_construct(
        name=event.name,
        description=event.description,
        start=event.start,
        end=event.end,
        type_id=event.type_id,
    )


async def create_event(db: AsyncSession, form: EventForm, organiser_id: str) -> Event:
    """Persist a validated form as a new event organised by the caller."""
    event = Event(
        name=form.name,
        description=form.description,
        start=form.start,
        end=form.end,
        type_id=form.type_id,
        organiser_id=organiser_id,
        created_at=datetime.now(timezone.utc),
    )
    db.add(event)
    await db.flush()
    await db.refresh(event)

    logger.info("event_created", event_id=event.id, name=event.name, organiser_id=organiser_id)
    record_event_action("add", "success")
    return event


async def list_events(db: AsyncSession) -> list[Event]:
    result = await db.execute(
        select(Event)
        .order_by(Event.start, Event.id)
        .execution_options(populate_existing=True)
    )
    return list(result.scalars().all())


async def list_joined_events(db: AsyncSession, user_id: str) -> list[Event]:
    """Events whose roster includes the given user."""
    result = await db.execute(
        select(Event)
        .join(EventParticipant, EventParticipant.event_id == Event.id)
        .where(EventParticipant.user_id == user_id)
        .order_by(Event.start, Event.id)
        .execution_options(populate_existing=True)
    )
    return list(result.scalars().all())


async def get_event(db: AsyncSession, event_id: int) -> Event:
    """Get a single event by ID."""
    # refreshed so relationships reflect the latest flush
    event = await db.get(Event, event_id, populate_existing=True)

    if not event:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Event {event_id} not found",
        )
    return event


async def get_owned_event(db: AsyncSession, event_id: int, user_id: str) -> Event:
    """
    Get an event the caller is allowed to edit.
    Raises 404 if it doesn't exist and 403 if the caller isn't the organiser.
    """
    try:
        event = await get_event(db, event_id)
    except HTTPException:
        record_event_action("edit", "not_found")
        raise

    if event.organiser_id != user_id:
        logger.warning(
            "event_edit_forbidden",
            event_id=event_id,
            user_id=user_id,
            organiser_id=event.organiser_id,
        )
        record_event_action("edit", "forbidden")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only the organiser can edit this event",
        )
    return event


async def update_event(db: AsyncSession, event: Event, form: EventForm) -> Event:
    """Overwrite the editable fields with a validated form."""
    event.name = form.name
    event.description = form.description
    event.start = form.start
    event.end = form.end
    event.type_id = form.type_id

    await db.flush()
    await db.refresh(event)

    logger.info("event_updated", event_id=event.id, type_id=event.type_id)
    record_event_action("edit", "success")
    return event


def to_short_view(event: Event) -> EventShortView:
    return EventShortView(
        id=event.id,
        name=event.name,
        description=event.description,
        start=event.start,
        end=event.end,
        type=event.type.name,
        organiser=event.organiser.username,
    )


def to_details_view(event: Event) -> EventDetailsView:
    return EventDetailsView(
        id=event.id,
        name=event.name,
        description=event.description,
        start=event.start,
        end=event.end,
        created_at=event.created_at,
        type=event.type.name,
        organiser=event.organiser.username,
        participants=sorted(p.user.username for p in event.participants),
    )
