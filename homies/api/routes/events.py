"""
Event endpoints: add, list, join, leave, edit.

Writes answer with a 303 redirect to the listing. An add/edit whose type
does not exist gets the submitted form back with its model state and a 422.
"""

from fastapi import APIRouter, Depends, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse, RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from homies.db.session import get_db
from homies.models.user import User
from homies.schemas.event import EventForm, EventFormView, EventShortView, EventDetailsView
from homies.services import event_service
from homies.services.participation_service import join_event, leave_event
from homies.services.cache_service import get_cached_events, set_cached_events, invalidate_event_cache
from homies.core.security import get_current_user
from homies.core.metrics import record_event_action
from homies.core.logging import get_logger

logger = get_logger(__name__)
router = APIRouter(prefix="/events", tags=["Events"])


def _redirect_to_all(request: Request) -> RedirectResponse:
    return RedirectResponse(request.url_for("all_events"), status_code=status.HTTP_303_SEE_OTHER)


def _invalid_form(view: EventFormView) -> JSONResponse:
    return JSONResponse(
        status_code=422,
        content=jsonable_encoder(view),
    )


@router.get("/", response_model=list[EventShortView], name="all_events")
async def all_events(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    List every event in short form.
    Served from Redis when cached; add and edit invalidate the cache.
    """
    cached = await get_cached_events()
    if cached is not None:
        logger.info("events_list_cache_hit")
        return cached

    events = await event_service.list_events(db)
    views = [event_service.to_short_view(e) for e in events]
    await set_cached_events([v.model_dump(mode="json") for v in views])
    return views


@router.get("/add", response_model=EventFormView)
async def add_form(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Empty add form with the available types."""
    return await event_service.build_form_view(db)


@router.post(
    "/add",
    status_code=status.HTTP_303_SEE_OTHER,
    responses={422: {"model": EventFormView}},
)
async def add_event(
    form: EventForm,
    request: Request,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Create an event organised by the caller."""
    errors = await event_service.validate_event_form(db, form)
    if errors:
        record_event_action("add", "invalid")
        return _invalid_form(await event_service.build_form_view(db, form, errors))

    await event_service.create_event(db, form, user.id)
    # invalidate only after the rows are committed
    await db.commit()
    await invalidate_event_cache()
    return _redirect_to_all(request)


@router.get("/joined", response_model=list[EventShortView])
async def joined_events(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Events the caller has joined."""
    events = await event_service.list_joined_events(db, user.id)
    return [event_service.to_short_view(e) for e in events]


@router.get("/{event_id}", response_model=EventDetailsView)
async def event_details(
    event_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    event = await event_service.get_event(db, event_id)
    return event_service.to_details_view(event)


@router.get("/{event_id}/edit", response_model=EventFormView)
async def edit_form(
    event_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Edit form prefilled from the event. Organiser only."""
    event = await event_service.get_owned_event(db, event_id, user.id)
    return await event_service.build_form_view(db, event_service.event_to_form(event))


@router.post(
    "/{event_id}/edit",
    status_code=status.HTTP_303_SEE_OTHER,
    responses={422: {"model": EventFormView}},
)
async def edit_event(
    event_id: int,
    form: EventForm,
    request: Request,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Overwrite name, description, start, end and type. Organiser only."""
    event = await event_service.get_owned_event(db, event_id, user.id)

    errors = await event_service.validate_event_form(db, form)
    if errors:
        record_event_action("edit", "invalid")
        return _invalid_form(await event_service.build_form_view(db, form, errors))

    await event_service.update_event(db, event, form)
    await db.commit()
    await invalidate_event_cache()
    return _redirect_to_all(request)


@router.post("/{event_id}/join", status_code=status.HTTP_303_SEE_OTHER)
async def join(
    event_id: int,
    request: Request,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Join the event's roster. Re-joining is a no-op."""
    await join_event(db, event_id, user.id)
    return _redirect_to_all(request)


@router.post("/{event_id}/leave", status_code=status.HTTP_303_SEE_OTHER)
async def leave(
    event_id: int,
    request: Request,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Leave the event's roster, whether or not the caller had joined."""
    await leave_event(db, event_id, user.id)
    return _redirect_to_all(request)
