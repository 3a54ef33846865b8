"""
Service-level tests for the shared form validation.
"""

import pytest

from homies.schemas.event import EventForm
from homies.services import event_service


@pytest.mark.asyncio
async def test_type_exists(db_session, event_type):
    assert await event_service.type_exists(db_session, 1) is True
    assert await event_service.type_exists(db_session, 99) is False


@pytest.mark.asyncio
async def test_validate_event_form(db_session, event_type, make_form):
    valid = EventForm(**make_form())
    assert await event_service.validate_event_form(db_session, valid) == {}

    invalid = EventForm(**make_form(type_id=99))
    errors = await event_service.validate_event_form(db_session, invalid)
    assert errors == {"type_id": [event_service.INVALID_TYPE_MESSAGE]}


@pytest.mark.asyncio
async def test_build_form_view_keeps_submitted_values(db_session, event_type, make_form):
    form = EventForm(**make_form(name="Board Games"))
    view = await event_service.build_form_view(db_session, form, {"type_id": ["bad"]})

    assert view.name == "Board Games"
    assert [t.name for t in view.types] == ["Type 1"]
    assert not view.is_valid


def test_event_form_rejects_reversed_window(make_form):
    data = make_form()
    data["end"] = data["start"]
    with pytest.raises(ValueError):
        EventForm(**data)
