from homies.schemas.event import (
    EventForm,
    EventFormView,
    EventShortView,
    EventDetailsView,
    TypeView,
)

__all__ = [
    "EventForm", "EventFormView", "EventShortView", "EventDetailsView", "TypeView",
]
