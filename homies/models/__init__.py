from homies.models.user import User
from homies.models.event_type import EventType
from homies.models.event import Event
from homies.models.event_participant import EventParticipant

__all__ = ["User", "EventType", "Event", "EventParticipant"]
