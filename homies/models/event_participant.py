"""
Participation roster: which users joined which event.

The composite primary key allows at most one row per (event, user) pair.
"""

from sqlalchemy import Column, Integer, String, ForeignKey
from sqlalchemy.orm import relationship

from homies.db.base import Base


class EventParticipant(Base):
    __tablename__ = "event_participants"

    event_id = Column(Integer, ForeignKey("events.id"), primary_key=True)
    user_id = Column(String(450), ForeignKey("users.id"), primary_key=True, index=True)

    event = relationship("Event", back_populates="participants")
    user = relationship("User", lazy="selectin")

    def __repr__(self) -> str:
        return f"<EventParticipant(event={self.event_id}, user={self.user_id})>"
