"""
Event model.

Key design decisions:
- `organiser_id` is stamped from the caller on creation and never edited
- `type_id` must reference an existing row in `types`; checked by the service
  before every write since not every backend enforces foreign keys
- Index on `start` for the listing, which is ordered by start time
"""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Index
from sqlalchemy.orm import relationship

from homies.db.base import Base, TimestampMixin

NAME_MIN_LENGTH = 5
NAME_MAX_LENGTH = 20
DESCRIPTION_MIN_LENGTH = 15
DESCRIPTION_MAX_LENGTH = 150


class Event(Base, TimestampMixin):
    __tablename__ = "events"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(NAME_MAX_LENGTH), nullable=False)
    description = Column(String(DESCRIPTION_MAX_LENGTH), nullable=False)
    start = Column(DateTime(timezone=True), nullable=False)
    end = Column(DateTime(timezone=True), nullable=False)
    organiser_id = Column(String(450), ForeignKey("users.id"), nullable=False, index=True)
    type_id = Column(Integer, ForeignKey("types.id"), nullable=False)

    # Relationships
    organiser = relationship("User", lazy="selectin")
    type = relationship("EventType", lazy="selectin")
    participants = relationship(
        "EventParticipant",
        back_populates="event",
        lazy="selectin",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        Index("ix_events_start", "start"),
    )

    def __repr__(self) -> str:
        return f"<Event(id={self.id}, name={self.name}, type_id={self.type_id})>"
