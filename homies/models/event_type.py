"""
Event categories. Reference data: seeded by migration, never edited here.
"""

from sqlalchemy import Column, Integer, String

from homies.db.base import Base

TYPE_NAME_MAX_LENGTH = 15


class EventType(Base):
    __tablename__ = "types"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(TYPE_NAME_MAX_LENGTH), nullable=False)

    def __repr__(self) -> str:
        return f"<EventType(id={self.id}, name={self.name})>"
