"""
User mirror of the external identity store.

Only the string id is referenced by events and participation rows; the
username is shown in listings.
"""

from sqlalchemy import Column, String

from homies.db.base import Base, TimestampMixin


class User(Base, TimestampMixin):
    __tablename__ = "users"

    id = Column(String(450), primary_key=True)
    username = Column(String(256), unique=True, index=True, nullable=False)
    email = Column(String(256), nullable=True)

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username={self.username})>"
