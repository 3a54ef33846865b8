"""
Pydantic schemas for event forms and views.
"""

from datetime import datetime, timezone
from typing import Optional
from pydantic import BaseModel, Field, field_validator, model_validator

from homies.models.event import (
    NAME_MIN_LENGTH,
    NAME_MAX_LENGTH,
    DESCRIPTION_MIN_LENGTH,
    DESCRIPTION_MAX_LENGTH,
)


class TypeView(BaseModel):
    id: int
    name: str

    model_config = {"from_attributes": True}


class EventForm(BaseModel):
    """Body of the add and edit actions."""

    name: str = Field(..., min_length=NAME_MIN_LENGTH, max_length=NAME_MAX_LENGTH)
    description: str = Field(
        ..., min_length=DESCRIPTION_MIN_LENGTH, max_length=DESCRIPTION_MAX_LENGTH
    )
    start: datetime
    end: datetime
    type_id: int

    @field_validator("start", "end")
    @classmethod
    def to_naive_utc(cls, v: datetime) -> datetime:
        """Offset-aware times are stored as naive UTC; naive times are kept as sent."""
        if v.tzinfo is not None:
            return v.astimezone(timezone.utc).replace(tzinfo=None)
        return v

    @model_validator(mode="after")
    def check_time_window(self) -> "EventForm":
        if self.end <= self.start:
            raise ValueError("End must be after start")
        return self


class EventFormView(BaseModel):
    """
    The add/edit form as rendered to the caller.
    `errors` is the model state: field name -> messages, empty when valid.
    """

    name: str = ""
    description: str = ""
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    type_id: Optional[int] = None
    types: list[TypeView] = []
    errors: dict[str, list[str]] = {}

    @property
    def is_valid(self) -> bool:
        return not self.errors


class EventShortView(BaseModel):
    id: int
    name: str
    description: str
    start: datetime
    end: datetime
    type: str
    organiser: str


class EventDetailsView(BaseModel):
    id: int
    name: str
    description: str
    start: datetime
    end: datetime
    created_at: datetime
    type: str
    organiser: str
    participants: list[str] = []
