from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel
from typing import List, Optional
from uuid import UUID
from datetime import datetime

from app.db.models.event import EventMode

MODE_EXAMPLES = [mode.value for mode in EventMode]


class CamelModel(BaseModel):
    """Accepts and emits camelCase keys while keeping snake_case attributes."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class EventCreate(CamelModel):
    # Presence and content are checked on save so every field error uses the same message format
    title: Optional[str] = None
    description: Optional[str] = None
    overview: Optional[str] = None
    image: Optional[str] = None
    venue: Optional[str] = None
    location: Optional[str] = None
    date: Optional[str] = Field(None, examples=["2025-11-07", "Nov 7, 2025"])
    time: Optional[str] = Field(None, examples=["09:00", "9:00 AM - 6:00 PM"])
    mode: Optional[str] = Field(None, examples=MODE_EXAMPLES)
    audience: Optional[str] = None
    agenda: Optional[List[str]] = None
    organizer: Optional[str] = None
    tags: Optional[List[str]] = None


class EventUpdate(EventCreate):
    """Partial update; only fields present in the request body are applied."""


class EventOut(CamelModel):
    id: UUID
    title: str
    slug: str
    description: str
    overview: str
    image: str
    venue: str
    location: str
    date: str
    time: str
    mode: str
    audience: str
    agenda: List[str]
    organizer: str
    tags: List[str]
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class EventEnvelope(BaseModel):
    event: EventOut


class EventList(BaseModel):
    events: List[EventOut]
    total: int


class BookingCreate(CamelModel):
    event_id: UUID
    email: Optional[str] = None


class BookingOut(CamelModel):
    id: UUID
    event_id: UUID
    email: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class BookingEnvelope(BaseModel):
    booking: BookingOut


class MessageOut(BaseModel):
    """Error body: ``message`` always, ``error`` for unexpected failures."""
    message: str
    error: Optional[str] = None
