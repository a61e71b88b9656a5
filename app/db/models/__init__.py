"""Database models package."""
from app.db.models.event import Event, EventMode
from app.db.models.booking import Booking

__all__ = ["Event", "EventMode", "Booking"]
