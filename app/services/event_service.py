from sqlalchemy.ext.asyncio import AsyncSession
from app.schemas import EventCreate, EventUpdate
from app.db.models.event import Event
from app.db.repositories import (
    create_event as db_create_event,
    update_event as db_update_event,
    get_event_by_slug as db_get_event_by_slug,
    list_events as db_list_events,
    count_events as db_count_events,
)
from app.core.errors import NotFoundError
from typing import List, Optional, Tuple


class EventService:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_event(self, payload: EventCreate) -> Event:
        return await db_create_event(self.session, payload.model_dump())

    async def get_event_by_slug(self, slug: str) -> Optional[Event]:
        return await db_get_event_by_slug(self.session, slug)

    async def update_event(self, slug: str, payload: EventUpdate) -> Event:
        """
        Apply a partial update to the event identified by ``slug``.

        Raises:
            NotFoundError: If no event has this slug
        """
        event = await db_get_event_by_slug(self.session, slug)
        if event is None:
            raise NotFoundError(f"Event not found for slug: {slug}")
        changes = payload.model_dump(exclude_unset=True)
        return await db_update_event(self.session, event, changes)

    async def list_events_paginated(self, skip: int, limit: int) -> Tuple[int, List[Event]]:
        """
        List events with pagination support.
        Returns tuple of (total_count, events).
        """
        total = await db_count_events(self.session)
        events = await db_list_events(self.session, limit=limit, offset=skip)
        return total, events
