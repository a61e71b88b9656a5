"""
Repository layer for database operations.

Provides async functions for reading and writing Event and Booking rows.
Every write runs the matching pre-save step from ``app.db.hooks`` first, so
validation and normalization errors abort the write before anything is sent
to the database.
"""
from sqlalchemy import select, func, inspect
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from app.db.models.event import Event
from app.db.models.booking import Booking
from app.db.hooks import prepare_event, prepare_booking, event_exists
from app.core.errors import DomainError, DuplicateSlugError
from app.core.logging import logger
from typing import Any, Dict, List, Optional
from uuid import UUID

__all__ = [
    "save_event",
    "create_event",
    "update_event",
    "get_event_by_slug",
    "list_events",
    "count_events",
    "event_exists",
    "create_booking",
]


async def _abort(db: AsyncSession, instance) -> None:
    # New instances were never added to the session; leave the rest of it alone
    if inspect(instance).persistent:
        await db.rollback()


async def save_event(db: AsyncSession, event: Event) -> Event:
    """
    Run the event pre-save step and commit.

    Args:
        db: Database session
        event: New or loaded Event with pending changes

    Returns:
        The saved Event, refreshed from the database

    Raises:
        InvalidInputError: If validation or normalization fails
        DuplicateSlugError: If the unique slug index rejects the write
    """
    try:
        await prepare_event(db, event)
    except DomainError:
        await _abort(db, event)
        raise

    slug = event.slug
    db.add(event)
    try:
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        # Another writer took the slug between our check and the insert
        if "slug" in str(e.orig).lower():
            logger.warning(f"Slug collision on commit: {slug}")
            raise DuplicateSlugError(slug) from e
        raise
    await db.refresh(event)
    return event


async def create_event(db: AsyncSession, data: Dict[str, Any]) -> Event:
    """
    Create a new event; slug, date and time are derived on save.

    Args:
        db: Database session
        data: Event field values keyed by column name

    Returns:
        Created Event object
    """
    ev = Event(**data)
    ev = await save_event(db, ev)
    logger.info(f"Event created: {ev.slug}")
    return ev


async def update_event(db: AsyncSession, event: Event, changes: Dict[str, Any]) -> Event:
    """
    Apply field changes to a loaded event and save it.

    Only the touched fields are re-derived: a new title yields a new slug,
    a new date or time is normalized again.
    """
    for field, value in changes.items():
        setattr(event, field, value)
    ev = await save_event(db, event)
    logger.info(f"Event updated: {ev.slug} ({', '.join(sorted(changes)) or 'no changes'})")
    return ev


async def get_event_by_slug(db: AsyncSession, slug: str) -> Optional[Event]:
    q = select(Event).where(Event.slug == slug)
    res = await db.execute(q)
    return res.scalars().first()


async def list_events(db: AsyncSession, limit: int = 20, offset: int = 0) -> List[Event]:
    """List events, newest first."""
    q = select(Event).order_by(Event.created_at.desc(), Event.id).limit(limit).offset(offset)
    res = await db.execute(q)
    return list(res.scalars().all())


async def count_events(db: AsyncSession) -> int:
    res = await db.execute(select(func.count(Event.id)))
    return res.scalar() or 0


async def create_booking(db: AsyncSession, event_id: UUID, email: str) -> Booking:
    """
    Book an event for an email address.

    Args:
        db: Database session
        event_id: ID of the event being booked
        email: Attendee email, stored trimmed and lowercased

    Returns:
        Created Booking object

    Raises:
        InvalidInputError: If the email is malformed
        ReferentialIntegrityError: If no event has ``event_id``
    """
    booking = Booking(event_id=event_id, email=email)
    try:
        await prepare_booking(db, booking)
    except DomainError:
        await _abort(db, booking)
        raise

    db.add(booking)
    await db.commit()
    await db.refresh(booking)
    logger.info(f"Booking created for event {event_id}")
    return booking

