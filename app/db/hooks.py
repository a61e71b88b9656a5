"""
Pre-save steps for events and bookings.

Repositories call these explicitly right before committing. They validate,
normalize and fill derived fields, and raise a DomainError to abort the write.
Only fields that changed since the last load are re-derived, which mirrors
"on modified" hooks of a document store.
"""
import re
from typing import Optional
from uuid import UUID

from sqlalchemy import inspect, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import InvalidInputError, ReferentialIntegrityError
from app.core.logging import logger
from app.core.normalizers import normalize_iso_date, normalize_time, slugify
from app.core.validators import is_non_empty_string, is_non_empty_string_array, is_valid_email
from app.db.models.booking import Booking
from app.db.models.event import Event

EVENT_STRING_FIELDS = (
    "title", "description", "overview", "image", "venue", "location",
    "date", "time", "mode", "audience", "organizer",
)
EVENT_LIST_FIELDS = ("agenda", "tags")
# Raw input may be longer than the stored, derived value
DERIVED_FIELDS = ("slug", "date", "time")


def is_modified(instance, field: str) -> bool:
    """True if ``field`` was set on a new instance or changed on a loaded one."""
    return inspect(instance).attrs[field].history.has_changes()


async def event_exists(session: AsyncSession, event_id) -> bool:
    q = select(Event.id).where(Event.id == event_id).limit(1)
    res = await session.execute(q)
    return res.scalar() is not None


async def resolve_unique_slug(session: AsyncSession, base: str, exclude_id: Optional[UUID] = None) -> str:
    """
    Return ``base`` or the first free ``base-N`` among existing event slugs.

    This is a fast path; the unique index on ``events.slug`` has the final say.
    """
    q = select(Event.slug).where(or_(Event.slug == base, Event.slug.like(f"{base}-%")))
    if exclude_id is not None:
        q = q.where(Event.id != exclude_id)

    with session.no_autoflush:
        res = await session.execute(q)
    pattern = re.compile(rf"{re.escape(base)}(?:-\d+)?")
    taken = {slug for slug in res.scalars().all() if pattern.fullmatch(slug)}

    candidate = base
    suffix = 1
    while candidate in taken:
        candidate = f"{base}-{suffix}"
        suffix += 1
    return candidate


def _check_length(model, field: str, value: str) -> None:
    """Reject values longer than the column allows instead of failing at commit."""
    max_length = getattr(model.__table__.c[field].type, "length", None)
    if max_length is not None and len(value) > max_length:
        raise InvalidInputError(f"{field} is too long (max {max_length} characters)")


def _validate_event_fields(event: Event) -> None:
    for field in EVENT_STRING_FIELDS:
        value = getattr(event, field)
        if isinstance(value, str) and value != value.strip():
            setattr(event, field, value.strip())
        if not is_non_empty_string(getattr(event, field)):
            raise InvalidInputError(f"{field} is required")
        if field not in DERIVED_FIELDS:
            _check_length(Event, field, getattr(event, field))

    for field in EVENT_LIST_FIELDS:
        if not is_non_empty_string_array(getattr(event, field)):
            raise InvalidInputError(f"{field} must be a non-empty array of strings")


async def prepare_event(session: AsyncSession, event: Event) -> None:
    """
    Validate an event and derive slug, date and time before it is saved.

    - title changed: slug regenerated and made unique
    - date changed: normalized to ``YYYY-MM-DD``
    - time changed: normalized to ``HH:mm`` or ``HH:mm-HH:mm``

    All derived values are assigned together, after every check has passed.

    Raises:
        InvalidInputError: On any missing/blank field or unparseable date/time
    """
    _validate_event_fields(event)

    # Read change flags before any query can autoflush and clear history
    title_changed = is_modified(event, "title")
    date_changed = is_modified(event, "date")
    time_changed = is_modified(event, "time")

    slug = event.slug
    date = event.date
    time = event.time

    if title_changed:
        slug = await resolve_unique_slug(session, slugify(event.title), exclude_id=event.id)
    if date_changed:
        date = normalize_iso_date(event.date)
    if time_changed:
        time = normalize_time(event.time)

    _check_length(Event, "slug", slug)

    if slug != event.slug:
        logger.debug(f"Slug for '{event.title}' resolved to {slug}")
    event.slug = slug
    event.date = date
    event.time = time


async def prepare_booking(session: AsyncSession, booking: Booking) -> None:
    """
    Normalize the booking email and check that the referenced event exists.

    The existence check only runs when ``event_id`` was set or changed.

    Raises:
        InvalidInputError: If the email is missing or malformed
        ReferentialIntegrityError: If ``event_id`` does not match an event
    """
    if isinstance(booking.email, str):
        normalized = booking.email.strip().lower()
        if normalized != booking.email:
            booking.email = normalized
    if not is_valid_email(booking.email):
        raise InvalidInputError("Invalid email")
    _check_length(Booking, "email", booking.email)

    if booking.event_id is None:
        raise InvalidInputError("eventId is required")

    if is_modified(booking, "event_id"):
        with session.no_autoflush:
            exists = await event_exists(session, booking.event_id)
        if not exists:
            raise ReferentialIntegrityError()
