"""
Normalizers turning loosely formatted user input into stored representations.

Each function returns the canonical form or raises InvalidInputError with a
message that can be shown to the caller as-is.
"""
import re
from datetime import timezone

from dateutil import parser as date_parser

from app.core.errors import InvalidInputError

ISO_DATE_PATTERN = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")
TIME_24H_PATTERN = re.compile(r"([01]?[0-9]|2[0-3]):([0-5][0-9])")
TIME_12H_PATTERN = re.compile(r"([1-9]|1[0-2]):([0-5][0-9])\s*(AM|PM)", re.IGNORECASE)
# "-", en-dash, em-dash
TIME_RANGE_SEPARATOR = re.compile(r"\s*(?:-|–|—)\s*")
NON_ALPHANUMERIC_RUN = re.compile(r"[^a-z0-9]+")
REPEATED_DASHES = re.compile(r"-{2,}")


def slugify(value: str) -> str:
    """
    Create a URL-friendly slug from an event title.

    Args:
        value: Source string, usually the event title

    Returns:
        Lowercase slug made of letters, digits and single dashes, without
        leading or trailing dashes

    Raises:
        InvalidInputError: If nothing slug-worthy is left (empty or symbols only)
    """
    slug = NON_ALPHANUMERIC_RUN.sub("-", value.strip().lower())
    slug = REPEATED_DASHES.sub("-", slug.strip("-"))
    if not slug:
        raise InvalidInputError("Unable to generate slug from title")
    return slug


def normalize_iso_date(value: str) -> str:
    """
    Normalize a date string to ``YYYY-MM-DD`` (UTC).

    Strings already in that shape are returned unchanged. Anything else is
    parsed leniently; the time of day is dropped, and timezone-aware values
    are converted to UTC first.

    Args:
        value: Date in ``YYYY-MM-DD`` or any format python-dateutil understands

    Returns:
        The date formatted as ``YYYY-MM-DD``

    Raises:
        InvalidInputError: If the value cannot be parsed as a date
    """
    raw = value.strip()
    if ISO_DATE_PATTERN.fullmatch(raw):
        return raw

    try:
        parsed = date_parser.parse(raw)
    except (ValueError, OverflowError) as e:
        raise InvalidInputError("Invalid date. Provide a valid date string.") from e

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc)
    return f"{parsed.year:04d}-{parsed.month:02d}-{parsed.day:02d}"


def _normalize_time_part(part: str) -> str:
    raw = part.strip()

    match = TIME_24H_PATTERN.fullmatch(raw)
    if match:
        return f"{int(match.group(1)):02d}:{match.group(2)}"

    match = TIME_12H_PATTERN.fullmatch(raw)
    if match:
        hours = int(match.group(1))
        minutes = match.group(2)
        meridiem = match.group(3).upper()
        if meridiem == "AM":
            if hours == 12:
                hours = 0
        elif hours != 12:
            hours += 12
        return f"{hours:02d}:{minutes}"

    raise InvalidInputError(
        "Invalid time. Use HH:mm, h:mm AM/PM, or a range like '09:00-17:00'."
    )


def normalize_time(value: str) -> str:
    """
    Normalize a time or time range into 24-hour ``HH:mm``.

    Accepts ``09:00``, ``9:00 AM`` or a range separated by a dash, en-dash or
    em-dash such as ``9:00 AM - 6:00 PM``.

    Args:
        value: Time or time range as entered by the organizer

    Returns:
        ``HH:mm`` or ``HH:mm-HH:mm``

    Raises:
        InvalidInputError: If a token is not a valid time or there are more than two
    """
    parts = [p.strip() for p in TIME_RANGE_SEPARATOR.split(value.strip())]
    parts = [p for p in parts if p]

    if len(parts) == 1:
        return _normalize_time_part(parts[0])
    if len(parts) == 2:
        return f"{_normalize_time_part(parts[0])}-{_normalize_time_part(parts[1])}"

    raise InvalidInputError(
        "Invalid time. Use HH:mm, h:mm AM/PM, or a single '-' separated range."
    )
