"""
Field validators for event and booking input.

All validators are plain predicates: they return a bool and never raise.
"""
import re
from typing import Any

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
SLUG_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")


def is_non_empty_string(value: Any) -> bool:
    """Check that value is a string with at least one non-whitespace character."""
    return isinstance(value, str) and len(value.strip()) > 0


def is_valid_email(value: Any) -> bool:
    """
    Pragmatic email shape check suitable for API input.

    The value is trimmed and lowercased before matching, so callers may pass
    raw user input.

    Args:
        value: Candidate email address

    Returns:
        True if value is a string shaped like ``local@domain.tld``
    """
    if not isinstance(value, str):
        return False
    return EMAIL_PATTERN.fullmatch(value.strip().lower()) is not None


def is_non_empty_string_array(value: Any) -> bool:
    """
    Check that value is a non-empty list whose items are all non-blank strings.

    Args:
        value: Candidate list (e.g. an event agenda or tag list)

    Returns:
        True if value has at least one item and every item is a non-blank string
    """
    return (
        isinstance(value, (list, tuple))
        and len(value) > 0
        and all(is_non_empty_string(item) for item in value)
    )


def is_valid_slug(value: Any) -> bool:
    """Lowercase alphanumeric tokens joined by single dashes."""
    return isinstance(value, str) and SLUG_PATTERN.fullmatch(value) is not None
