"""Error types raised by validation, persistence and lookup code."""
from enum import Enum
from typing import Optional


class ErrorCode(str, Enum):
    """Machine-readable error codes."""

    INVALID_INPUT = "INVALID_INPUT"
    EVENT_NOT_FOUND = "EVENT_NOT_FOUND"
    REFERENCED_EVENT_MISSING = "REFERENCED_EVENT_MISSING"
    DUPLICATE_SLUG = "DUPLICATE_SLUG"
    DATABASE_UNAVAILABLE = "DATABASE_UNAVAILABLE"


class DomainError(Exception):
    """
    Base error carrying a user-safe message and the HTTP status it maps to.

    Handlers in ``app.api.errors`` render it as ``{"message": ...}`` and add
    ``"error"`` when ``detail`` is set.
    """

    status_code: int = 400
    code: ErrorCode = ErrorCode.INVALID_INPUT

    def __init__(self, message: str, detail: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.detail = detail

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class InvalidInputError(DomainError):
    """Malformed slug, unparseable date/time, empty field or bad email."""


class ReferentialIntegrityError(DomainError):
    """A booking points at an event that does not exist."""

    code = ErrorCode.REFERENCED_EVENT_MISSING

    def __init__(self, message: str = "Referenced event does not exist"):
        super().__init__(message)


class NotFoundError(DomainError):
    status_code = 404
    code = ErrorCode.EVENT_NOT_FOUND


class DuplicateSlugError(DomainError):
    """Raised when the unique slug index rejects a write."""

    status_code = 409
    code = ErrorCode.DUPLICATE_SLUG

    def __init__(self, slug: Optional[str] = None):
        message = f"An event with slug '{slug}' already exists" if slug else "An event with this slug already exists"
        super().__init__(message)
        self.slug = slug


class DatabaseUnavailableError(DomainError):
    status_code = 500
    code = ErrorCode.DATABASE_UNAVAILABLE
