"""Errors raised while encoding calendar data."""
from __future__ import annotations

__all__ = ["EncodingError", "InvalidValueError", "MissingRequiredFieldError"]


class EncodingError(Exception):
    """Base class for failures of the iCalendar encoder."""


class MissingRequiredFieldError(EncodingError):
    """Raised when an event lacks a property the format requires."""

    def __init__(self, field: str) -> None:
        super().__init__(f"Missing required field: {field}")
        self.field = field


class InvalidValueError(EncodingError, ValueError):
    """Raised when a value cannot be represented in iCalendar text."""
