"""Domain-specific exceptions for the expense tracker core."""

from __future__ import annotations

from typing import Optional


class ValidationError(ValueError):
    """Raised when pending input does not meet validation requirements."""

    def __init__(self, message: str, field: Optional[str] = None) -> None:
        super().__init__(message)
        self.field = field
        self.message = message


class RecordNotFoundError(LookupError):
    """Raised when an expense record cannot be located."""


class PersistenceError(IOError):
    """Raised when the persistence layer encounters unrecoverable issues."""


class ConfigurationError(ValueError):
    """Raised when a component is constructed with unusable settings."""
