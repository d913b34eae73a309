"""
Domain-specific exception hierarchy for the weekly session scheduler.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import Session


class SchedulingError(Exception):
    """Base class for all application-level errors."""


class InvalidSession(SchedulingError, ValueError):
    """Raised when a session cannot be built from the given day and times."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message)
        self.field = field


class SessionNotFound(SchedulingError, LookupError):
    """Raised when removing a session the registry does not hold."""

    def __init__(self, session: "Session") -> None:
        super().__init__(f"Session could not be found: {session}")
        self.session = session


class OverlappingSessions(SchedulingError):
    """Raised when a candidate session clashes with another session."""

    def __init__(self, candidate: "Session", conflict: "Session") -> None:
        super().__init__(f"Session {candidate} overlaps with {conflict}")
        self.candidate = candidate
        self.conflict = conflict


class DuplicateSession(SchedulingError):
    """Raised when an owner already holds the exact session being added."""


class DuplicateOwner(SchedulingError):
    """Raised when adding an owner whose name is already on the roster."""


class UnknownOwner(SchedulingError, LookupError):
    """Raised when an owner name is not on the roster."""


class RosterFormatError(SchedulingError):
    """Raised when stored roster data cannot be read back."""
