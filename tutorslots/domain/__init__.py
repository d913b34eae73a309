"""
Domain layer - Pure business logic without external dependencies.
"""

from .exceptions import (
    InvalidSession,
    OverlappingSessions,
    SchedulingError,
    SessionNotFound,
)
from .free_slot_finder import NO_FREE_TIME, FreeSlotFinder
from .models import FreeSlot, Session, Weekday
from .registry import SessionRegistry

__all__ = [
    "FreeSlot",
    "FreeSlotFinder",
    "InvalidSession",
    "NO_FREE_TIME",
    "OverlappingSessions",
    "SchedulingError",
    "Session",
    "SessionNotFound",
    "SessionRegistry",
    "Weekday",
]
