"""
Earliest free slot search over the registered weekly sessions.

Pure domain logic: reads the registry, never mutates it.
"""

from typing import Optional

from .models import (
    EARLIEST_START,
    LATEST_END,
    FreeSlot,
    Weekday,
    minutes_of_day,
    time_from_minutes,
)
from .registry import SessionRegistry

NO_FREE_TIME = "No free time"


class FreeSlotFinder:
    """
    Finds the earliest weekly slot of a given length that clashes with
    no registered session.

    Algorithm (greedy scan, sessions are already sorted):
    1. For each day from Monday to Sunday, start a candidate at 08:00
    2. Walk that day's sessions in start order; whenever one begins before
       the candidate ends, move the candidate to start when it finishes
    3. If the candidate still ends by 22:00 it is the answer, otherwise
       try the next day
    """

    def __init__(self, registry: SessionRegistry):
        self.registry = registry

    def find_earliest(self, duration_hours: int) -> Optional[FreeSlot]:
        """
        Find the earliest free slot of ``duration_hours`` hours.

        Returns:
            The slot, or None when no day of the week can fit it

        Raises:
            ValueError: If duration_hours is lower than 1
        """
        if duration_hours < 1:
            raise ValueError(f"Duration must be at least 1 hour, got {duration_hours}")

        duration = duration_hours * 60
        window_start = minutes_of_day(EARLIEST_START)
        window_end = minutes_of_day(LATEST_END)

        for day in Weekday:
            candidate_start = window_start
            candidate_end = candidate_start + duration

            for session in self.registry.sessions_on(day):
                session_start = minutes_of_day(session.start)
                if session_start >= candidate_end:
                    # Later sessions start even later
                    break
                candidate_start = max(candidate_start, minutes_of_day(session.end))
                candidate_end = candidate_start + duration

            # Closed upper bound: ending exactly at 22:00 still fits
            if candidate_end <= window_end:
                return FreeSlot(
                    day=day,
                    start=time_from_minutes(candidate_start),
                    end=time_from_minutes(candidate_end),
                )

        return None

    def earliest_free_slot(self, duration_hours: int) -> str:
        """
        Describe the earliest free slot, e.g. ``MONDAY 12:00``.

        Returns ``No free time`` when the week is too full.
        """
        slot = self.find_earliest(duration_hours)
        if slot is None:
            return NO_FREE_TIME
        return slot.format_display()
