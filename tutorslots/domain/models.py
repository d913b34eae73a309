"""
Domain models for weekly recurring sessions.
"""

import re
from dataclasses import dataclass
from datetime import datetime, time
from enum import IntEnum

from .exceptions import InvalidSession

EARLIEST_START = time(8, 0)
LATEST_END = time(22, 0)
MIN_DURATION_MINUTES = 15

SESSION_CONSTRAINTS = (
    "Day must be one of MON TUE WED THU FRI SAT SUN; start and end must be "
    "in format HHmm, at least 15 minutes apart, between 0800 and 2200"
)

_TIME_PATTERN = re.compile(r"^[0-9]{4}$")
_SESSION_PATTERN = re.compile(
    r"^(?P<day>[A-Z]{3})\s+(?P<start>[0-9]{4})\s*-\s*(?P<end>[0-9]{4})$"
)


def minutes_of_day(value: time) -> int:
    """Return the number of minutes elapsed since midnight."""
    return value.hour * 60 + value.minute


def time_from_minutes(minutes: int) -> time:
    """Inverse of ``minutes_of_day`` for values within a single day."""
    return time(hour=minutes // 60, minute=minutes % 60)


def parse_clock_time(value: str, field: str = "time") -> time:
    """
    Parse a strict four digit 24-hour clock string such as ``0930``.

    Raises:
        InvalidSession: If the value is not a valid ``HHmm`` time
    """
    if not isinstance(value, str) or not _TIME_PATTERN.match(value):
        raise InvalidSession(field, f"{field.capitalize()} time must be in format HHmm, got {value!r}")
    try:
        return datetime.strptime(value, "%H%M").time()
    except ValueError as exc:
        raise InvalidSession(field, f"{field.capitalize()} time {value!r} is not a valid clock time") from exc


class Weekday(IntEnum):
    """Day of the week, Monday first."""

    MONDAY = 0
    TUESDAY = 1
    WEDNESDAY = 2
    THURSDAY = 3
    FRIDAY = 4
    SATURDAY = 5
    SUNDAY = 6

    @property
    def symbol(self) -> str:
        """Three letter symbol, e.g. ``MON``."""
        return self.name[:3]

    @classmethod
    def from_symbol(cls, symbol: str) -> "Weekday":
        """Look up a day by its upper-case symbol, raising ``InvalidSession`` otherwise."""
        for day in cls:
            if day.symbol == symbol:
                return day
        raise InvalidSession(
            "day",
            f"Day must be one of {' '.join(d.symbol for d in cls)}, got {symbol!r}",
        )


@dataclass(frozen=True, order=True)
class Session:
    """
    An immutable weekly time interval: same weekday, same hours, every week.

    Invariants: end is at least 15 minutes after start, and the whole
    session lies within the 08:00 - 22:00 operating window.
    Ordering is by day, then start, then end.
    """
    day: Weekday
    start: time
    end: time

    def __post_init__(self):
        if not isinstance(self.day, Weekday):
            raise InvalidSession("day", f"Day must be a Weekday, got {self.day!r}")
        if minutes_of_day(self.end) - minutes_of_day(self.start) < MIN_DURATION_MINUTES:
            raise InvalidSession(
                "duration",
                f"End time {self.end:%H%M} must be at least {MIN_DURATION_MINUTES} minutes "
                f"after start time {self.start:%H%M}",
            )
        if self.start < EARLIEST_START or self.end > LATEST_END:
            raise InvalidSession(
                "window",
                f"Session {self.start:%H%M} - {self.end:%H%M} must lie between "
                f"{EARLIEST_START:%H%M} and {LATEST_END:%H%M}",
            )

    @classmethod
    def create(cls, day: str, start: str, end: str) -> "Session":
        """
        Build a session from raw ``DAY``, ``HHmm``, ``HHmm`` strings.

        Checks run in a fixed order so the most specific problem is reported
        first: day symbol, time format, minimum duration, operating window.

        Raises:
            InvalidSession: With ``field`` naming the violated constraint
        """
        weekday = Weekday.from_symbol(day)
        start_time = parse_clock_time(start, "start")
        end_time = parse_clock_time(end, "end")
        return cls(day=weekday, start=start_time, end=end_time)

    @classmethod
    def parse(cls, text: str) -> "Session":
        """Parse the canonical form produced by ``str(session)``."""
        match = _SESSION_PATTERN.match(text.strip()) if isinstance(text, str) else None
        if not match:
            raise InvalidSession(
                "format",
                f"Session must look like 'MON 0900 - 1000', got {text!r}",
            )
        return cls.create(match.group("day"), match.group("start"), match.group("end"))

    def duration_minutes(self) -> int:
        """Return the duration in minutes."""
        return minutes_of_day(self.end) - minutes_of_day(self.start)

    def overlaps(self, other: "Session") -> bool:
        """
        Check if two sessions share any time on the same day.

        Intervals are half-open, so a session ending at 10:00 and one
        starting at 10:00 do not overlap.
        """
        if self.day != other.day:
            return False
        if self.start < other.start:
            return self.end > other.start
        return self.start < other.end

    def is_happening_on(self, day: Weekday) -> bool:
        """True if the session falls on ``day``."""
        return self.day == day

    def is_happening_at(self, moment: time) -> bool:
        """True if ``moment`` falls within the session, both ends included."""
        return self.start <= moment <= self.end

    def spans(self, start: time, end: time) -> bool:
        """True if the session covers the whole of ``start`` - ``end``."""
        return self.start <= start and self.end >= end

    def __str__(self) -> str:
        return f"{self.day.symbol} {self.start:%H%M} - {self.end:%H%M}"


@dataclass(frozen=True)
class FreeSlot:
    """
    An unoccupied weekly slot found by the free slot search.
    """
    day: Weekday
    start: time
    end: time

    def format_display(self) -> str:
        """
        Format the slot for display.
        Format: WEEKDAY HH:mm
        """
        return f"{self.day.name} {self.start:%H:%M}"
