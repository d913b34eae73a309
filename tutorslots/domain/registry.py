"""
Registry of every session currently committed by any owner.

Two owners may hold an identical slot, so the registry counts how many
owners hold each distinct session instead of rejecting duplicates. It does
not police overlaps between distinct sessions; that is the job of the
caller (see ``tutorslots.services.reconciler``).
"""

import bisect
import logging
from typing import Dict, Iterable, Iterator, List, Optional

from .exceptions import SessionNotFound
from .models import Session, Weekday

logger = logging.getLogger(__name__)


class SessionRegistry:
    """
    Counted multiset of sessions kept in ascending day/time order.

    Invariant: every distinct session in the ordered list has an occupancy
    count of at least 1, and a session with count 0 is not in the list.
    """

    def __init__(self, sessions: Iterable[Session] = ()):
        self._ordered: List[Session] = []
        self._counts: Dict[Session, int] = {}
        for session in sessions:
            self.add(session)

    def add(self, session: Session) -> None:
        """Record one more owner of ``session``."""
        count = self._counts.get(session, 0)
        if count == 0:
            bisect.insort(self._ordered, session)
        self._counts[session] = count + 1
        logger.debug("Added %s (occupancy %d)", session, count + 1)

    def remove(self, session: Session) -> None:
        """
        Record that one owner no longer holds ``session``.

        Raises:
            SessionNotFound: If the registry does not hold the session
        """
        count = self._counts.get(session, 0)
        if count == 0:
            raise SessionNotFound(session)

        if count == 1:
            del self._counts[session]
            index = bisect.bisect_left(self._ordered, session)
            del self._ordered[index]
        else:
            self._counts[session] = count - 1
        logger.debug("Removed %s (occupancy %d)", session, count - 1)

    def find_overlaps(self, candidate: Session) -> Iterator[Session]:
        """Yield registered sessions overlapping ``candidate``, in ascending order."""
        for session in self.sessions_on(candidate.day):
            if session.start >= candidate.end:
                break
            if session.overlaps(candidate):
                yield session

    def find_overlap(self, candidate: Session) -> Optional[Session]:
        """Return the first registered session overlapping ``candidate``, if any."""
        return next(self.find_overlaps(candidate), None)

    def has_overlap(self, candidate: Session) -> bool:
        return self.find_overlap(candidate) is not None

    def replace_all(self, sessions: Iterable[Session]) -> None:
        """
        Discard the current contents and rebuild from ``sessions``.

        Repeated values in ``sessions`` become occupancy counts.
        """
        sessions = list(sessions)
        self._ordered = []
        self._counts = {}
        for session in sessions:
            count = self._counts.get(session, 0)
            if count == 0:
                self._ordered.append(session)
            self._counts[session] = count + 1
        self._ordered.sort()
        logger.debug(
            "Registry replaced: %d distinct session(s), %d occupancy",
            len(self._ordered),
            len(sessions),
        )

    def sessions_on(self, day: Weekday) -> Iterator[Session]:
        """Yield the sessions of a single weekday in ascending start order."""
        index = bisect.bisect_left(self._ordered, (day,), key=_day_key)
        for session in self._ordered[index:]:
            if session.day != day:
                break
            yield session

    def occupancy(self, session: Session) -> int:
        """Number of owners currently holding ``session`` (0 if none)."""
        return self._counts.get(session, 0)

    def total_occupancy(self) -> int:
        return sum(self._counts.values())

    def __iter__(self) -> Iterator[Session]:
        # Snapshot: callers may mutate the registry while enumerating
        yield from tuple(self._ordered)

    def __len__(self) -> int:
        return len(self._ordered)

    def __contains__(self, session: object) -> bool:
        return session in self._counts

    def __repr__(self) -> str:
        return f"SessionRegistry([{', '.join(str(s) for s in self._ordered)}])"


def _day_key(session: Session) -> tuple:
    return (session.day,)
