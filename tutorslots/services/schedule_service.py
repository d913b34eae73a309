"""
Application service for managing students' weekly sessions.

The service owns the owner -> sessions roster, keeps the shared
``SessionRegistry`` in step with it through the ``SessionReconciler``, and
persists every change through a roster store. Depending on a protocol for
the store keeps the CLI thin and lets tests swap in an in-memory store.
"""

from __future__ import annotations

import logging
from datetime import time
from typing import Dict, Iterable, List, Optional, Protocol, Tuple

from ..domain.exceptions import (
    DuplicateOwner,
    DuplicateSession,
    RosterFormatError,
    UnknownOwner,
)
from ..domain.free_slot_finder import FreeSlotFinder
from ..domain.models import Session, Weekday
from ..domain.registry import SessionRegistry
from .reconciler import SessionReconciler

logger = logging.getLogger(__name__)


class RosterStoreProtocol(Protocol):
    """Protocol describing the persistence behaviour needed by the service."""

    def load(self) -> Dict[str, List[Session]]:
        """Return every owner's sessions."""

    def save(self, roster: Dict[str, List[Session]]) -> None:
        """Persist every owner's sessions."""


class ScheduleService:
    """
    Orchestrates roster changes, registry bookkeeping and persistence.
    """

    def __init__(
        self,
        store: RosterStoreProtocol,
        registry: Optional[SessionRegistry] = None,
    ) -> None:
        self._store = store
        self.registry = registry if registry is not None else SessionRegistry()
        self._reconciler = SessionReconciler(self.registry)
        self._finder = FreeSlotFinder(self.registry)
        self._roster: Dict[str, List[Session]] = {}

    def load(self) -> None:
        """
        Read the roster from the store and rebuild the registry from it.

        Raises:
            RosterFormatError: If two distinct stored sessions overlap
        """
        roster = {
            owner: sorted(dict.fromkeys(sessions))
            for owner, sessions in self._store.load().items()
        }
        _check_no_overlaps(roster)

        self._roster = roster
        self.registry.replace_all(
            session for sessions in self._roster.values() for session in sessions
        )
        logger.info(
            "Loaded %d owner(s) holding %d session(s)",
            len(self._roster),
            self.registry.total_occupancy(),
        )

    def owners(self) -> List[str]:
        return list(self._roster)

    def sessions_of(self, owner: str) -> List[Session]:
        return list(self._roster[self._resolve_owner(owner)])

    def add_owner(self, owner: str, sessions: Iterable[Session] = ()) -> None:
        """
        Add a new owner together with their initial sessions.

        Raises:
            DuplicateOwner: If the name is already on the roster
            OverlappingSessions: If the sessions clash
        """
        owner = owner.strip()
        if not owner:
            raise ValueError("Owner name must not be empty")
        if self._find_owner(owner) is not None:
            raise DuplicateOwner(f"{owner} is already on the roster")

        sessions = list(dict.fromkeys(sessions))
        self._reconciler.replace_owner_sessions([], sessions)
        self._roster[owner] = sorted(sessions)
        self._save()

    def add_session(self, owner: str, session: Session) -> None:
        """
        Give ``owner`` one more session.

        Raises:
            UnknownOwner: If the owner is not on the roster
            DuplicateSession: If the owner already holds this exact session
            OverlappingSessions: If the session clashes with any other
        """
        key = self._resolve_owner(owner)
        current = self._roster[key]
        if session in current:
            raise DuplicateSession(f"{key} already has session {session}")

        self._reconciler.add_owner_session(current, session)
        self._roster[key] = sorted([*current, session])
        self._save()

    def edit_sessions(self, owner: str, sessions: Iterable[Session]) -> None:
        """Replace the whole session set of ``owner``."""
        key = self._resolve_owner(owner)
        sessions = list(dict.fromkeys(sessions))

        self._reconciler.replace_owner_sessions(self._roster[key], sessions)
        self._roster[key] = sorted(sessions)
        self._save()

    def remove_owner(self, owner: str) -> List[Session]:
        """Drop ``owner`` from the roster, releasing their sessions."""
        key = self._resolve_owner(owner)
        self._reconciler.replace_owner_sessions(self._roster[key], [])
        released = self._roster.pop(key)
        self._save()
        return released

    def clear(self) -> None:
        """Remove every owner and every session."""
        self._roster = {}
        self.registry.replace_all([])
        self._save()
        logger.info("Roster cleared")

    def earliest_free_slot(self, duration_hours: int) -> str:
        return self._finder.earliest_free_slot(duration_hours)

    def find_owners(
        self,
        day: Optional[Weekday] = None,
        at: Optional[time] = None,
        between: Optional[Tuple[time, time]] = None,
    ) -> List[str]:
        """
        Owners with a session matching every given filter.

        Args:
            day: Only sessions on this weekday
            at: Only sessions in progress at this time of day
            between: Only sessions covering the whole (start, end) interval

        Raises:
            ValueError: If ``between`` does not end after it starts
        """
        if between is not None and between[1] <= between[0]:
            raise ValueError(
                f"Interval end {between[1]:%H%M} must be after start {between[0]:%H%M}"
            )

        matches: List[str] = []
        for owner, sessions in self._roster.items():
            for session in sessions:
                if day is not None and not session.is_happening_on(day):
                    continue
                if at is not None and not session.is_happening_at(at):
                    continue
                if between is not None and not session.spans(*between):
                    continue
                matches.append(owner)
                break
        return matches

    def _find_owner(self, owner: str) -> Optional[str]:
        """Find the roster key for an owner name, ignoring case."""
        for key in self._roster:
            if key.lower() == owner.strip().lower():
                return key
        return None

    def _resolve_owner(self, owner: str) -> str:
        key = self._find_owner(owner)
        if key is None:
            raise UnknownOwner(f"Unknown owner: '{owner}'")
        return key

    def _save(self) -> None:
        self._store.save({owner: list(sessions) for owner, sessions in self._roster.items()})


def _check_no_overlaps(roster: Dict[str, List[Session]]) -> None:
    """Reject a roster in which two distinct sessions overlap."""
    holders: Dict[Session, str] = {}
    for owner, sessions in roster.items():
        for session in sessions:
            holders.setdefault(session, owner)

    # In day/start order any overlap shows up between neighbours
    ordered = sorted(holders)
    for first, second in zip(ordered, ordered[1:]):
        if first.overlaps(second):
            raise RosterFormatError(
                f"Stored session {second} ({holders[second]}) overlaps with "
                f"{first} ({holders[first]})"
            )
