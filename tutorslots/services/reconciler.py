"""
Transactional replacement of one owner's sessions in the shared registry.

The owner's current sessions are retracted first so they cannot be
mistaken for conflicts, the new set is validated against itself and
against everyone else, and the registry is either committed or restored
from an explicit undo list. After a failed call the registry holds exactly
what it held before.
"""

from __future__ import annotations

import logging
from itertools import combinations
from typing import Iterable, List, Sequence

from ..domain.exceptions import OverlappingSessions, SessionNotFound
from ..domain.models import Session
from ..domain.registry import SessionRegistry

logger = logging.getLogger(__name__)


class SessionReconciler:
    """Swaps an owner's old session set for a new one, all or nothing."""

    def __init__(self, registry: SessionRegistry) -> None:
        self._registry = registry

    def replace_owner_sessions(
        self,
        old_sessions: Iterable[Session],
        new_sessions: Iterable[Session],
    ) -> None:
        """
        Replace ``old_sessions`` with ``new_sessions`` in the registry.

        Args:
            old_sessions: Sessions the owner holds now (must be registered)
            new_sessions: Sessions the owner should hold afterwards

        Raises:
            OverlappingSessions: If the new sessions clash with each other or
                with another owner's session; the registry is rolled back
            SessionNotFound: If an old session is not registered; the
                registry is rolled back
        """
        candidates = list(dict.fromkeys(new_sessions))
        undo: List[Session] = []

        try:
            for session in old_sessions:
                self._registry.remove(session)
                undo.append(session)

            self._check_internal_overlap(candidates)
            self._check_external_overlap(candidates)
        except (OverlappingSessions, SessionNotFound) as exc:
            self._rollback(undo)
            logger.info("Rolled back %d session(s): %s", len(undo), exc)
            raise

        for session in candidates:
            self._registry.add(session)
        logger.info(
            "Committed %d session(s) in place of %d",
            len(candidates),
            len(undo),
        )

    def add_owner_session(
        self,
        current_sessions: Sequence[Session],
        new_session: Session,
    ) -> None:
        """Add one session to an owner who already holds ``current_sessions``."""
        self.replace_owner_sessions(
            current_sessions,
            [*current_sessions, new_session],
        )

    @staticmethod
    def _check_internal_overlap(candidates: Sequence[Session]) -> None:
        for first, second in combinations(candidates, 2):
            if first.overlaps(second):
                raise OverlappingSessions(candidate=second, conflict=first)

    def _check_external_overlap(self, candidates: Sequence[Session]) -> None:
        for candidate in candidates:
            for registered in self._registry.find_overlaps(candidate):
                # An identical slot held by someone else may be shared
                if registered != candidate:
                    raise OverlappingSessions(candidate=candidate, conflict=registered)

    def _rollback(self, undo: Sequence[Session]) -> None:
        for session in undo:
            self._registry.add(session)
