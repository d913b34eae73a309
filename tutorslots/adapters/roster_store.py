"""
YAML file persistence for the roster of owners and their sessions.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from ..domain.exceptions import InvalidSession, RosterFormatError
from ..domain.models import Session

logger = logging.getLogger(__name__)


class StudentRecord(BaseModel):
    """One owner as stored on disk."""
    name: str
    sessions: List[str] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        """Ensure the name is not blank."""
        value = value.strip()
        if not value:
            raise ValueError("name must not be empty")
        return value

    @field_validator("sessions")
    @classmethod
    def validate_sessions(cls, value: List[str]) -> List[str]:
        """Ensure every entry is a canonical session string."""
        for text in value:
            Session.parse(text)
        return value

    def to_sessions(self) -> List[Session]:
        return [Session.parse(text) for text in self.sessions]


class RosterFile(BaseModel):
    """Root of the roster file."""
    students: List[StudentRecord] = Field(default_factory=list)

    @field_validator("students")
    @classmethod
    def validate_unique_names(cls, value: List[StudentRecord]) -> List[StudentRecord]:
        """Ensure owner names are unique, ignoring case."""
        seen: set[str] = set()
        for record in value:
            key = record.name.lower()
            if key in seen:
                raise ValueError(f"Duplicate student name detected: {record.name}")
            seen.add(key)
        return value


class YamlRosterStore:
    """
    Reads and writes the roster as a YAML document.

    File format:
        students:
          - name: Alice
            sessions:
              - MON 0900 - 1000
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> Dict[str, List[Session]]:
        """
        Load every owner's sessions.

        Returns:
            Mapping of owner name to sessions; empty when the file is missing

        Raises:
            RosterFormatError: If the file cannot be parsed
        """
        if not self.path.exists():
            logger.debug("No roster file at %s, starting empty", self.path)
            return {}

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise RosterFormatError(f"Invalid YAML in {self.path}: {exc}") from exc

        if not isinstance(data, dict):
            raise RosterFormatError("Roster file must contain a mapping at the root level.")

        try:
            roster_file = RosterFile(**data)
        except (ValidationError, InvalidSession) as exc:
            raise RosterFormatError(f"Invalid roster in {self.path}: {exc}") from exc

        roster = {record.name: record.to_sessions() for record in roster_file.students}
        logger.debug("Read %d student(s) from %s", len(roster), self.path)
        return roster

    def save(self, roster: Dict[str, List[Session]]) -> None:
        """Write every owner's sessions, each list in ascending order."""
        roster_file = RosterFile(
            students=[
                StudentRecord(name=name, sessions=[str(s) for s in sorted(sessions)])
                for name, sessions in roster.items()
            ]
        )

        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            yaml.safe_dump(roster_file.model_dump(), f, sort_keys=False, allow_unicode=True)
        logger.debug("Wrote %d student(s) to %s", len(roster), self.path)
