"""
Adapters layer - External integrations (roster file storage).
"""

from .roster_store import YamlRosterStore

__all__ = ["YamlRosterStore"]
