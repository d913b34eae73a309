"""
Service layer helpers that orchestrate adapters and domain logic.
"""

from .reconciler import SessionReconciler
from .schedule_service import RosterStoreProtocol, ScheduleService

__all__ = ["RosterStoreProtocol", "ScheduleService", "SessionReconciler"]
