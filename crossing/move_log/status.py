"""
Session Status - Derived from a session's event history.
"""

from __future__ import annotations
from enum import Enum
from typing import Iterable

from ..engine_core.events import MoveKind
from .records import LogRecord


class SessionStatus(str, Enum):
    """Lifecycle of a logged play session."""
    ACTIVE = "active"
    COMPLETED = "completed"
    FAILED = "failed"
    ABANDONED = "abandoned"


def session_status(records: Iterable[LogRecord], ended: bool = False) -> SessionStatus:
    """
    Classify a session from its records.

    A win means completed, a violation means failed. A session with neither
    is abandoned once it has been ended, otherwise still active.
    """
    kinds = {record.operation for record in records}
    if MoveKind.WIN in kinds:
        return SessionStatus.COMPLETED
    if MoveKind.VIOLATION in kinds:
        return SessionStatus.FAILED
    if ended:
        return SessionStatus.ABANDONED
    return SessionStatus.ACTIVE
