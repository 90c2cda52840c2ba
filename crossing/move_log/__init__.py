"""
Move Log - Records, stores and reports play sessions.

The move log is the engine's logging collaborator:
- Every MoveEvent becomes a LogRecord keyed by user, session and sequence
- Records live in a MoveLogStore (memory or JSON-lines files)
- Session status is derived from the recorded events
- Sessions export to CSV, one row per event
"""

from .records import LogRecord, NO_CARGO
from .status import SessionStatus, session_status
from .export import CSV_COLUMNS, export_csv
from .store import MoveLogStore, InMemoryMoveLogStore, JsonLinesMoveLogStore, open_store
from .recorder import SessionRecorder

__all__ = [
    "LogRecord",
    "NO_CARGO",
    "SessionStatus",
    "session_status",
    "CSV_COLUMNS",
    "export_csv",
    "MoveLogStore",
    "InMemoryMoveLogStore",
    "JsonLinesMoveLogStore",
    "open_store",
    "SessionRecorder",
]
