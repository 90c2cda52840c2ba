"""
Session Recorder - The EventSink that feeds the move log.
"""

from __future__ import annotations
import logging
from typing import Callable

from ..engine_core.events import MoveEvent
from .records import LogRecord
from .store import MoveLogStore

logger = logging.getLogger("crossing.move_log")


class SessionRecorder:
    """
    Records a session's events into a store.

    When the engine starts over, on_reset() closes the current session
    number and moves on to a fresh one, so (user, session, sequence) stays
    unique. One recorder follows one engine across resets. Storage errors
    are logged and dropped; the game never waits on the log.
    """

    def __init__(
        self,
        store: MoveLogStore,
        user_id: str,
        session_number: int,
        session_id: str | None = None,
        allocate_session_number: Callable[[str], int] | None = None,
    ):
        self.store = store
        self.user_id = user_id
        self.session_number = session_number
        self.session_id = session_id
        self.failures = 0
        self._allocate = allocate_session_number or self._next_from_store

    def record(self, event: MoveEvent) -> None:
        try:
            record = LogRecord.from_event(
                event,
                user_id=self.user_id,
                session_number=self.session_number,
                session_id=self.session_id,
            )
            self.store.append(record)
        except Exception:
            self.failures += 1
            logger.exception(
                "Failed to log event %d for %s session %d",
                event.sequence,
                self.user_id,
                self.session_number,
            )

    def on_reset(self) -> None:
        """End the current session number and continue under a new one."""
        self.store.mark_ended(self.user_id, self.session_number)
        self.start_session(self._allocate(self.user_id))
        logger.debug("%s moved on to session %d", self.user_id, self.session_number)

    def start_session(self, session_number: int):
        """Point subsequent events at a new session number."""
        self.session_number = session_number
        self.store.register_session(self.user_id, session_number)

    def _next_from_store(self, user_id: str) -> int:
        return max(self.store.latest_session_number(user_id), self.session_number) + 1
