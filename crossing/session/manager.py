"""
Session Manager - Creates and manages play sessions.

LIFECYCLE:
1. Player starts a session → new PuzzleEngine, next session number for
   that user, a SessionRecorder wired in as the engine's sink
2. During play: every engine event is appended to the move log
3. Player resets → the engine starts over and the log moves on to a new
   session number; the previous one stays as it ended
4. Player leaves → the session is marked ended (an unfinished one then
   reports as abandoned) and dropped from memory

Engines are independent; the only shared thing is the move log store.
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging
import threading
import time
import uuid

from ..engine_core import PuzzleEngine, GameStatus
from ..move_log import (
    MoveLogStore,
    InMemoryMoveLogStore,
    SessionRecorder,
    SessionStatus,
    session_status,
)

logger = logging.getLogger("crossing.session")


@dataclass
class Session:
    """
    A live play session.

    Contains:
    - The engine holding the puzzle state
    - The recorder that logs its events
    - Who is playing and which of their sessions this is
    """
    session_id: str
    user_id: str
    engine: PuzzleEngine
    recorder: SessionRecorder
    created_at: float = field(default_factory=time.time)
    ended: bool = False

    @property
    def session_number(self) -> int:
        return self.recorder.session_number

    @property
    def status(self) -> SessionStatus:
        """Status from the live engine; matches what the log would derive."""
        game_status = self.engine.current_state().status
        if game_status == GameStatus.WON:
            return SessionStatus.COMPLETED
        if game_status == GameStatus.VIOLATED:
            return SessionStatus.FAILED
        if self.ended:
            return SessionStatus.ABANDONED
        return SessionStatus.ACTIVE

    def is_active(self) -> bool:
        """Check if session can still take moves."""
        return self.status == SessionStatus.ACTIVE


class SessionManager:
    """
    Manages play sessions.

    Responsibilities:
    - Create sessions and allocate per-user session numbers
    - Track live sessions
    - Close sessions and record how they ended
    """

    def __init__(self, store: MoveLogStore | None = None):
        self.store = store or InMemoryMoveLogStore()
        self._sessions: dict[str, Session] = {}
        self._lock = threading.Lock()

    def create_session(self, user_id: str) -> Session:
        """
        Create a new play session.

        Args:
            user_id: Identifier of the player

        Returns:
            New Session with a fresh puzzle
        """
        session_id = str(uuid.uuid4())
        with self._lock:
            session_number = self._next_session_number(user_id)
            recorder = SessionRecorder(
                store=self.store,
                user_id=user_id,
                session_number=session_number,
                session_id=session_id,
                allocate_session_number=self._allocate_session_number,
            )
            session = Session(
                session_id=session_id,
                user_id=user_id,
                engine=PuzzleEngine(sink=recorder),
                recorder=recorder,
            )
            self._sessions[session_id] = session

        logger.info("Started session %d for %s (%s)", session_number, user_id, session_id)
        return session

    def get_session(self, session_id: str) -> Session | None:
        """Get a session by ID."""
        return self._sessions.get(session_id)

    def restart_session(self, session_id: str) -> Session | None:
        """
        Reset the puzzle and log the new attempt as a new session number.

        The finished attempt is marked ended, so an unfinished one shows
        up as abandoned.
        """
        session = self._sessions.get(session_id)
        if not session:
            return None

        # The recorder rolls the session number over inside the engine's lock.
        session.engine.reset()
        session.created_at = time.time()

        logger.info("Restarted %s as session %d", session.user_id, session.session_number)
        return session

    def end_session(self, session_id: str) -> bool:
        """
        End a session and drop it from memory.

        Returns False if the session does not exist.
        """
        session = self._sessions.pop(session_id, None)
        if not session:
            return False

        session.ended = True
        self.store.mark_ended(session.user_id, session.session_number)
        logger.info(
            "Ended session %d for %s: %s",
            session.session_number,
            session.user_id,
            session.status.value,
        )
        return True

    def list_active_sessions(self) -> list[str]:
        """List IDs of sessions still in play."""
        return [
            sid for sid, session in self._sessions.items()
            if session.is_active()
        ]

    def list_sessions(self) -> list[str]:
        """List IDs of all sessions held in memory."""
        return list(self._sessions)

    def logged_status(self, user_id: str, session_number: int) -> SessionStatus:
        """Status of any logged session, derived from its records."""
        return session_status(
            self.store.records(user_id, session_number),
            ended=self.store.is_ended(user_id, session_number),
        )

    def cleanup_stale_sessions(self, max_age_seconds: int = 3600) -> int:
        """
        End sessions older than max_age.

        Called periodically to free memory. Returns how many were ended.
        """
        current_time = time.time()
        to_remove = [
            session_id for session_id, session in self._sessions.items()
            if current_time - session.created_at > max_age_seconds
        ]
        for session_id in to_remove:
            self.end_session(session_id)
        return len(to_remove)

    def _allocate_session_number(self, user_id: str) -> int:
        with self._lock:
            return self._next_session_number(user_id)

    def _next_session_number(self, user_id: str) -> int:
        session_number = self.store.latest_session_number(user_id) + 1
        self.store.register_session(user_id, session_number)
        return session_number
