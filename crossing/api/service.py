"""
API Service - Business logic layer between API and engine.

The service:
1. Translates API requests to engine calls
2. Manages sessions
3. Reads and exports the move log
4. Formats responses

This layer is framework-agnostic (can be used with FastAPI, Flask, etc.)
"""

from __future__ import annotations
from dataclasses import dataclass, field

from .schemas import (
    CreateSessionRequest,
    SessionResponse,
    MoveResponse,
    EventLogResponse,
    ErrorResponse,
    ErrorCode,
    GameStateInfo,
    LogRecordInfo,
)
from ..engine_core import Item, MoveResult
from ..move_log import export_csv
from ..session import SessionManager, Session


@dataclass
class APIService:
    """
    Main API service.

    Usage:
        service = APIService()

        session = service.create_session(CreateSessionRequest(user_id="alice"))
        service.load_or_unload(session.session_id, "rabbit")
        service.cross(session.session_id)
        csv_text = service.export_csv(session.session_id)
    """
    session_manager: SessionManager = field(default_factory=SessionManager)

    def create_session(self, request: CreateSessionRequest) -> SessionResponse:
        """Start a new session for a player."""
        session = self.session_manager.create_session(request.user_id)
        return self._session_to_response(session)

    def get_session(self, session_id: str) -> SessionResponse | ErrorResponse:
        """Get session status."""
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._not_found(session_id)
        return self._session_to_response(session)

    def list_sessions(self) -> list[str]:
        """List live session IDs."""
        return self.session_manager.list_sessions()

    def end_session(self, session_id: str) -> bool:
        """End a session."""
        return self.session_manager.end_session(session_id)

    def get_game_state(self, session_id: str) -> GameStateInfo | ErrorResponse:
        """Current puzzle state."""
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._not_found(session_id)
        return GameStateInfo.from_state(session.engine.current_state())

    def load_or_unload(self, session_id: str, item: str) -> MoveResponse | ErrorResponse:
        """Toggle an item between its shore and the boat."""
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._not_found(session_id)
        try:
            parsed = Item.parse(item)
        except ValueError as e:
            return ErrorResponse(error=str(e), error_code=ErrorCode.INVALID_ITEM)
        return self._move_response(session, session.engine.load_or_unload(parsed))

    def cross(self, session_id: str) -> MoveResponse | ErrorResponse:
        """Row the boat across."""
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._not_found(session_id)
        return self._move_response(session, session.engine.cross())

    def reset(self, session_id: str) -> MoveResponse | ErrorResponse:
        """Start over; the move log continues under a new session number."""
        session = self.session_manager.restart_session(session_id)
        if not session:
            return self._not_found(session_id)
        return MoveResponse(
            session_id=session_id,
            success=True,
            state=GameStateInfo.from_state(session.engine.current_state()),
        )

    def get_events(self, session_id: str) -> EventLogResponse | ErrorResponse:
        """Logged events of the session's current attempt."""
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._not_found(session_id)

        records = self.session_manager.store.records(session.user_id, session.session_number)
        return EventLogResponse(
            session_id=session_id,
            user_id=session.user_id,
            session_number=session.session_number,
            status=session.status,
            records=[
                LogRecordInfo(
                    session_number=r.session_number,
                    sequence=r.sequence,
                    operation=r.operation.value,
                    target=r.target,
                    boat_cargo=r.boat_cargo,
                    moves_count=r.moves_count,
                    reason=r.reason,
                    timestamp=r.timestamp,
                )
                for r in records
            ],
        )

    def export_csv(self, session_id: str) -> str | ErrorResponse:
        """CSV report of the session's current attempt."""
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._not_found(session_id)
        records = self.session_manager.store.records(session.user_id, session.session_number)
        return export_csv(records)

    # =========================================================================
    # Helpers
    # =========================================================================

    def _session_to_response(self, session: Session) -> SessionResponse:
        return SessionResponse(
            session_id=session.session_id,
            user_id=session.user_id,
            session_number=session.session_number,
            status=session.status,
            created_at=session.created_at,
            state=GameStateInfo.from_state(session.engine.current_state()),
        )

    def _move_response(self, session: Session, result: MoveResult) -> MoveResponse:
        return MoveResponse.from_result(session.session_id, result)

    @staticmethod
    def _not_found(session_id: str) -> ErrorResponse:
        return ErrorResponse(
            error=f"Session {session_id} not found",
            error_code=ErrorCode.SESSION_NOT_FOUND,
        )
