"""
API Module - HTTP interface to the puzzle.

Exposes sessions, the three puzzle operations, and the move log
via a REST API. All game state is session-scoped.
"""

from .schemas import (
    # Requests
    CreateSessionRequest,
    # Responses
    SessionResponse,
    MoveResponse,
    EventLogResponse,
    SessionListResponse,
    EndSessionResponse,
    HealthResponse,
    ErrorResponse,
    ErrorCode,
    # Shared
    GameStateInfo,
    MoveEventInfo,
    LogRecordInfo,
)
from .service import APIService
from .app import create_app

__all__ = [
    # Requests
    "CreateSessionRequest",
    # Responses
    "SessionResponse",
    "MoveResponse",
    "EventLogResponse",
    "SessionListResponse",
    "EndSessionResponse",
    "HealthResponse",
    "ErrorResponse",
    "ErrorCode",
    # Shared
    "GameStateInfo",
    "MoveEventInfo",
    "LogRecordInfo",
    # Service
    "APIService",
    "create_app",
]
