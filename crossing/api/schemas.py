"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models define the contract between a front end and the engine.

Error Codes:
- SESSION_NOT_FOUND: Session does not exist or has been ended
- INVALID_ITEM: Item tag is not one of cat, rabbit, vegetable
- VALIDATION_ERROR: Request body failed validation
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from ..engine_core import GameState, MoveEvent, MoveResult, PASSENGERS
from ..move_log import SessionStatus


# =============================================================================
# Enums
# =============================================================================

class ErrorCode(str, Enum):
    """Structured error codes."""
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    INVALID_ITEM = "INVALID_ITEM"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


# =============================================================================
# Shared Models
# =============================================================================

def _tags(items) -> list[str]:
    return [item.value for item in PASSENGERS if item in items]


class GameStateInfo(BaseModel):
    """Puzzle state for display."""
    left_items: list[str] = Field(default_factory=list)
    right_items: list[str] = Field(default_factory=list)
    boat_items: list[str] = Field(default_factory=list)
    boat_shore: str = Field(description="left or right")
    farmer_aboard: bool = False
    move_count: int = 0
    status: str = Field(description="in_progress, won or violated")
    violation_reason: Optional[str] = None

    @classmethod
    def from_state(cls, state: GameState) -> "GameStateInfo":
        return cls(
            left_items=_tags(state.left_items),
            right_items=_tags(state.right_items),
            boat_items=_tags(state.boat_items),
            boat_shore=state.boat_shore.value,
            farmer_aboard=state.farmer_aboard,
            move_count=state.move_count,
            status=state.status.value,
            violation_reason=state.violation_reason,
        )


class MoveEventInfo(BaseModel):
    """A single emitted event."""
    sequence: int
    kind: str = Field(description="load, unload, cross, violation, win")
    target: Optional[str] = None
    left_items: list[str] = Field(default_factory=list)
    right_items: list[str] = Field(default_factory=list)
    boat_items: list[str] = Field(default_factory=list)
    move_count: int = 0
    reason: Optional[str] = None

    @classmethod
    def from_event(cls, event: MoveEvent) -> "MoveEventInfo":
        return cls(
            sequence=event.sequence,
            kind=event.kind.value,
            target=event.target_tag,
            left_items=_tags(event.left_items),
            right_items=_tags(event.right_items),
            boat_items=_tags(event.boat_items),
            move_count=event.move_count,
            reason=event.reason,
        )


class LogRecordInfo(BaseModel):
    """A logged event as stored in the move log."""
    session_number: int
    sequence: int
    operation: str
    target: Optional[str] = None
    boat_cargo: str
    moves_count: int
    reason: Optional[str] = None
    timestamp: str


# =============================================================================
# Request Models
# =============================================================================

class CreateSessionRequest(BaseModel):
    """Request to start a new play session."""
    user_id: str = Field(min_length=1, max_length=128, description="Player identifier")


# =============================================================================
# Response Models
# =============================================================================

class SessionResponse(BaseModel):
    """Session status."""
    session_id: str
    user_id: str
    session_number: int
    status: SessionStatus
    created_at: float
    state: GameStateInfo
    api_version: str = "v1"


class MoveResponse(BaseModel):
    """Outcome of a load/unload, crossing or reset."""
    session_id: str
    success: bool
    warning: Optional[str] = Field(None, description="Transient message for refused moves")
    warning_code: Optional[str] = None
    state: GameStateInfo
    events: list[MoveEventInfo] = Field(default_factory=list)

    @classmethod
    def from_result(cls, session_id: str, result: MoveResult) -> "MoveResponse":
        return cls(
            session_id=session_id,
            success=result.success,
            warning=result.warning,
            warning_code=result.error_code.value if result.error_code else None,
            state=GameStateInfo.from_state(result.new_state),
            events=[MoveEventInfo.from_event(e) for e in result.events],
        )


class EventLogResponse(BaseModel):
    """Logged events of a session."""
    session_id: str
    user_id: str
    session_number: int
    status: SessionStatus
    records: list[LogRecordInfo] = Field(default_factory=list)


class SessionListResponse(BaseModel):
    """List of live sessions."""
    sessions: list[str]
    count: int


class EndSessionResponse(BaseModel):
    """Response for ending a session."""
    success: bool
    session_id: str


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    service: str
    version: str


class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str
    error_code: ErrorCode
    details: Optional[dict] = None
