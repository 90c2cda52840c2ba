"""
Move System - Moves and their results.

Moves represent the three things a player can do:
1. Toggle an item between its shore and the boat
2. Row the boat across
3. Reset the puzzle

All state changes flow through moves.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .state import Item


class MoveType(Enum):
    """Types of moves accepted by the engine."""
    LOAD_OR_UNLOAD = "load_or_unload"
    CROSS = "cross"
    RESET = "reset"


class WarningCode(str, Enum):
    """Reasons a move was refused without touching the state."""
    GAME_OVER = "GAME_OVER"
    WRONG_SHORE = "WRONG_SHORE"
    BOAT_FULL = "BOAT_FULL"
    FARMER_NOT_SELECTABLE = "FARMER_NOT_SELECTABLE"


@dataclass(frozen=True)
class Move:
    """
    A move to be applied to the game state.

    Moves are validated before application and applied atomically
    by the reducer.
    """
    move_type: MoveType
    item: Item | None = None

    @classmethod
    def load_or_unload(cls, item: Item | str) -> Move:
        """Factory for toggling an item on or off the boat."""
        return cls(move_type=MoveType.LOAD_OR_UNLOAD, item=Item.parse(item))

    @classmethod
    def cross(cls) -> Move:
        """Factory for a crossing."""
        return cls(move_type=MoveType.CROSS)

    @classmethod
    def reset(cls) -> Move:
        """Factory for a reset."""
        return cls(move_type=MoveType.RESET)


@dataclass
class MoveResult:
    """
    Result of applying a move.

    Contains:
    - Whether the move changed the state
    - New state (unchanged state on refusal)
    - Warning text and code (if refused)
    - Events emitted, in order
    """
    success: bool
    new_state: Any | None = None  # GameState
    warning: str | None = None
    error_code: WarningCode | None = None
    events: list[Any] = field(default_factory=list)  # MoveEvent

    @classmethod
    def refused(
        cls,
        state: Any,
        warning: str,
        error_code: WarningCode,
    ) -> MoveResult:
        """Create a refusal that leaves the state untouched."""
        return cls(success=False, new_state=state, warning=warning, error_code=error_code)

    @classmethod
    def success_with_state(cls, state: Any, events: list[Any] | None = None) -> MoveResult:
        """Create a success result with new state."""
        return cls(success=True, new_state=state, events=events or [])
