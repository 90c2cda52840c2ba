"""
Engine Core - Deterministic puzzle state management.

The engine is the runtime that:
1. Manages GameState
2. Validates moves
3. Applies moves via the reducer
4. Evaluates the safety rules and the goal after each crossing
5. Emits MoveEvents to an injected sink
"""

from .state import GameState, GameStatus, Item, Shore, PASSENGERS
from .move import Move, MoveType, MoveResult, WarningCode
from .events import MoveEvent, MoveKind, EventSink, CallbackSink, ListSink
from .rules import Violation, ShoreViolation, find_violation, is_solved
from .reducer import Reducer, apply_move
from .engine import PuzzleEngine

__all__ = [
    "GameState",
    "GameStatus",
    "Item",
    "Shore",
    "PASSENGERS",
    "Move",
    "MoveType",
    "MoveResult",
    "WarningCode",
    "MoveEvent",
    "MoveKind",
    "EventSink",
    "CallbackSink",
    "ListSink",
    "Violation",
    "ShoreViolation",
    "find_violation",
    "is_solved",
    "Reducer",
    "apply_move",
    "PuzzleEngine",
]
