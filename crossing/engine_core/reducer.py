"""
Reducer - Applies moves to game state.

The reducer is the single point of state transition.
All state changes must go through apply_move().

Design principles:
- Pure function: (state, move) -> MoveResult
- Validates before applying
- Refusals carry a warning and leave the state untouched
- Events are numbered from the sequence number handed in by the caller
"""

from __future__ import annotations
from dataclasses import dataclass

from .state import GameState, GameStatus
from .move import Move, MoveType, MoveResult, WarningCode
from .events import MoveEvent, MoveKind
from .rules import find_violation, is_solved


@dataclass
class Reducer:
    """
    Reducer applies moves to game state.

    Stateless - all state is in GameState; the event sequence counter
    belongs to whoever owns the state.
    """

    def apply(self, state: GameState, move: Move, next_sequence: int = 1) -> MoveResult:
        """
        Apply a move to the game state.

        Returns MoveResult with the new state and emitted events,
        or a refusal with a warning.
        """
        refusal = self._validate_move(state, move)
        if refusal:
            return refusal

        handler = self._get_handler(move.move_type)
        return handler(state, move, next_sequence)

    def _validate_move(self, state: GameState, move: Move) -> MoveResult | None:
        """
        Validate that a move is legal in the current state.

        Returns a refusal if invalid, None if valid.
        """
        if move.move_type == MoveType.RESET:
            return None

        if state.is_terminal:
            return MoveResult.refused(
                state,
                "The game is over - reset to play again",
                WarningCode.GAME_OVER,
            )

        if move.move_type == MoveType.LOAD_OR_UNLOAD:
            item = move.item
            if item is None or not item.is_transportable:
                return MoveResult.refused(
                    state,
                    "The farmer always rides the boat and cannot be selected",
                    WarningCode.FARMER_NOT_SELECTABLE,
                )
            if item in state.boat_items:
                return None
            if state.location_of(item) is not state.boat_shore:
                return MoveResult.refused(
                    state,
                    "Items can only board from the shore the boat is at!",
                    WarningCode.WRONG_SHORE,
                )
            if state.boat_items:
                return MoveResult.refused(
                    state,
                    "The boat carries at most one passenger besides the farmer!",
                    WarningCode.BOAT_FULL,
                )

        return None

    def _get_handler(self, move_type: MoveType):
        """Get the handler function for a move type."""
        handlers = {
            MoveType.LOAD_OR_UNLOAD: self._handle_load_or_unload,
            MoveType.CROSS: self._handle_cross,
            MoveType.RESET: self._handle_reset,
        }
        return handlers[move_type]

    def _handle_load_or_unload(
        self, state: GameState, move: Move, next_sequence: int
    ) -> MoveResult:
        """Move an item between the boat and the shore the boat is at."""
        item = move.item
        shore = state.boat_shore
        shore_items = state.items_on(shore)

        if item in state.boat_items:
            new_state = state.with_shore_items(
                shore, shore_items | {item}, boat_items=state.boat_items - {item},
            )
            kind = MoveKind.UNLOAD
        else:
            new_state = state.with_shore_items(
                shore, shore_items - {item}, boat_items=state.boat_items | {item},
            )
            kind = MoveKind.LOAD

        event = MoveEvent.from_state(next_sequence, kind, new_state, target=item)
        return MoveResult.success_with_state(new_state, events=[event])

    def _handle_cross(self, state: GameState, move: Move, next_sequence: int) -> MoveResult:
        """
        Row the boat across, then judge the resulting banks.

        A violating configuration is kept as-is so it can be shown and logged.
        """
        destination = state.boat_shore.opposite
        arrived = state.items_on(destination) | state.boat_items

        new_state = state.with_shore_items(
            destination,
            arrived,
            boat_items=frozenset(),
            boat_shore=destination,
            move_count=state.move_count + 1,
        )
        events = [
            MoveEvent.from_state(next_sequence, MoveKind.CROSS, new_state, target=destination)
        ]

        found = find_violation(new_state)
        if found:
            new_state = new_state._copy_with(
                status=GameStatus.VIOLATED,
                violation_reason=found.reason,
            )
            events.append(MoveEvent.from_state(
                next_sequence + 1, MoveKind.VIOLATION, new_state, reason=found.reason,
            ))
        elif is_solved(new_state):
            new_state = new_state._copy_with(status=GameStatus.WON)
            events.append(MoveEvent.from_state(next_sequence + 1, MoveKind.WIN, new_state))

        return MoveResult.success_with_state(new_state, events=events)

    def _handle_reset(self, state: GameState, move: Move, next_sequence: int) -> MoveResult:
        """Back to the opening position. Emits nothing."""
        return MoveResult.success_with_state(GameState.initial())


def apply_move(state: GameState, move: Move, next_sequence: int = 1) -> MoveResult:
    """
    Convenience function to apply a move.

    Creates a Reducer and applies the move.
    """
    return Reducer().apply(state, move, next_sequence)
