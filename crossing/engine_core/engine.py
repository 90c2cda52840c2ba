"""
Puzzle Engine - Owns one game's state and forwards its events.

The engine is the runtime that:
1. Holds the canonical GameState
2. Applies moves via the reducer, one at a time
3. Numbers events and hands them to the registered sink
4. Keeps playing even if the sink fails
"""

from __future__ import annotations
import logging
import threading
from typing import Callable

from .state import GameState, Item
from .move import Move, MoveType, MoveResult
from .events import MoveEvent, EventSink, CallbackSink
from .reducer import Reducer

logger = logging.getLogger("crossing.engine")


class PuzzleEngine:
    """
    A single puzzle session.

    Usage:
        engine = PuzzleEngine(sink=recorder)
        engine.load_or_unload(Item.RABBIT)
        result = engine.cross()
        if result.warning:
            show(result.warning)

    Operations are serialized by an internal lock, so concurrent callers
    see them one after another. Instances share nothing.
    """

    def __init__(
        self,
        sink: EventSink | Callable[[MoveEvent], None] | None = None,
        reducer: Reducer | None = None,
    ):
        self._reducer = reducer or Reducer()
        self._sink: EventSink | None = None
        self._lock = threading.RLock()
        self._state = GameState.initial()
        self._next_sequence = 1
        if sink is not None:
            self.set_sink(sink)

    def set_sink(self, sink: EventSink | Callable[[MoveEvent], None] | None):
        """Register (or clear) the event sink."""
        if sink is not None and not isinstance(sink, EventSink):
            sink = CallbackSink(sink)
        with self._lock:
            self._sink = sink

    def current_state(self) -> GameState:
        """Immutable snapshot of the current state."""
        return self._state

    @property
    def next_sequence(self) -> int:
        return self._next_sequence

    def load_or_unload(self, item: Item | str) -> MoveResult:
        """Put an item on the boat, or take it off again."""
        return self.apply(Move.load_or_unload(item))

    def cross(self) -> MoveResult:
        """Row to the other bank."""
        return self.apply(Move.cross())

    def reset(self) -> MoveResult:
        """Start over. Event numbering restarts at 1."""
        return self.apply(Move.reset())

    def apply(self, move: Move) -> MoveResult:
        """Apply a move atomically and emit its events."""
        with self._lock:
            result = self._reducer.apply(self._state, move, self._next_sequence)

            if not result.success:
                logger.debug("Refused %s: %s", move.move_type.value, result.warning)
                return result

            self._state = result.new_state
            if move.move_type == MoveType.RESET:
                self._next_sequence = 1
                self._notify_reset()
            else:
                self._next_sequence += len(result.events)

            for event in result.events:
                self._emit(event)

            if result.events and self._state.is_terminal:
                logger.info(
                    "Game ended %s after %d moves",
                    self._state.status.value,
                    self._state.move_count,
                )
            return result

    def _notify_reset(self):
        """Tell the sink a new game started, if it cares. Runs under the lock."""
        on_reset = getattr(self._sink, "on_reset", None)
        if on_reset is None:
            return
        try:
            on_reset()
        except Exception:
            logger.exception("Event sink failed on reset")

    def _emit(self, event: MoveEvent):
        """Hand an event to the sink. Sink failures never reach the game."""
        if self._sink is None:
            return
        try:
            self._sink.record(event)
        except Exception:
            logger.exception("Event sink failed on event %d (%s)", event.sequence, event.kind.value)
