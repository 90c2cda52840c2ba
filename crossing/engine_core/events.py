"""
Move Events - Immutable records of every state change.

The engine emits one event per load, unload and crossing, and one more
when a crossing ends the game (violation or win). Events go to an
EventSink supplied by the caller; the engine never reads them back.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Protocol, runtime_checkable

from .state import GameState, Item, Shore


class MoveKind(Enum):
    """Kinds of recorded events."""
    LOAD = "load"
    UNLOAD = "unload"
    CROSS = "cross"
    VIOLATION = "violation"
    WIN = "win"


@dataclass(frozen=True)
class MoveEvent:
    """
    A single logged event.

    target is the item for LOAD/UNLOAD and the destination shore for CROSS.
    The item snapshots are taken after the event's change was applied.
    """
    sequence: int
    kind: MoveKind
    target: Item | Shore | None
    left_items: frozenset[Item]
    right_items: frozenset[Item]
    boat_items: frozenset[Item]
    move_count: int
    reason: str | None = None

    @classmethod
    def from_state(
        cls,
        sequence: int,
        kind: MoveKind,
        state: GameState,
        target: Item | Shore | None = None,
        reason: str | None = None,
    ) -> MoveEvent:
        """Snapshot a state into an event."""
        return cls(
            sequence=sequence,
            kind=kind,
            target=target,
            left_items=state.left_items,
            right_items=state.right_items,
            boat_items=state.boat_items,
            move_count=state.move_count,
            reason=reason,
        )

    @property
    def target_tag(self) -> str | None:
        return self.target.value if self.target is not None else None


@runtime_checkable
class EventSink(Protocol):
    """
    Anything that accepts move events.

    A sink may also define on_reset(); the engine calls it, under its lock,
    when the game starts over and event numbering goes back to 1.
    """

    def record(self, event: MoveEvent) -> None:
        ...


class CallbackSink:
    """Adapts a plain callable to the EventSink interface."""

    def __init__(self, callback: Callable[[MoveEvent], None]):
        self._callback = callback

    def record(self, event: MoveEvent) -> None:
        self._callback(event)


class ListSink:
    """Collects events in memory. Handy for tests and replays."""

    def __init__(self):
        self.events: list[MoveEvent] = []

    def record(self, event: MoveEvent) -> None:
        self.events.append(event)

    def clear(self):
        self.events.clear()
