"""
Log Records - Flat, persistable rows built from move events.

One record per event, keyed by (user_id, session_number, sequence).
The per-shore presence columns and the cargo description are what the
CSV report shows; the rest is bookkeeping for status and replay.
"""

from __future__ import annotations
from datetime import datetime, timezone

from pydantic import BaseModel, Field

from ..engine_core.events import MoveEvent, MoveKind
from ..engine_core.state import PASSENGERS

NO_CARGO = "none"


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


class LogRecord(BaseModel):
    """A single logged event for one user's session."""
    user_id: str
    session_number: int = Field(ge=1)
    session_id: str | None = None
    sequence: int = Field(ge=1)
    operation: MoveKind
    target: str | None = None

    left_cat: int = 0
    left_rabbit: int = 0
    left_vegetable: int = 0
    right_cat: int = 0
    right_rabbit: int = 0
    right_vegetable: int = 0
    boat_cargo: str = NO_CARGO

    moves_count: int = 0
    game_completed: bool = False
    reason: str | None = None
    timestamp: str = Field(default_factory=utc_now)

    @classmethod
    def from_event(
        cls,
        event: MoveEvent,
        user_id: str,
        session_number: int,
        session_id: str | None = None,
    ) -> LogRecord:
        """Flatten a MoveEvent into a record."""
        presence = {}
        for side, items in (("left", event.left_items), ("right", event.right_items)):
            for item in PASSENGERS:
                presence[f"{side}_{item.value}"] = 1 if item in items else 0

        cargo = [item.label for item in PASSENGERS if item in event.boat_items]

        return cls(
            user_id=user_id,
            session_number=session_number,
            session_id=session_id,
            sequence=event.sequence,
            operation=event.kind,
            target=event.target_tag,
            boat_cargo=", ".join(cargo) or NO_CARGO,
            moves_count=event.move_count,
            game_completed=event.kind == MoveKind.WIN,
            reason=event.reason,
            **presence,
        )

    @property
    def key(self) -> tuple[str, int, int]:
        return (self.user_id, self.session_number, self.sequence)
