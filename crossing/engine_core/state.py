"""
Game State - The canonical puzzle state.

Design principles:
- Immutable: every transition returns a new GameState
- Self-checking: the item partition is validated on construction
- Farmer is derived, not stored: aboard whenever the boat is loaded,
  and always on the shore the boat is at
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum


class Item(Enum):
    """Tokens of the puzzle. Only the first three ever leave a shore alone."""
    CAT = "cat"
    RABBIT = "rabbit"
    VEGETABLE = "vegetable"
    FARMER = "farmer"

    @property
    def is_transportable(self) -> bool:
        return self is not Item.FARMER

    @property
    def label(self) -> str:
        return self.value.capitalize()

    @classmethod
    def parse(cls, value: str | Item) -> Item:
        """Resolve an item from its tag, case-insensitively."""
        if isinstance(value, Item):
            return value
        try:
            return cls(value.strip().lower())
        except ValueError:
            raise ValueError(f"Unknown item: {value!r}") from None


PASSENGERS: tuple[Item, ...] = (Item.CAT, Item.RABBIT, Item.VEGETABLE)


class Shore(Enum):
    """The two river banks."""
    LEFT = "left"
    RIGHT = "right"

    @property
    def opposite(self) -> Shore:
        return Shore.RIGHT if self is Shore.LEFT else Shore.LEFT


class GameStatus(Enum):
    """High-level game status. WON and VIOLATED are terminal."""
    IN_PROGRESS = "in_progress"
    WON = "won"
    VIOLATED = "violated"


def _sorted_items(items: frozenset[Item]) -> list[Item]:
    """Items in canonical (cat, rabbit, vegetable) order."""
    return [item for item in PASSENGERS if item in items]


@dataclass(frozen=True)
class GameState:
    """
    Complete puzzle state at a point in time.

    Every passenger is in exactly one of left_items, right_items and
    boat_items. The boat carries at most one passenger besides the farmer.
    """
    left_items: frozenset[Item] = field(default_factory=lambda: frozenset(PASSENGERS))
    right_items: frozenset[Item] = field(default_factory=frozenset)
    boat_items: frozenset[Item] = field(default_factory=frozenset)
    boat_shore: Shore = Shore.LEFT
    move_count: int = 0
    status: GameStatus = GameStatus.IN_PROGRESS
    violation_reason: str | None = None

    def __post_init__(self):
        groups = (self.left_items, self.right_items, self.boat_items)
        placed = [item for group in groups for item in group]
        if sorted(i.value for i in placed) != sorted(i.value for i in PASSENGERS):
            raise ValueError(
                "Passengers must each be in exactly one place, got "
                f"left={_sorted_items(self.left_items)} "
                f"right={_sorted_items(self.right_items)} "
                f"boat={_sorted_items(self.boat_items)}"
            )
        if len(self.boat_items) > 1:
            raise ValueError("The boat holds at most one passenger besides the farmer")
        if self.move_count < 0:
            raise ValueError("move_count cannot be negative")
        if self.violation_reason is not None and self.status != GameStatus.VIOLATED:
            raise ValueError("violation_reason is only set for a violated game")

    @classmethod
    def initial(cls) -> GameState:
        """Everything on the left bank, boat empty and moored on the left."""
        return cls()

    @property
    def farmer_aboard(self) -> bool:
        return bool(self.boat_items)

    @property
    def farmer_shore(self) -> Shore:
        return self.boat_shore

    @property
    def is_terminal(self) -> bool:
        return self.status != GameStatus.IN_PROGRESS

    @property
    def passenger(self) -> Item | None:
        """The single item on the boat, if any."""
        return next(iter(self.boat_items), None)

    def items_on(self, shore: Shore) -> frozenset[Item]:
        """Items resting on a shore (boat passengers excluded)."""
        return self.left_items if shore is Shore.LEFT else self.right_items

    def location_of(self, item: Item) -> Shore | None:
        """Shore holding the item, or None if it is on the boat."""
        if item in self.left_items:
            return Shore.LEFT
        if item in self.right_items:
            return Shore.RIGHT
        return None

    def with_shore_items(self, shore: Shore, items: frozenset[Item], **changes) -> GameState:
        """Return new state with a shore's items (and any other fields) replaced."""
        key = "left_items" if shore is Shore.LEFT else "right_items"
        return self._copy_with(**{key: items}, **changes)

    def _copy_with(self, **kwargs) -> GameState:
        """Create a copy with some fields replaced."""
        return GameState(
            left_items=kwargs.get("left_items", self.left_items),
            right_items=kwargs.get("right_items", self.right_items),
            boat_items=kwargs.get("boat_items", self.boat_items),
            boat_shore=kwargs.get("boat_shore", self.boat_shore),
            move_count=kwargs.get("move_count", self.move_count),
            status=kwargs.get("status", self.status),
            violation_reason=kwargs.get("violation_reason", self.violation_reason),
        )

    def describe(self) -> str:
        """One-line human-readable summary."""
        def names(items):
            return ", ".join(i.label for i in _sorted_items(items)) or "-"

        boat = names(self.boat_items) if self.boat_items else "empty"
        return (
            f"left: [{names(self.left_items)}] | "
            f"boat@{self.boat_shore.value}: [{boat}] | "
            f"right: [{names(self.right_items)}] | "
            f"moves: {self.move_count} | {self.status.value}"
        )
