"""
Rules - Constraint and goal evaluation.

A shore is unsafe when the farmer is not on it and it holds a predator
together with its prey. The farmer always stands where the boat is, so
only the shore opposite the boat can ever be unsafe; both shores are
still checked so the rule does not depend on evaluation order.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum

from .state import GameState, Item, Shore, PASSENGERS


class Violation(Enum):
    """Unsafe unsupervised pairings, in reporting priority order."""
    CAT_RABBIT = "cat_rabbit"
    RABBIT_VEGETABLE = "rabbit_vegetable"

    @property
    def pair(self) -> frozenset[Item]:
        return UNSAFE_PAIRS[self]

    @property
    def message(self) -> str:
        first, second = (i for i in PASSENGERS if i in self.pair)
        return f"The {first.value} and the {second.value} cannot be left alone together!"


UNSAFE_PAIRS: dict[Violation, frozenset[Item]] = {
    Violation.CAT_RABBIT: frozenset({Item.CAT, Item.RABBIT}),
    Violation.RABBIT_VEGETABLE: frozenset({Item.RABBIT, Item.VEGETABLE}),
}


@dataclass(frozen=True)
class ShoreViolation:
    """A violation found on a particular shore."""
    violation: Violation
    shore: Shore

    @property
    def reason(self) -> str:
        return f"{self.violation.message} ({self.shore.value} shore)"


def farmer_absent(state: GameState, shore: Shore) -> bool:
    return state.boat_shore is not shore


def find_violation(state: GameState) -> ShoreViolation | None:
    """
    Return the first unsafe pairing on an unsupervised shore, or None.

    Cat/rabbit is reported before rabbit/vegetable; left before right.
    """
    for violation in Violation:
        pair = violation.pair
        for shore in Shore:
            if farmer_absent(state, shore) and pair <= state.items_on(shore):
                return ShoreViolation(violation=violation, shore=shore)
    return None


def is_solved(state: GameState) -> bool:
    """All passengers have reached the right bank."""
    return state.right_items >= frozenset(PASSENGERS)
