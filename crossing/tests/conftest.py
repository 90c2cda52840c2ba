"""
Pytest fixtures for Crossing tests.
"""

import pytest

from ..engine_core import PuzzleEngine, ListSink, Item, Move
from ..move_log import InMemoryMoveLogStore, JsonLinesMoveLogStore
from ..session import SessionManager


# The shortest solution: rabbit over; back empty; cat over, rabbit back;
# vegetable over; back empty; rabbit over.
SOLUTION = [
    Move.load_or_unload(Item.RABBIT), Move.cross(),
    Move.cross(),
    Move.load_or_unload(Item.CAT), Move.cross(),
    Move.load_or_unload(Item.RABBIT), Move.cross(),
    Move.load_or_unload(Item.VEGETABLE), Move.cross(),
    Move.cross(),
    Move.load_or_unload(Item.RABBIT), Move.cross(),
]


@pytest.fixture
def sink() -> ListSink:
    """Collects emitted events."""
    return ListSink()


@pytest.fixture
def engine(sink: ListSink) -> PuzzleEngine:
    """A fresh engine wired to the list sink."""
    return PuzzleEngine(sink=sink)


@pytest.fixture
def solution() -> list[Move]:
    return list(SOLUTION)


@pytest.fixture
def memory_store() -> InMemoryMoveLogStore:
    return InMemoryMoveLogStore()


@pytest.fixture
def file_store(tmp_path) -> JsonLinesMoveLogStore:
    return JsonLinesMoveLogStore(tmp_path / "logs")


@pytest.fixture
def session_manager(memory_store: InMemoryMoveLogStore) -> SessionManager:
    return SessionManager(store=memory_store)
