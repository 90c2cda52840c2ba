"""
Tests for the move log.

Tests:
- Flattening events into records
- Session status derivation
- CSV export
- Memory and JSON-lines stores
- Recorder error isolation
"""

import csv
import io

import pytest

from ..engine_core import PuzzleEngine, Item, MoveKind
from ..move_log import (
    LogRecord,
    NO_CARGO,
    SessionStatus,
    session_status,
    CSV_COLUMNS,
    export_csv,
    InMemoryMoveLogStore,
    JsonLinesMoveLogStore,
    SessionRecorder,
    open_store,
)
from .conftest import SOLUTION


def record_game(store, moves, user_id="alice", session_number=1):
    recorder = SessionRecorder(store, user_id, session_number, session_id="s-1")
    engine = PuzzleEngine(sink=recorder)
    for move in moves:
        engine.apply(move)
    return recorder


class TestLogRecord:
    """Events flattened into rows."""

    def test_load_record(self, engine, sink):
        engine.load_or_unload(Item.RABBIT)

        record = LogRecord.from_event(sink.events[0], user_id="alice", session_number=3)

        assert record.key == ("alice", 3, 1)
        assert record.operation == MoveKind.LOAD
        assert record.target == "rabbit"
        assert (record.left_cat, record.left_rabbit, record.left_vegetable) == (1, 0, 1)
        assert (record.right_cat, record.right_rabbit, record.right_vegetable) == (0, 0, 0)
        assert record.boat_cargo == "Rabbit"
        assert record.moves_count == 0
        assert not record.game_completed

    def test_cross_record(self, engine, sink):
        engine.load_or_unload(Item.RABBIT)
        engine.cross()

        record = LogRecord.from_event(sink.events[1], user_id="alice", session_number=1)

        assert record.operation == MoveKind.CROSS
        assert record.target == "right"
        assert record.right_rabbit == 1
        assert record.boat_cargo == NO_CARGO
        assert record.moves_count == 1

    def test_win_record(self, engine, sink, solution):
        for move in solution:
            engine.apply(move)

        record = LogRecord.from_event(sink.events[-1], user_id="alice", session_number=1)

        assert record.game_completed
        assert record.target is None
        assert (record.right_cat, record.right_rabbit, record.right_vegetable) == (1, 1, 1)

    def test_violation_record_has_reason(self, engine, sink):
        engine.load_or_unload(Item.CAT)
        engine.cross()

        record = LogRecord.from_event(sink.events[-1], user_id="alice", session_number=1)

        assert record.operation == MoveKind.VIOLATION
        assert "rabbit" in record.reason

    def test_json_round_trip(self, engine, sink):
        engine.load_or_unload(Item.VEGETABLE)
        record = LogRecord.from_event(sink.events[0], user_id="bob", session_number=2)

        assert LogRecord.model_validate_json(record.model_dump_json()) == record


class TestSessionStatus:
    """Status derived from event history."""

    def test_empty_is_active(self):
        assert session_status([]) == SessionStatus.ACTIVE

    def test_empty_ended_is_abandoned(self):
        assert session_status([], ended=True) == SessionStatus.ABANDONED

    def test_win_is_completed(self, memory_store):
        record_game(memory_store, SOLUTION)
        records = memory_store.records("alice", 1)

        assert session_status(records) == SessionStatus.COMPLETED
        assert session_status(records, ended=True) == SessionStatus.COMPLETED

    def test_violation_is_failed(self, memory_store):
        record_game(memory_store, SOLUTION[3:5])
        records = memory_store.records("alice", 1)

        assert records[-1].operation == MoveKind.VIOLATION
        assert session_status(records, ended=True) == SessionStatus.FAILED

    def test_unfinished_ended_is_abandoned(self, memory_store):
        record_game(memory_store, SOLUTION[:2])
        records = memory_store.records("alice", 1)

        assert session_status(records) == SessionStatus.ACTIVE
        assert session_status(records, ended=True) == SessionStatus.ABANDONED


class TestExportCsv:
    """One quoted row per event."""

    def test_header_only(self):
        assert export_csv([]) == ",".join(f'"{c}"' for c in CSV_COLUMNS) + "\n"

    def test_rows_in_sequence_order(self, memory_store):
        record_game(memory_store, SOLUTION)
        records = memory_store.records("alice", 1)

        text = export_csv(reversed(records))
        rows = list(csv.reader(io.StringIO(text)))

        assert rows[0] == CSV_COLUMNS
        assert len(rows) == 1 + 13
        assert [row[0] for row in rows[1:]] == [str(n) for n in range(1, 14)]

    def test_row_contents(self, memory_store):
        record_game(memory_store, SOLUTION[:2])
        rows = list(csv.reader(io.StringIO(export_csv(memory_store.records("alice", 1)))))

        assert rows[1] == ["1", "load", "rabbit", "1", "0", "1", "0", "0", "0", "Rabbit"]
        assert rows[2] == ["2", "cross", "right", "1", "0", "1", "0", "1", "0", NO_CARGO]

    def test_every_field_quoted(self, memory_store):
        record_game(memory_store, SOLUTION[:1])
        line = export_csv(memory_store.records("alice", 1)).splitlines()[1]

        assert line == '"1","load","rabbit","1","0","1","0","0","0","Rabbit"'

    def test_missing_target_is_blank(self, memory_store):
        record_game(memory_store, SOLUTION)
        rows = list(csv.reader(io.StringIO(export_csv(memory_store.records("alice", 1)))))

        assert rows[-1][1] == "win"
        assert rows[-1][2] == ""


class StoreContract:
    """Behaviour every store shares. Subclasses provide the `store` fixture."""

    def test_empty(self, store):
        assert store.records("nobody") == []
        assert store.users() == []
        assert store.latest_session_number("nobody") == 0

    def test_records_filtered_by_session(self, store):
        record_game(store, SOLUTION[:2], session_number=1)
        record_game(store, SOLUTION[:1], session_number=2)

        assert len(store.records("alice")) == 3
        assert len(store.records("alice", 1)) == 2
        assert len(store.records("alice", 2)) == 1
        assert store.session_numbers("alice") == [1, 2]
        assert store.latest_session_number("alice") == 2

    def test_users_are_separate(self, store):
        record_game(store, SOLUTION[:1], user_id="alice")
        record_game(store, SOLUTION[:2], user_id="bob")

        assert store.users() == ["alice", "bob"]
        assert len(store.records("alice")) == 1
        assert len(store.records("bob")) == 2

    def test_register_without_records(self, store):
        store.register_session("carol", 1)

        assert store.session_numbers("carol") == [1]
        assert store.records("carol", 1) == []
        assert "carol" in store.users()

    def test_mark_ended(self, store):
        store.register_session("alice", 1)

        assert not store.is_ended("alice", 1)
        store.mark_ended("alice", 1)
        assert store.is_ended("alice", 1)
        assert not store.is_ended("alice", 2)


class TestInMemoryStore(StoreContract):

    @pytest.fixture
    def store(self, memory_store):
        return memory_store


class TestJsonLinesStore(StoreContract):

    @pytest.fixture
    def store(self, file_store):
        return file_store

    def test_survives_reopen(self, file_store):
        """A second store on the same directory sees everything."""
        record_game(file_store, SOLUTION[:2])
        file_store.mark_ended("alice", 1)

        reopened = JsonLinesMoveLogStore(file_store.log_dir)

        assert [r.sequence for r in reopened.records("alice", 1)] == [1, 2]
        assert reopened.is_ended("alice", 1)
        assert reopened.latest_session_number("alice") == 1

    def test_user_ids_hashed_in_file_names(self, file_store):
        record_game(file_store, SOLUTION[:1], user_id="../../etc/passwd")

        names = sorted(p.name for p in file_store.log_dir.iterdir())
        assert "sessions.json" in names
        assert all("/" not in name and "passwd" not in name for name in names)

    def test_index_written_once_per_session(self, file_store, monkeypatch):
        """Appending to a known session leaves sessions.json alone."""
        saves = []
        original = file_store._save_index

        def counting_save(index):
            saves.append(index)
            original(index)

        monkeypatch.setattr(file_store, "_save_index", counting_save)

        file_store.register_session("alice", 1)
        record_game(file_store, SOLUTION)

        assert len(saves) == 1
        assert file_store.session_numbers("alice") == [1]

    def test_index_picks_up_new_session_on_append(self, file_store):
        record_game(file_store, SOLUTION[:1], session_number=4)

        reopened = JsonLinesMoveLogStore(file_store.log_dir)
        assert reopened.session_numbers("alice") == [4]

    def test_skips_unreadable_lines(self, file_store, caplog):
        record_game(file_store, SOLUTION[:1])
        path = file_store._user_path("alice")
        with open(path, "a", encoding="utf-8") as f:
            f.write("{not json\n")

        assert len(file_store.records("alice")) == 1
        assert "Skipping unreadable record" in caplog.text


class TestOpenStore:

    def test_memory_by_default(self):
        assert isinstance(open_store(), InMemoryMoveLogStore)

    def test_files_when_dir_given(self, tmp_path):
        assert isinstance(open_store(tmp_path), JsonLinesMoveLogStore)


class TestSessionRecorder:
    """The recorder is the engine's sink."""

    def test_records_every_event(self, memory_store):
        recorder = record_game(memory_store, SOLUTION)

        records = memory_store.records("alice", 1)
        assert len(records) == 13
        assert all(r.session_id == "s-1" for r in records)
        assert recorder.failures == 0

    def test_engine_reset_moves_to_new_session(self, memory_store):
        """Resetting the engine alone keeps (user, session, sequence) unique."""
        recorder = SessionRecorder(memory_store, "alice", 1)
        engine = PuzzleEngine(sink=recorder)
        engine.load_or_unload(Item.RABBIT)

        engine.reset()
        engine.load_or_unload(Item.CAT)

        keys = [r.key for r in memory_store.records("alice")]
        assert keys == [("alice", 1, 1), ("alice", 2, 1)]
        assert recorder.session_number == 2
        assert memory_store.is_ended("alice", 1)
        assert session_status(memory_store.records("alice", 1), ended=True) == SessionStatus.ABANDONED

    def test_every_reset_starts_a_session(self, memory_store):
        recorder = SessionRecorder(memory_store, "alice", 1)
        engine = PuzzleEngine(sink=recorder)

        engine.reset()
        engine.reset()

        assert recorder.session_number == 3
        assert memory_store.session_numbers("alice") == [2, 3]

    def test_custom_allocator(self, memory_store):
        """The session number after a reset comes from the allocator when given."""
        recorder = SessionRecorder(
            memory_store, "alice", 1, allocate_session_number=lambda user_id: 10,
        )

        recorder.on_reset()

        assert recorder.session_number == 10
        assert memory_store.session_numbers("alice") == [10]

    def test_store_failure_is_swallowed(self, caplog):
        class BrokenStore(InMemoryMoveLogStore):
            def append(self, record):
                raise OSError("disk full")

        recorder = SessionRecorder(BrokenStore(), "alice", 1)
        engine = PuzzleEngine(sink=recorder)

        result = engine.load_or_unload(Item.RABBIT)

        assert result.success
        assert recorder.failures == 1
        assert "Failed to log event 1" in caplog.text
