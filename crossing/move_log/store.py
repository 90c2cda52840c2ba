"""
Move Log Store - Persistence for logged events.

Stores:
- InMemoryMoveLogStore: process-local, used by default and in tests
- JsonLinesMoveLogStore: one append-only .jsonl file per user on disk

Records are keyed by (user_id, session_number, sequence). A session can
additionally be marked as ended, which is what turns an unfinished
session into an abandoned one.
"""

from __future__ import annotations
import hashlib
import json
import logging
import threading
from abc import ABC, abstractmethod
from collections import defaultdict
from pathlib import Path

from .records import LogRecord

logger = logging.getLogger("crossing.move_log")


class MoveLogStore(ABC):
    """Interface every move log backend implements."""

    @abstractmethod
    def append(self, record: LogRecord):
        """Persist one record."""

    @abstractmethod
    def records(self, user_id: str, session_number: int | None = None) -> list[LogRecord]:
        """Records for a user (optionally one session), in key order."""

    @abstractmethod
    def users(self) -> list[str]:
        """All user IDs with at least one record or started session."""

    @abstractmethod
    def session_numbers(self, user_id: str) -> list[int]:
        """Session numbers known for a user, ascending."""

    @abstractmethod
    def register_session(self, user_id: str, session_number: int):
        """Note that a session was started, even before any event."""

    @abstractmethod
    def mark_ended(self, user_id: str, session_number: int):
        """Note that a session was closed by the player."""

    @abstractmethod
    def is_ended(self, user_id: str, session_number: int) -> bool:
        """Whether the session was closed."""

    def latest_session_number(self, user_id: str) -> int:
        """Highest session number for a user, 0 if none."""
        numbers = self.session_numbers(user_id)
        return numbers[-1] if numbers else 0


class InMemoryMoveLogStore(MoveLogStore):
    """Keeps everything in dictionaries. Nothing survives the process."""

    def __init__(self):
        self._records: dict[str, list[LogRecord]] = defaultdict(list)
        self._sessions: dict[str, set[int]] = defaultdict(set)
        self._ended: set[tuple[str, int]] = set()
        self._lock = threading.Lock()

    def append(self, record: LogRecord):
        with self._lock:
            self._records[record.user_id].append(record)
            self._sessions[record.user_id].add(record.session_number)

    def records(self, user_id: str, session_number: int | None = None) -> list[LogRecord]:
        with self._lock:
            found = [
                r for r in self._records.get(user_id, [])
                if session_number is None or r.session_number == session_number
            ]
        return sorted(found, key=lambda r: r.key)

    def users(self) -> list[str]:
        with self._lock:
            return sorted(uid for uid, numbers in self._sessions.items() if numbers)

    def session_numbers(self, user_id: str) -> list[int]:
        with self._lock:
            return sorted(self._sessions.get(user_id, set()))

    def register_session(self, user_id: str, session_number: int):
        with self._lock:
            self._sessions[user_id].add(session_number)

    def mark_ended(self, user_id: str, session_number: int):
        with self._lock:
            self._ended.add((user_id, session_number))

    def is_ended(self, user_id: str, session_number: int) -> bool:
        with self._lock:
            return (user_id, session_number) in self._ended


class JsonLinesMoveLogStore(MoveLogStore):
    """
    File-based store.

    Layout:
        <log_dir>/<user_hash>.jsonl     one JSON record per line
        <log_dir>/sessions.json         started and ended sessions per user

    User IDs are hashed for file names so arbitrary IDs are safe on disk.
    """

    SESSIONS_FILE = "sessions.json"

    def __init__(self, log_dir: str | Path):
        self.log_dir = Path(log_dir).expanduser()
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()
        self._indexed: set[tuple[str, int]] = set()

    def append(self, record: LogRecord):
        line = record.model_dump_json()
        with self._lock:
            with open(self._user_path(record.user_id), "a", encoding="utf-8") as f:
                f.write(line + "\n")
            self._ensure_indexed(record.user_id, record.session_number)

    def records(self, user_id: str, session_number: int | None = None) -> list[LogRecord]:
        path = self._user_path(user_id)
        if not path.exists():
            return []

        found = []
        with self._lock:
            with open(path, "r", encoding="utf-8") as f:
                for line_number, line in enumerate(f, start=1):
                    line = line.strip()
                    if not line:
                        continue
                    try:
                        record = LogRecord.model_validate_json(line)
                    except ValueError:
                        logger.warning("Skipping unreadable record %s:%d", path.name, line_number)
                        continue
                    if session_number is None or record.session_number == session_number:
                        found.append(record)
        return sorted(found, key=lambda r: r.key)

    def users(self) -> list[str]:
        with self._lock:
            index = self._load_index()
        return sorted(uid for uid, entry in index.items() if entry["started"])

    def session_numbers(self, user_id: str) -> list[int]:
        with self._lock:
            index = self._load_index()
        return sorted(index.get(user_id, {}).get("started", []))

    def register_session(self, user_id: str, session_number: int):
        with self._lock:
            self._ensure_indexed(user_id, session_number)

    def mark_ended(self, user_id: str, session_number: int):
        with self._lock:
            index = self._load_index()
            changed = self._add_session(index, user_id, session_number)
            ended = index[user_id]["ended"]
            if session_number not in ended:
                ended.append(session_number)
                changed = True
            if changed:
                self._save_index(index)
            self._indexed.add((user_id, session_number))

    def is_ended(self, user_id: str, session_number: int) -> bool:
        with self._lock:
            index = self._load_index()
        return session_number in index.get(user_id, {}).get("ended", [])

    def _user_path(self, user_id: str) -> Path:
        """
        Get file path for a user's records.

        Uses SHA-256 truncated to 16 chars.
        """
        digest = hashlib.sha256(user_id.encode("utf-8")).hexdigest()[:16]
        return self.log_dir / f"{digest}.jsonl"

    def _load_index(self) -> dict:
        path = self.log_dir / self.SESSIONS_FILE
        if not path.exists():
            return {}
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)

    def _save_index(self, index: dict):
        path = self.log_dir / self.SESSIONS_FILE
        tmp_path = path.with_suffix(".tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(index, f, indent=2, ensure_ascii=False)
        tmp_path.replace(path)

    def _ensure_indexed(self, user_id: str, session_number: int):
        """Add a session to the index, rewriting the file only if it was missing."""
        if (user_id, session_number) in self._indexed:
            return
        index = self._load_index()
        if self._add_session(index, user_id, session_number):
            self._save_index(index)
        self._indexed.add((user_id, session_number))

    @staticmethod
    def _add_session(index: dict, user_id: str, session_number: int) -> bool:
        """Record a started session in the index. Returns True if it was new."""
        entry = index.setdefault(user_id, {"started": [], "ended": []})
        if session_number in entry["started"]:
            return False
        entry["started"].append(session_number)
        return True


def open_store(log_dir: str | Path | None = None) -> MoveLogStore:
    """File store when a directory is given, memory store otherwise."""
    if log_dir:
        return JsonLinesMoveLogStore(log_dir)
    return InMemoryMoveLogStore()
