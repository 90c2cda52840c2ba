"""
Tests for the command-line interface.
"""

import pytest

from ..cli import main, play
from ..move_log import SessionStatus, JsonLinesMoveLogStore
from ..session import SessionManager


def scripted(*commands):
    """A read() that replays commands, then signals end of input."""
    pending = list(commands)

    def read(prompt):
        if not pending:
            raise EOFError
        return pending.pop(0)

    return read


class TestPlay:
    """The text game loop."""

    def test_winning_game(self, session_manager):
        output = []
        commands = [
            "rabbit", "cross", "cross", "cat", "cross", "rabbit", "cross",
            "vegetable", "cross", "cross", "rabbit", "cross", "quit",
        ]

        play(session_manager, "alice", read=scripted(*commands), write=output.append)

        assert "Solved in 7 crossings!" in output
        assert session_manager.logged_status("alice", 1) == SessionStatus.COMPLETED
        assert session_manager.list_sessions() == []

    def test_warning_shown(self, session_manager):
        output = []

        play(session_manager, "alice", read=scripted("cat", "rabbit"), write=output.append)

        assert "! The boat carries at most one passenger besides the farmer!" in output

    def test_violation_and_reset(self, session_manager):
        output = []

        play(
            session_manager, "alice",
            read=scripted("cat", "c", "reset", "rabbit"),
            write=output.append,
        )

        assert any(line.startswith("Rule broken: The rabbit and the vegetable") for line in output)
        assert "Starting over as session 2" in output
        assert session_manager.logged_status("alice", 1) == SessionStatus.FAILED
        assert session_manager.logged_status("alice", 2) == SessionStatus.ABANDONED

    def test_unknown_command(self, session_manager):
        output = []

        play(session_manager, "alice", read=scripted("goat", ""), write=output.append)

        assert any("Unknown item" in line for line in output)

    def test_log_command(self, session_manager):
        output = []

        play(session_manager, "alice", read=scripted("rabbit", "log"), write=output.append)

        csv_text = output[-1]
        assert csv_text.startswith('"sequence","operation"')
        assert '"1","load","rabbit"' in csv_text

    def test_returns_session_id(self, session_manager):
        session_id = play(session_manager, "alice", read=scripted(), write=lambda line: None)

        assert session_manager.get_session(session_id) is None
        assert session_manager.logged_status("alice", 1) == SessionStatus.ABANDONED


class TestMain:
    """Argument handling."""

    def test_no_command_exits(self, capsys):
        with pytest.raises(SystemExit) as exc:
            main([])

        assert exc.value.code == 1
        assert "play" in capsys.readouterr().out

    def test_export(self, tmp_path, capsys):
        manager = SessionManager(store=JsonLinesMoveLogStore(tmp_path))
        play(manager, "alice", read=scripted("rabbit", "cross"), write=lambda line: None)

        main(["export", "--user", "alice", "--log-dir", str(tmp_path)])

        lines = capsys.readouterr().out.splitlines()
        assert lines[0].startswith('"sequence"')
        assert len(lines) == 3

    def test_export_unknown_user(self, tmp_path, capsys):
        with pytest.raises(SystemExit):
            main(["export", "--user", "nobody", "--log-dir", str(tmp_path)])

        assert "No sessions logged" in capsys.readouterr().out
