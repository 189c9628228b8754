"""Tests for the jt command line."""

import json

import pytest

from tracker.cli import build_parser, main, parse_status
from tracker.db.models import Status


def run(tmp_path, *argv):
    return main(["--dir", str(tmp_path), *argv])


def read_db(tmp_path) -> dict:
    return json.loads((tmp_path / "db.json").read_text())


class TestParser:
    """Test argument parsing."""

    def test_status_argument(self):
        args = build_parser().parse_args(["epic", "status", "1", "in-progress"])
        assert args.epic_id == 1
        assert args.status == Status.IN_PROGRESS

    def test_bad_status_exits(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["story", "status", "2", "finished"])

    def test_parse_status_numbers(self):
        assert parse_status("3") == Status.RESOLVED

    def test_command_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])


class TestCommands:
    """Test commands end to end against a temporary home."""

    def test_first_use_creates_empty_database(self, tmp_path, capsys):
        assert run(tmp_path, "list") == 0
        assert read_db(tmp_path) == {"last_item_id": 0, "epics": {}, "stories": {}}
        assert "Epics: none" in capsys.readouterr().out

    def test_create_epic_and_story(self, tmp_path, capsys):
        assert run(tmp_path, "epic", "create", "epic_1", "-m", "first epic") == 0
        assert run(tmp_path, "story", "create", "1", "story_1") == 0

        out = capsys.readouterr().out
        assert "Created epic 1: epic_1" in out
        assert "Created story 2 in epic 1: story_1" in out
        data = read_db(tmp_path)
        assert data["last_item_id"] == 2
        assert data["epics"]["1"]["stories"] == [2]
        assert data["epics"]["1"]["description"] == "first epic"

    def test_list_and_show(self, tmp_path, capsys):
        run(tmp_path, "epic", "create", "a very long epic name that will not fit in the column")
        run(tmp_path, "story", "create", "1", "story_1")
        run(tmp_path, "story", "status", "2", "2")
        capsys.readouterr()

        assert run(tmp_path, "list") == 0
        out = capsys.readouterr().out
        assert "..." in out
        assert "OPEN" in out
        assert "1 epic(s), 1 story(s)" in out

        assert run(tmp_path, "show", "1") == 0
        out = capsys.readouterr().out
        assert "story_1" in out
        assert "IN PROGRESS" in out

    def test_story_show_names_epic(self, tmp_path, capsys):
        run(tmp_path, "epic", "create", "epic_1")
        run(tmp_path, "story", "create", "1", "story_1", "-m", "details")
        capsys.readouterr()

        assert run(tmp_path, "story", "show", "2") == 0
        out = capsys.readouterr().out
        assert "Epic: 1 (epic_1)" in out
        assert "Description: details" in out

    def test_status_updates(self, tmp_path):
        run(tmp_path, "epic", "create", "epic_1")
        assert run(tmp_path, "epic", "status", "1", "closed") == 0
        assert read_db(tmp_path)["epics"]["1"]["status"] == "Closed"

    def test_delete_epic_with_yes(self, tmp_path, capsys):
        run(tmp_path, "epic", "create", "epic_1")
        run(tmp_path, "story", "create", "1", "story_1")

        assert run(tmp_path, "epic", "delete", "1", "--yes") == 0

        data = read_db(tmp_path)
        assert data["epics"] == {}
        assert data["stories"] == {}
        assert "also deletes 1 story(s): 2" in capsys.readouterr().out

    def test_delete_cancelled(self, tmp_path, monkeypatch, capsys):
        run(tmp_path, "epic", "create", "epic_1")
        monkeypatch.setattr("builtins.input", lambda prompt: "n")

        assert run(tmp_path, "epic", "delete", "1") == 1

        assert "1" in read_db(tmp_path)["epics"]
        assert "Cancelled" in capsys.readouterr().out

    def test_delete_story_confirmed(self, tmp_path, monkeypatch):
        run(tmp_path, "epic", "create", "epic_1")
        run(tmp_path, "story", "create", "1", "story_1")
        monkeypatch.setattr("builtins.input", lambda prompt: "y")

        assert run(tmp_path, "story", "delete", "1", "2") == 0

        data = read_db(tmp_path)
        assert data["stories"] == {}
        assert data["epics"]["1"]["stories"] == []

    def test_delete_confirmation_eof_cancels(self, tmp_path, monkeypatch):
        run(tmp_path, "epic", "create", "epic_1")

        def eof(prompt):
            raise EOFError

        monkeypatch.setattr("builtins.input", eof)
        assert run(tmp_path, "epic", "delete", "1") == 1
        assert "1" in read_db(tmp_path)["epics"]


class TestErrorMapping:
    """Test error output and exit codes."""

    def test_missing_epic_exit_one(self, tmp_path, capsys):
        assert run(tmp_path, "story", "create", "7", "orphan") == 1
        assert "ERROR: Epic 7 not found" in capsys.readouterr().out
        assert read_db(tmp_path)["last_item_id"] == 0

    def test_missing_story_exit_one(self, tmp_path, capsys):
        assert run(tmp_path, "story", "status", "3", "open") == 1
        assert "ERROR: Story 3 not found" in capsys.readouterr().out

    def test_show_missing_epic(self, tmp_path, capsys):
        assert run(tmp_path, "show", "4") == 1
        assert "ERROR: Epic 4 not found" in capsys.readouterr().out

    def test_corrupt_database_exit_two(self, tmp_path, capsys):
        (tmp_path / "db.json").write_text('{ "last_item_id": 0 "epics": {} stories: {} }')
        assert run(tmp_path, "list") == 2
        assert "ERROR: Corrupt database" in capsys.readouterr().out

    def test_unwritable_location_exit_two(self, tmp_path, capsys):
        (tmp_path / "tracker.env").write_text("DB_PATH=missing/dir/db.json\n")
        assert run(tmp_path, "list") == 2
        assert "ERROR: Storage unavailable" in capsys.readouterr().out

    def test_bad_config_exit_two(self, tmp_path, capsys):
        (tmp_path / "tracker.env").write_text("not a setting\n")
        with pytest.raises(SystemExit) as exc_info:
            run(tmp_path, "list")
        assert exc_info.value.code == 2
        assert "Invalid tracker.env" in capsys.readouterr().out
