"""Tests for tracker.lib.config module."""

import pytest
from pathlib import Path
from unittest.mock import patch

from tracker.lib.config import (
    DEFAULT_NAME_WIDTH,
    VALID_LOG_LEVELS,
    load_tracker_config,
    resolve_home,
)


class TestLoadTrackerConfig:
    """Test load_tracker_config."""

    def test_defaults_without_env_file(self, tmp_path):
        config = load_tracker_config(tmp_path)
        assert config.home == tmp_path
        assert config.db_path == tmp_path / "db.json"
        assert config.log_level == "WARNING"
        assert config.name_width == DEFAULT_NAME_WIDTH

    def test_reads_env_file(self, tmp_path):
        (tmp_path / "tracker.env").write_text(
            '# tracker settings\nDB_PATH="data/issues.json"\nLOG_LEVEL=info\nCOLUMN_WIDTH_NAME=20\n'
        )
        config = load_tracker_config(tmp_path)
        assert config.db_path == tmp_path / "data" / "issues.json"
        assert config.log_level == "INFO"
        assert config.name_width == 20

    def test_absolute_db_path_kept(self, tmp_path):
        target = tmp_path / "elsewhere" / "db.json"
        (tmp_path / "tracker.env").write_text(f"DB_PATH={target}\n")
        assert load_tracker_config(tmp_path).db_path == target

    @patch("tracker.lib.config.envparse.load_env")
    def test_invalid_log_level_defaults_with_warning(self, mock_load_env, tmp_path, caplog):
        (tmp_path / "tracker.env").write_text("")
        mock_load_env.return_value = {"LOG_LEVEL": "LOUD"}
        config = load_tracker_config(tmp_path)
        assert config.log_level == "WARNING"
        assert "Unknown LOG_LEVEL 'LOUD'" in caplog.text

    @patch("tracker.lib.config.envparse.load_env")
    def test_non_integer_width_rejected(self, mock_load_env, tmp_path):
        (tmp_path / "tracker.env").write_text("")
        mock_load_env.return_value = {"COLUMN_WIDTH_NAME": "wide"}
        with pytest.raises(ValueError, match="COLUMN_WIDTH_NAME"):
            load_tracker_config(tmp_path)

    @patch("tracker.lib.config.envparse.load_env")
    def test_tiny_width_clamped(self, mock_load_env, tmp_path, caplog):
        (tmp_path / "tracker.env").write_text("")
        mock_load_env.return_value = {"COLUMN_WIDTH_NAME": "1"}
        assert load_tracker_config(tmp_path).name_width == 4
        assert "too small" in caplog.text

    def test_malformed_env_file(self, tmp_path):
        (tmp_path / "tracker.env").write_text("DB_PATH=$(rm -rf /)\n")
        with pytest.raises(ValueError, match="shell syntax"):
            load_tracker_config(tmp_path)

    def test_misspelled_setting_rejected(self, tmp_path):
        (tmp_path / "tracker.env").write_text("LOG_LEVEL=INFO\nCOLUMN_WIDTH=20\n")
        with pytest.raises(ValueError, match="Line 2: Unknown setting 'COLUMN_WIDTH'"):
            load_tracker_config(tmp_path)


class TestResolveHome:
    """Test resolve_home precedence."""

    def test_explicit_wins(self, monkeypatch, tmp_path):
        monkeypatch.setenv("JT_HOME", "/from/env")
        assert resolve_home(str(tmp_path)) == tmp_path

    def test_env_var(self, monkeypatch):
        monkeypatch.setenv("JT_HOME", "/from/env")
        assert resolve_home(None) == Path("/from/env")

    def test_cwd_fallback(self, monkeypatch, tmp_path):
        monkeypatch.delenv("JT_HOME", raising=False)
        monkeypatch.chdir(tmp_path)
        assert resolve_home() == tmp_path


class TestValidLogLevels:
    """Test VALID_LOG_LEVELS constant."""

    def test_contains_expected_levels(self):
        assert VALID_LOG_LEVELS == ("DEBUG", "INFO", "WARNING", "ERROR")
