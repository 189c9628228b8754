"""
Configuration loader for the tracker.

A tracker home directory may contain a tracker.env file; every key is
optional and a missing file means defaults throughout.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from . import envparse

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "tracker.env"
HOME_ENV_VAR = "JT_HOME"

DEFAULT_DB_PATH = "db.json"
DEFAULT_LOG_LEVEL = "WARNING"
DEFAULT_NAME_WIDTH = 32
MIN_NAME_WIDTH = 4

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")
CONFIG_KEYS = ("DB_PATH", "LOG_LEVEL", "COLUMN_WIDTH_NAME")


@dataclass
class TrackerConfig:
    """Tracker configuration from tracker.env"""
    home: Path
    db_path: Path  # Absolute, resolved against home
    log_level: str
    name_width: int  # Width of the name column in listings


def resolve_home(explicit: str | None = None) -> Path:
    """Pick the tracker home: explicit argument, then $JT_HOME, then cwd."""
    if explicit:
        return Path(explicit).expanduser()
    env_home = os.environ.get(HOME_ENV_VAR)
    if env_home:
        return Path(env_home).expanduser()
    return Path.cwd()


def load_tracker_config(home: Path) -> TrackerConfig:
    """Load tracker.env from home and return TrackerConfig.

    Raises:
        ValueError: if tracker.env exists but is malformed
    """
    config_file = home / CONFIG_FILENAME
    env = envparse.load_env(str(config_file), CONFIG_KEYS) if config_file.exists() else {}

    db_path = Path(env.get("DB_PATH", DEFAULT_DB_PATH)).expanduser()
    if not db_path.is_absolute():
        db_path = home / db_path

    log_level = env.get("LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()
    if log_level not in VALID_LOG_LEVELS:
        logger.warning(
            f"Unknown LOG_LEVEL '{log_level}' in {config_file}, "
            f"using {DEFAULT_LOG_LEVEL}. Valid levels: {', '.join(VALID_LOG_LEVELS)}"
        )
        log_level = DEFAULT_LOG_LEVEL

    raw_width = env.get("COLUMN_WIDTH_NAME", str(DEFAULT_NAME_WIDTH))
    try:
        name_width = int(raw_width)
    except ValueError:
        raise ValueError(f"COLUMN_WIDTH_NAME must be an integer, got '{raw_width}'") from None
    if name_width < MIN_NAME_WIDTH:
        logger.warning(f"COLUMN_WIDTH_NAME {name_width} too small, using {MIN_NAME_WIDTH}")
        name_width = MIN_NAME_WIDTH

    return TrackerConfig(
        home=home,
        db_path=db_path,
        log_level=log_level,
        name_width=name_width,
    )
