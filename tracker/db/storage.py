"""
Storage backends for the tracker database.

The Tracker talks to storage only through the two-operation Database
port (load/save of the full DBState). JSONFileDatabase is the production
backend; MemoryDatabase stands in for it in tests.
"""

import copy
import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path

from tracker.db.errors import CorruptState, StorageUnavailable
from tracker.db.models import DBState
from tracker.lib.validate import ValidationError, validate, validate_before_write

logger = logging.getLogger(__name__)

SCHEMA_NAME = "dbstate"


class Database(ABC):
    """Persistence port: read and write the whole DBState."""

    @abstractmethod
    def load(self) -> DBState:
        """Return the stored state.

        Raises:
            StorageUnavailable: medium cannot be read
            CorruptState: medium was read but does not hold a valid DBState
        """

    @abstractmethod
    def save(self, state: DBState) -> None:
        """Replace the stored state.

        Raises:
            StorageUnavailable: write could not be completed
            CorruptState: state would not load back; nothing is written
        """


def _reject_duplicate_keys(pairs: list[tuple]) -> dict:
    result = {}
    for key, value in pairs:
        if key in result:
            raise ValueError(f"Duplicate key '{key}'")
        result[key] = value
    return result


def encode_state(state: DBState) -> str:
    """Deterministic JSON encoding of a DBState."""
    return json.dumps(state.to_dict(), indent=2, ensure_ascii=False) + "\n"


def check_writable(state: DBState, path: Path | str) -> None:
    """Refuse a state that load() would reject, so it never reaches storage.

    Raises:
        CorruptState: state fails the schema or its integrity checks
    """
    try:
        validate_before_write(state.to_dict(), SCHEMA_NAME, path)
    except ValidationError as e:
        raise CorruptState(path, str(e)) from e

    problems = state.integrity_errors()
    if problems:
        raise CorruptState(path, f"Refusing to write inconsistent state: {'; '.join(problems)}")


def decode_state(content: bytes, path: Path | str | None = None) -> DBState:
    """Decode raw bytes into a DBState.

    Raises:
        CorruptState: on any decoding, schema or integrity failure
    """
    try:
        text = content.decode("utf-8")
    except UnicodeDecodeError as e:
        raise CorruptState(path, f"Not valid UTF-8: {e}") from e

    try:
        data = json.loads(text, object_pairs_hook=_reject_duplicate_keys)
    except json.JSONDecodeError as e:
        raise CorruptState(path, f"Invalid JSON: {e}") from e
    except ValueError as e:
        raise CorruptState(path, str(e)) from e

    try:
        validate(data, SCHEMA_NAME)
    except ValidationError as e:
        raise CorruptState(path, str(e)) from e

    state = DBState.from_dict(data)
    problems = state.integrity_errors()
    if problems:
        raise CorruptState(path, "; ".join(problems))
    return state


class JSONFileDatabase(Database):
    """Database stored as a single JSON document on disk.

    Saves write a sibling temporary file and rename it over the target, so
    an interrupted save leaves the previous document in place.

    Not safe for concurrent writers: the last save wins.
    """

    def __init__(self, file_path: Path | str):
        self.file_path = Path(file_path)

    def __repr__(self) -> str:
        return f"JSONFileDatabase({str(self.file_path)!r})"

    def exists(self) -> bool:
        return self.file_path.is_file()

    def load(self) -> DBState:
        try:
            content = self.file_path.read_bytes()
        except OSError as e:
            raise StorageUnavailable(self.file_path, e.strerror or str(e)) from e

        state = decode_state(content, self.file_path)
        logger.debug(
            f"Loaded {self.file_path}: {len(state.epics)} epic(s), "
            f"{len(state.stories)} story(s), last id {state.last_item_id}"
        )
        return state

    def save(self, state: DBState) -> None:
        check_writable(state, self.file_path)
        content = encode_state(state)

        directory = self.file_path.parent
        tmp_name = None
        try:
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.file_path.name}.", suffix=".tmp", dir=directory
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(content)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, self.file_path)
            tmp_name = None
        except OSError as e:
            raise StorageUnavailable(self.file_path, e.strerror or str(e)) from e
        finally:
            if tmp_name is not None:
                try:
                    os.unlink(tmp_name)
                except OSError:
                    logger.warning(f"Failed to remove temporary file {tmp_name}")

        logger.debug(f"Saved {self.file_path} (last id {state.last_item_id})")


class MemoryDatabase(Database):
    """In-memory Database for exercising the Tracker without I/O.

    Hands out and stores deep copies so callers can't alias the held state.
    """

    def __init__(self, state: DBState | None = None):
        self.state = copy.deepcopy(state) if state is not None else DBState()
        self.last_saved: DBState | None = None
        self.save_count = 0
        self.fail_on_load = False
        self.fail_on_save = False

    def load(self) -> DBState:
        if self.fail_on_load:
            raise StorageUnavailable(None, "load failure injected")
        return copy.deepcopy(self.state)

    def save(self, state: DBState) -> None:
        if self.fail_on_save:
            raise StorageUnavailable(None, "save failure injected")
        check_writable(state, "<memory>")
        self.state = copy.deepcopy(state)
        self.last_saved = copy.deepcopy(state)
        self.save_count += 1
