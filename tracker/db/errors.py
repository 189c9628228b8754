"""Error taxonomy for the tracker core."""

from pathlib import Path


class TrackerError(Exception):
    """Base class for all tracker failures."""
    pass


class StorageUnavailable(TrackerError):
    """The storage medium could not be read or written at all."""

    def __init__(self, path: Path | str | None, reason: str):
        self.path = path
        self.reason = reason
        where = f" {path}" if path else ""
        super().__init__(f"Storage unavailable{where}: {reason}")


class CorruptState(TrackerError):
    """The storage medium was readable but did not hold a valid database."""

    def __init__(self, path: Path | str | None, reason: str):
        self.path = path
        self.reason = reason
        where = f" in {path}" if path else ""
        super().__init__(f"Corrupt database{where}: {reason}")


class EpicNotFound(TrackerError):
    def __init__(self, epic_id: int):
        self.epic_id = epic_id
        super().__init__(f"Epic {epic_id} not found")


class StoryNotFound(TrackerError):
    def __init__(self, story_id: int, epic_id: int | None = None):
        self.story_id = story_id
        self.epic_id = epic_id
        if epic_id is None:
            super().__init__(f"Story {story_id} not found")
        else:
            super().__init__(f"Story {story_id} not found in epic {epic_id}")
