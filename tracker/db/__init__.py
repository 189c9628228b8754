"""
Storage and state management for the tracker.

Holds the entity model, the Database port with its backends, and the
Tracker that performs CRUD with id allocation and referential integrity.
"""

from tracker.db.errors import (
    CorruptState,
    EpicNotFound,
    StorageUnavailable,
    StoryNotFound,
    TrackerError,
)
from tracker.db.models import DBState, Epic, Status, Story
from tracker.db.storage import Database, JSONFileDatabase, MemoryDatabase
from tracker.db.tracker import Tracker

__all__ = [
    "DBState",
    "Epic",
    "Story",
    "Status",
    "Database",
    "JSONFileDatabase",
    "MemoryDatabase",
    "Tracker",
    "TrackerError",
    "StorageUnavailable",
    "CorruptState",
    "EpicNotFound",
    "StoryNotFound",
]
