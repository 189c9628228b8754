"""
Data models for the tracker database.

A DBState is the whole persisted document: a shared id counter plus the
epic and story maps. Ownership is recorded only on the epic side, in
Epic.stories.
"""

import re
from dataclasses import dataclass, field
from enum import Enum


class Status(Enum):
    """Lifecycle marker for epics and stories. Any transition is allowed."""
    OPEN = "Open"
    IN_PROGRESS = "InProgress"
    RESOLVED = "Resolved"
    CLOSED = "Closed"

    @classmethod
    def parse(cls, text: str) -> "Status":
        """Parse user input: a status name in any case/spacing, or menu number 1-4."""
        cleaned = re.sub(r"[\s_-]+", "", text.strip()).lower()
        if cleaned in _MENU_NUMBERS:
            return _MENU_NUMBERS[cleaned]
        for status in cls:
            if status.value.lower() == cleaned:
                return status
        raise ValueError(f"Unknown status '{text}'. Use open, in-progress, resolved, closed or 1-4")


_MENU_NUMBERS = {
    "1": Status.OPEN,
    "2": Status.IN_PROGRESS,
    "3": Status.RESOLVED,
    "4": Status.CLOSED,
}


@dataclass
class Story:
    """A leaf work item. Belongs to exactly one epic."""
    name: str
    description: str
    status: Status = Status.OPEN

    @classmethod
    def new(cls, name: str, description: str) -> "Story":
        return cls(name=name, description=description)

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "description": self.description,
            "status": self.status.value,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Story":
        return cls(
            name=data["name"],
            description=data["description"],
            status=Status(data["status"]),
        )


@dataclass
class Epic:
    """A top-level work item owning an ordered list of story ids."""
    name: str
    description: str
    status: Status = Status.OPEN
    stories: list[int] = field(default_factory=list)  # Insertion order

    @classmethod
    def new(cls, name: str, description: str) -> "Epic":
        return cls(name=name, description=description)

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "description": self.description,
            "status": self.status.value,
            "stories": list(self.stories),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Epic":
        return cls(
            name=data["name"],
            description=data["description"],
            status=Status(data["status"]),
            stories=[int(story_id) for story_id in data["stories"]],
        )


@dataclass
class DBState:
    """The full persisted snapshot: id counter plus both entity maps.

    last_item_id is shared by epics and stories, so an epic and a story
    never get the same id.
    """
    last_item_id: int = 0
    epics: dict[int, Epic] = field(default_factory=dict)
    stories: dict[int, Story] = field(default_factory=dict)

    def to_dict(self) -> dict:
        """Wire shape: map keys as decimal strings, ordered by id."""
        return {
            "last_item_id": self.last_item_id,
            "epics": {str(k): self.epics[k].to_dict() for k in sorted(self.epics)},
            "stories": {str(k): self.stories[k].to_dict() for k in sorted(self.stories)},
        }

    @classmethod
    def from_dict(cls, data: dict) -> "DBState":
        return cls(
            last_item_id=int(data["last_item_id"]),
            epics={int(k): Epic.from_dict(v) for k, v in data["epics"].items()},
            stories={int(k): Story.from_dict(v) for k, v in data["stories"].items()},
        )

    def integrity_errors(self) -> list[str]:
        """List invariant violations. Empty list means the state is consistent."""
        errors = []

        all_ids = list(self.epics) + list(self.stories)
        if all_ids and max(all_ids) > self.last_item_id:
            errors.append(
                f"last_item_id {self.last_item_id} is below highest id {max(all_ids)}"
            )

        owners: dict[int, int] = {}
        for epic_id, epic in self.epics.items():
            for story_id in epic.stories:
                if story_id not in self.stories:
                    errors.append(f"Epic {epic_id} references missing story {story_id}")
                elif story_id in owners:
                    errors.append(
                        f"Story {story_id} is owned by epics {owners[story_id]} and {epic_id}"
                    )
                else:
                    owners[story_id] = epic_id

        return errors
