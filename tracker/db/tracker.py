"""
CRUD operations over the tracker database.

Every mutation is a full read-modify-write against the Database port:
load the state, check the referenced ids, mutate in memory, save. Lookups
are checked before anything is mutated, and a failed operation never
reaches save, so nothing partial is ever persisted. The Tracker holds no
state between calls.
"""

import logging

from tracker.db.errors import EpicNotFound, StoryNotFound
from tracker.db.models import DBState, Epic, Status, Story
from tracker.db.storage import Database

logger = logging.getLogger(__name__)


class Tracker:
    """Epic/story operations with id allocation and referential integrity."""

    def __init__(self, database: Database):
        self.database = database

    def read_state(self) -> DBState:
        return self.database.load()

    def get_epic(self, epic_id: int) -> Epic:
        state = self.database.load()
        if epic_id not in state.epics:
            raise EpicNotFound(epic_id)
        return state.epics[epic_id]

    def get_story(self, story_id: int) -> Story:
        state = self.database.load()
        if story_id not in state.stories:
            raise StoryNotFound(story_id)
        return state.stories[story_id]

    def create_epic(self, epic: Epic) -> int:
        """Store a new epic and return its id.

        Stories are attached afterwards with create_story, so the epic must
        arrive with an empty stories list.

        Raises:
            ValueError: epic already lists stories
        """
        if epic.stories:
            raise ValueError(f"A new epic cannot list stories, got {epic.stories}")
        state = self.database.load()

        new_id = state.last_item_id + 1
        state.epics[new_id] = epic
        state.last_item_id = new_id

        self.database.save(state)
        logger.info(f"Created epic {new_id}")
        return new_id

    def create_story(self, story: Story, epic_id: int) -> int:
        """Store a new story under an existing epic and return its id.

        Raises:
            EpicNotFound: epic_id does not exist
        """
        state = self.database.load()
        if epic_id not in state.epics:
            raise EpicNotFound(epic_id)

        new_id = state.last_item_id + 1
        state.stories[new_id] = story
        state.epics[epic_id].stories.append(new_id)
        state.last_item_id = new_id

        self.database.save(state)
        logger.info(f"Created story {new_id} in epic {epic_id}")
        return new_id

    def delete_epic(self, epic_id: int) -> None:
        """Delete an epic together with all of its stories.

        Raises:
            EpicNotFound: epic_id does not exist
        """
        state = self.database.load()
        if epic_id not in state.epics:
            raise EpicNotFound(epic_id)

        epic = state.epics.pop(epic_id)
        for story_id in epic.stories:
            state.stories.pop(story_id, None)

        self.database.save(state)
        logger.info(f"Deleted epic {epic_id} and {len(epic.stories)} story(s)")

    def delete_story(self, epic_id: int, story_id: int) -> None:
        """Delete a story and unlink it from its epic.

        Raises:
            EpicNotFound: epic_id does not exist
            StoryNotFound: story_id does not exist or is not in that epic
        """
        state = self.database.load()
        if epic_id not in state.epics:
            raise EpicNotFound(epic_id)
        if story_id not in state.stories:
            raise StoryNotFound(story_id)
        epic = state.epics[epic_id]
        if story_id not in epic.stories:
            raise StoryNotFound(story_id, epic_id)

        del state.stories[story_id]
        epic.stories.remove(story_id)

        self.database.save(state)
        logger.info(f"Deleted story {story_id} from epic {epic_id}")

    def update_epic_status(self, epic_id: int, status: Status) -> None:
        """Set an epic's status. Any transition is accepted."""
        state = self.database.load()
        if epic_id not in state.epics:
            raise EpicNotFound(epic_id)

        state.epics[epic_id].status = status

        self.database.save(state)
        logger.info(f"Epic {epic_id} status -> {status.value}")

    def update_story_status(self, story_id: int, status: Status) -> None:
        """Set a story's status. Any transition is accepted."""
        state = self.database.load()
        if story_id not in state.stories:
            raise StoryNotFound(story_id)

        state.stories[story_id].status = status

        self.database.save(state)
        logger.info(f"Story {story_id} status -> {status.value}")
