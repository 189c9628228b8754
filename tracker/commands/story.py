"""
jt story - Create, inspect, update and delete stories.
"""

from tracker.commands.epic import confirm
from tracker.db.errors import StoryNotFound
from tracker.db.models import Story
from tracker.db.tracker import Tracker
from tracker.lib.config import TrackerConfig
from tracker.lib.display import status_label


def cmd_story_create(args, tracker: Tracker, config: TrackerConfig) -> int:
    """Create a story under an epic and print its id."""
    story = Story.new(args.name, args.description or "")
    story_id = tracker.create_story(story, args.epic_id)
    print(f"Created story {story_id} in epic {args.epic_id}: {story.name}")
    return 0


def cmd_story_show(args, tracker: Tracker, config: TrackerConfig) -> int:
    """Show a story's details."""
    state = tracker.read_state()
    if args.story_id not in state.stories:
        raise StoryNotFound(args.story_id)
    story = state.stories[args.story_id]
    epic_id = next(
        (eid for eid, epic in state.epics.items() if args.story_id in epic.stories),
        None,
    )

    print(f"Story {args.story_id}: {story.name}")
    print(f"  Status: {status_label(story.status)}")
    if epic_id is not None:
        print(f"  Epic: {epic_id} ({state.epics[epic_id].name})")
    if story.description:
        print(f"  Description: {story.description}")
    return 0


def cmd_story_status(args, tracker: Tracker, config: TrackerConfig) -> int:
    """Change a story's status."""
    tracker.update_story_status(args.story_id, args.status)
    print(f"Story {args.story_id} is now {status_label(args.status)}")
    return 0


def cmd_story_delete(args, tracker: Tracker, config: TrackerConfig) -> int:
    """Delete a story from its epic."""
    story = tracker.get_story(args.story_id)

    print(f"Deleting story {args.story_id}: {story.name}")
    if not confirm("Proceed?", getattr(args, 'yes', False)):
        print("Cancelled")
        return 1

    tracker.delete_story(args.epic_id, args.story_id)
    print(f"Deleted story {args.story_id} from epic {args.epic_id}")
    return 0
