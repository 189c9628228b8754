"""
jt list / jt show - Epic listings.
"""

from tracker.db.errors import EpicNotFound
from tracker.db.models import DBState, Epic
from tracker.db.tracker import Tracker
from tracker.lib.config import TrackerConfig
from tracker.lib.display import get_column_string, status_label

ID_WIDTH = 6
STATUS_WIDTH = 12


def format_row(item_id, name: str, status: str, name_width: int) -> str:
    return "  " + " | ".join([
        get_column_string(str(item_id), ID_WIDTH),
        get_column_string(name, name_width),
        get_column_string(status, STATUS_WIDTH),
    ])


def format_epics_table(state: DBState, name_width: int) -> list[str]:
    lines = [format_row("id", "name", "status", name_width)]
    lines.append("  " + "-" * (len(lines[0]) - 2))
    for epic_id in sorted(state.epics):
        epic = state.epics[epic_id]
        lines.append(format_row(epic_id, epic.name, status_label(epic.status), name_width))
    return lines


def format_stories_table(state: DBState, epic: Epic, name_width: int) -> list[str]:
    lines = [format_row("id", "name", "status", name_width)]
    lines.append("  " + "-" * (len(lines[0]) - 2))
    for story_id in epic.stories:
        story = state.stories[story_id]
        lines.append(format_row(story_id, story.name, status_label(story.status), name_width))
    return lines


def cmd_list(args, tracker: Tracker, config: TrackerConfig) -> int:
    """List all epics."""
    state = tracker.read_state()

    if not state.epics:
        print("Epics: none")
        print()
        print("Get started:")
        print("  jt epic create <name>   - Create an epic")
        return 0

    print("Epics")
    for line in format_epics_table(state, config.name_width):
        print(line)
    print()
    print(f"{len(state.epics)} epic(s), {len(state.stories)} story(s)")
    return 0


def cmd_show(args, tracker: Tracker, config: TrackerConfig) -> int:
    """Show one epic and its stories."""
    state = tracker.read_state()
    epic_id = args.epic_id
    if epic_id not in state.epics:
        raise EpicNotFound(epic_id)
    epic = state.epics[epic_id]

    print(f"Epic {epic_id}: {epic.name}")
    print(f"  Status: {status_label(epic.status)}")
    if epic.description:
        print(f"  Description: {epic.description}")
    print()

    if not epic.stories:
        print("Stories: none")
        return 0

    print("Stories")
    for line in format_stories_table(state, epic, config.name_width):
        print(line)
    return 0
