"""
jt epic - Create, update and delete epics.
"""

from tracker.db.models import Epic
from tracker.db.tracker import Tracker
from tracker.lib.config import TrackerConfig
from tracker.lib.display import status_label


def confirm(prompt: str, assume_yes: bool = False) -> bool:
    """Ask a y/N question on the terminal. EOF or Ctrl-C counts as no."""
    if assume_yes:
        return True
    try:
        response = input(f"{prompt} [y/N]: ").strip().lower()
    except (EOFError, KeyboardInterrupt):
        print()
        return False
    return response in ('y', 'yes')


def cmd_epic_create(args, tracker: Tracker, config: TrackerConfig) -> int:
    """Create an epic and print its id."""
    epic = Epic.new(args.name, args.description or "")
    epic_id = tracker.create_epic(epic)
    print(f"Created epic {epic_id}: {epic.name}")
    return 0


def cmd_epic_status(args, tracker: Tracker, config: TrackerConfig) -> int:
    """Change an epic's status."""
    tracker.update_epic_status(args.epic_id, args.status)
    print(f"Epic {args.epic_id} is now {status_label(args.status)}")
    return 0


def cmd_epic_delete(args, tracker: Tracker, config: TrackerConfig) -> int:
    """Delete an epic and all its stories."""
    epic = tracker.get_epic(args.epic_id)

    print(f"Deleting epic {args.epic_id}: {epic.name}")
    if epic.stories:
        print(f"  This also deletes {len(epic.stories)} story(s): "
              + ", ".join(str(s) for s in epic.stories))
    if not confirm("Proceed?", getattr(args, 'yes', False)):
        print("Cancelled")
        return 1

    tracker.delete_epic(args.epic_id)
    print(f"Deleted epic {args.epic_id}")
    return 0
