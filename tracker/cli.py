#!/usr/bin/env python3
"""jt CLI entrypoint."""

import sys
import argparse
import logging

from tracker.db.errors import (
    CorruptState,
    EpicNotFound,
    StorageUnavailable,
    StoryNotFound,
)
from tracker.db.models import DBState, Status
from tracker.db.storage import JSONFileDatabase
from tracker.db.tracker import Tracker
from tracker.lib.config import TrackerConfig, load_tracker_config, resolve_home
from tracker.commands import browse as cmd_browse_module
from tracker.commands import epic as cmd_epic_module
from tracker.commands import show as cmd_show_module
from tracker.commands import story as cmd_story_module

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def parse_status(value: str) -> Status:
    """argparse type for status arguments."""
    try:
        return Status.parse(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from None


def get_config(args) -> TrackerConfig:
    """Load config from --dir, $JT_HOME or the current directory."""
    home = resolve_home(args.dir)
    try:
        config = load_tracker_config(home)
    except (ValueError, FileNotFoundError) as e:
        print(f"ERROR: Invalid tracker.env in {home}: {e}")
        sys.exit(2)

    level = logging.DEBUG if args.verbose else getattr(logging, config.log_level)
    logging.basicConfig(level=level, format=LOG_FORMAT)
    return config


def open_tracker(config: TrackerConfig) -> Tracker:
    """Build a Tracker on the configured file, creating an empty database on first use."""
    database = JSONFileDatabase(config.db_path)
    if not database.exists():
        logger.info(f"No database at {config.db_path}, initialising an empty one")
        database.save(DBState())
    return Tracker(database)


def run_command(func, args) -> int:
    """Run a command, mapping tracker errors to exit codes."""
    config = get_config(args)
    try:
        tracker = open_tracker(config)
        return func(args, tracker, config)
    except (EpicNotFound, StoryNotFound) as e:
        print(f"ERROR: {e}")
        return 1
    except (StorageUnavailable, CorruptState) as e:
        print(f"ERROR: {e}")
        return 2


def cmd_list(args):
    return run_command(cmd_show_module.cmd_list, args)


def cmd_show(args):
    return run_command(cmd_show_module.cmd_show, args)


def cmd_epic_create(args):
    return run_command(cmd_epic_module.cmd_epic_create, args)


def cmd_epic_status(args):
    return run_command(cmd_epic_module.cmd_epic_status, args)


def cmd_epic_delete(args):
    return run_command(cmd_epic_module.cmd_epic_delete, args)


def cmd_story_create(args):
    return run_command(cmd_story_module.cmd_story_create, args)


def cmd_story_show(args):
    return run_command(cmd_story_module.cmd_story_show, args)


def cmd_story_status(args):
    return run_command(cmd_story_module.cmd_story_status, args)


def cmd_story_delete(args):
    return run_command(cmd_story_module.cmd_story_delete, args)


def cmd_browse(args):
    return run_command(cmd_browse_module.cmd_browse, args)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='jt', description='Epic and story tracker')
    parser.add_argument('--dir', '-d', help='Tracker home directory (default: $JT_HOME or cwd)')
    parser.add_argument('--verbose', '-v', action='store_true', help='Debug logging')
    subparsers = parser.add_subparsers(dest='command', required=True)

    # jt list
    p_list = subparsers.add_parser('list', help='List epics')
    p_list.set_defaults(func=cmd_list)

    # jt show
    p_show = subparsers.add_parser('show', help='Show an epic and its stories')
    p_show.add_argument('epic_id', type=int, help='Epic ID')
    p_show.set_defaults(func=cmd_show)

    # jt browse
    p_browse = subparsers.add_parser('browse', help='Interactive browser')
    p_browse.set_defaults(func=cmd_browse)

    # jt epic
    p_epic = subparsers.add_parser('epic', help='Manage epics')
    epic_sub = p_epic.add_subparsers(dest='epic_cmd', required=True)

    # jt epic create
    p_epic_create = epic_sub.add_parser('create', help='Create an epic')
    p_epic_create.add_argument('name', help='Epic name')
    p_epic_create.add_argument('--description', '-m', help='Epic description')
    p_epic_create.set_defaults(func=cmd_epic_create)

    # jt epic status
    p_epic_status = epic_sub.add_parser('status', help='Change epic status')
    p_epic_status.add_argument('epic_id', type=int, help='Epic ID')
    p_epic_status.add_argument('status', type=parse_status,
                               help='open, in-progress, resolved, closed (or 1-4)')
    p_epic_status.set_defaults(func=cmd_epic_status)

    # jt epic delete
    p_epic_delete = epic_sub.add_parser('delete', help='Delete an epic and its stories')
    p_epic_delete.add_argument('epic_id', type=int, help='Epic ID')
    p_epic_delete.add_argument('--yes', '-y', action='store_true', help='Skip confirmation')
    p_epic_delete.set_defaults(func=cmd_epic_delete)

    # jt story
    p_story = subparsers.add_parser('story', help='Manage stories')
    story_sub = p_story.add_subparsers(dest='story_cmd', required=True)

    # jt story create
    p_story_create = story_sub.add_parser('create', help='Create a story in an epic')
    p_story_create.add_argument('epic_id', type=int, help='Owning epic ID')
    p_story_create.add_argument('name', help='Story name')
    p_story_create.add_argument('--description', '-m', help='Story description')
    p_story_create.set_defaults(func=cmd_story_create)

    # jt story show
    p_story_show = story_sub.add_parser('show', help='Show story details')
    p_story_show.add_argument('story_id', type=int, help='Story ID')
    p_story_show.set_defaults(func=cmd_story_show)

    # jt story status
    p_story_status = story_sub.add_parser('status', help='Change story status')
    p_story_status.add_argument('story_id', type=int, help='Story ID')
    p_story_status.add_argument('status', type=parse_status,
                                help='open, in-progress, resolved, closed (or 1-4)')
    p_story_status.set_defaults(func=cmd_story_status)

    # jt story delete
    p_story_delete = story_sub.add_parser('delete', help='Delete a story')
    p_story_delete.add_argument('epic_id', type=int, help='Owning epic ID')
    p_story_delete.add_argument('story_id', type=int, help='Story ID')
    p_story_delete.add_argument('--yes', '-y', action='store_true', help='Skip confirmation')
    p_story_delete.set_defaults(func=cmd_story_delete)

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    return args.func(args)


if __name__ == '__main__':
    sys.exit(main())
