"""
jt browse - Interactive epic/story browser.

UI layer on the Tracker: every action goes through a Tracker operation
and the tables are reloaded from storage afterwards.
"""

from typing import Optional

from textual import on
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container
from textual.screen import ModalScreen, Screen
from textual.widgets import DataTable, Footer, Header, Input, Label, Static

from tracker.db.errors import TrackerError
from tracker.db.models import DBState, Epic, Status, Story
from tracker.db.tracker import Tracker
from tracker.lib.config import TrackerConfig
from tracker.lib.display import get_column_string, status_label

STATUS_PROMPT = "New status (1 - OPEN, 2 - IN PROGRESS, 3 - RESOLVED, 4 - CLOSED):"
TABLE_COLUMNS = ("id", "name", "status")


def epic_rows(state: DBState, name_width: int) -> list[tuple[str, str, str]]:
    """Rows for the epics table, ordered by id."""
    return [
        (str(epic_id), get_column_string(epic.name, name_width), status_label(epic.status))
        for epic_id, epic in sorted(state.epics.items())
    ]


def story_rows(state: DBState, epic_id: int, name_width: int) -> list[tuple[str, str, str]]:
    """Rows for an epic's stories table, in the epic's order."""
    rows = []
    for story_id in state.epics[epic_id].stories:
        story = state.stories[story_id]
        rows.append((str(story_id), get_column_string(story.name, name_width), status_label(story.status)))
    return rows


def epic_summary(epic_id: int, epic: Epic) -> str:
    lines = [f"Epic {epic_id}: {epic.name}", f"Status: {status_label(epic.status)}"]
    if epic.description:
        lines.append(epic.description)
    return "\n".join(lines)


def _selected_id(table: DataTable) -> Optional[int]:
    if table.row_count == 0:
        return None
    row_key = table.coordinate_to_cell_key(table.cursor_coordinate).row_key
    return int(row_key.value)


def _fill_table(table: DataTable, rows: list[tuple[str, str, str]]) -> None:
    table.clear()
    for row in rows:
        table.add_row(*row, key=row[0])


class ConfirmModal(ModalScreen[bool]):
    """Yes/no confirmation before a delete."""

    BINDINGS = [
        Binding("y", "confirm", "Yes"),
        Binding("n", "cancel", "No"),
        Binding("escape", "cancel", "Cancel"),
    ]

    def __init__(self, message: str) -> None:
        super().__init__()
        self.message = message

    def compose(self) -> ComposeResult:
        yield Container(
            Static(self.message, id="confirm-message"),
            Static("[y]es / [n]o", id="confirm-hint"),
            id="confirm-dialog",
        )

    def action_confirm(self) -> None:
        self.dismiss(True)

    def action_cancel(self) -> None:
        self.dismiss(False)


class ItemFormModal(ModalScreen[Optional[tuple[str, str]]]):
    """Collect a name and description for a new epic or story."""

    BINDINGS = [
        Binding("escape", "cancel", "Cancel"),
    ]

    def __init__(self, title: str) -> None:
        super().__init__()
        self.form_title = title

    def compose(self) -> ComposeResult:
        yield Container(
            Label(self.form_title, id="form-title"),
            Input(placeholder="Name", id="form-name"),
            Input(placeholder="Description", id="form-description"),
            Label("Enter to continue, Escape to cancel", classes="hint"),
            id="form-dialog",
        )

    def on_mount(self) -> None:
        self.query_one("#form-name", Input).focus()

    @on(Input.Submitted, "#form-name")
    def on_name_submitted(self, event: Input.Submitted) -> None:
        self.query_one("#form-description", Input).focus()

    @on(Input.Submitted, "#form-description")
    def on_description_submitted(self, event: Input.Submitted) -> None:
        name = self.query_one("#form-name", Input).value.strip()
        if not name:
            self.notify("Name is required", severity="warning")
            self.query_one("#form-name", Input).focus()
            return
        self.dismiss((name, event.value.strip()))

    def action_cancel(self) -> None:
        self.dismiss(None)


class StatusModal(ModalScreen[Optional[Status]]):
    """Pick a new status by number or name."""

    BINDINGS = [
        Binding("escape", "cancel", "Cancel"),
    ]

    def compose(self) -> ComposeResult:
        yield Container(
            Label(STATUS_PROMPT, id="status-label"),
            Input(placeholder="1-4", id="status-input"),
            id="status-dialog",
        )

    def on_mount(self) -> None:
        self.query_one("#status-input", Input).focus()

    @on(Input.Submitted)
    def on_submit(self, event: Input.Submitted) -> None:
        try:
            status = Status.parse(event.value)
        except ValueError as e:
            self.notify(str(e), severity="warning")
            return
        self.dismiss(status)

    def action_cancel(self) -> None:
        self.dismiss(None)


class EpicScreen(Screen):
    """One epic with its stories."""

    BINDINGS = [
        Binding("n", "new_story", "New story"),
        Binding("s", "story_status", "Story status"),
        Binding("e", "epic_status", "Epic status"),
        Binding("d", "delete_story", "Delete story"),
        Binding("escape", "back", "Back"),
        Binding("q", "back", "Back"),
    ]

    def __init__(self, tracker: Tracker, epic_id: int, name_width: int) -> None:
        super().__init__()
        self.tracker = tracker
        self.epic_id = epic_id
        self.name_width = name_width

    def compose(self) -> ComposeResult:
        yield Header()
        yield Static(id="epic-summary", markup=False)
        yield DataTable(id="stories-table", cursor_type="row")
        yield Footer()

    def on_mount(self) -> None:
        self.query_one("#stories-table", DataTable).add_columns(*TABLE_COLUMNS)
        self.refresh_data()

    def refresh_data(self) -> None:
        try:
            state = self.tracker.read_state()
        except TrackerError as e:
            self.notify(str(e), severity="error")
            return
        if self.epic_id not in state.epics:
            self.dismiss()
            return
        epic = state.epics[self.epic_id]
        self.query_one("#epic-summary", Static).update(epic_summary(self.epic_id, epic))
        _fill_table(
            self.query_one("#stories-table", DataTable),
            story_rows(state, self.epic_id, self.name_width),
        )

    def _run(self, operation, *args) -> None:
        try:
            operation(*args)
        except TrackerError as e:
            self.notify(str(e), severity="error")
        self.refresh_data()

    def action_new_story(self) -> None:
        def on_form(result: Optional[tuple[str, str]]) -> None:
            if result:
                self._run(self.tracker.create_story, Story.new(*result), self.epic_id)

        self.app.push_screen(ItemFormModal(f"New story in epic {self.epic_id}"), on_form)

    def action_story_status(self) -> None:
        story_id = _selected_id(self.query_one("#stories-table", DataTable))
        if story_id is None:
            self.notify("No story selected", severity="warning")
            return

        def on_status(status: Optional[Status]) -> None:
            if status:
                self._run(self.tracker.update_story_status, story_id, status)

        self.app.push_screen(StatusModal(), on_status)

    def action_epic_status(self) -> None:
        def on_status(status: Optional[Status]) -> None:
            if status:
                self._run(self.tracker.update_epic_status, self.epic_id, status)

        self.app.push_screen(StatusModal(), on_status)

    def action_delete_story(self) -> None:
        story_id = _selected_id(self.query_one("#stories-table", DataTable))
        if story_id is None:
            self.notify("No story selected", severity="warning")
            return

        def on_confirm(confirmed: bool) -> None:
            if confirmed:
                self._run(self.tracker.delete_story, self.epic_id, story_id)

        self.app.push_screen(ConfirmModal(f"Delete story {story_id}?"), on_confirm)

    def action_back(self) -> None:
        self.dismiss()


class BrowseApp(App):
    """Epic list with drill-down into stories."""

    TITLE = "jt"

    CSS = """
    #confirm-dialog, #form-dialog, #status-dialog {
        align: center middle;
        width: 60;
        height: auto;
        border: thick $primary;
        background: $surface;
        padding: 1 2;
    }

    #confirm-hint, .hint {
        margin-top: 1;
        color: $text-muted;
    }

    #epic-summary {
        border: solid green;
        padding: 0 1;
        height: auto;
    }

    ConfirmModal, ItemFormModal, StatusModal {
        align: center middle;
    }

    DataTable {
        height: 1fr;
    }
    """

    BINDINGS = [
        Binding("n", "new_epic", "New epic"),
        Binding("s", "epic_status", "Status"),
        Binding("d", "delete_epic", "Delete"),
        Binding("r", "refresh", "Refresh"),
        Binding("q", "quit", "Quit"),
    ]

    def __init__(self, tracker: Tracker, config: TrackerConfig) -> None:
        super().__init__()
        self.tracker = tracker
        self.config = config

    def compose(self) -> ComposeResult:
        yield Header()
        yield DataTable(id="epics-table", cursor_type="row")
        yield Footer()

    def on_mount(self) -> None:
        self.sub_title = str(self.config.db_path)
        self.query_one("#epics-table", DataTable).add_columns(*TABLE_COLUMNS)
        self.refresh_data()

    def refresh_data(self) -> None:
        """Reload epics from storage."""
        try:
            state = self.tracker.read_state()
        except TrackerError as e:
            self.notify(str(e), severity="error")
            return
        _fill_table(
            self.query_one("#epics-table", DataTable),
            epic_rows(state, self.config.name_width),
        )

    def _run(self, operation, *args) -> None:
        try:
            operation(*args)
        except TrackerError as e:
            self.notify(str(e), severity="error")
        self.refresh_data()

    @on(DataTable.RowSelected, "#epics-table")
    def on_epic_selected(self, event: DataTable.RowSelected) -> None:
        epic_id = int(event.row_key.value)

        def on_close(_result=None) -> None:
            self.refresh_data()

        self.push_screen(EpicScreen(self.tracker, epic_id, self.config.name_width), on_close)

    def action_refresh(self) -> None:
        self.refresh_data()

    def action_new_epic(self) -> None:
        def on_form(result: Optional[tuple[str, str]]) -> None:
            if result:
                self._run(self.tracker.create_epic, Epic.new(*result))

        self.push_screen(ItemFormModal("New epic"), on_form)

    def action_epic_status(self) -> None:
        epic_id = _selected_id(self.query_one("#epics-table", DataTable))
        if epic_id is None:
            self.notify("No epic selected", severity="warning")
            return

        def on_status(status: Optional[Status]) -> None:
            if status:
                self._run(self.tracker.update_epic_status, epic_id, status)

        self.push_screen(StatusModal(), on_status)

    def action_delete_epic(self) -> None:
        epic_id = _selected_id(self.query_one("#epics-table", DataTable))
        if epic_id is None:
            self.notify("No epic selected", severity="warning")
            return

        message = f"Delete epic {epic_id}? All stories in this epic will also be deleted."

        def on_confirm(confirmed: bool) -> None:
            if confirmed:
                self._run(self.tracker.delete_epic, epic_id)

        self.push_screen(ConfirmModal(message), on_confirm)


def cmd_browse(args, tracker: Tracker, config: TrackerConfig) -> int:
    """Open the interactive browser."""
    app = BrowseApp(tracker, config)
    app.run()
    return 0
