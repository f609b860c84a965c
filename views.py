# views.py
#
# Description:
# This file contains the UI components of the application, built using the
# Textual TUI framework. The TaskBoard widget owns the session: it receives
# every key press, hands it to the TaskEditor state machine and redraws
# itself from the render module. Textual takes care of the alternate screen
# and raw mode, and restores the terminal when the app exits.
#

import logging

from rich.console import RenderableType
from textual import events
from textual.app import App, ComposeResult
from textual.message import Message
from textual.widget import Widget
from textual.widgets import Header, Static

from config import Config
from modes import KeyPress, TaskEditor
from render import render_board, render_help, scroll_offset
from task_manager import TaskManager

logger = logging.getLogger(__name__)


class TaskBoard(Widget, can_focus=True):
    """The two-pane task list and detail view."""

    class Changed(Message):
        """Posted after each handled key press."""

    def __init__(self, editor: TaskEditor, **kwargs):
        super().__init__(**kwargs)
        self.editor = editor
        self.list_offset = 0

    def render(self) -> RenderableType:
        selected = self.editor.cursor.current
        # The list panel borders take two rows.
        height = self.size.height - 2
        if selected is None or height <= 0:
            return render_board(self.editor.manager.tasks, selected, self.editor.mode)
        tasks = self.editor.manager.tasks
        # Do not leave empty rows at the bottom after tasks were removed.
        offset = min(self.list_offset, max(0, len(tasks) - height))
        self.list_offset = scroll_offset(selected, offset, height)
        return render_board(tasks, selected, self.editor.mode, self.list_offset, height)

    def on_key(self, event: events.Key) -> None:
        """Every key goes to the editor, ahead of the screen bindings."""
        event.stop()
        event.prevent_default()
        self.editor.handle_key(KeyPress(event.key, event.character))
        self.refresh()
        self.post_message(self.Changed())


class TodoApp(App):
    """A terminal todo list backed by a JSON file."""

    TITLE = "Todo"

    CSS = """
    TaskBoard {
        height: 1fr;
    }
    #footer {
        dock: bottom;
        height: 1;
        text-style: dim;
    }
    """

    def __init__(self, manager: TaskManager, config: Config):
        super().__init__()
        self.config = config
        self.editor = TaskEditor(manager)
        self.sub_title = str(config.todo_file)

    def compose(self) -> ComposeResult:
        yield Header()
        yield TaskBoard(self.editor, id="board")
        yield Static(render_help(self.editor.mode), id="footer")

    def on_mount(self) -> None:
        self.query_one(TaskBoard).focus()

    def on_task_board_changed(self, message: TaskBoard.Changed) -> None:
        for error in self.editor.pop_messages():
            self.notify(error, title="Save failed", severity="error")
        if not self.editor.running:
            self.exit()
            return
        self.query_one("#footer", Static).update(render_help(self.editor.mode))


def run_tui(manager: TaskManager, config: Config):
    """Runs the interactive session until the user quits."""
    logger.info("Starting interactive session on %s", config.todo_file)
    TodoApp(manager, config).run()
    logger.info("Interactive session ended")
