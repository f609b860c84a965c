# modes.py
#
# Description:
# This file contains the input mode state machine of the terminal interface.
# Every key press is interpreted according to the current mode: in Normal
# mode keys are commands (navigate, toggle, reorder, delete, ...), while in
# Adding, Editing and Commenting modes they are typed into a draft buffer.
#
# Drafts are mirrored into the live task list as they are typed, so the
# renderer always draws straight from the TaskManager. The price is that a
# composition that ends up empty has to be rolled back on commit.
#

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Union

from cursor import SelectionCursor
from keybindings import COMMENT_KEYMAP, NORMAL_KEYMAP, TITLE_KEYMAP
from storage import StorageError
from task_manager import Task, TaskManager

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class KeyPress:
    """
    A single key press, independent of the UI toolkit.

    Attributes:
        key: The key name, e.g. "a", "J", "enter", "backspace", "shift+down".
             Modifiers are part of the name.
        character: The text the key produces, if any.
    """
    key: str
    character: Optional[str] = None

    @property
    def is_printable(self) -> bool:
        return bool(self.character) and self.character.isprintable()


@dataclass
class Normal:
    pass


@dataclass
class Adding:
    draft: str = ""


@dataclass
class Editing:
    draft: str = ""


@dataclass
class Commenting:
    draft: str = ""


Mode = Union[Normal, Adding, Editing, Commenting]


@dataclass
class TaskEditor:
    """
    Applies key presses to the task list.

    Holds the TaskManager for the session, the selection cursor and the
    current mode. Every mutation that has to reach the disk is saved before
    handle_key returns. Save failures never escape: they are logged and
    queued in `messages` for the UI to display, and the in-memory change is
    kept.
    """
    manager: TaskManager
    mode: Mode = field(default_factory=Normal)
    running: bool = True
    messages: List[str] = field(default_factory=list)
    cursor: SelectionCursor = field(init=False)

    def __post_init__(self):
        self.cursor = SelectionCursor(self.manager)

    @property
    def selected_task(self) -> Optional[Task]:
        """The highlighted task, or None when the list is empty."""
        index = self.cursor.current
        if index is None:
            return None
        return self.manager.tasks[index]

    @property
    def composing(self) -> bool:
        """Whether the selected task's title is being typed."""
        return isinstance(self.mode, (Adding, Editing))

    def handle_key(self, key: KeyPress):
        if isinstance(self.mode, Normal):
            self._handle_normal(key)
        elif isinstance(self.mode, (Adding, Editing)):
            self._handle_title(key)
        elif isinstance(self.mode, Commenting):
            self._handle_comment(key)

    def pop_messages(self) -> List[str]:
        messages, self.messages = self.messages, []
        return messages

    def _save(self, operation: Optional[Callable[[], object]] = None):
        """Runs a saving operation, converting storage failures into messages."""
        try:
            if operation is None:
                self.manager.save_tasks()
            else:
                operation()
        except StorageError as e:
            logger.warning("Save failed: %s", e)
            self.messages.append(str(e))

    # -------------------- Normal mode --------------------
    def _handle_normal(self, key: KeyPress):
        action = NORMAL_KEYMAP.get(key.key)
        if action is None:
            return
        if action == "quit":
            self.running = False
        elif action == "add_task":
            self._start_adding()
        elif self.selected_task is None:
            # Everything else needs a selection.
            return
        elif action == "cursor_down":
            self.cursor.advance()
        elif action == "cursor_up":
            self.cursor.retreat()
        elif action == "move_down":
            self._move_selected(1)
        elif action == "move_up":
            self._move_selected(-1)
        elif action == "toggle_done":
            self._save(lambda: self.manager.toggle_task(self.cursor.index))
        elif action == "delete_task":
            removed = self.cursor.index
            self.manager.remove_task(removed, save=False)
            self.cursor.clamp_after_removal(removed)
            self._save()
        elif action == "edit_task":
            self.mode = Editing(self.selected_task.title)
        elif action == "comment_task":
            self.mode = Commenting(self.selected_task.comment or "")

    def _start_adding(self):
        self.manager.add_task("", save=False)
        self.cursor.select(len(self.manager) - 1)
        self.mode = Adding()

    def _move_selected(self, offset: int):
        current = self.cursor.index
        target = current + offset
        if not 0 <= target < len(self.manager):
            return
        self.manager.swap_tasks(current, target, save=False)
        self.cursor.select(target)
        self._save()

    # -------------------- Adding / Editing --------------------
    def _handle_title(self, key: KeyPress):
        action = TITLE_KEYMAP.get(key.key)
        if action == "commit":
            self._commit_title()
            return
        if action == "backspace":
            self.mode.draft = self.mode.draft[:-1]
        elif key.is_printable:
            self.mode.draft += key.character
        else:
            return
        self.selected_task.title = self.mode.draft

    def _commit_title(self):
        if self.mode.draft.strip():
            self._save()
        else:
            self.manager.remove_task(self.cursor.index, save=False)
            self.cursor.select(max(0, len(self.manager) - 1))
            # A discarded new task was never written, an emptied existing one was.
            if isinstance(self.mode, Editing):
                self._save()
        self.mode = Normal()

    # -------------------- Commenting --------------------
    def _handle_comment(self, key: KeyPress):
        task = self.selected_task
        action = COMMENT_KEYMAP.get(key.key)
        if action == "commit":
            if not self.mode.draft.strip():
                task.comment = None
            self._save()
            self.mode = Normal()
        elif action == "newline":
            self.mode.draft += "\n"
            task.comment = self.mode.draft
        elif action == "backspace":
            self.mode.draft = self.mode.draft[:-1]
            task.comment = self.mode.draft or None
        elif key.is_printable:
            self.mode.draft += key.character
            task.comment = self.mode.draft
