import json

import pytest

from modes import KeyPress, TaskEditor
from storage import JsonStorage, StorageError
from task_manager import TaskManager

KEY_CHARACTERS = {"space": " ", "enter": "\r", "escape": "\x1b", "backspace": "\x7f", "tab": "\t"}


def key(name):
    """Build a KeyPress the way the terminal reports it."""
    if len(name) == 1:
        return KeyPress(name, name)
    return KeyPress(name, KEY_CHARACTERS.get(name))


def press(editor, *names):
    for name in names:
        editor.handle_key(key(name))


def type_text(editor, text):
    for ch in text:
        press(editor, "space" if ch == " " else ch)


def write_tasks(path, records):
    path.write_text(json.dumps(records), encoding="utf-8")


class FailingStorage:
    """Loads fine, refuses every save."""

    def __init__(self, records=None):
        self.records = records or []
        self.attempts = 0

    def load(self):
        return [dict(r) for r in self.records]

    def save(self, records):
        self.attempts += 1
        raise StorageError("Unable to write todos.json: disk full")


@pytest.fixture
def todo_file(tmp_path):
    return tmp_path / "todos.json"


@pytest.fixture
def make_manager(todo_file):
    def factory(*titles):
        if titles:
            write_tasks(todo_file, [{"task": t, "completed": False} for t in titles])
        return TaskManager(JsonStorage(todo_file))
    return factory


@pytest.fixture
def make_editor(make_manager):
    def factory(*titles):
        return TaskEditor(make_manager(*titles))
    return factory
