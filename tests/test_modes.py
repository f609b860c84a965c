import json
import random

import pytest

from conftest import FailingStorage, press, type_text
from modes import Adding, Commenting, Editing, KeyPress, Normal, TaskEditor
from task_manager import Task, TaskManager


def saved(path):
    return json.loads(path.read_text(encoding="utf-8"))


def titles(editor):
    return [task.title for task in editor.manager]


# -------------------- Adding --------------------

def test_add_buy_milk_to_empty_list(make_editor, todo_file):
    editor = make_editor()
    press(editor, "a")
    type_text(editor, "Buy milk")
    press(editor, "enter")

    assert editor.manager.tasks == [Task("Buy milk", completed=False, comment=None)]
    assert isinstance(editor.mode, Normal)
    assert saved(todo_file) == [{"task": "Buy milk", "completed": False}]


def test_adding_mirrors_draft_into_the_list(make_editor):
    editor = make_editor("A")
    press(editor, "a")
    assert editor.cursor.index == 1
    assert editor.composing

    type_text(editor, "ab")
    assert titles(editor) == ["A", "ab"]
    assert editor.mode == Adding("ab")

    press(editor, "backspace")
    assert titles(editor) == ["A", "a"]


def test_backspace_on_empty_draft_is_noop(make_editor):
    editor = make_editor()
    press(editor, "a", "backspace", "backspace")
    assert editor.mode == Adding("")
    assert titles(editor) == [""]


def test_escape_commits_a_non_empty_title(make_editor, todo_file):
    editor = make_editor()
    press(editor, "a")
    type_text(editor, "x")
    press(editor, "escape")
    assert isinstance(editor.mode, Normal)
    assert saved(todo_file) == [{"task": "x", "completed": False}]


@pytest.mark.parametrize("commit", ["enter", "escape"])
def test_cancelling_empty_add_discards_task(make_editor, todo_file, commit):
    editor = make_editor("A", "B")
    before = todo_file.read_text(encoding="utf-8")
    press(editor, "a", "space", "space", commit)

    assert titles(editor) == ["A", "B"]
    assert editor.cursor.index == 1
    assert isinstance(editor.mode, Normal)
    assert todo_file.read_text(encoding="utf-8") == before


def test_command_keys_are_typed_while_adding(make_editor):
    editor = make_editor()
    press(editor, "a")
    type_text(editor, "q dJK x")
    assert editor.running
    assert titles(editor) == ["q dJK x"]


def test_non_printable_keys_are_ignored_while_adding(make_editor):
    editor = make_editor()
    press(editor, "a", "x", "down", "tab")
    assert editor.mode == Adding("x")


# -------------------- Editing --------------------

def test_edit_seeds_draft_with_title(make_editor, todo_file):
    editor = make_editor("A", "B")
    press(editor, "j", "e")
    assert editor.mode == Editing("B")

    type_text(editor, "2")
    press(editor, "enter")
    assert titles(editor) == ["A", "B2"]
    assert [r["task"] for r in saved(todo_file)] == ["A", "B2"]


def test_editing_title_to_empty_removes_task(make_editor, todo_file):
    editor = make_editor("A")
    press(editor, "e", "backspace", "backspace", "backspace", "enter")

    assert editor.manager.tasks == []
    assert editor.cursor.current is None
    assert isinstance(editor.mode, Normal)
    assert saved(todo_file) == []


# -------------------- Commenting --------------------

def test_comment_typing_and_newline(make_editor, todo_file):
    editor = make_editor("A")
    press(editor, "c")
    assert editor.mode == Commenting("")

    press(editor, "x", "enter", "y")
    assert editor.selected_task.comment == "x\ny"

    press(editor, "escape")
    assert isinstance(editor.mode, Normal)
    assert saved(todo_file) == [{"task": "A", "completed": False, "comment": "x\ny"}]


def test_comment_seeded_with_existing_comment(make_editor):
    editor = make_editor("A")
    editor.manager.tasks[0].comment = "note"
    press(editor, "c")
    assert editor.mode == Commenting("note")


def test_backspacing_comment_to_empty_clears_it(make_editor):
    editor = make_editor("A")
    editor.manager.tasks[0].comment = "ab"
    press(editor, "c", "backspace")
    assert editor.selected_task.comment == "a"

    press(editor, "backspace")
    assert editor.selected_task.comment is None


def test_whitespace_comment_collapses_on_escape(make_editor, todo_file):
    editor = make_editor("A")
    press(editor, "c", "space", "enter", "escape")
    assert editor.selected_task.comment is None
    assert saved(todo_file) == [{"task": "A", "completed": False}]


# -------------------- Normal mode --------------------

def test_toggle_then_swap_down(make_editor, todo_file):
    editor = make_editor("A", "B")
    press(editor, "space", "J")

    assert editor.manager.tasks == [Task("B"), Task("A", completed=True)]
    assert editor.cursor.index == 1
    assert saved(todo_file) == [{"task": "B", "completed": False}, {"task": "A", "completed": True}]


def test_toggle_twice_restores_completion(make_editor):
    editor = make_editor("A")
    press(editor, "x", "x")
    assert editor.selected_task.completed is False


def test_move_up_follows_the_task(make_editor):
    editor = make_editor("A", "B", "C")
    press(editor, "k", "shift+up")
    assert titles(editor) == ["A", "C", "B"]
    assert editor.cursor.index == 1


def test_moving_past_the_ends_is_noop(make_editor, todo_file):
    editor = make_editor("A", "B")
    before = todo_file.read_text(encoding="utf-8")
    press(editor, "K")
    assert titles(editor) == ["A", "B"]

    press(editor, "j", "shift+down")
    assert titles(editor) == ["A", "B"]
    assert editor.cursor.index == 1
    assert todo_file.read_text(encoding="utf-8") == before


def test_navigation_wraps(make_editor):
    editor = make_editor("A", "B", "C")
    press(editor, "up")
    assert editor.cursor.index == 2
    press(editor, "down")
    assert editor.cursor.index == 0


def test_selection_and_reorder_are_separate_keys(make_editor):
    editor = make_editor("A", "B")
    press(editor, "down")
    assert titles(editor) == ["A", "B"]
    press(editor, "shift+j")
    assert titles(editor) == ["A", "B"]
    press(editor, "shift+k")
    assert titles(editor) == ["B", "A"]


def test_delete_selected_task(make_editor, todo_file):
    editor = make_editor("A", "B", "C")
    press(editor, "j", "d")
    assert titles(editor) == ["A", "C"]
    assert editor.cursor.index == 0
    assert [r["task"] for r in saved(todo_file)] == ["A", "C"]


def test_selection_keys_on_empty_list_do_nothing(make_editor):
    editor = make_editor()
    press(editor, "e", "c", "d", "space", "j", "J")
    assert isinstance(editor.mode, Normal)
    assert editor.manager.tasks == []


@pytest.mark.parametrize("quit_key", ["q", "escape"])
def test_quit(make_editor, quit_key):
    editor = make_editor("A")
    press(editor, quit_key)
    assert editor.running is False


def test_unbound_keys_are_ignored(make_editor):
    editor = make_editor("A")
    editor.handle_key(KeyPress("z", "z"))
    editor.handle_key(KeyPress("f1"))
    assert isinstance(editor.mode, Normal)
    assert titles(editor) == ["A"]


# -------------------- Persistence failures --------------------

def test_save_failure_keeps_change_and_reports():
    storage = FailingStorage([{"title": "A", "completed": False, "comment": None}])
    editor = TaskEditor(TaskManager(storage))

    press(editor, "space")
    assert editor.selected_task.completed is True
    assert storage.attempts == 1

    messages = editor.pop_messages()
    assert messages == ["Unable to write todos.json: disk full"]
    assert editor.pop_messages() == []


def test_save_failure_while_adding_returns_to_normal():
    editor = TaskEditor(TaskManager(FailingStorage()))
    press(editor, "a", "x", "enter")
    assert isinstance(editor.mode, Normal)
    assert titles(editor) == ["x"]
    assert len(editor.messages) == 1


# -------------------- Properties --------------------

def test_random_add_toggle_delete_sequences(make_editor, todo_file):
    rng = random.Random(1234)
    for _ in range(20):
        if todo_file.exists():
            todo_file.unlink()
        editor = make_editor()
        adds = deletes = 0
        for _ in range(rng.randint(0, 30)):
            op = rng.choice(["add", "toggle", "delete", "down"])
            if op == "add":
                press(editor, "a")
                type_text(editor, "t")
                press(editor, "enter")
                adds += 1
            elif op == "toggle":
                press(editor, "space")
            elif op == "delete":
                if len(editor.manager):
                    deletes += 1
                press(editor, "d")
            else:
                press(editor, "j")
            assert len(editor.manager) == adds - deletes >= 0
            if len(editor.manager):
                assert 0 <= editor.cursor.index < len(editor.manager)
