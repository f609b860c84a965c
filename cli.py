# cli.py
#
# Description:
# The command line dispatcher. Each sub-command loads the selected task
# list, applies one operation through the TaskManager and saves it. Running
# without a sub-command opens the interactive terminal interface instead.
#

import argparse
import logging
from typing import List

from rich.console import Console
from rich.text import Text

from config import Config
from storage import CorruptTodoFileError, JsonStorage, StorageError
from task_manager import TaskManager

logger = logging.getLogger(__name__)

INVALID_NUMBER = "Please provide a valid task number."
OUT_OF_RANGE = "Invalid task number. Use 'list' to see available tasks."
EMPTY_TITLE = "Task text cannot be empty."


class UsageError(Exception):
    """A bad argument for a single command; reported and the command aborted."""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="todo", description="Manage a todo list from the terminal.")
    parser.add_argument(
        "-g", "--global", dest="use_global", action="store_true",
        help="use the global list in the home directory instead of ./todos.json",
    )
    sub = parser.add_subparsers(dest="command", metavar="command")

    p = sub.add_parser("add", aliases=["a"], help="add a task")
    p.add_argument("text", nargs="+")
    sub.add_parser("list", aliases=["l"], help="list tasks")
    p = sub.add_parser("done", aliases=["d"], help="toggle a task's completion")
    p.add_argument("number")
    p = sub.add_parser("remove", aliases=["r"], help="remove a task")
    p.add_argument("number")
    p = sub.add_parser("move", aliases=["m"], help="move a task to another position")
    p.add_argument("number")
    p.add_argument("to")
    p = sub.add_parser("edit", aliases=["e"], help="replace a task's title")
    p.add_argument("number")
    p.add_argument("text", nargs="+")
    p = sub.add_parser("comment", help="set a task's comment; no text clears it")
    p.add_argument("number")
    p.add_argument("text", nargs="*")
    sub.add_parser("clear", aliases=["c"], help="remove completed tasks")
    sub.add_parser("new", help="create an empty list in the current directory")
    sub.add_parser("delete", help="delete the selected list file")
    return parser


COMMAND_ALIASES = {"a": "add", "l": "list", "d": "done", "r": "remove", "m": "move", "e": "edit", "c": "clear"}


def join_title(words: List[str]) -> str:
    title = " ".join(words)
    if not title.strip():
        raise UsageError(EMPTY_TITLE)
    return title


def parse_task_number(raw: str, length: int) -> int:
    """Converts a 1-based task number from the command line to a list index."""
    try:
        number = int(raw)
    except ValueError:
        raise UsageError(INVALID_NUMBER) from None
    if number < 1 or number > length:
        raise UsageError(OUT_OF_RANGE)
    return number - 1


def format_task(number: int, task) -> Text:
    glyph = Text("✓", style="bright_green") if task.completed else Text(" ")
    line = Text.assemble("[", glyph, f"] {number}. ", (task.title, "bright_cyan"))
    if task.comment:
        for comment_line in task.comment.splitlines():
            line.append(f"\n      {comment_line}", style="dim")
    return line


def dispatch(args: argparse.Namespace, config: Config, console: Console) -> int:
    """
    Runs one parsed command against the configured task list.

    Returns:
        The process exit status.

    Raises:
        CorruptTodoFileError: The task list could not be parsed.
    """
    command = COMMAND_ALIASES.get(args.command, args.command)
    storage = JsonStorage(config.todo_file)

    try:
        if command == "new":
            storage.create()
            console.print(f"Created {config.todo_file}", markup=False)
            return 0
        if command == "delete":
            storage.delete()
            console.print(f"Deleted {config.todo_file}", markup=False)
            return 0

        manager = TaskManager(storage)
        if command is None:
            # Imported here so the batch commands never load textual.
            from views import run_tui
            run_tui(manager, config)
            return 0
        return run_command(command, args, manager, console)
    except UsageError as e:
        console.print(str(e), markup=False)
        return 1
    except CorruptTodoFileError:
        raise
    except StorageError as e:
        logger.error("%s", e)
        console.print(str(e), markup=False)
        return 1


def run_command(command: str, args: argparse.Namespace, manager: TaskManager, console: Console) -> int:
    if command == "add":
        title = join_title(args.text)
        manager.add_task(title)
        console.print(f"Added task: {title}", markup=False)
    elif command == "list":
        if not len(manager):
            console.print("No tasks yet!")
        for number, task in enumerate(manager, start=1):
            console.print(format_task(number, task))
    elif command == "done":
        index = parse_task_number(args.number, len(manager))
        task = manager.toggle_task(index)
        status = Text("Completed", style="bright_green") if task.completed else Text("Marked as incomplete", style="red")
        console.print(Text.assemble(status, ": ", (task.title, "bright_cyan")))
    elif command == "remove":
        index = parse_task_number(args.number, len(manager))
        removed = manager.remove_task(index)
        console.print(f"Removed task: {removed.title}", markup=False)
    elif command == "move":
        index = parse_task_number(args.number, len(manager))
        target = parse_task_number(args.to, len(manager))
        task = manager.move_task(index, target)
        console.print(f"Moved task: {task.title} to position {target + 1}", markup=False)
    elif command == "edit":
        index = parse_task_number(args.number, len(manager))
        title = join_title(args.text)
        manager.update_task(index, title=title)
        console.print(f"Updated task: {title}", markup=False)
    elif command == "comment":
        index = parse_task_number(args.number, len(manager))
        comment = " ".join(args.text) or None
        task = manager.update_task(index, comment=comment)
        action = "Commented on" if comment else "Cleared comment of"
        console.print(f"{action} task: {task.title}", markup=False)
    elif command == "clear":
        removed = manager.clear_completed()
        if not removed:
            console.print("Nothing to clear")
        else:
            console.print(f"Cleared {removed} completed task{'s' if removed != 1 else ''}")
    return 0
