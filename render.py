# render.py
#
# Description:
# This module turns the current task list, selection and input mode into
# rich renderables. It holds no state and never touches the terminal, so a
# frame can be produced (and inspected) without a running UI.
#

from typing import List, Optional

from rich.console import RenderableType
from rich.panel import Panel
from rich.style import Style
from rich.table import Table
from rich.text import Text

from keybindings import COMMENT_BINDINGS, NORMAL_BINDINGS, TITLE_BINDINGS, describe
from modes import Adding, Commenting, Editing, Mode, Normal
from task_manager import Task

EMPTY_PROMPT = "Press 'a' to start adding tasks"
CARET = "_"
DONE_GLYPH = "✓"
SELECTED_STYLE = Style(color="black", bgcolor="bright_cyan")
DONE_STYLE = Style(color="bright_green")


def render_task_line(task: Task, composing: bool = False) -> Text:
    """Render one row of the list pane: '[✓] title', with a caret while typed."""
    glyph = DONE_GLYPH if task.completed else " "
    title = f"{task.title}{CARET}" if composing else task.title

    line = Text()
    line.append("[")
    line.append(glyph, style=DONE_STYLE)
    line.append("] ")
    line.append(title)
    return line


def scroll_offset(selected: int, offset: int, height: int) -> int:
    """First visible row of a list window of `height` rows that shows `selected`."""
    if selected < offset:
        return selected
    if selected >= offset + height:
        return selected - height + 1
    return offset


def render_task_list(tasks: List[Task], selected: int, mode: Mode, offset: int = 0, height: Optional[int] = None) -> Panel:
    """
    Render the list pane.

    Rows never wrap. When `height` is given only the rows from `offset` to
    `offset + height` are drawn; callers keep `selected` inside that window
    with scroll_offset().
    """
    composing = isinstance(mode, (Adding, Editing))
    end = len(tasks) if height is None else offset + height
    lines = []
    for index, task in enumerate(tasks[offset:end], start=offset):
        is_selected = index == selected
        line = render_task_line(task, composing=composing and is_selected)
        if is_selected:
            line.stylize(SELECTED_STYLE)
        lines.append(line)
    rows = Text("\n").join(lines)
    rows.no_wrap = True
    rows.overflow = "ellipsis"
    return Panel(rows, title="Tasks", title_align="left")


def render_detail(task: Task) -> Panel:
    content = Text(f"Task: {task.title}\n\n")
    if task.comment is not None:
        content.append(f"Comment: {task.comment}")
    else:
        content.append("No Comment", style="dim")
    return Panel(content, title="Details", title_align="left")


def render_board(
    tasks: List[Task],
    selected: Optional[int],
    mode: Mode,
    offset: int = 0,
    height: Optional[int] = None,
) -> RenderableType:
    """
    Project the task list, selection and input mode into one frame.

    Args:
        tasks: The task list in display order.
        selected: The highlighted position, None when the list is empty.
        mode: The current input mode.
        offset: First task row drawn in the list pane.
        height: Number of task rows the list pane can show; None draws all.

    Returns:
        A single prompt panel when there are no tasks, otherwise a list pane
        and a detail pane side by side at half the width each.
    """
    if not tasks or selected is None:
        return Panel(EMPTY_PROMPT)

    grid = Table.grid(expand=True)
    grid.add_column(ratio=1)
    grid.add_column(ratio=1)
    grid.add_row(render_task_list(tasks, selected, mode, offset, height), render_detail(tasks[selected]))
    return grid


def render_help(mode: Mode) -> str:
    """One-line key hint for the footer."""
    if isinstance(mode, Normal):
        return describe(NORMAL_BINDINGS)
    if isinstance(mode, Adding):
        return f"New task: {describe(TITLE_BINDINGS)}"
    if isinstance(mode, Editing):
        return f"Editing: {describe(TITLE_BINDINGS)}"
    if isinstance(mode, Commenting):
        return f"Comment: {describe(COMMENT_BINDINGS)}"
    return ""
