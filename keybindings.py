# keybindings.py
#
# Mode key tables. NORMAL_BINDINGS drives list navigation and the task
# actions, TITLE_BINDINGS applies while a title is being added or edited,
# and COMMENT_BINDINGS while a comment is typed. Outside Normal mode a
# printable key missing from the active table is typed into the draft.
# The footer hint text is built from the same tables.
#

from typing import Dict, List

from textual.binding import Binding

# Bindings active while navigating the list (Normal mode)
NORMAL_BINDINGS = [
    Binding("q,escape", "quit", "Quit"),
    Binding("a", "add_task", "Add"),
    Binding("e", "edit_task", "Edit"),
    Binding("c", "comment_task", "Comment"),
    Binding("space,x", "toggle_done", "Toggle Done", key_display="space"),
    Binding("d", "delete_task", "Delete"),
    Binding("j,down", "cursor_down", "Down", show=False),
    Binding("k,up", "cursor_up", "Up", show=False),
    Binding("J,shift+j,shift+down", "move_down", "Move Down", key_display="J"),
    Binding("K,shift+k,shift+up", "move_up", "Move Up", key_display="K"),
]

# Bindings active while typing a task title (Adding and Editing modes)
TITLE_BINDINGS = [
    Binding("enter,escape", "commit", "Done", key_display="enter"),
    Binding("backspace", "backspace", "Delete Char", show=False),
]

# Bindings active while typing a comment (Commenting mode)
COMMENT_BINDINGS = [
    Binding("escape", "commit", "Done"),
    Binding("enter", "newline", "New Line"),
    Binding("backspace", "backspace", "Delete Char", show=False),
]


def build_keymap(bindings: List[Binding]) -> Dict[str, str]:
    """Expands a list of bindings into a key -> action lookup table."""
    keymap = {}
    for binding in bindings:
        for key in binding.key.split(","):
            keymap[key.strip()] = binding.action
    return keymap


NORMAL_KEYMAP = build_keymap(NORMAL_BINDINGS)
TITLE_KEYMAP = build_keymap(TITLE_BINDINGS)
COMMENT_KEYMAP = build_keymap(COMMENT_BINDINGS)


def describe(bindings: List[Binding]) -> str:
    """Renders the visible bindings as a footer hint, e.g. '(a) Add (q) Quit'."""
    parts = []
    for binding in bindings:
        if not binding.show:
            continue
        key = binding.key_display or binding.key.split(",")[0]
        parts.append(f"({key}) {binding.description}")
    return " ".join(parts)
