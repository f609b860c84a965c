# cursor.py
#
# Description:
# The selection cursor of the terminal interface: the position of the
# highlighted task. Navigation wraps around the ends of the list.
#

from typing import Optional, Sized


class SelectionCursor:
    """
    Tracks the highlighted position in a sized collection.

    The collection is read on every call, so the cursor follows the list as
    it grows and shrinks. Whenever the list is non-empty the index satisfies
    0 <= index < len(items); on an empty list it is parked at 0 and every
    operation is a no-op.
    """

    def __init__(self, items: Sized, index: int = 0):
        self.items = items
        self.index = 0
        self.select(index)

    @property
    def current(self) -> Optional[int]:
        """The selected position, or None when there is nothing to select."""
        return self.index if len(self.items) else None

    def select(self, index: int):
        length = len(self.items)
        if not length:
            self.index = 0
            return
        self.index = min(max(index, 0), length - 1)

    def advance(self):
        length = len(self.items)
        if length:
            self.index = (self.index + 1) % length

    def retreat(self):
        length = len(self.items)
        if length:
            self.index = (self.index - 1 + length) % length

    def clamp_after_removal(self, removed_index: int):
        """Keeps the cursor in bounds after the item at removed_index is gone."""
        if removed_index <= self.index:
            self.index = max(0, self.index - 1)
        self.select(self.index)
