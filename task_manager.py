# task_manager.py
#
# Description:
# This file contains the core logic for managing tasks. It defines the Task
# data structure and a TaskManager class that holds the ordered task list in
# memory and handles every mutation of it. Both the command line and the
# terminal interface go through this class, which decouples the task logic
# from the UI and the storage.
#

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional

from storage import TodoError

logger = logging.getLogger(__name__)


class TaskIndexError(TodoError, IndexError):
    """Raised when a task position does not exist in the list."""

    def __init__(self, index: int, length: int):
        super().__init__(f"No task at position {index} (list has {length} tasks)")
        self.index = index
        self.length = length


@dataclass
class Task:
    """
    Represents a single entry of the todo list.

    Attributes:
        title: The task description.
        completed: Whether the task has been done.
        comment: Free-form, possibly multi-line notes. None means no comment.
    """
    title: str
    completed: bool = False
    comment: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Task":
        return cls(title=data["title"], completed=data.get("completed", False), comment=data.get("comment"))

    def to_dict(self) -> Dict[str, Any]:
        return {"title": self.title, "completed": self.completed, "comment": self.comment}


class TaskManager:
    """
    Handles all business logic for tasks.
    It holds the tasks in memory, in display order, and provides methods to
    manipulate them. Positions are 0-based.
    """
    def __init__(self, storage):
        """
        Initializes the TaskManager with a storage backend.

        Args:
            storage: An instance of a storage class (e.g., JsonStorage)
                     that has load() and save() methods.

        Raises:
            CorruptTodoFileError: The backing file could not be parsed.
        """
        self.storage = storage
        self.tasks: List[Task] = []
        self.load_tasks()

    def __len__(self) -> int:
        return len(self.tasks)

    def __iter__(self) -> Iterator[Task]:
        return iter(self.tasks)

    def load_tasks(self):
        """Loads tasks from the storage backend, replacing the in-memory list."""
        self.tasks = [Task.from_dict(data) for data in self.storage.load()]

    def save_tasks(self):
        """Saves all tasks to the storage backend."""
        self.storage.save([task.to_dict() for task in self.tasks])

    def _check_index(self, index: int):
        if not 0 <= index < len(self.tasks):
            raise TaskIndexError(index, len(self.tasks))

    def get_task(self, index: int) -> Task:
        """Retrieves the task at the given position."""
        self._check_index(index)
        return self.tasks[index]

    def add_task(self, title: str, save: bool = True) -> Task:
        """
        Appends a new, incomplete task to the end of the list.

        Args:
            title: The title of the new task. May be empty while the
                   terminal interface is still composing it.
            save: Whether to write the list back to storage.

        Returns:
            The newly created Task object.
        """
        new_task = Task(title=title)
        self.tasks.append(new_task)
        logger.info("Added task %r", title)
        if save:
            self.save_tasks()
        return new_task

    def remove_task(self, index: int, save: bool = True) -> Task:
        """Removes and returns the task at the given position."""
        self._check_index(index)
        removed = self.tasks.pop(index)
        logger.info("Removed task %r", removed.title)
        if save:
            self.save_tasks()
        return removed

    def toggle_task(self, index: int, save: bool = True) -> Task:
        """Flips the completed flag of the task at the given position."""
        task = self.get_task(index)
        task.completed = not task.completed
        if save:
            self.save_tasks()
        return task

    def update_task(self, index: int, **kwargs: Any) -> Task:
        """
        Updates an existing task's attributes and saves the list.

        Args:
            index: The position of the task to update.
            **kwargs: The attributes to update (e.g., title="New Title").
        """
        task = self.get_task(index)
        for key, value in kwargs.items():
            if hasattr(task, key):
                setattr(task, key, value)
        self.save_tasks()
        return task

    def swap_tasks(self, first: int, second: int, save: bool = True):
        """Exchanges the positions of two tasks."""
        self._check_index(first)
        self._check_index(second)
        self.tasks[first], self.tasks[second] = self.tasks[second], self.tasks[first]
        if save:
            self.save_tasks()

    def move_task(self, from_index: int, to_index: int) -> Task:
        """Moves a task to a new position, shifting the tasks in between."""
        self._check_index(from_index)
        self._check_index(to_index)
        task = self.tasks.pop(from_index)
        self.tasks.insert(to_index, task)
        self.save_tasks()
        return task

    def clear_completed(self) -> int:
        """Removes every completed task and returns how many were removed."""
        remaining = [task for task in self.tasks if not task.completed]
        removed = len(self.tasks) - len(remaining)
        if removed:
            self.tasks = remaining
            self.save_tasks()
        return removed
