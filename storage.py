# storage.py
#
# Description:
# This file contains the JSON storage backend for the task list. It knows
# nothing about the Task dataclass: it reads and writes plain records and
# validates their shape, so that the TaskManager can stay independent of the
# on-disk format.
#

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Union

logger = logging.getLogger(__name__)

# The title has always been stored under "task" in todo files.
TITLE_KEY = "task"
TITLE_ALIASES = (TITLE_KEY, "title")


class TodoError(Exception):
    """Base class for all errors raised by the todo application."""


class StorageError(TodoError):
    """Raised when the backing file cannot be read or written."""


class CorruptTodoFileError(StorageError):
    """Raised when the backing file exists but does not hold a valid task list."""

    def __init__(self, path: Path, reason: str):
        super().__init__(f"Unable to parse {path}: {reason}")
        self.path = path
        self.reason = reason


class JsonStorage:
    """
    Persists a list of task records as a JSON array.

    Each record is a dict with a string "task" (the title), a boolean
    "completed" and an optional string "comment". A missing comment key and
    a null comment both mean "no comment".
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.exists()

    def load(self) -> List[Dict[str, Any]]:
        """
        Reads and validates all records from the backing file.

        Returns:
            A list of normalized records; empty if the file does not exist.

        Raises:
            CorruptTodoFileError: The file content is not a valid task list.
            StorageError: The file exists but could not be read.
        """
        if not self.path.exists():
            logger.debug("No todo file at %s, starting empty", self.path)
            return []
        try:
            text = self.path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise CorruptTodoFileError(self.path, str(e)) from e
        except OSError as e:
            raise StorageError(f"Unable to read {self.path}: {e}") from e

        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise CorruptTodoFileError(self.path, str(e)) from e

        if not isinstance(data, list):
            raise CorruptTodoFileError(self.path, "expected a JSON array of tasks")

        records = [self._normalize(position, raw) for position, raw in enumerate(data)]
        logger.debug("Loaded %d tasks from %s", len(records), self.path)
        return records

    def _normalize(self, position: int, raw: Any) -> Dict[str, Any]:
        if not isinstance(raw, dict):
            raise CorruptTodoFileError(self.path, f"entry {position} is not an object")

        title = next((raw[key] for key in TITLE_ALIASES if key in raw), None)
        if not isinstance(title, str):
            raise CorruptTodoFileError(self.path, f"entry {position} has no string title")

        completed = raw.get("completed", False)
        if not isinstance(completed, bool):
            raise CorruptTodoFileError(self.path, f"entry {position} has a non-boolean 'completed'")

        comment = raw.get("comment")
        if comment is not None and not isinstance(comment, str):
            raise CorruptTodoFileError(self.path, f"entry {position} has a non-string 'comment'")

        return {"title": title, "completed": completed, "comment": comment}

    def save(self, records: List[Dict[str, Any]]):
        """
        Overwrites the backing file with the given records.

        The data is written to a temporary file next to the target and then
        moved into place, so readers only ever see the old or the new list.

        Args:
            records: Dicts with "title", "completed" and optional "comment".

        Raises:
            StorageError: The file could not be written.
        """
        payload = []
        for record in records:
            entry: Dict[str, Any] = {TITLE_KEY: record["title"], "completed": record["completed"]}
            if record.get("comment") is not None:
                entry["comment"] = record["comment"]
            payload.append(entry)
        text = json.dumps(payload, indent=2, ensure_ascii=False)

        tmp_path = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=str(self.path.parent), prefix=f".{self.path.name}.", suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(text)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, str(self.path))
            tmp_path = None
        except OSError as e:
            raise StorageError(f"Unable to write {self.path}: {e}") from e
        finally:
            if tmp_path is not None:
                try:
                    os.unlink(tmp_path)
                except OSError:
                    logger.debug("Could not remove temporary file %s", tmp_path)

        logger.debug("Saved %d tasks to %s", len(payload), self.path)

    def create(self):
        """Creates an empty task list file. Fails if the file already exists."""
        if self.path.exists():
            raise StorageError(f"{self.path} already exists")
        self.save([])

    def delete(self):
        """Removes the backing file."""
        try:
            self.path.unlink()
        except FileNotFoundError as e:
            raise StorageError(f"{self.path} does not exist") from e
        except OSError as e:
            raise StorageError(f"Unable to delete {self.path}: {e}") from e
