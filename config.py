# config.py
#
# Description:
# Runtime configuration, resolved once at startup and passed explicitly to
# the command line dispatcher and the terminal interface.
#

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

LOCAL_FILENAME = "todos.json"
GLOBAL_FILENAME = ".todos.json"
DEFAULT_LOG_LEVEL = "WARNING"


@dataclass(frozen=True)
class Config:
    """
    Attributes:
        todo_file: The backing file of the selected task list.
        is_global: True when the home-directory list was selected.
        log_file: Where to write log records; None disables logging output.
        log_level: Name of the logging level, e.g. "INFO".
    """
    todo_file: Path
    is_global: bool = False
    log_file: Optional[Path] = None
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(
        cls,
        use_global: bool = False,
        cwd: Optional[Path] = None,
        home: Optional[Path] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> "Config":
        """
        Builds the configuration from the --global flag and the environment.

        TODO_FILE and TODO_GLOBAL_FILE override the local and global file
        locations; TODO_LOG_FILE and TODO_LOG_LEVEL control logging.
        """
        environ = os.environ if environ is None else environ
        cwd = Path.cwd() if cwd is None else cwd
        home = Path.home() if home is None else home

        if use_global:
            override = environ.get("TODO_GLOBAL_FILE")
            todo_file = Path(override).expanduser() if override else home / GLOBAL_FILENAME
        else:
            override = environ.get("TODO_FILE")
            todo_file = Path(override).expanduser() if override else cwd / LOCAL_FILENAME

        log_file = environ.get("TODO_LOG_FILE")
        return cls(
            todo_file=todo_file,
            is_global=use_global,
            log_file=Path(log_file).expanduser() if log_file else None,
            log_level=environ.get("TODO_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper(),
        )
