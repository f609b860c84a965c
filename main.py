# main.py
import logging
import sys
from typing import List, Optional

from rich.console import Console

from cli import build_parser, dispatch
from config import Config
from storage import CorruptTodoFileError

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
HANDLER_NAME = "todo"


def setup_logging(config: Config):
    """
    Configures the root logger. The terminal interface owns the screen, so
    records only ever go to a file, and nowhere when no log file is set.

    The handler installed by an earlier call is closed and replaced.
    """
    root = logging.getLogger()
    root.setLevel(getattr(logging, config.log_level, logging.WARNING))
    for old in [h for h in root.handlers if h.get_name() == HANDLER_NAME]:
        root.removeHandler(old)
        old.close()
    if config.log_file:
        config.log_file.parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.FileHandler(config.log_file, encoding="utf-8")
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
    else:
        handler = logging.NullHandler()
    handler.set_name(HANDLER_NAME)
    root.addHandler(handler)


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point of the `todo` command."""
    args = build_parser().parse_args(argv)
    config = Config.from_env(use_global=args.use_global)
    setup_logging(config)

    try:
        return dispatch(args, config, Console(highlight=False))
    except CorruptTodoFileError as e:
        # Nothing is loaded from a file we cannot parse.
        logging.getLogger(__name__).error("%s", e)
        Console(stderr=True, highlight=False).print(str(e), markup=False)
        return 1


if __name__ == "__main__":
    sys.exit(main())
