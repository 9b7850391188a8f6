# src/taskdeck/logging_setup.py

"""
Logging for the taskdeck CLI.

Two sinks: stderr for whoever sits at the prompt, and a log file in the data
directory. The file level comes from settings.log_level. The store logs every
mutation at DEBUG under "taskdeck.tasks"; those records reach the file only
when settings.store_debug is set and never reach the console.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

LOG_FILE_NAME = "taskdeck.log"
STORE_LOGGER = "taskdeck.tasks"

_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s"
_DATEFMT = "%Y-%m-%d %H:%M:%S"


def resolve_level(name: object, default: int = logging.INFO) -> int:
    """Map a level name like "debug" to its number; unknown names give `default`."""
    level = logging.getLevelName(str(name).strip().upper())
    return level if isinstance(level, int) else default


def _in_namespace(name: str, prefix: str) -> bool:
    return name == prefix or name.startswith(prefix + ".")


class _RoutingFilter(logging.Filter):
    """
    Per-handler thresholds:
    - taskdeck.tasks: DEBUG when store_debug, otherwise `level` but never below INFO
    - the rest of taskdeck: `level`
    - everything else (py.warnings, libraries): `foreign_level`
    """

    def __init__(self, *, level: int, foreign_level: int, store_debug: bool = False) -> None:
        super().__init__()
        self.level = level
        self.foreign_level = foreign_level
        self.store_debug = store_debug

    def filter(self, record: logging.LogRecord) -> bool:
        if _in_namespace(record.name, STORE_LOGGER):
            floor = logging.DEBUG if self.store_debug else max(self.level, logging.INFO)
            return record.levelno >= floor
        if _in_namespace(record.name, "taskdeck"):
            return record.levelno >= self.level
        return record.levelno >= self.foreign_level


def setup_logging(settings, *, console_level: int = logging.WARNING) -> Path:
    """
    Install the console and file handlers on the root logger.

    Replaces any handlers already there, so calling it twice is harmless.
    Returns the log file path.
    """
    data_dir = Path(settings.data_dir)
    data_dir.mkdir(parents=True, exist_ok=True)
    log_file = data_dir / LOG_FILE_NAME

    file_level = resolve_level(getattr(settings, "log_level", "INFO"))
    store_debug = bool(getattr(settings, "store_debug", False))

    root = logging.getLogger()
    for h in list(root.handlers):
        root.removeHandler(h)
    # thresholds live in the handler filters
    root.setLevel(logging.DEBUG)

    fmt = logging.Formatter(fmt=_FORMAT, datefmt=_DATEFMT)

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(fmt)
    console.addFilter(_RoutingFilter(level=console_level, foreign_level=max(console_level, logging.ERROR)))
    root.addHandler(console)

    to_file = logging.FileHandler(str(log_file), encoding="utf-8")
    to_file.setFormatter(fmt)
    to_file.addFilter(
        _RoutingFilter(
            level=file_level,
            foreign_level=max(file_level, logging.WARNING),
            store_debug=store_debug,
        )
    )
    root.addHandler(to_file)

    logging.captureWarnings(True)
    return log_file
