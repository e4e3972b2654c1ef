# src/taskdeck/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path

LOG_FILE_NAME = "taskdeck.log"

_STORAGE_LOGGER_PREFIX = "taskdeck.storage."


def level_from_name(name: str | None, default: int = logging.INFO) -> int:
    """Map 'debug'/'INFO'/... to a logging level; unknown names give default."""
    level = logging.getLevelName(str(name or "").strip().upper())
    return level if isinstance(level, int) else default


class _ConsoleNoiseFilter(logging.Filter):
    """
    Console filter for the task REPL.

    Task output shares the terminal with log lines, so per-write storage
    records only show when the console runs at DEBUG; other taskdeck records
    pass through and everything foreign needs ERROR+.
    """

    def __init__(self, storage_level: int = logging.WARNING) -> None:
        super().__init__()
        self.storage_level = storage_level

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name
        if name.startswith(_STORAGE_LOGGER_PREFIX):
            return record.levelno >= self.storage_level
        if name.startswith("taskdeck."):
            return True
        return record.levelno >= logging.ERROR


def setup_logging(
    *,
    log_dir: str | Path,
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
) -> Path:
    """
    Install a filtered stderr handler and a full file log.

    Storage chatter follows console_level: visible at DEBUG, WARNING+
    otherwise. Returns the log file path.
    """
    log_file = Path(log_dir) / LOG_FILE_NAME
    log_file.parent.mkdir(parents=True, exist_ok=True)

    root = logging.getLogger()
    root.setLevel(min(console_level, file_level))
    for h in list(root.handlers):
        root.removeHandler(h)
        h.close()

    fmt = logging.Formatter(
        fmt="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    storage_level = logging.DEBUG if console_level <= logging.DEBUG else logging.WARNING
    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(fmt)
    console.addFilter(_ConsoleNoiseFilter(storage_level))
    root.addHandler(console)

    file_handler = logging.FileHandler(str(log_file), encoding="utf-8")
    file_handler.setLevel(file_level)
    file_handler.setFormatter(fmt)
    root.addHandler(file_handler)

    logging.captureWarnings(True)
    return log_file
