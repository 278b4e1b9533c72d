# src/taskrank/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path

LOG_FILE_NAME = "taskrank.log"
_PACKAGE = "taskrank."
_STORE_PACKAGE = "taskrank.tasks."

_FORMAT = logging.Formatter(
    fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)


class _ConsoleNoiseFilter(logging.Filter):
    """
    Decide what reaches the terminal, where command replies are printed too.

    The store logs every insert/update at DEBUG; those rows go to the file
    only. Console, command and bootstrap loggers pass through unchanged.
    Anything outside the package (including captured warnings) needs ERROR.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name.startswith(_STORE_PACKAGE):
            return record.levelno >= logging.INFO
        if record.name.startswith(_PACKAGE):
            return True
        return record.levelno >= logging.ERROR


def _console_handler(level: int) -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(_FORMAT)
    handler.addFilter(_ConsoleNoiseFilter())
    return handler


def _file_handler(log_dir: Path, level: int) -> logging.Handler:
    handler = logging.FileHandler(str(log_dir / LOG_FILE_NAME), encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(_FORMAT)
    return handler


def setup_logging(
    *,
    log_dir: str | Path = ".local/taskrank",
    console_level: int = logging.WARNING,
    file_level: int = logging.DEBUG,
) -> None:
    """
    Send filtered records to stderr and everything to <log_dir>/taskrank.log.

    Replaces whatever handlers the root logger had, so calling it twice
    (e.g. two one-shot commands in one process) does not duplicate lines.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for old in list(root.handlers):
        root.removeHandler(old)

    root.addHandler(_console_handler(console_level))
    root.addHandler(_file_handler(log_dir, file_level))

    logging.captureWarnings(True)
