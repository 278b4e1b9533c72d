# tests/test_logging_setup.py

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from taskrank.logging_setup import LOG_FILE_NAME, _ConsoleNoiseFilter, setup_logging


def _record(name: str, level: int) -> logging.LogRecord:
    return logging.LogRecord(name, level, __file__, 1, "msg", None, None)


@pytest.mark.parametrize(
    ("name", "level", "shown"),
    [
        ("taskrank.tasks.task_store", logging.DEBUG, False),
        ("taskrank.tasks.task_store", logging.INFO, True),
        ("taskrank.cli.main", logging.DEBUG, True),
        ("taskrank.connectors.console_connector", logging.INFO, True),
        ("py.warnings", logging.WARNING, False),
        ("sqlite3", logging.ERROR, True),
    ],
)
def test_console_filter(name: str, level: int, shown: bool) -> None:
    assert _ConsoleNoiseFilter().filter(_record(name, level)) is shown


def test_setup_logging_writes_everything_to_file(
    tmp_path: Path,
    capsys: pytest.CaptureFixture[str],
    restore_root_logging: None,
) -> None:
    log_dir = tmp_path / "logs"
    setup_logging(log_dir=log_dir, console_level=logging.DEBUG)
    setup_logging(log_dir=log_dir, console_level=logging.DEBUG)
    assert len(logging.getLogger().handlers) == 2

    logging.getLogger("taskrank.tasks.task_store").debug("Inserted task_id=%s", 7)
    logging.getLogger("taskrank.cli.commands").info("Command rejected")

    text = (log_dir / LOG_FILE_NAME).read_text(encoding="utf-8")
    assert "DEBUG taskrank.tasks.task_store: Inserted task_id=7" in text
    assert text.count("Command rejected") == 1

    err = capsys.readouterr().err
    assert "Command rejected" in err
    assert "Inserted task_id" not in err
