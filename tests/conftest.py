# tests/conftest.py

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path
from types import SimpleNamespace

import pytest

from taskrank.core.state import AppState
from taskrank.tasks.connection import MemoryConnectionProvider, SqliteConnectionProvider
from taskrank.tasks.task_store import TaskStore


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and bootstrap.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="taskrank-test",
        log_level="DEBUG",
        data_dir=tmp_path / "data",
        tasks_db_path=tmp_path / "data" / "tasks.sqlite3",
        in_memory=False,
        sqlite_timeout=5.0,
    )


@pytest.fixture()
def store(settings: SimpleNamespace) -> TaskStore:
    """Real SQLite store on a temp file; its SQL ordering is part of what we test."""
    s = TaskStore(SqliteConnectionProvider(settings.tasks_db_path))
    s.init_schema()
    return s


@pytest.fixture()
def memory_store() -> Iterator[TaskStore]:
    provider = MemoryConnectionProvider()
    s = TaskStore(provider)
    s.init_schema()
    yield s
    provider.close()


@pytest.fixture()
def state(settings: SimpleNamespace, store: TaskStore) -> AppState:
    return AppState(settings=settings, task_store=store)


@pytest.fixture()
def restore_root_logging() -> Iterator[None]:
    """setup_logging() reconfigures the root logger; put pytest's handlers back afterwards."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for h in list(root.handlers):
        if h not in handlers:
            root.removeHandler(h)
            h.close()
    for h in handlers:
        if h not in root.handlers:
            root.addHandler(h)
    root.setLevel(level)
    logging.captureWarnings(False)
