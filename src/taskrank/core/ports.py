# src/taskrank/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The store depends on a ConnectionProvider Protocol instead of a concrete
database path, so storage can be swapped (file-backed vs in-memory) without
touching store logic. Surface code depends on TaskRepo.
"""

import sqlite3
from typing import Any, Protocol


class ConnectionProvider(Protocol):
    """
    Hands out one ready-to-use SQLite connection per call.

    Implementations raise StorageConnectionError when the database cannot be
    opened. The caller owns the returned connection and must close it.
    """

    def open(self) -> sqlite3.Connection: ...


class TaskRepo(Protocol):
    def init_schema(self) -> None: ...
    def count_tasks(self) -> int: ...

    # Tasks
    def list_tasks(self, project: str | None = None) -> list[Any]: ...
    def get_task(self, task_id: int | None) -> Any: ...
    def persist_task(self, task: Any) -> int: ...
    def cleanup(self) -> int: ...

    # Projects
    def list_projects(self) -> list[str]: ...
    def rename_project(self, old: str, new: str) -> int: ...

    # Presets
    def add_preset(self, name: str) -> Any: ...
    def list_preset_names(self) -> list[str]: ...
    def get_preset(self, name: str) -> Any: ...
    def add_preset_task(self, preset_task: Any) -> int: ...
    def inject_preset(self, name: str) -> list[Any]: ...
