# src/taskrank/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .ports import TaskRepo


@dataclass
class AppState:
    # Settings live on the state so commands can read them without globals.
    settings: Any
    task_store: TaskRepo

    # Kept so shutdown can release it (the in-memory provider holds a connection).
    provider: Any = None
