# src/taskrank/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- picks a connection provider and wires the TaskStore into AppState.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.ports import ConnectionProvider
from ..core.state import AppState
from ..tasks.connection import MemoryConnectionProvider, SqliteConnectionProvider
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.tasks_db_path.parent.mkdir(parents=True, exist_ok=True)


def build_provider(settings) -> ConnectionProvider:
    if getattr(settings, "in_memory", False):
        logger.info("Using in-memory task database (nothing is saved on exit).")
        return MemoryConnectionProvider()
    return SqliteConnectionProvider(
        settings.tasks_db_path,
        timeout=getattr(settings, "sqlite_timeout", 30.0),
    )


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    provider = build_provider(settings)
    store = TaskStore(provider)
    store.init_schema()

    return AppState(settings=settings, task_store=store, provider=provider)


def shutdown_state(state: AppState) -> None:
    """Best-effort shutdown (no exceptions should escape)."""
    # TaskStore uses short-lived connections per call; only the provider may hold one.
    provider = state.provider
    if provider is not None and hasattr(provider, "close"):
        try:
            provider.close()
        except Exception:
            logger.debug("Provider close failed.", exc_info=True)
