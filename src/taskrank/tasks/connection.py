# tasks/connection.py

from __future__ import annotations

import contextlib
import logging
import sqlite3
import uuid
from pathlib import Path

from ..core.errors import StorageConnectionError

logger = logging.getLogger(__name__)


def _configure_conn(conn: sqlite3.Connection) -> None:
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")


class SqliteConnectionProvider:
    """
    File-backed SQLite provider.

    Every open() returns a fresh connection; nothing is pooled or shared,
    so the provider is safe to use from several threads.
    """

    def __init__(self, db_path: str | Path = "tasks.sqlite3", *, timeout: float = 30.0) -> None:
        self._db_path = Path(db_path)
        self._timeout = float(timeout)

    @property
    def db_path(self) -> Path:
        return self._db_path

    def open(self) -> sqlite3.Connection:
        try:
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
            conn = sqlite3.connect(str(self._db_path), timeout=self._timeout)
        except (OSError, sqlite3.Error) as exc:
            logger.warning("Cannot open task db=%s: %s", self._db_path, exc)
            raise StorageConnectionError(f"cannot open {self._db_path}: {exc}") from exc

        try:
            _configure_conn(conn)
        except sqlite3.Error as exc:
            conn.close()
            raise StorageConnectionError(f"cannot configure {self._db_path}: {exc}") from exc

        with contextlib.suppress(sqlite3.Error):
            conn.execute("PRAGMA journal_mode=WAL")
        return conn

    def __repr__(self) -> str:
        return f"SqliteConnectionProvider({str(self._db_path)!r})"


class MemoryConnectionProvider:
    """
    Private in-memory database shared by all connections this provider opens.

    SQLite drops a shared-cache memory database when its last connection
    closes, so an anchor connection is held until close().
    """

    def __init__(self, name: str | None = None) -> None:
        self._uri = f"file:taskrank-{name or uuid.uuid4().hex}?mode=memory&cache=shared"
        self._anchor: sqlite3.Connection | None = sqlite3.connect(self._uri, uri=True)

    def open(self) -> sqlite3.Connection:
        if self._anchor is None:
            raise StorageConnectionError("in-memory database already closed")
        try:
            conn = sqlite3.connect(self._uri, uri=True)
        except sqlite3.Error as exc:
            raise StorageConnectionError(f"cannot open in-memory db: {exc}") from exc

        try:
            _configure_conn(conn)
        except sqlite3.Error as exc:
            conn.close()
            raise StorageConnectionError(f"cannot configure in-memory db: {exc}") from exc
        return conn

    def close(self) -> None:
        if self._anchor is not None:
            self._anchor.close()
            self._anchor = None

    def __repr__(self) -> str:
        return f"MemoryConnectionProvider({self._uri!r})"
