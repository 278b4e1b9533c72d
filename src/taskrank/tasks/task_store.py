# tasks/task_store.py

from __future__ import annotations

import logging
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager

from ..core.errors import (
    DataIntegrityError,
    NotFoundError,
    StorageError,
    TaskStoreError,
    UniquenessError,
    UnsupportedOperationError,
    ValidationError,
)
from ..core.ports import ConnectionProvider
from .preset_models import Preset, PresetTask
from .task_models import Priority, Task

logger = logging.getLogger(__name__)

# The one place where display order is defined.
_TASK_ORDER = "completed ASC, priority ASC, description ASC, id ASC"


class TaskStore:
    """
    SQLite task and preset store.

    The schema is intentionally simple and migration-safe:
    - create tables if missing
    - use PRAGMA table_info to detect missing columns
    - add columns with ALTER TABLE only when needed

    Every public method is its own unit of work: it opens a connection from the
    provider, runs one statement (or one transaction), commits and closes.
    Racing read-modify-write callers get last-write-wins.
    """

    def __init__(self, provider: ConnectionProvider) -> None:
        self._provider = provider

    # ---- low-level helpers ----

    @contextmanager
    def _session(self) -> Iterator[sqlite3.Connection]:
        conn = self._provider.open()
        try:
            yield conn
            conn.commit()
        except sqlite3.IntegrityError as exc:
            conn.rollback()
            if "UNIQUE" in str(exc):
                raise UniquenessError(str(exc)) from exc
            logger.warning("Constraint violation in task store: %s", exc)
            raise StorageError(str(exc)) from exc
        except sqlite3.Error as exc:
            conn.rollback()
            logger.exception("Task store statement failed.")
            raise StorageError(str(exc)) from exc
        except TaskStoreError:
            conn.rollback()
            raise
        finally:
            conn.close()

    @staticmethod
    def _parse_priority(raw: object, *, table: str, row_id: object) -> Priority:
        if not raw:
            raise DataIntegrityError(f"{table} row {row_id}: priority in storage was empty")
        try:
            return Priority.create(str(raw))
        except ValidationError as exc:
            raise DataIntegrityError(f"{table} row {row_id}: {exc}") from exc

    def _row_to_task(self, row: sqlite3.Row) -> Task:
        return Task(
            id=int(row["id"]),
            priority=self._parse_priority(row["priority"], table="tasks", row_id=row["id"]),
            description=str(row["description"] or ""),
            completed=bool(row["completed"]),
            project=row["project"] or None,
        )

    def _row_to_preset_task(self, row: sqlite3.Row) -> PresetTask:
        return PresetTask(
            id=int(row["id"]),
            preset_id=int(row["preset_id"]),
            priority=self._parse_priority(row["priority"], table="preset_tasks", row_id=row["id"]),
            description=str(row["description"] or ""),
        )

    @staticmethod
    def _insert_task(conn: sqlite3.Connection, task: Task) -> int:
        cur = conn.execute(
            """
            INSERT INTO tasks(priority, description, completed, project)
            VALUES (?, ?, ?, ?)
            """,
            (task.priority.letter, task.description, int(task.completed), task.project or ""),
        )
        rowid = cur.lastrowid
        if rowid is None:
            raise StorageError("SQLite did not return lastrowid for tasks insert")
        return int(rowid)

    @staticmethod
    def _preset_id(conn: sqlite3.Connection, name: str) -> int:
        row = conn.execute("SELECT id FROM presets WHERE name = ?", (name,)).fetchone()
        if row is None:
            raise NotFoundError(f"Preset {name!r} not found in storage")
        return int(row["id"])

    # ---- schema ----

    def init_schema(self) -> None:
        with self._session() as conn:
            cur = conn.cursor()

            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS tasks (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    priority TEXT NOT NULL,
                    description TEXT NOT NULL,
                    completed INTEGER NOT NULL DEFAULT 0,
                    project TEXT NOT NULL DEFAULT ''
                )
                """
            )

            # Databases created before projects existed lack the column.
            cur.execute("PRAGMA table_info(tasks)")
            cols = {row["name"] for row in cur.fetchall()}
            if "project" not in cols:
                cur.execute("ALTER TABLE tasks ADD COLUMN project TEXT NOT NULL DEFAULT ''")
                logger.info("TaskStore migration: added column project")

            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS presets (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    name TEXT NOT NULL UNIQUE
                )
                """
            )
            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS preset_tasks (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    preset_id INTEGER NOT NULL REFERENCES presets(id) ON DELETE CASCADE,
                    priority TEXT NOT NULL,
                    description TEXT NOT NULL
                )
                """
            )

            cur.execute(
                "CREATE INDEX IF NOT EXISTS idx_tasks_order "
                "ON tasks(completed, priority, description)"
            )
            cur.execute("CREATE INDEX IF NOT EXISTS idx_tasks_project ON tasks(project)")
            cur.execute(
                "CREATE INDEX IF NOT EXISTS idx_preset_tasks_preset ON preset_tasks(preset_id)"
            )

        logger.info("TaskStore ready provider=%r total=%s", self._provider, self.count_tasks())

    # ---- tasks ----

    def count_tasks(self) -> int:
        with self._session() as conn:
            (n,) = conn.execute("SELECT COUNT(*) FROM tasks").fetchone()
            return int(n)

    def list_tasks(self, project: str | None = None) -> list[Task]:
        """
        Return tasks in display order: pending before done, then priority
        letter, then description. An empty/None project means no filter.
        """
        with self._session() as conn:
            if project:
                rows = conn.execute(
                    f"SELECT * FROM tasks WHERE project = ? ORDER BY {_TASK_ORDER}",
                    (project,),
                ).fetchall()
            else:
                rows = conn.execute(f"SELECT * FROM tasks ORDER BY {_TASK_ORDER}").fetchall()
            return [self._row_to_task(r) for r in rows]

    def get_task(self, task_id: int | None) -> Task:
        if task_id is None:
            raise NotFoundError("Unpersisted task has no row in storage")

        with self._session() as conn:
            row = conn.execute("SELECT * FROM tasks WHERE id = ?", (int(task_id),)).fetchone()
            if row is None:
                raise NotFoundError(f"Task {task_id} not found in storage")
            return self._row_to_task(row)

    def persist_task(self, task: Task) -> int:
        """
        Insert an unpersisted task (assigning its id) or update priority,
        description and completed of an existing one. Returns the task id.
        """
        with self._session() as conn:
            if not task.is_persisted:
                task.id = self._insert_task(conn, task)
                logger.debug(
                    "Task added id=%s priority=%s project=%s",
                    task.id,
                    task.priority,
                    task.project,
                )
                return task.id

            cur = conn.execute(
                """
                UPDATE tasks
                SET priority = ?, description = ?, completed = ?
                WHERE id = ?
                """,
                (task.priority.letter, task.description, int(task.completed), task.id),
            )
            if cur.rowcount == 0:
                raise NotFoundError(f"Task {task.id} not found in storage")
            logger.debug(
                "Task updated id=%s priority=%s completed=%s",
                task.id,
                task.priority,
                task.completed,
            )
            return int(task.id)

    def cleanup(self) -> int:
        """Delete every completed task. Irreversible."""
        with self._session() as conn:
            cur = conn.execute("DELETE FROM tasks WHERE completed = 1")
            removed = cur.rowcount
        logger.info("Cleanup removed %d completed task(s)", removed)
        return removed

    # ---- projects ----

    def list_projects(self) -> list[str]:
        with self._session() as conn:
            rows = conn.execute(
                "SELECT DISTINCT project FROM tasks WHERE project != '' ORDER BY project ASC"
            ).fetchall()
            return [str(r["project"]) for r in rows]

    def rename_project(self, old: str, new: str) -> int:
        """
        Move every task of project `old` to `new`. Renaming an unused label
        is a no-op; the empty label means "no project" and matches nothing.
        """
        if not old:
            return 0

        with self._session() as conn:
            cur = conn.execute(
                "UPDATE tasks SET project = ? WHERE project = ?",
                (new or "", old),
            )
            changed = cur.rowcount
        logger.info("Renamed project %r -> %r (%d task(s))", old, new, changed)
        return changed

    # ---- presets ----

    def add_preset(self, name: str) -> Preset:
        with self._session() as conn:
            cur = conn.execute("INSERT INTO presets(name) VALUES (?)", (name,))
            rowid = cur.lastrowid
            if rowid is None:
                raise StorageError("SQLite did not return lastrowid for presets insert")
        logger.info("Preset added id=%s name=%r", rowid, name)
        return Preset(id=int(rowid), name=name)

    def list_preset_names(self) -> list[str]:
        with self._session() as conn:
            rows = conn.execute("SELECT name FROM presets ORDER BY name ASC").fetchall()
            return [str(r["name"]) for r in rows]

    def get_preset(self, name: str) -> Preset:
        with self._session() as conn:
            preset_id = self._preset_id(conn, name)
            rows = conn.execute(
                """
                SELECT *
                FROM preset_tasks
                WHERE preset_id = ?
                ORDER BY priority ASC, description ASC, id ASC
                """,
                (preset_id,),
            ).fetchall()
            return Preset(
                id=preset_id,
                name=name,
                tasks=[self._row_to_preset_task(r) for r in rows],
            )

    def add_preset_task(self, preset_task: PresetTask) -> int:
        if preset_task.is_persisted:
            raise UnsupportedOperationError(
                f"Preset task {preset_task.id} is already persisted; preset tasks cannot be updated"
            )

        with self._session() as conn:
            exists = conn.execute(
                "SELECT 1 FROM presets WHERE id = ?", (preset_task.preset_id,)
            ).fetchone()
            if exists is None:
                raise NotFoundError(f"Preset {preset_task.preset_id} not found in storage")

            cur = conn.execute(
                """
                INSERT INTO preset_tasks(preset_id, priority, description)
                VALUES (?, ?, ?)
                """,
                (preset_task.preset_id, preset_task.priority.letter, preset_task.description),
            )
            rowid = cur.lastrowid
            if rowid is None:
                raise StorageError("SQLite did not return lastrowid for preset_tasks insert")
            preset_task.id = int(rowid)

        logger.debug(
            "Preset task added id=%s preset_id=%s priority=%s",
            preset_task.id,
            preset_task.preset_id,
            preset_task.priority,
        )
        return preset_task.id

    def inject_preset(self, name: str) -> list[Task]:
        """
        Create one new task per preset task, filed under a project named after
        the preset. All inserts share one transaction; the preset is not touched.
        """
        with self._session() as conn:
            preset_id = self._preset_id(conn, name)
            rows = conn.execute(
                """
                SELECT *
                FROM preset_tasks
                WHERE preset_id = ?
                ORDER BY priority ASC, description ASC, id ASC
                """,
                (preset_id,),
            ).fetchall()

            created: list[Task] = []
            for row in rows:
                template = self._row_to_preset_task(row)
                task = Task.create(template.priority, template.description, project=name)
                task.id = self._insert_task(conn, task)
                created.append(task)

        logger.info("Injected preset %r: %d task(s)", name, len(created))
        return created
