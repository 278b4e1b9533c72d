# src/taskrank/tasks/task_api.py

from __future__ import annotations

import logging

from ..core.ports import TaskRepo
from .task_models import Priority, Task

logger = logging.getLogger(__name__)


def add_task(
    store: TaskRepo,
    *,
    priority: str | Priority,
    description: str,
    project: str | None = None,
) -> Task:
    """Validate, persist and return a brand new pending task."""
    task = Task.create(priority, description.strip(), project=project)
    store.persist_task(task)
    return task


def set_done(store: TaskRepo, task_id: int) -> Task:
    task = store.get_task(task_id)
    task.completed = True
    store.persist_task(task)
    return task


def set_pending(store: TaskRepo, task_id: int) -> Task:
    task = store.get_task(task_id)
    task.completed = False
    store.persist_task(task)
    return task


def increase_priority(store: TaskRepo, task_id: int) -> Task:
    task = store.get_task(task_id)
    task.increase_priority()
    store.persist_task(task)
    return task


def lower_priority(store: TaskRepo, task_id: int) -> Task:
    task = store.get_task(task_id)
    task.lower_priority()
    store.persist_task(task)
    return task


def update_description(store: TaskRepo, task_id: int, description: str) -> Task:
    """
    Replace a task description with the trimmed input.

    Note: read-then-write, two racing edits of the same task are last-write-wins.
    """
    task = store.get_task(task_id)
    task.description = description.strip()
    store.persist_task(task)
    logger.debug("Description updated task_id=%s", task_id)
    return task
