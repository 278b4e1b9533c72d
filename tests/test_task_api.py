# tests/test_task_api.py

from __future__ import annotations

import pytest

from taskrank.core.errors import NotFoundError, PriorityNotInRange
from taskrank.tasks import task_api
from taskrank.tasks.task_store import TaskStore


def test_add_task_trims_and_persists(store: TaskStore) -> None:
    task = task_api.add_task(store, priority="B", description="  Call mom  ", project=" family ")

    assert task.is_persisted
    loaded = store.get_task(task.id)
    assert loaded.description == "Call mom"
    assert loaded.project == "family"


def test_add_task_rejects_bad_priority(store: TaskStore) -> None:
    with pytest.raises(PriorityNotInRange):
        task_api.add_task(store, priority="b", description="lowercase")
    assert store.count_tasks() == 0


def test_done_and_pending_toggle(store: TaskStore) -> None:
    task = task_api.add_task(store, priority="A", description="Toggle me")

    assert task_api.set_done(store, task.id).completed is True
    assert store.get_task(task.id).completed is True
    assert task_api.set_pending(store, task.id).completed is False
    assert store.get_task(task.id).completed is False


def test_priority_bumps_saturate_in_storage(store: TaskStore) -> None:
    task = task_api.add_task(store, priority="B", description="Bump")

    task_api.increase_priority(store, task.id)
    task_api.increase_priority(store, task.id)
    assert store.get_task(task.id).priority.letter == "A"

    for _ in range(30):
        task_api.lower_priority(store, task.id)
    assert store.get_task(task.id).priority.letter == "Z"


def test_update_description_trims(store: TaskStore) -> None:
    task = task_api.add_task(store, priority="C", description="Old")
    task_api.update_description(store, task.id, "   New text \n")
    assert store.get_task(task.id).description == "New text"


def test_helpers_on_missing_task_are_not_found(store: TaskStore) -> None:
    for helper in (
        task_api.set_done,
        task_api.set_pending,
        task_api.increase_priority,
        task_api.lower_priority,
    ):
        with pytest.raises(NotFoundError):
            helper(store, 404)
