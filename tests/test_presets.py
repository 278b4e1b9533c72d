# tests/test_presets.py

from __future__ import annotations

import sqlite3

import pytest

from taskrank.core.errors import (
    DataIntegrityError,
    NotFoundError,
    UniquenessError,
    UnsupportedOperationError,
)
from taskrank.tasks.preset_models import PresetTask
from taskrank.tasks.task_models import Task
from taskrank.tasks.task_store import TaskStore


def test_preset_round_trip(store: TaskStore) -> None:
    preset = store.add_preset("x")
    assert preset.id > 0
    assert preset.tasks == []

    added = [
        PresetTask.create("C", "Take out trash", preset.id),
        PresetTask.create("A", "Pay rent", preset.id),
        PresetTask.create("B", "Buy groceries", preset.id),
    ]
    for pt in added:
        pt_id = store.add_preset_task(pt)
        assert pt.id == pt_id

    loaded = store.get_preset("x")
    assert loaded.id == preset.id
    assert loaded.name == "x"
    assert sorted((pt.id, pt.priority.letter, pt.description) for pt in loaded.tasks) == sorted(
        (pt.id, pt.priority.letter, pt.description) for pt in added
    )
    # Stable form: same order on every read.
    assert [pt.description for pt in loaded.tasks] == ["Pay rent", "Buy groceries", "Take out trash"]
    assert [pt.id for pt in store.get_preset("x").tasks] == [pt.id for pt in loaded.tasks]


def test_duplicate_preset_name_is_rejected(store: TaskStore) -> None:
    store.add_preset("weekly")
    with pytest.raises(UniquenessError):
        store.add_preset("weekly")
    assert store.list_preset_names() == ["weekly"]


def test_list_preset_names_sorted(memory_store: TaskStore) -> None:
    for name in ("morning", "evening", "after lunch"):
        memory_store.add_preset(name)
    assert memory_store.list_preset_names() == ["after lunch", "evening", "morning"]


def test_get_unknown_preset_is_not_found(store: TaskStore) -> None:
    with pytest.raises(NotFoundError):
        store.get_preset("nope")
    with pytest.raises(NotFoundError):
        store.inject_preset("nope")


def test_persisted_preset_task_cannot_be_added_again(store: TaskStore) -> None:
    preset = store.add_preset("x")
    pt = PresetTask.create("A", "Once", preset.id)
    store.add_preset_task(pt)

    pt.description = "Twice"
    with pytest.raises(UnsupportedOperationError):
        store.add_preset_task(pt)
    assert [p.description for p in store.get_preset("x").tasks] == ["Once"]


def test_preset_task_for_unknown_preset_is_not_found(store: TaskStore) -> None:
    with pytest.raises(NotFoundError):
        store.add_preset_task(PresetTask.create("A", "Orphan", 12345))


def test_inject_preset_creates_tasks_in_project(store: TaskStore) -> None:
    preset = store.add_preset("x")
    store.add_preset_task(PresetTask.create("B", "Vacuum", preset.id))
    store.add_preset_task(PresetTask.create("A", "Dishes", preset.id))
    store.persist_task(Task.create("C", "Unrelated"))

    created = store.inject_preset("x")

    assert len(created) == 2
    assert all(t.is_persisted and t.project == "x" and not t.completed for t in created)
    assert [t.description for t in store.list_tasks("x")] == ["Dishes", "Vacuum"]
    assert store.count_tasks() == 3
    assert store.list_projects() == ["x"]

    # The template is untouched and can be injected again.
    assert [pt.description for pt in store.get_preset("x").tasks] == ["Dishes", "Vacuum"]
    store.inject_preset("x")
    assert len(store.list_tasks("x")) == 4


def test_inject_empty_preset_creates_nothing(store: TaskStore) -> None:
    store.add_preset("empty")
    assert store.inject_preset("empty") == []
    assert store.count_tasks() == 0


def test_inject_is_all_or_nothing(store: TaskStore, settings) -> None:
    preset = store.add_preset("x")
    store.add_preset_task(PresetTask.create("A", "Fine", preset.id))

    # Lowercase sorts after every valid letter, so the good row is inserted first.
    conn = sqlite3.connect(settings.tasks_db_path)
    conn.execute(
        "INSERT INTO preset_tasks(preset_id, priority, description) VALUES (?, 'a', 'Corrupt')",
        (preset.id,),
    )
    conn.commit()
    conn.close()

    with pytest.raises(DataIntegrityError):
        store.inject_preset("x")
    assert store.count_tasks() == 0
    assert store.list_projects() == []
