# tasks/preset_models.py

from __future__ import annotations

from dataclasses import dataclass, field

from .task_models import Priority


@dataclass(slots=True)
class PresetTask:
    """
    One (priority, description) line of a preset.

    Preset tasks are insert-only: once persisted they are never updated,
    a preset stays a stable template.
    """

    preset_id: int
    priority: Priority
    description: str
    id: int | None = None

    @classmethod
    def create(cls, priority: str | Priority, description: str, preset_id: int) -> PresetTask:
        return cls(
            preset_id=preset_id,
            priority=Priority.create(priority),
            description=description,
        )

    @property
    def is_persisted(self) -> bool:
        return self.id is not None


@dataclass(slots=True)
class Preset:
    id: int
    name: str
    tasks: list[PresetTask] = field(default_factory=list)
