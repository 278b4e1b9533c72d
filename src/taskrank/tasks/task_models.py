# tasks/task_models.py

from __future__ import annotations

import string
from dataclasses import dataclass

from ..core.errors import PriorityNotInRange

_LETTERS = string.ascii_uppercase


@dataclass(frozen=True, order=True, slots=True)
class Priority:
    """
    Urgency letter in A..Z, A being the most urgent.

    Arithmetic saturates at both ends, so repeated bumps are idempotent there.
    """

    letter: str

    def __post_init__(self) -> None:
        if not isinstance(self.letter, str) or len(self.letter) != 1 or self.letter not in _LETTERS:
            raise PriorityNotInRange(self.letter)

    @classmethod
    def create(cls, letter: str | Priority) -> Priority:
        if isinstance(letter, Priority):
            return letter
        return cls(letter)

    @property
    def ordinal(self) -> int:
        return _LETTERS.index(self.letter)

    def _shift(self, step: int) -> Priority:
        idx = max(0, min(len(_LETTERS) - 1, self.ordinal + step))
        return Priority(_LETTERS[idx])

    def increase(self) -> Priority:
        return self._shift(-1)

    def decrease(self) -> Priority:
        return self._shift(+1)

    def __str__(self) -> str:
        return self.letter


@dataclass(slots=True)
class Task:
    priority: Priority
    description: str
    completed: bool = False
    project: str | None = None

    # None until the store assigns a row id.
    id: int | None = None

    @classmethod
    def create(
        cls,
        priority: str | Priority,
        description: str,
        project: str | None = None,
    ) -> Task:
        return cls(
            priority=Priority.create(priority),
            description=description,
            project=(project or "").strip() or None,
        )

    @property
    def is_persisted(self) -> bool:
        return self.id is not None

    def increase_priority(self) -> None:
        self.priority = self.priority.increase()

    def lower_priority(self) -> None:
        self.priority = self.priority.decrease()
