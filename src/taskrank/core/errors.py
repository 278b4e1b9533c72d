# src/taskrank/core/errors.py

"""
Error taxonomy raised by the task store and the entities.

None of these are fatal: callers (console commands) turn them into a reply and
keep serving.
"""

from __future__ import annotations


class TaskStoreError(Exception):
    """Base class for every error the task core raises."""


class ValidationError(TaskStoreError):
    pass


class PriorityNotInRange(ValidationError):
    def __init__(self, value: object) -> None:
        super().__init__(f"Priority {value!r} is not in range A..Z")
        self.value = value


class NotFoundError(TaskStoreError):
    pass


class UniquenessError(TaskStoreError):
    pass


class UnsupportedOperationError(TaskStoreError):
    pass


class StorageError(TaskStoreError):
    """The underlying connection or statement failed."""


class StorageConnectionError(StorageError):
    pass


class DataIntegrityError(TaskStoreError):
    """A stored row could not be turned back into an entity."""
