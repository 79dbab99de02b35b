# src/task_tracker/tasks/task_errors.py

"""Task errors: domain validation, lifecycle, lookup and persistence failures."""

from __future__ import annotations

from pathlib import Path


class TaskError(Exception):
    """Base class for every recoverable task tracker error."""


class ValidationError(TaskError, ValueError):
    """A caller-supplied value violates a domain rule."""


class OutOfRange(ValidationError):
    """A numeric value lies outside its allowed range (e.g. rating 1..5)."""


class InvalidState(TaskError):
    """The operation is not legal for the task's current lifecycle state."""


class AlreadySet(InvalidState):
    """A write-once field has already been written."""


class NotFound(TaskError, LookupError):
    def __init__(self, task_id: int) -> None:
        self.task_id = task_id
        super().__init__(f"task {task_id} not found")


class PersistenceError(TaskError):
    """Reading, parsing or writing the task file failed."""

    def __init__(self, path: str | Path, message: str) -> None:
        self.path = Path(path)
        self.message = message
        super().__init__(f"{self.path}: {message}")
