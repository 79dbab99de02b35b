# src/task_tracker/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The store depends on a codec Protocol instead of the concrete JSON codec.
This keeps the storage format swappable and makes testing easier.
"""

from typing import TYPE_CHECKING, Iterable, Protocol

if TYPE_CHECKING:
    from ..tasks.task_codec import LoadResult
    from ..tasks.task_models import Task


class TaskCodec(Protocol):
    """Durable storage for the task collection (full read, full replace)."""

    def load(self) -> LoadResult: ...

    def save(self, tasks: Iterable[Task]) -> None: ...
