# src/task_tracker/tasks/task_query.py

"""
Sort orders and filter/search criteria used by TaskStore.

Criteria are small frozen dataclasses with a matches(task, today) method, so a
filter or search is just "keep the tasks the criterion matches".
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import date
from enum import StrEnum
from typing import Any, Protocol

from .task_errors import ValidationError
from .task_models import Priority, Task, TaskStatus


class SortOrder(StrEnum):
    PRIORITY = "priority"
    CREATED = "created"
    TITLE = "title"
    COMPLETION = "completion"

    @classmethod
    def parse(cls, raw: str | None, default: SortOrder | None = None) -> SortOrder:
        token = (raw or "").strip().lower()
        try:
            return cls(token)
        except ValueError:
            if default is not None:
                return default
            names = ", ".join(o.value for o in cls)
            raise ValidationError(f"unknown sort order {raw!r} (expected one of: {names})") from None


_SORT_KEYS: dict[SortOrder, Callable[[Task], Any]] = {
    SortOrder.PRIORITY: lambda t: -t.priority.rank,
    SortOrder.CREATED: lambda t: t.create_date,
    SortOrder.TITLE: lambda t: t.title,
    SortOrder.COMPLETION: lambda t: t.completion_date,
}


def sort_tasks(tasks: Iterable[Task], order: SortOrder) -> list[Task]:
    # sorted() is stable: equal keys keep collection order.
    return sorted(tasks, key=_SORT_KEYS[order])


class Criterion(Protocol):
    def matches(self, task: Task, today: date) -> bool: ...


# ---- filters ----


@dataclass(frozen=True, slots=True)
class PriorityIs:
    priority: Priority

    def matches(self, task: Task, today: date) -> bool:
        return task.priority == self.priority


@dataclass(frozen=True, slots=True)
class StatusIs:
    status: TaskStatus

    def matches(self, task: Task, today: date) -> bool:
        return task.status == self.status


@dataclass(frozen=True, slots=True)
class Overdue:
    def matches(self, task: Task, today: date) -> bool:
        return task.is_overdue(today)


# ---- searches ----


@dataclass(frozen=True, slots=True)
class TextContains:
    """Case-insensitive substring match against title or description."""

    text: str

    def __post_init__(self) -> None:
        if not self.text or not self.text.strip():
            raise ValidationError("search text must not be empty")

    def matches(self, task: Task, today: date) -> bool:
        needle = self.text.strip().casefold()
        return needle in task.title.casefold() or needle in task.description.casefold()


@dataclass(frozen=True, slots=True)
class CompletionOn:
    day: date

    def matches(self, task: Task, today: date) -> bool:
        return task.completion_date == self.day


@dataclass(frozen=True, slots=True)
class CompletionBetween:
    """Inclusive on both ends."""

    start: date
    end: date

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise ValidationError(f"range start {self.start} is after range end {self.end}")

    def matches(self, task: Task, today: date) -> bool:
        return self.start <= task.completion_date <= self.end


@dataclass(frozen=True, slots=True)
class CompletionInMonth:
    month: int
    year: int

    def __post_init__(self) -> None:
        if not 1 <= self.month <= 12:
            raise ValidationError(f"month must be from 1 to 12, got {self.month}")
        if not 1 <= self.year <= 9999:
            raise ValidationError(f"year must be from 1 to 9999, got {self.year}")

    def matches(self, task: Task, today: date) -> bool:
        d = task.completion_date
        return d.month == self.month and d.year == self.year
