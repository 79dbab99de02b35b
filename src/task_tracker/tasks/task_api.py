# src/task_tracker/tasks/task_api.py

"""
Small helpers used by the console layer: token parsing and task rendering.

Priority/status tokens accept the symbolic names, short English labels and
the Russian menu labels (низкий/средний/высокий, новая/в работе/сделано).
"""

from __future__ import annotations

from datetime import date

from .task_errors import ValidationError
from .task_models import RATING_MAX, Priority, Task, TaskStatus, format_date

PRIORITY_ALIASES: dict[str, Priority] = {
    "low": Priority.LOW,
    "medium": Priority.MEDIUM,
    "high": Priority.HIGH,
    "l": Priority.LOW,
    "m": Priority.MEDIUM,
    "h": Priority.HIGH,
    "низкий": Priority.LOW,
    "средний": Priority.MEDIUM,
    "высокий": Priority.HIGH,
}

STATUS_ALIASES: dict[str, TaskStatus] = {
    "new": TaskStatus.NEW,
    "in_progress": TaskStatus.IN_PROGRESS,
    "in-progress": TaskStatus.IN_PROGRESS,
    "in progress": TaskStatus.IN_PROGRESS,
    "done": TaskStatus.DONE,
    "новая": TaskStatus.NEW,
    "в работе": TaskStatus.IN_PROGRESS,
    "сделано": TaskStatus.DONE,
}

PRIORITY_LABELS = {Priority.LOW: "low", Priority.MEDIUM: "medium", Priority.HIGH: "high"}
STATUS_LABELS = {TaskStatus.NEW: "new", TaskStatus.IN_PROGRESS: "in progress", TaskStatus.DONE: "done"}

SEPARATOR = "-" * 50


def parse_priority(raw: str) -> Priority:
    p = PRIORITY_ALIASES.get((raw or "").strip().lower())
    if p is None:
        raise ValidationError(f"unknown priority {raw!r} (expected low, medium or high)")
    return p


def parse_status(raw: str) -> TaskStatus:
    s = STATUS_ALIASES.get(" ".join((raw or "").strip().lower().split()))
    if s is None:
        raise ValidationError(f"unknown status {raw!r} (expected new, in_progress or done)")
    return s


def parse_int(raw: str, what: str = "value") -> int:
    try:
        return int((raw or "").strip())
    except ValueError:
        raise ValidationError(f"{what} must be a number, got {raw!r}") from None


def format_task(task: Task, today: date | None = None) -> str:
    overdue = " [OVERDUE]" if task.is_overdue(today) else ""
    lines = [
        f"ID: {task.id} | {task.title}{overdue}",
        f"   Priority: {PRIORITY_LABELS[task.priority]} | Status: {STATUS_LABELS[task.status]}",
        f"   Created: {format_date(task.create_date)} | Due: {format_date(task.completion_date)}",
        f"   Description: {task.description}",
    ]
    if task.rating is not None:
        lines.append(f"   Rating: {task.rating}/{RATING_MAX}")
    lines.append(SEPARATOR)
    return "\n".join(lines)


def format_tasks(tasks: list[Task], today: date | None = None) -> str:
    if not tasks:
        return "The list is empty."
    return "\n".join(format_task(t, today) for t in tasks)
