# src/task_tracker/tasks/task_models.py

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime
from enum import StrEnum

from .task_errors import AlreadySet, InvalidState, OutOfRange, ValidationError

DATE_FORMAT = "%d.%m.%Y"
_DATE_RE = re.compile(r"^\d{2}\.\d{2}\.\d{4}$")

RATING_MIN = 1
RATING_MAX = 5


class TaskStatus(StrEnum):
    """
    Task lifecycle status.

    Moves strictly forward: NEW -> IN_PROGRESS -> DONE.
    """

    NEW = "NEW"
    IN_PROGRESS = "IN_PROGRESS"
    DONE = "DONE"


class Priority(StrEnum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"

    @property
    def rank(self) -> int:
        return _PRIORITY_RANK[self]


_PRIORITY_RANK = {Priority.LOW: 0, Priority.MEDIUM: 1, Priority.HIGH: 2}


def format_date(value: date) -> str:
    return value.strftime(DATE_FORMAT)


def parse_date(raw: str) -> date:
    """
    Parse a DD.MM.YYYY string.

    Only the zero-padded form is accepted, so parse_date(format_date(d)) == d
    and every accepted string re-encodes to itself.
    """
    text = (raw or "").strip()
    if not _DATE_RE.match(text):
        raise ValidationError(f"invalid date {raw!r}: expected DD.MM.YYYY")
    try:
        return datetime.strptime(text, DATE_FORMAT).date()
    except ValueError as e:
        raise ValidationError(f"invalid date {raw!r}: {e}") from e


def clean_text(value: str | None, field_name: str) -> str:
    text = (value or "").strip()
    if not text:
        raise ValidationError(f"{field_name} must not be empty")
    return text


@dataclass(slots=True)
class Task:
    id: int
    title: str
    description: str
    create_date: date
    completion_date: date
    priority: Priority
    status: TaskStatus = TaskStatus.NEW

    rating: int | None = None
    deleted: bool = False

    def is_overdue(self, today: date | None = None) -> bool:
        if today is None:
            today = date.today()
        return today > self.completion_date and self.status != TaskStatus.DONE

    def rate(self, value: int) -> None:
        if self.status != TaskStatus.DONE:
            raise InvalidState("only a completed task can be rated")
        if self.rating is not None:
            raise AlreadySet(f"task {self.id} is already rated ({self.rating}/{RATING_MAX})")
        if isinstance(value, bool) or not isinstance(value, int):
            raise OutOfRange(f"rating must be an integer from {RATING_MIN} to {RATING_MAX}")
        if not RATING_MIN <= value <= RATING_MAX:
            raise OutOfRange(f"rating must be from {RATING_MIN} to {RATING_MAX}, got {value}")
        self.rating = value
