# src/task_tracker/tasks/task_store.py

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import date

from ..core.ports import TaskCodec
from . import task_lifecycle
from .task_codec import LoadResult
from .task_errors import NotFound, PersistenceError, ValidationError
from .task_models import Priority, Task, TaskStatus, clean_text, format_date
from .task_query import Criterion, SortOrder, sort_tasks

logger = logging.getLogger(__name__)


class TaskStore:
    """
    In-memory task collection backed by a codec.

    - Insertion order is kept as-is; list/filter/search return sorted copies.
    - Ids come from a per-instance counter, reconciled with the file on load().
    - Every successful mutation is flushed to the codec. A failed write is
      logged and kept in save_error; the in-memory state stays as mutated.
    - The active sort order is session state applied to every query result.
    """

    def __init__(
        self,
        codec: TaskCodec,
        *,
        clock: Callable[[], date] = date.today,
        sort_order: SortOrder = SortOrder.PRIORITY,
    ) -> None:
        self._codec = codec
        self._clock = clock
        self._tasks: list[Task] = []
        self._next_id = 1
        self.sort_order = sort_order
        self.save_error: PersistenceError | None = None

    # ---- persistence ----

    def load(self) -> LoadResult:
        """
        Replace the collection with the codec's content.

        Structurally broken files are logged and treated as empty.
        """
        try:
            result = self._codec.load()
        except PersistenceError as e:
            logger.error("Task file unreadable, starting with an empty list: %s", e)
            result = LoadResult()

        self._tasks = list(result.tasks)
        max_id = max((t.id for t in self._tasks), default=0)
        self._next_id = max(self._next_id, max_id + 1)
        logger.info("TaskStore ready tasks=%d next_id=%d", len(self._tasks), self._next_id)
        return result

    def save(self) -> bool:
        try:
            self._codec.save(self._tasks)
        except PersistenceError as e:
            logger.error("Failed to save tasks: %s", e)
            self.save_error = e
            return False
        self.save_error = None
        return True

    def compact(self) -> int:
        """Purge tombstoned tasks. Returns how many were removed."""
        before = len(self._tasks)
        self._tasks = [t for t in self._tasks if not t.deleted]
        return before - len(self._tasks)

    # ---- helpers ----

    def today(self) -> date:
        return self._clock()

    def __len__(self) -> int:
        return len(self._tasks)

    @property
    def next_id(self) -> int:
        return self._next_id

    def _allocate_id(self) -> int:
        nid = self._next_id
        self._next_id += 1
        return nid

    # ---- mutations ----

    def create(
        self,
        title: str,
        description: str,
        completion_date: date,
        priority: Priority,
    ) -> Task:
        title = clean_text(title, "title")
        description = clean_text(description, "description")
        if not isinstance(priority, Priority):
            raise ValidationError(f"unknown priority {priority!r}")
        if not isinstance(completion_date, date):
            raise ValidationError(f"completion date must be a date, got {completion_date!r}")

        today = self.today()
        if completion_date < today:
            raise ValidationError(
                f"completion date {format_date(completion_date)} is in the past"
            )

        task = Task(
            id=self._allocate_id(),
            title=title,
            description=description,
            create_date=today,
            completion_date=completion_date,
            priority=priority,
            status=TaskStatus.NEW,
        )
        self._tasks.append(task)
        logger.info("Task created id=%s priority=%s due=%s", task.id, task.priority.value, completion_date)
        self.save()
        return task

    def find(self, task_id: int) -> Task:
        for task in self._tasks:
            if task.id == task_id and not task.deleted:
                return task
        raise NotFound(task_id)

    def advance_status(self, task_id: int) -> Task:
        task = self.find(task_id)
        task_lifecycle.advance(task)
        logger.info("Task %s status -> %s", task.id, task.status.value)
        self.save()
        return task

    def edit_description(self, task_id: int, text: str) -> Task:
        task = self.find(task_id)
        task_lifecycle.change_description(task, text)
        logger.info("Task %s description updated", task.id)
        self.save()
        return task

    def delete(self, task_id: int) -> Task:
        task = self.find(task_id)
        task_lifecycle.delete(task)
        removed = self.compact()
        logger.info("Task %s deleted (purged=%d)", task.id, removed)
        self.save()
        return task

    def rate(self, task_id: int, value: int) -> Task:
        task = self.find(task_id)
        task.rate(value)
        logger.info("Task %s rated %s", task.id, value)
        self.save()
        return task

    # ---- queries ----

    def set_sort_order(self, order: SortOrder) -> None:
        self.sort_order = order
        logger.debug("Sort order -> %s", order.value)

    def _active(self) -> list[Task]:
        return [t for t in self._tasks if not t.deleted]

    def list_tasks(self, order: SortOrder | None = None) -> list[Task]:
        return sort_tasks(self._active(), order or self.sort_order)

    def _select(self, criterion: Criterion) -> list[Task]:
        today = self.today()
        return sort_tasks(
            (t for t in self._active() if criterion.matches(t, today)),
            self.sort_order,
        )

    def filter_tasks(self, criterion: Criterion) -> list[Task]:
        """Filter by PriorityIs, StatusIs or Overdue."""
        return self._select(criterion)

    def search_tasks(self, criterion: Criterion) -> list[Task]:
        """Search by TextContains, CompletionOn, CompletionBetween, CompletionInMonth or PriorityIs."""
        found = self._select(criterion)
        logger.debug("Search %r -> %d tasks", criterion, len(found))
        return found
