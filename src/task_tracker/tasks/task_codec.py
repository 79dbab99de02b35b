# src/task_tracker/tasks/task_codec.py

from __future__ import annotations

import contextlib
import json
import logging
import os
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .task_errors import PersistenceError, ValidationError
from .task_models import (
    RATING_MAX,
    RATING_MIN,
    Priority,
    Task,
    TaskStatus,
    format_date,
    parse_date,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SkippedRecord:
    """Diagnostic for a record that was dropped during load."""

    index: int
    title: str | None
    reason: str


@dataclass(slots=True)
class LoadResult:
    tasks: list[Task] = field(default_factory=list)
    skipped: list[SkippedRecord] = field(default_factory=list)


class _BadRecord(Exception):
    pass


class JsonTaskCodec:
    """
    JSON file codec for the task collection.

    File shape: a JSON array of objects with the keys
      id, title, description, completionDate, createDate, priority, status
    plus an optional rating. Dates are DD.MM.YYYY strings.

    Load validates every record on its own; a bad record is skipped with a
    diagnostic instead of failing the whole file. Save is a full replacement
    written to a temp file and moved into place with os.replace().
    """

    def __init__(self, path: str | Path = "tasks.json") -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    # ---- encoding ----

    @staticmethod
    def encode_task(task: Task) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": task.id,
            "title": task.title,
            "description": task.description,
            "completionDate": format_date(task.completion_date),
            "createDate": format_date(task.create_date),
            "priority": task.priority.value,
            "status": task.status.value,
        }
        if task.rating is not None:
            data["rating"] = task.rating
        return data

    @staticmethod
    def decode_task(raw: Any) -> Task:
        """Build a Task from one record, raising _BadRecord with a reason."""
        if not isinstance(raw, dict):
            raise _BadRecord(f"record is {type(raw).__name__}, not an object")

        task_id = raw.get("id")
        if isinstance(task_id, bool) or not isinstance(task_id, int) or task_id < 1:
            raise _BadRecord(f"invalid id {task_id!r}")

        title = raw.get("title")
        description = raw.get("description")
        if not isinstance(title, str) or not title.strip():
            raise _BadRecord("missing title")
        if not isinstance(description, str) or not description.strip():
            raise _BadRecord("missing description")

        dates = {}
        for key in ("completionDate", "createDate"):
            value = raw.get(key)
            if not isinstance(value, str):
                raise _BadRecord(f"missing {key}")
            try:
                dates[key] = parse_date(value)
            except ValidationError as e:
                raise _BadRecord(f"bad {key}: {e}") from e

        try:
            priority = Priority(raw.get("priority"))
        except ValueError:
            raise _BadRecord(f"unknown priority {raw.get('priority')!r}") from None
        try:
            status = TaskStatus(raw.get("status"))
        except ValueError:
            raise _BadRecord(f"unknown status {raw.get('status')!r}") from None

        rating = raw.get("rating")
        if rating is not None:
            if isinstance(rating, bool) or not isinstance(rating, int):
                raise _BadRecord(f"invalid rating {rating!r}")
            if not RATING_MIN <= rating <= RATING_MAX:
                raise _BadRecord(f"rating {rating} out of range")
            if status != TaskStatus.DONE:
                raise _BadRecord(f"rating on a {status.value} task")

        return Task(
            id=task_id,
            title=title.strip(),
            description=description.strip(),
            create_date=dates["createDate"],
            completion_date=dates["completionDate"],
            priority=priority,
            status=status,
            rating=rating,
        )

    # ---- public API ----

    def load(self) -> LoadResult:
        """
        Read and validate the task file.

        A missing file is an empty collection. Content that is not a JSON array
        raises PersistenceError; individual bad records are skipped.
        """
        result = LoadResult()
        if not self._path.exists():
            logger.info("Task file %s does not exist yet; starting empty.", self._path)
            return result

        try:
            with open(self._path, encoding="utf-8") as f:
                text = f.read()
        except UnicodeDecodeError as e:
            raise PersistenceError(self._path, f"not valid UTF-8: {e}") from e
        except OSError as e:
            raise PersistenceError(self._path, f"cannot read: {e}") from e

        if not text.strip():
            return result

        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise PersistenceError(self._path, f"malformed JSON: {e}") from e
        except RecursionError as e:
            raise PersistenceError(self._path, "JSON nested too deeply") from e

        if not isinstance(data, list):
            raise PersistenceError(self._path, f"expected a list of tasks, got {type(data).__name__}")

        seen_ids: set[int] = set()
        for idx, raw in enumerate(data):
            title = raw.get("title") if isinstance(raw, dict) else None
            try:
                task = self.decode_task(raw)
                if task.id in seen_ids:
                    raise _BadRecord(f"duplicate id {task.id}")
            except _BadRecord as e:
                skipped = SkippedRecord(
                    index=idx,
                    title=title if isinstance(title, str) else None,
                    reason=str(e),
                )
                logger.warning(
                    "Skipping task record #%d (%s): %s", idx, skipped.title or "untitled", skipped.reason
                )
                result.skipped.append(skipped)
                continue
            seen_ids.add(task.id)
            result.tasks.append(task)

        logger.info(
            "Loaded %d tasks from %s (%d skipped)", len(result.tasks), self._path, len(result.skipped)
        )
        return result

    def save(self, tasks: Iterable[Task]) -> None:
        payload = [self.encode_task(t) for t in tasks]
        text = json.dumps(payload, ensure_ascii=False, indent=2) + "\n"

        tmp = self._path.with_name(self._path.name + ".tmp")
        try:
            # encode up front: a lone surrogate must fail before any file is touched
            data = text.encode("utf-8")
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp, "wb") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp, self._path)
        except (OSError, UnicodeEncodeError) as e:
            with contextlib.suppress(OSError):
                tmp.unlink(missing_ok=True)
            raise PersistenceError(self._path, f"cannot write: {e}") from e

        logger.debug("Saved %d tasks to %s", len(payload), self._path)
