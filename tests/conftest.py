# tests/conftest.py

from __future__ import annotations

from datetime import date
from pathlib import Path
from types import SimpleNamespace

import pytest

from task_tracker.core.state import AppState
from task_tracker.tasks.task_codec import JsonTaskCodec
from task_tracker.tasks.task_query import SortOrder
from task_tracker.tasks.task_store import TaskStore

from .fakes import FixedClock

TODAY = date(2026, 3, 10)


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with bootstrap and AppState.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="task-tracker-test",
        log_level="WARNING",
        log_to_file=False,
        data_dir=tmp_path,
        tasks_path=tmp_path / "tasks.json",
        default_sort=SortOrder.PRIORITY,
    )


@pytest.fixture()
def clock() -> FixedClock:
    return FixedClock(TODAY)


@pytest.fixture()
def store(settings: SimpleNamespace, clock: FixedClock) -> TaskStore:
    """
    TaskStore backed by a real JSON file under tmp_path.

    The codec is real on purpose: flushing after every mutation is part of
    what we want to test.
    """
    s = TaskStore(JsonTaskCodec(settings.tasks_path), clock=clock)
    s.load()
    return s


@pytest.fixture()
def state(settings: SimpleNamespace, store: TaskStore) -> AppState:
    return AppState(settings=settings, store=store)
