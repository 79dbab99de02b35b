# src/task_tracker/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires the JSON codec into the TaskStore and loads it.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import date

from ..config import get_settings
from ..core.state import AppState
from ..tasks.task_codec import JsonTaskCodec
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.tasks_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None, clock: Callable[[], date] = date.today) -> AppState:
    """
    Create AppState from the provided settings and load the task file.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    store = TaskStore(
        JsonTaskCodec(settings.tasks_path),
        clock=clock,
        sort_order=settings.default_sort,
    )
    result = store.load()
    if result.skipped:
        logger.warning("%d malformed task records were skipped.", len(result.skipped))

    return AppState(settings=settings, store=store)


def shutdown(state: AppState) -> None:
    """Final flush; failures are logged, never raised."""
    if not state.store.save():
        logger.error("Final save failed; last changes may be lost.")
