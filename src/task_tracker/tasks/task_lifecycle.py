# src/task_tracker/tasks/task_lifecycle.py

"""
Task lifecycle state machine.

Each status has one state object that answers the three lifecycle operations:
- advance: move the status one step forward
- change_description: rewrite the description
- delete: tombstone the task

The state is always looked up from task.status, and a transition only ever
writes task.status through _enter(), so the two cannot drift apart.
A failing operation raises InvalidState before touching the task.
"""

from __future__ import annotations

import logging
from typing import ClassVar

from .task_errors import InvalidState
from .task_models import Task, TaskStatus, clean_text

logger = logging.getLogger(__name__)


class TaskState:
    status: ClassVar[TaskStatus]

    def advance(self, task: Task) -> None:
        raise NotImplementedError

    def change_description(self, task: Task, description: str) -> None:
        raise NotImplementedError

    def delete(self, task: Task) -> None:
        raise NotImplementedError

    def _enter(self, task: Task, target: TaskState) -> None:
        logger.debug("Task %s: %s -> %s", task.id, task.status.value, target.status.value)
        task.status = target.status


class NewState(TaskState):
    status = TaskStatus.NEW

    def advance(self, task: Task) -> None:
        self._enter(task, IN_PROGRESS_STATE)

    def change_description(self, task: Task, description: str) -> None:
        task.description = clean_text(description, "description")

    def delete(self, task: Task) -> None:
        task.deleted = True


class InProgressState(TaskState):
    status = TaskStatus.IN_PROGRESS

    def advance(self, task: Task) -> None:
        self._enter(task, DONE_STATE)

    def change_description(self, task: Task, description: str) -> None:
        raise InvalidState("cannot edit description of in-progress task")

    def delete(self, task: Task) -> None:
        raise InvalidState("cannot delete in-progress task")


class DoneState(TaskState):
    status = TaskStatus.DONE

    def advance(self, task: Task) -> None:
        raise InvalidState("task already complete")

    def change_description(self, task: Task, description: str) -> None:
        raise InvalidState("cannot edit description of completed task")

    def delete(self, task: Task) -> None:
        raise InvalidState("cannot delete completed task")


NEW_STATE = NewState()
IN_PROGRESS_STATE = InProgressState()
DONE_STATE = DoneState()

_STATES: dict[TaskStatus, TaskState] = {
    TaskStatus.NEW: NEW_STATE,
    TaskStatus.IN_PROGRESS: IN_PROGRESS_STATE,
    TaskStatus.DONE: DONE_STATE,
}


def state_for(status: TaskStatus) -> TaskState:
    return _STATES[status]


def advance(task: Task) -> None:
    state_for(task.status).advance(task)


def change_description(task: Task, description: str) -> None:
    state_for(task.status).change_description(task, description)


def delete(task: Task) -> None:
    state_for(task.status).delete(task)
