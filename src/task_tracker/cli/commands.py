# src/task_tracker/cli/commands.py

from __future__ import annotations

import logging
import shlex
from collections.abc import Callable

from ..core.state import AppState
from ..tasks.task_api import format_task, format_tasks, parse_int, parse_priority, parse_status
from ..tasks.task_errors import TaskError
from ..tasks.task_models import parse_date
from ..tasks.task_query import (
    CompletionBetween,
    CompletionInMonth,
    CompletionOn,
    Criterion,
    Overdue,
    PriorityIs,
    SortOrder,
    StatusIs,
    TextContains,
)

CommandHandler = Callable[[AppState, list[str]], str]

logger = logging.getLogger(__name__)


class UsageError(Exception):
    """Wrong number or shape of command arguments."""


class CommandRegistry:
    """Slash-command registry used by the console connector (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(self, state: AppState, line: str) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        try:
            parts = shlex.split(line[1:])
        except ValueError as e:
            return f"Cannot parse command: {e}."
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        # each failed save records a new error object; read-only commands leave it as is
        error_before = state.store.save_error
        try:
            reply = handler(state, args)
        except UsageError as e:
            return f"Usage: /{name} {e}"
        except TaskError as e:
            logger.debug("/%s failed: %s", name, e)
            return f"Error: {e}"

        save_error = state.store.save_error
        if save_error is not None and save_error is not error_before:
            reply += f"\nWarning: changes are kept in memory but were not saved ({save_error})."
        return reply

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        lines.append("  /exit - Save and quit.")
        return "\n".join(lines)


registry = CommandRegistry()


def _task_id(args: list[str], usage: str) -> int:
    if not args:
        raise UsageError(usage)
    return parse_int(args[0], "task id")


def _listing(state: AppState, tasks) -> str:
    return format_tasks(tasks, state.store.today())


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_list(state: AppState, args: list[str]) -> str:
    return _listing(state, state.store.list_tasks())


def cmd_show(state: AppState, args: list[str]) -> str:
    task = state.store.find(_task_id(args, "<id>"))
    return format_task(task, state.store.today())


def cmd_add(state: AppState, args: list[str]) -> str:
    """
    /add <title> <description> <DD.MM.YYYY> <priority>
    Quote multi-word titles and descriptions.
    """
    if len(args) != 4:
        raise UsageError('"<title>" "<description>" <DD.MM.YYYY> <low|medium|high>')
    title, description, raw_date, raw_priority = args
    task = state.store.create(title, description, parse_date(raw_date), parse_priority(raw_priority))
    return f"Task {task.id} added.\n{format_task(task, state.store.today())}"


def cmd_advance(state: AppState, args: list[str]) -> str:
    task = state.store.advance_status(_task_id(args, "<id>"))
    return f"Task {task.id} is now {task.status.value}."


def cmd_describe(state: AppState, args: list[str]) -> str:
    if len(args) < 2:
        raise UsageError("<id> <new description>")
    task = state.store.edit_description(_task_id(args, "<id>"), " ".join(args[1:]))
    return f"Task {task.id} description updated."


def cmd_delete(state: AppState, args: list[str]) -> str:
    task = state.store.delete(_task_id(args, "<id>"))
    return f"Task {task.id} deleted."


def cmd_rate(state: AppState, args: list[str]) -> str:
    if len(args) != 2:
        raise UsageError("<id> <1-5>")
    task = state.store.rate(_task_id(args, "<id>"), parse_int(args[1], "rating"))
    return f"Task {task.id} rated {task.rating}/5."


def cmd_sort(state: AppState, args: list[str]) -> str:
    if len(args) != 1:
        raise UsageError("<priority|created|title|completion>")
    state.store.set_sort_order(SortOrder.parse(args[0]))
    return f"Sort order changed to {state.store.sort_order.value}.\n{_listing(state, state.store.list_tasks())}"


def _filter_criterion(args: list[str]) -> Criterion:
    usage = "priority <p> | status <s> | overdue"
    if not args:
        raise UsageError(usage)
    kind = args[0].lower()
    rest = " ".join(args[1:])
    if kind == "priority" and rest:
        return PriorityIs(parse_priority(rest))
    if kind == "status" and rest:
        return StatusIs(parse_status(rest))
    if kind == "overdue" and not rest:
        return Overdue()
    raise UsageError(usage)


def cmd_filter(state: AppState, args: list[str]) -> str:
    return _listing(state, state.store.filter_tasks(_filter_criterion(args)))


def _search_criterion(args: list[str]) -> Criterion:
    usage = (
        "text <query> | date <DD.MM.YYYY> | range <DD.MM.YYYY> <DD.MM.YYYY> "
        "| month <1-12> <YYYY> | priority <p>"
    )
    if not args:
        raise UsageError(usage)
    kind = args[0].lower()
    rest = args[1:]
    if kind == "text" and rest:
        return TextContains(" ".join(rest))
    if kind == "date" and len(rest) == 1:
        return CompletionOn(parse_date(rest[0]))
    if kind == "range" and len(rest) == 2:
        return CompletionBetween(parse_date(rest[0]), parse_date(rest[1]))
    if kind == "month" and len(rest) == 2:
        return CompletionInMonth(parse_int(rest[0], "month"), parse_int(rest[1], "year"))
    if kind == "priority" and len(rest) == 1:
        return PriorityIs(parse_priority(rest[0]))
    raise UsageError(usage)


def cmd_search(state: AppState, args: list[str]) -> str:
    return _listing(state, state.store.search_tasks(_search_criterion(args)))


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("list", cmd_list, help_text="Show all tasks in the current sort order.", aliases=["ls"])
registry.register("show", cmd_show, help_text="Show one task: /show <id>.")
registry.register(
    "add", cmd_add, help_text='Add a task: /add "<title>" "<description>" <DD.MM.YYYY> <priority>.'
)
registry.register("advance", cmd_advance, help_text="Move a task forward: new -> in progress -> done.")
registry.register("describe", cmd_describe, help_text="Change the description of a new task.")
registry.register("delete", cmd_delete, help_text="Delete a new task: /delete <id>.", aliases=["rm"])
registry.register("rate", cmd_rate, help_text="Rate a completed task once: /rate <id> <1-5>.")
registry.register("sort", cmd_sort, help_text="Sort by priority | created | title | completion.")
registry.register("filter", cmd_filter, help_text="Filter: priority <p> | status <s> | overdue.")
registry.register(
    "search", cmd_search, help_text="Search: text | date | range | month | priority (see /search)."
)
