# tests/test_task_store.py

from __future__ import annotations

from dataclasses import replace
from datetime import date

import pytest

from task_tracker.tasks.task_codec import JsonTaskCodec
from task_tracker.tasks.task_errors import (
    AlreadySet,
    InvalidState,
    NotFound,
    OutOfRange,
    ValidationError,
)
from task_tracker.tasks.task_models import Priority, Task, TaskStatus
from task_tracker.tasks.task_query import (
    CompletionBetween,
    CompletionInMonth,
    CompletionOn,
    Overdue,
    PriorityIs,
    SortOrder,
    StatusIs,
    TextContains,
)
from task_tracker.tasks.task_store import TaskStore

from .conftest import TODAY
from .fakes import FailingCodec, FixedClock, InMemoryCodec


def add(store: TaskStore, title: str, priority: Priority = Priority.MEDIUM, due: date = date(2026, 4, 1), desc: str = "details") -> Task:
    return store.create(title, desc, due, priority)


# ---- create / find ----


def test_create_assigns_sequential_ids_and_defaults(store: TaskStore) -> None:
    a = add(store, "  First  ", desc="  one  ")
    b = add(store, "Second")

    assert (a.id, b.id) == (1, 2)
    assert a.title == "First"
    assert a.description == "one"
    assert a.create_date == TODAY
    assert a.status == TaskStatus.NEW
    assert a.rating is None
    assert store.find(2) is b


@pytest.mark.parametrize(
    ("title", "desc", "due", "priority"),
    [
        ("", "d", date(2026, 4, 1), Priority.LOW),
        ("   ", "d", date(2026, 4, 1), Priority.LOW),
        ("t", " ", date(2026, 4, 1), Priority.LOW),
        ("t", "d", date(2026, 3, 9), Priority.LOW),
        ("t", "d", date(2026, 4, 1), "HIGH"),
    ],
)
def test_create_rejects_invalid_input(store: TaskStore, title, desc, due, priority) -> None:
    with pytest.raises(ValidationError):
        store.create(title, desc, due, priority)
    assert len(store) == 0
    assert store.next_id == 1


def test_create_accepts_today_as_due_date(store: TaskStore) -> None:
    task = add(store, "Due today", due=TODAY)
    assert task.completion_date == TODAY


def test_find_unknown_id(store: TaskStore) -> None:
    add(store, "Only")
    with pytest.raises(NotFound) as exc:
        store.find(42)
    assert exc.value.task_id == 42


# ---- lifecycle through the store ----


def test_advance_status_to_done_then_rate(store: TaskStore) -> None:
    task = add(store, "Ship it")
    store.advance_status(task.id)
    assert task.status == TaskStatus.IN_PROGRESS
    store.advance_status(task.id)
    assert task.status == TaskStatus.DONE

    with pytest.raises(InvalidState):
        store.advance_status(task.id)

    store.rate(task.id, 5)
    assert task.rating == 5
    with pytest.raises(AlreadySet):
        store.rate(task.id, 3)
    assert task.rating == 5


def test_rate_rules_via_store(store: TaskStore) -> None:
    task = add(store, "Rate me")
    with pytest.raises(InvalidState):
        store.rate(task.id, 3)
    store.advance_status(task.id)
    store.advance_status(task.id)
    with pytest.raises(OutOfRange):
        store.rate(task.id, 9)
    assert task.rating is None


def test_edit_description_only_while_new(store: TaskStore) -> None:
    task = add(store, "Edit me", desc="old")
    store.edit_description(task.id, "new")
    assert task.description == "new"

    store.advance_status(task.id)
    with pytest.raises(InvalidState):
        store.edit_description(task.id, "newer")
    assert task.description == "new"


def test_delete_removes_immediately_and_never_reuses_id(store: TaskStore) -> None:
    a = add(store, "Keep")
    b = add(store, "Drop")

    store.delete(b.id)

    assert b.deleted is True
    assert [t.id for t in store.list_tasks()] == [a.id]
    assert len(store) == 1
    with pytest.raises(NotFound):
        store.find(b.id)

    c = add(store, "Later")
    assert c.id == 3


def test_delete_rejected_for_started_task(store: TaskStore) -> None:
    task = add(store, "Busy")
    store.advance_status(task.id)
    before = replace(task)

    with pytest.raises(InvalidState, match="in-progress"):
        store.delete(task.id)

    assert task == before
    assert store.find(task.id) is task


def test_unknown_id_for_every_mutation(store: TaskStore) -> None:
    for op in (
        lambda: store.advance_status(99),
        lambda: store.edit_description(99, "x"),
        lambda: store.delete(99),
        lambda: store.rate(99, 3),
    ):
        with pytest.raises(NotFound):
            op()


# ---- flushing ----


def test_every_successful_mutation_is_flushed() -> None:
    codec = InMemoryCodec()
    store = TaskStore(codec, clock=FixedClock(TODAY))
    store.load()

    task = add(store, "Flush")
    store.edit_description(task.id, "changed")
    store.advance_status(task.id)
    store.advance_status(task.id)
    store.rate(task.id, 2)

    assert len(codec.saves) == 5
    last = codec.saves[-1][0]
    assert last.description == "changed"
    assert last.status == TaskStatus.DONE
    assert last.rating == 2


def test_failed_operation_is_not_flushed() -> None:
    codec = InMemoryCodec()
    store = TaskStore(codec, clock=FixedClock(TODAY))
    task = add(store, "Once")
    store.advance_status(task.id)

    with pytest.raises(InvalidState):
        store.delete(task.id)
    assert len(codec.saves) == 2


def test_write_failure_keeps_memory_intact() -> None:
    codec = FailingCodec(fail_save=True)
    store = TaskStore(codec, clock=FixedClock(TODAY))
    store.load()

    task = add(store, "Unsaved")
    assert store.find(task.id) is task
    assert store.save_error is not None
    assert codec.save_calls == 1

    store.advance_status(task.id)
    assert task.status == TaskStatus.IN_PROGRESS

    codec.fail_save = False
    assert store.save() is True
    assert store.save_error is None


def test_unreadable_file_starts_empty() -> None:
    store = TaskStore(FailingCodec(fail_load=True, fail_save=False), clock=FixedClock(TODAY))
    result = store.load()
    assert result.tasks == []
    assert len(store) == 0
    assert add(store, "Fresh").id == 1


# ---- sorting ----


def test_priority_sort_is_descending_and_stable(store: TaskStore) -> None:
    low = add(store, "a", Priority.LOW)
    high1 = add(store, "b", Priority.HIGH)
    medium = add(store, "c", Priority.MEDIUM)
    high2 = add(store, "d", Priority.HIGH)

    assert store.list_tasks() == [high1, high2, medium, low]


def test_other_orders_are_stable(clock: FixedClock) -> None:
    store = TaskStore(InMemoryCodec(), clock=clock)
    a = add(store, "beta", due=date(2026, 5, 1))
    b = add(store, "alpha", due=date(2026, 4, 1))
    clock.advance(1)
    c = add(store, "beta", due=date(2026, 4, 1))
    d = add(store, "Zulu", due=date(2026, 5, 1))

    assert store.list_tasks(SortOrder.CREATED) == [a, b, c, d]
    # plain string comparison: uppercase sorts before lowercase
    assert store.list_tasks(SortOrder.TITLE) == [d, b, a, c]
    assert store.list_tasks(SortOrder.COMPLETION) == [b, c, a, d]


def test_sort_order_is_session_state(store: TaskStore) -> None:
    late = add(store, "late", Priority.HIGH, due=date(2026, 6, 1))
    early = add(store, "early", Priority.LOW, due=date(2026, 4, 1))

    assert store.list_tasks() == [late, early]

    store.set_sort_order(SortOrder.COMPLETION)
    assert store.list_tasks() == [early, late]
    assert store.filter_tasks(StatusIs(TaskStatus.NEW)) == [early, late]
    assert store.search_tasks(TextContains("a")) == [early, late]

    # listing never reorders the stored collection
    assert store.list_tasks(SortOrder.PRIORITY) == [late, early]
    assert store.list_tasks() == [early, late]


# ---- filter / search ----


def test_filters(store: TaskStore, clock: FixedClock) -> None:
    a = add(store, "a", Priority.HIGH, due=date(2026, 3, 11))
    b = add(store, "b", Priority.LOW, due=date(2026, 3, 20))
    c = add(store, "c", Priority.HIGH, due=date(2026, 3, 11))
    store.advance_status(c.id)
    store.advance_status(c.id)

    assert store.filter_tasks(PriorityIs(Priority.HIGH)) == [a, c]
    assert store.filter_tasks(StatusIs(TaskStatus.DONE)) == [c]
    assert store.filter_tasks(Overdue()) == []

    clock.advance(5)
    # c is past due too, but DONE tasks are never overdue
    assert store.filter_tasks(Overdue()) == [a]
    assert b not in store.filter_tasks(Overdue())


def test_search_text_is_case_insensitive(store: TaskStore) -> None:
    a = add(store, "Buy MILK", desc="at the store")
    b = add(store, "Call mom", desc="About the milkman")
    add(store, "Other", desc="nothing")

    assert store.search_tasks(TextContains("milk")) == [a, b]
    assert store.search_tasks(TextContains("STORE")) == [a]
    with pytest.raises(ValidationError):
        TextContains("  ")


def test_search_by_completion_dates(store: TaskStore) -> None:
    a = add(store, "a", due=date(2026, 3, 31))
    b = add(store, "b", due=date(2026, 4, 1))
    c = add(store, "c", due=date(2026, 4, 30))
    d = add(store, "d", due=date(2027, 4, 15))

    assert store.search_tasks(CompletionOn(date(2026, 4, 1))) == [b]
    assert store.search_tasks(CompletionBetween(date(2026, 3, 31), date(2026, 4, 30))) == [a, b, c]
    assert store.search_tasks(CompletionInMonth(4, 2026)) == [b, c]
    assert store.search_tasks(CompletionInMonth(4, 2027)) == [d]


def test_search_by_priority(store: TaskStore) -> None:
    add(store, "a", Priority.LOW)
    b = add(store, "b", Priority.HIGH)
    assert store.search_tasks(PriorityIs(Priority.HIGH)) == [b]


def test_invalid_search_criteria() -> None:
    with pytest.raises(ValidationError):
        CompletionBetween(date(2026, 5, 1), date(2026, 4, 1))
    with pytest.raises(ValidationError):
        CompletionInMonth(13, 2026)
    with pytest.raises(ValidationError):
        CompletionInMonth(0, 2026)


def test_sort_order_parse() -> None:
    assert SortOrder.parse("Title") == SortOrder.TITLE
    assert SortOrder.parse("bogus", default=SortOrder.PRIORITY) == SortOrder.PRIORITY
    with pytest.raises(ValidationError):
        SortOrder.parse("bogus")


# ---- restore ----


def test_ids_after_restore_exceed_restored_ids(settings, clock: FixedClock) -> None:
    first = TaskStore(JsonTaskCodec(settings.tasks_path), clock=clock)
    first.load()
    for title in ("a", "b", "c"):
        add(first, title)
    first.delete(1)

    second = TaskStore(JsonTaskCodec(settings.tasks_path), clock=clock)
    second.load()
    assert [t.id for t in second.list_tasks()] == [2, 3]

    new = add(second, "d")
    assert new.id == 4
