# tests/test_task_registry.py

from __future__ import annotations

import pytest

from task_ledger.core.clock import ManualClock
from task_ledger.tasks.task_errors import InvalidDueDate, InvalidIndex, InvalidPriority, NotOwner, TaskDeleted
from task_ledger.tasks.task_models import TaskStatus
from task_ledger.tasks.task_registry import TaskRegistry

from .fakes import DAY, T0


def test_two_owner_walkthrough(seeded: TaskRegistry, clock: ManualClock) -> None:
    reg = seeded

    reg.remove_task("bob", 4)
    with pytest.raises(TaskDeleted, match="task deleted"):
        reg.get_task(4)

    with pytest.raises(InvalidPriority, match="priority must be between 1 and 3"):
        reg.add_task("alice", T0, "Title task 3 Alice", "Description task 3 from Alice", 10)

    _, title, *_ = reg.get_task(0)
    assert title == "Title task 1 Alice"

    assert len(reg.list_my_tasks("alice")) == 2
    assert len(reg.list_my_today_tasks("alice")) == 1

    clock.advance(DAY)
    assert len(reg.list_my_today_tasks("bob")) == 2

    with pytest.raises(InvalidPriority):
        reg.edit_task("alice", 0, T0, "Title task 3 Alice", "Description task 3 from Alice", 10)
    with pytest.raises(NotOwner, match="only owner of the task"):
        reg.edit_task("bob", 0, T0, "Title task 3 Alice", "Description task 3 from Alice", 2)
    with pytest.raises(InvalidIndex, match="not a valid index"):
        reg.edit_task("alice", 10, T0, "Title task 3 Alice", "Description task 3 from Alice", 2)

    reg.edit_task("alice", 0, T0, "Title task 3 Alice", "Description task 3 from Alice", 2)
    assert reg.get_task(0)[5] == 2

    # Moving Bob's tasks back to yesterday drops them out of today's view.
    reg.edit_task("bob", 2, T0, "Title task 1 Bob", "Description task 1 from Bob", 1)
    assert len(reg.list_my_today_tasks("bob")) == 1
    reg.edit_task("bob", 3, T0, "Title task 1 Bob", "Description task 1 from Bob", 1)
    assert len(reg.list_my_today_tasks("bob")) == 0

    reg.set_task_as_complete("alice", 0)
    assert reg.get_task(0)[4] == 1
    assert reg.get_task(0)[4] is TaskStatus.COMPLETED


def test_ids_are_dense_and_survive_deletion(registry: TaskRegistry) -> None:
    ids = [registry.add_task("alice", T0, f"t{i}", "", 1) for i in range(3)]
    assert ids == [0, 1, 2]

    registry.remove_task("alice", 1)
    assert registry.add_task("alice", T0, "t3", "", 1) == 3
    assert registry.task_count() == 4


def test_get_task_returns_full_tuple_for_any_caller(registry: TaskRegistry) -> None:
    registry.add_task("alice", T0 + 5, "Buy milk", "2 liters", 3)
    assert registry.get_task(0) == (T0 + 5, "Buy milk", "2 liters", "alice", TaskStatus.OPEN, 3)


def test_rejected_add_writes_nothing(registry: TaskRegistry) -> None:
    for bad in (0, 4, -1, 10, True, 2.0, "2", None):
        with pytest.raises(InvalidPriority):
            registry.add_task("alice", T0, "x", "", bad)  # type: ignore[arg-type]
    assert registry.task_count() == 0
    assert registry.list_my_tasks("alice") == []


def test_rejected_edit_leaves_record_unchanged(registry: TaskRegistry) -> None:
    registry.add_task("alice", T0, "original", "desc", 2)
    before = registry.get_task(0)

    with pytest.raises(InvalidPriority):
        registry.edit_task("alice", 0, T0 + DAY, "changed", "changed", 10)

    assert registry.get_task(0) == before


@pytest.mark.parametrize("bad_due", [2**63, -(2**63) - 1, 10**30, True, "0", 1.5, None])
def test_out_of_range_due_date_is_rejected_before_writing(registry: TaskRegistry, bad_due) -> None:
    with pytest.raises(InvalidDueDate):
        registry.add_task("alice", bad_due, "x", "", 1)  # type: ignore[arg-type]
    assert registry.task_count() == 0

    registry.add_task("alice", T0, "original", "desc", 2)
    before = registry.get_task(0)
    with pytest.raises(InvalidDueDate):
        registry.edit_task("alice", 0, bad_due, "changed", "changed", 1)  # type: ignore[arg-type]
    assert registry.get_task(0) == before


def test_int64_bounds_are_storable_due_dates(registry: TaskRegistry) -> None:
    lo = registry.add_task("alice", -(2**63), "min", "", 1)
    hi = registry.add_task("alice", 2**63 - 1, "max", "", 1)
    assert registry.get_task(lo)[0] == -(2**63)
    assert registry.get_task(hi)[0] == 2**63 - 1


def test_priority_is_checked_before_due_date(registry: TaskRegistry) -> None:
    with pytest.raises(InvalidPriority):
        registry.add_task("alice", 2**63, "x", "", 10)


def test_existence_and_ownership_are_checked_before_priority(seeded: TaskRegistry) -> None:
    with pytest.raises(NotOwner):
        seeded.edit_task("bob", 0, T0, "x", "", 10)
    with pytest.raises(InvalidIndex):
        seeded.edit_task("bob", 99, T0, "x", "", 10)


@pytest.mark.parametrize("bad_id", [5, 10, -1, 2**63, -(2**63) - 1, 10**20, True, "0"])
def test_unknown_ids_are_invalid_index(seeded: TaskRegistry, bad_id) -> None:
    with pytest.raises(InvalidIndex):
        seeded.get_task(bad_id)
    with pytest.raises(InvalidIndex):
        seeded.remove_task("alice", bad_id)
    with pytest.raises(InvalidIndex):
        seeded.set_task_as_complete("alice", bad_id)


def test_only_owner_can_mutate(seeded: TaskRegistry) -> None:
    for task_id in (0, 1):
        with pytest.raises(NotOwner):
            seeded.edit_task("bob", task_id, T0, "x", "", 1)
        with pytest.raises(NotOwner):
            seeded.remove_task("bob", task_id)
        with pytest.raises(NotOwner):
            seeded.set_task_as_complete("bob", task_id)

    assert [t.status for t in seeded.list_my_tasks("alice")] == [TaskStatus.OPEN, TaskStatus.OPEN]


def test_soft_delete_is_terminal(seeded: TaskRegistry, store) -> None:
    seeded.remove_task("bob", 3)

    with pytest.raises(TaskDeleted):
        seeded.get_task(3)
    with pytest.raises(TaskDeleted):
        seeded.edit_task("bob", 3, T0, "resurrect", "", 1)
    with pytest.raises(TaskDeleted):
        seeded.set_task_as_complete("bob", 3)
    with pytest.raises(TaskDeleted):
        seeded.remove_task("bob", 3)

    # Non-owners still learn only that it isn't theirs.
    with pytest.raises(NotOwner):
        seeded.remove_task("alice", 3)

    assert [t.id for t in seeded.list_my_tasks("bob")] == [2, 4]

    # Physically the record and its index entry are still there.
    assert store.list_owner_ids("bob") == [2, 3, 4]
    raw = store.get_task(3)
    assert raw is not None
    assert raw.status == TaskStatus.DELETED
    assert raw.title == "Title task 2 Bob"


def test_completed_task_can_be_edited_and_removed(registry: TaskRegistry) -> None:
    registry.add_task("alice", T0, "write report", "", 1)
    registry.set_task_as_complete("alice", 0)

    registry.edit_task("alice", 0, T0 + DAY, "write final report", "v2", 3)
    assert registry.get_task(0) == (T0 + DAY, "write final report", "v2", "alice", TaskStatus.COMPLETED, 3)

    registry.remove_task("alice", 0)
    with pytest.raises(TaskDeleted):
        registry.get_task(0)


def test_complete_twice_is_idempotent(registry: TaskRegistry) -> None:
    registry.add_task("alice", T0, "t", "", 1)
    registry.set_task_as_complete("alice", 0)
    registry.set_task_as_complete("alice", 0)
    assert registry.get_task(0)[4] == TaskStatus.COMPLETED


def test_edit_never_changes_owner_or_status(registry: TaskRegistry) -> None:
    registry.add_task("alice", T0, "t", "", 1)
    registry.edit_task("alice", 0, T0, "t2", "d2", 2)
    record = registry.get_record(0)
    assert record.owner == "alice"
    assert record.status == TaskStatus.OPEN
    assert record.id == 0


def test_listing_keeps_creation_order_and_owner_separation(registry: TaskRegistry) -> None:
    registry.add_task("alice", T0 + 3 * DAY, "a0", "", 1)
    registry.add_task("bob", T0, "b0", "", 1)
    registry.add_task("alice", T0, "a1", "", 3)
    registry.add_task("alice", T0 + DAY, "a2", "", 2)

    assert [t.title for t in registry.list_my_tasks("alice")] == ["a0", "a1", "a2"]
    assert [t.title for t in registry.list_my_tasks("bob")] == ["b0"]
    assert registry.list_my_tasks("carol") == []
    assert all(t.owner == "alice" for t in registry.list_my_tasks("alice"))


def test_today_uses_call_time_clock(registry: TaskRegistry, clock: ManualClock) -> None:
    day_start = T0 - 12 * 3600
    registry.add_task("alice", day_start, "start of day", "", 1)
    registry.add_task("alice", day_start + DAY - 1, "end of day", "", 1)
    registry.add_task("alice", day_start + DAY, "tomorrow", "", 1)
    registry.add_task("alice", day_start - 1, "yesterday", "", 1)

    assert [t.title for t in registry.list_my_today_tasks("alice")] == ["start of day", "end of day"]

    clock.advance(DAY)
    assert [t.title for t in registry.list_my_today_tasks("alice")] == ["tomorrow"]

    clock.set(day_start + 3 * DAY)
    assert registry.list_my_today_tasks("alice") == []


def test_today_excludes_deleted_but_keeps_completed(registry: TaskRegistry) -> None:
    registry.add_task("alice", T0, "open", "", 1)
    registry.add_task("alice", T0, "done", "", 1)
    registry.add_task("alice", T0, "gone", "", 1)
    registry.set_task_as_complete("alice", 1)
    registry.remove_task("alice", 2)

    assert [t.title for t in registry.list_my_today_tasks("alice")] == ["open", "done"]


def test_listed_tasks_are_detached_copies(registry: TaskRegistry) -> None:
    registry.add_task("alice", T0, "t", "", 1)
    listed = registry.list_my_tasks("alice")[0]
    listed.owner = "mallory"
    listed.status = TaskStatus.DELETED

    assert registry.get_record(0).owner == "alice"
    assert registry.get_record(0).status == TaskStatus.OPEN
