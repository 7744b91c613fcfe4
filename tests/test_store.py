# tests/test_store.py

import pytest
from sqlalchemy.exc import OperationalError

from errors import StorageFailure
from store import TaskStore


def test_create_assigns_id_and_equal_timestamps(store: TaskStore) -> None:
    task = store.create("Write tests")

    assert task.id is not None and task.id > 0
    assert task.text == "Write tests"
    assert task.completed is False
    assert task.created_at == task.updated_at


def test_create_returns_stored_row(store: TaskStore) -> None:
    task = store.create("Persist me")
    stored = store.get_by_id(task.id)

    assert stored is not None
    assert stored.text == task.text
    assert stored.created_at == task.created_at
    assert stored.updated_at == task.updated_at


def test_ids_are_not_reused_after_delete(store: TaskStore) -> None:
    first = store.create("one")
    second = store.create("two")
    assert store.delete(second.id)

    third = store.create("three")
    assert third.id > second.id > first.id


def test_list_all_is_newest_first(store: TaskStore) -> None:
    created = [store.create(f"task {i}") for i in range(4)]

    listed = store.list_all()
    assert [t.id for t in listed] == [t.id for t in reversed(created)]


def test_get_by_id_missing_returns_none(store: TaskStore) -> None:
    assert store.get_by_id(999) is None


def test_update_completed_only(store: TaskStore) -> None:
    task = store.create("Finish report")

    updated = store.update(task.id, completed=True)

    assert updated is not None
    assert updated.completed is True
    assert updated.text == "Finish report"
    assert updated.created_at == task.created_at
    assert updated.updated_at > task.updated_at


def test_update_false_is_applied(store: TaskStore) -> None:
    task = store.create("Toggle")
    store.update(task.id, completed=True)

    updated = store.update(task.id, completed=False)
    assert updated.completed is False


def test_update_trims_text(store: TaskStore) -> None:
    task = store.create("Old")

    updated = store.update(task.id, text="  New text  ")
    assert updated.text == "New text"
    assert updated.completed is False


def test_update_without_fields_refreshes_timestamp_only(store: TaskStore) -> None:
    task = store.create("Untouched")

    updated = store.update(task.id)

    assert updated.text == task.text
    assert updated.completed == task.completed
    assert updated.created_at == task.created_at
    assert updated.updated_at > task.updated_at


def test_update_with_same_values_still_refreshes_timestamp(store: TaskStore) -> None:
    task = store.create("Same")

    updated = store.update(task.id, text="Same", completed=False)
    assert updated.updated_at > task.updated_at


def test_update_missing_returns_none(store: TaskStore) -> None:
    assert store.update(42, completed=True) is None


def test_delete(store: TaskStore) -> None:
    task = store.create("Remove me")
    keep = store.create("Keep me")

    assert store.delete(task.id) is True
    assert store.get_by_id(task.id) is None
    assert [t.id for t in store.list_all()] == [keep.id]


def test_delete_missing_returns_false(store: TaskStore) -> None:
    assert store.delete(12345) is False


def test_stats_empty_table(store: TaskStore) -> None:
    stats = store.stats()
    assert (stats.total, stats.completed, stats.pending) == (0, 0, 0)


def test_stats_counts(store: TaskStore) -> None:
    tasks = [store.create(f"t{i}") for i in range(5)]
    store.update(tasks[0].id, completed=True)
    store.update(tasks[3].id, completed=True)

    stats = store.stats()
    assert stats.total == 5
    assert stats.completed == 2
    assert stats.pending == 3
    assert stats.total == stats.completed + stats.pending == len(store.list_all())


def test_close_is_idempotent(store: TaskStore) -> None:
    store.close()
    store.close()


def test_storage_fault_raises_storage_failure(store: TaskStore, monkeypatch: pytest.MonkeyPatch) -> None:
    def broken_exec(self, *args, **kwargs):
        raise OperationalError("SELECT", {}, Exception("disk I/O error"))

    monkeypatch.setattr("sqlmodel.Session.exec", broken_exec)

    with pytest.raises(StorageFailure) as excinfo:
        store.list_all()

    assert excinfo.value.message == "Database error"
    assert "disk I/O error" in excinfo.value.detail


def test_timestamps_round_trip_timezone_aware(store: TaskStore, clock) -> None:
    start = clock.now
    task = store.create("aware")

    stored = store.get_by_id(task.id)
    assert stored.created_at == stored.updated_at == task.created_at
    assert stored.created_at.replace(tzinfo=None) == start.replace(tzinfo=None)


@pytest.mark.parametrize("task_id", [2**63, -(2**63) - 1, 10**30])
def test_out_of_range_ids_are_missing(store: TaskStore, task_id: int) -> None:
    store.create("in range")

    assert store.get_by_id(task_id) is None
    assert store.update(task_id, completed=True) is None
    assert store.delete(task_id) is False
