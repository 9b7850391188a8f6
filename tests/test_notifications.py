# tests/test_notifications.py

from __future__ import annotations

import pytest

from taskdeck.tasks.notifications import NotificationLog
from taskdeck.tasks.task_store import TaskStore

from .fakes import FakeClock


def test_add_notification_prepends(store: TaskStore, clock: FakeClock) -> None:
    first = store.add_notification("first")
    second = store.add_notification("second", "error")

    assert store.notifications == [second, first]
    assert first.type == "info"
    assert second.type == "error"
    assert first.timestamp == clock.now
    assert first.read is False


def test_log_keeps_newest_fifty(store: TaskStore) -> None:
    for i in range(51):
        store.add_notification(f"n{i}")

    notes = store.notifications
    assert len(notes) == 50
    assert notes[0].message == "n50"
    assert notes[-1].message == "n1"


def test_notification_ids_are_unique_and_increasing(store: TaskStore) -> None:
    ids = [store.add_notification("same instant").id for _ in range(5)]
    assert ids == sorted(set(ids))


def test_mark_as_read_and_unread_listing(store: TaskStore) -> None:
    a = store.add_notification("a")
    b = store.add_notification("b")
    c = store.add_notification("c")

    store.mark_notification_as_read(b.id)
    store.mark_notification_as_read(999)

    assert b.read is True
    assert store.get_unread_notifications() == [c, a]


def test_mark_all_as_read(store: TaskStore) -> None:
    store.add_notification("a")
    store.add_notification("b")
    assert store.mark_all_notifications_as_read() == 2
    assert store.get_unread_notifications() == []
    assert store.mark_all_notifications_as_read() == 0


def test_custom_limit(clock: FakeClock) -> None:
    small = TaskStore(clock=clock, notification_limit=3)
    for i in range(5):
        small.add_notification(str(i))
    assert [n.message for n in small.notifications] == ["4", "3", "2"]


def test_log_rejects_non_positive_limit() -> None:
    with pytest.raises(ValueError):
        NotificationLog(0)
