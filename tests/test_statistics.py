# tests/test_statistics.py

from __future__ import annotations

from datetime import timedelta

from taskdeck.tasks.task_stats import CategoryCounts
from taskdeck.tasks.task_store import TaskStore

from .fakes import FakeClock


def test_empty_store_statistics(store: TaskStore) -> None:
    stats = store.get_statistics()

    assert stats.total_tasks == 0
    assert stats.completion_rate == "0%"
    assert stats.average_tasks_per_day == 0
    assert isinstance(stats.average_tasks_per_day, int)
    assert stats.category_statistics == {
        "work": CategoryCounts(0, 0),
        "personal": CategoryCounts(0, 0),
        "urgent": CategoryCounts(0, 0),
    }


def test_counts_and_completion_rate(store: TaskStore, clock: FakeClock) -> None:
    a = store.add_task("A", category="work")
    store.add_task("B", category="work", due_date=clock.now - timedelta(hours=2))
    store.add_task("C", category="errands")
    store.complete_task(a.id)

    stats = store.get_statistics()
    assert stats.total_tasks == 3
    assert stats.active_tasks == 2
    assert stats.completed_tasks == 1
    assert stats.completion_rate == "33.33%"
    assert stats.overdue_tasks == 1
    assert stats.category_statistics["work"] == CategoryCounts(active=1, completed=1)
    assert stats.category_statistics["errands"] == CategoryCounts(active=1, completed=0)
    assert stats.category_statistics["urgent"] == CategoryCounts(active=0, completed=0)


def test_average_tasks_per_day(store: TaskStore, clock: FakeClock) -> None:
    ids = [store.add_task(f"t{i}").id for i in range(3)]

    store.complete_task(ids[0])
    clock.advance(minutes=10)
    store.complete_task(ids[1])
    assert store.get_statistics().average_tasks_per_day == "2.00"

    clock.advance(days=1)
    store.complete_task(ids[2])
    assert store.get_statistics().average_tasks_per_day == "1.50"


def test_updated_category_is_not_reported(store: TaskStore) -> None:
    task = store.add_task("A")
    store.update_task(task.id, {"category": "hobby"})

    stats = store.get_statistics()
    assert "hobby" not in stats.category_statistics
    assert stats.category_statistics["personal"].active == 0
    assert stats.active_tasks == 1


def test_as_dict_uses_export_field_names(store: TaskStore) -> None:
    task = store.add_task("A", category="urgent")
    store.complete_task(task.id)

    data = store.get_statistics().as_dict()
    assert data == {
        "totalTasks": 1,
        "activeTasks": 0,
        "completedTasks": 1,
        "completionRate": "100.00%",
        "overdueTasks": 0,
        "categoryStatistics": {
            "work": {"active": 0, "completed": 0},
            "personal": {"active": 0, "completed": 0},
            "urgent": {"active": 0, "completed": 1},
        },
        "averageTasksPerDay": "1.00",
    }
