# src/taskdeck/tasks/task_stats.py

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any

from .task_models import Task


@dataclass(frozen=True, slots=True)
class CategoryCounts:
    active: int
    completed: int


@dataclass(frozen=True, slots=True)
class TaskStatistics:
    """
    Point-in-time summary of a store.

    completion_rate is text ("66.67%", or "0%" for an empty store).
    average_tasks_per_day is text with two decimals, or the integer 0 when
    nothing has been completed yet.
    """

    total_tasks: int
    active_tasks: int
    completed_tasks: int
    completion_rate: str
    overdue_tasks: int
    category_statistics: dict[str, CategoryCounts]
    average_tasks_per_day: str | int

    def as_dict(self) -> dict[str, Any]:
        return {
            "totalTasks": self.total_tasks,
            "activeTasks": self.active_tasks,
            "completedTasks": self.completed_tasks,
            "completionRate": self.completion_rate,
            "overdueTasks": self.overdue_tasks,
            "categoryStatistics": {
                name: {"active": c.active, "completed": c.completed}
                for name, c in self.category_statistics.items()
            },
            "averageTasksPerDay": self.average_tasks_per_day,
        }


def completion_rate(completed: int, total: int) -> str:
    if total <= 0:
        return "0%"
    return f"{completed / total * 100:.2f}%"


def average_tasks_per_day(completed: Sequence[Task]) -> str | int:
    if not completed:
        return 0
    # calendar day in local time
    days = {t.completed_at.astimezone().date() for t in completed if t.completed_at is not None}
    if not days:
        return 0
    return f"{len(completed) / len(days):.2f}"


def build_statistics(
    active: Sequence[Task],
    completed: Sequence[Task],
    categories: Iterable[str],
    *,
    overdue: int,
) -> TaskStatistics:
    total = len(active) + len(completed)

    per_category: dict[str, CategoryCounts] = {}
    for name in categories:
        per_category[name] = CategoryCounts(
            active=sum(1 for t in active if t.category == name),
            completed=sum(1 for t in completed if t.category == name),
        )

    return TaskStatistics(
        total_tasks=total,
        active_tasks=len(active),
        completed_tasks=len(completed),
        completion_rate=completion_rate(len(completed), total),
        overdue_tasks=overdue,
        category_statistics=per_category,
        average_tasks_per_day=average_tasks_per_day(completed),
    )
