# src/taskdeck/tasks/priority.py

"""
Priority evaluator.

priority = category weight + due-date bucket, where the bucket is chosen from
days = ceil((due - now) / 1 day). Overdue tasks land in the first bucket.
"""

from __future__ import annotations

import math
from datetime import datetime

CATEGORY_WEIGHTS: dict[str, int] = {
    "urgent": 10,
    "work": 5,
}

# (max days until due, bonus); first match wins
DUE_BUCKETS: tuple[tuple[int, int], ...] = (
    (1, 20),
    (3, 15),
    (7, 10),
    (14, 5),
)

_SECONDS_PER_DAY = 24 * 60 * 60


def days_until(due_date: datetime, now: datetime) -> int:
    return math.ceil((due_date - now).total_seconds() / _SECONDS_PER_DAY)


def calculate_priority(category: str, due_date: datetime | None, *, now: datetime) -> int:
    priority = CATEGORY_WEIGHTS.get(category, 0)

    if due_date is None:
        return priority

    days = days_until(due_date, now)
    for limit, bonus in DUE_BUCKETS:
        if days <= limit:
            return priority + bonus
    return priority
