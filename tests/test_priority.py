# tests/test_priority.py

from __future__ import annotations

from datetime import timedelta

import pytest

from taskdeck.tasks.priority import calculate_priority, days_until

from .fakes import T0


@pytest.mark.parametrize(
    ("category", "expected"),
    [("urgent", 10), ("work", 5), ("personal", 0), ("groceries", 0)],
)
def test_category_weight_without_due_date(category: str, expected: int) -> None:
    assert calculate_priority(category, None, now=T0) == expected


@pytest.mark.parametrize(
    ("delta", "expected"),
    [
        (timedelta(days=1), 20),
        (timedelta(hours=25), 15),
        (timedelta(days=3), 15),
        (timedelta(days=3, seconds=1), 10),
        (timedelta(days=7), 10),
        (timedelta(days=14), 5),
        (timedelta(days=14, seconds=1), 0),
        (timedelta(days=30), 0),
    ],
)
def test_due_date_buckets(delta: timedelta, expected: int) -> None:
    assert calculate_priority("personal", T0 + delta, now=T0) == expected


def test_past_and_present_due_dates_get_top_bucket() -> None:
    assert calculate_priority("personal", T0 - timedelta(days=40), now=T0) == 20
    assert calculate_priority("personal", T0, now=T0) == 20


def test_category_and_due_date_add_up() -> None:
    assert calculate_priority("urgent", T0 + timedelta(hours=2), now=T0) == 30
    assert calculate_priority("work", T0 + timedelta(days=2), now=T0) == 20


def test_days_until_rounds_up() -> None:
    assert days_until(T0 + timedelta(hours=25), T0) == 2
    assert days_until(T0 + timedelta(hours=1), T0) == 1
    assert days_until(T0 - timedelta(hours=1), T0) == 0


def test_evaluator_depends_only_on_distance_to_now() -> None:
    later = T0 + timedelta(days=100)
    due_offset = timedelta(days=5)
    assert calculate_priority("work", T0 + due_offset, now=T0) == calculate_priority(
        "work", later + due_offset, now=later
    )
