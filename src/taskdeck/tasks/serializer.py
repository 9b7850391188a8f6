# src/taskdeck/tasks/serializer.py

"""
Export / import codecs for the task store.

Formats:
- json: full state dump, the only format accepted on import
- csv: flat diagnostic dump (lossy). The legacy layout joins fields with bare
  commas and rows with the two characters "\\n"; strict mode uses the csv
  module (RFC-4180 quoting, real CRLF line endings).
"""

from __future__ import annotations

import csv
import io
import json
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from .task_models import Task, format_instant

FORMAT_JSON = "json"
FORMAT_CSV = "csv"

CSV_HEADER: tuple[str, ...] = (
    "ID",
    "Title",
    "Description",
    "Category",
    "Due Date",
    "Status",
    "Priority",
)
LEGACY_ROW_SEPARATOR = "\\n"


@dataclass(slots=True)
class ImportPayload:
    tasks: list[Task] = field(default_factory=list)
    completed_tasks: list[Task] = field(default_factory=list)
    categories: list[str] = field(default_factory=list)


def export_json(
    active: Sequence[Task],
    completed: Sequence[Task],
    categories: Iterable[str],
    *,
    exported_at: datetime,
) -> str:
    data = {
        "tasks": [t.to_dict() for t in active],
        "completedTasks": [t.to_dict() for t in completed],
        "categories": list(categories),
        "exportDate": format_instant(exported_at),
    }
    return json.dumps(data, ensure_ascii=False, indent=2)


def _csv_row(task: Task) -> list[str]:
    return [
        str(task.id),
        task.title,
        task.description,
        task.category,
        format_instant(task.due_date) or "",
        "Completed" if task.completed else "Active",
        str(task.priority),
    ]


def export_csv(tasks: Iterable[Task], *, strict: bool = False) -> str:
    rows = [list(CSV_HEADER)] + [_csv_row(t) for t in tasks]

    if not strict:
        return LEGACY_ROW_SEPARATOR.join(",".join(row) for row in rows)

    buf = io.StringIO()
    writer = csv.writer(buf)
    writer.writerows(rows)
    return buf.getvalue()


def _decode_tasks(raw: Any, *, completed: bool) -> list[Task]:
    if raw is None:
        return []
    if not isinstance(raw, list):
        key = "completedTasks" if completed else "tasks"
        raise ValueError(f"'{key}' must be a list")

    out: list[Task] = []
    for entry in raw:
        try:
            task = Task.from_dict(entry)
        except KeyError as e:
            raise ValueError(f"task entry is missing field {e.args[0]!r}") from e
        except OverflowError as e:
            raise ValueError(f"task entry has an out-of-range number: {e}") from e
        task.completed = completed
        if completed and task.completed_at is None:
            raise ValueError(f"completed task {task.id} has no completedAt")
        if not completed:
            task.completed_at = None
        out.append(task)
    return out


def decode_json(data: str) -> ImportPayload:
    """
    Parse an export produced by export_json.

    Unknown top-level keys are ignored. Raises ValueError on malformed input
    (json.JSONDecodeError is a ValueError subclass).
    """
    try:
        parsed = json.loads(data)
    except RecursionError as e:
        raise ValueError("import payload is nested too deeply") from e
    if not isinstance(parsed, dict):
        raise ValueError("import payload must be a JSON object")

    categories = parsed.get("categories") or []
    if not isinstance(categories, list):
        raise ValueError("'categories' must be a list")

    return ImportPayload(
        tasks=_decode_tasks(parsed.get("tasks"), completed=False),
        completed_tasks=_decode_tasks(parsed.get("completedTasks"), completed=True),
        categories=[str(c) for c in categories],
    )
