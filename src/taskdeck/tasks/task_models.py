# src/taskdeck/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time, timezone
from enum import StrEnum
from typing import Any


class NotificationType(StrEnum):
    """
    Notification kinds emitted by the store itself.

    The log accepts any text type; these are just the ones the store uses.
    """

    INFO = "info"
    SUCCESS = "success"
    ERROR = "error"


def parse_instant(value: Any) -> datetime:
    """
    Coerce a datetime / date / ISO-8601 string into an aware UTC datetime.

    Naive values are interpreted as local time. A trailing "Z" is accepted.
    """
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        dt = datetime.combine(value, time.min)
    elif isinstance(value, str):
        raw = value.strip()
        if not raw:
            raise ValueError("empty instant")
        dt = datetime.fromisoformat(raw)
    else:
        raise TypeError(f"cannot interpret {type(value).__name__} as an instant")

    # astimezone() on a naive datetime assumes local time.
    try:
        return dt.astimezone(timezone.utc)
    except OverflowError as e:
        raise ValueError(f"instant out of range: {value!r}") from e


def parse_optional_instant(value: Any) -> datetime | None:
    if value is None or value == "":
        return None
    return parse_instant(value)


def format_instant(dt: datetime | None) -> str | None:
    """Render as "YYYY-MM-DDTHH:MM:SS.mmmZ" (None passes through)."""
    if dt is None:
        return None
    utc = dt.astimezone(timezone.utc)
    return utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass(slots=True)
class Subtask:
    id: str
    title: str
    created_at: datetime
    completed: bool = False
    completed_at: datetime | None = None

    @property
    def ordinal(self) -> int:
        """Numeric suffix of "<parentId>-<ordinal>" (0 if not parseable)."""
        _, _, tail = self.id.rpartition("-")
        return int(tail) if tail.isdigit() else 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "completed": self.completed,
            "createdAt": format_instant(self.created_at),
            "completedAt": format_instant(self.completed_at),
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> Subtask:
        return cls(
            id=str(raw["id"]),
            title=str(raw.get("title") or ""),
            created_at=parse_instant(raw["createdAt"]),
            completed=bool(raw.get("completed", False)),
            completed_at=parse_optional_instant(raw.get("completedAt")),
        )


@dataclass(slots=True)
class Task:
    """
    A single task, active or completed.

    priority is derived from (category, due_date) by the store; it is only
    recomputed at mutation points, never on the passage of time alone.
    subtask_seq is the high-water mark of subtask ordinals handed out for
    this task, so removed subtasks never have their ids reused.
    """

    id: int
    title: str
    description: str
    category: str
    due_date: datetime | None
    created_at: datetime
    priority: int
    completed: bool = False
    completed_at: datetime | None = None
    tags: list[str] = field(default_factory=list)
    subtasks: list[Subtask] = field(default_factory=list)
    subtask_seq: int = 0

    def find_subtask(self, subtask_id: str) -> Subtask | None:
        for st in self.subtasks:
            if st.id == subtask_id:
                return st
        return None

    def next_subtask_id(self) -> str:
        ordinal = max(self.subtask_seq, len(self.subtasks)) + 1
        self.subtask_seq = ordinal
        return f"{self.id}-{ordinal}"

    def matches(self, query: str) -> bool:
        """Case-insensitive substring match over title, description and tags."""
        q = query.lower()
        if q in self.title.lower() or q in self.description.lower():
            return True
        return any(q in tag.lower() for tag in self.tags)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "category": self.category,
            "dueDate": format_instant(self.due_date),
            "createdAt": format_instant(self.created_at),
            "completed": self.completed,
            "completedAt": format_instant(self.completed_at),
            "priority": self.priority,
            "tags": list(self.tags),
            "subtasks": [st.to_dict() for st in self.subtasks],
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> Task:
        """
        Rebuild a task from its exported shape.

        Priority is trusted as stored; it is not recomputed here.
        """
        if not isinstance(raw, dict):
            raise ValueError("task entry must be an object")

        title = str(raw.get("title") or "").strip()
        if not title:
            raise ValueError(f"task {raw.get('id')!r} has an empty title")

        subtasks = [Subtask.from_dict(st) for st in raw.get("subtasks") or []]
        tags: list[str] = []
        for tag in raw.get("tags") or []:
            tag = str(tag)
            if tag not in tags:
                tags.append(tag)

        return cls(
            id=int(raw["id"]),
            title=title,
            description=str(raw.get("description") or ""),
            category=str(raw.get("category") or "personal"),
            due_date=parse_optional_instant(raw.get("dueDate")),
            created_at=parse_instant(raw["createdAt"]),
            priority=int(raw.get("priority") or 0),
            completed=bool(raw.get("completed", False)),
            completed_at=parse_optional_instant(raw.get("completedAt")),
            tags=tags,
            subtasks=subtasks,
            subtask_seq=max((st.ordinal for st in subtasks), default=0),
        )


@dataclass(slots=True)
class Notification:
    id: int
    message: str
    type: str
    timestamp: datetime
    read: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "message": self.message,
            "type": self.type,
            "timestamp": format_instant(self.timestamp),
            "read": self.read,
        }
