# src/taskdeck/tasks/task_store.py

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from datetime import datetime, timedelta, timezone
from typing import Any

from ..core.ports import Clock
from .errors import InvalidInputError, TaskNotFoundError, UnsupportedFormatError
from .notifications import DEFAULT_NOTIFICATION_LIMIT, NotificationLog
from .priority import calculate_priority
from .serializer import FORMAT_CSV, FORMAT_JSON, ImportPayload, decode_json, export_csv, export_json
from .task_models import Notification, NotificationType, Subtask, Task, parse_instant
from .task_stats import TaskStatistics, build_statistics

logger = logging.getLogger(__name__)

DEFAULT_CATEGORIES: tuple[str, ...] = ("work", "personal", "urgent")
DEFAULT_CATEGORY = "personal"

# patch key -> Task attribute; everything else is ignored by update_task
_UPDATABLE_FIELDS: dict[str, str] = {
    "title": "title",
    "description": "description",
    "category": "category",
    "dueDate": "due_date",
    "due_date": "due_date",
    "tags": "tags",
}


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _unique_tags(tags: Iterable[Any]) -> list[str]:
    out: list[str] = []
    for tag in tags:
        tag = str(tag)
        if tag not in out:
            out.append(tag)
    return out


class TaskStore:
    """
    In-memory task manager.

    State:
    - active tasks, kept sorted by descending priority (stable for ties)
    - completed tasks, in completion order
    - category registry (insertion-ordered), seeded with work/personal/urgent
    - bounded newest-first notification log
    - next task id (monotonic, starts at 1)

    Thread-safety:
    - none; a store is owned by a single caller. Wrap calls in a lock when
      sharing an instance between threads.

    Query methods return new lists; the Task objects inside are live.
    """

    def __init__(
        self,
        *,
        clock: Clock | None = None,
        categories: Iterable[str] = DEFAULT_CATEGORIES,
        default_category: str = DEFAULT_CATEGORY,
        notification_limit: int = DEFAULT_NOTIFICATION_LIMIT,
        strict_csv: bool = False,
        remap_import_ids: bool = False,
    ) -> None:
        self._clock: Clock = clock or utc_now
        self._active: list[Task] = []
        self._completed: list[Task] = []
        self._categories: dict[str, None] = dict.fromkeys(categories)
        self._notifications = NotificationLog(notification_limit)
        self._next_id = 1

        self._default_category = default_category
        self._strict_csv = strict_csv
        self._remap_import_ids = remap_import_ids

        logger.info(
            "TaskStore ready categories=%s notification_limit=%s",
            list(self._categories),
            notification_limit,
        )

    # ---- low-level helpers ----

    def _now(self) -> datetime:
        return self._clock()

    def _priority_for(self, category: str, due_date: datetime | None) -> int:
        return calculate_priority(category, due_date, now=self._now())

    def _sort_active(self) -> None:
        # list.sort is stable, so equal priorities keep insertion order
        self._active.sort(key=lambda t: t.priority, reverse=True)

    def _find_active(self, task_id: int) -> Task | None:
        for task in self._active:
            if task.id == task_id:
                return task
        return None

    def _require_active(self, task_id: int, *, parent: bool = False) -> Task:
        task = self._find_active(task_id)
        if task is None:
            raise TaskNotFoundError(task_id, parent=parent)
        return task

    @staticmethod
    def _coerce_due_date(value: Any) -> datetime | None:
        if not value:
            return None
        try:
            return parse_instant(value)
        except (TypeError, ValueError, OverflowError) as e:
            raise InvalidInputError(f"Invalid due date: {value!r}") from e

    # ---- read-only views ----

    @property
    def active_tasks(self) -> list[Task]:
        return list(self._active)

    @property
    def completed_tasks(self) -> list[Task]:
        return list(self._completed)

    @property
    def categories(self) -> list[str]:
        return list(self._categories)

    @property
    def notifications(self) -> list[Notification]:
        return self._notifications.all()

    @property
    def next_id(self) -> int:
        return self._next_id

    def get_task(self, task_id: int) -> Task | None:
        task = self._find_active(task_id)
        if task is not None:
            return task
        for task in self._completed:
            if task.id == task_id:
                return task
        return None

    def add_category(self, name: str) -> bool:
        name = (name or "").strip()
        if not name:
            raise InvalidInputError("Category name cannot be empty")
        if name in self._categories:
            return False
        self._categories[name] = None
        logger.debug("Category registered name=%s", name)
        return True

    # ---- tasks ----

    def add_task(
        self,
        title: str,
        description: str | None = None,
        category: str | None = None,
        due_date: Any = None,
    ) -> Task:
        if not title or not title.strip():
            raise InvalidInputError("Task title cannot be empty")

        category = category or self._default_category
        due = self._coerce_due_date(due_date)

        if category not in self._categories:
            self._categories[category] = None
            logger.debug("Category auto-registered name=%s", category)

        task = Task(
            id=self._next_id,
            title=title.strip(),
            description=description or "",
            category=category,
            due_date=due,
            created_at=self._now(),
            priority=self._priority_for(category, due),
        )
        self._next_id += 1

        self._active.append(task)
        self._sort_active()
        logger.debug(
            "Task added id=%s category=%s due=%s priority=%s",
            task.id,
            task.category,
            task.due_date,
            task.priority,
        )
        return task

    def complete_task(self, task_id: int) -> Task:
        task = self._require_active(task_id)

        task.completed = True
        task.completed_at = self._now()
        self._active.remove(task)
        self._completed.append(task)

        self.add_notification(f'Task "{task.title}" completed!', NotificationType.SUCCESS)
        logger.debug("Task completed id=%s", task.id)
        return task

    def update_task(
        self,
        task_id: int,
        patch: Mapping[str, Any] | None = None,
        **changes: Any,
    ) -> Task:
        """
        Apply whitelisted fields (title, description, category, dueDate, tags).

        Unknown keys are ignored. A falsy dueDate clears the due date.
        Unlike add_task, a new category is NOT registered in the category set.
        Priority is recomputed and the active list re-sorted afterwards.
        """
        task = self._require_active(task_id)

        updates = dict(patch or {})
        updates.update(changes)

        # validate everything before touching the task
        staged: dict[str, Any] = {}
        for key, value in updates.items():
            attr = _UPDATABLE_FIELDS.get(key)
            if attr is None:
                logger.debug("update_task ignoring field=%s id=%s", key, task_id)
                continue
            if attr == "title":
                title = str(value or "").strip()
                if not title:
                    raise InvalidInputError("Task title cannot be empty")
                value = title
            elif attr == "description":
                value = str(value or "")
            elif attr == "category":
                value = str(value or self._default_category)
            elif attr == "due_date":
                value = self._coerce_due_date(value)
            elif attr == "tags":
                value = _unique_tags(value or [])
            staged[attr] = value

        for attr, value in staged.items():
            setattr(task, attr, value)

        task.priority = self._priority_for(task.category, task.due_date)
        self._sort_active()
        logger.debug("Task updated id=%s fields=%s priority=%s", task.id, sorted(staged), task.priority)
        return task

    def delete_task(self, task_id: int) -> bool:
        for bucket in (self._active, self._completed):
            for i, task in enumerate(bucket):
                if task.id == task_id:
                    del bucket[i]
                    logger.debug("Task deleted id=%s", task_id)
                    return True
        return False

    def reprioritize(self) -> int:
        """Recompute priorities of all active tasks against the current clock."""
        now = self._now()
        changed = 0
        for task in self._active:
            priority = calculate_priority(task.category, task.due_date, now=now)
            if priority != task.priority:
                task.priority = priority
                changed += 1
        self._sort_active()
        logger.info("Reprioritized active tasks changed=%s", changed)
        return changed

    # ---- subtasks ----

    def add_subtask(self, parent_id: int, title: str) -> Subtask:
        task = self._require_active(parent_id, parent=True)

        subtask = Subtask(
            id=task.next_subtask_id(),
            title=title,
            created_at=self._now(),
        )
        task.subtasks.append(subtask)
        logger.debug("Subtask added id=%s parent=%s", subtask.id, parent_id)
        return subtask

    def complete_subtask(self, parent_id: int, subtask_id: str) -> Subtask:
        task = self._require_active(parent_id, parent=True)
        subtask = task.find_subtask(subtask_id)
        if subtask is None:
            raise TaskNotFoundError(parent_id, subtask_id)

        subtask.completed = True
        subtask.completed_at = self._now()

        if task.subtasks and all(st.completed for st in task.subtasks):
            self.add_notification(
                f'All subtasks for "{task.title}" are completed!', NotificationType.INFO
            )
        logger.debug("Subtask completed id=%s parent=%s", subtask_id, parent_id)
        return subtask

    def delete_subtask(self, parent_id: int, subtask_id: str) -> bool:
        task = self._require_active(parent_id, parent=True)
        subtask = task.find_subtask(subtask_id)
        if subtask is None:
            return False
        task.subtasks.remove(subtask)
        logger.debug("Subtask deleted id=%s parent=%s", subtask_id, parent_id)
        return True

    # ---- tags ----

    def add_tag(self, task_id: int, tag: str) -> Task:
        task = self._require_active(task_id)
        if tag not in task.tags:
            task.tags.append(tag)
        return task

    def remove_tag(self, task_id: int, tag: str) -> Task:
        task = self._require_active(task_id)
        if tag in task.tags:
            task.tags.remove(tag)
        return task

    # ---- queries (active tasks, priority order) ----

    def get_tasks_by_category(self, category: str) -> list[Task]:
        return [t for t in self._active if t.category == category]

    def get_tasks_by_tag(self, tag: str) -> list[Task]:
        return [t for t in self._active if tag in t.tags]

    def get_overdue_tasks(self) -> list[Task]:
        now = self._now()
        return [
            t for t in self._active if t.due_date is not None and t.due_date < now and not t.completed
        ]

    def get_upcoming_tasks(self, days: float = 7) -> list[Task]:
        now = self._now()
        horizon = now + timedelta(days=days)
        return [
            t
            for t in self._active
            if t.due_date is not None and now <= t.due_date <= horizon and not t.completed
        ]

    def search_tasks(self, query: str | None) -> list[Task]:
        if not query:
            return list(self._active)
        return [t for t in self._active if t.matches(query)]

    # ---- notifications ----

    def add_notification(self, message: str, type: str = NotificationType.INFO) -> Notification:
        return self._notifications.add(message, type, timestamp=self._now())

    def mark_notification_as_read(self, notification_id: int) -> None:
        self._notifications.mark_read(notification_id)

    def mark_all_notifications_as_read(self) -> int:
        return self._notifications.mark_all_read()

    def get_unread_notifications(self) -> list[Notification]:
        return self._notifications.unread()

    # ---- statistics ----

    def get_statistics(self) -> TaskStatistics:
        return build_statistics(
            self._active,
            self._completed,
            self._categories,
            overdue=len(self.get_overdue_tasks()),
        )

    # ---- export / import ----

    def export_tasks(self, fmt: str = FORMAT_JSON, *, strict: bool | None = None) -> str:
        if fmt == FORMAT_JSON:
            return export_json(
                self._active,
                self._completed,
                self._categories,
                exported_at=self._now(),
            )
        if fmt == FORMAT_CSV:
            strict = self._strict_csv if strict is None else strict
            return export_csv([*self._active, *self._completed], strict=strict)
        raise UnsupportedFormatError(fmt)

    def import_tasks(
        self,
        data: str | bytes,
        fmt: str = FORMAT_JSON,
        *,
        remap_ids: bool | None = None,
    ) -> bool:
        """
        Merge an export into this store (additive, never clears state).

        Stored priorities are trusted, not recomputed. Failures never raise:
        they are recorded as an "error" notification and False is returned.
        """
        try:
            if fmt != FORMAT_JSON:
                raise UnsupportedFormatError(fmt, action="import")
            payload = decode_json(data)
        except (TypeError, ValueError, OverflowError) as e:
            logger.warning("Import failed fmt=%s: %s", fmt, e)
            self.add_notification(f"Import failed: {e}", NotificationType.ERROR)
            return False

        if self._remap_import_ids if remap_ids is None else remap_ids:
            self._remap_payload_ids(payload)

        imported = [*payload.tasks, *payload.completed_tasks]
        self._active.extend(payload.tasks)
        self._completed.extend(payload.completed_tasks)
        for name in payload.categories:
            self._categories.setdefault(name, None)
        for task in imported:
            self._categories.setdefault(task.category, None)

        self._next_id = max(self._next_id, max((t.id for t in imported), default=0) + 1)
        self._sort_active()

        self.add_notification("Tasks imported successfully", NotificationType.SUCCESS)
        logger.info(
            "Imported tasks active=%s completed=%s categories=%s",
            len(payload.tasks),
            len(payload.completed_tasks),
            len(payload.categories),
        )
        return True

    def _remap_payload_ids(self, payload: ImportPayload) -> None:
        seen = {t.id for t in self._active} | {t.id for t in self._completed}
        incoming = [*payload.tasks, *payload.completed_tasks]
        counter = max(self._next_id, max(seen | {t.id for t in incoming}, default=0) + 1)

        for task in incoming:
            if task.id in seen:
                old_id = task.id
                task.id = counter
                counter += 1
                for st in task.subtasks:
                    st.id = f"{task.id}-{st.ordinal}"
                logger.debug("Import remapped id %s -> %s", old_id, task.id)
            seen.add(task.id)
