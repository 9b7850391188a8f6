# src/taskdeck/tasks/notifications.py

from __future__ import annotations

import logging
from datetime import datetime

from .task_models import Notification, NotificationType

logger = logging.getLogger(__name__)

DEFAULT_NOTIFICATION_LIMIT = 50


class NotificationLog:
    """
    Bounded, newest-first log of user-facing events.

    Ids come from a monotonic counter owned by the log, so two entries added
    within the same millisecond never share an id.
    """

    def __init__(self, limit: int = DEFAULT_NOTIFICATION_LIMIT) -> None:
        if limit <= 0:
            raise ValueError("notification limit must be positive")
        self._limit = int(limit)
        self._items: list[Notification] = []
        self._next_id = 1

    def __len__(self) -> int:
        return len(self._items)

    @property
    def limit(self) -> int:
        return self._limit

    def add(
        self,
        message: str,
        type: str = NotificationType.INFO,
        *,
        timestamp: datetime,
    ) -> Notification:
        item = Notification(
            id=self._next_id,
            message=message,
            type=str(type),
            timestamp=timestamp,
        )
        self._next_id += 1

        self._items.insert(0, item)
        if len(self._items) > self._limit:
            dropped = len(self._items) - self._limit
            del self._items[self._limit :]
            logger.debug("Notification log trimmed dropped=%s", dropped)
        return item

    def mark_read(self, notification_id: int) -> bool:
        for item in self._items:
            if item.id == notification_id:
                item.read = True
                return True
        return False

    def mark_all_read(self) -> int:
        n = 0
        for item in self._items:
            if not item.read:
                item.read = True
                n += 1
        return n

    def all(self) -> list[Notification]:
        return list(self._items)

    def unread(self) -> list[Notification]:
        return [item for item in self._items if not item.read]
