"""In-memory task manager: priority-sorted tasks, subtasks, tags, notifications, export/import."""

from .tasks.errors import InvalidInputError, TaskError, TaskNotFoundError, UnsupportedFormatError
from .tasks.priority import calculate_priority
from .tasks.task_models import Notification, NotificationType, Subtask, Task
from .tasks.task_store import TaskStore

__version__ = "0.1.0"

__all__ = [
    "InvalidInputError",
    "Notification",
    "NotificationType",
    "Subtask",
    "Task",
    "TaskError",
    "TaskNotFoundError",
    "TaskStore",
    "UnsupportedFormatError",
    "calculate_priority",
]
