# src/taskdeck/tasks/errors.py

from __future__ import annotations


class TaskError(Exception):
    """Base class for errors raised by the task store."""


class InvalidInputError(TaskError, ValueError):
    pass


class TaskNotFoundError(TaskError, LookupError):
    def __init__(
        self,
        task_id: int,
        subtask_id: str | None = None,
        *,
        parent: bool = False,
    ) -> None:
        self.task_id = task_id
        self.subtask_id = subtask_id
        if subtask_id is not None:
            msg = f"Subtask with id {subtask_id} not found"
        elif parent:
            msg = f"Parent task with id {task_id} not found"
        else:
            msg = f"Task with id {task_id} not found"
        super().__init__(msg)


class UnsupportedFormatError(TaskError, ValueError):
    def __init__(self, fmt: str, *, action: str = "export") -> None:
        self.fmt = fmt
        super().__init__(f"Unsupported {action} format")
