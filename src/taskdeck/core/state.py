# src/taskdeck/core/state.py

from __future__ import annotations

from dataclasses import dataclass

from ..tasks.task_store import TaskStore


@dataclass
class AppState:
    # Settings live on the state so command handlers can reach them.
    settings: object
    store: TaskStore
