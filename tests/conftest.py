# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from taskdeck.core.state import AppState
from taskdeck.tasks.task_store import TaskStore

from .fakes import FakeClock


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def store(clock: FakeClock) -> TaskStore:
    return TaskStore(clock=clock)


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the CLI.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the environment and .env files.
    """
    return SimpleNamespace(
        app_name="taskdeck-test",
        log_level="INFO",
        store_debug=False,
        data_dir=tmp_path,
        export_dir=tmp_path / "exports",
        notification_limit=50,
        categories=["work", "personal", "urgent"],
        default_category="personal",
        csv_strict=False,
        remap_import_ids=False,
    )


@pytest.fixture()
def state(settings: SimpleNamespace, store: TaskStore) -> AppState:
    return AppState(settings=settings, store=store)
