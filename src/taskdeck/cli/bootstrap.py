# src/taskdeck/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires settings into a TaskStore held by AppState,
- writes/reads explicit export files (the store itself never touches disk).
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from ..config import get_settings
from ..core.state import AppState
from ..tasks.serializer import FORMAT_JSON
from ..tasks.task_models import NotificationType
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.export_dir.mkdir(parents=True, exist_ok=True)


def build_store(settings) -> TaskStore:
    return TaskStore(
        categories=settings.categories,
        default_category=settings.default_category,
        notification_limit=settings.notification_limit,
        strict_csv=settings.csv_strict,
        remap_import_ids=settings.remap_import_ids,
    )


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)
    return AppState(settings=settings, store=build_store(settings))


def default_export_path(state: AppState, fmt: str) -> Path:
    export_dir = Path(getattr(state.settings, "export_dir", "."))
    return export_dir / f"tasks.{fmt}"


def export_to_file(state: AppState, fmt: str = FORMAT_JSON, path: str | Path | None = None) -> Path:
    """Export the store and write it atomically (tmp file + rename)."""
    text = state.store.export_tasks(fmt)
    target = Path(path) if path else default_export_path(state, fmt)
    target.parent.mkdir(parents=True, exist_ok=True)

    tmp = target.with_suffix(target.suffix + ".tmp")
    tmp.write_text(text, "utf-8")
    os.replace(tmp, target)
    logger.info("Exported tasks fmt=%s to %s", fmt, target)
    return target


def import_from_file(state: AppState, path: str | Path) -> bool:
    """
    Read a JSON export from disk and merge it into the store.

    A missing/unreadable file is reported like any other import failure.
    """
    p = Path(path)
    try:
        data = p.read_text("utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Cannot read import file %s: %s", p, e)
        reason = e.strerror if isinstance(e, OSError) and e.strerror else e
        state.store.add_notification(f"Import failed: {reason}", NotificationType.ERROR)
        return False
    return state.store.import_tasks(data, FORMAT_JSON)
