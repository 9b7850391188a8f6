# src/taskdeck/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Every variable is TASKDECK_<NAME>. Unset and blank values both mean "use the
default". The task store never reads settings itself; bootstrap wires them in.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "TASKDECK"

DEFAULT_CATEGORIES = ["work", "personal", "urgent"]
DEFAULT_NOTIFICATION_LIMIT = 50

_TRUTHY = frozenset({"1", "true", "yes", "y", "on"})


def _raw(name: str) -> str | None:
    """Stripped TASKDECK_<name>, or None when unset or blank."""
    value = (os.getenv(f"{ENV_PREFIX}_{name}") or "").strip()
    return value or None


def _text(name: str, default: str) -> str:
    return _raw(name) or default


def _flag(name: str) -> bool:
    value = _raw(name)
    return value is not None and value.lower() in _TRUTHY


def _positive_int(name: str, default: int) -> int:
    value = _raw(name)
    try:
        number = int(value) if value is not None else default
    except ValueError:
        return default
    return number if number > 0 else default


def _words(name: str, default: list[str]) -> list[str]:
    """Comma- and/or whitespace-separated list."""
    value = _raw(name)
    if value is None:
        return list(default)
    return value.replace(",", " ").split()


def _path(name: str, default: Path) -> Path:
    value = _raw(name)
    return default if value is None else Path(value).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str
    store_debug: bool

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    export_dir: Path

    # ---- Store tuning ----
    notification_limit: int
    categories: list[str]
    default_category: str
    csv_strict: bool
    remap_import_ids: bool

    @staticmethod
    def from_env() -> Settings:
        data_dir = _path("DATA_DIR", Path(".local/taskdeck"))
        return Settings(
            app_name=_text("APP_NAME", "taskdeck"),
            log_level=_text("LOG_LEVEL", "INFO").upper(),
            store_debug=_flag("STORE_DEBUG"),
            data_dir=data_dir,
            export_dir=_path("EXPORT_DIR", data_dir / "exports"),
            notification_limit=_positive_int("NOTIFICATION_LIMIT", DEFAULT_NOTIFICATION_LIMIT),
            categories=_words("CATEGORIES", DEFAULT_CATEGORIES),
            default_category=_text("DEFAULT_CATEGORY", "personal"),
            csv_strict=_flag("CSV_STRICT"),
            remap_import_ids=_flag("REMAP_IMPORT_IDS"),
        )


_SETTINGS: Settings | None = None


def get_settings() -> Settings:
    """Load .env (never overriding real env vars) and build Settings once."""
    global _SETTINGS
    if _SETTINGS is None:
        load_dotenv(override=False)
        _SETTINGS = Settings.from_env()
    return _SETTINGS
