# src/taskdeck/core/ports.py

"""
Ports (interfaces) used by the core.

The task store depends on Protocols instead of concrete implementations,
which keeps "now" swappable and makes testing deterministic.
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol


class Clock(Protocol):
    """Source of the current instant (timezone-aware, UTC)."""

    def __call__(self) -> datetime: ...
