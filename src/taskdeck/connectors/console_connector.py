# src/taskdeck/connectors/console_connector.py

from __future__ import annotations

import logging
import shlex
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..core.state import AppState

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}")


def run_console_loop(state: AppState, *, prompt: str = ">>> ") -> None:
    logger.info("Console connector started.")
    app_name = str(getattr(getattr(state, "settings", None), "app_name", "taskdeck"))
    _print_ts(f"[{app_name}] Use /help for commands. Use /exit to quit.\n")

    def emit(text: str) -> None:
        # Immediate user-visible feedback for longer operations (e.g. import)
        print(f"[{_ts_local()}] {text}", flush=True)

    last_seen = 0
    while True:
        try:
            user_input = input(prompt).strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not user_input:
            continue

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        if not user_input.startswith("/"):
            # Bare text is shorthand for /add.
            user_input = "/add " + shlex.quote(user_input)

        try:
            response = command_registry.handle(state, user_input, emit=emit)
        except Exception:
            logger.exception("Command handler crashed.")
            response = "Internal error while handling a command."

        if response is not None:
            print(f"[{_ts_local()}] {response}")

        for note in reversed(state.store.get_unread_notifications()):
            if note.id > last_seen:
                _print_ts(f"[{note.type}] {note.message}")
                last_seen = note.id

    logger.info("Console connector finished.")
