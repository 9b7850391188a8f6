# src/taskdeck/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, optionally imports a JSON export given
on the command line, then runs the console REPL in the main thread.
"""

from __future__ import annotations

import logging
import sys

from ..cli.bootstrap import create_initial_state, import_from_file
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    settings = get_settings()
    args = sys.argv[1:] if argv is None else argv

    log_file = setup_logging(settings)

    logger.info("Starting %s (log file %s)...", settings.app_name, log_file)

    state = create_initial_state(settings=settings)

    for path in args:
        if not import_from_file(state, path):
            logger.warning("Could not import %s", path)

    run_console_loop(state)
    logger.info("Bye.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
