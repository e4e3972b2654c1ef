# src/taskdeck/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, then runs the console REPL.
"""

from __future__ import annotations

import logging

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..logging_setup import level_from_name, setup_logging

logger = logging.getLogger(__name__)


def main() -> None:
    settings = get_settings()

    log_file = setup_logging(
        log_dir=settings.log_dir,
        console_level=level_from_name(settings.log_level),
    )
    logger.info("Starting %s (log file %s)", settings.app_name, log_file)

    state = create_initial_state(settings=settings)

    try:
        if settings.console_enabled:
            run_console_loop(state)
        else:
            logger.info("Console disabled; nothing to run.")
    finally:
        # SqliteKeyValueStore uses short-lived connections per call; close() is a no-op hook.
        close = getattr(state.storage, "close", None)
        if callable(close):
            close()
        logger.info("Bye.")


if __name__ == "__main__":
    main()
