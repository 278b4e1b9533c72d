# src/taskrank/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, then either runs the commands given on
the command line (`taskrank /add B Buy milk`) or starts the console REPL.
"""

from __future__ import annotations

import logging
import sys

from ..cli.bootstrap import create_initial_state, shutdown_state
from ..cli.commands import error_reply
from ..cli.commands import registry as command_registry
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..core.errors import StorageError, TaskStoreError
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


def _run_once(state, argv: list[str]) -> int:
    """Run one command from the shell; exit status 1 when the store rejected it."""
    # Re-quote arguments the shell already grouped, e.g. `rename "old name" new`.
    line = " ".join(f'"{a}"' if any(c.isspace() for c in a) else a for a in argv)
    if not line.startswith("/"):
        line = "/" + line
    try:
        reply = command_registry.dispatch(state, line)
    except TaskStoreError as exc:
        print(error_reply(exc))
        return 1
    print(reply)
    return 0


def main(argv: list[str] | None = None) -> int:
    if argv is None:
        argv = sys.argv[1:]

    settings = get_settings()

    # choose console log level from settings.log_level
    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)

    setup_logging(log_dir=settings.data_dir, console_level=console_level)

    logger.info("Starting %s...", settings.app_name)

    try:
        state = create_initial_state(settings=settings)
    except StorageError as exc:
        logger.error("Task storage unavailable: %s", exc)
        return 1

    exit_code = 0
    try:
        if argv:
            exit_code = _run_once(state, argv)
        else:
            run_console_loop(state)
    finally:
        shutdown_state(state)
        logger.info("Bye.")
    return exit_code


if __name__ == "__main__":
    sys.exit(main())
