# src/task_ledger/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, then runs the console REPL in the main thread.
"""

from __future__ import annotations

import logging
import signal
import threading

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..core.state import AppState
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


def _shutdown(state: AppState) -> None:
    """Best-effort shutdown (no exceptions should escape)."""
    try:
        state.store.close()
    except Exception:
        logger.debug("Task store close failed.", exc_info=True)


def make_signal_handler(stop: threading.Event):
    """
    SIGTERM handler: set `stop` and interrupt the main thread.

    Raising KeyboardInterrupt unblocks a pending input() in the console loop,
    which then unwinds through the same path as Ctrl+C.
    """

    def _handle_signal(signum, _frame) -> None:
        logger.info("Signal %s received, shutting down...", signum)
        stop.set()
        raise KeyboardInterrupt

    return _handle_signal


def main() -> None:
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)

    app_name = getattr(settings, "app_name", "task-ledger")
    log_dir = getattr(settings, "data_dir", ".local/task_ledger")
    log_file = setup_logging(app_name=app_name, log_dir=log_dir, console_level=console_level)

    logger.info("Starting %s (log file %s)...", app_name, log_file)

    state = create_initial_state(settings=settings)
    logger.info("Registry holds %s task(s).", state.registry.task_count())

    # Use an Event so main can wait without a busy while-loop.
    stop_main = threading.Event()

    try:
        signal.signal(signal.SIGTERM, make_signal_handler(stop_main))
    except (ValueError, OSError, AttributeError):
        # Not in the main thread, or SIGTERM unsupported on this platform.
        pass

    try:
        if settings.console_enabled:
            run_console_loop(state)
            stop_main.set()
        else:
            logger.info("Console disabled. Nothing else to run; press Ctrl+C to stop.")
            try:
                stop_main.wait()
            except KeyboardInterrupt:
                pass
    finally:
        _shutdown(state)
        logger.info("Bye.")


if __name__ == "__main__":
    main()
