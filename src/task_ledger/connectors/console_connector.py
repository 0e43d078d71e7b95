# src/task_ledger/connectors/console_connector.py

from __future__ import annotations

import logging
import sys
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..core.state import AppState

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _rewrite_prev_line(line: str) -> None:
    """
    Replace the last terminal line with `line`.
    Best-effort: if not a TTY, just print a new line.
    """
    if sys.stdout.isatty():
        sys.stdout.write("\033[1A\033[2K\r")
        sys.stdout.write(line + "\n")
        sys.stdout.flush()
    else:
        print(line)


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}")


def handle_line(state: AppState, line: str) -> str | None:
    """Run one console line through the command registry under the state lock."""

    def emit(text: str) -> None:
        print(f"[{_ts_local()}] {text}", flush=True)

    with state.lock:
        return command_registry.handle(state, line, emit=emit)


def run_console_loop(state: AppState) -> None:
    logger.info("Console connector started (caller=%s).", state.caller)
    _print_ts("[CONSOLE] Use /help for commands, /as <name> to switch identity, /exit to quit.\n")

    while True:
        try:
            user_input = input(f"[{state.caller}] >>> ").strip()
            _rewrite_prev_line(f"[{_ts_local()}] [{state.caller}] >>> {user_input}")
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

        try:
            response = handle_line(state, user_input)
        except Exception:
            logger.exception("Command handler crashed.")
            response = "Internal error while handling a command."

        if response is None:
            response = "Not a command. Use /help to list available commands."

        _print_ts(response)

    logger.info("Console connector finished.")
