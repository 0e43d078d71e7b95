# src/task_ledger/cli/commands.py

from __future__ import annotations

import contextlib
import inspect
import logging
import re
from collections.abc import Callable
from datetime import UTC, datetime
from typing import cast

from ..core.clock import ManualClock
from ..core.state import AppState
from ..tasks.task_errors import TaskRegistryError
from ..tasks.task_models import Task

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)

_DURATION_RE = re.compile(r"^(\d+)([dhms]?)$")
_DUE_RE = re.compile(r"^now(?:([+-])(\w+))?$")
_UNIT_SECONDS = {"d": 86400, "h": 3600, "m": 60, "s": 1, "": 1}


class CommandRegistry:
    """Simple slash-command registry used by connectors (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        try:
            if nparams >= 3:
                h3 = cast(CommandHandler3, handler)
                return h3(state, args, emit)

            h2 = cast(CommandHandler2, handler)
            return h2(state, args)
        except TaskRegistryError as e:
            return format_error(e)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- parsing / formatting helpers ----


def parse_duration(raw: str) -> int:
    """'90' -> 90, '2h' -> 7200, '1d' -> 86400."""
    m = _DURATION_RE.match(raw.strip().lower())
    if not m:
        raise ValueError(f"bad duration: {raw!r}")
    return int(m.group(1)) * _UNIT_SECONDS[m.group(2)]


def parse_due(raw: str, now: int) -> int:
    """Integer timestamp, 'now', or 'now+1d' / 'now-2h'."""
    raw = raw.strip().lower()
    m = _DUE_RE.match(raw)
    if m:
        sign, offset = m.groups()
        if not sign:
            return now
        delta = parse_duration(offset)
        return now + delta if sign == "+" else now - delta
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"bad due date: {raw!r}") from e


def _split_text(words: list[str]) -> tuple[str, str]:
    title, _, description = " ".join(words).partition("|")
    return title.strip(), description.strip()


def _fmt_ts(ts: int) -> str:
    """UTC date for display; timestamps outside datetime's range are shown raw."""
    try:
        return datetime.fromtimestamp(ts, UTC).strftime("%Y-%m-%d %H:%M:%S UTC")
    except (ValueError, OverflowError, OSError):
        return f"@{ts}"


def format_task(task: Task) -> str:
    line = f"#{task.id} [{task.status.name.lower()}] p{task.priority} due {_fmt_ts(task.due_date)}: {task.title}"
    if task.description:
        line += f" ({task.description})"
    return line


def format_error(e: TaskRegistryError) -> str:
    return f"Error ({e.kind}): {e}"


def _parse_id(raw: str) -> int:
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"bad task id: {raw!r}") from e


def _task_list(title: str, tasks: list[Task]) -> str:
    if not tasks:
        return f"{title}: none."
    return "\n".join([f"{title}:"] + [f"  {format_task(t)}" for t in tasks])


# ---- handlers ----


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_as(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /as          -> show current caller
    /as <name>   -> act as <name> for the following commands
    """
    if not args:
        return f"Acting as {state.caller}."
    state.caller = args[0]
    logger.debug("Console caller switched to %s", state.caller)
    return f"Now acting as {state.caller}."


def cmd_add(state: AppState, args: list[str]) -> str:
    usage = "Usage: /add <due> <priority> <title> [| description]"
    if len(args) < 3:
        return usage
    try:
        due = parse_due(args[0], state.clock.now())
        priority = int(args[1])
    except ValueError as e:
        return f"{e}\n{usage}"
    title, description = _split_text(args[2:])
    task_id = state.registry.add_task(state.caller, due, title, description, priority)
    return f"Task #{task_id} added."


def cmd_edit(state: AppState, args: list[str]) -> str:
    usage = "Usage: /edit <id> <due> <priority> <title> [| description]"
    if len(args) < 4:
        return usage
    try:
        task_id = _parse_id(args[0])
        due = parse_due(args[1], state.clock.now())
        priority = int(args[2])
    except ValueError as e:
        return f"{e}\n{usage}"
    title, description = _split_text(args[3:])
    state.registry.edit_task(state.caller, task_id, due, title, description, priority)
    return f"Task #{task_id} updated."


def cmd_rm(state: AppState, args: list[str]) -> str:
    if len(args) != 1:
        return "Usage: /rm <id>"
    try:
        task_id = _parse_id(args[0])
    except ValueError as e:
        return f"{e}\nUsage: /rm <id>"
    state.registry.remove_task(state.caller, task_id)
    return f"Task #{task_id} removed."


def cmd_get(state: AppState, args: list[str]) -> str:
    if len(args) != 1:
        return "Usage: /get <id>"
    try:
        task_id = _parse_id(args[0])
    except ValueError as e:
        return f"{e}\nUsage: /get <id>"
    task = state.registry.get_record(task_id)
    return f"{format_task(task)} owner={task.owner}"


def cmd_done(state: AppState, args: list[str]) -> str:
    if len(args) != 1:
        return "Usage: /done <id>"
    try:
        task_id = _parse_id(args[0])
    except ValueError as e:
        return f"{e}\nUsage: /done <id>"
    state.registry.set_task_as_complete(state.caller, task_id)
    return f"Task #{task_id} completed."


def cmd_ls(state: AppState, args: list[str]) -> str:
    return _task_list(f"Tasks of {state.caller}", state.registry.list_my_tasks(state.caller))


def cmd_today(state: AppState, args: list[str]) -> str:
    tasks = state.registry.list_my_today_tasks(state.caller)
    return _task_list(f"Tasks of {state.caller} due today", tasks)


def cmd_now(state: AppState, args: list[str]) -> str:
    now = state.clock.now()
    return f"Now: {now} ({_fmt_ts(now)})"


def cmd_advance(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /advance 1d  -> move a manual clock forward one day
    """
    clock = state.clock
    if not isinstance(clock, ManualClock):
        return "Clock is the system clock. Set TASK_LEDGER_MANUAL_CLOCK=true to use /advance."
    if len(args) != 1:
        return "Usage: /advance <seconds|Nd|Nh|Nm>"
    try:
        seconds = parse_duration(args[0])
    except ValueError as e:
        return f"{e}\nUsage: /advance <seconds|Nd|Nh|Nm>"

    if emit:
        with contextlib.suppress(Exception):
            emit(f"[CLOCK] Advancing {seconds}s...")

    now = clock.advance(seconds)
    return f"Now: {now} ({_fmt_ts(now)})"


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("as", cmd_as, help_text="Show or switch the acting identity: /as <name>.", aliases=["whoami"])
registry.register("add", cmd_add, help_text="Add a task: /add <due> <priority 1-3> <title> [| description].")
registry.register(
    "edit", cmd_edit, help_text="Edit your task: /edit <id> <due> <priority 1-3> <title> [| description]."
)
registry.register("rm", cmd_rm, help_text="Remove (soft delete) your task: /rm <id>.", aliases=["remove"])
registry.register("get", cmd_get, help_text="Show any live task by id: /get <id>.")
registry.register("done", cmd_done, help_text="Mark your task as completed: /done <id>.", aliases=["complete"])
registry.register("ls", cmd_ls, help_text="List your live tasks.", aliases=["list"])
registry.register("today", cmd_today, help_text="List your live tasks due today.")
registry.register("now", cmd_now, help_text="Show the current clock reading.")
registry.register("advance", cmd_advance, help_text="Advance a manual clock: /advance 1d.")
