# src/task_ledger/core/clock.py

from __future__ import annotations

import logging
import time

logger = logging.getLogger(__name__)


class SystemClock:
    """Wall clock, truncated to whole seconds."""

    def now(self) -> int:
        return int(time.time())


class ManualClock:
    """
    Deterministic clock for tests and the console's /advance command.

    Only moves forward: set() to an earlier time and negative advance() are rejected.
    """

    def __init__(self, start: int | None = None) -> None:
        self._now = int(time.time()) if start is None else int(start)

    def now(self) -> int:
        return self._now

    def advance(self, seconds: int) -> int:
        seconds = int(seconds)
        if seconds < 0:
            raise ValueError("clock cannot move backwards")
        self._now += seconds
        logger.debug("ManualClock advanced by %s to %s", seconds, self._now)
        return self._now

    def set(self, ts: int) -> int:
        ts = int(ts)
        if ts < self._now:
            raise ValueError("clock cannot move backwards")
        self._now = ts
        return self._now
