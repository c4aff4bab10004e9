"""
Deferred Task Scheduler
=======================

One-shot callbacks on a game clock that only moves when the game is ticked.

The clock is in milliseconds. Tasks fire in due-time order (ties in the order
they were scheduled) during ``advance``. Cancelled tasks never fire.
"""

from __future__ import annotations

import heapq
import itertools
import logging
from dataclasses import dataclass, field
from typing import Callable, List, Tuple

logger = logging.getLogger(__name__)


@dataclass
class ScheduledTask:
    """Handle for a pending one-shot callback."""
    name: str
    due_ms: float
    callback: Callable[[], None] = field(repr=False)
    cancelled: bool = False
    fired: bool = False

    @property
    def pending(self) -> bool:
        return not (self.cancelled or self.fired)

    def cancel(self) -> None:
        self.cancelled = True


class TaskScheduler:
    """Tick-driven scheduler for deferred game effects."""

    def __init__(self):
        self._now_ms: float = 0.0
        self._queue: List[Tuple[float, int, ScheduledTask]] = []
        self._seq = itertools.count()

    @property
    def now_ms(self) -> float:
        """Current clock time."""
        return self._now_ms

    def schedule(self, delay_ms: float, callback: Callable[[], None], name: str = "") -> ScheduledTask:
        """
        Schedule ``callback`` to run ``delay_ms`` after the current clock time.

        Returns:
            Task handle that can be cancelled.
        """
        if delay_ms < 0:
            raise ValueError(f"delay_ms must be non-negative, got {delay_ms}")
        task = ScheduledTask(name=name, due_ms=self._now_ms + delay_ms, callback=callback)
        heapq.heappush(self._queue, (task.due_ms, next(self._seq), task))
        logger.debug("Scheduled %r at t=%.1fms", name, task.due_ms)
        return task

    def advance(self, elapsed_ms: float) -> int:
        """
        Move the clock forward and fire every task that has come due.

        Returns:
            Number of tasks fired.
        """
        if elapsed_ms < 0:
            raise ValueError(f"elapsed_ms must be non-negative, got {elapsed_ms}")
        self._now_ms += elapsed_ms

        fired = 0
        while self._queue and self._queue[0][0] <= self._now_ms:
            _, _, task = heapq.heappop(self._queue)
            if task.cancelled:
                continue
            task.fired = True
            task.callback()
            fired += 1
        return fired

    def cancel_all(self) -> int:
        """Cancel every pending task. Returns how many were cancelled."""
        cancelled = 0
        for _, _, task in self._queue:
            if task.pending:
                task.cancel()
                cancelled += 1
        self._queue.clear()
        if cancelled:
            logger.debug("Cancelled %d pending task(s)", cancelled)
        return cancelled

    def has_pending(self, name: str) -> bool:
        """True if a task with this name is waiting to fire."""
        return any(task.name == name and task.pending for _, _, task in self._queue)

    def __len__(self) -> int:
        return sum(1 for _, _, task in self._queue if task.pending)
