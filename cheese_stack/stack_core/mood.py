"""
Mood Indicator
==============

The mascot's reaction to the last drop: happy for a while after a good
placement, sad once the round is lost.
"""

from __future__ import annotations

import enum
from typing import Optional

from cheese_stack.stack_core.scheduler import ScheduledTask, TaskScheduler


class Mood(enum.Enum):
    NORMAL = "normal"
    HAPPY = "happy"
    SAD = "sad"


class MoodTracker:
    """Holds the current mood and times the happy face back to normal."""

    def __init__(self, scheduler: TaskScheduler, happy_duration_ms: float):
        self._scheduler = scheduler
        self._happy_duration_ms = happy_duration_ms
        self._mood = Mood.NORMAL
        self._revert_task: Optional[ScheduledTask] = None

    @property
    def mood(self) -> Mood:
        return self._mood

    def _cancel_revert(self) -> None:
        if self._revert_task is not None:
            self._revert_task.cancel()
            self._revert_task = None

    def cheer(self) -> None:
        """Show the happy face; a later cheer restarts the timer."""
        self._cancel_revert()
        self._mood = Mood.HAPPY
        self._revert_task = self._scheduler.schedule(
            self._happy_duration_ms, self._revert, name="mood_revert"
        )

    def sulk(self) -> None:
        self._cancel_revert()
        self._mood = Mood.SAD

    def reset(self) -> None:
        self._cancel_revert()
        self._mood = Mood.NORMAL

    def _revert(self) -> None:
        self._revert_task = None
        if self._mood is Mood.HAPPY:
            self._mood = Mood.NORMAL
