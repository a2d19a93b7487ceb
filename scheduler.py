"""Deferred one-shot callbacks driven by the game tick instead of a timer thread."""

import itertools
import logging
from dataclasses import dataclass, field
from typing import Callable

logger = logging.getLogger(__name__)


@dataclass(order=True)
class ScheduledTask:
    due: float
    seq: int
    callback: Callable[[], None] = field(compare=False)
    label: str = field(default="", compare=False)
    cancelled: bool = field(default=False, compare=False)

    def cancel(self):
        self.cancelled = True


class Scheduler:
    """
    Owned by one mode. `advance(dt)` moves the clock and fires every task
    whose delay has elapsed, oldest due first. `cancel_all()` drops everything
    still pending, which is what a mode does when it is deactivated.
    """

    def __init__(self):
        self.now = 0.0
        self._tasks: list[ScheduledTask] = []
        self._seq = itertools.count()

    def call_later(self, delay: float, callback: Callable[[], None],
                   label: str = "") -> ScheduledTask:
        task = ScheduledTask(self.now + max(0.0, delay), next(self._seq), callback, label)
        self._tasks.append(task)
        return task

    def advance(self, dt: float) -> int:
        self.now += dt
        due = sorted(t for t in self._tasks if t.due <= self.now and not t.cancelled)
        self._tasks = [t for t in self._tasks if t.due > self.now and not t.cancelled]

        fired = 0
        for task in due:
            if task.cancelled:
                continue
            try:
                task.callback()
            except Exception:
                logger.exception("Scheduled task %r failed", task.label or task.callback)
            fired += 1
        return fired

    def cancel_all(self) -> int:
        pending = len(self.pending)
        for task in self._tasks:
            task.cancel()
        self._tasks.clear()
        return pending

    @property
    def pending(self) -> list[ScheduledTask]:
        return [t for t in self._tasks if not t.cancelled]

    def __len__(self):
        return len(self.pending)
