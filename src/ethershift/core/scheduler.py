"""Virtual-clock scheduler for fixed-delay continuations."""
from __future__ import annotations

import heapq
import logging
from dataclasses import dataclass, field
from typing import Callable, List

logger = logging.getLogger(__name__)


@dataclass(order=True, slots=True)
class ScheduledTask:
    """A callback due at a point on the scheduler's clock."""

    due_at: float
    order: int
    name: str = field(compare=False)
    callback: Callable[[], None] = field(compare=False, repr=False)


class Scheduler:
    """
    Fire-and-forget timers driven by an explicit clock.

    Nothing runs on its own: the owner advances time and every task whose due
    time has been reached runs in (due time, insertion) order. Callbacks may
    schedule further tasks; those run in the same advance if they fall due.
    """

    def __init__(self) -> None:
        self._now = 0.0
        self._order = 0
        self._queue: List[ScheduledTask] = []

    @property
    def now(self) -> float:
        return self._now

    def schedule(self, delay: float, name: str, callback: Callable[[], None]) -> ScheduledTask:
        """Queue a callback to run once `delay` seconds have elapsed."""
        if delay < 0:
            raise ValueError("Delay must be non-negative.")
        self._order += 1
        task = ScheduledTask(due_at=self._now + delay, order=self._order, name=name, callback=callback)
        heapq.heappush(self._queue, task)
        logger.debug("Scheduled %s at t=%.2f", name, task.due_at)
        return task

    def advance(self, seconds: float) -> int:
        """Move the clock forward, running every task that falls due. Returns the count run."""
        if seconds < 0:
            raise ValueError("Cannot advance the clock backwards.")
        target = self._now + seconds
        ran = 0
        while self._queue and self._queue[0].due_at <= target:
            task = heapq.heappop(self._queue)
            self._now = task.due_at
            task.callback()
            ran += 1
        self._now = target
        return ran

    def run_pending(self) -> int:
        """Advance until the queue is empty, including tasks scheduled along the way."""
        ran = 0
        while self._queue:
            task = heapq.heappop(self._queue)
            self._now = max(self._now, task.due_at)
            task.callback()
            ran += 1
        return ran

    def pending(self) -> List[str]:
        """Names of queued tasks in firing order."""
        return [task.name for task in sorted(self._queue)]

    def __len__(self) -> int:
        return len(self._queue)
