"""Deferred engine actions keyed by session generation.

Delayed transitions (reel-in start, bite hand-off, caught-display clear,
challenge timeout) are queued here in simulation time. Every task remembers
the generation it was scheduled under; ``cancel_all()`` moves to a new
generation, and a task from an older generation is dropped instead of run,
so nothing queued by one session can fire into the next.
"""

import heapq
import itertools
import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

logger = logging.getLogger(__name__)


@dataclass(order=True)
class ScheduledTask:
    due_ms: float
    seq: int
    name: str = field(compare=False)
    generation: int = field(compare=False)
    callback: Callable[[], None] = field(compare=False, repr=False)
    cancelled: bool = field(default=False, compare=False)


class DeferredScheduler:
    """Min-heap of named one-shot tasks.

    At most one pending task per name: scheduling a name again replaces the
    earlier task.
    """

    def __init__(self) -> None:
        self._heap: List[ScheduledTask] = []
        self._by_name: Dict[str, ScheduledTask] = {}
        self._seq = itertools.count()
        self.generation = 0
        self.dropped_stale = 0

    def schedule(
        self,
        name: str,
        delay_ms: float,
        callback: Callable[[], None],
        now_ms: float,
    ) -> ScheduledTask:
        self.cancel(name)
        task = ScheduledTask(
            due_ms=now_ms + max(0.0, delay_ms),
            seq=next(self._seq),
            name=name,
            generation=self.generation,
            callback=callback,
        )
        heapq.heappush(self._heap, task)
        self._by_name[name] = task
        return task

    def cancel(self, name: str) -> bool:
        task = self._by_name.pop(name, None)
        if task is None:
            return False
        task.cancelled = True
        return True

    def cancel_all(self) -> int:
        """Cancel everything and start a new generation.

        Returns:
            The new generation number
        """
        pending = len(self._by_name)
        # Queued tasks stay in the heap and are dropped by the generation check
        self._by_name.clear()
        self.generation += 1
        if pending:
            logger.debug("Cancelled %d deferred task(s); generation now %d", pending, self.generation)
        return self.generation

    def is_pending(self, name: str) -> bool:
        return name in self._by_name

    @property
    def pending(self) -> List[str]:
        return sorted(self._by_name, key=lambda n: self._by_name[n].due_ms)

    def next_due(self) -> Optional[float]:
        self._discard_dead()
        return self._heap[0].due_ms if self._heap else None

    def pop_due(self, now_ms: float) -> Optional[ScheduledTask]:
        """Pop the earliest live task due at or before *now_ms*."""
        self._discard_dead()
        if not self._heap or self._heap[0].due_ms > now_ms:
            return None
        task = heapq.heappop(self._heap)
        self._by_name.pop(task.name, None)
        return task

    def run_due(self, now_ms: float) -> int:
        """Run every task due by *now_ms* in due order; returns how many ran."""
        ran = 0
        while True:
            task = self.pop_due(now_ms)
            if task is None:
                return ran
            task.callback()
            ran += 1

    def _discard_dead(self) -> None:
        while self._heap and (self._heap[0].cancelled or self._heap[0].generation != self.generation):
            task = heapq.heappop(self._heap)
            if not task.cancelled:
                self.dropped_stale += 1
                logger.debug(
                    "Dropped stale task '%s' from generation %d (current %d)",
                    task.name,
                    task.generation,
                    self.generation,
                )

    def __len__(self) -> int:
        return len(self._by_name)
