from __future__ import annotations

import heapq
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional, Tuple

logger = logging.getLogger(__name__)


@dataclass(order=True)
class ScheduledEvent:
    """A callback due at a point in simulated time.

    Events compare by ``(time, seq)`` so that events scheduled for the same
    instant fire in the order they were scheduled.
    """

    time: float
    seq: int
    callback: Callable[..., None] = field(compare=False)
    args: Tuple[Any, ...] = field(default=(), compare=False)
    cancelled: bool = field(default=False, compare=False)

    def cancel(self) -> None:
        self.cancelled = True


class SimulationClock:
    """Deterministic event queue driving all simulated delays."""

    def __init__(self, start: float = 0.0) -> None:
        self.now: float = start
        self._queue: List[ScheduledEvent] = []
        self._seq = 0

    def schedule(self, delay: float, callback: Callable[..., None], *args: Any) -> ScheduledEvent:
        if delay < 0:
            raise ValueError("Cannot schedule an event in the past")
        self._seq += 1
        event = ScheduledEvent(self.now + delay, self._seq, callback, args)
        heapq.heappush(self._queue, event)
        return event

    def cancel(self, event: Optional[ScheduledEvent]) -> None:
        if event is not None:
            event.cancel()

    @property
    def pending(self) -> int:
        return sum(1 for event in self._queue if not event.cancelled)

    def next_time(self) -> Optional[float]:
        self._discard_cancelled()
        if not self._queue:
            return None
        return self._queue[0].time

    def step(self) -> bool:
        """Fire the next live event. Returns False when nothing is scheduled."""
        self._discard_cancelled()
        if not self._queue:
            return False
        event = heapq.heappop(self._queue)
        self.now = event.time
        logger.debug("t=%.3f firing %s", self.now, getattr(event.callback, "__qualname__", event.callback))
        event.callback(*event.args)
        return True

    def run_until(self, time: float) -> int:
        fired = 0
        while True:
            upcoming = self.next_time()
            if upcoming is None or upcoming > time:
                break
            self.step()
            fired += 1
        self.now = max(self.now, time)
        return fired

    def run_until_idle(self, max_events: int = 100_000) -> int:
        fired = 0
        while fired < max_events and self.step():
            fired += 1
        return fired

    def _discard_cancelled(self) -> None:
        while self._queue and self._queue[0].cancelled:
            heapq.heappop(self._queue)
