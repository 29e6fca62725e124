from __future__ import annotations

import logging
import math
import random
from typing import Callable, List, Optional

from .car import Car
from .clock import SimulationClock
from .config import BankConfig
from .dispatcher import Dispatcher
from .events import EventBus
from .metrics import MetricsSnapshot, MetricsTracker

logger = logging.getLogger(__name__)


class Simulation:
    """Event-driven elevator bank simulation for analytics and UI consumption."""

    def __init__(
        self,
        dispatcher: Dispatcher,
        call_rate_per_floor: float = 0.0,
        random_seed: Optional[int] = None,
    ) -> None:
        self.dispatcher = dispatcher
        self.clock = dispatcher.clock
        self.events = dispatcher.events
        if dispatcher.metrics is None:
            dispatcher.metrics = MetricsTracker()
            for car in dispatcher.cars:
                car.metrics = dispatcher.metrics
        self.metrics = dispatcher.metrics
        self.call_rate_per_floor = call_rate_per_floor
        self.random = random.Random(random_seed)
        self.calls_registered = 0

    @classmethod
    def from_config(
        cls,
        config: BankConfig,
        call_rate_per_floor: float = 0.0,
        random_seed: Optional[int] = None,
    ) -> "Simulation":
        clock = SimulationClock()
        dispatcher = Dispatcher(config, clock, events=EventBus(), metrics=MetricsTracker())
        return cls(dispatcher, call_rate_per_floor=call_rate_per_floor, random_seed=random_seed)

    @property
    def current_time(self) -> float:
        return self.clock.now

    @property
    def cars(self) -> List[Car]:
        return self.dispatcher.cars

    def on_event(self, event: str, callback: Callable[[object], None]) -> None:
        self.events.on(event, callback)

    def register_call(self, floor: int) -> Optional[Car]:
        car = self.dispatcher.register_call(floor)
        self.calls_registered += 1
        return car

    def mark_out_of_service(self, car_id: int) -> Car:
        return self.dispatcher.mark_out_of_service(car_id)

    def step(self, dt: float = 1.0) -> None:
        self._generate_calls()
        self.clock.run_until(self.clock.now + dt)

    def run(self, duration: float, dt: float = 1.0) -> None:
        ticks = int(math.ceil(duration / dt))
        for _ in range(ticks):
            self.step(dt)

    def run_until_idle(self) -> int:
        return self.clock.run_until_idle()

    def metrics_snapshot(self) -> MetricsSnapshot:
        return self.metrics.snapshot(self.clock.now, pending_calls=len(self.dispatcher.backlog))

    def snapshot(self) -> dict:
        return {"time": self.clock.now, **self.dispatcher.snapshot()}

    def _generate_calls(self) -> None:
        if self.call_rate_per_floor <= 0:
            return
        total = 0
        for floor in range(self.dispatcher.num_floors):
            for _ in range(self._poisson(self.call_rate_per_floor)):
                self.register_call(floor)
                total += 1
        if total:
            logger.debug("t=%.2f generated %d call(s)", self.clock.now, total)

    def _poisson(self, lam: float) -> int:
        if lam <= 0:
            return 0
        L = math.exp(-lam)
        k = 0
        p = 1.0
        while p > L:
            k += 1
            p *= self.random.random()
        return k - 1
