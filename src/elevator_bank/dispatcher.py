from __future__ import annotations

import logging
from typing import List, Optional

from dispatch import CarSnapshot, Selector, get_selector

from .backlog import Call, PendingBacklog
from .car import Car
from .clock import SimulationClock
from .config import BankConfig
from .errors import InvalidFloor, NoCandidateAvailable
from .events import CALL_DEFERRED, CallDeferred, EventBus
from .metrics import MetricsTracker

logger = logging.getLogger(__name__)


class Dispatcher:
    """Owns the car roster and the pending backlog.

    Every call enters through :meth:`register_call`. Selecting a car and
    assigning the floor to it happen in the same synchronous step, so no other
    event can change a car's state in between. Callers that add real
    parallelism must hold a lock around :meth:`register_call`.
    """

    def __init__(
        self,
        config: BankConfig,
        clock: SimulationClock,
        events: Optional[EventBus] = None,
        metrics: Optional[MetricsTracker] = None,
    ) -> None:
        config.validate()
        self.config = config
        self.clock = clock
        self.events = events or EventBus()
        self.metrics = metrics
        self.selector: Selector = get_selector(config.selector, assign_when_busy=config.assign_when_busy)
        self.backlog = PendingBacklog()
        self.cars: List[Car] = [
            Car(
                car_id=index + 1,
                clock=clock,
                constraints=config.constraints,
                events=self.events,
                current_floor=config.starting_floor(index),
                metrics=metrics,
                on_idle=self._on_car_idle,
            )
            for index in range(config.car_count)
        ]

    @property
    def num_floors(self) -> int:
        return self.config.num_floors

    def get_car(self, car_id: int) -> Car:
        for car in self.cars:
            if car.car_id == car_id:
                return car
        raise KeyError(car_id)

    def validate_floor(self, floor: object) -> int:
        if isinstance(floor, bool) or not isinstance(floor, int):
            raise InvalidFloor(floor, self.num_floors)
        if not 0 <= floor < self.num_floors:
            raise InvalidFloor(floor, self.num_floors)
        return floor

    def register_call(self, floor: int) -> Optional[Car]:
        floor = self.validate_floor(floor)
        call = Call(floor=floor, ts=self.clock.now)
        try:
            return self.assign_call(call)
        except NoCandidateAvailable:
            self._defer(call)
            return None

    def assign_call(self, call: Call) -> Car:
        car_id = self.selector.select(self._snapshot_cars(), call.floor)
        if car_id is None:
            raise NoCandidateAvailable(call.floor)
        car = self.get_car(car_id)
        logger.info("t=%.2f call for floor %s -> car %s (%s)", self.clock.now, call.floor, car.car_id, car.state.value)
        car.assign(call.floor)
        return car

    def dispatch_pending_calls(self) -> int:
        if not self.backlog:
            return 0
        assigned = self.backlog.retry(self._try_assign)
        if assigned:
            logger.debug("drained %d pending call(s), %d left", len(assigned), len(self.backlog))
        return len(assigned)

    def mark_out_of_service(self, car_id: int) -> Car:
        car = self.get_car(car_id)
        if not car.in_service():
            return car
        owed = [Call(floor=floor, ts=self.clock.now) for floor in car.mark_out_of_service()]
        logger.info("t=%.2f car %s out of service, re-homing floors %s", self.clock.now, car_id, [c.floor for c in owed])
        self.backlog.extend(owed)
        self.dispatch_pending_calls()
        still_pending = set(map(id, self.backlog))
        for call in owed:
            if id(call) in still_pending:
                self._report_deferred(call)
        return car

    def snapshot(self) -> dict:
        return {
            "floors": self.num_floors,
            "cars": [
                {
                    "id": car.car_id,
                    "floor": car.current_floor,
                    "target": car.target_floor,
                    "queue": list(car.queue),
                    "state": car.state.value,
                    "last_trip_ms": car.last_trip_ms,
                }
                for car in self.cars
            ],
            "pending_calls": self.backlog.floors(),
        }

    def _try_assign(self, call: Call) -> bool:
        try:
            self.assign_call(call)
        except NoCandidateAvailable:
            return False
        return True

    def _defer(self, call: Call) -> None:
        self.backlog.append(call)
        self._report_deferred(call)

    def _report_deferred(self, call: Call) -> None:
        logger.warning("t=%.2f no car available for floor %s, call held in backlog", self.clock.now, call.floor)
        self.events.emit(CALL_DEFERRED, CallDeferred(call.floor, call.ts))

    def _on_car_idle(self, car: Car) -> None:
        self.dispatch_pending_calls()

    def _snapshot_cars(self) -> List[CarSnapshot]:
        return [
            CarSnapshot(
                car_id=car.car_id,
                floor=car.current_floor,
                state=car.state.value,
                queue_length=len(car.queue),
            )
            for car in self.cars
        ]
