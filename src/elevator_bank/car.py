from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Callable, List, Optional

from .clock import ScheduledEvent, SimulationClock
from .config import CarConstraints
from .errors import ContractViolation
from .events import (
    CAR_ARRIVED,
    CAR_IDLE,
    CAR_MOVING,
    CAR_STATE_CHANGED,
    CarArrived,
    CarIdleAgain,
    CarMoving,
    CarStateChanged,
    EventBus,
)

if TYPE_CHECKING:  # pragma: no cover - import cycle safe typing
    from .metrics import MetricsTracker

logger = logging.getLogger(__name__)


class CarState(str, Enum):
    IDLE = "idle"
    MOVING = "moving"
    ARRIVED = "arrived"
    OUT_OF_SERVICE = "out_of_service"


@dataclass
class Car:
    """One elevator car with a private FIFO stop queue."""

    car_id: int
    clock: SimulationClock = field(repr=False)
    constraints: CarConstraints = field(default_factory=CarConstraints, repr=False)
    events: EventBus = field(default_factory=EventBus, repr=False)
    current_floor: int = 0
    queue: List[int] = field(default_factory=list)
    state: CarState = CarState.IDLE
    target_floor: Optional[int] = None
    last_trip_ms: Optional[float] = None
    metrics: Optional["MetricsTracker"] = field(default=None, repr=False)
    on_idle: Optional[Callable[["Car"], None]] = field(default=None, repr=False)
    _transit: Optional[ScheduledEvent] = field(default=None, repr=False)
    _dwell: Optional[ScheduledEvent] = field(default=None, repr=False)

    def in_service(self) -> bool:
        return self.state != CarState.OUT_OF_SERVICE

    def is_idle(self) -> bool:
        return self.state == CarState.IDLE

    def distance_to(self, floor: int) -> int:
        return abs(self.current_floor - floor)

    def assign(self, floor: int) -> None:
        if not self.in_service():
            raise ContractViolation(f"Car {self.car_id} is out of service and cannot take floor {floor}")
        self.queue.append(floor)
        logger.debug("car %s queued floor %s (queue=%s)", self.car_id, floor, self.queue)
        self.try_process_queue()

    def try_process_queue(self) -> bool:
        if self.state != CarState.IDLE or not self.queue:
            return False
        self.move_to(self.queue.pop(0))
        return True

    def move_to(self, target_floor: int) -> None:
        duration = self.constraints.travel_time(self.distance_to(target_floor))
        self._set_state(CarState.MOVING)
        self.target_floor = target_floor
        self.events.emit(CAR_MOVING, CarMoving(self.car_id, self.current_floor, target_floor, duration))

        self.clock.cancel(self._transit)
        started = self.clock.now
        self._transit = self.clock.schedule(
            duration + self.constraints.scheduling_buffer,
            self._complete_transit,
            target_floor,
            started,
        )

    def on_arrive(self, elapsed_ms: float) -> None:
        self.events.emit(CAR_ARRIVED, CarArrived(self.car_id, self.current_floor, elapsed_ms))
        self._set_state(CarState.ARRIVED)
        self.last_trip_ms = elapsed_ms
        if self.metrics is not None:
            self.metrics.record_trip(self.car_id, self.current_floor, elapsed_ms)
        self._dwell = self.clock.schedule(self.constraints.dwell_time, self._finish_dwell)

    def mark_out_of_service(self) -> List[int]:
        """Take the car out of service for good.

        Returns the floors the car still owed, the in-flight target first and
        then the queue in order, so the caller can hand them to another car.
        """
        if not self.in_service():
            return []
        owed: List[int] = []
        if self.state == CarState.MOVING and self.target_floor is not None:
            owed.append(self.target_floor)
        owed.extend(self.queue)
        self.queue.clear()
        self.clock.cancel(self._transit)
        self.clock.cancel(self._dwell)
        self._transit = None
        self._dwell = None
        self.target_floor = None
        self._set_state(CarState.OUT_OF_SERVICE)
        return owed

    def _complete_transit(self, target_floor: int, started: float) -> None:
        self._transit = None
        self.current_floor = target_floor
        self.target_floor = None
        self.on_arrive(float(round((self.clock.now - started) * 1000.0)))

    def _finish_dwell(self) -> None:
        self._dwell = None
        self._set_state(CarState.IDLE)
        self.events.emit(CAR_IDLE, CarIdleAgain(self.car_id))
        self.try_process_queue()
        if self.on_idle is not None:
            self.on_idle(self)

    def _set_state(self, state: CarState) -> None:
        if state == self.state:
            return
        logger.debug("car %s %s -> %s at floor %s", self.car_id, self.state.value, state.value, self.current_floor)
        self.state = state
        self.events.emit(CAR_STATE_CHANGED, CarStateChanged(self.car_id, state.value))
