"""Outbound notifications for rendering, audio and logging adapters."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, List

CAR_STATE_CHANGED = "car_state_changed"
CAR_MOVING = "car_moving"
CAR_ARRIVED = "car_arrived"
CAR_IDLE = "car_idle"
CALL_DEFERRED = "call_deferred"


@dataclass(frozen=True)
class CarStateChanged:
    car_id: int
    state: str


@dataclass(frozen=True)
class CarMoving:
    car_id: int
    from_floor: int
    to_floor: int
    duration_s: float


@dataclass(frozen=True)
class CarArrived:
    car_id: int
    floor: int
    elapsed_ms: float


@dataclass(frozen=True)
class CarIdleAgain:
    car_id: int


@dataclass(frozen=True)
class CallDeferred:
    floor: int
    ts: float


class EventBus:
    def __init__(self) -> None:
        self.event_hooks: Dict[str, List[Callable[[object], None]]] = {}

    def on(self, event: str, callback: Callable[[object], None]) -> None:
        self.event_hooks.setdefault(event, []).append(callback)

    def on_any(self, callback: Callable[[str, object], None]) -> None:
        for event in (CAR_STATE_CHANGED, CAR_MOVING, CAR_ARRIVED, CAR_IDLE, CALL_DEFERRED):
            self.on(event, lambda payload, name=event: callback(name, payload))

    def emit(self, event: str, payload: object) -> None:
        for callback in self.event_hooks.get(event, []):
            callback(payload)
