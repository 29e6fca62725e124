from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Dict, List


@dataclass
class MetricsSnapshot:
    time: float
    trips: int
    average_trip_ms: float
    trip_p95_ms: float
    max_trip_ms: float
    trips_per_car: Dict[int, int] = field(default_factory=dict)
    pending_calls: int = 0


@dataclass(frozen=True)
class TripRecord:
    car_id: int
    floor: int
    elapsed_ms: float


class MetricsTracker:
    def __init__(self) -> None:
        self.trips: List[TripRecord] = []

    def record_trip(self, car_id: int, floor: int, elapsed_ms: float) -> None:
        self.trips.append(TripRecord(car_id, floor, elapsed_ms))

    def _average(self, values: List[float]) -> float:
        if not values:
            return 0.0
        return sum(values) / len(values)

    def _percentile(self, values: List[float], percentile: float) -> float:
        if not values:
            return 0.0
        sorted_vals = sorted(values)
        k = (len(sorted_vals) - 1) * percentile
        f = math.floor(k)
        c = math.ceil(k)
        if f == c:
            return float(sorted_vals[int(k)])
        d0 = sorted_vals[int(f)] * (c - k)
        d1 = sorted_vals[int(c)] * (k - f)
        return float(d0 + d1)

    def snapshot(self, time: float, pending_calls: int = 0) -> MetricsSnapshot:
        elapsed = [trip.elapsed_ms for trip in self.trips]
        per_car: Dict[int, int] = {}
        for trip in self.trips:
            per_car[trip.car_id] = per_car.get(trip.car_id, 0) + 1
        return MetricsSnapshot(
            time=time,
            trips=len(self.trips),
            average_trip_ms=self._average(elapsed),
            trip_p95_ms=self._percentile(elapsed, 0.95),
            max_trip_ms=max(elapsed) if elapsed else 0.0,
            trips_per_car=per_car,
            pending_calls=pending_calls,
        )
