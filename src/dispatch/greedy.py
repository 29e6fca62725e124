from __future__ import annotations

from typing import List, Optional, Sequence

from .interface import CarSnapshot


class GreedySelector:
    """Prefers the nearest idle car, otherwise the least loaded one.

    Busy cars are ranked by queue length then by distance from the floor
    they departed, ignoring where they are heading. A car about to pass the
    requested floor gets no preference.
    """

    def __init__(self, assign_when_busy: bool = True) -> None:
        self.assign_when_busy = assign_when_busy

    def select(self, cars: Sequence[CarSnapshot], floor: int) -> Optional[int]:
        candidates: List[CarSnapshot] = [car for car in cars if car.in_service]
        if not candidates:
            return None

        idle = [car for car in candidates if car.idle]
        if idle:
            # sorted() is stable, so creation order breaks remaining ties
            idle = sorted(idle, key=lambda car: (car.distance_to(floor), car.queue_length))
            return idle[0].car_id

        if not self.assign_when_busy:
            return None
        ranked = sorted(candidates, key=lambda car: (car.queue_length, car.distance_to(floor)))
        return ranked[0].car_id
