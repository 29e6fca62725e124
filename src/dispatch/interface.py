from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol, Sequence

IDLE = "idle"
OUT_OF_SERVICE = "out_of_service"


@dataclass(frozen=True)
class CarSnapshot:
    """Read-only view of a car for selection decisions."""

    car_id: int
    floor: int
    state: str
    queue_length: int

    @property
    def idle(self) -> bool:
        return self.state == IDLE

    @property
    def in_service(self) -> bool:
        return self.state != OUT_OF_SERVICE

    def distance_to(self, floor: int) -> int:
        return abs(self.floor - floor)


class Selector(Protocol):
    """Strategy interface for picking the car that serves a call."""

    def select(self, cars: Sequence[CarSnapshot], floor: int) -> Optional[int]:
        """
        Return the id of the chosen car, or None when no car can take the call.

        ``cars`` is ordered by creation; implementations must break ties in
        that order.
        """
        ...
