from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional


@dataclass
class CarConstraints:
    """Timing constants shared by every car in the bank."""

    per_floor_time: float = 0.6
    min_duration: float = 0.2
    scheduling_buffer: float = 0.03
    dwell_time: float = 2.0

    def travel_time(self, floors: int) -> float:
        return max(self.min_duration, floors * self.per_floor_time)


@dataclass
class BankConfig:
    num_floors: int = 10
    car_count: int = 5
    initial_floors: Optional[List[int]] = None
    constraints: CarConstraints = field(default_factory=CarConstraints)
    selector: str = "greedy"
    assign_when_busy: bool = True

    def starting_floor(self, index: int) -> int:
        if not self.initial_floors:
            return 0
        return self.initial_floors[index]

    def validate(self) -> None:
        if self.num_floors < 2:
            raise ValueError("Building must have at least two floors")
        if self.car_count < 1:
            raise ValueError("Bank requires at least one car")
        if self.initial_floors:
            if len(self.initial_floors) != self.car_count:
                raise ValueError("Initial floors must list one floor per car")
            for floor in self.initial_floors:
                if isinstance(floor, bool) or not isinstance(floor, int):
                    raise ValueError("Initial car floor must be an integer")
                if not 0 <= floor < self.num_floors:
                    raise ValueError("Initial car floor out of range")
        if self.constraints.per_floor_time <= 0:
            raise ValueError("Per-floor travel time must be positive")
        if self.constraints.min_duration <= 0:
            raise ValueError("Minimum trip duration must be positive")
        if self.constraints.scheduling_buffer < 0:
            raise ValueError("Scheduling buffer cannot be negative")
        if self.constraints.dwell_time < 0:
            raise ValueError("Dwell time cannot be negative")

    @classmethod
    def from_dict(cls, data: Dict) -> "BankConfig":
        constraints_cfg = data.get("constraints", {})
        cfg = cls(
            num_floors=data.get("num_floors", 10),
            car_count=data.get("car_count", 5),
            initial_floors=data.get("initial_floors"),
            constraints=CarConstraints(**constraints_cfg),
            selector=data.get("selector", "greedy"),
            assign_when_busy=data.get("assign_when_busy", True),
        )
        cfg.validate()
        return cfg
