"""Exceptions raised by the elevator bank core."""
from __future__ import annotations


class InvalidFloor(ValueError):
    """A call or assignment targets a floor outside the building."""

    def __init__(self, floor: object, num_floors: int) -> None:
        super().__init__(f"Floor {floor!r} is outside 0..{num_floors - 1}")
        self.floor = floor
        self.num_floors = num_floors


class NoCandidateAvailable(RuntimeError):
    """No car can currently take a call; the call belongs in the backlog."""

    def __init__(self, floor: int) -> None:
        super().__init__(f"No car available for floor {floor}")
        self.floor = floor


class ContractViolation(AssertionError):
    """Raised when a caller bypasses the dispatcher, e.g. assigning to an out-of-service car."""
