"""Core of the elevator bank simulation."""

from .backlog import Call, PendingBacklog
from .car import Car, CarState
from .clock import ScheduledEvent, SimulationClock
from .config import BankConfig, CarConstraints
from .dispatcher import Dispatcher
from .errors import ContractViolation, InvalidFloor, NoCandidateAvailable
from .events import EventBus
from .metrics import MetricsSnapshot, MetricsTracker
from .simulation import Simulation

__all__ = [
    "BankConfig",
    "Call",
    "Car",
    "CarConstraints",
    "CarState",
    "ContractViolation",
    "Dispatcher",
    "EventBus",
    "InvalidFloor",
    "MetricsSnapshot",
    "MetricsTracker",
    "NoCandidateAvailable",
    "PendingBacklog",
    "ScheduledEvent",
    "Simulation",
    "SimulationClock",
]
