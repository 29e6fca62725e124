from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable, Iterator, List, Optional


@dataclass(frozen=True)
class Call:
    """A rider's pickup request at a floor."""

    floor: int
    ts: float


class PendingBacklog:
    """FIFO list of calls no car has taken yet."""

    def __init__(self, calls: Optional[Iterable[Call]] = None) -> None:
        self._calls: List[Call] = list(calls or [])

    def append(self, call: Call) -> None:
        self._calls.append(call)

    def extend(self, calls: Iterable[Call]) -> None:
        self._calls.extend(calls)

    def oldest(self) -> Optional[Call]:
        return self._calls[0] if self._calls else None

    def floors(self) -> List[int]:
        return [call.floor for call in self._calls]

    def retry(self, assign: Callable[[Call], bool]) -> List[Call]:
        """Offer every call to ``assign`` in FIFO order.

        Accepted calls are dropped; the rest keep their relative order.
        """
        assigned: List[Call] = []
        index = 0
        while index < len(self._calls):
            call = self._calls[index]
            if assign(call):
                del self._calls[index]
                assigned.append(call)
            else:
                index += 1
        return assigned

    def __iter__(self) -> Iterator[Call]:
        return iter(list(self._calls))

    def __len__(self) -> int:
        return len(self._calls)
