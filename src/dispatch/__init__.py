from __future__ import annotations

from typing import Dict, Type

from .greedy import GreedySelector
from .interface import CarSnapshot, Selector

__all__ = [
    "CarSnapshot",
    "GreedySelector",
    "Selector",
    "get_selector",
]


SELECTOR_REGISTRY: Dict[str, Type[Selector]] = {
    "greedy": GreedySelector,
}


def get_selector(name: str, **kwargs) -> Selector:
    cls = SELECTOR_REGISTRY.get(name.lower())
    if cls is None:
        raise ValueError(f"Unknown selector '{name}'. Available: {', '.join(SELECTOR_REGISTRY)}")
    return cls(**kwargs)
