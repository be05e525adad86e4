"""Layered draw scheduling.

Agents do not draw directly. During the draw pass they schedule callables
on a ``DrawLayer``; ``DrawManager.flush`` then runs them bottom layer
first, so overlap is decided by layer rather than by agent update order.
"""

from collections import defaultdict
from enum import IntEnum
from typing import Callable, Dict, List, Optional

DrawOp = Callable[[], None]


class DrawLayer(IntEnum):
    """Draw layers, topmost first."""

    DEV = 0
    LANTERN = 1
    FOOD = 2
    PETAL = 3
    WAVE = 4
    WATER_SURFACE = 5
    RIPPLE = 6
    LANTERN_SHADOW = 7
    FISH = 8


# Bottom layers have to be drawn first
LAYER_DRAW_ORDER: List[DrawLayer] = sorted(DrawLayer, reverse=True)


class DrawManager:
    """Collects draw callables per layer and executes them in layer order."""

    def __init__(self) -> None:
        self._scheduled: Dict[DrawLayer, List[DrawOp]] = defaultdict(list)

    def schedule_draw(self, layer: DrawLayer, draw_op: DrawOp) -> None:
        self._scheduled[layer].append(draw_op)

    def flush(self) -> int:
        """Run every scheduled op, bottom layer first, then clear the schedule.

        Ops within a layer run in the order they were scheduled. The
        schedule is cleared even if an op raises.

        Returns:
            Number of ops executed
        """
        executed = 0
        try:
            for layer in LAYER_DRAW_ORDER:
                for draw_op in self._scheduled.get(layer, ()):
                    draw_op()
                    executed += 1
        finally:
            self._scheduled.clear()
        return executed

    def clear(self) -> None:
        """Drop everything scheduled without drawing it."""
        self._scheduled.clear()

    def pending_count(self, layer: Optional[DrawLayer] = None) -> int:
        if layer is not None:
            return len(self._scheduled.get(layer, ()))
        return sum(len(ops) for ops in self._scheduled.values())
