"""Base agent class for the pond simulation (pure logic, no rendering)."""

import uuid
from enum import Enum
from typing import TYPE_CHECKING, Optional

from pond.math_utils import Point

if TYPE_CHECKING:
    from pond.config.pond_config import PondConfig
    from pond.environment import PondEnvironment


class AgentKind(Enum):
    """Stable kind tag carried by every agent class; grid queries filter on it."""

    KOI_FISH = "koi_fish"
    WAVE = "wave"
    PETAL = "petal"
    LANTERN = "lantern"
    RIPPLE = "ripple"
    FOOD = "food"


class Agent:
    """Base class for everything living in the pond.

    Subclasses set ``kind`` and implement ``update`` and ``draw``. Time is
    read from the environment's clock; ``last_update_time`` is the clock
    reading at the end of the previous update.
    """

    kind: AgentKind

    def __init__(
        self, environment: "PondEnvironment", position: Point, config: Optional["PondConfig"] = None
    ) -> None:
        """Initialize an agent.

        Args:
            environment: The pond the agent lives in
            position: Starting position (owned by the agent from now on)
            config: Configuration snapshot; defaults to the environment's current one
        """
        self.id: str = uuid.uuid4().hex
        self.environment = environment
        self.config: "PondConfig" = config if config is not None else environment.config
        self.position: Point = position
        self.last_update_time: float = environment.clock.now()

    @property
    def clock(self):
        return self.environment.clock

    @property
    def rng(self):
        return self.environment.rng

    @property
    def bounds(self):
        return self.environment.bounds

    def seconds_since_update(self) -> float:
        return self.environment.clock.elapsed_seconds(self.last_update_time)

    def mark_updated(self) -> None:
        self.last_update_time = self.environment.clock.now()

    def schedule(self, layer, draw_op) -> None:
        """Schedule a deferred draw op on the environment's draw manager."""
        self.environment.draw_manager.schedule_draw(layer, draw_op)

    def update(self) -> None:
        raise NotImplementedError

    def draw(self) -> None:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.id[:8]}, position=({self.position.x:.1f}, {self.position.y:.1f}))"
