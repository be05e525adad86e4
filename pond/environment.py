"""Environment coordinator for the koi pond.

``PondEnvironment`` owns every agent, rebuilds the spatial grid each frame
and runs the update and draw passes. It is also the only thing agents talk
to: they reach the clock, random source, surface bounds, renderer, draw
manager and their neighbours through it.
"""

import logging
import math
import random
from itertools import chain
from typing import Callable, Dict, Iterator, List, NamedTuple, Optional

from pond.clock import Clock, MonotonicClock
from pond.color import parse_config_color
from pond.config.display import PIXELS_PER_INCH
from pond.config.pond_config import PondConfig
from pond.config.store import ConfigStore
from pond.draw_manager import DrawLayer, DrawManager
from pond.entities.base import Agent, AgentKind
from pond.entities.food import Food
from pond.entities.koi_fish import KoiFish
from pond.entities.lantern import Lantern
from pond.entities.petal import Petal
from pond.entities.ripple import Ripple
from pond.entities.wave import Wave
from pond.exceptions import AgentError, PondError
from pond.math_utils import Point
from pond.render_backend import HeadlessRenderBackend, RenderBackend
from pond.spatial.bounds import SurfaceBounds
from pond.spatial.grid import SpatialGrid

logger = logging.getLogger(__name__)

# Share of waves that start off screen, ready to drift in
OFF_SCREEN_WAVE_RATIO = 0.2


class ObjectCounts(NamedTuple):
    koi_fish: int
    petals: int
    waves: int
    lanterns: int


class PondEnvironment:
    """
    Owns the pond's agents and runs the per-frame passes.

    Usage:
        env = PondEnvironment(1280, 720)
        env.initialize_objects()
        env.update_all_objects()
        env.draw_all_objects()
        env.draw_manager.flush()
    """

    def __init__(
        self,
        width: float,
        height: float,
        config_store: Optional[ConfigStore] = None,
        renderer: Optional[RenderBackend] = None,
        clock: Optional[Clock] = None,
        rng: Optional[random.Random] = None,
        draw_manager: Optional[DrawManager] = None,
        pixels_per_inch: float = PIXELS_PER_INCH,
    ):
        """
        Initialize an empty pond.

        Args:
            width: Surface width in pixels
            height: Surface height in pixels
            config_store: Source of configuration (default: built-in defaults)
            renderer: Render backend (default: HeadlessRenderBackend)
            clock: Time source (default: MonotonicClock)
            rng: Random source shared by every agent
            draw_manager: Layered draw scheduler
            pixels_per_inch: Surface density used for population sizing
        """
        self.config_store = config_store or ConfigStore()
        self.renderer = renderer or HeadlessRenderBackend()
        self.clock = clock or MonotonicClock()
        self.rng = rng or random.Random()
        self.draw_manager = draw_manager or DrawManager()

        self.bounds = SurfaceBounds(width, height, rng=self.rng, pixels_per_inch=pixels_per_inch)
        self.grid = SpatialGrid(width, height)

        self._config = self.config_store.config
        self._epoch = self.config_store.epoch

        self.koi_fish_map: Dict[str, KoiFish] = {}
        self.petal_map: Dict[str, Petal] = {}
        self.wave_map: Dict[str, Wave] = {}
        self.food_map: Dict[str, Food] = {}
        self.ripple_map: Dict[str, Ripple] = {}
        self.lantern_map: Dict[str, Lantern] = {}

        self._maps: Dict[AgentKind, Dict[str, Agent]] = {
            AgentKind.KOI_FISH: self.koi_fish_map,
            AgentKind.PETAL: self.petal_map,
            AgentKind.WAVE: self.wave_map,
            AgentKind.FOOD: self.food_map,
            AgentKind.RIPPLE: self.ripple_map,
            AgentKind.LANTERN: self.lantern_map,
        }

    @property
    def config(self) -> PondConfig:
        """Configuration snapshot handed to newly created agents."""
        return self._config

    # -- population ---------------------------------------------------------

    def desired_object_counts(self) -> ObjectCounts:
        square_inches = self.bounds.total_square_inches()
        densities = self._config.object_densities
        return ObjectCounts(
            koi_fish=math.ceil(square_inches * densities.fish_per_square_inch),
            petals=math.ceil(square_inches * densities.petals_per_square_inch),
            waves=math.ceil(square_inches * densities.waves_per_square_inch) + densities.min_wave_count,
            lanterns=1 if self._config.lantern.include else 0,
        )

    def initialize_objects(self) -> None:
        """Populate the pond from the configured densities."""
        counts = self.desired_object_counts()

        for _ in range(counts.koi_fish):
            self.add_agent(KoiFish(self))

        off_screen_waves = math.floor(counts.waves * OFF_SCREEN_WAVE_RATIO)
        for _ in range(off_screen_waves):
            wave = Wave(self)
            wave.prepare_reentry()
            self.add_agent(wave)
        for _ in range(counts.waves - off_screen_waves):
            self.add_agent(Wave(self))

        for _ in range(counts.petals):
            self.add_agent(Petal(self))

        self.initialize_lanterns()

        logger.info(
            "Pond populated on %.0fx%.0f: %d fish, %d waves (%d off screen), %d petals, %d lanterns",
            self.bounds.width,
            self.bounds.height,
            counts.koi_fish,
            counts.waves,
            off_screen_waves,
            counts.petals,
            len(self.lantern_map),
        )

    def initialize_lanterns(self) -> None:
        """Add lanterns until the configured lantern count is reached."""
        missing = self.desired_object_counts().lanterns - len(self.lantern_map)
        for _ in range(max(0, missing)):
            self.add_agent(Lantern(self))

    def clear_lanterns(self) -> None:
        self.lantern_map.clear()

    def set_lanterns_enabled(self, enabled: bool) -> None:
        """Toggle lanterns without repopulating the rest of the pond."""
        self.config_store.apply_overrides({"lantern": {"include": enabled}})
        self._sync_config()
        if enabled:
            self.initialize_lanterns()
        else:
            self.clear_lanterns()

    def reset_environment(self) -> None:
        """Drop every agent and repopulate."""
        for agents in self._maps.values():
            agents.clear()
        self.grid.clear()
        self.initialize_objects()

    def resize(self, width: float, height: float) -> None:
        logger.info("Resizing pond to %.0fx%.0f", width, height)
        self.bounds.resize(width, height)
        self.grid.resize(width, height)
        self.reset_environment()

    # -- agent bookkeeping --------------------------------------------------

    def _map_for(self, kind: AgentKind) -> Dict[str, Agent]:
        try:
            return self._maps[kind]
        except KeyError:
            raise AgentError(f"Unknown agent kind: {kind!r}") from None

    def add_agent(self, agent: Agent) -> Agent:
        self._map_for(getattr(agent, "kind", None))[agent.id] = agent
        return agent

    def remove_agent(self, agent: Agent) -> None:
        removed = self._map_for(agent.kind).pop(agent.id, None)
        if isinstance(removed, KoiFish):
            removed.release_pairings()

    def contains(self, agent: Agent) -> bool:
        return self._map_for(agent.kind).get(agent.id) is agent

    def add_food(self, point: Point) -> Food:
        """Drop food at ``point`` (pond coordinates)."""
        food = Food(self, point.copy())
        self.food_map[food.id] = food
        logger.debug("Food added at (%.0f, %.0f)", point.x, point.y)
        return food

    def remove_food(self, food: Food) -> None:
        self.food_map.pop(food.id, None)

    def has_food(self, food: Food) -> bool:
        return self.food_map.get(food.id) is food

    def add_ripple(self, ripple: Ripple) -> None:
        self.ripple_map[ripple.id] = ripple

    def remove_ripple(self, ripple: Ripple) -> None:
        self.ripple_map.pop(ripple.id, None)

    def get_koi_fish(self, fish_id: str) -> Optional[KoiFish]:
        return self.koi_fish_map.get(fish_id)

    def lanterns(self) -> List[Lantern]:
        return list(self.lantern_map.values())

    def get_nearby_objects(self, source: Agent, kind: AgentKind, cell_range: int = 1) -> List[Agent]:
        """Agents of ``kind`` within ``cell_range`` grid cells of ``source``, excluding it.

        Only fish, food and lanterns are indexed.
        """
        return self.grid.query(source, kind, cell_range)

    def all_agents(self) -> Iterator[Agent]:
        return chain.from_iterable(agents.values() for agents in self._maps.values())

    def object_counts(self) -> Dict[str, int]:
        return {kind.value: len(agents) for kind, agents in self._maps.items()}

    # -- per-frame passes ---------------------------------------------------

    def _sync_config(self) -> None:
        store = self.config_store
        if store.epoch != self._epoch:
            self._epoch = store.epoch
            self._config = store.config
            logger.info("Configuration changed (epoch %d, theme '%s'), resetting pond", self._epoch, store.theme)
            self.reset_environment()
        elif store.config is not self._config:
            self._config = store.config
            for agent in self.all_agents():
                agent.config = self._config

    def _run_agent_op(self, agent: Agent, op: Callable[[], None], phase: str) -> None:
        try:
            op()
        except PondError:
            logger.exception("%s failed during %s; removing it", agent, phase)
            self.remove_agent(agent)

    def update_all_objects(self) -> None:
        """Rebuild the grid, update every agent, then let emitters spawn ripples."""
        self._sync_config()

        self.grid.rebuild(chain(self.koi_fish_map.values(), self.food_map.values(), self.lantern_map.values()))

        for agent in list(
            chain(
                self.koi_fish_map.values(),
                self.food_map.values(),
                self.lantern_map.values(),
                self.ripple_map.values(),
                self.wave_map.values(),
                self.petal_map.values(),
            )
        ):
            if self.contains(agent):
                self._run_agent_op(agent, agent.update, "update")

        for emitter in list(chain(self.koi_fish_map.values(), self.lantern_map.values())):
            if self.contains(emitter):
                self._run_agent_op(emitter, emitter.generate_ripples, "ripple generation")

    def draw_all_objects(self) -> None:
        """Schedule the water surface and every agent's draw ops."""
        renderer = self.renderer
        try:
            surface_color = parse_config_color(self._config.environment.surface_color)
        except PondError:
            logger.exception("Water surface color is invalid; surface skipped this frame")
        else:
            self.draw_manager.schedule_draw(DrawLayer.WATER_SURFACE, lambda: renderer.fill_surface(surface_color))

        for agent in list(
            chain(
                self.koi_fish_map.values(),
                self.wave_map.values(),
                self.ripple_map.values(),
                self.petal_map.values(),
                self.food_map.values(),
                self.lantern_map.values(),
            )
        ):
            try:
                agent.draw()
            except PondError:
                logger.exception("%s failed to draw; skipped this frame", agent)
