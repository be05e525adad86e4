"""Fish food dropped into the pond by the user."""

import logging
from typing import TYPE_CHECKING, List, NamedTuple, Optional

from pond.color import FOOD_COLOR
from pond.draw_manager import DrawLayer
from pond.entities.base import Agent, AgentKind
from pond.math_utils import Point, Vector

if TYPE_CHECKING:
    from pond.config.pond_config import PondConfig
    from pond.environment import PondEnvironment

logger = logging.getLogger(__name__)


class FoodParticle(NamedTuple):
    """One flake; drawn as a short curved stroke from the dispersed base."""

    tip_angle: float
    tip_distance: float
    curve_angle: float
    curve_distance: float
    direction: Vector  # from the food's center


class Food(Agent):
    """A small clump of flakes that drifts down-right and slowly disperses.

    Eating is two-phase: ``on_eaten`` marks the food eaten so fish stop
    chasing it, then one particle disappears every ``PARTICLE_DECAY_INTERVAL``
    seconds of clock time. The food leaves the pond when the last particle
    is gone, or immediately if it drifts off the surface.
    """

    kind = AgentKind.FOOD

    SPEED = 15.0
    MAX_DISPERSION = 5.0
    DISPERSION_RATE = 1.2
    PARTICLE_DECAY_INTERVAL = 0.03

    def __init__(
        self, environment: "PondEnvironment", position: Point, config: Optional["PondConfig"] = None
    ) -> None:
        super().__init__(environment, position, config)
        self.direction = Vector.down_right_direction(self.rng)
        self.speed = self.SPEED
        self.particles: List[FoodParticle] = self._generate_particles()
        self.particle_dispersion = 1.0
        self.is_eaten = False
        self._last_decay_time: Optional[float] = None

    def _generate_particles(self) -> List[FoodParticle]:
        rng = self.rng
        particles = []
        for _ in range(rng.randint(8, 10)):
            tip_angle = rng.uniform(0, 360)
            tip_distance = rng.uniform(7, 12)
            particles.append(
                FoodParticle(
                    tip_angle=tip_angle,
                    tip_distance=tip_distance,
                    curve_angle=tip_angle + rng.uniform(-1, 1) * rng.uniform(40, 60),
                    curve_distance=0.5 * tip_distance,
                    direction=Vector.random_direction(rng),
                )
            )
        return particles

    def on_eaten(self) -> None:
        """Start the particle decay. Calling it again has no effect."""
        if self.is_eaten:
            return
        self.is_eaten = True
        self._last_decay_time = self.clock.now()
        logger.debug("Food %s eaten, %d particles left", self.id[:8], len(self.particles))

    def _decay(self) -> None:
        now = self.clock.now()
        while self.particles and now - self._last_decay_time >= self.PARTICLE_DECAY_INTERVAL:
            self.particles.pop()
            self._last_decay_time += self.PARTICLE_DECAY_INTERVAL
        if not self.particles:
            self.environment.remove_food(self)

    def update(self) -> None:
        if self.bounds.is_out_of_bounds(self.position):
            self.environment.remove_food(self)
            return

        if self.is_eaten:
            self._decay()
            if not self.particles:
                return

        elapsed = self.seconds_since_update()
        if self.particle_dispersion < self.MAX_DISPERSION:
            self.particle_dispersion = min(
                self.MAX_DISPERSION, self.particle_dispersion + elapsed * self.DISPERSION_RATE
            )
        self.position.apply_vector(self.direction.scale(self.speed * elapsed), mutate=True)
        self.mark_updated()

    def draw(self) -> None:
        renderer = self.environment.renderer
        for particle in self.particles:
            base = self.position.apply_vector(particle.direction.scale(self.particle_dispersion))
            tip = base.apply_vector(Vector.UP.rotate(particle.tip_angle).scale(particle.tip_distance))
            curve_anchor = base.apply_vector(Vector.UP.rotate(particle.curve_angle).scale(particle.curve_distance))
            self.schedule(
                DrawLayer.FOOD,
                lambda base=base, tip=tip, anchor=curve_anchor: renderer.draw_food_particle(base, tip, anchor, FOOD_COLOR),
            )
