"""Surface waves drifting across the pond."""

from typing import TYPE_CHECKING, Optional

from pond.color import parse_config_color, randomize_rgb
from pond.draw_manager import DrawLayer
from pond.entities.base import Agent, AgentKind
from pond.math_utils import Point, Vector

if TYPE_CHECKING:
    from pond.config.pond_config import PondConfig
    from pond.environment import PondEnvironment


class Wave(Agent):
    """A translucent band that drifts at constant speed.

    Waves are never destroyed: once one drifts ``EXIT_MARGIN`` units past the
    surface it is moved ``REENTRY_DISTANCE`` units outside a new edge and
    pointed back in. In river mode it re-enters near the top-left corner
    heading down-right; otherwise from a random edge toward a random point.
    """

    kind = AgentKind.WAVE

    EXIT_MARGIN = 500
    REENTRY_DISTANCE = 300

    def __init__(
        self,
        environment: "PondEnvironment",
        position: Optional[Point] = None,
        direction: Optional[Vector] = None,
        config: Optional["PondConfig"] = None,
    ) -> None:
        super().__init__(environment, position or environment.bounds.random_point(), config)
        wave_config = self.config.wave
        rng = self.rng

        if direction is None:
            direction = Vector.down_right_direction(rng) if wave_config.river_mode else Vector.random_direction(rng)
        self.direction = direction
        self.speed = rng.uniform(*wave_config.speeds)

        width = self.bounds.width
        # distance from the front to the back of the wave
        self.size = rng.uniform(width / 20, width / 15)
        base_color = parse_config_color(rng.choice(wave_config.colors))
        self.color = randomize_rgb(base_color, wave_config.color_variation, rng)

    def update(self) -> None:
        self.position.apply_vector(self.direction.scale(self.speed * self.seconds_since_update()), mutate=True)
        if self.bounds.is_out_of_bounds(self.position, self.EXIT_MARGIN):
            self.prepare_reentry()
        self.mark_updated()

    def prepare_reentry(self) -> None:
        """Move the wave just outside the surface, heading back in."""
        bounds = self.bounds
        if self.config.wave.river_mode:
            self.position = bounds.top_left_corner_point(self.REENTRY_DISTANCE)
            self.direction = Vector.down_right_direction(self.rng)
        else:
            self.position = bounds.random_edge_point(self.REENTRY_DISTANCE)
            self.direction = self.position.direction_to(bounds.random_point())

    def draw(self) -> None:
        width = self.bounds.width
        front_anchor_width = width / 12
        back_width = width / 2.5
        edge_direction = self.direction.rotate(90)

        back_midpoint = self.position.apply_vector(self.direction.rotate(180).scale(self.size))
        points = {
            "front_midpoint": self.position.copy(),
            "front_right_anchor": self.position.apply_vector(edge_direction.scale(2 * front_anchor_width)),
            "front_left_anchor": self.position.apply_vector(edge_direction.scale(-2 * front_anchor_width)),
            "back_midpoint": back_midpoint,
            "back_right_corner": back_midpoint.apply_vector(edge_direction.scale(back_width)),
            "back_left_corner": back_midpoint.apply_vector(edge_direction.scale(-back_width)),
        }
        renderer = self.environment.renderer
        color = self.color
        self.schedule(DrawLayer.WAVE, lambda: renderer.draw_wave(points, color))
