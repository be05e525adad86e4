"""Flower petals floating down the pond."""

from typing import TYPE_CHECKING, Optional

from pond.color import WHITE, increment_rgb, parse_config_color, randomize_rgb
from pond.draw_manager import DrawLayer
from pond.entities.base import Agent, AgentKind
from pond.math_utils import Point, Vector, rotate_all_points, translate_all_points
from pond.oscillator import Oscillator

if TYPE_CHECKING:
    from pond.config.pond_config import PondConfig
    from pond.environment import PondEnvironment


class Petal(Agent):
    """A petal that drifts along a river line, spinning and swaying.

    The sway is a sideways offset applied at draw time from an oscillator,
    so it never accumulates into the position.
    """

    kind = AgentKind.PETAL

    REENTRY_MARGIN = 30
    MIN_ROTATION_PERIOD = 10.0
    MAX_ROTATION_PERIOD = 15.0

    def __init__(
        self, environment: "PondEnvironment", position: Optional[Point] = None, config: Optional["PondConfig"] = None
    ) -> None:
        super().__init__(environment, position or Point(), config)
        petal_config = self.config.petal
        rng = self.rng

        if position is None:
            self._reset_state(initial_travel=True)
            # start part way along the drift so petals do not arrive in a wave
            self.position.apply_vector(self.direction.scale(rng.random() * self.bounds.height * 0.5), mutate=True)
        else:
            self.direction = Vector.down_right_direction(rng)

        self.speed = rng.uniform(*petal_config.speeds)
        self.draw_angle = rng.uniform(0, 90)
        self.length = rng.uniform(*petal_config.sizes)
        self.curve_anchor_ratio = rng.uniform(0.6, 0.8)
        self.curve_distance_ratio = rng.uniform(0.6, 0.7)

        base_color = randomize_rgb(parse_config_color(rng.choice(petal_config.colors)), petal_config.color_variation, rng)
        self.base_color = base_color
        self.tip_color = increment_rgb(base_color, WHITE, 50)

        max_offset = rng.random() * petal_config.max_oscillation
        self.offset_oscillator = Oscillator(
            -max_offset, max_offset, rng.uniform(*petal_config.oscillation_periods), self.clock
        )
        self.rotation_period = rng.uniform(self.MIN_ROTATION_PERIOD, self.MAX_ROTATION_PERIOD)
        self.rotation_direction = rng.choice((1, -1))

    def _reset_state(self, initial_travel: bool = False) -> None:
        """Place the petal at a river entry point heading for the exit.

        With ``initial_travel`` the petal instead starts anywhere on the
        surface with a down-right heading.
        """
        if initial_travel:
            self.position = self.bounds.random_point()
            self.direction = Vector.down_right_direction(self.rng)
            return
        entry, exit_point = self.bounds.river_entry_exit_points(self.REENTRY_MARGIN)
        self.position = entry
        travel = entry.vector_to(exit_point)
        self.direction = travel.normalize() if travel.magnitude() > 0 else Vector.down_right_direction(self.rng)

    def update(self) -> None:
        if self.bounds.is_out_of_bounds(self.position, 2 * self.REENTRY_MARGIN):
            self._reset_state()

        elapsed = self.seconds_since_update()
        self.position.apply_vector(self.direction.scale(self.speed * elapsed), mutate=True)
        rotation = (self.rotation_direction * (elapsed / self.rotation_period) * 360) % 360
        self.draw_angle = (self.draw_angle + rotation) % 360
        self.mark_updated()

    def draw(self) -> None:
        curve_anchor_base = self.position.apply_vector(Vector.UP.scale(self.curve_anchor_ratio * self.length))
        curve_distance = self.curve_distance_ratio * self.length
        points = {
            "base": self.position.copy(),
            "left_curve_anchor": curve_anchor_base.apply_vector(Vector.LEFT.scale(curve_distance)),
            "curve_anchor_base": curve_anchor_base,
            "tip": self.position.apply_vector(Vector.UP.scale(self.length)),
            "right_curve_anchor": curve_anchor_base.apply_vector(Vector.RIGHT.scale(curve_distance)),
        }
        rotate_all_points(self.position, self.draw_angle, points, mutate=True)
        sway = self.direction.rotate(90).scale(self.offset_oscillator.value())
        translate_all_points(sway, points, mutate=True)

        renderer = self.environment.renderer
        base_color, tip_color = self.base_color, self.tip_color
        self.schedule(DrawLayer.PETAL, lambda: renderer.draw_petal(points, base_color, tip_color))
