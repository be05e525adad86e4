"""Ripples left behind by fish and lanterns."""

from typing import TYPE_CHECKING, NamedTuple, Optional

from pond.color import RGBA, apply_opacity, parse_config_color
from pond.draw_manager import DrawLayer
from pond.entities.base import Agent, AgentKind
from pond.math_utils import Point, Vector, arc_points, scale_to_range

if TYPE_CHECKING:
    from pond.config.pond_config import PondConfig
    from pond.environment import PondEnvironment


class RippleDrawSettings(NamedTuple):
    start: Point
    end: Point
    curve: Point
    midpoint: Point
    color: RGBA
    line_width: int


class Ripple(Agent):
    """A fire-and-forget ripple that drifts, fades in, fades out and expires.

    Opacity rises linearly to ``max_opacity`` at ``PEAK_OPACITY_TIME`` and
    falls linearly back to 0 at ``LIFETIME``. Drawn as two mirrored curved
    strokes fanning out behind the heading.
    """

    kind = AgentKind.RIPPLE

    GENERATION_GAP = 1.8
    LENGTH_RATIO = 40  # ripple length for a size 1.0 fish
    LIFETIME = 5.0
    PEAK_OPACITY_TIME = 1.5
    LINE_WIDTH = 10

    def __init__(
        self,
        environment: "PondEnvironment",
        position: Point,
        direction: Vector,
        speed: float,
        length: float,
        initial_dispersion: float = 0.0,
        config: Optional["PondConfig"] = None,
    ) -> None:
        super().__init__(environment, position, config)
        self.direction = direction
        self.speed = speed
        self.length = length
        self.initial_dispersion = initial_dispersion
        self.generation_time = self.clock.now()

    def age(self) -> float:
        return self.clock.elapsed_seconds(self.generation_time)

    def update(self) -> None:
        if self.age() > self.LIFETIME:
            self.environment.remove_ripple(self)
            return
        self.position.apply_vector(self.direction.scale(self.speed * self.seconds_since_update()), mutate=True)
        self.mark_updated()

    def opacity(self) -> float:
        max_opacity = self.config.ripple.max_opacity
        age = self.age()
        if age < self.PEAK_OPACITY_TIME:
            return scale_to_range(0.0, max_opacity, age / self.PEAK_OPACITY_TIME)
        fade_progress = (age - self.PEAK_OPACITY_TIME) / (self.LIFETIME - self.PEAK_OPACITY_TIME)
        return max(0.0, scale_to_range(max_opacity, 0.0, fade_progress))

    def _stroke(self, direction: Vector, dispersion: float, curve: float, bow_angle: float, color: RGBA):
        start = self.position.apply_vector(direction.scale(dispersion))
        end = start.apply_vector(direction.scale(self.length))
        curve_point, middle = arc_points(start, end, direction.rotate(bow_angle).scale(curve))
        return RippleDrawSettings(start, end, curve_point, middle, color, self.LINE_WIDTH)

    def draw(self) -> None:
        life_progress = min(self.age() / self.LIFETIME, 1.0)
        color = apply_opacity(parse_config_color(self.config.ripple.color), self.opacity())

        fan_angle = scale_to_range(120, 170, life_progress)
        dispersion = self.initial_dispersion + scale_to_range(-20, 40, life_progress)
        curve = scale_to_range(20, 5, life_progress)

        left = self._stroke(self.direction.rotate(-fan_angle), dispersion, curve, 90, color)
        right = self._stroke(self.direction.rotate(fan_angle), dispersion, curve, -90, color)

        renderer = self.environment.renderer
        self.schedule(DrawLayer.RIPPLE, lambda: renderer.draw_ripple(left))
        self.schedule(DrawLayer.RIPPLE, lambda: renderer.draw_ripple(right))
