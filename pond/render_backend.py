"""Render backend abstraction.

The simulation core never touches a drawing library. Agents hand
precomputed geometry (named point maps, colors, opacities) to a
``RenderBackend`` through scheduled draw ops. ``rendering.pygame_renderer``
provides the on-screen implementation; ``HeadlessRenderBackend`` here
records calls so the simulation can run in tests and headless mode.
"""

from collections import Counter
from typing import TYPE_CHECKING, List, Optional, Protocol, Sequence, runtime_checkable

from pond.color import RGBA
from pond.math_utils import Point, PointMap, Vector

if TYPE_CHECKING:
    from pond.entities.koi_fish import DecorationDrawInfo, FishColors
    from pond.entities.lantern import LanternDrawInfo
    from pond.entities.ripple import RippleDrawSettings


@runtime_checkable
class RenderBackend(Protocol):
    """Drawing operations used by the pond agents.

    All coordinates are flipped-Y pond coordinates (origin bottom-left).
    """

    def clear(self) -> None:
        """Start a new frame."""
        ...

    def fill_surface(self, color: RGBA) -> None:
        ...

    def draw_point(self, point: Point, color: RGBA, radius: float = 1.0) -> None:
        ...

    def draw_line(self, start: Point, end: Point, color: RGBA, width: int = 1) -> None:
        ...

    def draw_vector(self, start: Point, vector: Vector, color: RGBA) -> None:
        """Line from ``start`` along ``vector`` with an arrow head."""
        ...

    def draw_fish(
        self, points: PointMap, colors: "FishColors", decorations: Sequence["DecorationDrawInfo"]
    ) -> None:
        ...

    def draw_fish_shadow(self, points: PointMap, opacity: float) -> None:
        ...

    def draw_wave(self, points: PointMap, color: RGBA) -> None:
        ...

    def draw_petal(self, points: PointMap, base_color: RGBA, tip_color: RGBA) -> None:
        ...

    def draw_food_particle(self, base: Point, tip: Point, curve_anchor: Point, color: RGBA) -> None:
        ...

    def draw_ripple(self, settings: "RippleDrawSettings") -> None:
        ...

    def draw_lantern(self, info: "LanternDrawInfo") -> None:
        ...

    def draw_lantern_shadow(self, square: PointMap, opacity: float) -> None:
        ...

    def brighten_circle(
        self, center: Point, inner_radius: float, outer_radius: float, inner_color: RGBA, outer_color: RGBA
    ) -> None:
        """Additively lighten a disc with a radial gradient."""
        ...


class HeadlessRenderBackend:
    """Backend that draws nothing and counts what it was asked to draw."""

    def __init__(self) -> None:
        self.calls: Counter = Counter()
        self.frames = 0
        self.last_surface_color: Optional[RGBA] = None

    def _record(self, name: str) -> None:
        self.calls[name] += 1

    def reset_counts(self) -> None:
        self.calls.clear()
        self.frames = 0

    def clear(self) -> None:
        self.frames += 1
        self._record("clear")

    def fill_surface(self, color: RGBA) -> None:
        self.last_surface_color = color
        self._record("fill_surface")

    def draw_point(self, point: Point, color: RGBA, radius: float = 1.0) -> None:
        self._record("draw_point")

    def draw_line(self, start: Point, end: Point, color: RGBA, width: int = 1) -> None:
        self._record("draw_line")

    def draw_vector(self, start: Point, vector: Vector, color: RGBA) -> None:
        self._record("draw_vector")

    def draw_fish(self, points: PointMap, colors, decorations) -> None:
        self._record("draw_fish")

    def draw_fish_shadow(self, points: PointMap, opacity: float) -> None:
        self._record("draw_fish_shadow")

    def draw_wave(self, points: PointMap, color: RGBA) -> None:
        self._record("draw_wave")

    def draw_petal(self, points: PointMap, base_color: RGBA, tip_color: RGBA) -> None:
        self._record("draw_petal")

    def draw_food_particle(self, base: Point, tip: Point, curve_anchor: Point, color: RGBA) -> None:
        self._record("draw_food_particle")

    def draw_ripple(self, settings) -> None:
        self._record("draw_ripple")

    def draw_lantern(self, info) -> None:
        self._record("draw_lantern")

    def draw_lantern_shadow(self, square: PointMap, opacity: float) -> None:
        self._record("draw_lantern_shadow")

    def brighten_circle(self, center, inner_radius, outer_radius, inner_color, outer_color) -> None:
        self._record("brighten_circle")

    def summary(self) -> List[str]:
        return [f"{name}={count}" for name, count in sorted(self.calls.items())]
