"""Floating paper lanterns.

A lantern is a wooden raft with a paper lamp on top. It drifts slowly,
turns away from the border and from other lanterns, flickers between two
fire colors and casts shadows for the fish around it.
"""

import logging
from typing import TYPE_CHECKING, List, NamedTuple, Optional

from pond.color import (
    BRIGHT_FIRE_COLOR,
    DARK_FIRE_COLOR,
    LANTERN_WALL_COLOR,
    RGBA,
    WOOD_COLOR,
    WOOD_EDGE_COLOR,
    apply_opacity,
    increment_rgb,
    parse_config_color,
    same_rgb,
)
from pond.draw_manager import DrawLayer
from pond.entities.base import Agent, AgentKind
from pond.entities.ripple import Ripple
from pond.math_utils import (
    Point,
    PointMap,
    Vector,
    evenly_spaced_points,
    find_corners,
    scale_to_range,
    square_points,
    translate_all_points,
)

if TYPE_CHECKING:
    from pond.config.pond_config import PondConfig
    from pond.environment import PondEnvironment

logger = logging.getLogger(__name__)


class ShadowDrawInfo(NamedTuple):
    shadow_vector: Vector
    shadow_opacity: float


DEFAULT_SHADOW_DRAW_INFO = ShadowDrawInfo(Vector(17, -17), 0.2)


class LanternDrawInfo(NamedTuple):
    """Geometry and colors for one lantern.

    The wooden base is a rotated square with plank lines between
    ``left_join_points`` and ``right_join_points``. The lamp is a smaller
    rotated square (``lamp_base_corners``) extruded upward to
    ``lamp_top_corners``.
    """

    center: Point
    wooden_base_square: PointMap
    wooden_base_color: RGBA
    wood_join_color: RGBA
    left_join_points: List[Point]
    right_join_points: List[Point]
    light_color: RGBA
    lamp_base_corners: PointMap
    lamp_top_corners: PointMap
    lamp_back_wall_opacity: float
    lamp_front_wall_opacity: float
    lamp_wall_color: RGBA


class Lantern(Agent):
    kind = AgentKind.LANTERN

    SIDE_LENGTH = 55
    LAMP_SIDE_LENGTH = 33
    LAMP_HEIGHT = 27
    PLANK_JOIN_COUNT = 5
    SPEED = 8.0
    LIGHT_COLOR_CHANGE_GAP = 1 / 60
    RIPPLE_GENERATION_GAP = 4.0
    GLOW_RADIUS = 300
    SHADOW_VECTOR = Vector(10, -40)
    MIN_INITIAL_PROXIMITY = 300
    INITIAL_POSITION_TRIES = 10
    BORDER_TURN_DISTANCE = 50
    LANTERN_SEARCH_RANGE = 7
    SHADOW_FALLOFF_DISTANCE = 300

    def __init__(
        self, environment: "PondEnvironment", position: Optional[Point] = None, config: Optional["PondConfig"] = None
    ) -> None:
        super().__init__(environment, position or self.initial_position(environment), config)
        rng = self.rng
        self.rotation_angle = rng.uniform(0, 360)
        self.rotation_speed = rng.choice((1, -1)) * rng.uniform(4, 6)
        self.direction = Vector.random_direction(rng)

        self.light_color: RGBA = DARK_FIRE_COLOR
        self.destination_light_color: RGBA = BRIGHT_FIRE_COLOR

        now = self.clock.now()
        self.last_light_color_change_time = now
        self.last_ripple_time = now

    @classmethod
    def initial_position(cls, environment: "PondEnvironment") -> Point:
        """Random point in the central 70% of the surface, away from other lanterns.

        Draws one candidate, then retries up to ``INITIAL_POSITION_TRIES``
        times while it lies within ``MIN_INITIAL_PROXIMITY`` of an existing
        lantern. If none qualifies the last candidate is used.
        """
        bounds = environment.bounds
        others = environment.lanterns()
        attempts = cls.INITIAL_POSITION_TRIES + 1 if others else 1
        candidate = None
        for _ in range(attempts):
            candidate = bounds.random_point(0.7)
            if all(candidate.distance_to(other) > cls.MIN_INITIAL_PROXIMITY for other in others):
                break
        else:
            logger.debug("No lantern position clear of %d others after %d tries", len(others), attempts)
        return candidate

    def update_light_color(self) -> None:
        self.light_color = increment_rgb(
            self.light_color, self.destination_light_color, round(self.rng.uniform(0, 2))
        )
        if same_rgb(self.light_color, self.destination_light_color):
            self.destination_light_color = (
                BRIGHT_FIRE_COLOR if same_rgb(self.destination_light_color, DARK_FIRE_COLOR) else DARK_FIRE_COLOR
            )
        self.last_light_color_change_time = self.clock.now()

    def update(self) -> None:
        elapsed = self.seconds_since_update()

        self.rotation_angle = (self.rotation_angle + elapsed * self.rotation_speed) % 360
        # Exact right angles make the lamp corners ambiguous
        if self.rotation_angle % 90 == 0:
            self.rotation_angle += self.rotation_speed * 0.1

        if self.clock.elapsed_seconds(self.last_light_color_change_time) > self.LIGHT_COLOR_CHANGE_GAP:
            self.update_light_color()

        if self.bounds.distance_to_border(self.position) < self.BORDER_TURN_DISTANCE:
            target = self.bounds.random_point(0.7)
            if target.distance_to(self.position) > 0:
                self.direction = self.position.direction_to(target)

        closest = self._closest_lantern()
        if closest is not None:
            away = closest.position.vector_to(self.position)
            if away.magnitude() > 0:
                self.direction = away.normalize(mutate=True)

        self.position.apply_vector(self.direction.scale(self.SPEED * elapsed), mutate=True)
        self.mark_updated()

    def _closest_lantern(self) -> Optional["Lantern"]:
        nearby = self.environment.get_nearby_objects(self, AgentKind.LANTERN, self.LANTERN_SEARCH_RANGE)
        if not nearby:
            return None
        return min(nearby, key=lambda lantern: self.position.distance_to(lantern))

    def shadow_draw_info(self, agent: Agent) -> ShadowDrawInfo:
        """Shadow cast by this lantern for ``agent``.

        Farther agents get a longer and fainter shadow: the offset grows from
        10 to 50 over the surface diagonal, and the opacity falls from
        ``max_shadow_opacity`` to ``min_shadow_opacity`` over the first 300
        units.
        """
        lantern_config = self.config.lantern
        to_agent = self.position.vector_to(agent.position)
        distance = to_agent.magnitude()

        magnitude = scale_to_range(10, 50, distance / self.bounds.diagonal)
        opacity = lantern_config.min_shadow_opacity
        if distance < self.SHADOW_FALLOFF_DISTANCE:
            opacity = scale_to_range(
                lantern_config.max_shadow_opacity,
                lantern_config.min_shadow_opacity,
                distance / self.SHADOW_FALLOFF_DISTANCE,
            )

        direction = to_agent.normalize(mutate=True) if distance > 0 else Vector.DOWN_RIGHT.copy()
        return ShadowDrawInfo(direction.scale(magnitude, mutate=True), opacity)

    def generate_ripples(self) -> None:
        if self.clock.elapsed_seconds(self.last_ripple_time) <= self.RIPPLE_GENERATION_GAP:
            return
        self.last_ripple_time = self.clock.now()
        self.environment.add_ripple(
            Ripple(
                self.environment,
                position=self.position.apply_vector(self.direction.scale(self.SIDE_LENGTH)),
                direction=self.direction.copy(),
                speed=self.SPEED * 0.7,
                length=50,
                initial_dispersion=50,
                config=self.config,
            )
        )

    def draw_info(self) -> LanternDrawInfo:
        wooden_base = square_points(self.position, self.rotation_angle, self.SIDE_LENGTH)
        lamp_base_corners = find_corners(square_points(self.position, self.rotation_angle, self.LAMP_SIDE_LENGTH))
        lamp_top_corners = translate_all_points(Vector.UP.scale(self.LAMP_HEIGHT), lamp_base_corners)
        return LanternDrawInfo(
            center=self.position.copy(),
            wooden_base_square=wooden_base,
            wooden_base_color=WOOD_COLOR,
            wood_join_color=WOOD_EDGE_COLOR,
            left_join_points=evenly_spaced_points(wooden_base["corner1"], wooden_base["corner2"], self.PLANK_JOIN_COUNT),
            right_join_points=evenly_spaced_points(wooden_base["corner4"], wooden_base["corner3"], self.PLANK_JOIN_COUNT),
            light_color=self.light_color,
            lamp_base_corners=lamp_base_corners,
            lamp_top_corners=lamp_top_corners,
            lamp_back_wall_opacity=0.85,
            lamp_front_wall_opacity=0.9,
            lamp_wall_color=LANTERN_WALL_COLOR,
        )

    def draw(self) -> None:
        lantern_config = self.config.lantern
        renderer = self.environment.renderer
        info = self.draw_info()

        shadow_square = translate_all_points(self.SHADOW_VECTOR, info.wooden_base_square)
        shadow_opacity = lantern_config.max_shadow_opacity * 0.8
        self.schedule(DrawLayer.LANTERN_SHADOW, lambda: renderer.draw_lantern_shadow(shadow_square, shadow_opacity))

        inner_glow = parse_config_color(lantern_config.glow_color)
        outer_glow = apply_opacity(inner_glow, 0)
        center = info.center
        self.schedule(
            DrawLayer.WAVE,
            lambda: renderer.brighten_circle(center, 0, self.GLOW_RADIUS, inner_glow, outer_glow),
        )
        self.schedule(DrawLayer.LANTERN, lambda: renderer.draw_lantern(info))
