"""Pygame render backend for the koi pond.

Pond coordinates have their origin at the bottom-left while pygame's is at
the top-left, so every point goes through ``_to_screen`` before drawing.
Translucent and gradient shapes are painted on SRCALPHA layers sized to the
shape's bounding box and masked to the shape with ``BLEND_RGBA_MIN`` before
being blitted onto the target surface.
"""

import logging
import math
from typing import Callable, Dict, List, Optional, Sequence, Tuple

import pygame

from pond.color import BLACK, RED, RGBA, apply_opacity, to_pygame_color
from pond.entities.koi_fish import DecorationDrawInfo, FishColors
from pond.entities.lantern import LanternDrawInfo
from pond.entities.ripple import RippleDrawSettings
from pond.math_utils import Point, PointMap, Vector, midpoint, sample_cubic_curve, sample_quadratic_curve

logger = logging.getLogger(__name__)

ScreenPoint = Tuple[float, float]

ARROW_LENGTH = 10
ARROW_ANGLE = math.pi / 6
GLOW_STEPS = 48
FISH_EDGE_SHADE: RGBA = (0, 0, 0, 0.2)
MASK_COLOR = (255, 255, 255, 255)


def _shifted(points: Sequence[ScreenPoint], origin: ScreenPoint) -> List[ScreenPoint]:
    return [(x - origin[0], y - origin[1]) for x, y in points]


def _lerp_color(start: RGBA, end: RGBA, t: float) -> RGBA:
    return (
        round(start[0] + (end[0] - start[0]) * t),
        round(start[1] + (end[1] - start[1]) * t),
        round(start[2] + (end[2] - start[2]) * t),
        start[3] + (end[3] - start[3]) * t,
    )


def _fin_outline(start: Point, front_edge: Point, back_edge: Point, tip: Point) -> List[Point]:
    outline = sample_quadratic_curve(start, front_edge, tip)
    outline += sample_quadratic_curve(tip, back_edge, start)[1:]
    return outline


def _body_outline(points: PointMap) -> List[Point]:
    outline = [points["trunk_left_bottom"]]
    outline += sample_quadratic_curve(points["trunk_left_top"], points["head_curve_anchor"], points["trunk_right_top"])
    outline += sample_cubic_curve(
        points["trunk_right_bottom"], points["tail_right_outer_anchor"], points["tail_anchor"], points["tail_tip"]
    )
    outline += sample_cubic_curve(
        points["tail_tip"], points["tail_anchor"], points["tail_left_outer_anchor"], points["trunk_left_bottom"]
    )[1:]
    return outline


def _tail_fin_outline(points: PointMap, tip_key: str) -> List[Point]:
    anchor = points["tail_fin_anchor"]
    return [anchor] + sample_quadratic_curve(points[tip_key], points["extrapolated_tail_fin_tip"], anchor)


class PygameRenderBackend:
    """Draws pond geometry onto a pygame surface.

    Attributes:
        surface: Target surface, usually the display surface
        background_color: Color of the pond floor used by ``clear``
    """

    def __init__(self, surface: pygame.Surface, background_color: RGBA) -> None:
        self.surface = surface
        self.background_color = background_color
        self._glow_cache: Dict[Tuple, pygame.Surface] = {}
        self._fill_layer: Optional[pygame.Surface] = None

    def set_surface(self, surface: pygame.Surface) -> None:
        """Point the backend at a new surface (after a window resize)."""
        self.surface = surface
        self._fill_layer = None

    def _to_screen(self, point: Point) -> ScreenPoint:
        return (point.x, self.surface.get_height() - point.y)

    def _screen_points(self, points: Sequence[Point]) -> List[ScreenPoint]:
        height = self.surface.get_height()
        return [(point.x, height - point.y) for point in points]

    # -- layer helpers ------------------------------------------------------

    @staticmethod
    def _shape_layer(screen_points: Sequence[ScreenPoint], pad: int = 2) -> Tuple[pygame.Surface, ScreenPoint]:
        xs = [x for x, _ in screen_points]
        ys = [y for _, y in screen_points]
        left = math.floor(min(xs)) - pad
        top = math.floor(min(ys)) - pad
        width = math.ceil(max(xs)) - left + pad + 1
        height = math.ceil(max(ys)) - top + pad + 1
        return pygame.Surface((width, height), pygame.SRCALPHA), (left, top)

    @staticmethod
    def _paint_linear_gradient(
        target: pygame.Surface, start: ScreenPoint, end: ScreenPoint, start_color: RGBA, end_color: RGBA
    ) -> None:
        """Cover ``target`` with a gradient along ``start`` -> ``end``.

        Colors are clamped to the end colors beyond the two points.
        """
        dx, dy = end[0] - start[0], end[1] - start[1]
        length = max(1, int(math.hypot(dx, dy)))
        width, height = target.get_size()
        reach = int(math.hypot(width, height)) + 1

        band = pygame.Surface((length + 2 * reach, 2 * reach), pygame.SRCALPHA)
        band.fill(to_pygame_color(start_color), pygame.Rect(0, 0, reach, 2 * reach))
        band.fill(to_pygame_color(end_color), pygame.Rect(reach + length, 0, reach, 2 * reach))
        ramp = pygame.Surface((2, 1), pygame.SRCALPHA)
        ramp.set_at((0, 0), to_pygame_color(start_color))
        ramp.set_at((1, 0), to_pygame_color(end_color))
        band.blit(pygame.transform.smoothscale(ramp, (length, 2 * reach)), (reach, 0))

        rotated = pygame.transform.rotate(band, -math.degrees(math.atan2(dy, dx)))
        center = ((start[0] + end[0]) / 2, (start[1] + end[1]) / 2)
        target.blit(rotated, rotated.get_rect(center=center), special_flags=pygame.BLEND_RGBA_MAX)

    @staticmethod
    def _apply_mask(layer: pygame.Surface, trace: Callable[[pygame.Surface], None]) -> None:
        mask = pygame.Surface(layer.get_size(), pygame.SRCALPHA)
        trace(mask)
        layer.blit(mask, (0, 0), special_flags=pygame.BLEND_RGBA_MIN)

    def _fill_polygon(self, points: Sequence[Point], color: RGBA) -> None:
        screen_points = self._screen_points(points)
        if len(screen_points) < 3:
            return
        if color[3] >= 1:
            pygame.draw.polygon(self.surface, to_pygame_color(color), screen_points)
            return
        layer, origin = self._shape_layer(screen_points)
        pygame.draw.polygon(layer, to_pygame_color(color), _shifted(screen_points, origin))
        self.surface.blit(layer, origin)

    def _fill_gradient_polygon(
        self, points: Sequence[Point], start: Point, end: Point, start_color: RGBA, end_color: RGBA
    ) -> None:
        screen_points = self._screen_points(points)
        if len(screen_points) < 3:
            return
        layer, origin = self._shape_layer(screen_points)
        local = _shifted(screen_points, origin)
        gradient_start, gradient_end = _shifted(self._screen_points([start, end]), origin)
        self._paint_linear_gradient(layer, gradient_start, gradient_end, start_color, end_color)
        self._apply_mask(layer, lambda mask: pygame.draw.polygon(mask, MASK_COLOR, local))
        self.surface.blit(layer, origin)

    def _stroke(self, points: Sequence[Point], color: RGBA, width: int = 1) -> None:
        screen_points = self._screen_points(points)
        if len(screen_points) < 2:
            return
        if color[3] >= 1:
            pygame.draw.lines(self.surface, to_pygame_color(color), False, screen_points, width)
            return
        layer, origin = self._shape_layer(screen_points, pad=width)
        pygame.draw.lines(layer, to_pygame_color(color), False, _shifted(screen_points, origin), width)
        self.surface.blit(layer, origin)

    # -- RenderBackend ------------------------------------------------------

    def clear(self) -> None:
        self.surface.fill(to_pygame_color(self.background_color))

    def fill_surface(self, color: RGBA) -> None:
        size = self.surface.get_size()
        if self._fill_layer is None or self._fill_layer.get_size() != size:
            self._fill_layer = pygame.Surface(size, pygame.SRCALPHA)
        self._fill_layer.fill(to_pygame_color(color))
        self.surface.blit(self._fill_layer, (0, 0))

    def draw_point(self, point: Point, color: RGBA, radius: float = 1.0) -> None:
        pygame.draw.circle(self.surface, to_pygame_color(color), self._to_screen(point), max(1.0, radius) + 2)

    def draw_line(self, start: Point, end: Point, color: RGBA, width: int = 1) -> None:
        pygame.draw.line(self.surface, to_pygame_color(color), self._to_screen(start), self._to_screen(end), width)

    def draw_vector(self, start: Point, vector: Vector, color: RGBA) -> None:
        start_x, start_y = self._to_screen(start)
        end_x, end_y = self._to_screen(start.apply_vector(vector))
        pg_color = to_pygame_color(color)
        pygame.draw.line(self.surface, pg_color, (start_x, start_y), (end_x, end_y), 2)

        angle = math.atan2(end_y - start_y, end_x - start_x)
        head = [
            (end_x, end_y),
            (end_x - ARROW_LENGTH * math.cos(angle - ARROW_ANGLE), end_y - ARROW_LENGTH * math.sin(angle - ARROW_ANGLE)),
            (end_x - ARROW_LENGTH * math.cos(angle + ARROW_ANGLE), end_y - ARROW_LENGTH * math.sin(angle + ARROW_ANGLE)),
        ]
        pygame.draw.polygon(self.surface, pg_color, head)

    def draw_fish(self, points: PointMap, colors: FishColors, decorations: Sequence[DecorationDrawInfo]) -> None:
        # Tail and ventral fins go first so the body covers their roots
        for tip_key in ("left_tail_fin_tip", "right_tail_fin_tip"):
            self._fill_polygon(_tail_fin_outline(points, tip_key), colors.tail_fin)
        for side in ("left", "right"):
            self._fill_polygon(
                _fin_outline(
                    points["trunk_tail_joint"],
                    points[f"{side}_ventral_fin_front_edge"],
                    points[f"{side}_ventral_fin_back_edge"],
                    points[f"{side}_ventral_fin_tip"],
                ),
                colors.fin,
            )

        self._draw_fish_body(points, colors.body, decorations)

        for side in ("left", "right"):
            self._fill_polygon(
                _fin_outline(
                    points[f"trunk_{side}_top"],
                    points[f"{side}_pectoral_fin_front_edge"],
                    points[f"{side}_pectoral_fin_back_edge"],
                    points[f"{side}_pectoral_fin_tip"],
                ),
                colors.fin,
            )

        joint = points["trunk_tail_joint"]
        dorsal_edge = sample_quadratic_curve(joint, points["dorsal_fin_anchor"], points["dorsal_fin_end"])
        self._stroke(dorsal_edge, colors.fin)
        self._fill_polygon(
            dorsal_edge + sample_quadratic_curve(points["dorsal_fin_end"], points["dorsal_fin_tip"], joint)[1:],
            colors.fin,
        )

    def _draw_fish_body(self, points: PointMap, body_color: RGBA, decorations: Sequence[DecorationDrawInfo]) -> None:
        screen_points = self._screen_points(_body_outline(points))
        layer, origin = self._shape_layer(screen_points)
        local = _shifted(screen_points, origin)

        def trace_body(mask: pygame.Surface) -> None:
            pygame.draw.polygon(mask, MASK_COLOR, local)

        pygame.draw.polygon(layer, to_pygame_color(body_color), local)

        spots = pygame.Surface(layer.get_size(), pygame.SRCALPHA)
        for decoration in decorations:
            x, y = self._to_screen(decoration.position)
            center = (x - origin[0], y - origin[1])
            pygame.draw.circle(spots, to_pygame_color(decoration.color), center, decoration.radius + 2)
        self._apply_mask(spots, trace_body)
        layer.blit(spots, (0, 0))

        # Darker flanks, lighter spine
        shading = pygame.Surface(layer.get_size(), pygame.SRCALPHA)
        left_top, right_top = _shifted(
            self._screen_points([points["trunk_left_top"], points["trunk_right_top"]]), origin
        )
        spine = ((left_top[0] + right_top[0]) / 2, (left_top[1] + right_top[1]) / 2)
        clear_shade = apply_opacity(FISH_EDGE_SHADE, 0)
        self._paint_linear_gradient(shading, left_top, spine, FISH_EDGE_SHADE, clear_shade)
        self._paint_linear_gradient(shading, right_top, spine, FISH_EDGE_SHADE, clear_shade)
        self._apply_mask(shading, trace_body)
        layer.blit(shading, (0, 0))

        self.surface.blit(layer, origin)

    def draw_fish_shadow(self, points: PointMap, opacity: float) -> None:
        shadow_color = apply_opacity(BLACK, opacity)
        self._fill_polygon(_body_outline(points), shadow_color)
        for side in ("left", "right"):
            self._fill_polygon(
                _fin_outline(
                    points[f"trunk_{side}_top"],
                    points[f"{side}_pectoral_fin_front_edge"],
                    points[f"{side}_pectoral_fin_back_edge"],
                    points[f"{side}_pectoral_fin_tip"],
                ),
                shadow_color,
            )

    def draw_wave(self, points: PointMap, color: RGBA) -> None:
        front = points["front_midpoint"]
        outline = sample_quadratic_curve(front, points["front_right_anchor"], points["back_right_corner"])
        outline += sample_quadratic_curve(points["back_left_corner"], points["front_left_anchor"], front)
        self._fill_gradient_polygon(outline, front, points["back_midpoint"], color, apply_opacity(color, 0))

    def draw_petal(self, points: PointMap, base_color: RGBA, tip_color: RGBA) -> None:
        base, tip = points["base"], points["tip"]
        outline = sample_quadratic_curve(base, points["left_curve_anchor"], tip)
        outline += sample_quadratic_curve(tip, points["right_curve_anchor"], base)[1:]
        self._fill_gradient_polygon(outline, base, tip, base_color, tip_color)
        self._stroke([base, points["curve_anchor_base"]], base_color)

    def draw_food_particle(self, base: Point, tip: Point, curve_anchor: Point, color: RGBA) -> None:
        self._stroke(sample_quadratic_curve(base, curve_anchor, tip, segments=6), color)

    def draw_ripple(self, settings: RippleDrawSettings) -> None:
        stroke = self._screen_points(sample_quadratic_curve(settings.start, settings.curve, settings.end))
        width = max(1, int(settings.line_width))
        layer, origin = self._shape_layer(stroke + self._screen_points([settings.midpoint]), pad=width)
        local = _shifted(stroke, origin)
        gradient_start, gradient_end = _shifted(self._screen_points([settings.curve, settings.midpoint]), origin)
        self._paint_linear_gradient(
            layer, gradient_start, gradient_end, settings.color, apply_opacity(settings.color, 0)
        )
        self._apply_mask(layer, lambda mask: pygame.draw.lines(mask, MASK_COLOR, False, local, width))
        self.surface.blit(layer, origin)

    def draw_lantern(self, info: LanternDrawInfo) -> None:
        base = info.wooden_base_square
        self._fill_polygon([base["corner1"], base["corner2"], base["corner3"], base["corner4"]], info.wooden_base_color)
        self.draw_line(base["corner1"], base["corner2"], info.wood_join_color, 2)
        self.draw_line(base["corner3"], base["corner4"], info.wood_join_color, 2)
        for left, right in zip(info.left_join_points, info.right_join_points):
            self.draw_line(left, right, info.wood_join_color, 2)

        lamp_base, lamp_top = info.lamp_base_corners, info.lamp_top_corners
        lamp_outline = [lamp_base[key] for key in ("bottom_most", "left_most", "top_most", "right_most")]
        self._fill_polygon(lamp_outline, info.light_color)
        self._stroke(lamp_outline + lamp_outline[:1], RED, 2)
        for key in lamp_base:
            self.draw_line(lamp_base[key], lamp_top[key], RED, 3)

        walls = (
            ("left_most", "top_most", info.lamp_back_wall_opacity),
            ("right_most", "top_most", info.lamp_back_wall_opacity),
            ("left_most", "bottom_most", info.lamp_front_wall_opacity),
            ("right_most", "bottom_most", info.lamp_front_wall_opacity),
        )
        for first, second, opacity in walls:
            self._fill_gradient_polygon(
                [lamp_base[first], lamp_base[second], lamp_top[second], lamp_top[first]],
                midpoint(lamp_base[first], lamp_base[second]),
                midpoint(lamp_top[first], lamp_top[second]),
                apply_opacity(info.light_color, opacity),
                apply_opacity(info.lamp_wall_color, opacity),
            )

    def draw_lantern_shadow(self, square: PointMap, opacity: float) -> None:
        corners = [square["corner1"], square["corner2"], square["corner3"], square["corner4"]]
        self._fill_polygon(corners, apply_opacity(BLACK, opacity))

    def brighten_circle(
        self, center: Point, inner_radius: float, outer_radius: float, inner_color: RGBA, outer_color: RGBA
    ) -> None:
        """Additively lighten a disc with a radial gradient."""
        key = (int(inner_radius), int(outer_radius), inner_color, outer_color)
        glow = self._glow_cache.get(key)
        if glow is None:
            glow = self._build_glow(inner_radius, outer_radius, inner_color, outer_color)
            self._glow_cache[key] = glow
        self.surface.blit(glow, glow.get_rect(center=self._to_screen(center)), special_flags=pygame.BLEND_RGB_ADD)

    @staticmethod
    def _build_glow(inner_radius: float, outer_radius: float, inner_color: RGBA, outer_color: RGBA) -> pygame.Surface:
        radius = int(math.ceil(outer_radius))
        glow = pygame.Surface((2 * radius + 1, 2 * radius + 1))
        glow.fill((0, 0, 0))
        for step in range(GLOW_STEPS, 0, -1):
            t = step / GLOW_STEPS
            r, g, b, a = _lerp_color(inner_color, outer_color, t)
            # Additive blending has no alpha; premultiply instead
            color = (round(r * a), round(g * a), round(b * a))
            ring_radius = inner_radius + (outer_radius - inner_radius) * t
            pygame.draw.circle(glow, color, (radius, radius), max(1, int(ring_radius)))
        logger.debug("Built glow surface of radius %d", radius)
        return glow
