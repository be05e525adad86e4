"""Koi fish: the main actors of the pond.

Each update a fish picks exactly one behavior, highest priority first:

1. Out-of-bounds recovery (teleport back to an edge)
2. Food seeking
3. Leader/follower schooling
4. Wandering toward a random target

The chosen behavior only sets a target point, a desired speed and a turn
multiplier. The actual heading and speed then move toward those values at
a limited rate, so fish never snap to a new direction.

Leader/follower pairs are stored as ids on both fish. A follower reads its
leader's follow point through the environment every frame, so removing a
fish can never leave a dangling reference behind.
"""

import logging
import math
from typing import TYPE_CHECKING, Dict, List, NamedTuple, Optional

from pond.color import RED, RGBA, VIOLET, apply_opacity, parse_config_color
from pond.draw_manager import DrawLayer
from pond.entities.base import Agent, AgentKind
from pond.entities.lantern import DEFAULT_SHADOW_DRAW_INFO
from pond.entities.ripple import Ripple
from pond.math_utils import (
    Point,
    PointMap,
    Vector,
    partial_quadratic_curve,
    rotate_all_points,
    scale_to_range,
    translate_all_points,
)
from pond.oscillator import Oscillator

if TYPE_CHECKING:
    from pond.config.pond_config import PondConfig
    from pond.entities.food import Food
    from pond.environment import PondEnvironment

logger = logging.getLogger(__name__)

LEFT_SIDE = "left"
RIGHT_SIDE = "right"


class FishColors(NamedTuple):
    body: RGBA
    fin: RGBA
    tail_fin: RGBA


class Decoration(NamedTuple):
    """A body spot, placed relative to the fish's heading."""

    angle: float
    distance: float
    radius: float
    color: RGBA


class DecorationDrawInfo(NamedTuple):
    position: Point
    radius: float
    color: RGBA


class KoiFish(Agent):
    kind = AgentKind.KOI_FISH

    MAX_ROTATION_ANGLE_PER_SECOND = 18.0
    MAX_SPEED_CHANGE_PER_SECOND = 1.5
    CANVAS_EXIT_DISTANCE = -20
    TURN_DEADBAND = 2.0

    NEW_TARGET_MIN_DISTANCE = 300
    TARGET_REACHED_DISTANCE = 50
    TARGET_PICK_ATTEMPTS = 50

    LEADER_SIZE_RATIO = 1.1
    LEADER_MAX_HEADING_DIFFERENCE = 60
    LEADER_MAX_BEARING = 60
    MAX_FOLLOW_SECONDS = 180
    MAX_FOLLOW_DRIFT = 100

    def __init__(
        self,
        environment: "PondEnvironment",
        position: Optional[Point] = None,
        direction: Optional[Vector] = None,
        target_point: Optional[Point] = None,
        size: Optional[float] = None,
        config: Optional["PondConfig"] = None,
    ) -> None:
        super().__init__(environment, position or environment.bounds.random_point(0.9), config)
        rng = self.rng
        clock = self.clock

        self.direction = direction.normalize() if direction is not None else Vector.random_direction(rng)
        self.size = size if size is not None else rng.uniform(0.7, 1.0)
        self.lengths = self._scaled_lengths()

        # Bigger fish flap their fins more slowly
        self.fin_oscillator = Oscillator(0, 1, scale_to_range(2, 3, self.size), clock)
        self.tail_oscillator = Oscillator(-10, 10, rng.uniform(3, 4), clock)
        self.sway_oscillator = Oscillator(-10, 10, rng.uniform(7, 10), clock)

        # Bigger fish swim more slowly
        self.base_speed = scale_to_range(15, 30, 1 - min(self.size, 1))
        self.speed = self.base_speed
        self.previous_speed = self.base_speed
        self.turn_multiplier = 1.0

        self.target_point = target_point or self.bounds.random_point(0.9)
        self.last_ripple_time = clock.now()

        self.colors = self._random_colors()
        self.decorations = self._random_decorations()

        self.desired_food: Optional["Food"] = None

        # Leader side of a pairing
        self.left_follow_angle = rng.uniform(180 + 20, 180 + 45)
        self.right_follow_angle = rng.uniform(125, 170)
        self.left_follow_point = self.position.copy()
        self.right_follow_point = self.position.copy()
        self.left_follower_id: Optional[str] = None
        self.right_follower_id: Optional[str] = None

        # Follower side of a pairing
        self.leader_id: Optional[str] = None
        self.follow_side: Optional[str] = None
        self.follow_start_time = 0.0

        self.update_follow_points()

    # -- appearance ---------------------------------------------------------

    def _scaled_lengths(self) -> Dict[str, float]:
        proportions = self.config.fish.proportions
        return {
            "head_curve_anchor": proportions.head_curve_anchor_length * self.size,
            "trunk_width": proportions.trunk_width * self.size,
            "trunk_length": proportions.trunk_length * self.size,
            "tail": proportions.tail_length * self.size,
            "fin": proportions.fin_length * self.size,
            "tail_fin": proportions.tail_fin_length * self.size,
        }

    def _random_colors(self) -> FishColors:
        fish_config = self.config.fish
        rng = self.rng
        body_colors = [parse_config_color(color) for color in fish_config.body_colors]
        fin_colors = [parse_config_color(color) for color in fish_config.fin_colors]
        decoration_colors = [parse_config_color(color) for color in fish_config.decoration_colors]

        # body palette repeats colors to weight the choice
        body = rng.choice(body_colors)
        fin_choices = [color for color in fin_colors if color != body] or fin_colors
        return FishColors(
            body=body,
            fin=apply_opacity(rng.choice(fin_choices), 0.7),
            tail_fin=apply_opacity(rng.choice(decoration_colors), 0.7),
        )

    def _random_decorations(self) -> List[Decoration]:
        rng = self.rng
        colors = self.config.fish.decoration_colors
        x_distance = self.lengths["trunk_width"] / 2
        radius = rng.uniform(0.7 * x_distance, x_distance) * math.sqrt(self.size)

        decorations = []
        for _ in range(rng.randint(1, 2)):
            offset = Vector(rng.choice((1, -1)) * x_distance, rng.uniform(-20, 5))
            decorations.append(
                Decoration(
                    angle=Vector.signed_angle_between(Vector.UP, offset),
                    distance=offset.magnitude(),
                    radius=radius,
                    color=parse_config_color(rng.choice(colors)),
                )
            )
        return decorations

    # -- pairing ------------------------------------------------------------

    def follow_point(self, side: str) -> Point:
        return self.left_follow_point if side == LEFT_SIDE else self.right_follow_point

    def available_follow_sides(self) -> List[str]:
        sides = []
        if self.left_follower_id is None:
            sides.append(LEFT_SIDE)
        if self.right_follower_id is None:
            sides.append(RIGHT_SIDE)
        return sides

    @property
    def is_following(self) -> bool:
        return self.leader_id is not None

    @staticmethod
    def pair_leader_follower(leader: "KoiFish", follower: "KoiFish", side: str) -> None:
        """Make ``follower`` follow ``leader`` on ``side``; both fish are updated."""
        if side == LEFT_SIDE:
            leader.left_follower_id = follower.id
        else:
            leader.right_follower_id = follower.id
        follower.leader_id = leader.id
        follower.follow_side = side
        follower.follow_start_time = follower.clock.now()
        follower.target_point = leader.follow_point(side).copy()

    @staticmethod
    def unpair_leader_follower(leader: Optional["KoiFish"], follower: "KoiFish") -> None:
        """Break a pairing on both sides. ``leader`` may be None if it is gone."""
        if leader is not None:
            if leader.left_follower_id == follower.id:
                leader.left_follower_id = None
            if leader.right_follower_id == follower.id:
                leader.right_follower_id = None
        follower.leader_id = None
        follower.follow_side = None

    def _leader(self) -> Optional["KoiFish"]:
        if self.leader_id is None:
            return None
        return self.environment.get_koi_fish(self.leader_id)

    def release_pairings(self) -> None:
        """Detach from the leader and from both followers (called on removal)."""
        if self.leader_id is not None:
            KoiFish.unpair_leader_follower(self._leader(), self)
        for follower_id in (self.left_follower_id, self.right_follower_id):
            if follower_id is None:
                continue
            follower = self.environment.get_koi_fish(follower_id)
            if follower is not None:
                KoiFish.unpair_leader_follower(self, follower)
        self.left_follower_id = None
        self.right_follower_id = None

    # -- behaviors ----------------------------------------------------------

    def handle_out_of_bounds(self) -> None:
        self.position = self.bounds.random_edge_point(0.8 * abs(self.CANVAS_EXIT_DISTANCE))
        self.target_point = self.bounds.random_point(0.8)
        to_target = self.position.vector_to(self.target_point)
        if to_target.magnitude() > 0:
            self.direction = to_target.normalize(mutate=True)

    def set_new_random_target_point(self) -> None:
        """Pick a target at least ``NEW_TARGET_MIN_DISTANCE`` away.

        On surfaces too small for that the farthest candidate is used.
        """
        best = None
        best_distance = -1.0
        for _ in range(self.TARGET_PICK_ATTEMPTS):
            candidate = self.bounds.random_point(0.9)
            distance = self.position.distance_to(candidate)
            if distance > best_distance:
                best, best_distance = candidate, distance
            if distance >= self.NEW_TARGET_MIN_DISTANCE:
                break
        self.target_point = best

    def _food_behavior(self) -> None:
        fish_config = self.config.fish
        food = self.desired_food
        if food is not None:
            gone = not self.environment.has_food(food) or food.is_eaten
            if gone or self.position.distance_to(food) < fish_config.food_eat_distance:
                food.on_eaten()
                self.desired_food = None
            else:
                self.target_point = food.position.copy()

        closest = None
        closest_distance = math.inf
        for nearby in self.environment.get_nearby_objects(self, AgentKind.FOOD, fish_config.food_search_range):
            if nearby.is_eaten:
                continue
            distance = self.position.distance_to(nearby)
            if distance < closest_distance:
                closest, closest_distance = nearby, distance

        if closest is None:
            self.tail_oscillator.set_speed_factor(1)
            self.fin_oscillator.set_speed_factor(1)
            return

        if self.leader_id is not None:
            KoiFish.unpair_leader_follower(self._leader(), self)

        self.desired_food = closest
        self.target_point = closest.position.copy()
        target_vector = self.position.vector_to(self.target_point)
        angle = abs(Vector.signed_angle_between(self.direction, target_vector))

        if closest_distance < 50 and angle > 30:
            # close but misaligned: slow down and turn hard
            self.speed = self.base_speed * 0.5
            self.turn_multiplier = 4
        elif angle < 30:
            self.speed = self.base_speed * 5
            self.turn_multiplier = 1
        else:
            self.speed = self.base_speed * 4
            self.turn_multiplier = 2

        self.tail_oscillator.set_speed_factor(2)
        self.fin_oscillator.set_speed_factor(2)

    def _is_potential_leader(self, other: "KoiFish") -> bool:
        if other.size <= self.size * self.LEADER_SIZE_RATIO:
            return False
        if not other.available_follow_sides():
            return False
        if abs(Vector.signed_angle_between(self.direction, other.direction)) >= self.LEADER_MAX_HEADING_DIFFERENCE:
            return False
        bearing = Vector.signed_angle_between(self.direction, self.position.vector_to(other))
        return abs(bearing) < self.LEADER_MAX_BEARING

    def _follow_behavior(self) -> None:
        if self.leader_id is None:
            candidates = [
                fish for fish in self.environment.get_nearby_objects(self, AgentKind.KOI_FISH)
                if self._is_potential_leader(fish)
            ]
            if candidates:
                leader = self.rng.choice(candidates)
                side = self.rng.choice(leader.available_follow_sides())
                KoiFish.pair_leader_follower(leader, self, side)
                logger.debug("Fish %s following %s on the %s side", self.id[:8], leader.id[:8], side)
            return

        leader = self._leader()
        if leader is None:
            KoiFish.unpair_leader_follower(None, self)
            self.set_new_random_target_point()
            return

        self.target_point = leader.follow_point(self.follow_side).copy()

        if self.clock.elapsed_seconds(self.follow_start_time) > self.MAX_FOLLOW_SECONDS:
            KoiFish.unpair_leader_follower(leader, self)
            self.set_new_random_target_point()
            return

        to_follow_point = self.position.vector_to(self.target_point)
        distance = to_follow_point.magnitude()
        if distance > self.MAX_FOLLOW_DRIFT:
            self.speed = self.base_speed
            KoiFish.unpair_leader_follower(leader, self)
            self.set_new_random_target_point()
            return

        angle = abs(Vector.signed_angle_between(self.direction, to_follow_point))
        if angle < 30 and distance > 20:
            # aimed at the follow point but behind it
            self.speed = 1.2 * leader.speed
        elif angle > 90 and distance < 50:
            # close but pointing the wrong way
            self.speed = 0.4 * leader.speed
        elif abs(Vector.signed_angle_between(self.direction, leader.direction)) < 30 and distance < 20:
            self.speed = leader.speed
            self.turn_multiplier = 0.5

    def _standard_behavior(self) -> None:
        if self.position.distance_to(self.target_point) < self.TARGET_REACHED_DISTANCE:
            self.set_new_random_target_point()

        target_vector = self.position.vector_to(self.target_point)
        angle = abs(Vector.signed_angle_between(self.direction, target_vector))
        distance_proportion = target_vector.magnitude() / self.bounds.diagonal

        # closer targets allow sharper turns
        self.turn_multiplier *= max(1 - distance_proportion, 0.5)
        if distance_proportion > 0.1 and angle < 45:
            self.turn_multiplier *= 0.3

    def _smoothen_direction_change(self, elapsed: float) -> None:
        max_rotation = self.MAX_ROTATION_ANGLE_PER_SECOND * elapsed
        desired = Vector.signed_angle_between(self.direction, self.position.vector_to(self.target_point))
        if abs(desired) <= self.TURN_DEADBAND:
            return
        change = math.copysign(min(max_rotation, abs(desired)), desired) * self.turn_multiplier
        self.direction.rotate(change, mutate=True)
        self.direction.normalize(mutate=True)

    def _smoothen_speed_change(self, elapsed: float) -> None:
        max_change = self.MAX_SPEED_CHANGE_PER_SECOND * elapsed
        difference = self.speed - self.previous_speed
        if abs(difference) > max_change:
            self.speed = self.previous_speed + math.copysign(max_change, difference)

    def update_follow_points(self) -> None:
        """Recompute both follow points in place around the current heading."""
        follow_distance = self.config.fish.follow_distance
        heading = self.direction.angle()
        for angle, point in (
            (self.left_follow_angle, self.left_follow_point),
            (self.right_follow_angle, self.right_follow_point),
        ):
            offset = self.position.apply_vector(Vector.UP.rotate(angle).scale(follow_distance))
            point.mutate(offset.rotate_around(self.position, heading))

    def update(self) -> None:
        elapsed = self.seconds_since_update()

        self.previous_speed = self.speed
        self.speed = self.base_speed
        self.turn_multiplier = 1.0

        if self.bounds.distance_to_border(self.position) < self.CANVAS_EXIT_DISTANCE:
            self.handle_out_of_bounds()
            self.mark_updated()
            return

        self._food_behavior()
        if self.desired_food is None:
            self._follow_behavior()
        if self.desired_food is None and self.leader_id is None:
            self._standard_behavior()

        self._smoothen_direction_change(elapsed)
        self._smoothen_speed_change(elapsed)

        self.position.apply_vector(self.direction.scale(self.speed * elapsed), mutate=True)
        self.update_follow_points()
        self.mark_updated()

    def generate_ripples(self) -> None:
        if self.clock.elapsed_seconds(self.last_ripple_time) <= Ripple.GENERATION_GAP:
            return
        self.last_ripple_time = self.clock.now()
        self.environment.add_ripple(
            Ripple(
                self.environment,
                position=self.position.apply_vector(self.direction.scale(self.lengths["head_curve_anchor"] * 0.7)),
                direction=self.direction.copy(),
                speed=self.base_speed * 0.7,
                length=self.size * Ripple.LENGTH_RATIO,
                config=self.config,
            )
        )

    # -- drawing ------------------------------------------------------------

    def draw_points(self, heading: Vector) -> PointMap:
        """Anatomical points, built pointing up then rotated to ``heading``."""
        lengths = self.lengths
        trunk_half = lengths["trunk_width"] / 2
        fin_length = lengths["fin"]
        tail_length = lengths["tail"]
        tail_fin_length = lengths["tail_fin"]
        up, down, left, right = Vector.UP, Vector.DOWN, Vector.LEFT, Vector.RIGHT
        position = self.position

        trunk_right_top = position.apply_vector(right.scale(trunk_half))
        trunk_left_top = position.apply_vector(left.scale(trunk_half))
        trunk_tail_joint = position.apply_vector(down.scale(lengths["trunk_length"]))
        trunk_right_bottom = trunk_tail_joint.apply_vector(right.scale(trunk_half))
        trunk_left_bottom = trunk_tail_joint.apply_vector(left.scale(trunk_half))

        fin_proportion = self.fin_oscillator.value()
        fin_angle = scale_to_range(140, 160, fin_proportion)
        ventral_angle = scale_to_range(150, 155, fin_proportion)

        tail_angle = self.tail_oscillator.value()
        tail_anchor = trunk_tail_joint.apply_vector(down.scale(0.7 * tail_length))
        tail_tip = trunk_tail_joint.apply_vector(down.rotate(tail_angle).scale(tail_length))
        tail_fin_anchor = trunk_tail_joint.apply_vector(down.scale(0.6 * tail_length))
        tail_fin_direction = tail_tip.direction_to(tail_fin_anchor)
        dorsal_fin_anchor, dorsal_fin_end = partial_quadratic_curve(trunk_tail_joint, tail_anchor, tail_tip, 0.5)

        points = {
            "center": position.copy(),
            "head_curve_anchor": position.apply_vector(up.scale(lengths["head_curve_anchor"])),
            "trunk_right_top": trunk_right_top,
            "trunk_left_top": trunk_left_top,
            "trunk_right_bottom": trunk_right_bottom,
            "trunk_left_bottom": trunk_left_bottom,
            "trunk_tail_joint": trunk_tail_joint,
            # pectoral fins
            "left_pectoral_fin_front_edge": trunk_left_top.apply_vector(up.rotate(-fin_angle + 20).scale(fin_length / 2)),
            "left_pectoral_fin_tip": trunk_left_top.apply_vector(up.rotate(-fin_angle).scale(fin_length)),
            "left_pectoral_fin_back_edge": trunk_left_top.apply_vector(down.scale(fin_length * 0.75)),
            "right_pectoral_fin_front_edge": trunk_right_top.apply_vector(up.rotate(fin_angle - 20).scale(fin_length / 2)),
            "right_pectoral_fin_tip": trunk_right_top.apply_vector(up.rotate(fin_angle).scale(fin_length)),
            "right_pectoral_fin_back_edge": trunk_right_top.apply_vector(down.scale(fin_length * 0.75)),
            # ventral fins
            "left_ventral_fin_tip": trunk_tail_joint.apply_vector(up.rotate(-ventral_angle).scale(fin_length * 0.9)),
            "left_ventral_fin_front_edge": trunk_tail_joint.apply_vector(up.rotate(-ventral_angle + 30).scale(fin_length / 2)),
            "left_ventral_fin_back_edge": trunk_tail_joint.apply_vector(up.rotate(-ventral_angle - 60).scale(fin_length / 2)),
            "right_ventral_fin_tip": trunk_tail_joint.apply_vector(up.rotate(ventral_angle).scale(fin_length * 0.9)),
            "right_ventral_fin_front_edge": trunk_tail_joint.apply_vector(up.rotate(ventral_angle - 30).scale(fin_length / 2)),
            "right_ventral_fin_back_edge": trunk_tail_joint.apply_vector(up.rotate(ventral_angle + 60).scale(fin_length / 2)),
            # dorsal fin
            "dorsal_fin_end": dorsal_fin_end,
            "dorsal_fin_anchor": dorsal_fin_anchor,
            "dorsal_fin_tip": trunk_tail_joint.apply_vector(down.rotate(tail_angle * 2).scale(tail_length * 0.2)),
            # tail
            "tail_left_outer_anchor": trunk_left_bottom.apply_vector(down.scale(0.3 * tail_length)),
            "tail_right_outer_anchor": trunk_right_bottom.apply_vector(down.scale(0.3 * tail_length)),
            "tail_anchor": tail_anchor,
            "tail_tip": tail_tip,
            # tail fins
            "tail_fin_anchor": tail_fin_anchor,
            "extrapolated_tail_fin_tip": tail_tip.apply_vector(tail_fin_direction.rotate(180).scale(0.5 * tail_fin_length)),
            "right_tail_fin_tip": tail_tip.apply_vector(tail_fin_direction.rotate(110).scale(tail_fin_length)),
            "left_tail_fin_tip": tail_tip.apply_vector(tail_fin_direction.rotate(-110).scale(tail_fin_length)),
        }
        return rotate_all_points(position, heading.angle(), points, mutate=True)

    def decoration_draw_infos(self, heading: Vector) -> List[DecorationDrawInfo]:
        return [
            DecorationDrawInfo(
                position=self.position.apply_vector(heading.rotate(decoration.angle).scale(decoration.distance)),
                radius=decoration.radius,
                color=decoration.color,
            )
            for decoration in self.decorations
        ]

    def draw(self) -> None:
        fish_config = self.config.fish
        renderer = self.environment.renderer
        position = self.position.copy()

        if fish_config.draw_simplified:
            body_color = self.colors.body
            radius = self.size * 2
            heading = self.direction.scale(30)
            self.schedule(DrawLayer.DEV, lambda: renderer.draw_point(position, body_color, radius))
            self.schedule(DrawLayer.DEV, lambda: renderer.draw_vector(position, heading, RED))
        else:
            heading = self.direction.rotate(self.sway_oscillator.value())
            points = self.draw_points(heading)

            shadows = [lantern.shadow_draw_info(self) for lantern in self.environment.lanterns()]
            for shadow in shadows or [DEFAULT_SHADOW_DRAW_INFO]:
                shadow_points = translate_all_points(shadow.shadow_vector, points)
                self.schedule(
                    DrawLayer.FISH,
                    lambda shadow_points=shadow_points, opacity=shadow.shadow_opacity: renderer.draw_fish_shadow(
                        shadow_points, opacity
                    ),
                )

            colors = self.colors
            decorations = self.decoration_draw_infos(heading)
            self.schedule(DrawLayer.FISH, lambda: renderer.draw_fish(points, colors, decorations))

        leader = self._leader() if fish_config.draw_leader_follower_links else None
        if leader is not None:
            link = position.vector_to(leader.position).scale(0.9)
            self.schedule(DrawLayer.DEV, lambda: renderer.draw_vector(position, link, VIOLET))
