"""Centralized 2D geometry for the pond simulation.

Coordinates use a flipped-Y convention: the origin is the bottom-left corner
of the surface and ``y`` grows upward. Angles are in degrees and rotation is
clockwise-positive, so rotating ``Vector.UP`` by +90 gives ``Vector.RIGHT``.

Every transform takes a ``mutate`` flag. By default a new value is returned;
with ``mutate=True`` the receiver is changed in place and returned, so points
shared by reference observe the change.
"""

from __future__ import annotations

import math
import random
from typing import Dict, List, Optional, Tuple, Union

from pond.exceptions import InvalidGeometryError, InvalidInputError

PointMap = Dict[str, "Point"]


class Vector:
    """A direction and magnitude.

    A vector with magnitude 1 is referred to as a direction throughout the
    simulation.
    """

    __slots__ = ("dx", "dy")

    UP: "Vector"
    RIGHT: "Vector"
    DOWN: "Vector"
    LEFT: "Vector"
    DOWN_RIGHT: "Vector"
    DOWN_LEFT: "Vector"

    def __init__(self, dx: float = 0.0, dy: float = 0.0) -> None:
        self.dx: float = float(dx)
        self.dy: float = float(dy)

    def _result(self, dx: float, dy: float, mutate: bool) -> "Vector":
        if mutate:
            self.dx = dx
            self.dy = dy
            return self
        return Vector(dx, dy)

    def magnitude(self) -> float:
        return math.sqrt(self.dx * self.dx + self.dy * self.dy)

    def normalize(self, mutate: bool = False) -> "Vector":
        """Scale the vector to unit length.

        Raises:
            InvalidGeometryError: If the vector has zero length.
        """
        magnitude = self.magnitude()
        if magnitude == 0:
            raise InvalidGeometryError("Cannot normalize a zero vector")
        return self._result(self.dx / magnitude, self.dy / magnitude, mutate)

    def rotate(self, angle_degrees: float, mutate: bool = False) -> "Vector":
        """Rotate clockwise by ``angle_degrees`` (negative is counterclockwise)."""
        angle_radians = -math.radians(angle_degrees)
        cos_theta = math.cos(angle_radians)
        sin_theta = math.sin(angle_radians)
        dx = self.dx * cos_theta - self.dy * sin_theta
        dy = self.dx * sin_theta + self.dy * cos_theta
        return self._result(dx, dy, mutate)

    def scale(self, factor: float, mutate: bool = False) -> "Vector":
        return self._result(self.dx * factor, self.dy * factor, mutate)

    def angle(self) -> float:
        """Angle from straight up, clockwise, in degrees within ``[0, 360)``.

        Up is 0, right is 90, down is 180 and left is 270.
        """
        degrees = math.degrees(math.atan2(self.dx, self.dy))
        if degrees < 0:
            degrees += 360.0
        return degrees % 360.0

    def copy(self) -> "Vector":
        return Vector(self.dx, self.dy)

    @staticmethod
    def signed_angle_between(a: "Vector", b: "Vector") -> float:
        """Signed angle from ``a`` to ``b`` in degrees within ``[-180, 180]``.

        A positive result means ``b`` lies clockwise of ``a``; rotating ``a``
        by the result points it along ``b``. Zero-length inputs are treated
        as pointing along the positive x axis.
        """
        angle_a = math.atan2(a.dy, a.dx)
        angle_b = math.atan2(b.dy, b.dx)
        degrees = math.degrees(angle_a - angle_b)
        if degrees > 180.0:
            degrees -= 360.0
        elif degrees < -180.0:
            degrees += 360.0
        return degrees

    @staticmethod
    def random_direction(rng: Optional[random.Random] = None) -> "Vector":
        """Random unit vector in any quadrant."""
        rng = rng or random.Random()
        while True:
            vector = Vector(rng.choice((1, -1)) * rng.random(), rng.choice((1, -1)) * rng.random())
            if vector.magnitude() > 0:
                return vector.normalize(mutate=True)

    @staticmethod
    def down_right_direction(rng: Optional[random.Random] = None) -> "Vector":
        """Random unit vector in the down-right quadrant (``dx >= 0``, ``dy <= 0``)."""
        rng = rng or random.Random()
        while True:
            vector = Vector(rng.random(), -rng.random())
            if vector.magnitude() > 0:
                return vector.normalize(mutate=True)

    def __eq__(self, other: object) -> bool:
        if other.__class__ is not Vector:
            return False
        return abs(self.dx - other.dx) < 1e-9 and abs(self.dy - other.dy) < 1e-9

    def __ne__(self, other: object) -> bool:
        return not self.__eq__(other)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Vector({self.dx}, {self.dy})"


Vector.UP = Vector(0, 1)
Vector.RIGHT = Vector(1, 0)
Vector.DOWN = Vector(0, -1)
Vector.LEFT = Vector(-1, 0)
Vector.DOWN_RIGHT = Vector(1, -1).normalize()
Vector.DOWN_LEFT = Vector(-1, -1).normalize()


class Point:
    """A position on the drawing surface."""

    __slots__ = ("x", "y")

    def __init__(self, x: float = 0.0, y: float = 0.0) -> None:
        self.x: float = float(x)
        self.y: float = float(y)

    def _result(self, x: float, y: float, mutate: bool) -> "Point":
        if mutate:
            self.x = x
            self.y = y
            return self
        return Point(x, y)

    def apply_vector(self, vector: Vector, mutate: bool = False) -> "Point":
        return self._result(self.x + vector.dx, self.y + vector.dy, mutate)

    def translate_by(self, vector: Vector, mutate: bool = False) -> "Point":
        return self.apply_vector(vector, mutate)

    def vector_to(self, target: "Positioned") -> Vector:
        """Vector from this point to a point or anything with a ``position``."""
        target_point = _as_point(target)
        return Vector(target_point.x - self.x, target_point.y - self.y)

    def direction_to(self, target: "Positioned") -> Vector:
        """Unit vector toward ``target``.

        Raises:
            InvalidGeometryError: If ``target`` coincides with this point.
        """
        return self.vector_to(target).normalize(mutate=True)

    def distance_to(self, target: "Positioned") -> float:
        return self.vector_to(target).magnitude()

    def rotate_around(self, pivot: "Point", angle_degrees: float, mutate: bool = False) -> "Point":
        """Rotate clockwise around ``pivot``."""
        angle_radians = math.radians(angle_degrees)
        cos_angle = math.cos(angle_radians)
        sin_angle = math.sin(angle_radians)
        x = self.x - pivot.x
        y = self.y - pivot.y
        rotated_x = x * cos_angle + y * sin_angle
        rotated_y = -x * sin_angle + y * cos_angle
        return self._result(rotated_x + pivot.x, rotated_y + pivot.y, mutate)

    def round(self, mutate: bool = False) -> "Point":
        return self._result(float(round(self.x)), float(round(self.y)), mutate)

    def copy(self) -> "Point":
        return Point(self.x, self.y)

    def mutate(self, other: "Point") -> "Point":
        """Overwrite this point's coordinates with ``other``'s."""
        self.x = other.x
        self.y = other.y
        return self

    def coordinates(self) -> Tuple[float, float]:
        return (self.x, self.y)

    def __eq__(self, other: object) -> bool:
        if other.__class__ is not Point:
            return False
        return abs(self.x - other.x) < 1e-9 and abs(self.y - other.y) < 1e-9

    def __ne__(self, other: object) -> bool:
        return not self.__eq__(other)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Point({self.x}, {self.y})"


Positioned = Union[Point, object]


def _as_point(target: Positioned) -> Point:
    if isinstance(target, Point):
        return target
    return target.position  # type: ignore[attr-defined]


def scale_to_range(minimum: float, maximum: float, proportion: float) -> float:
    """Linearly map ``proportion`` (0..1) onto ``[minimum, maximum]``."""
    return minimum + (maximum - minimum) * proportion


def rotate_all_points(center: Point, angle_degrees: float, points: PointMap, mutate: bool = False) -> PointMap:
    """Rotate every point of a named point map around ``center``."""
    rotated = {name: point.rotate_around(center, angle_degrees, mutate) for name, point in points.items()}
    return points if mutate else rotated


def translate_all_points(vector: Vector, points: PointMap, mutate: bool = False) -> PointMap:
    """Translate every point of a named point map by ``vector``."""
    translated = {name: point.translate_by(vector, mutate) for name, point in points.items()}
    return points if mutate else translated


def find_corners(points: PointMap) -> PointMap:
    """Find the extreme points of a point map.

    Returns:
        Map with ``bottom_most``, ``top_most``, ``left_most`` and
        ``right_most`` keys. Ties keep the earliest point.

    Raises:
        InvalidInputError: If ``points`` is empty.
    """
    values = list(points.values())
    if not values:
        raise InvalidInputError("Point map cannot be empty")

    corners = {
        "bottom_most": values[0],
        "top_most": values[0],
        "left_most": values[0],
        "right_most": values[0],
    }
    for point in values[1:]:
        if point.y < corners["bottom_most"].y:
            corners["bottom_most"] = point
        if point.y > corners["top_most"].y:
            corners["top_most"] = point
        if point.x < corners["left_most"].x:
            corners["left_most"] = point
        if point.x > corners["right_most"].x:
            corners["right_most"] = point
    return corners


def evenly_spaced_points(start: Point, end: Point, count: int) -> List[Point]:
    """``count`` points from ``start`` to ``end`` inclusive.

    Raises:
        InvalidInputError: If fewer than two points are requested.
    """
    if count < 2:
        raise InvalidInputError(f"Need at least two points, got {count}")
    delta_x = (end.x - start.x) / (count - 1)
    delta_y = (end.y - start.y) / (count - 1)
    return [Point(start.x + delta_x * i, start.y + delta_y * i) for i in range(count)]


def midpoint(a: Point, b: Point) -> Point:
    return Point((a.x + b.x) / 2, (a.y + b.y) / 2)


def point_on_line(a: Point, b: Point, t: float) -> Point:
    """Point at parameter ``t`` along the segment from ``a`` to ``b``."""
    return Point(a.x + t * (b.x - a.x), a.y + t * (b.y - a.y))


def partial_quadratic_curve(start: Point, control: Point, end: Point, t: float) -> Tuple[Point, Point]:
    """Split a quadratic curve at ``t`` and keep the first part.

    Returns:
        ``(control_point, end_point)`` of the curve from ``start`` to the
        point at ``t``.
    """
    first = point_on_line(start, control, t)
    second = point_on_line(control, end, t)
    return first, point_on_line(first, second, t)


def arc_points(a: Point, b: Point, vector: Vector) -> Tuple[Point, Point]:
    """Control point for a curve from ``a`` to ``b`` bowed along ``vector``.

    Returns:
        ``(arc_point, midpoint)``
    """
    middle = midpoint(a, b)
    return middle.apply_vector(vector), middle


def square_points(center: Point, rotation_degrees: float, side_length: float) -> PointMap:
    """Corners of a square centred on ``center`` rotated clockwise.

    ``corner1`` starts bottom-left and the corners run counterclockwise
    before rotation.
    """
    half = side_length / 2
    corners = {
        "corner1": Point(center.x - half, center.y - half),
        "corner2": Point(center.x + half, center.y - half),
        "corner3": Point(center.x + half, center.y + half),
        "corner4": Point(center.x - half, center.y + half),
    }
    return rotate_all_points(center, rotation_degrees, corners, mutate=True)


def sample_quadratic_curve(start: Point, control: Point, end: Point, segments: int = 12) -> List[Point]:
    """Points along a quadratic Bezier curve, endpoints included."""
    samples = []
    for i in range(segments + 1):
        t = i / segments
        inverse = 1 - t
        samples.append(
            Point(
                inverse * inverse * start.x + 2 * inverse * t * control.x + t * t * end.x,
                inverse * inverse * start.y + 2 * inverse * t * control.y + t * t * end.y,
            )
        )
    return samples


def sample_cubic_curve(
    start: Point, control1: Point, control2: Point, end: Point, segments: int = 16
) -> List[Point]:
    """Points along a cubic Bezier curve, endpoints included."""
    samples = []
    for i in range(segments + 1):
        t = i / segments
        inverse = 1 - t
        a = inverse ** 3
        b = 3 * inverse * inverse * t
        c = 3 * inverse * t * t
        d = t ** 3
        samples.append(
            Point(
                a * start.x + b * control1.x + c * control2.x + d * end.x,
                a * start.y + b * control1.y + c * control2.y + d * end.y,
            )
        )
    return samples


__all__ = [
    "Point",
    "PointMap",
    "Vector",
    "arc_points",
    "evenly_spaced_points",
    "find_corners",
    "midpoint",
    "partial_quadratic_curve",
    "point_on_line",
    "rotate_all_points",
    "sample_cubic_curve",
    "sample_quadratic_curve",
    "scale_to_range",
    "square_points",
    "translate_all_points",
]
