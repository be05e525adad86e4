"""Surface geometry: dimensions, border distances and random placement."""

import math
import random
from typing import Optional, Tuple

from pond.config.display import PIXELS_PER_INCH
from pond.math_utils import Point


class SurfaceBounds:
    """
    The visible drawing surface, in flipped-Y coordinates.

    Answers "where is the border" questions for agents and generates the
    random spawn, edge and re-entry points they use.
    """

    def __init__(
        self,
        width: float,
        height: float,
        rng: Optional[random.Random] = None,
        pixels_per_inch: float = PIXELS_PER_INCH,
    ):
        """
        Initialize the surface bounds.

        Args:
            width: Surface width in pixels
            height: Surface height in pixels
            rng: Random source for generated points
            pixels_per_inch: Density used by ``total_square_inches``
        """
        self.rng = rng or random.Random()
        self.pixels_per_inch = pixels_per_inch
        self.width = 0.0
        self.height = 0.0
        self.diagonal = 0.0
        self.resize(width, height)

    def resize(self, width: float, height: float) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"Surface must have a positive size, got {width}x{height}")
        self.width = float(width)
        self.height = float(height)
        self.diagonal = math.hypot(self.width, self.height)

    def get_dimensions(self) -> Tuple[float, float]:
        return (self.width, self.height)

    def is_out_of_bounds(self, point: Point, tolerance: float = 0.0) -> bool:
        """Whether ``point`` lies more than ``tolerance`` outside the surface."""
        return (
            point.x < -tolerance
            or point.x > self.width + tolerance
            or point.y < -tolerance
            or point.y > self.height + tolerance
        )

    def distance_to_border(self, point: Point) -> float:
        """Signed distance to the nearest border.

        Positive inside the surface, negative outside: 50 means 50 units in
        from the border, -50 means 50 units beyond it.
        """
        x, y = point.x, point.y
        nearest = abs(min(x, self.width - x, y, self.height - y))
        outside = x < 0 or x > self.width or y < 0 or y > self.height
        return -nearest if outside else nearest

    def total_square_inches(self) -> float:
        return (self.width / self.pixels_per_inch) * (self.height / self.pixels_per_inch)

    def random_point(self, ratio: float = 1.0) -> Point:
        """Random point inside the centred ``ratio`` portion of the surface."""
        margin_x = (1 - ratio) * self.width / 2
        margin_y = (1 - ratio) * self.height / 2
        return Point(
            margin_x + self.rng.random() * self.width * ratio,
            margin_y + self.rng.random() * self.height * ratio,
        )

    # -- edge points -------------------------------------------------------

    def top_edge_point(self, outside_distance: float = 0.0) -> Point:
        return Point(self.rng.random() * self.width, self.height + outside_distance)

    def bottom_edge_point(self, outside_distance: float = 0.0) -> Point:
        return Point(self.rng.random() * self.width, -outside_distance)

    def left_edge_point(self, outside_distance: float = 0.0) -> Point:
        return Point(-outside_distance, self.rng.random() * self.height)

    def right_edge_point(self, outside_distance: float = 0.0) -> Point:
        return Point(self.width + outside_distance, self.rng.random() * self.height)

    def random_edge_point(self, outside_distance: float = 0.0) -> Point:
        """Random point on a random edge, ``outside_distance`` beyond it."""
        edge = self.rng.choice(
            (self.top_edge_point, self.bottom_edge_point, self.left_edge_point, self.right_edge_point)
        )
        return edge(outside_distance)

    def top_left_corner_point(self, outside_distance: float = 0.0) -> Point:
        """Point near the top-left corner: the left half of the top edge or the
        upper half of the left edge."""
        if self.rng.choice((True, False)):
            return Point(self.rng.uniform(0, self.width / 2), self.height + outside_distance)
        return Point(-outside_distance, self.rng.uniform(self.height / 2, self.height))

    def bottom_right_corner_point(self, outside_distance: float = 0.0) -> Point:
        if self.rng.choice((True, False)):
            return Point(self.rng.uniform(self.width / 2, self.width) + outside_distance, -outside_distance)
        return Point(self.width + outside_distance, self.rng.uniform(0, self.height / 2))

    def river_entry_exit_points(
        self, outside_distance: float = 0.0, corner_ratio: float = 0.7
    ) -> Tuple[Point, Point]:
        """Entry near the top-left and exit near the bottom-right.

        Args:
            outside_distance: How far beyond the border the entry point sits
            corner_ratio: Fraction of each edge, measured from its corner,
                that entry and exit points may use

        Returns:
            ``(entry_point, exit_point)``; the exit is never up-left of the
            entry.
        """
        if self.rng.choice((True, False)):
            entry = Point(self.rng.uniform(0, self.width * corner_ratio), self.height + outside_distance)
        else:
            entry = Point(-outside_distance, self.rng.uniform((1 - corner_ratio) * self.height, self.height))

        if self.rng.choice((True, False)):
            min_x = max((1 - corner_ratio) * self.width, entry.x)
            exit_point = Point(self.rng.uniform(min_x, self.width), 0.0)
        else:
            max_y = min(entry.y, self.height * corner_ratio)
            exit_point = Point(self.width, self.rng.uniform(0, max_y))

        return entry, exit_point
