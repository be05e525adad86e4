"""Tests for the uniform spatial grid."""

from types import SimpleNamespace

import pytest

from pond.entities.base import AgentKind
from pond.math_utils import Point
from pond.spatial.grid import SpatialGrid


def make_agent(x, y, kind=AgentKind.FOOD):
    return SimpleNamespace(position=Point(x, y), kind=kind)


@pytest.fixture
def grid():
    # 4 columns x 2 rows of 50px cells
    return SpatialGrid(200, 100, cell_size=50)


class TestCellIndexing:
    def test_dimensions(self, grid):
        assert (grid.num_cells_x, grid.num_cells_y) == (4, 2)

    def test_row_major_from_bottom_left(self, grid):
        assert grid.cell_index_of(Point(10, 10)) == 0
        assert grid.cell_index_of(Point(75, 60)) == 5

    def test_points_outside_are_clamped(self, grid):
        assert grid.cell_index_of(Point(-10, 500)) == 4
        assert grid.cell_index_of(Point(900, -30)) == 3


class TestNeighbors:
    def test_corner_cell_has_no_wraparound(self, grid):
        assert sorted(grid.neighbors_of(0, 1)) == [0, 1, 4, 5]

    def test_range_covers_square_of_cells(self, grid):
        assert sorted(grid.neighbors_of(5, 1)) == [0, 1, 2, 4, 5, 6]
        assert sorted(grid.neighbors_of(0, 3)) == list(range(8))

    def test_results_are_memoized(self, grid):
        assert grid.neighbors_of(5, 2) is grid.neighbors_of(5, 2)

    def test_resize_discards_cache(self, grid):
        before = grid.neighbors_of(0, 1)
        grid.resize(400, 100)
        after = grid.neighbors_of(0, 1)
        assert after is not before
        assert sorted(after) == [0, 1, 8, 9]


class TestQuery:
    def test_excludes_source_and_other_kinds(self, grid):
        source = make_agent(60, 60, AgentKind.KOI_FISH)
        food = make_agent(70, 40)
        other_fish = make_agent(80, 80, AgentKind.KOI_FISH)
        grid.rebuild([source, food, other_fish])

        assert grid.query(source, AgentKind.FOOD) == [food]
        assert grid.query(source, AgentKind.KOI_FISH) == [other_fish]

    def test_range_limits_results(self, grid):
        source = make_agent(10, 10, AgentKind.KOI_FISH)
        far_food = make_agent(190, 90)
        grid.rebuild([source, far_food])

        assert grid.query(source, AgentKind.FOOD, 1) == []
        assert grid.query(source, AgentKind.FOOD, 3) == [far_food]

    def test_rebuild_replaces_contents(self, grid):
        grid.rebuild([make_agent(10, 10), make_agent(20, 20)])
        assert len(grid) == 2
        grid.rebuild([make_agent(10, 10)])
        assert len(grid) == 1

    def test_insert_returns_cell_index(self, grid):
        agent = make_agent(160, 70)
        index = grid.insert(agent)
        assert index == 7
        assert grid.agents_in(7) == [agent]
        assert grid.agents_in(6) == []
