"""Spatial indexing for neighbour queries."""

import math
from collections import defaultdict
from typing import TYPE_CHECKING, Dict, Iterable, List, Tuple

from pond.config.display import CELL_SIZE
from pond.math_utils import Point

if TYPE_CHECKING:
    from pond.entities.base import Agent, AgentKind


class SpatialGrid:
    """
    Uniform grid over the surface, rebuilt every frame.

    Cells are addressed by a single integer index, row-major from the
    bottom-left corner. Agents are inserted by position at the start of
    the update pass, so queries during the pass see start-of-frame
    positions.
    """

    def __init__(self, width: float, height: float, cell_size: int = CELL_SIZE):
        """
        Initialize the spatial grid.

        Args:
            width: Width of the surface in pixels
            height: Height of the surface in pixels
            cell_size: Size of each grid cell in pixels (default 50)
        """
        self.cell_size = cell_size
        self.cells: Dict[int, List["Agent"]] = defaultdict(list)
        # (cell_index, range) -> neighbouring cell indices
        self._neighbor_cache: Dict[Tuple[int, int], List[int]] = {}
        self.resize(width, height)

    def resize(self, width: float, height: float) -> None:
        """Re-dimension the grid; clears contents and the neighbour cache."""
        self.width = width
        self.height = height
        self.num_cells_x = max(1, math.ceil(width / self.cell_size))
        self.num_cells_y = max(1, math.ceil(height / self.cell_size))
        self._neighbor_cache.clear()
        self.clear()

    def cell_index_of(self, point: Point) -> int:
        # Off-surface positions clamp to the nearest edge cell
        col = max(0, min(self.num_cells_x - 1, math.floor(point.x / self.cell_size)))
        row = max(0, min(self.num_cells_y - 1, math.floor(point.y / self.cell_size)))
        return row * self.num_cells_x + col

    def neighbors_of(self, cell_index: int, cell_range: int = 1) -> List[int]:
        """Cell indices within ``cell_range`` cells of ``cell_index``, itself included.

        Cells outside the grid are skipped; there is no wraparound.
        """
        key = (cell_index, cell_range)
        cached = self._neighbor_cache.get(key)
        if cached is not None:
            return cached

        cell_x = cell_index % self.num_cells_x
        cell_y = cell_index // self.num_cells_x
        indices = []
        for dx in range(-cell_range, cell_range + 1):
            for dy in range(-cell_range, cell_range + 1):
                adj_x = cell_x + dx
                adj_y = cell_y + dy
                if 0 <= adj_x < self.num_cells_x and 0 <= adj_y < self.num_cells_y:
                    indices.append(adj_y * self.num_cells_x + adj_x)

        self._neighbor_cache[key] = indices
        return indices

    def clear(self) -> None:
        self.cells.clear()

    def insert(self, agent: "Agent") -> int:
        """Add an agent to the cell containing its position and return the index."""
        index = self.cell_index_of(agent.position)
        self.cells[index].append(agent)
        return index

    def rebuild(self, agents: Iterable["Agent"]) -> None:
        self.clear()
        for agent in agents:
            self.insert(agent)

    def agents_in(self, cell_index: int) -> List["Agent"]:
        return self.cells.get(cell_index, [])

    def query(self, source: "Agent", kind: "AgentKind", cell_range: int = 1) -> List["Agent"]:
        """Agents of ``kind`` within ``cell_range`` cells of ``source``.

        ``source`` itself is never returned.
        """
        found = []
        for index in self.neighbors_of(self.cell_index_of(source.position), cell_range):
            for agent in self.cells.get(index, ()):
                if agent.kind is kind and agent is not source:
                    found.append(agent)
        return found

    def __len__(self) -> int:
        return sum(len(agents) for agents in self.cells.values())
