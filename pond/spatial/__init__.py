"""Surface geometry and spatial indexing."""

from pond.spatial.bounds import SurfaceBounds
from pond.spatial.grid import SpatialGrid

__all__ = ["SpatialGrid", "SurfaceBounds"]
