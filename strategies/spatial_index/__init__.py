"""Spatial index strategy: scored free-space list with guillotine cuts and merging."""
from strategies.spatial_index.strategy import SpatialIndex, SpatialIndexStrategy
__all__ = ["SpatialIndex", "SpatialIndexStrategy"]
