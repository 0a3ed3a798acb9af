"""Wall building strategy: vertical walls filled layer by layer from x = 0."""
from strategies.wall_building.strategy import WallBuildingStrategy
__all__ = ["WallBuildingStrategy"]
