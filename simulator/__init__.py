"""
simulator — heightmap placement of carton groups into one container.

  HeightmapState       — 2D surface grid of one container
  pack_groups          — bottom-left heightmap packer for carton groups
  HeightmapPackResult  — per-container result (groups, totals, placements)
  validate_pack_result — containment / overlap / gravity checks

Public API:
    from simulator import pack_groups, HeightmapPackResult
    from simulator import validate_pack_result, PlacementError
"""

from simulator.bin_state import HeightmapState
from simulator.group_packer import (
    GroupPackResult,
    HeightmapPackResult,
    find_best_position,
    pack_groups,
)
from simulator.validator import (
    validate_pack_result,
    PlacementError,
    OutOfBoundsError,
    OverlapError,
    FloatingError,
)

__all__ = [
    "HeightmapState",
    "GroupPackResult", "HeightmapPackResult", "find_best_position", "pack_groups",
    "validate_pack_result", "PlacementError",
    "OutOfBoundsError", "OverlapError", "FloatingError",
]
