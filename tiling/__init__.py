"""
tiling — single-carton layer tiling and best-tile selection.

Public API:
    from tiling import best_tile, TileResult, summarize_load
    from tiling import generate_orientations, get_tiler, register_tiler
"""

from tiling.base_tiler import (
    BaseTiler, BoxPosition, PatternRow, TileResult,
    TILER_REGISTRY, get_tiler, register_tiler,
)
import tiling.uniform  # registers UniformTiler
import tiling.mixed_rows  # registers MixedRowTiler
import tiling.pinwheel  # registers PinwheelTiler
from tiling.orientations import (
    generate_orientations, unique_orientations, all_permutations,
)
from tiling.selector import best_tile, enumerate_candidates
from tiling.load_summary import LoadSummary, summarize_load

__all__ = [
    "BaseTiler", "BoxPosition", "PatternRow", "TileResult",
    "TILER_REGISTRY", "get_tiler", "register_tiler",
    "generate_orientations", "unique_orientations", "all_permutations",
    "best_tile", "enumerate_candidates",
    "LoadSummary", "summarize_load",
]
