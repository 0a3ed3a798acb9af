"""
Best-tile selection for a single carton type.

Every combination of space variant (normal, then length/width swapped),
orientation and enabled tiler is tried.  Candidates are ranked by total
cartons, then cartons per layer; ``sorted`` is stable so remaining ties
go to the first candidate enumerated.  The function is pure: identical
inputs always produce an identical result.
"""

from typing import List, Optional

from config import DEFAULT_CONFIG, EngineConfig
from geometry import as_positive
from tiling.base_tiler import TileResult, get_tiler
from tiling.orientations import generate_orientations


def enumerate_candidates(box_l: float, box_w: float, box_h: float,
                         space_l: float, space_w: float, space_h: float,
                         allow_vertical_flip: bool = True,
                         config: Optional[EngineConfig] = None) -> List[TileResult]:
    """All non-empty tilings in enumeration order (inputs assumed valid)."""
    config = config or DEFAULT_CONFIG
    tilers = [get_tiler(name, config) for name in config.enabled_tilers]
    orientations = generate_orientations(box_l, box_w, box_h, allow_vertical_flip)
    variants = ((space_l, space_w, False), (space_w, space_l, True))

    candidates: List[TileResult] = []
    for var_l, var_w, swapped in variants:
        for o in orientations:
            for tiler in tilers:
                result = tiler.fit(o, var_l, var_w, space_h, swapped)
                if result is not None:
                    candidates.append(result)
    return candidates


def best_tile(box_l, box_w, box_h, space_l, space_w, space_h,
              allow_vertical_flip: bool = True,
              config: Optional[EngineConfig] = None) -> TileResult:
    """
    Best layer tiling of one carton into one space.

    Returns:
        The winning TileResult, or ``TileResult.empty()`` when any
        dimension is not a finite positive number or nothing fits.
    """
    dims = [as_positive(v) for v in (box_l, box_w, box_h, space_l, space_w, space_h)]
    if any(d is None for d in dims):
        return TileResult.empty()

    candidates = enumerate_candidates(*dims, allow_vertical_flip=allow_vertical_flip,
                                      config=config)
    if not candidates:
        return TileResult.empty()

    ranked = sorted(candidates, key=lambda c: (c.total, c.per_layer), reverse=True)
    return ranked[0]
