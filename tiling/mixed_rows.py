"""
Mixed-row tiling: rows across the width alternate between the
``(l, w)`` and ``(w, l)`` footprint.

A narrow strip left over by one orientation can often hold a row of the
other, which is where this beats the uniform grid.  Square footprints
gain nothing and are skipped.
"""

import math
from typing import List, Optional

from config import Orientation
from tiling.base_tiler import (
    BaseTiler, PatternRow, TileResult, pattern_name, register_tiler,
)


@register_tiler
class MixedRowTiler(BaseTiler):
    """Greedy row alternation by row parity (odd rows rotated)."""

    name: str = "mixed"

    def fit(self, orientation: Orientation, space_l: float, space_w: float,
            space_h: float, swapped: bool = False) -> Optional[TileResult]:
        o = orientation
        if o.is_square_footprint:
            return None
        layers = math.floor(space_h / o.height)
        if layers <= 0:
            return None

        rows: List[PatternRow] = []
        remaining_w = space_w
        per_layer = 0
        used_l = 0.0
        used_w = 0.0

        while remaining_w >= min(o.length, o.width):
            rotated = len(rows) % 2 == 1
            row_l = o.width if rotated else o.length
            row_w = o.length if rotated else o.width

            if remaining_w < row_w:
                break
            cols = math.floor(space_l / row_l)
            if cols <= 0:
                break

            rows.append(PatternRow(rotated=rotated, count_l=cols,
                                   box_l=row_l, box_w=row_w))
            per_layer += cols
            used_l = max(used_l, cols * row_l)
            used_w += row_w
            remaining_w -= row_w

        if not rows:
            return None

        return TileResult(
            pattern=pattern_name("mixed-", o, swapped),
            count_l=None,
            count_w=None,
            layers=layers,
            per_layer=per_layer,
            total=per_layer * layers,
            box_l=o.length,
            box_w=o.width,
            box_h=o.height,
            used_l=used_l,
            used_w=used_w,
            used_h=layers * o.height,
            pattern_rows=tuple(rows),
            pallet_swapped=swapped,
        )
