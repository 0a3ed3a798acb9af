"""Uniform grid tiling: one orientation repeated along both footprint axes."""

import math
from typing import Optional

from config import Orientation
from tiling.base_tiler import BaseTiler, TileResult, pattern_name, register_tiler


@register_tiler
class UniformTiler(BaseTiler):
    """
    count_l x count_w cartons per layer, ``floor(H / h)`` layers.

    The used footprint is the exactly occupied grid, not the full space.
    """

    name: str = "uniform"

    def fit(self, orientation: Orientation, space_l: float, space_w: float,
            space_h: float, swapped: bool = False) -> Optional[TileResult]:
        o = orientation
        count_l = math.floor(space_l / o.length)
        count_w = math.floor(space_w / o.width)
        layers = math.floor(space_h / o.height)
        if count_l <= 0 or count_w <= 0 or layers <= 0:
            return None

        per_layer = count_l * count_w
        return TileResult(
            pattern=pattern_name("", o, swapped),
            count_l=count_l,
            count_w=count_w,
            layers=layers,
            per_layer=per_layer,
            total=per_layer * layers,
            box_l=o.length,
            box_w=o.width,
            box_h=o.height,
            used_l=count_l * o.length,
            used_w=count_w * o.width,
            used_h=layers * o.height,
            pallet_swapped=swapped,
        )
