"""
Pinwheel tiling — greedy occupancy-grid packing of a single layer.

Primary-orientation blocks are combined with rotated gap fillers.  Three
independent greedy strategies run on a fresh occupancy grid each and the
one placing the most cartons wins (the first strategy wins ties):

    1. rows + rotated remainder
    2. alternating rows with per-row gap fill
    3. full primary grid, then a raster scan for rotated fillers

None of these is provably optimal; "best of the three" is the contract.

Grid resolution:
    The occupancy grid works in cells whose size is the greatest common
    divisor of the whole-mm carton and space footprints, so typical
    pallet inputs need only a few hundred cells.  When that grid would
    exceed ``EngineConfig.pinwheel_max_cells`` the cell is coarsened.
    Cartons are rounded up to whole cells and the space down, so
    coarsening may lose cartons but never creates overlaps.
"""

import math
from functools import reduce
from typing import List, Optional, Tuple

import numpy as np

from config import Orientation
from tiling.base_tiler import (
    BaseTiler, BoxPosition, TileResult, pattern_name, register_tiler,
)


# (x, y, length, width, rotated) in cell units
_CellPos = Tuple[int, int, int, int, bool]


def grid_cell_size(box_l: float, box_w: float, space_l: float, space_w: float,
                   max_cells: int) -> Optional[int]:
    """Cell edge (mm) for the occupancy grid, or None if the space is < 1 mm."""
    box_li, box_wi = math.ceil(box_l), math.ceil(box_w)
    space_li, space_wi = math.floor(space_l), math.floor(space_w)
    if space_li <= 0 or space_wi <= 0:
        return None

    cell = reduce(math.gcd, (box_li, box_wi, space_li, space_wi))
    if (space_li // cell) * (space_wi // cell) > max_cells:
        cell = max(cell, math.ceil(math.sqrt(space_li * space_wi / max(max_cells, 1))))
        while (space_li // cell) * (space_wi // cell) > max_cells:
            cell += 1
    return cell


class _OccupancyGrid:
    """Boolean footprint grid; True cells are taken."""

    __slots__ = ("cells", "positions")

    def __init__(self, n_l: int, n_w: int) -> None:
        self.cells = np.zeros((n_l, n_w), dtype=bool)
        self.positions: List[_CellPos] = []

    @property
    def n_l(self) -> int:
        return self.cells.shape[0]

    @property
    def n_w(self) -> int:
        return self.cells.shape[1]

    def can_place(self, x: int, y: int, a: int, b: int) -> bool:
        if x + a > self.n_l or y + b > self.n_w:
            return False
        return not self.cells[x:x + a, y:y + b].any()

    def place(self, x: int, y: int, a: int, b: int, rotated: bool) -> None:
        self.cells[x:x + a, y:y + b] = True
        self.positions.append((x, y, a, b, rotated))

    def fill_row(self, y: int, a: int, b: int, rotated: bool) -> int:
        """Place a row of a x b footprints at *y*; returns the x reached."""
        x = 0
        while x + a <= self.n_l:
            if self.can_place(x, y, a, b):
                self.place(x, y, a, b, rotated)
            x += a
        return x

    def first_free_window(self, a: int, b: int) -> Optional[Tuple[int, int]]:
        """
        First a x b window with no taken cell, in raster order (y, then x).

        Uses a summed-area table so every window is tested at once.
        """
        if a > self.n_l or b > self.n_w:
            return None
        sat = np.zeros((self.n_l + 1, self.n_w + 1), dtype=np.int64)
        sat[1:, 1:] = self.cells.cumsum(axis=0).cumsum(axis=1)
        taken = sat[a:, b:] - sat[:-a, b:] - sat[a:, :-b] + sat[:-a, :-b]
        free = (taken == 0).T.ravel()
        if not free.any():
            return None
        idx = int(np.argmax(free))
        n_x = self.n_l - a + 1
        return idx % n_x, idx // n_x


# ─────────────────────────────────────────────────────────────────────────────
# Strategies (cell units; a = primary length, b = primary width)
# ─────────────────────────────────────────────────────────────────────────────

def _rows_with_rotated_remainder(n_l: int, n_w: int, a: int, b: int) -> List[_CellPos]:
    grid = _OccupancyGrid(n_l, n_w)
    y = 0
    while y + b <= n_w:
        x = grid.fill_row(y, a, b, False)
        if n_l - x >= b and grid.can_place(x, y, b, a):
            grid.place(x, y, b, a, True)
        y += b

    if n_w - y >= a:
        grid.fill_row(y, b, a, True)
    return grid.positions


def _alternating_rows(n_l: int, n_w: int, a: int, b: int) -> List[_CellPos]:
    grid = _OccupancyGrid(n_l, n_w)
    y = 0
    row = 0
    while y < n_w:
        rotated = row % 2 == 1
        row_l, row_w = (b, a) if rotated else (a, b)

        if y + row_w > n_w:
            alt_l, alt_w = row_w, row_l
            if y + alt_w <= n_w:
                grid.fill_row(y, alt_l, alt_w, not rotated)
            break

        x = grid.fill_row(y, row_l, row_w, rotated)
        if n_l - x >= row_w and grid.can_place(x, y, row_w, row_l):
            grid.place(x, y, row_w, row_l, not rotated)

        y += row_w
        row += 1
    return grid.positions


def _grid_then_gap_scan(n_l: int, n_w: int, a: int, b: int) -> List[_CellPos]:
    grid = _OccupancyGrid(n_l, n_w)
    y = 0
    while y + b <= n_w:
        grid.fill_row(y, a, b, False)
        y += b

    while True:
        spot = grid.first_free_window(b, a)
        if spot is None:
            break
        grid.place(spot[0], spot[1], b, a, True)
    return grid.positions


PINWHEEL_STRATEGIES = (
    _rows_with_rotated_remainder,
    _alternating_rows,
    _grid_then_gap_scan,
)


# ─────────────────────────────────────────────────────────────────────────────
# Tiler
# ─────────────────────────────────────────────────────────────────────────────

@register_tiler
class PinwheelTiler(BaseTiler):
    """Best of the three greedy strategies for one orientation and space."""

    name: str = "pinwheel"

    def fit(self, orientation: Orientation, space_l: float, space_w: float,
            space_h: float, swapped: bool = False) -> Optional[TileResult]:
        o = orientation
        if o.is_square_footprint:
            return None
        layers = math.floor(space_h / o.height)
        if layers <= 0:
            return None

        cell = grid_cell_size(o.length, o.width, space_l, space_w,
                              self.config.pinwheel_max_cells)
        if cell is None:
            return None
        a = math.ceil(math.ceil(o.length) / cell)
        b = math.ceil(math.ceil(o.width) / cell)
        n_l = math.floor(space_l) // cell
        n_w = math.floor(space_w) // cell

        best: List[_CellPos] = []
        for strategy in PINWHEEL_STRATEGIES:
            positions = strategy(n_l, n_w, a, b)
            if len(positions) > len(best):
                best = positions
        if not best:
            return None

        boxes = tuple(
            BoxPosition(x=x * cell, y=y * cell,
                        length=o.width if rotated else o.length,
                        width=o.length if rotated else o.width,
                        rotated=rotated)
            for x, y, _, _, rotated in best
        )
        used_l = max(p.x + p.length for p in boxes)
        used_w = max(p.y + p.width for p in boxes)

        return TileResult(
            pattern=pattern_name("pinwheel-", o, swapped),
            count_l=None,
            count_w=None,
            layers=layers,
            per_layer=len(boxes),
            total=len(boxes) * layers,
            box_l=o.length,
            box_w=o.width,
            box_h=o.height,
            used_l=used_l,
            used_w=used_w,
            used_h=layers * o.height,
            box_positions=boxes,
            pallet_swapped=swapped,
        )
