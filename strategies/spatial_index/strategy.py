"""
Spatial Index Strategy — free-space list with guillotine splitting.

Algorithm overview:
    The index keeps a list of disjoint free boxes, initially the whole
    container.  For every item, each (free space, orientation) pair that
    fits is scored and the lowest score wins:

        score = 0.3 * wasted_volume + 0.3 * z
              + 0.2 * distance_from_origin + 0.2 * fit_gap

    wasted_volume is the space volume minus the item volume; fit_gap is
    the summed slack along the three axes.  The item goes into the
    space's minimum corner and the space is cut into up to three pieces:

        right  — beyond the item along x, full width and height
        front  — beyond the item along y, item length, full height
        top    — above the item, item footprint

    A new piece that shares a full face with an existing free space is
    merged into it.  Pieces are disjoint by construction, so placed
    items never overlap.
"""

import math
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from config import Item, Orientation
from geometry import EPS, boxes_overlap
from strategies.base_strategy import (
    BaseStrategy, PackedItem, StrategyOutcome, register_strategy,
)
from tiling.orientations import all_permutations


# Scoring weights
WEIGHT_WASTED_VOLUME: float = 0.3
WEIGHT_HEIGHT: float = 0.3
WEIGHT_ORIGIN_DISTANCE: float = 0.2
WEIGHT_FIT_GAP: float = 0.2

# Tolerance for fit, split and merge comparisons.
SPACE_EPS: float = 1e-3


@dataclass
class FreeSpace:
    x: float
    y: float
    z: float
    length: float
    width: float
    height: float

    @property
    def volume(self) -> float:
        return self.length * self.width * self.height

    def bounds(self) -> Tuple[float, float, float, float, float, float]:
        return (self.x, self.y, self.z, self.x + self.length,
                self.y + self.width, self.z + self.height)

    def fits(self, o: Orientation) -> bool:
        return (o.length <= self.length + EPS
                and o.width <= self.width + EPS
                and o.height <= self.height + EPS)


def score_space(space: FreeSpace, o: Orientation) -> float:
    wasted = space.volume - o.length * o.width * o.height
    distance = math.sqrt(space.x ** 2 + space.y ** 2 + space.z ** 2)
    fit_gap = (abs(space.length - o.length) + abs(space.width - o.width)
               + abs(space.height - o.height))
    return (wasted * WEIGHT_WASTED_VOLUME + space.z * WEIGHT_HEIGHT
            + distance * WEIGHT_ORIGIN_DISTANCE + fit_gap * WEIGHT_FIT_GAP)


def _close(a: float, b: float) -> bool:
    return abs(a - b) < SPACE_EPS


def can_merge(a: FreeSpace, b: FreeSpace) -> bool:
    """True when *b* continues *a* across one full face."""
    if (_close(a.x + a.length, b.x) and _close(a.y, b.y) and _close(a.z, b.z)
            and _close(a.width, b.width) and _close(a.height, b.height)):
        return True
    if (_close(a.y + a.width, b.y) and _close(a.x, b.x) and _close(a.z, b.z)
            and _close(a.length, b.length) and _close(a.height, b.height)):
        return True
    return (_close(a.z + a.height, b.z) and _close(a.x, b.x) and _close(a.y, b.y)
            and _close(a.length, b.length) and _close(a.width, b.width))


def merge_spaces(a: FreeSpace, b: FreeSpace) -> FreeSpace:
    x, y, z = min(a.x, b.x), min(a.y, b.y), min(a.z, b.z)
    return FreeSpace(
        x=x, y=y, z=z,
        length=max(a.x + a.length, b.x + b.length) - x,
        width=max(a.y + a.width, b.y + b.width) - y,
        height=max(a.z + a.height, b.z + b.height) - z,
    )


class SpatialIndex:
    """Free and occupied space bookkeeping for one container."""

    def __init__(self, length: float, width: float, height: float) -> None:
        self.free_spaces: List[FreeSpace] = [FreeSpace(0.0, 0.0, 0.0, length, width, height)]
        self.occupied: List[PackedItem] = []

    def find_best_placement(self, item: Item,
                            allow_rotation: bool = True) -> Optional[Tuple[int, Orientation]]:
        best = None
        best_score = math.inf
        orientations = all_permutations(item.length, item.width, item.height,
                                        allow_rotation)
        for index, space in enumerate(self.free_spaces):
            for o in orientations:
                if not space.fits(o):
                    continue
                score = score_space(space, o)
                if score < best_score:
                    best_score = score
                    best = (index, o)
        return best

    def add_item(self, item: Item, space_index: int, o: Orientation) -> PackedItem:
        space = self.free_spaces.pop(space_index)
        placed = PackedItem(item=item, x=space.x, y=space.y, z=space.z,
                            length=o.length, width=o.width, height=o.height,
                            rotation=o.rotation)
        self.occupied.append(placed)
        for piece in self.split_space(space, o):
            self.add_free_space(piece)
        return placed

    @staticmethod
    def split_space(space: FreeSpace, o: Orientation) -> List[FreeSpace]:
        pieces = []
        if space.length - o.length > SPACE_EPS:
            pieces.append(FreeSpace(space.x + o.length, space.y, space.z,
                                    space.length - o.length, space.width, space.height))
        if space.width - o.width > SPACE_EPS:
            pieces.append(FreeSpace(space.x, space.y + o.width, space.z,
                                    o.length, space.width - o.width, space.height))
        if space.height - o.height > SPACE_EPS:
            pieces.append(FreeSpace(space.x, space.y, space.z + o.height,
                                    o.length, o.width, space.height - o.height))
        return pieces

    def add_free_space(self, piece: FreeSpace) -> None:
        for index, existing in enumerate(self.free_spaces):
            if can_merge(existing, piece):
                self.free_spaces[index] = merge_spaces(existing, piece)
                return
        if any(boxes_overlap(piece.bounds(), p.bounds()) for p in self.occupied):
            return
        self.free_spaces.append(piece)


@register_strategy
class SpatialIndexStrategy(BaseStrategy):
    """
    Best-scoring free space for every item, in input order.

    Attributes:
        name: Strategy identifier for the registry ("spatial_index").
    """

    name: str = "spatial_index"

    def pack(self, items: Sequence[Item], container,
             allow_rotation: bool = True) -> StrategyOutcome:
        index = SpatialIndex(container.length, container.width, container.height)
        outcome = StrategyOutcome()
        for item in items:
            found = index.find_best_placement(item, allow_rotation)
            if found is None:
                outcome.unpacked.append(item)
                continue
            outcome.packed.append(index.add_item(item, *found))
        return outcome
