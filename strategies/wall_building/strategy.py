"""
Wall Building Strategy -- vertical walls built outward from the back wall.

Algorithm overview:
    Inspired by how container loaders work: items are loaded in vertical
    "walls" that span the container width, starting at x = 0 and moving
    towards the door.  Each wall is a stack of horizontal layers; a layer
    is filled along the width until the next item no longer fits, then a
    new layer starts on top.  When an item fits in no existing wall a new
    wall is opened directly behind the deepest item of the last one.

Key concepts:
    - Wall depth: the largest item length placed in the wall so far.
      Only the newest (open) wall may grow deeper; a closed wall is
      bounded by the wall behind it, so items added later must fit
      within its recorded depth.
    - Layer: a horizontal band of the wall with a fixed thickness (the
      height of the item that opened it) and a fill cursor along y.

Items are taken tallest first so each layer opens with its tallest item.

References:
    George & Robinson (1980), "A heuristic for packing boxes into a
    container"; Bischoff & Ratcliff (1995), "Issues in the development of
    approaches to container loading."
"""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from config import Item, Orientation
from geometry import EPS
from strategies.base_strategy import (
    BaseStrategy, PackedItem, StrategyOutcome, register_strategy,
)
from tiling.orientations import all_permutations


@dataclass
class _Layer:
    z: float
    height: float
    cursor_y: float


@dataclass
class _Wall:
    x: float
    max_x: float
    layers: List[_Layer] = field(default_factory=list)
    top: float = 0.0


@register_strategy
class WallBuildingStrategy(BaseStrategy):
    """
    Wall building: fill the container back-to-front in vertical walls.

    Attributes:
        name: Strategy identifier for the registry ("wall_building").
    """

    name: str = "wall_building"

    def pack(self, items: Sequence[Item], container,
             allow_rotation: bool = True) -> StrategyOutcome:
        L, W, H = container.length, container.width, container.height
        outcome = StrategyOutcome()
        walls: List[_Wall] = []
        next_x = 0.0

        for item in sorted(items, key=lambda i: i.height, reverse=True):
            orientations = all_permutations(item.length, item.width, item.height,
                                            allow_rotation)
            placed = None
            for index, wall in enumerate(walls):
                limit = L if index == len(walls) - 1 else wall.max_x
                placed = self._add_to_wall(wall, item, orientations, limit, W, H)
                if placed is not None:
                    break

            if placed is None and next_x < L - EPS:
                wall = _Wall(x=next_x, max_x=next_x)
                placed = self._add_to_wall(wall, item, orientations, L, W, H)
                if placed is not None:
                    walls.append(wall)

            if placed is None:
                outcome.unpacked.append(item)
                continue
            outcome.packed.append(placed)
            next_x = walls[-1].max_x

        return outcome

    # ── Wall helpers ─────────────────────────────────────────────────────

    def _add_to_wall(self, wall: _Wall, item: Item,
                     orientations: List[Orientation], limit_x: float,
                     W: float, H: float) -> Optional[PackedItem]:
        """Place *item* in an existing layer of *wall*, else in a new layer."""
        for o in orientations:
            if wall.x + o.length > limit_x + EPS:
                continue
            for layer in wall.layers:
                if (o.height <= layer.height + EPS
                        and layer.cursor_y + o.width <= W + EPS):
                    y = layer.cursor_y
                    layer.cursor_y += o.width
                    return self._record(wall, item, o, y, layer.z)

        for o in orientations:
            if (wall.x + o.length <= limit_x + EPS
                    and o.width <= W + EPS
                    and wall.top + o.height <= H + EPS):
                layer = _Layer(z=wall.top, height=o.height, cursor_y=o.width)
                wall.layers.append(layer)
                wall.top += o.height
                return self._record(wall, item, o, 0.0, layer.z)
        return None

    @staticmethod
    def _record(wall: _Wall, item: Item, o: Orientation, y: float,
                z: float) -> PackedItem:
        wall.max_x = max(wall.max_x, wall.x + o.length)
        return PackedItem(item=item, x=wall.x, y=y, z=z,
                          length=o.length, width=o.width, height=o.height,
                          rotation=o.rotation)
