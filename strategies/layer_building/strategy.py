"""
Layer Building Strategy — horizontal layers of similar-height items.

Algorithm overview
~~~~~~~~~~~~~~~~~~
Items are grouped by height (within ``HEIGHT_GROUP_TOLERANCE``) and the
groups are stacked from the floor up, shortest group first.  Each group
fills as many layers as it needs: a layer is as thick as the tallest
item in the group and is packed in 2D with guillotine splitting of the
free floor rectangles.  Items that did not fit in a layer move on to
the next layer of the same group; a group stops when its next layer
would exceed the container height or a layer places nothing.

2D guillotine split after placing an ``l x w`` item at the corner of a
free rectangle:
  - right:  the full-depth strip beyond the item along x
  - front:  the strip beyond the item along y, as long as the item
"""

from dataclasses import dataclass
from typing import List, Sequence, Tuple

from config import Item
from geometry import EPS
from strategies.base_strategy import (
    BaseStrategy, PackedItem, StrategyOutcome, register_strategy,
)

# ─────────────────────────────────────────────────────────────────────────────
# Constants / Hyperparameters
# ─────────────────────────────────────────────────────────────────────────────

# Items whose heights differ by at most this much (mm) share a layer group.
HEIGHT_GROUP_TOLERANCE: float = 0.1

# Free rectangles thinner than this are dropped.
SPLIT_EPS: float = 1e-3


@dataclass
class _Rect:
    x: float
    y: float
    length: float
    width: float


@dataclass
class HeightGroup:
    height: float
    items: List[Item]

    @property
    def thickness(self) -> float:
        return max(i.height for i in self.items)


def group_by_height(items: Sequence[Item],
                    tolerance: float = HEIGHT_GROUP_TOLERANCE) -> List[HeightGroup]:
    """Groups of similar height, shortest first; each keyed by its first member."""
    groups: List[HeightGroup] = []
    for item in sorted(items, key=lambda i: i.height):
        for group in groups:
            if abs(group.height - item.height) <= tolerance:
                group.items.append(item)
                break
        else:
            groups.append(HeightGroup(height=item.height, items=[item]))
    return groups


def pack_layer(items: Sequence[Item], length: float, width: float, z: float,
               allow_rotation: bool = True) -> Tuple[List[PackedItem], List[Item]]:
    """2D guillotine packing of *items* into one ``length x width`` layer at *z*."""
    spaces: List[_Rect] = [_Rect(0.0, 0.0, length, width)]
    packed: List[PackedItem] = []
    unpacked: List[Item] = []

    for item in items:
        footprints = [(item.length, item.width, (0, 0, 0))]
        if allow_rotation:
            footprints.append((item.width, item.length, (0, 0, 90)))

        placed = False
        for l, w, rotation in footprints:
            for index, space in enumerate(spaces):
                if l <= space.length + EPS and w <= space.width + EPS:
                    packed.append(PackedItem(item=item, x=space.x, y=space.y, z=z,
                                             length=l, width=w, height=item.height,
                                             rotation=rotation))
                    del spaces[index]
                    spaces.extend(_split(space, l, w))
                    placed = True
                    break
            if placed:
                break

        if not placed:
            unpacked.append(item)

    return packed, unpacked


def _split(space: _Rect, l: float, w: float) -> List[_Rect]:
    result = []
    if space.length - l > SPLIT_EPS:
        result.append(_Rect(space.x + l, space.y, space.length - l, space.width))
    if space.width - w > SPLIT_EPS:
        result.append(_Rect(space.x, space.y + w, l, space.width - w))
    return result


@register_strategy
class LayerBuildingStrategy(BaseStrategy):
    """
    Layer building: one or more guillotine-packed layers per height group.

    Attributes:
        name: Strategy identifier for the registry ("layer_building").
    """

    name: str = "layer_building"

    def pack(self, items: Sequence[Item], container,
             allow_rotation: bool = True) -> StrategyOutcome:
        L, W, H = container.length, container.width, container.height
        outcome = StrategyOutcome()
        z = 0.0

        for group in group_by_height(items):
            remaining = list(group.items)
            thickness = group.thickness
            while remaining and z + thickness <= H + EPS:
                packed, remaining = pack_layer(remaining, L, W, z, allow_rotation)
                if not packed:
                    break
                outcome.packed.extend(packed)
                z += thickness
            outcome.unpacked.extend(remaining)

        return outcome
