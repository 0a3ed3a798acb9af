"""
Weight distribution post-processing for general-engine packs.

The ideal centre of mass sits above the middle of the floor at a quarter
of the container height.  When a pack's centre of mass is too far from
that point and too high, a few heavy-high items trade places with
light-low items of identical dimensions.  Swapping equal boxes keeps the
set of occupied volumes unchanged, so containment and non-overlap hold
after rebalancing.
"""

import math
from typing import TYPE_CHECKING, List, Sequence, Tuple

if TYPE_CHECKING:
    from strategies.base_strategy import PackedItem


# Target height of the centre of mass as a fraction of container height.
TARGET_HEIGHT_FRACTION: float = 0.25
# Rebalance only when the deviation exceeds this fraction of the length ...
DEVIATION_FRACTION: float = 0.1
# ... and the centre of mass is above this multiple of the target height.
HEIGHT_MARGIN: float = 1.2
MAX_SWAPS: int = 5
SWAP_EPS: float = 1e-3

Point3 = Tuple[float, float, float]


def center_of_mass(packed: Sequence["PackedItem"]) -> Point3:
    """Weighted centre of mass; (0, 0, 0) for an empty pack."""
    if not packed:
        return (0.0, 0.0, 0.0)
    total = sx = sy = sz = 0.0
    for p in packed:
        cx, cy, cz = p.center
        w = p.weight
        total += w
        sx += cx * w
        sy += cy * w
        sz += cz * w
    return (sx / total, sy / total, sz / total)


def target_center(container) -> Point3:
    return (container.length / 2, container.width / 2,
            container.height * TARGET_HEIGHT_FRACTION)


def can_swap(a: "PackedItem", b: "PackedItem") -> bool:
    return (abs(a.length - b.length) < SWAP_EPS
            and abs(a.width - b.width) < SWAP_EPS
            and abs(a.height - b.height) < SWAP_EPS)


def optimize_weight_distribution(packed: Sequence["PackedItem"],
                                 container) -> List["PackedItem"]:
    """
    Lower a top-heavy pack by swapping equal-sized heavy-high and light-low items.

    Items are ranked by weight * z.  The i-th highest-ranked item swaps
    positions with the i-th lowest-ranked one for i < min(5, n // 4),
    provided the two have the same dimensions.

    Returns:
        A new list in the original placement order.
    """
    items = list(packed)
    if not items:
        return items

    target = target_center(container)
    com = center_of_mass(items)
    if math.dist(com, target) <= container.length * DEVIATION_FRACTION:
        return items
    if com[2] <= target[2] * HEIGHT_MARGIN:
        return items

    ranked = sorted(range(len(items)),
                    key=lambda i: items[i].weight * items[i].z, reverse=True)
    swaps = min(MAX_SWAPS, len(items) // 4)
    for k in range(swaps):
        hi, lo = ranked[k], ranked[-1 - k]
        high, low = items[hi], items[lo]
        if not can_swap(high, low):
            continue
        items[hi] = high.moved_to(low.x, low.y, low.z)
        items[lo] = low.moved_to(high.x, high.y, high.z)
    return items
