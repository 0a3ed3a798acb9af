"""
Corner-First Strategy -- candidate points grown from the floor corners.

Algorithm overview:
    Candidate positions start at the four floor corners of the container.
    Every placed item adds three new candidates at its right, front and
    top faces.  For each item, all (orientation, candidate) pairs that fit
    without collision are scored and the lowest score wins:

        score = 0.4 * corner_distance + 0.6 * z / H - wall_bonus

    corner_distance is the floor-plane distance from the candidate to the
    nearest container corner; wall_bonus rewards touching the x = 0 wall
    (0.1), the y = 0 wall (0.1) and the floor (0.2).  Ties go to the
    orientation tried first, then the candidate found first.

Heavy, large items are placed first so they claim the corners.
"""

import math
from typing import List, Sequence, Tuple

from config import Item
from geometry import as_positive, boxes_overlap
from strategies.base_strategy import (
    BaseStrategy, PackedItem, StrategyOutcome, register_strategy,
)
from tiling.orientations import all_permutations


# Scoring weights
WEIGHT_CORNER_DISTANCE: float = 0.4
WEIGHT_HEIGHT: float = 0.6
BONUS_WALL_X: float = 0.1
BONUS_WALL_Y: float = 0.1
BONUS_FLOOR: float = 0.2

# Tolerance for matching candidate points and wall contact.
POINT_EPS: float = 1e-3

Point = Tuple[float, float, float]


def corner_score(point: Point, L: float, W: float, H: float) -> float:
    x, y, z = point
    corner_distance = min(
        math.hypot(x - cx, y - cy) for cx in (0.0, L) for cy in (0.0, W)
    )
    height_penalty = z / H
    wall_bonus = ((BONUS_WALL_X if abs(x) < POINT_EPS else 0.0)
                  + (BONUS_WALL_Y if abs(y) < POINT_EPS else 0.0)
                  + (BONUS_FLOOR if z == 0 else 0.0))
    return (corner_distance * WEIGHT_CORNER_DISTANCE
            + height_penalty * WEIGHT_HEIGHT - wall_bonus)


@register_strategy
class CornerFirstStrategy(BaseStrategy):
    """
    Corner-first placement over a growing list of candidate points.

    Attributes:
        name: Strategy identifier for the registry ("corner_first").
    """

    name: str = "corner_first"

    def pack(self, items: Sequence[Item], container,
             allow_rotation: bool = True) -> StrategyOutcome:
        L, W, H = container.length, container.width, container.height
        outcome = StrategyOutcome()
        points: List[Point] = [(0.0, 0.0, 0.0), (L, 0.0, 0.0),
                               (0.0, W, 0.0), (L, W, 0.0)]

        ordered = sorted(items, key=lambda i: (as_positive(i.weight) or 1.0) * i.volume,
                         reverse=True)
        for item in ordered:
            best = None
            best_score = math.inf
            for o in all_permutations(item.length, item.width, item.height,
                                      allow_rotation):
                for point in points:
                    box = (point[0], point[1], point[2],
                           point[0] + o.length, point[1] + o.width, point[2] + o.height)
                    if not self._fits(box, L, W, H, outcome.packed):
                        continue
                    score = corner_score(point, L, W, H)
                    if score < best_score:
                        best_score = score
                        best = (point, o)

            if best is None:
                outcome.unpacked.append(item)
                continue

            (x, y, z), o = best
            placed = PackedItem(item=item, x=x, y=y, z=z, length=o.length,
                                width=o.width, height=o.height, rotation=o.rotation)
            outcome.packed.append(placed)
            self._add_points(points, placed, L, W, H)

        return outcome

    @staticmethod
    def _fits(box, L: float, W: float, H: float, packed: List[PackedItem]) -> bool:
        if box[3] > L or box[4] > W or box[5] > H:
            return False
        return not any(boxes_overlap(box, p.bounds()) for p in packed)

    @staticmethod
    def _add_points(points: List[Point], placed: PackedItem, L: float, W: float,
                    H: float) -> None:
        candidates = [
            (placed.x + placed.length, placed.y, placed.z),   # right
            (placed.x, placed.y + placed.width, placed.z),    # front
            (placed.x, placed.y, placed.z + placed.height),   # top
        ]
        for c in candidates:
            if c[0] > L or c[1] > W or c[2] > H:
                continue
            if any(abs(p[0] - c[0]) < POINT_EPS and abs(p[1] - c[1]) < POINT_EPS
                   and abs(p[2] - c[2]) < POINT_EPS for p in points):
                continue
            points.append(c)
