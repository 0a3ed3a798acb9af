"""
Shared geometry helpers used by the tilers, the heightmap packer,
the general engine and the validator.

Everything here is a small pure function over plain numbers so the
callers can keep their own data types.
"""

import math
import numbers
from typing import Optional, Sequence, Tuple

# Tolerance for float comparisons of placed coordinates (mm).
EPS: float = 1e-6

Box3 = Tuple[float, float, float, float, float, float]


def as_positive(value) -> Optional[float]:
    """
    Coerce *value* to a finite, strictly positive float.

    Returns None for anything else (zero, negatives, NaN, inf, strings,
    None).  Used at every public entry point so bad
    input degrades to an empty result instead of an exception.
    """
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return None
    v = float(value)
    if not math.isfinite(v) or v <= 0:
        return None
    return v


def as_count(value) -> int:
    """Coerce a quantity to a non-negative int (invalid -> 0)."""
    v = as_positive(value)
    return int(v) if v is not None else 0


def as_weight(value) -> float:
    """Coerce a weight to a non-negative float (invalid -> 0.0)."""
    v = as_positive(value)
    return v if v is not None else 0.0


def all_positive(*values) -> bool:
    return all(as_positive(v) is not None for v in values)


def boxes_overlap(a: Box3, b: Box3, eps: float = EPS) -> bool:
    """
    True when two axis-aligned boxes share a positive volume.

    Boxes are (x0, y0, z0, x1, y1, z1).  Touching faces do not count.
    """
    return (a[0] < b[3] - eps and b[0] < a[3] - eps
            and a[1] < b[4] - eps and b[1] < a[4] - eps
            and a[2] < b[5] - eps and b[2] < a[5] - eps)


def rects_overlap(a: Sequence[float], b: Sequence[float], eps: float = EPS) -> bool:
    """2D version of boxes_overlap for (x0, y0, x1, y1) rectangles."""
    return (a[0] < b[2] - eps and b[0] < a[2] - eps
            and a[1] < b[3] - eps and b[1] < a[3] - eps)


def box_within(box: Box3, length: float, width: float, height: float,
               eps: float = EPS) -> bool:
    """True when *box* lies inside [0, length] x [0, width] x [0, height]."""
    return (box[0] >= -eps and box[1] >= -eps and box[2] >= -eps
            and box[3] <= length + eps and box[4] <= width + eps
            and box[5] <= height + eps)


def point_in_rect(px: float, py: float, x0: float, y0: float,
                  x1: float, y1: float, eps: float = EPS) -> bool:
    """Closed-rectangle containment test."""
    return x0 - eps <= px <= x1 + eps and y0 - eps <= py <= y1 + eps


def cluster_values(values: Sequence[float], tolerance: float) -> int:
    """
    Number of distinct values after merging neighbours closer than *tolerance*.

    Values are sorted and a new cluster starts whenever the gap to the
    previous cluster's first member exceeds the tolerance.
    """
    if not values:
        return 0
    ordered = sorted(values)
    clusters = 1
    anchor = ordered[0]
    for v in ordered[1:]:
        if v - anchor > tolerance:
            clusters += 1
            anchor = v
    return clusters
