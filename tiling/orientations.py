"""
Orientation generation for a single carton.

The upright pair (horizontal rotation only) is always allowed.  With
vertical flipping enabled, four more orientations stand the carton on
each of its other faces.  Order matters: the best-tile selector resolves
ties by enumeration order, so the list order below is part of the
contract.
"""

from typing import List, Tuple

from config import Orientation


# label -> (permutation of (l, w, h), rotation descriptor in degrees)
_UPRIGHT: Tuple[Tuple[str, Tuple[int, int, int], Tuple[int, int, int]], ...] = (
    ("upright", (0, 1, 2), (0, 0, 0)),
    ("upright-rotated", (1, 0, 2), (0, 0, 90)),
)

_FLIPPED: Tuple[Tuple[str, Tuple[int, int, int], Tuple[int, int, int]], ...] = (
    ("laid-side-l", (1, 2, 0), (0, 90, 0)),
    ("laid-side-w", (0, 2, 1), (90, 0, 0)),
    ("laid-h-l", (2, 0, 1), (90, 0, 90)),
    ("laid-h-w", (2, 1, 0), (90, 90, 0)),
)

# Rotation descriptors for every axis permutation, keyed by the
# permutation as a digit string ("012" = natural pose).
PERMUTATION_ROTATIONS = {
    "012": (0, 0, 0),
    "021": (90, 0, 0),
    "102": (0, 0, 90),
    "120": (0, 90, 0),
    "201": (90, 0, 90),
    "210": (90, 90, 0),
}


def generate_orientations(length: float, width: float, height: float,
                          allow_vertical_flip: bool = True) -> List[Orientation]:
    """
    Ordered orientations for a carton (2 without flipping, 6 with).

    Duplicates produced by square faces are kept; callers that care
    use unique_orientations().
    """
    dims = (length, width, height)
    table = _UPRIGHT + _FLIPPED if allow_vertical_flip else _UPRIGHT
    return [
        Orientation(dims[p[0]], dims[p[1]], dims[p[2]], label, rotation)
        for label, p, rotation in table
    ]


def unique_orientations(length: float, width: float, height: float,
                        allow_vertical_flip: bool = True) -> List[Orientation]:
    """generate_orientations() with repeated (l, w, h) triples dropped."""
    seen = set()
    result = []
    for o in generate_orientations(length, width, height, allow_vertical_flip):
        key = (o.length, o.width, o.height)
        if key in seen:
            continue
        seen.add(key)
        result.append(o)
    return result


def all_permutations(length: float, width: float, height: float,
                     allow_rotation: bool = True) -> List[Orientation]:
    """
    The six axis permutations with rotation descriptors.

    Used by the general engine; labels are the permutation digit strings.
    Without rotation only the natural pose is returned.
    """
    dims = (length, width, height)
    keys = list(PERMUTATION_ROTATIONS) if allow_rotation else ["012"]
    result = []
    seen = set()
    for key in keys:
        l, w, h = (dims[int(c)] for c in key)
        if (l, w, h) in seen:
            continue
        seen.add((l, w, h))
        result.append(Orientation(l, w, h, key, PERMUTATION_ROTATIONS[key]))
    return result
