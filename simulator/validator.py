"""
Pack validator — pure-function physical constraint checking.

All checks take a finished HeightmapPackResult and either return True or
raise.  Used by the test-suite and by ``cartonplan --check``.

Checks:
  1. Bounds    — every carton lies inside the container on all axes
  2. Overlap   — no two cartons share a positive volume
  3. Floating  — every elevated carton rests on the top face of a carton
                 whose footprint overlaps its own
"""

from typing import List, Sequence

from config import Placement
from geometry import EPS, box_within, boxes_overlap, rects_overlap


# ─────────────────────────────────────────────────────────────────────────────
# Errors
# ─────────────────────────────────────────────────────────────────────────────

class PlacementError(Exception):
    """Base class for placement validation errors."""


class OutOfBoundsError(PlacementError):
    """Carton extends outside the container boundary."""


class OverlapError(PlacementError):
    """Two cartons occupy the same space."""


class FloatingError(PlacementError):
    """Carton floats in mid-air (nothing directly below it)."""


# ─────────────────────────────────────────────────────────────────────────────
# Individual checks
# ─────────────────────────────────────────────────────────────────────────────

def check_bounds(placements: Sequence[Placement], length: float, width: float,
                 height: float) -> bool:
    for p in placements:
        if not box_within(p.bounds(), length, width, height):
            raise OutOfBoundsError(
                f"{p.group_id}#{p.index_in_group} at ({p.x:.1f}, {p.y:.1f}, {p.z:.1f}) "
                f"size {p.length:.1f}x{p.width:.1f}x{p.height:.1f} "
                f"exceeds {length:.1f}x{width:.1f}x{height:.1f}"
            )
    return True


def check_overlap(placements: Sequence[Placement]) -> bool:
    # sweep along x so only boxes whose x-ranges intersect are compared
    ordered = sorted(placements, key=lambda p: p.x)
    active: List[Placement] = []
    for p in ordered:
        active = [q for q in active if q.x_max > p.x + EPS]
        for q in active:
            if boxes_overlap(p.bounds(), q.bounds()):
                raise OverlapError(
                    f"{p.group_id}#{p.index_in_group} overlaps "
                    f"{q.group_id}#{q.index_in_group}"
                )
        active.append(p)
    return True


def check_gravity(placements: Sequence[Placement], tolerance: float = 1e-3) -> bool:
    for p in placements:
        if p.z <= tolerance:
            continue
        footprint = (p.x, p.y, p.x_max, p.y_max)
        supported = any(
            abs(q.z_max - p.z) <= tolerance
            and rects_overlap(footprint, (q.x, q.y, q.x_max, q.y_max))
            for q in placements if q is not p
        )
        if not supported:
            raise FloatingError(
                f"{p.group_id}#{p.index_in_group} floats at z={p.z:.1f}"
            )
    return True


# ─────────────────────────────────────────────────────────────────────────────
# Validator
# ─────────────────────────────────────────────────────────────────────────────

def validate_pack_result(result) -> bool:
    """
    Validate every placement of a HeightmapPackResult.

    Returns:
        True if all checks pass.

    Raises:
        OutOfBoundsError: a carton extends outside the container.
        OverlapError:     two cartons intersect.
        FloatingError:    an elevated carton has nothing beneath it.
    """
    placements = list(result.placements())
    check_bounds(placements, result.length, result.width, result.height)
    check_overlap(placements)
    check_gravity(placements)
    return True
