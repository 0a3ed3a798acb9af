"""
Corner-support stability check for general-engine packs.

An elevated item is checked at its four footprint corners.  A corner is
supported when some other item ends exactly at the item's base height
(within ``tolerance``) and the corner lies inside that item's footprint.
The support fraction is supported_corners / 4; items on the floor count
as fully supported.  The load score is the mean fraction over all items.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, List, Sequence, Tuple

if TYPE_CHECKING:
    from strategies.base_strategy import PackedItem


# ─────────────────────────────────────────────────────────────────────────────
# Constants
# ─────────────────────────────────────────────────────────────────────────────

DEFAULT_SUPPORT_THRESHOLD: float = 0.7
DEFAULT_TOLERANCE: float = 1e-3

CornerXY = Tuple[float, float]


# ─────────────────────────────────────────────────────────────────────────────
# Result types
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class SupportInfo:
    supported_corners: int
    unsupported_corners: Tuple[CornerXY, ...]
    total_corners: int = 4

    @property
    def fraction(self) -> float:
        return self.supported_corners / self.total_corners


@dataclass(frozen=True)
class StabilityIssue:
    """
    One elevated item whose corner support is under the threshold.

    Attributes:
        item_id:             Id of the under-supported item.
        support:             Supported fraction of its corners (0..1).
        unsupported_corners: Footprint corners with nothing underneath.
        recommendation:      Qualitative advice for this item.
    """
    item_id: str
    support: float
    unsupported_corners: Tuple[CornerXY, ...]
    recommendation: str

    @property
    def support_pct(self) -> float:
        return self.support * 100.0

    def to_dict(self) -> dict:
        return {
            "item_id": self.item_id,
            "support": round(self.support, 4),
            "unsupported_corners": [list(c) for c in self.unsupported_corners],
            "recommendation": self.recommendation,
        }


@dataclass(frozen=True)
class StabilityReport:
    score: float
    is_stable: bool
    issues: Tuple[StabilityIssue, ...] = field(default_factory=tuple)
    recommendation: str = ""

    def to_dict(self) -> dict:
        return {
            "score": round(self.score, 4),
            "is_stable": self.is_stable,
            "issues": [i.to_dict() for i in self.issues],
            "recommendation": self.recommendation,
        }


# ─────────────────────────────────────────────────────────────────────────────
# Support
# ─────────────────────────────────────────────────────────────────────────────

def footprint_corners(item: "PackedItem") -> List[CornerXY]:
    x0, y0 = item.x, item.y
    x1, y1 = item.x + item.length, item.y + item.width
    return [(x0, y0), (x1, y0), (x0, y1), (x1, y1)]


def corner_support(item: "PackedItem", packed: Sequence["PackedItem"],
                   tolerance: float = DEFAULT_TOLERANCE) -> SupportInfo:
    """Which of *item*'s footprint corners rest on an item directly below."""
    below = [
        other for other in packed
        if other is not item
        and other.z < item.z
        and abs(other.z_max - item.z) <= tolerance
    ]

    supported = 0
    unsupported: List[CornerXY] = []
    for cx, cy in footprint_corners(item):
        if any(other.x - tolerance <= cx <= other.x + other.length + tolerance
               and other.y - tolerance <= cy <= other.y + other.width + tolerance
               for other in below):
            supported += 1
        else:
            unsupported.append((cx, cy))
    return SupportInfo(supported_corners=supported,
                       unsupported_corners=tuple(unsupported))


def item_recommendation(support: float) -> str:
    if support < 0.25:
        return ("Critical: Item has less than 25% support. "
                "Consider repositioning or adding support.")
    if support < 0.5:
        return ("Warning: Item has less than 50% support. "
                "May shift during transport.")
    if support < 0.7:
        return "Caution: Item has marginal support. Consider improving placement."
    return "Acceptable support level."


def overall_recommendation(score: float, issue_count: int) -> str:
    if score > 0.9 and issue_count == 0:
        return "Excellent stability. Load is well-balanced and secure."
    if score > 0.8 and issue_count <= 2:
        return "Good stability with minor issues. Consider adjusting highlighted items."
    if score > 0.7:
        return "Acceptable stability but improvements recommended for safe transport."
    if score > 0.5:
        return "Poor stability. Significant adjustments needed to prevent shifting."
    return "Critical stability issues. Complete reorganization recommended."


def analyze_stability(packed: Sequence["PackedItem"],
                      threshold: float = DEFAULT_SUPPORT_THRESHOLD,
                      tolerance: float = DEFAULT_TOLERANCE) -> StabilityReport:
    """
    Score a pack by corner support.

    Args:
        packed:    Placed items in container coordinates.
        threshold: Items with a lower support fraction become issues.
        tolerance: Contact and footprint tolerance (mm).

    Returns:
        StabilityReport; an empty pack scores 1.0 and is stable.
    """
    issues: List[StabilityIssue] = []
    total = 0.0

    for item in packed:
        if item.z <= tolerance:
            total += 1.0
            continue
        info = corner_support(item, packed, tolerance)
        total += info.fraction
        if info.fraction < threshold:
            issues.append(StabilityIssue(
                item_id=item.id,
                support=info.fraction,
                unsupported_corners=info.unsupported_corners,
                recommendation=item_recommendation(info.fraction),
            ))

    score = total / len(packed) if packed else 1.0
    return StabilityReport(
        score=score,
        is_stable=not issues,
        issues=tuple(issues),
        recommendation=overall_recommendation(score, len(issues)),
    )
