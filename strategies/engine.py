"""
General packing engine — strategy dispatch plus post-processing.

Flow of ``GeneralPackingEngine.pack_items``:

    1. Split off items with invalid dimensions (they go to ``unpacked``).
    2. Sort the rest for the requested algorithm.
    3. Pick a strategy: the named one, or ``auto`` via item statistics.
    4. Rebalance weight (optional, only when something was packed).
    5. Corner-support stability report (optional).
    6. Volume / weight metrics.

Auto selection thresholds come from ``EngineConfig.auto_thresholds``:

    uniformity        > 0.8  ->  spatial_index
    mean aspect ratio > 2.0  ->  wall_building
    weight variation  > 0.5  ->  corner_first
    otherwise                ->  layer_building
"""

import math
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from config import AutoSelectThresholds, EngineConfig, Item, DEFAULT_CONFIG
from geometry import all_positive, as_positive
from stability.support import StabilityReport, analyze_stability
from stability.weight_balance import center_of_mass, optimize_weight_distribution
from strategies.base_strategy import PackedItem, get_strategy, normalize_name


AUTO: str = "auto"
ALGORITHMS: Tuple[str, ...] = (AUTO, "wall_building", "corner_first",
                               "layer_building", "spatial_index")


# ─────────────────────────────────────────────────────────────────────────────
# Options and results
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class PackOptions:
    algorithm: str = AUTO
    allow_rotation: bool = True
    optimize_weight: bool = True
    check_stability: bool = True


@dataclass(frozen=True)
class ItemCharacteristics:
    """Statistics of an item set used by auto selection."""
    uniformity: float
    average_aspect_ratio: float
    weight_variation: float

    def to_dict(self) -> dict:
        return {"uniformity": self.uniformity,
                "average_aspect_ratio": self.average_aspect_ratio,
                "weight_variation": self.weight_variation}


@dataclass(frozen=True)
class PackingMetrics:
    """
    Summary of one general-engine pack.

    Attributes:
        volume_utilization: Packed volume / container volume, in percent.
        space_efficiency:   Packed volume / bounding box of the load, in percent.
        items_packed:       Number of placed items.
        total_weight:       Sum of item weights (missing weights count as 1).
        used_dimensions:    (length, width, height) of the load's bounding box.
        center_of_mass:     Weighted centre of mass in container coordinates.
    """
    volume_utilization: float = 0.0
    space_efficiency: float = 0.0
    items_packed: int = 0
    total_weight: float = 0.0
    used_dimensions: Tuple[float, float, float] = (0.0, 0.0, 0.0)
    center_of_mass: Tuple[float, float, float] = (0.0, 0.0, 0.0)

    def to_dict(self) -> dict:
        return {
            "volume_utilization": round(self.volume_utilization, 4),
            "space_efficiency": round(self.space_efficiency, 4),
            "items_packed": self.items_packed,
            "total_weight": self.total_weight,
            "used_dimensions": list(self.used_dimensions),
            "center_of_mass": list(self.center_of_mass),
        }


@dataclass
class PackingOutcome:
    packed: List[PackedItem] = field(default_factory=list)
    unpacked: List[Item] = field(default_factory=list)
    algorithm: str = AUTO
    metrics: PackingMetrics = field(default_factory=PackingMetrics)
    stability: Optional[StabilityReport] = None

    def to_dict(self) -> dict:
        return {
            "algorithm": self.algorithm,
            "packed": [p.to_dict() for p in self.packed],
            "unpacked": [i.to_dict() for i in self.unpacked],
            "metrics": self.metrics.to_dict(),
            "stability": self.stability.to_dict() if self.stability else None,
        }


# ─────────────────────────────────────────────────────────────────────────────
# Item statistics and ordering
# ─────────────────────────────────────────────────────────────────────────────

def _weight(item: Item) -> float:
    return as_positive(item.weight) or 1.0


def analyze_items(items: Sequence[Item]) -> ItemCharacteristics:
    """
    Dimensional uniformity, mean aspect ratio and weight variation.

    uniformity is 1 / (1 + v) where v is the mean squared distance of the
    item dimensions from the mean dimensions.  The aspect ratio of an
    item is its longest over its shortest side.  Weight variation is the
    coefficient of variation of the weights.
    """
    if not items:
        return ItemCharacteristics(uniformity=0.0, average_aspect_ratio=1.0,
                                   weight_variation=0.0)
    n = len(items)
    avg_l = sum(i.length for i in items) / n
    avg_w = sum(i.width for i in items) / n
    avg_h = sum(i.height for i in items) / n
    variance = sum((i.length - avg_l) ** 2 + (i.width - avg_w) ** 2
                   + (i.height - avg_h) ** 2 for i in items) / n

    aspect = sum(max(i.length, i.width, i.height) / min(i.length, i.width, i.height)
                 for i in items) / n

    weights = [_weight(i) for i in items]
    avg_weight = sum(weights) / n
    weight_std = math.sqrt(sum((w - avg_weight) ** 2 for w in weights) / n)

    return ItemCharacteristics(
        uniformity=1.0 / (1.0 + variance),
        average_aspect_ratio=aspect,
        weight_variation=weight_std / avg_weight,
    )


def select_algorithm(characteristics: ItemCharacteristics,
                     thresholds: Optional[AutoSelectThresholds] = None) -> str:
    t = thresholds or AutoSelectThresholds()
    if characteristics.uniformity > t.uniformity:
        return "spatial_index"
    if characteristics.average_aspect_ratio > t.aspect_ratio:
        return "wall_building"
    if characteristics.weight_variation > t.weight_variation:
        return "corner_first"
    return "layer_building"


def sort_items(items: Sequence[Item], algorithm: str) -> List[Item]:
    """Descending pre-order for *algorithm*; stable for ties."""
    key = normalize_name(algorithm)
    if key == "wall_building":
        return sorted(items, key=lambda i: (i.height, i.volume), reverse=True)
    if key == "corner_first":
        return sorted(items, key=lambda i: _weight(i) * i.volume, reverse=True)
    return sorted(items, key=lambda i: i.volume, reverse=True)


# ─────────────────────────────────────────────────────────────────────────────
# Metrics
# ─────────────────────────────────────────────────────────────────────────────

def calculate_metrics(packed: Sequence[PackedItem], container) -> PackingMetrics:
    if not packed:
        return PackingMetrics()

    packed_volume = sum(p.volume for p in packed)
    container_volume = container.length * container.width * container.height

    used = (
        max(p.x + p.length for p in packed) - min(p.x for p in packed),
        max(p.y + p.width for p in packed) - min(p.y for p in packed),
        max(p.z_max for p in packed) - min(p.z for p in packed),
    )
    used_volume = used[0] * used[1] * used[2]

    return PackingMetrics(
        volume_utilization=packed_volume / container_volume * 100.0,
        space_efficiency=packed_volume / used_volume * 100.0 if used_volume > 0 else 0.0,
        items_packed=len(packed),
        total_weight=sum(p.weight for p in packed),
        used_dimensions=used,
        center_of_mass=center_of_mass(packed),
    )


# ─────────────────────────────────────────────────────────────────────────────
# Engine
# ─────────────────────────────────────────────────────────────────────────────

class GeneralPackingEngine:
    """
    Heuristic 3D packer for arbitrary item lists.

    Never raises for items that do not fit; they end up in
    ``PackingOutcome.unpacked``.  An unknown algorithm name is a
    programming error and raises ``ValueError``.

    Usage:
        engine = GeneralPackingEngine()
        outcome = engine.pack_items(items, container,
                                    PackOptions(algorithm="wall-building"))
    """

    def __init__(self, config: Optional[EngineConfig] = None) -> None:
        self.config = config or DEFAULT_CONFIG

    def analyze_items(self, items: Sequence[Item]) -> ItemCharacteristics:
        return analyze_items(items)

    def auto_pack(self, items: Sequence[Item], container,
                  allow_rotation: bool = True):
        """Pick a strategy from item statistics and run it; returns (name, outcome)."""
        name = select_algorithm(analyze_items(items), self.config.auto_thresholds)
        return name, get_strategy(name).pack(items, container, allow_rotation)

    def pack_items(self, items: Sequence[Item], container,
                   options: Optional[PackOptions] = None) -> PackingOutcome:
        opts = options or PackOptions()
        algorithm = normalize_name(opts.algorithm)
        if algorithm not in ALGORITHMS:
            available = ", ".join(ALGORITHMS)
            raise ValueError(f"Unknown algorithm '{opts.algorithm}'.  Available: [{available}]")

        if not all_positive(container.length, container.width, container.height):
            return PackingOutcome(unpacked=list(items), algorithm=algorithm)

        valid = [i for i in items if all_positive(i.length, i.width, i.height)]
        invalid = [i for i in items if not all_positive(i.length, i.width, i.height)]

        ordered = sort_items(valid, algorithm)
        if algorithm == AUTO:
            algorithm, result = self.auto_pack(ordered, container, opts.allow_rotation)
        else:
            result = get_strategy(algorithm).pack(ordered, container, opts.allow_rotation)

        packed = list(result.packed)
        if opts.optimize_weight and packed:
            packed = optimize_weight_distribution(packed, container)

        stability = None
        if opts.check_stability:
            stability = analyze_stability(packed, self.config.stability_threshold)

        return PackingOutcome(
            packed=packed,
            unpacked=list(result.unpacked) + invalid,
            algorithm=algorithm,
            metrics=calculate_metrics(packed, container),
            stability=stability,
        )
