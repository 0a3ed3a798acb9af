"""
Heightmap packer — places heterogeneous carton groups into one container.

Groups are processed in input order and every unit is placed with the
bottom-left rule: over all fitting orientations and grid-aligned
positions take the lowest resting height, then the smallest x, then the
smallest y.  Equal candidates from different orientations go to the
orientation listed first.  When a unit finds no position the rest of its
group is left unplaced; that is a normal partial result, not an error.

Complexity is O(units x grid cells) per group.  The grid is coarse
(``EngineConfig.heightmap_resolution``, 50 mm by default), which keeps
pallet and 20ft container jobs fast; very large containers at fine
resolution would want a skyline structure for the base-height query.
"""

import math
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

import numpy as np

from config import DEFAULT_CONFIG, CartonGroup, Container, EngineConfig, Placement
from geometry import EPS, as_count, as_positive, as_weight, cluster_values
from monitoring.step_logger import StepLogger
from simulator.bin_state import HeightmapState
from tiling.orientations import unique_orientations


# ─────────────────────────────────────────────────────────────────────────────
# Results
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class GroupPackResult:
    """Outcome for one carton group.  ``placed_qty <= quantity`` always."""
    id: str
    name: str
    length: float
    width: float
    height: float
    quantity: int
    weight: float
    color: str
    placed_qty: int
    placements: Tuple[Placement, ...] = ()

    @property
    def unplaced_qty(self) -> int:
        return self.quantity - self.placed_qty

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "dims": [self.length, self.width, self.height],
            "quantity": self.quantity,
            "weight": self.weight,
            "color": self.color,
            "placed_qty": self.placed_qty,
            "placements": [p.to_dict() for p in self.placements],
        }


@dataclass(frozen=True)
class HeightmapPackResult:
    """
    Packing of a group list into a single container.

    Attributes:
        container_id, type_label: Copied from the container.
        length/width/height:      Container dimensions.
        weight_limit:             Container payload limit (None = unlimited).
        total_cartons:            Cartons placed over all groups.
        total_layers:             Distinct base heights (descriptive only).
        total_volume:             Volume of all placed cartons.
        total_weight:             Weight of all placed cartons.
        used_l/used_w/used_h:     Extent of the placed cartons.
        max_height:               Highest top face.
        fill_rate:                total_volume / container volume (0-1).
        overweight:               total_weight exceeds weight_limit.
        groups:                   One GroupPackResult per input group.
    """
    container_id: str
    type_label: str
    length: float
    width: float
    height: float
    weight_limit: Optional[float] = None
    total_cartons: int = 0
    total_layers: int = 0
    total_volume: float = 0.0
    total_weight: float = 0.0
    used_l: float = 0.0
    used_w: float = 0.0
    used_h: float = 0.0
    max_height: float = 0.0
    fill_rate: float = 0.0
    overweight: bool = False
    groups: Tuple[GroupPackResult, ...] = ()

    @property
    def volume(self) -> float:
        return self.length * self.width * self.height

    def placements(self) -> Iterator[Placement]:
        """Every placement, group by group, in placement order."""
        for group in self.groups:
            yield from group.placements

    def placed_by_group(self) -> Dict[str, int]:
        counts: Dict[str, int] = {}
        for group in self.groups:
            counts[group.id] = counts.get(group.id, 0) + group.placed_qty
        return counts

    @classmethod
    def empty(cls, container: Container) -> "HeightmapPackResult":
        return cls(container_id=str(container.id), type_label=container.type_label,
                   length=container.length, width=container.width,
                   height=container.height, weight_limit=container.weight_limit)

    def to_dict(self) -> dict:
        return {
            "container_id": self.container_id,
            "type_label": self.type_label,
            "dims": [self.length, self.width, self.height],
            "weight_limit": self.weight_limit,
            "total_cartons": self.total_cartons,
            "total_layers": self.total_layers,
            "total_volume": self.total_volume,
            "total_weight": round(self.total_weight, 3),
            "used": [self.used_l, self.used_w, self.used_h],
            "max_height": self.max_height,
            "fill_rate": round(self.fill_rate, 6),
            "overweight": self.overweight,
            "groups": [g.to_dict() for g in self.groups],
        }


# ─────────────────────────────────────────────────────────────────────────────
# Position search
# ─────────────────────────────────────────────────────────────────────────────

def find_best_position(state: HeightmapState,
                       orientations) -> Optional[Tuple[float, float, float, int]]:
    """
    Bottom-left search over all orientations.

    Returns:
        ``(base, x, y, orientation_index)`` or None if nothing fits.
    """
    res = state.resolution
    best = None
    for idx, o in enumerate(orientations):
        bases = state.base_heights(o.length, o.width)
        if bases.size == 0:
            continue
        masked = np.where(bases + o.height <= state.height + EPS, bases, np.inf)
        lowest = float(masked.min())
        if not math.isfinite(lowest):
            continue
        # argwhere is row-major: smallest i first, then smallest j
        i, j = np.argwhere(masked == lowest)[0]
        candidate = (lowest, float(i) * res, float(j) * res, idx)
        if best is None or candidate[:3] < best[:3]:
            best = candidate
    return best


def _group_result(group: CartonGroup, quantity: int, placed: List[Placement]) -> GroupPackResult:
    return GroupPackResult(
        id=str(group.id), name=str(group.name),
        length=group.length, width=group.width, height=group.height,
        quantity=quantity, weight=as_weight(group.weight),
        color=group.color or "", placed_qty=len(placed),
        placements=tuple(placed),
    )


# ─────────────────────────────────────────────────────────────────────────────
# Packer
# ─────────────────────────────────────────────────────────────────────────────

def pack_groups(groups: Sequence[CartonGroup], container: Container,
                allow_vertical_flip: bool = True,
                config: Optional[EngineConfig] = None,
                logger: Optional[StepLogger] = None) -> HeightmapPackResult:
    """
    Pack *groups* (in order) into *container*.

    Invalid containers give an empty result with no groups.  Invalid or
    zero-quantity groups, and groups with no orientation fitting the
    container, are reported with ``placed_qty == 0``.
    """
    config = config or DEFAULT_CONFIG
    L, W, H = (as_positive(v) for v in (container.length, container.width, container.height))
    if L is None or W is None or H is None:
        return HeightmapPackResult.empty(container)

    state = HeightmapState(L, W, H, config.heightmap_resolution)
    weight_limit = as_positive(container.weight_limit)
    enforce = config.enforce_weight_limit and weight_limit is not None
    cid = str(container.id)

    results: List[GroupPackResult] = []
    bases: List[float] = []
    total_weight = 0.0

    for group in groups or ():
        quantity = as_count(group.quantity)
        dims = [as_positive(v) for v in (group.length, group.width, group.height)]
        if quantity == 0 or any(d is None for d in dims):
            results.append(_group_result(group, quantity, []))
            continue

        orientations = [o for o in unique_orientations(*dims, allow_vertical_flip)
                        if o.fits_within(L, W, H)]
        if not orientations:
            results.append(_group_result(group, quantity, []))
            if logger is not None:
                logger.log_stop(cid, str(group.id), 0, quantity, "does not fit container")
            continue

        unit_weight = as_weight(group.weight)
        placed: List[Placement] = []
        stop_reason = None
        for _ in range(quantity):
            if enforce and total_weight + unit_weight > weight_limit + EPS:
                stop_reason = "weight limit reached"
                break
            found = find_best_position(state, orientations)
            if found is None:
                stop_reason = "no position left"
                break

            base, x, y, idx = found
            o = orientations[idx]
            placement = Placement(
                group_id=str(group.id),
                index_in_group=len(placed),
                x=x, y=y, z=base,
                length=o.length, width=o.width, height=o.height,
                orientation=o.label,
                layer_index=int(math.floor(base / max(o.height, 1))),
                world_x=x + o.length / 2 - L / 2,
                world_y=y + o.width / 2 - W / 2,
                world_z=base + o.height / 2 + config.pallet_base_height,
            )
            state.apply_placement(placement)
            placed.append(placement)
            bases.append(base)
            total_weight += unit_weight
            if logger is not None:
                logger.log_placement(cid, placement, state.get_fill_rate())

        if stop_reason is not None and logger is not None:
            logger.log_stop(cid, str(group.id), len(placed), quantity, stop_reason)
        results.append(_group_result(group, quantity, placed))

    all_placed = state.placements
    if all_placed:
        used_l = max(p.x_max for p in all_placed) - min(p.x for p in all_placed)
        used_w = max(p.y_max for p in all_placed) - min(p.y for p in all_placed)
        used_h = max(p.z_max for p in all_placed)
    else:
        used_l = used_w = used_h = 0.0

    return HeightmapPackResult(
        container_id=cid,
        type_label=container.type_label,
        length=L, width=W, height=H,
        weight_limit=weight_limit,
        total_cartons=len(all_placed),
        total_layers=cluster_values(bases, config.layer_tolerance),
        total_volume=state.placed_volume,
        total_weight=total_weight,
        used_l=used_l, used_w=used_w, used_h=used_h,
        max_height=used_h,
        fill_rate=state.get_fill_rate(),
        overweight=weight_limit is not None and total_weight > weight_limit + EPS,
        groups=tuple(results),
    )
