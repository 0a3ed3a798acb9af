"""
Container recommender — a provisioning heuristic, not an optimiser.

Minimising the number of bins is NP-hard, so the recommender only
promises a sufficient container list:

  1. Keep presets on which every group fits in at least one orientation.
  2. Lower bound per preset: ceil(total volume / preset volume), and
     ceil(total weight / weight limit) when the preset has one.
  3. method="simulate": add preset containers one at a time and pack them
     sequentially until every carton is placed.  Sequential packing of
     the first k containers does not depend on later containers, so
     each container is packed once.
     method="volume": enough containers to hold the volume at
     ``target_fill`` of each container.
  4. The preset with the least total container volume wins; ties go to
     fewer containers, then catalog order.

An empty list means no preset can hold the groups within
``max_containers``.
"""

import math
from typing import List, Optional, Sequence

from config import (
    DEFAULT_CONFIG, PALLET_PRESETS, CartonGroup, Container, ContainerPreset,
    EngineConfig,
)
from geometry import all_positive, as_count, as_positive, as_weight
from multi_bin.distributor import pack_multiple_containers
from simulator.group_packer import pack_groups
from tiling.orientations import generate_orientations


# Maximum containers tried per preset before giving up on it.
DEFAULT_MAX_CONTAINERS: int = 50

# Share of a container's volume assumed usable by the "volume" method.
# Real loads rarely exceed ~85% once orientation gaps are counted.
DEFAULT_TARGET_FILL: float = 0.85

RECOMMEND_METHODS = ("simulate", "volume")


def estimate_required_volume(groups: Sequence[CartonGroup]) -> float:
    """Total carton volume of all packable groups."""
    return sum(g.unit_volume * as_count(g.quantity) for g in groups if g.is_packable())


def estimate_required_weight(groups: Sequence[CartonGroup]) -> float:
    return sum(as_weight(g.weight) * as_count(g.quantity) for g in groups if g.is_packable())


def _preset_holds(preset: ContainerPreset, group: CartonGroup,
                  allow_vertical_flip: bool) -> bool:
    return any(
        o.fits_within(preset.length, preset.width, preset.height)
        for o in generate_orientations(group.length, group.width, group.height,
                                       allow_vertical_flip)
    )


def _make_containers(preset: ContainerPreset, count: int) -> List[Container]:
    return [preset.to_container(f"container-{i + 1}") for i in range(count)]


def _simulated_count(groups: Sequence[CartonGroup], preset: ContainerPreset,
                     allow_vertical_flip: bool, config: EngineConfig,
                     max_containers: int) -> Optional[int]:
    remaining = {str(g.id): as_count(g.quantity) for g in groups}
    for count in range(1, max_containers + 1):
        batch = [g.with_quantity(remaining[str(g.id)])
                 for g in groups if remaining[str(g.id)] > 0]
        if not batch:
            return count - 1
        container = preset.to_container(f"container-{count}")
        result = pack_groups(batch, container, allow_vertical_flip, config=config)
        if result.total_cartons == 0:
            return None
        for group in result.groups:
            remaining[group.id] -= group.placed_qty
    if any(q > 0 for q in remaining.values()):
        return None
    return max_containers


def recommend_containers(groups: Sequence[CartonGroup],
                         preset_catalog: Optional[Sequence[ContainerPreset]] = None,
                         allow_vertical_flip: bool = True,
                         config: Optional[EngineConfig] = None,
                         method: str = "simulate",
                         max_containers: int = DEFAULT_MAX_CONTAINERS,
                         target_fill: float = DEFAULT_TARGET_FILL) -> List[Container]:
    """
    Recommend a list of identical preset containers sufficient for *groups*.

    Raises:
        ValueError: unknown *method*.
    """
    if method not in RECOMMEND_METHODS:
        available = ", ".join(RECOMMEND_METHODS)
        raise ValueError(f"Unknown recommend method '{method}'.  Available: [{available}]")

    config = config or DEFAULT_CONFIG
    catalog = list(PALLET_PRESETS if preset_catalog is None else preset_catalog)
    packable = [g for g in groups or () if g.is_packable()]
    if not packable:
        return []

    volume = estimate_required_volume(packable)
    weight = estimate_required_weight(packable)
    fill = as_positive(target_fill) or DEFAULT_TARGET_FILL

    best = None
    for index, preset in enumerate(catalog):
        if not all_positive(preset.length, preset.width, preset.height):
            continue
        if not all(_preset_holds(preset, g, allow_vertical_flip) for g in packable):
            continue

        lower = max(1, math.ceil(volume / preset.volume))
        limit = as_positive(preset.weight_limit)
        if limit is not None:
            lower = max(lower, math.ceil(weight / limit))

        if method == "volume":
            count = max(lower, math.ceil(volume / (preset.volume * min(fill, 1.0))))
        else:
            count = _simulated_count(packable, preset, allow_vertical_flip,
                                     config, max_containers)
            if count is None:
                continue
            count = max(count, lower)
        if count > max_containers:
            continue

        key = (count * preset.volume, count, index)
        if best is None or key < best[0]:
            best = (key, preset, count)

    if best is None:
        return []
    _, preset, count = best
    return _make_containers(preset, count)


def verify_recommendation(groups: Sequence[CartonGroup], containers: Sequence[Container],
                          allow_vertical_flip: bool = True,
                          config: Optional[EngineConfig] = None) -> bool:
    """True when sequential packing into *containers* places every carton."""
    result = pack_multiple_containers(groups, containers, allow_vertical_flip,
                                      config=config)
    return result.all_placed
