"""
Multi-container distribution of carton groups.

Two modes:

Sequential (default):
    Containers are filled in order.  Each one packs the groups it allows
    with whatever quantity earlier containers left over; exhausted groups
    are skipped.

Spread:
    Each group's quantity is split over the containers eligible for it
    before packing: every eligible container gets ``q // n`` units and
    the first ``q % n`` get one more.  Each container then packs exactly
    its targets, so per-container targets differ by at most one unit.
    Units a container cannot hold are not moved to another container.

A container lists the group ids it accepts in ``allowed_group_ids``
(empty = all).  Ids that match no group are ignored, so a container
whose list matches nothing receives nothing.  Containers with invalid
dimensions are never eligible.
"""

from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

from config import DEFAULT_CONFIG, CartonGroup, Container, EngineConfig
from geometry import as_count
from monitoring.step_logger import StepLogger
from simulator.group_packer import HeightmapPackResult, pack_groups


# ─────────────────────────────────────────────────────────────────────────────
# Result
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class MultiContainerPackResult:
    """
    One HeightmapPackResult per container (input order) plus totals.

    Behaves as a read-only sequence of the per-container results.
    """
    containers: Tuple[HeightmapPackResult, ...]
    requested: Tuple[Tuple[str, int], ...] = ()
    spread_evenly: bool = False

    def __iter__(self) -> Iterator[HeightmapPackResult]:
        return iter(self.containers)

    def __len__(self) -> int:
        return len(self.containers)

    def __getitem__(self, index: int) -> HeightmapPackResult:
        return self.containers[index]

    @property
    def total_cartons(self) -> int:
        return sum(c.total_cartons for c in self.containers)

    @property
    def total_weight(self) -> float:
        return sum(c.total_weight for c in self.containers)

    @property
    def total_volume(self) -> float:
        return sum(c.total_volume for c in self.containers)

    @property
    def total_requested(self) -> int:
        return sum(q for _, q in self.requested)

    @property
    def containers_used(self) -> int:
        return sum(1 for c in self.containers if c.total_cartons > 0)

    def placed_by_group(self) -> Dict[str, int]:
        placed = {gid: 0 for gid, _ in self.requested}
        for container in self.containers:
            for gid, qty in container.placed_by_group().items():
                placed[gid] = placed.get(gid, 0) + qty
        return placed

    @property
    def unplaced(self) -> Dict[str, int]:
        """Requested minus placed, per group id."""
        placed = self.placed_by_group()
        return {gid: qty - placed.get(gid, 0) for gid, qty in self.requested}

    @property
    def all_placed(self) -> bool:
        return all(v <= 0 for v in self.unplaced.values())

    def to_dict(self) -> dict:
        return {
            "spread_evenly": self.spread_evenly,
            "total_cartons": self.total_cartons,
            "total_requested": self.total_requested,
            "total_weight": round(self.total_weight, 3),
            "total_volume": self.total_volume,
            "containers_used": self.containers_used,
            "unplaced": self.unplaced,
            "containers": [c.to_dict() for c in self.containers],
        }


# ─────────────────────────────────────────────────────────────────────────────
# Helpers
# ─────────────────────────────────────────────────────────────────────────────

def _eligible(container: Container, group: CartonGroup) -> bool:
    return container.is_valid() and container.allows(str(group.id))


def spread_targets(groups: Sequence[CartonGroup],
                   containers: Sequence[Container]) -> List[Dict[str, int]]:
    """
    Per-container target quantity for each group in spread mode.

    Returns one ``{group_id: quantity}`` dict per container; groups with
    a zero target are omitted.
    """
    targets: List[Dict[str, int]] = [{} for _ in containers]
    for group in groups:
        quantity = as_count(group.quantity)
        eligible = [i for i, c in enumerate(containers) if _eligible(c, group)]
        if quantity == 0 or not eligible:
            continue
        share, extra = divmod(quantity, len(eligible))
        for rank, index in enumerate(eligible):
            target = share + (1 if rank < extra else 0)
            if target > 0:
                targets[index][str(group.id)] = target
    return targets


# ─────────────────────────────────────────────────────────────────────────────
# Distributor
# ─────────────────────────────────────────────────────────────────────────────

def pack_multiple_containers(groups: Sequence[CartonGroup],
                             containers: Sequence[Container],
                             allow_vertical_flip: bool = True,
                             spread_evenly: bool = False,
                             config: Optional[EngineConfig] = None,
                             logger: Optional[StepLogger] = None) -> MultiContainerPackResult:
    """Pack *groups* over *containers* sequentially or spread evenly."""
    config = config or DEFAULT_CONFIG
    groups = list(groups or ())
    containers = list(containers or ())
    requested = tuple((str(g.id), as_count(g.quantity)) for g in groups)

    results: List[HeightmapPackResult] = []
    if spread_evenly:
        for container, target in zip(containers, spread_targets(groups, containers)):
            batch = [g.with_quantity(target[str(g.id)])
                     for g in groups if str(g.id) in target]
            results.append(pack_groups(batch, container, allow_vertical_flip,
                                       config=config, logger=logger))
    else:
        remaining = {gid: qty for gid, qty in requested}
        for container in containers:
            batch = [g.with_quantity(remaining[str(g.id)])
                     for g in groups
                     if remaining[str(g.id)] > 0 and _eligible(container, g)]
            result = pack_groups(batch, container, allow_vertical_flip,
                                 config=config, logger=logger)
            for group in result.groups:
                remaining[group.id] -= group.placed_qty
            results.append(result)

    return MultiContainerPackResult(containers=tuple(results), requested=requested,
                                    spread_evenly=spread_evenly)
