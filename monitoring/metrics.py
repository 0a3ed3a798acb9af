"""Metrics tracking and export for packing plans.

Provides dataclasses for per-container and per-plan metrics and
utilities for exporting them to JSON and CSV formats.
"""

from __future__ import annotations

import csv
import json
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

CSV_FIELDS = [
    "container_id", "type_label", "cartons_placed", "utilization_pct",
    "volume_used", "volume_total", "weight", "overweight",
]


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class ContainerMetrics:
    """Metrics for a single container.

    Attributes:
        container_id: Identifier of the container.
        type_label: Pallet or container type, e.g. "EURO".
        cartons_placed: Number of cartons placed.
        utilization_pct: Volume utilization percentage (0-100).
        volume_used: Total carton volume in cubic mm.
        volume_total: Container volume in cubic mm.
        weight: Total carton weight in kg.
        overweight: Whether the payload exceeds the container's limit.
    """

    container_id: str
    type_label: str
    cartons_placed: int
    utilization_pct: float
    volume_used: float
    volume_total: float
    weight: float = 0.0
    overweight: bool = False

    @classmethod
    def from_pack_result(cls, result: Any) -> ContainerMetrics:
        """Build from a ``HeightmapPackResult``.

        Example:
            >>> from config import Container
            >>> from simulator.group_packer import HeightmapPackResult
            >>> r = HeightmapPackResult.empty(Container("c1", "EURO", 1200, 800, 1200))
            >>> ContainerMetrics.from_pack_result(r).cartons_placed
            0
        """
        return cls(
            container_id=result.container_id,
            type_label=result.type_label,
            cartons_placed=result.total_cartons,
            utilization_pct=result.fill_rate * 100.0,
            volume_used=result.total_volume,
            volume_total=result.volume,
            weight=result.total_weight,
            overweight=result.overweight,
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class PlanMetrics:
    """Aggregate metrics for a whole packing plan.

    Attributes:
        plan_id: Identifier for the plan (free text).
        total_containers: Number of containers in the plan.
        containers_used: Containers holding at least one carton.
        total_cartons: Cartons placed over all containers.
        total_requested: Cartons requested over all groups.
        total_weight: Weight placed over all containers.
        avg_utilization_pct: Mean utilization over used containers.
        min_utilization_pct: Lowest utilization over used containers.
        max_utilization_pct: Highest utilization over used containers.
        created_at: When the metrics were built.
        container_metrics: Per-container metrics.
    """

    plan_id: str
    total_containers: int = 0
    containers_used: int = 0
    total_cartons: int = 0
    total_requested: int = 0
    total_weight: float = 0.0
    avg_utilization_pct: float = 0.0
    min_utilization_pct: float = 0.0
    max_utilization_pct: float = 0.0
    created_at: datetime = field(default_factory=_now)
    container_metrics: list[ContainerMetrics] = field(default_factory=list)

    @classmethod
    def from_multi_result(cls, result: Any, plan_id: str = "plan") -> PlanMetrics:
        """Build from a ``MultiContainerPackResult`` (or any iterable of pack results)."""
        plan = cls(plan_id=plan_id,
                   total_requested=getattr(result, "total_requested", 0))
        for container in result:
            plan.add_container(ContainerMetrics.from_pack_result(container))
        return plan

    def add_container(self, container: ContainerMetrics) -> None:
        """Add a container's metrics to the plan.

        Example:
            >>> pm = PlanMetrics("plan_001")
            >>> pm.add_container(ContainerMetrics("c1", "EURO", 40, 80.0, 921.6e6, 1152e6))
            >>> pm.total_cartons
            40
            >>> pm.containers_used
            1
        """
        self.container_metrics.append(container)
        self.total_containers += 1
        self.total_cartons += container.cartons_placed
        self.total_weight += container.weight
        self._recalculate_stats()

    def _recalculate_stats(self) -> None:
        """Recalculate aggregate statistics from container metrics."""
        used = [c for c in self.container_metrics if c.cartons_placed > 0]
        self.containers_used = len(used)
        if not used:
            return

        utilizations = [c.utilization_pct for c in used]
        self.avg_utilization_pct = sum(utilizations) / len(utilizations)
        self.min_utilization_pct = min(utilizations)
        self.max_utilization_pct = max(utilizations)

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        d["created_at"] = self.created_at.isoformat()
        d["container_metrics"] = [c.to_dict() for c in self.container_metrics]
        return d

    def to_summary_dict(self) -> dict[str, Any]:
        """Aggregate metrics only (no container_metrics list)."""
        d = self.to_dict()
        del d["container_metrics"]
        return d


def export_to_json(metrics: PlanMetrics, output_path: Path | str,
                   include_containers: bool = True) -> None:
    """Export plan metrics to a JSON file.

    Args:
        metrics: PlanMetrics instance to export.
        output_path: Path to output JSON file.
        include_containers: If True, include per-container metrics.
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    data = metrics.to_dict() if include_containers else metrics.to_summary_dict()

    with output_path.open("w") as f:
        json.dump(data, f, indent=2)


def export_to_csv(metrics: PlanMetrics, output_path: Path | str) -> None:
    """Export per-container metrics to a CSV file (header only when empty)."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with output_path.open("w", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=CSV_FIELDS)
        writer.writeheader()
        for container in metrics.container_metrics:
            writer.writerow(container.to_dict())


def print_summary(metrics: PlanMetrics) -> str:
    """Generate a human-readable summary of plan metrics.

    Returns:
        Formatted multi-line summary string.

    Example:
        >>> pm = PlanMetrics("plan_001")
        >>> "Plan: plan_001" in print_summary(pm)
        True
    """
    lines = [
        "=" * 60,
        f"Plan: {metrics.plan_id}",
        "=" * 60,
        f"Containers: {metrics.containers_used} used / {metrics.total_containers}",
        f"Cartons:    {metrics.total_cartons} / {metrics.total_requested}",
        f"Weight:     {metrics.total_weight:.1f} kg",
        "",
        "Utilization Statistics:",
        f"  Average: {metrics.avg_utilization_pct:.2f}%",
        f"  Min:     {metrics.min_utilization_pct:.2f}%",
        f"  Max:     {metrics.max_utilization_pct:.2f}%",
        "",
        f"Created: {metrics.created_at.isoformat()}",
        "=" * 60,
    ]
    return "\n".join(lines)
