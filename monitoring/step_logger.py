"""
Step logger — console output and structured recording of each placement.

Usage:
    logger = StepLogger(verbose=True)
    result = pack_groups(groups, container, logger=logger)
    records = logger.get_records()
"""

from typing import List, Optional

from config import Placement


class StepLogger:
    """Logs heightmap placements and stops to console and stores them for JSON output."""

    def __init__(self, verbose: bool = False) -> None:
        self.verbose = verbose
        self._records: List[dict] = []

    def log_placement(self, container_id: str, placement: Placement,
                      fill_rate: float) -> None:
        """Log one placed carton."""
        record = {
            "event": "placed",
            "container_id": container_id,
            "fill_rate": round(fill_rate, 6),
            **placement.to_dict(),
        }
        self._records.append(record)

        if not self.verbose:
            return

        p = placement
        dims_str = f"{p.length:.0f}x{p.width:.0f}x{p.height:.0f}"
        print(
            f"  [{container_id}] {p.group_id}#{p.index_in_group:<4d} "
            f"({dims_str}) -> ({p.x:.0f}, {p.y:.0f}, {p.z:.0f}) "
            f"{p.orientation:<16s} layer={p.layer_index}  "
            f"fill={fill_rate:.1%}  OK"
        )

    def log_stop(self, container_id: str, group_id: str, placed: int,
                 requested: int, reason: str) -> None:
        """Log a group that stopped before its requested quantity."""
        self._records.append({
            "event": "stopped",
            "container_id": container_id,
            "group_id": group_id,
            "placed": placed,
            "requested": requested,
            "reason": reason,
        })

        if self.verbose:
            print(
                f"  [{container_id}] {group_id}: placed {placed}/{requested} "
                f"-> STOPPED: {reason}"
            )

    def get_records(self, event: Optional[str] = None) -> List[dict]:
        """All logged records as dicts (for JSON output), optionally one event type."""
        if event is None:
            return list(self._records)
        return [r for r in self._records if r["event"] == event]
