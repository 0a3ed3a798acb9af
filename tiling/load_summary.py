"""
Load summary for a single-carton pallet plan.

Turns a TileResult into the figures a planner reads off: how many cartons
actually ship (optionally capped by a desired count), their total weight
and inner units, the share of the space volume they fill, and whether the
carton or the pallet exceeds its gross weight limit.
"""

from dataclasses import dataclass
from typing import Optional

from config import Carton
from geometry import as_count, as_positive, as_weight
from tiling.base_tiler import TileResult


@dataclass(frozen=True)
class LoadSummary:
    """
    Attributes:
        capacity:            Cartons the tiling can hold.
        effective_cartons:   Cartons actually loaded.
        desired_too_high:    A desired count above capacity was clamped.
        total_weight:        effective_cartons * carton weight.
        total_inner_units:   effective_cartons * inner units per carton.
        volume_usage:        Percentage of the space volume filled.
        carton_overweight:   Carton weight above the carton limit.
        pallet_overweight:   Total weight above the pallet limit.
    """
    capacity: int
    effective_cartons: int
    desired_too_high: bool
    total_weight: float
    total_inner_units: int
    volume_usage: float
    carton_overweight: bool
    pallet_overweight: bool

    def to_dict(self) -> dict:
        return {
            "capacity": self.capacity,
            "effective_cartons": self.effective_cartons,
            "desired_too_high": self.desired_too_high,
            "total_weight": round(self.total_weight, 3),
            "total_inner_units": self.total_inner_units,
            "volume_usage": round(self.volume_usage, 2),
            "carton_overweight": self.carton_overweight,
            "pallet_overweight": self.pallet_overweight,
        }


def summarize_load(tile: TileResult, carton: Carton,
                   space_volume: Optional[float] = None,
                   pallet_weight_limit: Optional[float] = None,
                   carton_weight_limit: Optional[float] = None,
                   desired_cartons: Optional[int] = None) -> LoadSummary:
    """
    Summarise the load described by *tile*.

    A desired count only applies when it is a positive number; above the
    tiling capacity it is clamped and ``desired_too_high`` is set.  Limits
    that are missing or not positive are ignored.  ``space_volume`` is
    the volume the usage percentage refers to; without it the used
    envelope of the tile is taken.
    """
    capacity = tile.total
    effective = capacity
    desired_too_high = False
    desired = as_count(desired_cartons)
    if desired > 0:
        if desired > capacity:
            desired_too_high = True
        else:
            effective = desired

    weight = as_weight(carton.weight)
    total_weight = effective * weight
    inner_units = effective * as_count(carton.inner_units)

    volume = as_positive(space_volume)
    if volume is None:
        volume = as_positive(tile.used_l * tile.used_w * tile.used_h)
    carton_volume = carton.volume if carton.dims.is_valid() else 0.0
    usage = 100.0 * effective * carton_volume / volume if volume else 0.0

    carton_limit = as_positive(carton_weight_limit)
    pallet_limit = as_positive(pallet_weight_limit)
    return LoadSummary(
        capacity=capacity,
        effective_cartons=effective,
        desired_too_high=desired_too_high,
        total_weight=total_weight,
        total_inner_units=inner_units,
        volume_usage=usage,
        carton_overweight=carton_limit is not None and weight > carton_limit,
        pallet_overweight=pallet_limit is not None and total_weight > pallet_limit,
    )
