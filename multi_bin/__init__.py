"""
multi_bin — carton groups over several containers.

Public API:
    from multi_bin import pack_multiple_containers, spread_targets
    from multi_bin import recommend_containers, estimate_required_volume
"""

from multi_bin.distributor import (
    MultiContainerPackResult,
    pack_multiple_containers,
    spread_targets,
)
from multi_bin.recommender import (
    DEFAULT_MAX_CONTAINERS,
    DEFAULT_TARGET_FILL,
    estimate_required_volume,
    estimate_required_weight,
    recommend_containers,
    verify_recommendation,
)

__all__ = [
    "MultiContainerPackResult", "pack_multiple_containers", "spread_targets",
    "DEFAULT_MAX_CONTAINERS", "DEFAULT_TARGET_FILL",
    "estimate_required_volume", "estimate_required_weight",
    "recommend_containers", "verify_recommendation",
]
