"""
stability -- post-processing checks for general-engine packs.

Public API:
    from stability import analyze_stability, optimize_weight_distribution
"""

from stability.support import (
    StabilityIssue, StabilityReport, analyze_stability, corner_support,
)
from stability.weight_balance import center_of_mass, optimize_weight_distribution

__all__ = [
    "StabilityIssue", "StabilityReport", "analyze_stability", "corner_support",
    "center_of_mass", "optimize_weight_distribution",
]
