"""Monitoring module for the carton load planner.

Provides step-by-step placement logging and metrics tracking for packing plans.
"""

from .metrics import (
    ContainerMetrics,
    PlanMetrics,
    export_to_csv,
    export_to_json,
    print_summary,
)
from .step_logger import StepLogger

__all__ = [
    # Metrics
    "ContainerMetrics",
    "PlanMetrics",
    "export_to_csv",
    "export_to_json",
    "print_summary",
    # Logging
    "StepLogger",
]
