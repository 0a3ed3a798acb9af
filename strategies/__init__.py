"""
strategies -- general packing strategies and the engine that picks one.

Public API:
    from strategies import GeneralPackingEngine, PackOptions
    from strategies.base_strategy import BaseStrategy, get_strategy, register_strategy
"""

from strategies.base_strategy import (
    BaseStrategy, PackedItem, StrategyOutcome,
    get_strategy, register_strategy, STRATEGY_REGISTRY,
)
import strategies.wall_building  # registers WallBuildingStrategy
import strategies.corner_first  # registers CornerFirstStrategy
import strategies.layer_building  # registers LayerBuildingStrategy
import strategies.spatial_index  # registers SpatialIndexStrategy
from strategies.engine import (
    GeneralPackingEngine, ItemCharacteristics, PackOptions,
    PackingMetrics, PackingOutcome,
)

__all__ = [
    "BaseStrategy", "PackedItem", "StrategyOutcome",
    "get_strategy", "register_strategy", "STRATEGY_REGISTRY",
    "GeneralPackingEngine", "ItemCharacteristics", "PackOptions",
    "PackingMetrics", "PackingOutcome",
]
