"""
Layer building strategy.

Groups items of similar height and packs each group into horizontal
layers with 2D guillotine splitting.
"""
from strategies.layer_building.strategy import (
    LayerBuildingStrategy, group_by_height, pack_layer,
)
__all__ = ["LayerBuildingStrategy", "group_by_height", "pack_layer"]
