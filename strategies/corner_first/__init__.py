"""Corner-first strategy: scored candidate points grown from the floor corners."""
from strategies.corner_first.strategy import CornerFirstStrategy, corner_score
__all__ = ["CornerFirstStrategy", "corner_score"]
