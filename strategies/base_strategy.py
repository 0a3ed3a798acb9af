"""
Strategy interface — abstract base class for the general packing strategies.

A strategy receives a list of free-form items and one container and
returns where every item it could place ended up, plus the items it
could not place.  Strategies never raise for unplaceable items.

Coordinates are container-local: the origin is the floor corner, x runs
along the container length, y along the width, z upwards.

Creating a strategy
~~~~~~~~~~~~~~~~~~~
1. Create ``strategies/my_strategy/strategy.py``
2. Subclass ``BaseStrategy``, set ``name``, implement ``pack()``
3. Decorate with ``@register_strategy``
4. Import the module in ``strategies/__init__.py``
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace
from typing import Dict, List, Sequence, Tuple, Type

from config import Item
from geometry import as_positive


# ─────────────────────────────────────────────────────────────────────────────
# Result types
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class PackedItem:
    """
    An item placed by a strategy.

    Attributes:
        item:     The original item.
        x, y, z:  Minimum corner in container coordinates.
        length, width, height: Dimensions after rotation.
        rotation: (x, y, z) rotation in degrees from the item's natural pose.
    """
    item: Item
    x: float
    y: float
    z: float
    length: float
    width: float
    height: float
    rotation: Tuple[int, int, int] = (0, 0, 0)

    @property
    def id(self) -> str:
        return self.item.id

    @property
    def weight(self) -> float:
        """Item weight; missing or non-positive weights count as 1."""
        return as_positive(self.item.weight) or 1.0

    @property
    def volume(self) -> float:
        return self.length * self.width * self.height

    @property
    def z_max(self) -> float:
        return self.z + self.height

    @property
    def center(self) -> Tuple[float, float, float]:
        return (self.x + self.length / 2, self.y + self.width / 2,
                self.z + self.height / 2)

    def bounds(self) -> Tuple[float, float, float, float, float, float]:
        return (self.x, self.y, self.z,
                self.x + self.length, self.y + self.width, self.z + self.height)

    def moved_to(self, x: float, y: float, z: float) -> "PackedItem":
        return replace(self, x=x, y=y, z=z)

    def to_dict(self) -> dict:
        return {
            "id": self.item.id,
            "position": [self.x, self.y, self.z],
            "dimensions": [self.length, self.width, self.height],
            "rotation": list(self.rotation),
            "weight": self.item.weight,
        }


@dataclass
class StrategyOutcome:
    """Placed items (placement order) and items that did not fit."""
    packed: List[PackedItem] = field(default_factory=list)
    unpacked: List[Item] = field(default_factory=list)


# ─────────────────────────────────────────────────────────────────────────────
# BaseStrategy
# ─────────────────────────────────────────────────────────────────────────────

class BaseStrategy(ABC):
    """
    Abstract base for general packing strategies.

    Strategies hold no state between ``pack()`` calls; every call gets
    the full item list and returns a complete outcome.
    """

    name: str = "unnamed"

    @abstractmethod
    def pack(self, items: Sequence[Item], container,
             allow_rotation: bool = True) -> StrategyOutcome:
        """
        Place *items* into *container*.

        Args:
            items:          Items with valid positive dimensions.
            container:      Anything with ``length``, ``width``, ``height``.
            allow_rotation: Whether items may be turned onto other faces.

        Returns:
            StrategyOutcome with every input item in exactly one list.
        """
        ...


# ─────────────────────────────────────────────────────────────────────────────
# Strategy registry
# ─────────────────────────────────────────────────────────────────────────────

STRATEGY_REGISTRY: Dict[str, Type[BaseStrategy]] = {}


def register_strategy(cls: Type[BaseStrategy]) -> Type[BaseStrategy]:
    """Class decorator — registers a strategy in the global registry."""
    STRATEGY_REGISTRY[cls.name] = cls
    return cls


def normalize_name(name: str) -> str:
    """Accept both ``wall-building`` and ``wall_building`` spellings."""
    return str(name).strip().lower().replace("-", "_")


def get_strategy(name: str) -> BaseStrategy:
    """Look up a strategy by name and return a new instance."""
    key = normalize_name(name)
    if key not in STRATEGY_REGISTRY:
        available = ", ".join(sorted(STRATEGY_REGISTRY.keys()))
        raise ValueError(f"Unknown strategy '{name}'.  Available: [{available}]")
    return STRATEGY_REGISTRY[key]()
