"""
Tiler interface — one layer-tiling algorithm per subclass.

A tiler receives one carton orientation and one space variant and returns
a TileResult describing how many cartons fit per layer and how many
layers stack, or None when the orientation does not fit at all.

Creating a tiler
~~~~~~~~~~~~~~~~
1. Create ``tiling/my_tiler.py``
2. Subclass ``BaseTiler``, set ``name``, implement ``fit()``
3. Decorate with ``@register_tiler``
4. Import the module in ``tiling/__init__.py``

The best-tile selector runs every tiler listed in
``EngineConfig.enabled_tilers`` in that order.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, Optional, Tuple, Type

from config import DEFAULT_CONFIG, EngineConfig, Orientation


SWAPPED_SUFFIX = "-pallet-swapped"


# ─────────────────────────────────────────────────────────────────────────────
# Result types
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class PatternRow:
    """One row of a mixed-row layer, stacked along the width axis."""
    rotated: bool
    count_l: int
    box_l: float
    box_w: float

    def to_dict(self) -> dict:
        return {"rotated": self.rotated, "count_l": self.count_l,
                "box_l": self.box_l, "box_w": self.box_w}


@dataclass(frozen=True)
class BoxPosition:
    """One carton footprint inside a pinwheel layer."""
    x: float
    y: float
    length: float
    width: float
    rotated: bool

    def to_dict(self) -> dict:
        return {"x": self.x, "y": self.y, "length": self.length,
                "width": self.width, "rotated": self.rotated}


@dataclass(frozen=True)
class TileResult:
    """
    Layer tiling of one carton type into one space.

    ``count_l`` / ``count_w`` are only set for uniform grids.  Mixed
    layouts carry ``pattern_rows`` and pinwheel layouts carry
    ``box_positions`` instead.  ``total == per_layer * layers`` always.
    """
    pattern: str
    count_l: Optional[int]
    count_w: Optional[int]
    layers: int
    per_layer: int
    total: int
    box_l: float
    box_w: float
    box_h: float
    used_l: float
    used_w: float
    used_h: float
    pattern_rows: Optional[Tuple[PatternRow, ...]] = None
    box_positions: Optional[Tuple[BoxPosition, ...]] = None
    pallet_swapped: bool = False

    @property
    def is_empty(self) -> bool:
        return self.total == 0

    @classmethod
    def empty(cls) -> "TileResult":
        """The "nothing fits" sentinel; renderers treat it as no-render."""
        return cls(pattern="none", count_l=0, count_w=0, layers=0,
                   per_layer=0, total=0, box_l=0, box_w=0, box_h=0,
                   used_l=0, used_w=0, used_h=0)

    def to_dict(self) -> dict:
        return {
            "pattern": self.pattern,
            "count_l": self.count_l,
            "count_w": self.count_w,
            "layers": self.layers,
            "per_layer": self.per_layer,
            "total": self.total,
            "box": [self.box_l, self.box_w, self.box_h],
            "used": [self.used_l, self.used_w, self.used_h],
            "pattern_rows": (None if self.pattern_rows is None
                             else [r.to_dict() for r in self.pattern_rows]),
            "box_positions": (None if self.box_positions is None
                              else [p.to_dict() for p in self.box_positions]),
            "pallet_swapped": self.pallet_swapped,
        }


def pattern_name(prefix: str, orientation: Orientation, swapped: bool) -> str:
    name = prefix + orientation.label
    return name + SWAPPED_SUFFIX if swapped else name


# ─────────────────────────────────────────────────────────────────────────────
# BaseTiler
# ─────────────────────────────────────────────────────────────────────────────

class BaseTiler(ABC):
    """
    Abstract base for layer tilers.

    Subclasses are stateless apart from the engine config they were
    created with, so one instance may be reused across calls.
    """

    name: str = "unnamed"

    def __init__(self, config: Optional[EngineConfig] = None) -> None:
        self.config: EngineConfig = config or DEFAULT_CONFIG

    @abstractmethod
    def fit(self, orientation: Orientation, space_l: float, space_w: float,
            space_h: float, swapped: bool = False) -> Optional[TileResult]:
        """
        Tile *orientation* into a ``space_l x space_w`` footprint.

        Args:
            orientation: Oriented carton dimensions plus label.
            space_l, space_w: Footprint of this space variant.
            space_h:     Usable height (same for both variants).
            swapped:     Whether the variant exchanged length and width.

        Returns:
            A TileResult, or None if the orientation does not fit once.
        """
        ...


# ─────────────────────────────────────────────────────────────────────────────
# Tiler registry
# ─────────────────────────────────────────────────────────────────────────────

TILER_REGISTRY: Dict[str, Type[BaseTiler]] = {}


def register_tiler(cls: Type[BaseTiler]) -> Type[BaseTiler]:
    """Class decorator — registers a tiler in the global registry."""
    TILER_REGISTRY[cls.name] = cls
    return cls


def get_tiler(name: str, config: Optional[EngineConfig] = None) -> BaseTiler:
    """Look up a tiler by name and return a new instance."""
    if name not in TILER_REGISTRY:
        available = ", ".join(sorted(TILER_REGISTRY.keys()))
        raise ValueError(f"Unknown tiler '{name}'.  Available: [{available}]")
    return TILER_REGISTRY[name](config)
