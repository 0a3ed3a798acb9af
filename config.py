"""
Central configuration and data models for the carton load planner.

All modules import their core types from here to ensure consistency
across the tiling, simulator, multi-bin, strategy and runner layers.

Classes:
    Dimensions       — length/width/height triple with validity checks
    Carton           — single carton type for layer tiling and load summaries
    CartonGroup      — one line of a heterogeneous packing job
    Orientation      — oriented (l, w, h) plus label and rotation descriptor
    Container        — pallet or shipping container receiving cartons
    Item             — free-form item for the general packing engine
    Placement        — validated, immutable result of placing one carton
    ContainerPreset  — catalog entry used by the container recommender
    EngineConfig     — all tuneable parameters of the engine

All lengths are millimetres, all weights kilograms.  Axis convention:
x runs along the container length, y along its width, z is vertical.
"""

import math
import numbers
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import List, Optional, Tuple

import yaml


class ConfigError(ValueError):
    """Raised when a configuration or preset file cannot be used."""


def _is_positive(value) -> bool:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return False
    return math.isfinite(value) and value > 0


# ─────────────────────────────────────────────────────────────────────────────
# Dimensions & cartons
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Dimensions:
    """
    An axis-aligned extent.

    Attributes:
        length: X-axis extent (mm).
        width:  Y-axis extent (mm).
        height: Z-axis extent (mm).
    """
    length: float
    width: float
    height: float

    @property
    def volume(self) -> float:
        return self.length * self.width * self.height

    def is_valid(self) -> bool:
        """True when every extent is a finite, strictly positive number."""
        return all(_is_positive(v) for v in (self.length, self.width, self.height))

    def swapped(self) -> "Dimensions":
        """Same extent with length and width exchanged."""
        return Dimensions(self.width, self.length, self.height)

    def to_dict(self) -> dict:
        return {"length": self.length, "width": self.width, "height": self.height}

    @classmethod
    def from_dict(cls, d: dict) -> "Dimensions":
        return cls(length=d["length"], width=d["width"], height=d["height"])


@dataclass(frozen=True)
class Carton:
    """
    A single carton type.

    Attributes:
        length, width, height: Natural (upright) dimensions.
        weight:       Gross weight of one carton.
        inner_units:  Retail units packed inside one carton (0 = unknown).
    """
    length: float
    width: float
    height: float
    weight: float = 0.0
    inner_units: int = 0

    @property
    def dims(self) -> Dimensions:
        return Dimensions(self.length, self.width, self.height)

    @property
    def volume(self) -> float:
        return self.length * self.width * self.height

    def to_dict(self) -> dict:
        return {"length": self.length, "width": self.width, "height": self.height,
                "weight": self.weight, "inner_units": self.inner_units}

    @classmethod
    def from_dict(cls, d: dict) -> "Carton":
        return cls(length=d["length"], width=d["width"], height=d["height"],
                   weight=d.get("weight", 0.0), inner_units=d.get("inner_units", 0))


@dataclass(frozen=True)
class CartonGroup:
    """
    A group of identical cartons requested in a packing job.

    Attributes:
        id:       Unique identifier (referenced by Container.allowed_group_ids).
        name:     Display name.
        length, width, height: Natural carton dimensions.
        quantity: Number of cartons requested (>= 0).
        weight:   Weight of one carton.
        color:    Free-form colour tag for renderers.
    """
    id: str
    name: str
    length: float
    width: float
    height: float
    quantity: int
    weight: float = 0.0
    color: str = ""

    @property
    def dims(self) -> Dimensions:
        return Dimensions(self.length, self.width, self.height)

    @property
    def unit_volume(self) -> float:
        return self.length * self.width * self.height

    def is_packable(self) -> bool:
        """Valid dimensions and at least one carton requested."""
        return (self.dims.is_valid() and _is_positive(self.quantity)
                and int(self.quantity) > 0)

    def with_quantity(self, quantity: int) -> "CartonGroup":
        return replace(self, quantity=quantity)

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name, "length": self.length,
                "width": self.width, "height": self.height,
                "quantity": self.quantity, "weight": self.weight,
                "color": self.color}

    @classmethod
    def from_dict(cls, d: dict) -> "CartonGroup":
        return cls(id=str(d["id"]), name=d.get("name", str(d["id"])),
                   length=d["length"], width=d["width"], height=d["height"],
                   quantity=d.get("quantity", 0), weight=d.get("weight", 0.0),
                   color=d.get("color", ""))


# ─────────────────────────────────────────────────────────────────────────────
# Orientation
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Orientation:
    """
    One way of mapping a carton's three dimensions onto the container axes.

    Attributes:
        length, width, height: Dimensions after rotation.
        label:    Human-readable name, e.g. "upright" or "laid-side-l".
        rotation: (x, y, z) rotation in degrees from the natural pose.
    """
    length: float
    width: float
    height: float
    label: str
    rotation: Tuple[int, int, int] = (0, 0, 0)

    @property
    def is_square_footprint(self) -> bool:
        return self.length == self.width

    def fits_within(self, length: float, width: float, height: float) -> bool:
        return self.length <= length and self.width <= width and self.height <= height


# ─────────────────────────────────────────────────────────────────────────────
# Containers & items
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Container:
    """
    A pallet or shipping container.

    Attributes:
        id:                Identifier, unique within a distribution job.
        type_label:        Human-readable type, e.g. "20ft Container".
        length, width, height: Inner usable dimensions.
        weight_limit:      Maximum payload (None = unlimited).
        allowed_group_ids: Groups allowed in this container (empty = all).
    """
    id: str
    type_label: str
    length: float
    width: float
    height: float
    weight_limit: Optional[float] = None
    allowed_group_ids: Tuple[str, ...] = ()

    @property
    def dims(self) -> Dimensions:
        return Dimensions(self.length, self.width, self.height)

    @property
    def volume(self) -> float:
        return self.length * self.width * self.height

    def is_valid(self) -> bool:
        return self.dims.is_valid()

    def allows(self, group_id: str) -> bool:
        return not self.allowed_group_ids or group_id in self.allowed_group_ids

    def to_dict(self) -> dict:
        return {"id": self.id, "type_label": self.type_label,
                "length": self.length, "width": self.width,
                "height": self.height, "weight_limit": self.weight_limit,
                "allowed_group_ids": list(self.allowed_group_ids)}

    @classmethod
    def from_dict(cls, d: dict) -> "Container":
        return cls(id=str(d["id"]), type_label=d.get("type_label", ""),
                   length=d["length"], width=d["width"], height=d["height"],
                   weight_limit=d.get("weight_limit"),
                   allowed_group_ids=tuple(str(g) for g in d.get("allowed_group_ids", ())))


@dataclass(frozen=True)
class Item:
    """A free-form item for the general packing engine."""
    id: str
    length: float
    width: float
    height: float
    weight: float = 1.0

    @property
    def dims(self) -> Dimensions:
        return Dimensions(self.length, self.width, self.height)

    @property
    def volume(self) -> float:
        return self.length * self.width * self.height

    def to_dict(self) -> dict:
        return {"id": self.id, "length": self.length, "width": self.width,
                "height": self.height, "weight": self.weight}


# ─────────────────────────────────────────────────────────────────────────────
# Placement (validated, immutable result of a carton placement)
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Placement:
    """
    A single carton placed by the heightmap packer.

    Frozen (immutable) so results can be shared with renderers without
    risk of accidental mutation.

    Attributes:
        group_id:        ID of the CartonGroup this carton belongs to.
        index_in_group:  Sequential index within its group.
        x, y, z:         Local position of the minimum corner.
        length/width/height: Dimensions after rotation.
        orientation:     Orientation label that was applied.
        layer_index:     Approximate layer number (z // height).
        world_x/y/z:     Box centre with the container centred on the
                         origin and z lifted by the pallet base height.
    """
    group_id: str
    index_in_group: int
    x: float
    y: float
    z: float
    length: float
    width: float
    height: float
    orientation: str
    layer_index: int
    world_x: float = 0.0
    world_y: float = 0.0
    world_z: float = 0.0

    @property
    def volume(self) -> float:
        return self.length * self.width * self.height

    @property
    def x_max(self) -> float:
        return self.x + self.length

    @property
    def y_max(self) -> float:
        return self.y + self.width

    @property
    def z_max(self) -> float:
        return self.z + self.height

    def bounds(self) -> Tuple[float, float, float, float, float, float]:
        return (self.x, self.y, self.z, self.x_max, self.y_max, self.z_max)

    def to_dict(self) -> dict:
        return {
            "group_id": self.group_id,
            "index_in_group": self.index_in_group,
            "position": [self.x, self.y, self.z],
            "dims": [self.length, self.width, self.height],
            "orientation": self.orientation,
            "layer_index": self.layer_index,
            "world": [self.world_x, self.world_y, self.world_z],
        }


# ─────────────────────────────────────────────────────────────────────────────
# Preset catalogs
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class ContainerPreset:
    """A standard pallet or container size."""
    label: str
    length: float
    width: float
    height: float
    weight_limit: Optional[float] = None

    @property
    def volume(self) -> float:
        return self.length * self.width * self.height

    def to_container(self, container_id: str, allowed_group_ids: Tuple[str, ...] = ()) -> Container:
        return Container(id=container_id, type_label=self.label,
                         length=self.length, width=self.width,
                         height=self.height, weight_limit=self.weight_limit,
                         allowed_group_ids=allowed_group_ids)

    @classmethod
    def from_dict(cls, d: dict) -> "ContainerPreset":
        return cls(label=d["label"], length=d["length"], width=d["width"],
                   height=d["height"], weight_limit=d.get("weight_limit"))


PALLET_PRESETS: Tuple[ContainerPreset, ...] = (
    ContainerPreset("UK Standard (1200 x 1000 x 1200 mm)", 1200, 1000, 1200),
    ContainerPreset("Aldi Pallet (1200 x 1000 x 1600 mm)", 1200, 1000, 1600),
    ContainerPreset("LIDL Pallet (1200 x 800 x 1600 mm)", 1200, 800, 1600),
    ContainerPreset("Euro Pallet (1200 x 800 x 1200 mm)", 1200, 800, 1200),
    ContainerPreset("Half Pallet (800 x 600 x 800 mm)", 800, 600, 800),
)

CONTAINER_PRESETS: Tuple[ContainerPreset, ...] = (
    ContainerPreset("20ft Container (6058 x 2438 x 2591 mm)", 6058, 2438, 2591, 28000),
    ContainerPreset("40ft Container (12192 x 2438 x 2591 mm)", 12192, 2438, 2591, 26500),
    ContainerPreset("40ft High Cube (12192 x 2438 x 2896 mm)", 12192, 2438, 2896, 26500),
)


def find_preset(name: str,
                catalog: Optional[Tuple[ContainerPreset, ...]] = None) -> ContainerPreset:
    """Preset whose label equals or starts with *name* (case-insensitive)."""
    presets = catalog if catalog is not None else PALLET_PRESETS + CONTAINER_PRESETS
    key = name.strip().lower()
    for preset in presets:
        if preset.label.lower() == key or preset.label.lower().startswith(key):
            return preset
    available = ", ".join(p.label for p in presets)
    raise ConfigError(f"Unknown preset '{name}'.  Available: [{available}]")


def load_preset_catalog(path) -> List[ContainerPreset]:
    """
    Read a YAML list of presets.

    Each entry needs ``label``, ``length``, ``width`` and ``height``;
    ``weight_limit`` is optional.  Entries without usable dimensions
    (e.g. a "Custom size" placeholder) are skipped.
    """
    data = _read_yaml(path)
    if isinstance(data, dict):
        data = data.get("presets", [])
    if not isinstance(data, list):
        raise ConfigError(f"{path}: expected a list of presets")

    presets: List[ContainerPreset] = []
    for entry in data:
        if not isinstance(entry, dict) or "label" not in entry:
            raise ConfigError(f"{path}: malformed preset entry {entry!r}")
        if not all(_is_positive(entry.get(k)) for k in ("length", "width", "height")):
            continue
        presets.append(ContainerPreset.from_dict(entry))
    return presets


# ─────────────────────────────────────────────────────────────────────────────
# Engine Configuration
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class AutoSelectThresholds:
    """
    Item-set characteristics that drive the general engine's auto mode.

    Empirical defaults; override them rather than treating them as fixed.
    """
    uniformity: float = 0.8
    aspect_ratio: float = 2.0
    weight_variation: float = 0.5

    def to_dict(self) -> dict:
        return {"uniformity": self.uniformity, "aspect_ratio": self.aspect_ratio,
                "weight_variation": self.weight_variation}


@dataclass(frozen=True)
class EngineConfig:
    """
    All tuneable parameters of the packing engine.

    Attributes:
        heightmap_resolution: Grid cell size of the heightmap packer (mm).
        layer_tolerance:      Base heights closer than this count as one layer.
        pallet_base_height:   Offset added to world z (pallet deck height).
        enabled_tilers:       Tilers the best-tile selector runs, in order.
        pinwheel_max_cells:   Upper bound on pinwheel occupancy grid cells.
        enforce_weight_limit: Stop placing once a container's payload is hit.
        auto_thresholds:      General engine auto-selection thresholds.
        stability_threshold:  Minimum corner support before an issue is raised.
        verbose:              Print step-by-step placement traces.
    """
    heightmap_resolution: float = 50.0
    layer_tolerance: float = 5.0
    pallet_base_height: float = 100.0
    enabled_tilers: Tuple[str, ...] = ("uniform", "mixed", "pinwheel")
    pinwheel_max_cells: int = 250_000
    enforce_weight_limit: bool = False
    auto_thresholds: AutoSelectThresholds = field(default_factory=AutoSelectThresholds)
    stability_threshold: float = 0.7
    verbose: bool = False

    def to_dict(self) -> dict:
        return {
            "heightmap_resolution": self.heightmap_resolution,
            "layer_tolerance": self.layer_tolerance,
            "pallet_base_height": self.pallet_base_height,
            "enabled_tilers": list(self.enabled_tilers),
            "pinwheel_max_cells": self.pinwheel_max_cells,
            "enforce_weight_limit": self.enforce_weight_limit,
            "auto_thresholds": self.auto_thresholds.to_dict(),
            "stability_threshold": self.stability_threshold,
            "verbose": self.verbose,
        }

    @classmethod
    def from_dict(cls, d: dict) -> "EngineConfig":
        known = {f for f in cls.__dataclass_fields__}
        unknown = set(d) - known
        if unknown:
            raise ConfigError(f"Unknown engine config keys: {sorted(unknown)}")
        kwargs = dict(d)
        if "enabled_tilers" in kwargs:
            kwargs["enabled_tilers"] = tuple(kwargs["enabled_tilers"])
        if isinstance(kwargs.get("auto_thresholds"), dict):
            kwargs["auto_thresholds"] = AutoSelectThresholds(**kwargs["auto_thresholds"])
        if not _is_positive(kwargs.get("heightmap_resolution", 1.0)):
            raise ConfigError("heightmap_resolution must be a positive number")
        return cls(**kwargs)


DEFAULT_CONFIG = EngineConfig()


def load_engine_config(path) -> EngineConfig:
    """Read an EngineConfig from a YAML mapping (missing keys keep defaults)."""
    data = _read_yaml(path)
    if data is None:
        return EngineConfig()
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: expected a mapping of engine settings")
    try:
        return EngineConfig.from_dict(data)
    except TypeError as exc:
        raise ConfigError(f"{path}: {exc}") from exc


def _read_yaml(path):
    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as f:
            return yaml.safe_load(f)
    except OSError as exc:
        raise ConfigError(f"Cannot read {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc
