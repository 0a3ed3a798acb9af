"""Job file models for the ``cartonplan`` command line.

Every sub-command reads one YAML or JSON job file.  The models only check
shape and types; the packing engine itself degrades gracefully on
unusable values, so quantities may be zero and weights may be omitted.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from config import (
    Carton, CartonGroup, Container, ContainerPreset, Item, find_preset,
)


class _Model(BaseModel):
    model_config = ConfigDict(extra="forbid")


# ─────────────────────────────────────────────────────────────────────────────
# Building blocks
# ─────────────────────────────────────────────────────────────────────────────

class BoxSpec(_Model):
    length: float = Field(gt=0)
    width: float = Field(gt=0)
    height: float = Field(gt=0)


class CartonSpec(BoxSpec):
    weight: float = Field(default=0.0, ge=0)
    inner_units: int = Field(default=0, ge=0)

    def to_carton(self) -> Carton:
        return Carton(self.length, self.width, self.height,
                      weight=self.weight, inner_units=self.inner_units)


class SpaceSpec(_Model):
    """Explicit dimensions or the label (prefix) of a built-in preset."""
    preset: Optional[str] = None
    length: Optional[float] = Field(default=None, gt=0)
    width: Optional[float] = Field(default=None, gt=0)
    height: Optional[float] = Field(default=None, gt=0)
    weight_limit: Optional[float] = Field(default=None, gt=0)

    @model_validator(mode="after")
    def _dims_or_preset(self) -> "SpaceSpec":
        dims = (self.length, self.width, self.height)
        if self.preset is None and any(d is None for d in dims):
            raise ValueError("give either 'preset' or length, width and height")
        return self

    def resolve(self) -> ContainerPreset:
        if self.preset is not None:
            preset = find_preset(self.preset)
            if self.weight_limit is not None:
                return ContainerPreset(preset.label, preset.length, preset.width,
                                       preset.height, self.weight_limit)
            return preset
        return ContainerPreset("custom", self.length, self.width, self.height,
                               self.weight_limit)


class GroupSpec(BoxSpec):
    id: str
    name: Optional[str] = None
    quantity: int = Field(ge=0)
    weight: float = Field(default=0.0, ge=0)
    color: str = ""

    def to_group(self) -> CartonGroup:
        return CartonGroup(id=self.id, name=self.name or self.id,
                           length=self.length, width=self.width, height=self.height,
                           quantity=self.quantity, weight=self.weight, color=self.color)


class ContainerSpec(SpaceSpec):
    id: str = "container-1"
    type_label: Optional[str] = None
    allowed_group_ids: list[str] = Field(default_factory=list)

    def to_container(self) -> Container:
        preset = self.resolve()
        return Container(id=self.id, type_label=self.type_label or preset.label,
                         length=preset.length, width=preset.width, height=preset.height,
                         weight_limit=preset.weight_limit,
                         allowed_group_ids=tuple(self.allowed_group_ids))


class PresetSpec(BoxSpec):
    label: str
    weight_limit: Optional[float] = Field(default=None, gt=0)

    def to_preset(self) -> ContainerPreset:
        return ContainerPreset(self.label, self.length, self.width, self.height,
                               self.weight_limit)


class ItemSpec(BoxSpec):
    id: str
    weight: float = Field(default=1.0, ge=0)

    def to_item(self) -> Item:
        return Item(self.id, self.length, self.width, self.height, self.weight)


# ─────────────────────────────────────────────────────────────────────────────
# Jobs
# ─────────────────────────────────────────────────────────────────────────────

class TileJob(_Model):
    carton: CartonSpec
    space: SpaceSpec
    allow_vertical_flip: bool = True
    carton_weight_limit: Optional[float] = Field(default=None, gt=0)
    desired_cartons: Optional[int] = Field(default=None, ge=0)


class PackJob(_Model):
    groups: list[GroupSpec]
    container: ContainerSpec
    allow_vertical_flip: bool = True


class DistributeJob(_Model):
    groups: list[GroupSpec]
    containers: list[ContainerSpec] = Field(min_length=1)
    allow_vertical_flip: bool = True
    spread_evenly: bool = False


class RecommendJob(_Model):
    groups: list[GroupSpec]
    presets: list[PresetSpec] = Field(default_factory=list)
    allow_vertical_flip: bool = True
    max_containers: int = Field(default=50, gt=0)


class GeneralJob(_Model):
    items: list[ItemSpec]
    container: BoxSpec
    algorithm: str = "auto"
    allow_rotation: bool = True
    optimize_weight: bool = True
    check_stability: bool = True


JOB_MODELS = {
    "tile": TileJob,
    "pack": PackJob,
    "distribute": DistributeJob,
    "recommend": RecommendJob,
    "general": GeneralJob,
}
