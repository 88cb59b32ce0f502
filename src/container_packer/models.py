from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Dimensions(BaseModel):
    """Interior or box dimensions (in meters)."""

    model_config = ConfigDict(frozen=True)

    width: float = Field(gt=0, description="Extent along x")
    length: float = Field(gt=0, description="Extent along z")
    height: float = Field(gt=0, description="Extent along y (vertical)")

    @property
    def volume(self) -> float:
        return float(self.width) * float(self.length) * float(self.height)


class Position(BaseModel):
    """Center of a box in container space; y is vertical with the floor at 0."""

    model_config = ConfigDict(frozen=True)

    x: float = Field(description="Across the container width, 0 at the center line")
    y: float = Field(description="Height of the box center above the floor")
    z: float = Field(description="Along the container length, 0 at the middle")


class Vector3(BaseModel):
    model_config = ConfigDict(frozen=True)

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0


class Ray(BaseModel):
    """Pointer ray in container space, as produced by the renderer."""

    model_config = ConfigDict(frozen=True)

    origin: Vector3
    direction: Vector3


class Container(BaseModel):
    """Container model with interior dimensions."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(default="custom", description="Preset key or free label")
    dimensions: Dimensions

    @property
    def width(self) -> float:
        return float(self.dimensions.width)

    @property
    def length(self) -> float:
        return float(self.dimensions.length)

    @property
    def height(self) -> float:
        return float(self.dimensions.height)

    @property
    def volume(self) -> float:
        return self.dimensions.volume


class Box(BaseModel):
    """A placed cargo box. Instances are never mutated; use model_copy(update=...)."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Unique identifier for the box")
    dimensions: Dimensions
    position: Position
    is_fragile: bool = Field(default=False, description="Nothing fragile may sit directly under it")
    is_locked: bool = Field(default=True, description="False while the user is repositioning it")
    color: str = Field(default="#FF6B6B", description="Cosmetic only")
    # False when the box could not be re-placed after a container change
    is_valid: bool = True

    @property
    def width(self) -> float:
        return float(self.dimensions.width)

    @property
    def length(self) -> float:
        return float(self.dimensions.length)

    @property
    def height(self) -> float:
        return float(self.dimensions.height)

    @property
    def volume(self) -> float:
        return self.dimensions.volume

    @property
    def top(self) -> float:
        return float(self.position.y) + self.height / 2

    @property
    def bottom(self) -> float:
        return float(self.position.y) - self.height / 2


class BoxRequest(BaseModel):
    """A box the caller wants added; dimensions are validated against the container later."""

    width: float
    length: float
    height: float
    is_fragile: bool = False
    label: Optional[str] = None


class PackingResult(BaseModel):
    """Standard result returned when placing a batch of requests."""

    placements: list[Box] = Field(default_factory=list)
    unpacked: list[BoxRequest] = Field(default_factory=list)
    used_volume: float = 0.0
    container_volume: float = 0.0
    fill_rate: float = 0.0
