"""Data schemas for API requests and responses."""

from typing import Any, List, Optional
from pydantic import BaseModel, Field

from container_packer.models import Box, Container, Dimensions, Ray


class CreateSessionSchema(BaseModel):
    """Schema for opening a session."""
    container_preset: Optional[str] = Field(None, description="Preset key such as '20ft'")
    container: Optional[Dimensions] = Field(None, description="Explicit interior dimensions")


class ContainerSchema(BaseModel):
    """Schema for switching the container of a session."""
    container_preset: Optional[str] = None
    container: Optional[Dimensions] = None


class AddBoxSchema(BaseModel):
    """Schema for a box to add. Raw values are validated by the engine."""
    width: Any = Field(description="Width in meters")
    length: Any = Field(description="Length in meters")
    height: Any = Field(description="Height in meters")
    is_fragile: bool = False


class DragSchema(BaseModel):
    """Schema for one pointer-move step of a dragged box."""
    box_id: str
    ray: Ray


class SessionSchema(BaseModel):
    """Schema for a session snapshot."""
    session_id: str
    container: Container
    boxes: List[Box]
    selected_box_id: Optional[str] = None
    utilization: int = Field(ge=0, le=100, description="Volumetric fill in percent")
    invalid_box_ids: List[str] = Field(default_factory=list)


class ContainerChangeSchema(SessionSchema):
    """Schema for the result of a container switch."""
    flagged_invalid: List[str] = Field(default_factory=list)


class DragResultSchema(BaseModel):
    """Schema for a drag step outcome."""
    committed: bool
    box: Box
