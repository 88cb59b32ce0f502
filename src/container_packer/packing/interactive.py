"""Interactive placement: resolve a dragged box from a pointer ray."""

from __future__ import annotations

import logging
import math
from typing import Optional, Sequence

from container_packer.geometry import EPSILON, box_below, is_valid_position, rests_on_fragile, top_surface_y
from container_packer.models import Box, Container, Position, Ray, Vector3
from container_packer.packing.first_fit import COORD_DECIMALS

logger = logging.getLogger(__name__)

SNAP_GRID = 0.1


def intersect_floor(ray: Ray) -> Optional[Vector3]:
    """Point where the ray crosses y = 0, or None when it never does going forward."""
    dy = float(ray.direction.y)
    if abs(dy) < EPSILON:
        return None
    t = -float(ray.origin.y) / dy
    if t < 0:
        return None
    return Vector3(
        x=float(ray.origin.x) + t * float(ray.direction.x),
        y=0.0,
        z=float(ray.origin.z) + t * float(ray.direction.z),
    )


def snap_to_grid(value: float, grid: float = SNAP_GRID) -> float:
    """Nearest multiple of ``grid``; halves round up."""
    return round(math.floor(value / grid + 0.5) * grid, COORD_DECIMALS)


def resolve_drag(
    boxes: Sequence[Box],
    container: Container,
    box_id: str,
    ray: Ray,
    grid: float = SNAP_GRID,
) -> Optional[Position]:
    """
    Where the selected box would land for this pointer ray.

    The floor hit is snapped to the grid, lifted onto the highest surface under
    it, and dropped back to the floor when a fragile box would otherwise rest
    on a fragile one. Returns None when the step must be rejected.
    """
    selected = next((b for b in boxes if b.id == box_id), None)
    if selected is None:
        return None

    hit = intersect_floor(ray)
    if hit is None:
        return None

    x = snap_to_grid(hit.x, grid)
    z = snap_to_grid(hit.z, grid)

    top_y = top_surface_y(boxes, x, z, exclude_id=box_id)
    new_y = top_y + selected.height / 2

    if top_y > 0 and selected.is_fragile:
        below = box_below(boxes, x, z, top_y, exclude_id=box_id)
        if below is not None and below.is_fragile:
            new_y = selected.height / 2

    target = Position(x=x, y=round(new_y, COORD_DECIMALS), z=z)
    if not is_valid_position(boxes, container, target, selected.dimensions, exclude_id=box_id):
        return None
    if selected.is_fragile and rests_on_fragile(boxes, target, selected.dimensions, exclude_id=box_id):
        return None
    return target


def apply_drag(
    boxes: Sequence[Box],
    container: Container,
    box_id: str,
    ray: Ray,
    grid: float = SNAP_GRID,
) -> tuple[list[Box], bool]:
    """
    Apply one pointer-move step.

    Returns:
        (boxes, committed): the new list with the dragged box moved and True,
        or the unchanged boxes and False when the step is rejected
    """
    target = resolve_drag(boxes, container, box_id, ray, grid)
    if target is None:
        logger.debug(f"apply_drag: step for box {box_id} rejected")
        return list(boxes), False

    moved = [
        b.model_copy(update={"position": target, "is_valid": True}) if b.id == box_id else b
        for b in boxes
    ]
    return moved, True
