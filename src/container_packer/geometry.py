"""Geometry utilities: spatial validation and surface queries.

All boxes are axis-aligned and addressed by their center. The container frame
is centered on x and z with the floor at y = 0.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, Optional

if TYPE_CHECKING:
    from .models import Box, Container, Dimensions, Position

# Absorbs float noise from stepping the 0.1 m raster.
EPSILON = 1e-6

# Tolerance used to match a box top against a queried surface height.
SURFACE_TOLERANCE = 0.01

Bounds = tuple[float, float, float, float, float, float]


def boxes_overlap(a: Bounds, b: Bounds) -> bool:
    """
    Axis-aligned bounding box (AABB) overlap test.

    a, b are bounds: (x1, y1, z1, x2, y2, z2)

    Overlap exists only if they overlap on ALL 3 axes with positive volume.
    Touching faces/edges (ax2 == bx1) is NOT considered overlap.
    """
    ax1, ay1, az1, ax2, ay2, az2 = a
    bx1, by1, bz1, bx2, by2, bz2 = b

    return (
        (ax1 < bx2 - EPSILON and ax2 > bx1 + EPSILON)
        and (ay1 < by2 - EPSILON and ay2 > by1 + EPSILON)
        and (az1 < bz2 - EPSILON and az2 > bz1 + EPSILON)
    )


def center_bounds(x: float, y: float, z: float, width: float, length: float, height: float) -> Bounds:
    hw, hh, hl = width / 2, height / 2, length / 2
    return (x - hw, y - hh, z - hl, x + hw, y + hh, z + hl)


def placement_bounds(position: "Position", dims: "Dimensions") -> Bounds:
    return center_bounds(
        float(position.x), float(position.y), float(position.z),
        float(dims.width), float(dims.length), float(dims.height),
    )


def box_bounds(box: "Box") -> Bounds:
    return placement_bounds(box.position, box.dimensions)


def footprint_contains(box: "Box", x: float, z: float) -> bool:
    """Inclusive test of whether (x, z) lies on the box's footprint."""
    px, pz = float(box.position.x), float(box.position.z)
    return (
        px - box.width / 2 - EPSILON <= x <= px + box.width / 2 + EPSILON
        and pz - box.length / 2 - EPSILON <= z <= pz + box.length / 2 + EPSILON
    )


def is_within_container(container: "Container", position: "Position", dims: "Dimensions") -> bool:
    x1, y1, z1, x2, y2, z2 = placement_bounds(position, dims)
    half_w, half_l = container.width / 2, container.length / 2
    return (
        x1 >= -half_w - EPSILON and x2 <= half_w + EPSILON
        and z1 >= -half_l - EPSILON and z2 <= half_l + EPSILON
        and y1 >= -EPSILON and y2 <= container.height + EPSILON
    )


def is_valid_position(
    boxes: Iterable["Box"],
    container: "Container",
    position: "Position",
    dims: "Dimensions",
    exclude_id: Optional[str] = None,
) -> bool:
    """
    Check whether a box of ``dims`` centered at ``position`` may be committed:
    - inside container bounds
    - no strict overlap with any box in ``boxes`` other than ``exclude_id``
    """
    if not is_within_container(container, position, dims):
        return False

    candidate = placement_bounds(position, dims)
    for other in boxes:
        if other.id == exclude_id:
            continue
        if boxes_overlap(candidate, box_bounds(other)):
            return False

    return True


def top_surface_y(boxes: Iterable["Box"], x: float, z: float, exclude_id: Optional[str] = None) -> float:
    """Highest box top whose footprint contains (x, z); 0.0 (the floor) if none does."""
    top = 0.0
    for box in boxes:
        if box.id == exclude_id:
            continue
        if footprint_contains(box, x, z):
            top = max(top, box.top)
    return top


def box_below(
    boxes: Iterable["Box"],
    x: float,
    z: float,
    top_y: float,
    exclude_id: Optional[str] = None,
) -> Optional["Box"]:
    """The first box covering (x, z) whose top sits at ``top_y``."""
    for box in boxes:
        if box.id == exclude_id:
            continue
        if footprint_contains(box, x, z) and abs(box.top - top_y) < SURFACE_TOLERANCE:
            return box
    return None


def boxes_beneath(
    boxes: Iterable["Box"],
    position: "Position",
    dims: "Dimensions",
    exclude_id: Optional[str] = None,
) -> list["Box"]:
    """Boxes whose top face touches the candidate's bottom face over a positive area."""
    x1, y1, z1, x2, _, z2 = placement_bounds(position, dims)
    if y1 <= EPSILON:
        return []

    beneath = []
    for box in boxes:
        if box.id == exclude_id:
            continue
        bx1, _, bz1, bx2, _, bz2 = box_bounds(box)
        touching = abs(box.top - y1) <= EPSILON
        overlaps = x1 < bx2 - EPSILON and x2 > bx1 + EPSILON and z1 < bz2 - EPSILON and z2 > bz1 + EPSILON
        if touching and overlaps:
            beneath.append(box)
    return beneath


def rests_on_fragile(
    boxes: Iterable["Box"],
    position: "Position",
    dims: "Dimensions",
    exclude_id: Optional[str] = None,
) -> bool:
    return any(b.is_fragile for b in boxes_beneath(boxes, position, dims, exclude_id))
