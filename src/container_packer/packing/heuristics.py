"""Auto-arrange heuristic: driver-side rows for durable cargo, fragile cargo on top."""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from container_packer.errors import NoSpaceError
from container_packer.geometry import EPSILON, is_valid_position
from container_packer.models import Box, Container, Position
from container_packer.packing.first_fit import COORD_DECIMALS, SCAN_STEP, find_position

logger = logging.getLogger(__name__)

ROW_PITCH = 0.6
WALL_MARGIN = 0.1


def _settle(box: Box, position: Position) -> Box:
    return box.model_copy(update={"position": position, "is_locked": True, "is_valid": True})


def _at(x: float, y: float, z: float) -> Position:
    return Position(
        x=round(x, COORD_DECIMALS),
        y=round(y, COORD_DECIMALS),
        z=round(z, COORD_DECIMALS),
    )


def _fallback(placed: list[Box], container: Container, box: Box, step: float) -> Position:
    position = find_position(placed, container, box.width, box.length, box.height, box.is_fragile, step=step)
    if position is None:
        raise NoSpaceError(f"Cannot arrange box {box.id}: no space left in {container.name}")
    logger.debug(f"rearrange: box {box.id} placed by first-fit fallback at {position}")
    return position


def best_fragile_support(placed: Sequence[Box], container: Container, fragile: Box) -> Optional[Position]:
    """
    Highest legal spot centered on top of a non-fragile box.

    A support qualifies when the stack stays under the roof, the fragile
    footprint fits within the support footprint and the spot is free.
    """
    best: Optional[Position] = None
    for support in placed:
        if support.is_fragile:
            continue
        stack_y = support.top + fragile.height / 2
        if stack_y + fragile.height / 2 > container.height + EPSILON:
            continue
        if fragile.width > support.width + EPSILON or fragile.length > support.length + EPSILON:
            continue

        candidate = _at(support.position.x, stack_y, support.position.z)
        if not is_valid_position(placed, container, candidate, fragile.dimensions):
            continue
        if best is None or candidate.y > best.y:
            best = candidate
    return best


def rearrange(
    boxes: Sequence[Box],
    container: Container,
    row_pitch: float = ROW_PITCH,
    wall_margin: float = WALL_MARGIN,
    step: float = SCAN_STEP,
) -> list[Box]:
    """
    Repack every box into a compact, fragility-aware layout.

    1) Non-fragile boxes, shortest first, go on the floor in rows along z
       starting at the driver wall (x = +width/2); a full row steps x inward
       by ``row_pitch``.
    2) Fragile boxes, shortest first, stack on the non-fragile box giving the
       highest legal stack, else go on the floor against the opposite wall.
    3) Any heuristic spot that is not legal (rows exhausted, boxes wider than
       the pitch) is replaced by a first-fit search over the boxes placed so
       far, which also opens higher layers.

    Returns:
        A new list in the input order, all boxes locked

    Raises:
        NoSpaceError: some box has no legal position at all; nothing is changed
    """
    half_w, half_l = container.width / 2, container.length / 2
    start_x = half_w - wall_margin
    start_z = -half_l + wall_margin

    # Indices into boxes, so the output order never depends on ids
    durable = sorted((i for i, b in enumerate(boxes) if not b.is_fragile), key=lambda i: boxes[i].height)
    fragile = sorted((i for i, b in enumerate(boxes) if b.is_fragile), key=lambda i: boxes[i].height)

    placed: list[Box] = []
    arranged: dict[int, Box] = {}

    # First, non-fragile boxes from the driver side
    current_x, current_z = start_x, start_z
    for index in durable:
        box = boxes[index]
        if current_z + box.length > half_l + EPSILON:
            current_x -= row_pitch
            current_z = start_z
            if current_x - box.width < -half_w - EPSILON:
                # Out of rows; the overlap check below sends these to first-fit
                current_x = start_x

        candidate = _at(current_x - box.width / 2, box.height / 2, current_z + box.length / 2)
        if is_valid_position(placed, container, candidate, box.dimensions):
            current_z += box.length
        else:
            candidate = _fallback(placed, container, box, step)
        placed.append(_settle(box, candidate))
        arranged[index] = placed[-1]

    # Second, fragile boxes: on top of durable cargo, or the opposite wall
    opposite_x = -half_w + wall_margin
    fragile_z = start_z
    for index in fragile:
        box = boxes[index]
        candidate = best_fragile_support(placed, container, box)

        if candidate is None:
            if fragile_z + box.length > half_l + EPSILON:
                fragile_z = start_z
            candidate = _at(opposite_x + box.width / 2, box.height / 2, fragile_z + box.length / 2)
            if is_valid_position(placed, container, candidate, box.dimensions):
                fragile_z += box.length
            else:
                candidate = _fallback(placed, container, box, step)
        placed.append(_settle(box, candidate))
        arranged[index] = placed[-1]

    logger.info(
        f"rearrange: {len(durable)} non-fragile, {len(fragile)} fragile boxes in {container.name}"
    )

    return [arranged[i] for i in range(len(boxes))]
