# src/container_packer/packing/first_fit.py

from __future__ import annotations

import logging
import math
import uuid
from typing import Iterable, Optional, Sequence

from container_packer.containers import color_for
from container_packer.errors import PackingError
from container_packer.geometry import EPSILON, boxes_beneath, is_valid_position
from container_packer.metrics import compute_metrics
from container_packer.models import Box, BoxRequest, Container, Dimensions, PackingResult, Position
from container_packer.packing.constraints import validate_dimensions

logger = logging.getLogger(__name__)

SCAN_STEP = 0.1
COORD_DECIMALS = 6


def new_box_id() -> str:
    return str(uuid.uuid4())


def scan_offsets(container_extent: float, box_extent: float, step: float) -> list[float]:
    """
    Lower-edge offsets of the raster along one axis.

    Covers ``-extent/2 + i*step`` for every i >= 0 that keeps the box inside,
    including the last cell when it lands exactly on the far wall.
    """
    span = container_extent - box_extent
    if span < -EPSILON:
        return []
    count = int(math.floor(max(span, 0.0) / step + EPSILON)) + 1
    start = -container_extent / 2
    return [start + i * step for i in range(count)]


def generate_candidate_levels(
    boxes: Iterable[Box],
    container: Container,
    height: float,
    is_fragile: bool = False,
) -> list[float]:
    """
    Candidate base heights for a new box:
      start with the floor,
      add each box top that leaves room for ``height`` under the roof,
      never the top of a fragile box when the new box is fragile.
    Sorted ascending so the floor is filled before stacking.
    """
    levels = [0.0]
    for box in boxes:
        if box.top + height > container.height + EPSILON:
            continue
        if is_fragile and box.is_fragile:
            continue
        top = round(box.top, COORD_DECIMALS)
        if all(abs(top - level) > EPSILON for level in levels):
            levels.append(top)
    return sorted(levels)


def find_position(
    boxes: Sequence[Box],
    container: Container,
    width: float,
    length: float,
    height: float,
    is_fragile: bool = False,
    step: float = SCAN_STEP,
) -> Optional[Position]:
    """
    First-fit search for a legal center position.

    Order is lowest level, then lowest z, then lowest x; the first cell that
    passes the spatial validator wins, so repeated calls with the same input
    return the same position. Above the floor a cell only counts when some box
    top touches the new box bottom within its footprint, so a box may bridge
    two supports. A fragile box never rests on another fragile box.

    Returns:
        The position, or None when no level/cell combination is legal
    """
    boxes = list(boxes)
    dims = Dimensions(width=width, length=length, height=height)
    xs = scan_offsets(container.width, width, step)
    zs = scan_offsets(container.length, length, step)

    for base_y in generate_candidate_levels(boxes, container, height, is_fragile):
        box_y = round(base_y + height / 2, COORD_DECIMALS)
        if box_y + height / 2 > container.height + EPSILON:
            continue

        for z0 in zs:
            center_z = round(z0 + length / 2, COORD_DECIMALS)
            for x0 in xs:
                center_x = round(x0 + width / 2, COORD_DECIMALS)

                candidate = Position(x=center_x, y=box_y, z=center_z)
                if not is_valid_position(boxes, container, candidate, dims):
                    continue

                if base_y > 0:
                    beneath = boxes_beneath(boxes, candidate, dims)
                    if not beneath:
                        continue
                    if is_fragile and any(b.is_fragile for b in beneath):
                        continue

                logger.debug(f"find_position: {width}x{length}x{height} -> ({center_x}, {box_y}, {center_z})")
                return candidate

    logger.debug(f"find_position: no space for {width}x{length}x{height} fragile={is_fragile}")
    return None


def pack_boxes(
    container: Container,
    requests: Iterable[BoxRequest],
    boxes: Sequence[Box] = (),
    step: float = SCAN_STEP,
) -> PackingResult:
    """
    Place a batch of requests one after another, in input order.
    - Each request goes through dimension validation then find_position
    - A request that is invalid or finds no space lands in ``unpacked``
    - Already placed ``boxes`` are kept and count towards the metrics
    - A label becomes the box id unless that id is taken, then a fresh one is used
    """
    placed: list[Box] = list(boxes)
    used_ids = {b.id for b in placed}
    unpacked: list[BoxRequest] = []

    for request in requests:
        try:
            dims = validate_dimensions(request.width, request.length, request.height, container)
        except PackingError as e:
            logger.info(f"Request {request.label or '?'} rejected: {e}")
            unpacked.append(request)
            continue

        position = find_position(
            placed, container, dims.width, dims.length, dims.height, request.is_fragile, step=step
        )
        if position is None:
            unpacked.append(request)
            continue

        box_id = request.label if request.label and request.label not in used_ids else new_box_id()
        if request.label and box_id != request.label:
            logger.warning(f"Duplicate box id {request.label}; placed as {box_id}")
        used_ids.add(box_id)
        placed.append(Box(
            id=box_id,
            dimensions=dims,
            position=position,
            is_fragile=request.is_fragile,
            color=color_for(len(placed)),
        ))

    used_volume, container_volume, fill_rate = compute_metrics(container, placed)

    return PackingResult(
        placements=placed,
        unpacked=unpacked,
        used_volume=used_volume,
        container_volume=container_volume,
        fill_rate=fill_rate,
    )
