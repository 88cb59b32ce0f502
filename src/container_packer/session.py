"""Packing session: the one mutable owner of a container view's box set.

Every operation computes a complete new tuple of boxes before assigning it, so
a reader never observes a half-updated set.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Optional

from container_packer.config import Settings
from container_packer.containers import color_for, get_container
from container_packer.errors import NoSpaceError, UnknownBoxError
from container_packer.geometry import is_valid_position
from container_packer.metrics import utilization
from container_packer.models import Box, Container, Ray
from container_packer.packing.constraints import check_layout, validate_dimensions
from container_packer.packing.first_fit import find_position, new_box_id
from container_packer.packing.heuristics import rearrange
from container_packer.packing.interactive import apply_drag

logger = logging.getLogger(__name__)


class PackingSession:
    def __init__(
        self,
        container: Optional[Container] = None,
        boxes: Iterable[Box] = (),
        settings: Optional[Settings] = None,
    ):
        self.settings = settings or Settings()
        self.container = container or get_container(self.settings.default_container)
        self.boxes: tuple[Box, ...] = tuple(boxes)
        self.selected_box_id: Optional[str] = None

    def get_box(self, box_id: str) -> Box:
        for box in self.boxes:
            if box.id == box_id:
                return box
        raise UnknownBoxError(box_id)

    def _replace(self, box_id: str, **update: Any) -> None:
        self.boxes = tuple(
            b.model_copy(update=update) if b.id == box_id else b for b in self.boxes
        )

    def add_box(self, width: Any, length: Any, height: Any, is_fragile: bool = False) -> Box:
        """
        Validate raw dimensions, search a legal spot and append a locked box.

        Raises:
            InvalidDimensionsError, ExceedsContainerError: before any search runs
            NoSpaceError: the search found nothing; the box set is unchanged
        """
        dims = validate_dimensions(width, length, height, self.container)
        position = find_position(
            self.boxes, self.container, dims.width, dims.length, dims.height, is_fragile,
            step=self.settings.scan_step,
        )
        if position is None:
            raise NoSpaceError(
                "Cannot fit this box in the remaining container space. "
                "Try smaller dimensions or remove some boxes."
            )

        box = Box(
            id=new_box_id(),
            dimensions=dims,
            position=position,
            is_fragile=bool(is_fragile),
            is_locked=True,
            color=color_for(len(self.boxes)),
        )
        self.boxes = self.boxes + (box,)
        logger.info(
            f"add_box: id={box.id} dims={dims.width}x{dims.length}x{dims.height} "
            f"fragile={box.is_fragile} at ({position.x}, {position.y}, {position.z})"
        )
        return box

    def remove_box(self, box_id: str) -> None:
        self.get_box(box_id)
        self.boxes = tuple(b for b in self.boxes if b.id != box_id)
        if self.selected_box_id == box_id:
            self.selected_box_id = None
        logger.info(f"remove_box: id={box_id}, {len(self.boxes)} boxes left")

    def auto_arrange(self) -> tuple[Box, ...]:
        """Repack all boxes; on NoSpaceError the previous layout is kept."""
        arranged = rearrange(
            self.boxes,
            self.container,
            row_pitch=self.settings.row_pitch,
            wall_margin=self.settings.wall_margin,
            step=self.settings.scan_step,
        )
        self.boxes = tuple(arranged)
        self.selected_box_id = None
        logger.info(f"auto_arrange: {len(self.boxes)} boxes, utilization={self.utilization()}%")
        return self.boxes

    def start_editing(self, box_id: str) -> Box:
        """Unlock and select a box so it can be dragged; a previous selection is locked again."""
        self.get_box(box_id)
        if self.selected_box_id is not None and self.selected_box_id != box_id:
            self.finish_editing()
        self._replace(box_id, is_locked=False)
        self.selected_box_id = box_id
        return self.get_box(box_id)

    def finish_editing(self) -> None:
        if self.selected_box_id is None:
            return
        self._replace(self.selected_box_id, is_locked=True)
        self.selected_box_id = None

    def toggle_lock(self, box_id: str) -> Box:
        box = self.get_box(box_id)
        self._replace(box_id, is_locked=not box.is_locked)
        return self.get_box(box_id)

    def update_dragged_box(self, box_id: str, ray: Ray) -> bool:
        """
        One pointer-move step for an unlocked box.

        Returns:
            True if a new position was committed, False if the step was rejected
        """
        box = self.get_box(box_id)
        if box.is_locked:
            return False

        boxes, committed = apply_drag(self.boxes, self.container, box_id, ray, grid=self.settings.snap_grid)
        if committed:
            self.boxes = tuple(boxes)
        return committed

    def set_container_type(self, preset: str) -> list[str]:
        return self.set_container(get_container(preset))

    def set_container(self, container: Container) -> list[str]:
        """
        Switch container and re-validate every box.

        A box that no longer fits is searched a new spot; when there is none it
        keeps its position and is flagged invalid. Boxes are never dropped.

        Returns:
            Ids of the boxes left flagged invalid
        """
        working = list(self.boxes)
        invalid: list[str] = []

        for i, box in enumerate(working):
            others = working[:i] + working[i + 1:]
            if is_valid_position(others, container, box.position, box.dimensions):
                if not box.is_valid:
                    working[i] = box.model_copy(update={"is_valid": True})
                continue

            position = find_position(
                others, container, box.width, box.length, box.height, box.is_fragile,
                step=self.settings.scan_step,
            )
            if position is not None:
                working[i] = box.model_copy(update={"position": position, "is_valid": True})
            else:
                working[i] = box.model_copy(update={"is_valid": False})
                invalid.append(box.id)

        self.container = container
        self.boxes = tuple(working)
        if invalid:
            logger.warning(f"set_container: {len(invalid)} boxes do not fit {container.name}: {invalid}")
        logger.info(f"set_container: now {container.name} with {len(self.boxes)} boxes")
        return invalid

    def utilization(self) -> int:
        return utilization(self.boxes, self.container)

    def invalid_box_ids(self) -> list[str]:
        return [b.id for b in self.boxes if not b.is_valid]

    def violations(self) -> list[str]:
        return check_layout(self.boxes, self.container)

    def to_dict(self) -> dict[str, Any]:
        return {
            "container": self.container.model_dump(),
            "boxes": [b.model_dump() for b in self.boxes],
            "selected_box_id": self.selected_box_id,
            "utilization": self.utilization(),
        }
