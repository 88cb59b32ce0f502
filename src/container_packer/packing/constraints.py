"""Constraints for packing: input dimension checks and layout invariants."""

from __future__ import annotations

import math
from typing import Any, Sequence

from container_packer.errors import ExceedsContainerError, InvalidDimensionsError
from container_packer.geometry import box_bounds, boxes_beneath, boxes_overlap, is_within_container
from container_packer.models import Box, Container, Dimensions


def _as_dimension(name: str, value: Any) -> float:
    if isinstance(value, bool):
        raise InvalidDimensionsError(f"{name} must be a number, got {value!r}")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InvalidDimensionsError(f"{name} must be a number, got {value!r}") from None
    if not math.isfinite(number) or number <= 0:
        raise InvalidDimensionsError(f"{name} must be a finite positive number, got {value!r}")
    return number


def validate_dimensions(width: Any, length: Any, height: Any, container: Container) -> Dimensions:
    """
    Coerce raw box dimensions and check them against the container.

    Raises:
        InvalidDimensionsError: non-numeric, non-finite or <= 0
        ExceedsContainerError: larger than the container on any axis
    """
    w = _as_dimension("width", width)
    l = _as_dimension("length", length)
    h = _as_dimension("height", height)

    if w > container.width or l > container.length or h > container.height:
        raise ExceedsContainerError(
            f"Box dimensions exceed container limits: "
            f"{container.width}m x {container.length}m x {container.height}m"
        )
    return Dimensions(width=w, length=l, height=h)


class Constraint:
    """Base class for layout constraints."""

    name = "constraint"

    def violations(self, boxes: Sequence[Box], container: Container) -> list[str]:
        """
        Describe every place the box set breaks this constraint.

        Args:
            boxes: Committed box set
            container: Container the boxes live in

        Returns:
            Human readable messages, empty when the constraint holds
        """
        raise NotImplementedError

    def check(self, boxes: Sequence[Box], container: Container) -> bool:
        return not self.violations(boxes, container)


class ContainmentConstraint(Constraint):
    """Every box lies fully inside the container."""

    name = "containment"

    def violations(self, boxes: Sequence[Box], container: Container) -> list[str]:
        return [
            f"box {box.id} is outside the container"
            for box in boxes
            if not is_within_container(container, box.position, box.dimensions)
        ]


class NoOverlapConstraint(Constraint):
    """No two boxes share positive volume."""

    name = "no-overlap"

    def violations(self, boxes: Sequence[Box], container: Container) -> list[str]:
        out = []
        bounds = [box_bounds(b) for b in boxes]
        for i in range(len(boxes)):
            for j in range(i + 1, len(boxes)):
                if boxes_overlap(bounds[i], bounds[j]):
                    out.append(f"box {boxes[i].id} overlaps box {boxes[j].id}")
        return out


class FragilityConstraint(Constraint):
    """A fragile box never rests directly on another fragile box."""

    name = "fragility"

    def violations(self, boxes: Sequence[Box], container: Container) -> list[str]:
        out = []
        for box in boxes:
            if not box.is_fragile:
                continue
            for below in boxes_beneath(boxes, box.position, box.dimensions, exclude_id=box.id):
                if below.is_fragile:
                    out.append(f"fragile box {box.id} rests on fragile box {below.id}")
        return out


DEFAULT_CONSTRAINTS: tuple[Constraint, ...] = (
    ContainmentConstraint(),
    NoOverlapConstraint(),
    FragilityConstraint(),
)


def check_layout(
    boxes: Sequence[Box],
    container: Container,
    constraints: Sequence[Constraint] = DEFAULT_CONSTRAINTS,
) -> list[str]:
    """All invariant violations of a box set; empty for a legal layout."""
    boxes = list(boxes)
    out: list[str] = []
    for constraint in constraints:
        out.extend(constraint.violations(boxes, container))
    return out
