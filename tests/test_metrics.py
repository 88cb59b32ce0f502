from __future__ import annotations

import pytest

from container_packer.containers import get_container
from container_packer.metrics import compute_metrics, utilization
from container_packer.models import Box, Container, Dimensions, Position


def make_box(box_id, w, l, h):
    return Box(
        id=box_id,
        dimensions=Dimensions(width=w, length=l, height=h),
        position=Position(x=0, y=h / 2, z=0),
    )


def test_utilization_empty_is_zero() -> None:
    assert utilization([], get_container("20ft")) == 0


def test_utilization_rounds_to_whole_percent() -> None:
    container = Container(dimensions=Dimensions(width=2, length=5, height=2))

    assert utilization([make_box("A", 1, 1, 1)], container) == 5
    assert utilization([make_box("A", 1, 1, 0.5)], container) == 3  # 2.5 rounds half up
    assert utilization([make_box("A", 2, 5, 2)], container) == 100


def test_utilization_is_clamped() -> None:
    container = Container(dimensions=Dimensions(width=1, length=1, height=1))
    boxes = [make_box("A", 1, 1, 1), make_box("B", 1, 1, 1)]

    assert utilization(boxes, container) == 100


def test_compute_metrics() -> None:
    container = Container(dimensions=Dimensions(width=2, length=5, height=2))

    used, volume, fill = compute_metrics(container, [make_box("A", 1, 2, 1), make_box("B", 1, 1, 1)])

    assert used == pytest.approx(3.0)
    assert volume == pytest.approx(20.0)
    assert fill == pytest.approx(0.15)
