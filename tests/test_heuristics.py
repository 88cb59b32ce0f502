from __future__ import annotations

import pytest

from container_packer.containers import get_container
from container_packer.errors import NoSpaceError
from container_packer.models import Box, BoxRequest, Container, Dimensions, Position
from container_packer.packing.constraints import check_layout
from container_packer.packing.first_fit import pack_boxes
from container_packer.packing.heuristics import best_fragile_support, rearrange


def make_box(box_id, x, y, z, w=1.0, l=1.0, h=1.0, fragile=False, locked=True):
    return Box(
        id=box_id,
        dimensions=Dimensions(width=w, length=l, height=h),
        position=Position(x=x, y=y, z=z),
        is_fragile=fragile,
        is_locked=locked,
    )


def test_fragile_box_goes_on_top_of_durable_box() -> None:
    """One durable and one fragile 1 m cube in a 20 ft container."""
    container = get_container("20ft")
    durable = make_box("N", -0.675, 0.5, -2.45)
    fragile = make_box("F", 0.325, 0.5, -2.45, fragile=True)

    arranged = {b.id: b for b in rearrange([durable, fragile], container)}

    # Driver wall at x = +1.175, far wall at z = -2.95, both with a 0.1 m margin
    assert arranged["N"].position == Position(x=0.575, y=0.5, z=-2.35)
    assert arranged["F"].position.y == pytest.approx(arranged["N"].top + 0.5)
    assert arranged["F"].position.x == pytest.approx(0.575)
    assert arranged["F"].position.z == pytest.approx(-2.35)


def test_rearrange_keeps_input_order_and_locks_everything() -> None:
    container = get_container("20ft")
    boxes = [
        make_box("A", 0, 0.5, 0, locked=False),
        make_box("B", 0, 0.25, 2, h=0.5),
        make_box("C", -0.5, 0.4, -2, h=0.8, fragile=True),
    ]

    arranged = rearrange(boxes, container)

    assert [b.id for b in arranged] == ["A", "B", "C"]
    assert all(b.is_locked for b in arranged)
    assert all(b.is_valid for b in arranged)
    assert boxes[0].is_locked is False


def test_durable_rows_shortest_first_along_z() -> None:
    container = get_container("20ft")
    boxes = [
        make_box("tall", 0, 0.45, 0, w=0.5, l=0.5, h=0.9),
        make_box("short", 0, 0.15, 1, w=0.5, l=0.5, h=0.3),
    ]

    arranged = {b.id: b for b in rearrange(boxes, container)}

    assert arranged["short"].position == Position(x=0.825, y=0.15, z=-2.6)
    assert arranged["tall"].position == Position(x=0.825, y=0.45, z=-2.1)


def test_full_row_steps_inward_by_row_pitch() -> None:
    container = Container(name="short", dimensions=Dimensions(width=2.35, length=2.2, height=2.39))
    boxes = [make_box(f"B{i}", 0, 0.25, 0, w=0.5, l=1.0, h=0.5) for i in range(3)]

    arranged = rearrange(boxes, container)

    # Two boxes fill the first 2 m row (1.0 + 1.0 from z = -1.0); the third opens a new row.
    assert arranged[0].position == Position(x=0.825, y=0.25, z=-0.5)
    assert arranged[1].position == Position(x=0.825, y=0.25, z=0.5)
    assert arranged[2].position == Position(x=0.225, y=0.25, z=-0.5)


def test_fragile_without_support_goes_to_opposite_wall() -> None:
    container = get_container("20ft")
    boxes = [
        make_box("N", 0, 0.25, 0, w=0.5, l=0.5, h=0.5),
        make_box("F", 1, 0.5, 1, w=1.0, l=1.0, h=1.0, fragile=True),
    ]

    arranged = {b.id: b for b in rearrange(boxes, container)}

    # Wider than its only possible support, so it lands on the floor at x = -1.175 + 0.1
    assert arranged["F"].position == Position(x=-0.575, y=0.5, z=-2.35)


def test_best_fragile_support_prefers_highest_stack() -> None:
    container = get_container("20ft")
    placed = [
        make_box("low", 0.5, 0.25, -2, h=0.5),
        make_box("high", -0.5, 0.5, -2, h=1.0),
    ]
    fragile = make_box("F", 0, 0.25, 2, w=0.8, l=0.8, h=0.5, fragile=True)

    best = best_fragile_support(placed, container, fragile)

    assert best == Position(x=-0.5, y=1.25, z=-2)


def test_fragile_boxes_never_stack_on_each_other() -> None:
    container = get_container("20ft")
    result = pack_boxes(container, [
        BoxRequest(width=1, length=1, height=1),
        BoxRequest(width=0.8, length=0.8, height=0.5, is_fragile=True),
        BoxRequest(width=0.6, length=0.6, height=0.4, is_fragile=True),
        BoxRequest(width=0.9, length=0.9, height=0.6, is_fragile=True),
    ])

    arranged = rearrange(result.placements, container)

    assert check_layout(arranged, container) == []


def test_rearrange_many_boxes_keeps_invariants() -> None:
    """Rows run out across the width; the remainder is stacked or fitted elsewhere."""
    container = get_container("20ft")
    requests = [
        BoxRequest(width=0.8, length=1.2, height=0.6 + (i % 3) * 0.2, is_fragile=(i % 4 == 0))
        for i in range(16)
    ]
    result = pack_boxes(container, requests)

    arranged = rearrange(result.placements, container)

    assert len(arranged) == len(result.placements)
    assert check_layout(arranged, container) == []


def test_rearrange_without_room_raises() -> None:
    container = Container(name="tiny", dimensions=Dimensions(width=1, length=1, height=1))
    # Two boxes that cannot both fit: this set was never legal to begin with
    boxes = [make_box("A", 0, 0.5, 0), make_box("B", 0, 0.5, 0)]

    with pytest.raises(NoSpaceError):
        rearrange(boxes, container)


def test_rearrange_empty() -> None:
    assert rearrange([], get_container("40ft")) == []


def test_rearrange_is_deterministic() -> None:
    container = get_container("20ft")
    boxes = [
        make_box("A", 0, 0.5, 0),
        make_box("B", 0, 0.25, 2, h=0.5),
        make_box("C", -0.5, 0.4, -2, h=0.8, fragile=True),
    ]

    assert rearrange(boxes, container) == rearrange(boxes, container)


def test_rearrange_keeps_boxes_sharing_an_id() -> None:
    container = get_container("20ft")
    boxes = [make_box("A", -0.5, 0.5, 0), make_box("A", 0.5, 0.5, 0)]

    arranged = rearrange(boxes, container)

    assert len(arranged) == 2
    assert arranged[0].position != arranged[1].position
    assert check_layout(arranged, container) == []
