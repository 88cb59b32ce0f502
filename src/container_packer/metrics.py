from __future__ import annotations

import math
from typing import Iterable

from container_packer.models import Box, Container


def compute_metrics(container: Container, boxes: Iterable[Box]) -> tuple[float, float, float]:
    used_volume = sum(box.volume for box in boxes)
    container_volume = container.volume
    fill_rate = 0.0 if container_volume == 0 else used_volume / container_volume
    return used_volume, container_volume, fill_rate


def utilization(boxes: Iterable[Box], container: Container) -> int:
    """Volumetric fill as a whole percentage, rounded half up and kept within [0, 100]."""
    _, _, fill_rate = compute_metrics(container, boxes)
    return max(0, min(100, int(math.floor(fill_rate * 100 + 0.5))))
