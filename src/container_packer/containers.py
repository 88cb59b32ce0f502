# src/container_packer/containers.py
from __future__ import annotations

from container_packer.errors import UnknownContainerError
from container_packer.models import Container, Dimensions

# Interior dims (meters): width x length x height.
CONTAINER_PRESETS_M: dict[str, dict[str, float]] = {
    "20ft":    {"width": 2.35, "length": 5.90,  "height": 2.39},
    "40ft":    {"width": 2.35, "length": 12.03, "height": 2.39},
    "20ft-hc": {"width": 2.33, "length": 5.891, "height": 2.70},
    "40ft-hc": {"width": 2.35, "length": 12.032, "height": 2.70},
}

COLORS: list[str] = [
    "#FF6B6B", "#4ECDC4", "#45B7D1", "#96CEB4", "#FFEAA7",
    "#DDA0DD", "#98D8C8", "#F7DC6F", "#BB8FCE", "#85C1E9",
]


def get_container_dims(preset: str) -> dict[str, float]:
    key = preset.strip().lower()
    if key not in CONTAINER_PRESETS_M:
        raise UnknownContainerError(
            f"Unknown container preset '{preset}'. Valid: {sorted(CONTAINER_PRESETS_M.keys())}"
        )
    return CONTAINER_PRESETS_M[key]


def get_container(preset: str) -> Container:
    dims = get_container_dims(preset)
    return Container(name=preset.strip().lower(), dimensions=Dimensions(**dims))


def color_for(index: int) -> str:
    """Round-robin palette colour for the index-th box created."""
    return COLORS[index % len(COLORS)]
