from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Any

from container_packer.config import load_settings
from container_packer.containers import get_container
from container_packer.models import BoxRequest, Container, Dimensions
from container_packer.packing.constraints import check_layout
from container_packer.packing.first_fit import pack_boxes
from container_packer.packing.heuristics import rearrange
from container_packer.metrics import utilization

logger = logging.getLogger(__name__)


def load_input(path: Path) -> tuple[Container, list[BoxRequest], dict[str, Any]]:
    data = json.loads(path.read_text())

    # Load dimensions from preset OR explicit container
    if "container_preset" in data:
        container = get_container(data["container_preset"])
        logger.info(f"Using container preset: {container.name} -> {container.dimensions}")
    elif "container" in data:
        container = Container(name="custom", dimensions=Dimensions(**data["container"]))
    else:
        raise ValueError("Input must include either 'container_preset' or 'container'")

    requests = []
    for b in data.get("boxes", []):
        quantity = int(b.get("quantity", 1))
        for i in range(quantity):
            label = b.get("id")
            if label and quantity > 1:
                label = f"{label}_{i + 1:04d}"
            requests.append(BoxRequest(
                width=b["width"],
                length=b["length"],
                height=b["height"],
                is_fragile=bool(b.get("is_fragile", False)),
                label=label,
            ))

    return container, requests, data


def write_plan(plan: dict[str, Any], output_path: str | Path) -> None:
    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(plan, f, indent=2, sort_keys=True)


def build_plan(container: Container, requests: list[BoxRequest], mode: str = "add", step: float = 0.1,
               row_pitch: float = 0.6, wall_margin: float = 0.1) -> dict[str, Any]:
    """
    Place every request with first-fit, then optionally auto-arrange the result.

    Returns:
        Plan dict with container, boxes, unpacked, utilization and violations
    """
    result = pack_boxes(container, requests, step=step)
    boxes = result.placements
    if mode == "arrange" and boxes:
        boxes = rearrange(boxes, container, row_pitch=row_pitch, wall_margin=wall_margin, step=step)

    return {
        "container": container.model_dump(),
        "boxes": [b.model_dump() for b in boxes],
        "unpacked": [r.model_dump() for r in result.unpacked],
        "utilization": utilization(boxes, container),
        "violations": check_layout(boxes, container),
    }


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Container Packer CLI")
    parser.add_argument("--input", required=True, help="Input shipment JSON file")
    parser.add_argument("--output", required=True, help="Output plan JSON file")
    parser.add_argument(
        "--mode",
        choices=["add", "arrange"],
        default="add",
        help="add = first-fit in input order, arrange = first-fit then auto-arrange",
    )
    args = parser.parse_args(argv)

    settings = load_settings()
    logging.basicConfig(level=settings.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    container, requests, _ = load_input(Path(args.input))
    plan = build_plan(
        container,
        requests,
        mode=args.mode,
        step=settings.scan_step,
        row_pitch=settings.row_pitch,
        wall_margin=settings.wall_margin,
    )
    write_plan(plan, args.output)

    logger.info(
        f"placed={len(plan['boxes'])}, unpacked={len(plan['unpacked'])}, "
        f"utilization={plan['utilization']}%"
    )
    print(json.dumps({k: plan[k] for k in ("utilization", "violations")}, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
