"""Runtime settings; loads .env locally via python-dotenv."""

from __future__ import annotations

import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

from container_packer.containers import CONTAINER_PRESETS_M

# Load .env only when present (e.g. local dev); does not override existing env
load_dotenv()


class Settings(BaseModel):
    """Engine tunables. Defaults reproduce the reference layouts."""

    scan_step: float = Field(default=0.1, gt=0, description="Raster step of the placement search (m)")
    snap_grid: float = Field(default=0.1, gt=0, description="Grid for dragged boxes (m)")
    row_pitch: float = Field(default=0.6, gt=0, description="Inward step between auto-arrange rows (m)")
    wall_margin: float = Field(default=0.1, ge=0, description="Gap kept from the walls by auto-arrange (m)")
    default_container: str = Field(default="20ft")
    log_level: str = Field(default="INFO")

    @field_validator("default_container")
    @classmethod
    def _known_container(cls, value: str) -> str:
        key = value.strip().lower()
        if key not in CONTAINER_PRESETS_M:
            raise ValueError(f"unknown container preset '{value}'")
        return key

    @field_validator("log_level")
    @classmethod
    def _upper(cls, value: str) -> str:
        return value.strip().upper()


_ENV_KEYS = {
    "scan_step": "PACKER_SCAN_STEP",
    "snap_grid": "PACKER_SNAP_GRID",
    "row_pitch": "PACKER_ROW_PITCH",
    "wall_margin": "PACKER_WALL_MARGIN",
    "default_container": "PACKER_DEFAULT_CONTAINER",
    "log_level": "PACKER_LOG_LEVEL",
}


def load_settings() -> Settings:
    """Build Settings from PACKER_* environment variables; unset keys keep defaults."""
    values = {field: os.getenv(env) for field, env in _ENV_KEYS.items()}
    return Settings(**{k: v for k, v in values.items() if v not in (None, "")})
