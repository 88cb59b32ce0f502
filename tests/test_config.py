from __future__ import annotations

import pytest
from pydantic import ValidationError

from container_packer.config import Settings, load_settings


def test_defaults(monkeypatch) -> None:
    for key in ("PACKER_SCAN_STEP", "PACKER_SNAP_GRID", "PACKER_ROW_PITCH",
                "PACKER_WALL_MARGIN", "PACKER_DEFAULT_CONTAINER", "PACKER_LOG_LEVEL"):
        monkeypatch.delenv(key, raising=False)

    settings = load_settings()

    assert settings == Settings()
    assert settings.scan_step == 0.1
    assert settings.row_pitch == 0.6
    assert settings.default_container == "20ft"


def test_environment_overrides(monkeypatch) -> None:
    monkeypatch.setenv("PACKER_SCAN_STEP", "0.05")
    monkeypatch.setenv("PACKER_DEFAULT_CONTAINER", " 40FT ")
    monkeypatch.setenv("PACKER_LOG_LEVEL", "debug")

    settings = load_settings()

    assert settings.scan_step == 0.05
    assert settings.default_container == "40ft"
    assert settings.log_level == "DEBUG"


def test_invalid_values_raise(monkeypatch) -> None:
    monkeypatch.setenv("PACKER_ROW_PITCH", "-1")

    with pytest.raises(ValidationError):
        load_settings()


def test_unknown_default_container() -> None:
    with pytest.raises(ValidationError):
        Settings(default_container="53ft")
