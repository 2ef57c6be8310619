# src/gischeck/config/settings.py
"""
Application settings (Pydantic).

Settings are loaded from `src/gischeck/config/defaults.yaml`, then optionally overridden by:
- an external YAML file via `GISCHECK_CONFIG_PATH`
- environment variables (e.g., `GISCHECK_LOG_LEVEL`)

Design rule:
- Timeouts and tolerances live in YAML, not hard-coded in wait/assert helpers.
"""

from __future__ import annotations

import os
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, model_validator

from gischeck.core.env import load_dotenv_if_present, resolve_project_path


def _read_package_yaml(filename: str) -> dict[str, Any]:
    """Read a YAML file packaged inside `gischeck.config`."""
    text = resources.files("gischeck.config").joinpath(filename).read_text(encoding="utf-8")
    data = yaml.safe_load(text) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid YAML root object for {filename}; expected a mapping.")
    return data


def _read_yaml_file(path: str | Path) -> dict[str, Any]:
    """Read a YAML file from disk and return its mapping root."""
    data = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid YAML root object for {path}; expected a mapping.")
    return data


class AppSettings(BaseModel):
    name: str = "gischeck"
    log_level: str = "INFO"


class CoordinatePrecision(BaseModel):
    default: int = Field(4, ge=0, le=15)
    high: int = Field(6, ge=0, le=15)
    ultra_high: int = Field(8, ge=0, le=15)


class GeoSettings(BaseModel):
    earth_radius_km: float = Field(6371.0, gt=0)
    coordinate_precision: CoordinatePrecision = Field(default_factory=CoordinatePrecision)


class MapSettings(BaseModel):
    # Name of the Leaflet map instance on `window`.
    global_name: str = "map"
    tile_selector: str = ".leaflet-tile"


class TimeoutSettings(BaseModel):
    """Per-operation wait budgets in milliseconds."""

    map_load: int = Field(30000, ge=0)
    zoom_operation: int = Field(5000, ge=0)
    tile_load: int = Field(15000, ge=0)
    layer_switch: int = Field(5000, ge=0)
    pan_operation: int = Field(3000, ge=0)
    animation_settle: int = Field(2000, ge=0)


class PollingSettings(BaseModel):
    default_timeout_ms: int = Field(5000, ge=0)
    interval_ms: int = Field(100, gt=0)


class ThresholdSettings(BaseModel):
    coordinate_change_min: float = Field(0.000001, ge=0)
    coordinate_tolerance: float = Field(0.01, ge=0)
    zoom_tolerance: float = Field(0, ge=0)
    min_zoom: float = 0
    max_zoom: float = 20
    max_distance_km: float = Field(20037, gt=0)

    @model_validator(mode="after")
    def _validate_zoom_range(self) -> "ThresholdSettings":
        if self.max_zoom < self.min_zoom:
            raise ValueError("thresholds.max_zoom must be >= thresholds.min_zoom")
        return self


class Settings(BaseModel):
    app: AppSettings = Field(default_factory=AppSettings)
    geo: GeoSettings = Field(default_factory=GeoSettings)
    map: MapSettings = Field(default_factory=MapSettings)
    timeouts: TimeoutSettings = Field(default_factory=TimeoutSettings)
    polling: PollingSettings = Field(default_factory=PollingSettings)
    thresholds: ThresholdSettings = Field(default_factory=ThresholdSettings)


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    """Overlay selected environment variables onto raw settings payload."""
    load_dotenv_if_present()
    data = dict(data)

    log_level = os.getenv("GISCHECK_LOG_LEVEL")
    if log_level:
        data.setdefault("app", {})["log_level"] = log_level

    map_global = os.getenv("GISCHECK_MAP_GLOBAL")
    if map_global:
        data.setdefault("map", {})["global_name"] = map_global

    return data


@lru_cache
def get_settings() -> Settings:
    """Load and validate settings (cached)."""
    load_dotenv_if_present()
    config_path = os.getenv("GISCHECK_CONFIG_PATH")
    raw = _read_yaml_file(resolve_project_path(config_path)) if config_path else _read_package_yaml("defaults.yaml")
    raw = _apply_env_overrides(raw)
    return Settings.model_validate(raw)


@lru_cache
def get_logging_config() -> dict[str, Any]:
    """Load logging configuration (cached)."""
    return _read_package_yaml("logging.yaml")
