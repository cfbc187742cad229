"""Configuration loading and validation."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from restroom_catalog.common.errors import ConfigError
from restroom_catalog.common.fs import read_yaml
from restroom_catalog.common.schema import validate_catalog_config
from restroom_catalog.common.scoring import DEFAULT_GRADE_PRIORITY

CONFIG_FILENAME = "catalog.yml"


@dataclass(frozen=True)
class CoordinateBounds:
    min_lat: float = 21.0
    max_lat: float = 25.0
    min_lon: float = 119.0
    max_lon: float = 122.0

    def contains(self, lat: float, lon: float) -> bool:
        return self.min_lat <= lat <= self.max_lat and self.min_lon <= lon <= self.max_lon


@dataclass(frozen=True)
class CatalogConfig:
    bounds: CoordinateBounds = field(default_factory=CoordinateBounds)
    distance_threshold_m: float = 50.0
    placeholder_name: str = "Unknown Location"
    cache_precision: int = 3
    max_cache_entries: int = 50
    default_max_count: int = 100
    min_span: float = 0.001
    max_span: float = 0.1
    default_radius_m: float = 5000.0
    invalid_distance_sentinel: int = 999999
    debounce_seconds: float = 0.3
    scheduler_max_count: int = 500
    grades: dict[str, int] = field(default_factory=lambda: dict(DEFAULT_GRADE_PRIORITY))

    @classmethod
    def default(cls) -> "CatalogConfig":
        return cls()

    @classmethod
    def from_mapping(cls, cfg: dict) -> "CatalogConfig":
        bounds = cfg["bounds"]
        clustering = cfg["clustering"]
        region = cfg["region_query"]
        nearby = cfg["nearby"]
        scheduler = cfg["scheduler"]
        return cls(
            bounds=CoordinateBounds(
                min_lat=float(bounds["min_lat"]),
                max_lat=float(bounds["max_lat"]),
                min_lon=float(bounds["min_lon"]),
                max_lon=float(bounds["max_lon"]),
            ),
            distance_threshold_m=float(clustering["distance_threshold_m"]),
            placeholder_name=str(clustering["placeholder_name"]),
            cache_precision=int(region["cache_precision"]),
            max_cache_entries=int(region["max_cache_entries"]),
            default_max_count=int(region["default_max_count"]),
            min_span=float(region["min_span"]),
            max_span=float(region["max_span"]),
            default_radius_m=float(nearby["default_radius_m"]),
            invalid_distance_sentinel=int(nearby["invalid_distance_sentinel"]),
            debounce_seconds=float(scheduler["debounce_seconds"]),
            scheduler_max_count=int(scheduler["max_count"]),
            grades={str(label): int(score) for label, score in cfg["grades"].items()},
        )


def _deep_merge(base: Any, overlay: Any) -> Any:
    if isinstance(base, dict) and isinstance(overlay, dict):
        merged = dict(base)
        for key, value in overlay.items():
            if key in merged:
                merged[key] = _deep_merge(merged[key], value)
            else:
                merged[key] = value
        return merged
    return overlay


def _load_yaml_with_overlay(path: Path, overlay_path: Path | None) -> dict:
    if not path.exists():
        raise ConfigError(f"Missing config file: {path}")
    base = read_yaml(path)
    if overlay_path is None or not overlay_path.exists():
        return base
    overlay = read_yaml(overlay_path)
    if overlay is None:
        return base
    if not isinstance(overlay, dict):
        raise ConfigError(f"Overlay config must be a mapping: {overlay_path}")
    return _deep_merge(base, overlay)


def load_config(
    config_dir: Path,
    *,
    allow_unknown: bool = False,
    overlay_config_dir: Path | None = None,
) -> CatalogConfig:
    overlay_path = None
    if overlay_config_dir is not None:
        overlay_path = overlay_config_dir / CONFIG_FILENAME
    cfg = _load_yaml_with_overlay(config_dir / CONFIG_FILENAME, overlay_path)
    validated = validate_catalog_config(cfg, allow_unknown=allow_unknown)
    return CatalogConfig.from_mapping(validated)
