"""Minimal strict schema for YAML config validation."""

from __future__ import annotations

from restroom_catalog.common.errors import ConfigError

SECTION_KEYS = {
    "bounds": {"min_lat", "max_lat", "min_lon", "max_lon"},
    "clustering": {"distance_threshold_m", "placeholder_name"},
    "region_query": {
        "cache_precision",
        "max_cache_entries",
        "default_max_count",
        "min_span",
        "max_span",
    },
    "nearby": {"default_radius_m", "invalid_distance_sentinel"},
    "scheduler": {"debounce_seconds", "max_count"},
}


def _assert_required_keys(obj: dict, required: set[str], ctx: str) -> None:
    missing = required - set(obj)
    if missing:
        missing_str = ", ".join(sorted(missing))
        raise ConfigError(f"Missing keys in {ctx}: {missing_str}")


def _assert_no_unknown_keys(obj: dict, known: set[str], ctx: str, allow_unknown: bool) -> None:
    if allow_unknown:
        return
    unknown = set(obj) - known
    if unknown:
        unknown_str = ", ".join(sorted(unknown))
        raise ConfigError(f"Unknown keys in {ctx}: {unknown_str}")


def _assert_mapping(obj, ctx: str) -> None:
    if not isinstance(obj, dict):
        raise ConfigError(f"{ctx} must be a mapping")


def validate_catalog_config(cfg, *, allow_unknown: bool = False) -> dict:
    _assert_mapping(cfg, "catalog config")
    top_known = set(SECTION_KEYS) | {"grades"}
    _assert_required_keys(cfg, top_known, "catalog config")
    _assert_no_unknown_keys(cfg, top_known, "catalog config", allow_unknown)

    for section, keys in SECTION_KEYS.items():
        _assert_mapping(cfg[section], section)
        _assert_required_keys(cfg[section], keys, section)
        _assert_no_unknown_keys(cfg[section], keys, section, allow_unknown)

    bounds = cfg["bounds"]
    if bounds["min_lat"] >= bounds["max_lat"] or bounds["min_lon"] >= bounds["max_lon"]:
        raise ConfigError("bounds must have min < max for both axes")

    region = cfg["region_query"]
    if int(region["max_cache_entries"]) < 1:
        raise ConfigError("region_query.max_cache_entries must be >= 1")
    if int(region["cache_precision"]) < 0:
        raise ConfigError("region_query.cache_precision must be >= 0")
    if region["min_span"] > region["max_span"]:
        raise ConfigError("region_query.min_span must not exceed max_span")

    grades = cfg["grades"]
    if not isinstance(grades, dict) or not grades:
        raise ConfigError("grades must be a non-empty mapping")
    for label, score in grades.items():
        if not isinstance(score, int) or isinstance(score, bool) or score < 0:
            raise ConfigError(f"grades.{label} must be a non-negative integer")

    return cfg
