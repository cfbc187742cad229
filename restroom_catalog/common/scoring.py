"""Grade priority scoring and zoom bucketing."""

from __future__ import annotations

from restroom_catalog.common.geometry import Region, clamp_float

DEFAULT_GRADE_PRIORITY = {
    "特優級": 4,
    "優級": 3,
    "良級": 2,
    "普級": 1,
    "Excellent": 4,
    "Superior": 3,
    "Good": 2,
    "Fair": 1,
}

# (exclusive lower bound on the clamped span, zoom level)
ZOOM_BUCKETS = (
    (0.1, 1),
    (0.05, 2),
    (0.02, 3),
    (0.01, 4),
    (0.005, 5),
    (0.002, 6),
)
MAX_ZOOM_LEVEL = 7
MIN_ZOOM_SPAN = 0.001
MAX_ZOOM_SPAN = 0.1


def priority_score(grade: str, ladder: dict[str, int] | None = None) -> int:
    ladder = DEFAULT_GRADE_PRIORITY if ladder is None else ladder
    return int(ladder.get(grade, 0))


def zoom_level(region: Region) -> int:
    max_delta = max(region.lat_delta, region.lon_delta)
    clamped = clamp_float(max_delta, minimum=MIN_ZOOM_SPAN, maximum=MAX_ZOOM_SPAN)
    for lower_bound, level in ZOOM_BUCKETS:
        if clamped > lower_bound:
            return level
    return MAX_ZOOM_LEVEL


def max_count_for_zoom(level: int, base_max: int) -> int:
    # Every in-range record is a candidate at every zoom level.
    return base_max
