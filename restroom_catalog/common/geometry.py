"""Geodesic distance and viewport helpers."""

from __future__ import annotations

import math
from dataclasses import dataclass

from pyproj import Geod

_GEOD = Geod(ellps="WGS84")


@dataclass(frozen=True)
class Point:
    lat: float
    lon: float


@dataclass(frozen=True)
class Region:
    """A rectangular viewport given by its center and full span in degrees."""

    center_lat: float
    center_lon: float
    lat_delta: float
    lon_delta: float

    @property
    def center(self) -> Point:
        return Point(lat=self.center_lat, lon=self.center_lon)

    def bounds(self) -> tuple[float, float, float, float]:
        half_lat = self.lat_delta / 2
        half_lon = self.lon_delta / 2
        return (
            self.center_lat - half_lat,
            self.center_lat + half_lat,
            self.center_lon - half_lon,
            self.center_lon + half_lon,
        )

    def contains(self, lat: float, lon: float) -> bool:
        min_lat, max_lat, min_lon, max_lon = self.bounds()
        return min_lat <= lat <= max_lat and min_lon <= lon <= max_lon

    def clamped(self, min_span: float, max_span: float) -> "Region":
        return Region(
            center_lat=clamp_float(self.center_lat, minimum=-90.0, maximum=90.0),
            center_lon=clamp_float(self.center_lon, minimum=-180.0, maximum=180.0),
            lat_delta=clamp_float(self.lat_delta, minimum=min_span, maximum=max_span),
            lon_delta=clamp_float(self.lon_delta, minimum=min_span, maximum=max_span),
        )


def clamp_float(value: float, *, minimum: float, maximum: float) -> float:
    return max(minimum, min(maximum, value))


def is_valid_coordinate(lat: float, lon: float) -> bool:
    # (0, 0) is the "no coordinate" sentinel of the source data.
    return lat != 0.0 and lon != 0.0


def _usable(lat: float, lon: float) -> bool:
    return math.isfinite(lat) and math.isfinite(lon) and -90.0 <= lat <= 90.0


def distance_m(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Geodesic distance in meters on the WGS84 ellipsoid.

    Returns ``math.inf`` when either point cannot be placed on the globe, so
    callers comparing against a threshold treat it as "too far".
    """
    if not (_usable(lat1, lon1) and _usable(lat2, lon2)):
        return math.inf
    _az12, _az21, dist = _GEOD.inv(lon1, lat1, lon2, lat2)
    return float(dist)


def distance_between(a: Point, b: Point) -> float:
    return distance_m(a.lat, a.lon, b.lat, b.lon)


def offset_point(origin: Point, azimuth_deg: float, meters: float) -> Point:
    lon, lat, _back_azimuth = _GEOD.fwd(origin.lon, origin.lat, azimuth_deg, meters)
    return Point(lat=float(lat), lon=float(lon))
