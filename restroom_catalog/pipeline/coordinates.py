"""Swapped latitude/longitude detection with a process-lifetime memo."""

from __future__ import annotations

from restroom_catalog.common.config_loader import CoordinateBounds
from restroom_catalog.common.locks import ReadWriteLock
from restroom_catalog.common.models import RestroomRecord


class CoordinateCorrector:
    """Fix records whose latitude and longitude fields were transposed.

    A raw pair is swapped when its latitude falls outside the plausible
    latitude band while its longitude falls inside it. Results are memoised
    per raw pair and never invalidated; distinct pairs are bounded by the
    dataset size.
    """

    def __init__(self, bounds: CoordinateBounds | None = None) -> None:
        self.bounds = bounds or CoordinateBounds()
        self._cache: dict[tuple[float, float], tuple[float, float]] = {}
        self._lock = ReadWriteLock()

    def __len__(self) -> int:
        with self._lock.read_locked():
            return len(self._cache)

    def _compute(self, lat: float, lon: float) -> tuple[float, float]:
        lat_out_of_band = lat > self.bounds.max_lat or lat < self.bounds.min_lat
        lon_in_lat_band = self.bounds.min_lat <= lon <= self.bounds.max_lat
        if lat_out_of_band and lon_in_lat_band:
            return lon, lat
        return lat, lon

    def correct(self, raw_lat: float, raw_lon: float) -> tuple[float, float]:
        key = (raw_lat, raw_lon)
        with self._lock.read_locked():
            cached = self._cache.get(key)
        if cached is not None:
            return cached

        result = self._compute(raw_lat, raw_lon)
        with self._lock.write_locked():
            # Another thread may have filled the slot; the value is identical.
            return self._cache.setdefault(key, result)

    def correct_record(self, record: RestroomRecord) -> tuple[float, float]:
        return self.correct(record.lat, record.lon)
