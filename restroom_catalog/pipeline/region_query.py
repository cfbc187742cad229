"""Viewport queries over the full record set with a quantized result cache."""

from __future__ import annotations

import logging
import time
from typing import Sequence

from restroom_catalog.common.geometry import Region, distance_m
from restroom_catalog.common.locks import ReadWriteLock
from restroom_catalog.common.logging import get_logger, log_debug_event, log_event
from restroom_catalog.common.models import RestroomRecord
from restroom_catalog.common.scoring import max_count_for_zoom, priority_score, zoom_level
from restroom_catalog.common.time_utils import elapsed_ms
from restroom_catalog.pipeline.coordinates import CoordinateCorrector


class RegionQueryEngine:
    def __init__(
        self,
        records: Sequence[RestroomRecord],
        corrector: CoordinateCorrector,
        *,
        grades: dict[str, int] | None = None,
        cache_precision: int = 3,
        max_cache_entries: int = 50,
        logger: logging.Logger | None = None,
    ) -> None:
        self.records = tuple(records)
        self.corrector = corrector
        self.grades = grades
        self.cache_precision = cache_precision
        self.max_cache_entries = max_cache_entries
        self.logger = logger or get_logger()
        self._cache: dict[str, tuple[RestroomRecord, ...]] = {}
        self._lock = ReadWriteLock()

    @property
    def cache_size(self) -> int:
        with self._lock.read_locked():
            return len(self._cache)

    def clear_cache(self) -> None:
        with self._lock.write_locked():
            self._cache.clear()

    def cache_key(self, region: Region) -> str:
        p = self.cache_precision
        return "_".join(
            f"{value:.{p}f}"
            for value in (region.center_lat, region.center_lon, region.lat_delta, region.lon_delta)
        )

    def _collect(self, region: Region) -> list[tuple[RestroomRecord, float]]:
        center = region.center
        in_region: list[tuple[RestroomRecord, float]] = []
        for record in self.records:
            if not record.has_coordinate:
                continue
            lat, lon = self.corrector.correct_record(record)
            if not region.contains(lat, lon):
                continue
            in_region.append((record, distance_m(center.lat, center.lon, lat, lon)))
        return in_region

    def _store(self, key: str, result: tuple[RestroomRecord, ...]) -> None:
        with self._lock.write_locked():
            if len(self._cache) > self.max_cache_entries:
                self._cache.clear()
            self._cache[key] = result

    def query(self, region: Region, max_count: int = 100) -> list[RestroomRecord]:
        key = self.cache_key(region)
        with self._lock.read_locked():
            cached = self._cache.get(key)
        if cached is not None:
            log_debug_event(
                self.logger,
                "region cache hit",
                component="region_query",
                event="REGION_QUERY",
                status="ok",
                cache="hit",
                rows_out=len(cached),
            )
            return list(cached)

        started_at = time.monotonic()
        level = zoom_level(region)
        limit = max_count_for_zoom(level, max_count)

        ranked = sorted(
            self._collect(region),
            key=lambda item: (-priority_score(item[0].grade, self.grades), item[1]),
        )
        result = tuple(record for record, _distance in ranked[: max(limit, 0)])
        self._store(key, result)

        log_event(
            self.logger,
            "region query computed",
            component="region_query",
            event="REGION_QUERY",
            status="ok",
            cache="miss",
            zoom_level=level,
            rows_in=len(self.records),
            rows_out=len(result),
            duration_ms=elapsed_ms(started_at),
        )
        return list(result)
