"""Catalog orchestration: load lifecycle, search, nearby and region queries."""

from __future__ import annotations

import logging
import math
import threading
import time
from collections import Counter
from typing import Callable, Iterable, Protocol

from restroom_catalog.common.config_loader import CatalogConfig
from restroom_catalog.common.errors import DataUnavailableError
from restroom_catalog.common.geometry import Point, Region, distance_between, is_valid_coordinate
from restroom_catalog.common.logging import get_logger, log_event
from restroom_catalog.common.models import Location, RestroomRecord
from restroom_catalog.common.time_utils import elapsed_ms
from restroom_catalog.pipeline.clustering import LocationClusterer
from restroom_catalog.pipeline.coordinates import CoordinateCorrector
from restroom_catalog.pipeline.region_query import RegionQueryEngine


class RecordSource(Protocol):
    def fetch_records(self) -> list[RestroomRecord]: ...


def _contains(query: str, values: Iterable[str]) -> bool:
    return any(query in (value or "").lower() for value in values)


class ToiletCatalog:
    """Owns the raw records and the locations derived from them.

    Every public query returns a fresh list; callers never hold references
    into the internal caches.
    """

    def __init__(
        self,
        source: RecordSource,
        config: CatalogConfig | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.source = source
        self.config = config or CatalogConfig.default()
        self.logger = logger or get_logger()
        self.corrector = CoordinateCorrector(self.config.bounds)
        self._records: tuple[RestroomRecord, ...] = ()
        self._locations: tuple[Location, ...] = ()
        self._engine = self._build_engine(())
        self._load_lock = threading.Lock()
        self.is_loading = False
        self.error: DataUnavailableError | None = None
        self._loaded = False

    def _build_engine(self, records: tuple[RestroomRecord, ...]) -> RegionQueryEngine:
        return RegionQueryEngine(
            records,
            self.corrector,
            grades=self.config.grades,
            cache_precision=self.config.cache_precision,
            max_cache_entries=self.config.max_cache_entries,
            logger=self.logger,
        )

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    @property
    def records(self) -> list[RestroomRecord]:
        return list(self._records)

    @property
    def locations(self) -> list[Location]:
        return list(self._locations)

    def load(self) -> bool:
        with self._load_lock:
            self.is_loading = True
            self.error = None
            self._loaded = False
            started_at = time.monotonic()
            log_event(self.logger, "catalog load start", component="catalog", event="LOAD_START", status="ok")
            try:
                records = tuple(self.source.fetch_records())
            except DataUnavailableError as exc:
                self._fail(exc)
                return False
            except Exception as exc:
                self._fail(DataUnavailableError(f"Unexpected load failure: {exc}"))
                return False
            finally:
                self.is_loading = False

            clusterer = LocationClusterer(self.config, self.corrector, self.logger)
            self._records = records
            self._locations = tuple(clusterer.build(list(records)))
            self._engine = self._build_engine(records)
            self._loaded = True
            log_event(
                self.logger,
                "catalog load end",
                component="catalog",
                event="LOAD_END",
                status="ok",
                rows_in=len(records),
                rows_out=len(self._locations),
                duration_ms=elapsed_ms(started_at),
            )
            return True

    def _fail(self, exc: DataUnavailableError) -> None:
        self.error = exc
        self._records = ()
        self._locations = ()
        self._engine = self._build_engine(())
        log_event(
            self.logger,
            f"catalog load failed: {exc}",
            component="catalog",
            event="LOAD_FAIL",
            status="error",
            error_code=exc.error_code,
        )

    # Text search

    def search_records(self, query: str) -> list[RestroomRecord]:
        if not query:
            return []
        needle = query.lower()
        return [
            record
            for record in self._records
            if _contains(needle, (record.name, record.address, record.village, record.venue_type))
        ]

    def search_locations(self, query: str) -> list[Location]:
        if not query:
            return []
        needle = query.lower()
        matches = []
        for location in self._locations:
            members = location.all_records
            fields = [location.name, location.address, location.place_type]
            fields.extend(record.village for record in members)
            fields.extend(record.venue_type for record in members)
            fields.extend(location.available_types)
            if _contains(needle, fields):
                matches.append(location)
        return matches

    # Distance queries

    def _distance_to(self, point: Point, record: RestroomRecord) -> float | None:
        if not record.has_coordinate:
            return None
        lat, lon = self.corrector.correct_record(record)
        return distance_between(point, Point(lat=lat, lon=lon))

    def _ranked_nearby(
        self,
        point: Point | None,
        radius: float | None,
        candidates: Iterable,
        measure: Callable[[Point, object], float | None],
    ) -> list[tuple[object, float]]:
        if point is None:
            return []
        limit = self.config.default_radius_m if radius is None else radius
        hits = []
        for candidate in candidates:
            distance = measure(point, candidate)
            if distance is None or not (0 < distance <= limit):
                continue
            hits.append((candidate, distance))
        return sorted(hits, key=lambda item: item[1])

    def find_nearby(self, point: Point | None, radius: float | None = None) -> list[RestroomRecord]:
        return [record for record, _ in self._ranked_nearby(point, radius, self._records, self._distance_to)]

    def find_nearby_with_distance(
        self,
        point: Point | None,
        radius: float | None = None,
    ) -> list[tuple[RestroomRecord, int]]:
        return [
            (record, int(distance))
            for record, distance in self._ranked_nearby(point, radius, self._records, self._distance_to)
        ]

    def _distance_to_location(self, point: Point, location: Location) -> float | None:
        if not is_valid_coordinate(location.latitude, location.longitude):
            return None
        return distance_between(point, Point(lat=location.latitude, lon=location.longitude))

    def find_nearby_locations(
        self,
        point: Point | None,
        radius: float | None = None,
    ) -> list[tuple[Location, int]]:
        return [
            (location, int(distance))
            for location, distance in self._ranked_nearby(
                point, radius, self._locations, self._distance_to_location
            )
        ]

    def calculate_distance(self, point: Point | None, record: RestroomRecord) -> int:
        sentinel = self.config.invalid_distance_sentinel
        if point is None:
            return sentinel
        distance = self._distance_to(point, record)
        # Zero means bad data, not "standing on it".
        if distance is None or distance == 0.0 or math.isinf(distance):
            return sentinel
        return int(distance)

    # Region queries

    def query_region(self, region: Region, max_count: int | None = None) -> list[RestroomRecord]:
        limit = self.config.default_max_count if max_count is None else max_count
        return self._engine.query(region, limit)

    # Attribute filters and summaries

    def filter_by_grade(self, grade: str) -> list[RestroomRecord]:
        return [record for record in self._records if record.grade == grade]

    def filter_by_venue_type(self, venue_type: str) -> list[RestroomRecord]:
        return [record for record in self._records if record.venue_type == venue_type]

    def filter_with_diaper_station(self) -> list[RestroomRecord]:
        return [record for record in self._records if record.has_diaper_station]

    def all_grades(self) -> list[str]:
        return sorted({record.grade for record in self._records})

    def all_venue_types(self) -> list[str]:
        return sorted({record.venue_type for record in self._records})

    def statistics(self) -> dict:
        return {
            "total": len(self._records),
            "locations": len(self._locations),
            "without_coordinates": sum(1 for record in self._records if not record.has_coordinate),
            "by_grade": dict(sorted(Counter(record.grade for record in self._records).items())),
            "by_venue_type": dict(sorted(Counter(record.venue_type for record in self._records).items())),
        }
