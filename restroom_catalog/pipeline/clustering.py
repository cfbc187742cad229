"""Group raw restroom records into physical locations.

Three passes, each refining the previous partition:

1. records sharing the exact same address string,
2. greedy proximity clusters inside each address group,
3. floor groups inside each proximity cluster.

The proximity pass is a one-pass greedy seed clustering rather than a
transitive single-linkage closure. The first unclustered record of an address
group seeds a cluster and absorbs every other unclustered record within the
threshold of the seed, so results depend on input order.
"""

from __future__ import annotations

import logging
import time
from collections import defaultdict

from restroom_catalog.common.config_loader import CatalogConfig
from restroom_catalog.common.geometry import distance_m
from restroom_catalog.common.logging import get_logger, log_event
from restroom_catalog.common.models import FloorGroup, Location, RestroomRecord
from restroom_catalog.common.time_utils import elapsed_ms
from restroom_catalog.pipeline.coordinates import CoordinateCorrector
from restroom_catalog.pipeline.floors import extract_floor, strip_floor_markers


def group_by_address(records: list[RestroomRecord]) -> dict[str, list[RestroomRecord]]:
    grouped: dict[str, list[RestroomRecord]] = defaultdict(list)
    for record in records:
        grouped[record.address or ""].append(record)
    return grouped


def group_by_proximity(
    records: list[RestroomRecord],
    threshold_m: float,
    corrector: CoordinateCorrector,
) -> list[list[RestroomRecord]]:
    points = [corrector.correct_record(record) for record in records]
    used: set[int] = set()
    clusters: list[list[RestroomRecord]] = []

    for i, record in enumerate(records):
        if i in used:
            continue
        used.add(i)
        cluster = [record]
        seed_lat, seed_lon = points[i]
        for j, other in enumerate(records):
            if j in used:
                continue
            other_lat, other_lon = points[j]
            if distance_m(seed_lat, seed_lon, other_lat, other_lon) <= threshold_m:
                cluster.append(other)
                used.add(j)
        clusters.append(cluster)

    return clusters


def group_by_floor(records: list[RestroomRecord]) -> list[FloorGroup]:
    grouped: dict[tuple[str, int], list[RestroomRecord]] = {}
    for record in records:
        key = extract_floor(record.name)
        grouped.setdefault(key, []).append(record)

    floors = [
        FloorGroup(floor_name=name, floor_order=order, records=tuple(members))
        for (name, order), members in grouped.items()
    ]
    return sorted(floors, key=lambda floor: floor.floor_order)


def common_prefix(values: list[str]) -> str:
    if not values:
        return ""
    prefix = values[0]
    for value in values[1:]:
        while prefix and not value.startswith(prefix):
            prefix = prefix[:-1]
        if not prefix:
            break
    return prefix


def derive_location_name(records: list[RestroomRecord], placeholder: str) -> str:
    clean_names = [strip_floor_markers(record.name) for record in records]
    prefix = common_prefix(clean_names)
    if prefix:
        return prefix
    if clean_names and clean_names[0]:
        return clean_names[0]
    return placeholder


class LocationClusterer:
    def __init__(
        self,
        config: CatalogConfig | None = None,
        corrector: CoordinateCorrector | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.config = config or CatalogConfig.default()
        self.corrector = corrector or CoordinateCorrector(self.config.bounds)
        self.logger = logger or get_logger()

    def _build_location(self, address: str, records: list[RestroomRecord]) -> Location:
        first = records[0]
        lat, lon = self.corrector.correct_record(first)
        return Location(
            name=derive_location_name(records, self.config.placeholder_name),
            address=address,
            latitude=lat,
            longitude=lon,
            administration=first.administration,
            floors=tuple(group_by_floor(records)),
        )

    def build(self, records: list[RestroomRecord]) -> list[Location]:
        started_at = time.monotonic()
        locations: list[Location] = []

        for address, address_records in group_by_address(list(records)).items():
            clusters = group_by_proximity(
                address_records,
                self.config.distance_threshold_m,
                self.corrector,
            )
            for cluster in clusters:
                locations.append(self._build_location(address, cluster))

        log_event(
            self.logger,
            "clustered records into locations",
            component="clustering",
            event="CLUSTER_BUILD",
            status="ok",
            rows_in=len(records),
            rows_out=len(locations),
            duration_ms=elapsed_ms(started_at),
        )
        return locations
