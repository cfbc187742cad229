"""Data models shared by the clustering and query pipeline."""

from __future__ import annotations

import math
from collections import Counter
from dataclasses import asdict, dataclass, field
from typing import Any

from restroom_catalog.common.geometry import is_valid_coordinate
from restroom_catalog.common.ids import next_location_id, next_record_id

# Five-step rating ladder used for per-floor averages.
RATING_BY_GRADE = {
    "特優級": 5.0,
    "優級": 4.0,
    "良級": 3.0,
    "普通級": 2.0,
    "待改善": 1.0,
}
DEFAULT_RATING = 3.0


def parse_coordinate(value: str | None) -> float:
    if value is None:
        return 0.0
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(parsed):
        return 0.0
    return parsed


@dataclass(frozen=True)
class RestroomRecord:
    county: str = ""
    city: str = ""
    village: str = ""
    number: str = ""
    name: str = ""
    address: str = ""
    administration: str = ""
    latitude: str = ""
    longitude: str = ""
    grade: str = ""
    venue_type: str = ""
    restroom_type: str = ""
    exec_unit: str = ""
    diaper: str = ""
    record_id: str = field(default_factory=next_record_id)

    @property
    def lat(self) -> float:
        return parse_coordinate(self.latitude)

    @property
    def lon(self) -> float:
        return parse_coordinate(self.longitude)

    @property
    def has_coordinate(self) -> bool:
        return is_valid_coordinate(self.lat, self.lon)

    @property
    def has_diaper_station(self) -> bool:
        return self.diaper == "1"

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class FloorGroup:
    floor_name: str
    floor_order: int
    records: tuple[RestroomRecord, ...]

    @property
    def record_count(self) -> int:
        return len(self.records)

    @property
    def available_types(self) -> set[str]:
        return {record.restroom_type for record in self.records}

    def to_dict(self) -> dict[str, Any]:
        return {
            "floor_name": self.floor_name,
            "floor_order": self.floor_order,
            "records": [record.to_dict() for record in self.records],
        }


@dataclass(frozen=True)
class Location:
    name: str
    address: str
    latitude: float
    longitude: float
    administration: str
    floors: tuple[FloorGroup, ...]
    location_id: str = field(default_factory=next_location_id)

    @property
    def all_records(self) -> list[RestroomRecord]:
        return [record for floor in self.floors for record in floor.records]

    @property
    def total_record_count(self) -> int:
        return sum(floor.record_count for floor in self.floors)

    @property
    def available_types(self) -> set[str]:
        return {record.restroom_type for record in self.all_records}

    @property
    def has_multiple_floors(self) -> bool:
        return len(self.floors) > 1

    @property
    def floor_count(self) -> int:
        return len(self.floors)

    @property
    def has_diaper_station(self) -> bool:
        return any(record.has_diaper_station for record in self.all_records)

    @property
    def place_type(self) -> str:
        records = self.all_records
        return records[0].venue_type if records else ""

    @property
    def primary_types(self) -> list[str]:
        counts = Counter(record.restroom_type for record in self.all_records)
        return [restroom_type for restroom_type, _count in counts.most_common(3)]

    def floor(self, floor_name: str) -> FloorGroup | None:
        for floor in self.floors:
            if floor.floor_name == floor_name:
                return floor
        return None

    def average_rating(self, floor_name: str) -> float:
        floor = self.floor(floor_name)
        if floor is None or not floor.records:
            return 0.0
        total = sum(RATING_BY_GRADE.get(record.grade, DEFAULT_RATING) for record in floor.records)
        return total / len(floor.records)

    def to_dict(self) -> dict[str, Any]:
        return {
            "location_id": self.location_id,
            "name": self.name,
            "address": self.address,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "administration": self.administration,
            "place_type": self.place_type,
            "total_record_count": self.total_record_count,
            "available_types": sorted(self.available_types),
            "has_diaper_station": self.has_diaper_station,
            "floors": [floor.to_dict() for floor in self.floors],
        }
