from pathlib import Path

import pytest

from restroom_catalog.common.config_loader import CatalogConfig
from restroom_catalog.pipeline.clustering import LocationClusterer
from restroom_catalog.sources.file_source import JsonFileSource

FIXTURE = Path(__file__).resolve().parents[1] / "fixtures" / "sample_toilets.json"


def _snapshot(locations):
    return [
        (
            location.name,
            location.address,
            round(location.latitude, 6),
            round(location.longitude, 6),
            [(floor.floor_name, [record.number for record in floor.records]) for floor in location.floors],
        )
        for location in locations
    ]


@pytest.mark.regression
def test_fixture_clustering_snapshot_is_stable():
    records = JsonFileSource(FIXTURE).fetch_records()

    first = _snapshot(LocationClusterer(CatalogConfig.default()).build(records))
    second = _snapshot(LocationClusterer(CatalogConfig.default()).build(records))

    assert first == second
    assert first == [
        (
            "第二市場",
            "臺中市中區三民路二段87號",
            24.142,
            120.678,
            [("B1", ["T004"]), ("1F", ["T001", "T002"]), ("2F", ["T003"])],
        ),
        ("第二市場停車場", "臺中市中區三民路二段87號", 24.146, 120.678, [("1F", ["T005"])]),
        ("中山公園", "臺中市北區公園路37號", 24.15, 120.685, [("1F", ["T006"])]),
        ("Riverside Station", "臺中市西區民權路1號", 24.138, 120.67, [("1F", ["T007"])]),
        ("Nameless Kiosk", "臺中市西區未知路", 0.0, 0.0, [("1F", ["T008"])]),
    ]


@pytest.mark.regression
def test_every_fixture_record_lands_in_exactly_one_location():
    records = JsonFileSource(FIXTURE).fetch_records()
    locations = LocationClusterer().build(records)

    members = [record.record_id for location in locations for record in location.all_records]
    assert sorted(members) == sorted(record.record_id for record in records)
