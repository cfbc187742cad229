from pathlib import Path

import pytest

from restroom_catalog.catalog.catalog import ToiletCatalog
from restroom_catalog.catalog.scheduler import RegionQueryScheduler
from restroom_catalog.common.config_loader import load_config
from restroom_catalog.common.geometry import Point, Region
from restroom_catalog.sources.file_source import JsonFileSource

FIXTURE = Path(__file__).resolve().parents[1] / "fixtures" / "sample_toilets.json"


def _catalog() -> ToiletCatalog:
    catalog = ToiletCatalog(JsonFileSource(FIXTURE), config=load_config(Path("config")))
    assert catalog.load()
    return catalog


@pytest.mark.integration
def test_fixture_clusters_into_expected_locations():
    catalog = _catalog()
    by_name = {location.name: location for location in catalog.locations}

    assert set(by_name) == {"第二市場", "第二市場停車場", "中山公園", "Riverside Station", "Nameless Kiosk"}
    market = by_name["第二市場"]
    assert market.total_record_count == 4
    assert [(floor.floor_name, floor.record_count) for floor in market.floors] == [("B1", 1), ("1F", 2), ("2F", 1)]
    assert market.place_type == "市場"
    assert market.average_rating("1F") == pytest.approx(4.5)

    park = by_name["中山公園"]
    assert (park.latitude, park.longitude) == (24.15, 120.685)

    kiosk = by_name["Nameless Kiosk"]
    assert (kiosk.latitude, kiosk.longitude) == (0.0, 0.0)


@pytest.mark.integration
def test_swapped_record_is_reachable_from_every_spatial_query():
    catalog = _catalog()
    park_point = Point(lat=24.1495, lon=120.685)

    assert [record.number for record in catalog.find_nearby(park_point, 200.0)] == ["T006"]
    [(location, _distance)] = catalog.find_nearby_locations(park_point, 200.0)
    assert location.name == "中山公園"

    region = Region(center_lat=24.15, center_lon=120.685, lat_delta=0.004, lon_delta=0.004)
    assert [record.number for record in catalog.query_region(region)] == ["T006"]


@pytest.mark.integration
def test_scheduler_delivers_catalog_results_through_dispatch_queue():
    catalog = _catalog()
    queued = []
    delivered = []

    class ImmediateTimer:
        def __init__(self, interval, function, args=()):
            self.function = function
            self.args = args
            self.daemon = False

        def start(self):
            self.function(*self.args)

        def cancel(self):
            pass

    scheduler = RegionQueryScheduler(
        catalog,
        lambda region, records: delivered.append(records),
        dispatch=queued.append,
        timer_factory=ImmediateTimer,
    )
    scheduler.submit(Region(center_lat=24.1420, center_lon=120.6780, lat_delta=0.01, lon_delta=0.01))
    for job in queued:
        job()

    assert len(delivered) == 1
    assert [record.number for record in delivered[0]][:3] == ["T001", "T002", "T003"]
