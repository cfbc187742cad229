import json
from pathlib import Path

import pytest

from restroom_catalog.common.errors import DecodeFailedError, SourceNotFoundError
from restroom_catalog.pipeline.clustering import group_by_address
from restroom_catalog.sources.file_source import JsonFileSource
from restroom_catalog.sources.records import parse_record, parse_records

ROW = {
    "county": "臺中市",
    "city": "西區",
    "village": "民生里",
    "number": "B0001",
    "name": " XX Market 2F ",
    "address": "臺中市西區民生路1號",
    "administration": "Taichung EPB",
    "latitude": 24.1448,
    "longitude": "120.6693",
    "grade": "特優級",
    "type2": "Market",
    "type": "Women",
    "exec": "Market Office",
    "diaper": "1",
}


def test_parse_record_maps_open_data_keys_verbatim():
    record = parse_record(ROW)

    assert record.name == " XX Market 2F "
    assert record.venue_type == "Market"
    assert record.restroom_type == "Women"
    assert record.exec_unit == "Market Office"
    assert record.latitude == "24.1448"
    assert record.lat == 24.1448
    assert record.has_diaper_station is True


def test_parse_record_fills_missing_fields_with_blanks():
    record = parse_record({"name": "Bare", "latitude": None})

    assert record.address == ""
    assert record.latitude == ""
    assert record.has_coordinate is False


def test_parse_records_accepts_wrapped_payload():
    assert [record.name for record in parse_records({"records": [ROW]})] == [" XX Market 2F "]


@pytest.mark.parametrize("payload", [{"rows": []}, "text", 7, [["not", "an", "object"]]])
def test_parse_records_rejects_unexpected_shapes(payload):
    with pytest.raises(DecodeFailedError):
        parse_records(payload)


def test_file_source_reads_utf8_with_bom(tmp_path: Path):
    path = tmp_path / "toilet.json"
    path.write_text("\ufeff" + json.dumps([ROW], ensure_ascii=False), encoding="utf-8")

    source = JsonFileSource(path)
    [record] = source.fetch_records()

    assert record.county == "臺中市"
    assert source.describe() == str(path)


def test_file_source_missing_file_is_source_not_found(tmp_path: Path):
    with pytest.raises(SourceNotFoundError) as excinfo:
        JsonFileSource(tmp_path / "absent.json").fetch_records()
    assert excinfo.value.error_code == "SOURCE_NOT_FOUND"


def test_file_source_garbage_is_decode_failure(tmp_path: Path):
    path = tmp_path / "toilet.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(DecodeFailedError):
        JsonFileSource(path).fetch_records()


def test_file_source_wrong_shape_is_decode_failure(tmp_path: Path):
    path = tmp_path / "toilet.json"
    path.write_text(json.dumps({"total": 0}), encoding="utf-8")

    with pytest.raises(DecodeFailedError):
        JsonFileSource(path).fetch_records()


def test_padded_addresses_stay_in_separate_groups():
    rows = [
        {"name": "Hall", "address": "1 Main St", "latitude": "24.15", "longitude": "120.67"},
        {"name": "Hall", "address": " 1 Main St ", "latitude": "24.15", "longitude": "120.67"},
    ]

    groups = group_by_address(parse_records(rows))

    assert list(groups) == ["1 Main St", " 1 Main St "]


def test_padded_coordinate_text_still_parses():
    record = parse_record({"latitude": " 24.15 ", "longitude": "120.67\n"})

    assert (record.lat, record.lon) == (24.15, 120.67)
