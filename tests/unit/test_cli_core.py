from restroom_catalog.cli import build_source, parse_args
from restroom_catalog.sources.file_source import JsonFileSource
from restroom_catalog.sources.http_source import HttpRecordSource


def test_parse_args_defaults():
    args = parse_args(["stats"])
    assert args.command == "stats"
    assert args.source == "./data/toilet.json"
    assert args.config_dir is None
    assert args.overlay_config_dir is None
    assert args.log_level == "WARNING"
    assert args.radius is None
    assert args.max_count is None
    assert args.lat_delta == 0.01
    assert args.locations is False


def test_parse_args_accepts_query_options():
    args = parse_args(
        ["nearby", "--lat", "24.15", "--lon", "120.67", "--radius", "800", "--locations", "--overlay-config-dir", "config/live"]
    )
    assert args.lat == 24.15
    assert args.lon == 120.67
    assert args.radius == 800.0
    assert args.locations is True
    assert args.overlay_config_dir == "config/live"


def test_build_source_picks_transport_from_location():
    assert isinstance(build_source("https://data.example.test/toilet.json"), HttpRecordSource)
    assert isinstance(build_source("data/toilet.json"), JsonFileSource)
