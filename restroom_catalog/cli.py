"""CLI entrypoint for the public restroom catalog."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from restroom_catalog.catalog.catalog import RecordSource, ToiletCatalog
from restroom_catalog.common.config_loader import CatalogConfig, load_config
from restroom_catalog.common.constants import COMMANDS, EXIT_HARD_FAIL, EXIT_SUCCESS
from restroom_catalog.common.errors import CatalogError
from restroom_catalog.common.geometry import Point, Region
from restroom_catalog.common.ids import generate_session_id
from restroom_catalog.common.logging import build_logger, log_event
from restroom_catalog.sources.file_source import JsonFileSource
from restroom_catalog.sources.http_source import HttpRecordSource


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("command", choices=COMMANDS)
    parser.add_argument("--source", default="./data/toilet.json")
    parser.add_argument("--config-dir", default=None)
    parser.add_argument("--overlay-config-dir", default=None)
    parser.add_argument("--log-dir", default=None)
    parser.add_argument("--log-level", default="WARNING", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    parser.add_argument("--query", default="")
    parser.add_argument("--lat", type=float, default=None)
    parser.add_argument("--lon", type=float, default=None)
    parser.add_argument("--radius", type=float, default=None)
    parser.add_argument("--lat-delta", type=float, default=0.01)
    parser.add_argument("--lon-delta", type=float, default=0.01)
    parser.add_argument("--max-count", type=int, default=None)
    parser.add_argument("--locations", action="store_true", help="answer with locations instead of records")
    return parser.parse_args(argv)


def build_source(location: str) -> RecordSource:
    if location.startswith(("http://", "https://")):
        return HttpRecordSource(location)
    return JsonFileSource(Path(location))


def _point(args: argparse.Namespace) -> Point | None:
    if args.lat is None or args.lon is None:
        return None
    return Point(lat=args.lat, lon=args.lon)


def execute_command(args: argparse.Namespace, catalog: ToiletCatalog):
    if args.command == "locations":
        return [location.to_dict() for location in catalog.locations]
    if args.command == "search":
        if args.locations:
            return [location.to_dict() for location in catalog.search_locations(args.query)]
        return [record.to_dict() for record in catalog.search_records(args.query)]
    if args.command == "nearby":
        point = _point(args)
        if args.locations:
            return [
                {"distance_m": distance, "location": location.to_dict()}
                for location, distance in catalog.find_nearby_locations(point, args.radius)
            ]
        return [
            {"distance_m": distance, "record": record.to_dict()}
            for record, distance in catalog.find_nearby_with_distance(point, args.radius)
        ]
    if args.command == "region":
        point = _point(args)
        if point is None:
            return []
        region = Region(
            center_lat=point.lat,
            center_lon=point.lon,
            lat_delta=args.lat_delta,
            lon_delta=args.lon_delta,
        )
        return [record.to_dict() for record in catalog.query_region(region, args.max_count)]
    if args.command == "stats":
        return catalog.statistics()
    raise ValueError(f"Unknown command: {args.command}")


def run_command(args: argparse.Namespace, out=None) -> int:
    if out is None:
        out = sys.stdout
    session_id = generate_session_id()
    log_dir = Path(args.log_dir) if args.log_dir else None
    logger = build_logger(session_id, log_dir=log_dir, level=args.log_level)

    try:
        if args.config_dir:
            overlay = Path(args.overlay_config_dir) if args.overlay_config_dir else None
            config = load_config(Path(args.config_dir), overlay_config_dir=overlay)
        else:
            config = CatalogConfig.default()
    except CatalogError as exc:
        log_event(
            logger,
            f"config failed: {exc}",
            session_id=session_id,
            component="cli",
            event="CONFIG_FAIL",
            status="error",
            error_code=exc.error_code,
        )
        return EXIT_HARD_FAIL

    catalog = ToiletCatalog(build_source(args.source), config=config, logger=logger)
    if not catalog.load():
        return EXIT_HARD_FAIL

    payload = execute_command(args, catalog)
    json.dump(payload, out, ensure_ascii=False, indent=2, sort_keys=True)
    out.write("\n")
    log_event(logger, "command complete", session_id=session_id, component="cli", event="COMMAND_END", status="ok")
    return EXIT_SUCCESS


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv if argv is not None else sys.argv[1:])
    try:
        return run_command(args)
    except CatalogError:
        return EXIT_HARD_FAIL


if __name__ == "__main__":
    raise SystemExit(main())
