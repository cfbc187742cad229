"""Load restroom records from a bundled JSON file."""

from __future__ import annotations

import json
from pathlib import Path

from restroom_catalog.common.errors import DecodeFailedError, SourceNotFoundError
from restroom_catalog.common.fs import read_json
from restroom_catalog.common.models import RestroomRecord
from restroom_catalog.sources.records import parse_records


class JsonFileSource:
    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def describe(self) -> str:
        return str(self.path)

    def fetch_records(self) -> list[RestroomRecord]:
        if not self.path.is_file():
            raise SourceNotFoundError(f"Record file not found: {self.path}")
        try:
            payload = read_json(self.path)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise DecodeFailedError(f"Could not decode {self.path}: {exc}") from exc
        except OSError as exc:
            raise SourceNotFoundError(f"Could not read {self.path}: {exc}") from exc
        return parse_records(payload)
