"""Decode open-data restroom rows into records."""

from __future__ import annotations

from typing import Any

from restroom_catalog.common.errors import DecodeFailedError
from restroom_catalog.common.models import RestroomRecord

# Open-data key -> record attribute.
FIELD_MAP = {
    "county": "county",
    "city": "city",
    "village": "village",
    "number": "number",
    "name": "name",
    "address": "address",
    "administration": "administration",
    "latitude": "latitude",
    "longitude": "longitude",
    "grade": "grade",
    "type2": "venue_type",
    "type": "restroom_type",
    "exec": "exec_unit",
    "diaper": "diaper",
}


def _as_text(value: Any) -> str:
    # Strings stay verbatim: addresses are grouped by exact text.
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return str(value)


def parse_record(row: Any) -> RestroomRecord:
    if not isinstance(row, dict):
        raise DecodeFailedError(f"Expected a JSON object per record, got {type(row).__name__}")
    values = {attr: _as_text(row.get(key)) for key, attr in FIELD_MAP.items()}
    return RestroomRecord(**values)


def parse_records(payload: Any) -> list[RestroomRecord]:
    if isinstance(payload, dict) and isinstance(payload.get("records"), list):
        payload = payload["records"]
    if not isinstance(payload, list):
        raise DecodeFailedError(f"Expected a JSON array of records, got {type(payload).__name__}")
    return [parse_record(row) for row in payload]
