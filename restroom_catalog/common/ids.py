"""Process-local identifier helpers."""

from __future__ import annotations

import itertools
from datetime import datetime, timezone

_RECORD_COUNTER = itertools.count(1)
_LOCATION_COUNTER = itertools.count(1)


def next_record_id() -> str:
    return f"rec-{next(_RECORD_COUNTER)}"


def next_location_id() -> str:
    return f"loc-{next(_LOCATION_COUNTER)}"


def generate_session_id() -> str:
    now = datetime.now(tz=timezone.utc)
    return now.strftime("session-%Y%m%dT%H%M%S%fZ")
