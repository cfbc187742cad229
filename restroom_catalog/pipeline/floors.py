"""Floor detection from free-text restroom labels."""

from __future__ import annotations

import re
from dataclasses import dataclass

from restroom_catalog.common.constants import UNKNOWN_FLOOR_NAME, UNKNOWN_FLOOR_ORDER


@dataclass(frozen=True)
class FloorPattern:
    pattern: re.Pattern[str]
    sign: int


# First match wins. Basement forms come first because "地下1樓" also
# contains the above-ground "1樓" form and "B1F" contains "1F".
FLOOR_PATTERNS = (
    FloorPattern(re.compile(r"B([0-9]+)"), -1),
    FloorPattern(re.compile(r"地下([0-9]+)樓"), -1),
    FloorPattern(re.compile(r"([0-9]+)F"), 1),
    FloorPattern(re.compile(r"([0-9]+)樓"), 1),
    FloorPattern(re.compile(r"([0-9]+)層"), 1),
)

FLOOR_MARKER_RE = re.compile(r"地下[0-9]+樓|B[0-9]+F?|[0-9]+[F樓層]")


def _floor_name(number: int, sign: int) -> str:
    if sign < 0:
        return f"B{number}"
    return f"{number}F"


def extract_floor(label: str | None) -> tuple[str, int]:
    if not label:
        return UNKNOWN_FLOOR_NAME, UNKNOWN_FLOOR_ORDER
    for entry in FLOOR_PATTERNS:
        match = entry.pattern.search(label)
        if match is None:
            continue
        number = int(match.group(1))
        return _floor_name(number, entry.sign), number * entry.sign
    return UNKNOWN_FLOOR_NAME, UNKNOWN_FLOOR_ORDER


def strip_floor_markers(label: str | None) -> str:
    if not label:
        return ""
    return FLOOR_MARKER_RE.sub("", label).strip()
