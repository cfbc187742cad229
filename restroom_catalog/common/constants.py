"""Application constants."""

USER_AGENT = "restroom-catalog/0.3 (+open-data client)"
COMMANDS = (
    "locations",
    "search",
    "nearby",
    "region",
    "stats",
)
EXIT_SUCCESS = 0
EXIT_HARD_FAIL = 20
JSON_LOG_FIELDS = (
    "timestamp",
    "session_id",
    "component",
    "event",
    "status",
    "duration_ms",
    "rows_in",
    "rows_out",
    "cache",
    "zoom_level",
    "error_code",
    "message",
)
UNKNOWN_FLOOR_NAME = "1F"
UNKNOWN_FLOOR_ORDER = 1
