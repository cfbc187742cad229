"""Load restroom records from an open-data HTTP endpoint."""

from __future__ import annotations

from typing import Any

from restroom_catalog.common.errors import SourceNotFoundError
from restroom_catalog.common.http import HttpClient, HttpRequestError
from restroom_catalog.common.models import RestroomRecord
from restroom_catalog.sources.records import parse_records


class HttpRecordSource:
    """Fetch the record array from ``url``.

    An injected client is left open for its owner; otherwise a client is
    opened per fetch and closed once the payload has been read.
    """

    def __init__(self, url: str, http_client: HttpClient | None = None) -> None:
        self.url = url
        self.http_client = http_client

    def describe(self) -> str:
        return self.url

    def _get_payload(self) -> Any:
        if self.http_client is not None:
            return self.http_client.get_json(self.url)
        with HttpClient() as client:
            return client.get_json(self.url)

    def fetch_records(self) -> list[RestroomRecord]:
        try:
            payload = self._get_payload()
        except HttpRequestError as exc:
            if exc.status_code in (404, 410):
                raise SourceNotFoundError(f"Record endpoint not found: {self.url}") from exc
            raise
        return parse_records(payload)
