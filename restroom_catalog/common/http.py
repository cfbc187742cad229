"""JSON-over-HTTP access to open-data portals."""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from types import TracebackType
from typing import Any
from urllib.parse import urlparse

import requests
from tenacity import RetryCallState, Retrying, retry_if_exception_type, stop_after_attempt, wait_exponential_jitter

from restroom_catalog.common.constants import USER_AGENT
from restroom_catalog.common.errors import DataUnavailableError, DecodeFailedError
from restroom_catalog.common.logging import get_logger, log_event

# Open-data portals answer these while rebuilding or throttling.
TRANSIENT_STATUS_CODES = frozenset({408, 425, 429, 500, 502, 503, 504})


@dataclass(frozen=True)
class TimeoutConfig:
    connect: float = 10.0
    read: float = 60.0


@dataclass(frozen=True)
class RetryConfig:
    max_attempts: int = 4
    multiplier: float = 1.0
    max_wait: float = 20.0


class HttpRequestError(DataUnavailableError):
    error_code = "HTTP_ERROR"

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class RetryableHttpError(HttpRequestError):
    pass


class InvalidPayloadError(HttpRequestError, DecodeFailedError):
    error_code = "DECODE_FAILED"


class HostThrottle:
    """Keep at least ``min_interval`` seconds between requests to one host."""

    def __init__(self, min_interval: float) -> None:
        self.min_interval = min_interval
        self._next_slot: dict[str, float] = {}
        self._lock = threading.Lock()

    def wait(self, host: str) -> None:
        with self._lock:
            now = time.monotonic()
            slot = max(now, self._next_slot.get(host, now))
            self._next_slot[host] = slot + self.min_interval
        delay = slot - now
        if delay > 0:
            time.sleep(delay)


class HttpClient:
    def __init__(
        self,
        *,
        timeout: TimeoutConfig | None = None,
        retry: RetryConfig | None = None,
        min_interval: float = 0.5,
        logger: logging.Logger | None = None,
    ) -> None:
        self.timeout = timeout or TimeoutConfig()
        self.retry = retry or RetryConfig()
        self.session = requests.Session()
        self.throttle = HostThrottle(min_interval)
        self.logger = logger or get_logger()

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "HttpClient":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def _check_status(self, url: str, status: int) -> None:
        if status in TRANSIENT_STATUS_CODES:
            raise RetryableHttpError(f"{url} answered {status}, will retry", status_code=status)
        if status >= 400:
            raise HttpRequestError(f"{url} answered {status}", status_code=status)

    def _fetch_once(self, url: str, params: dict[str, Any] | None, timeout: TimeoutConfig) -> Any:
        self.throttle.wait(urlparse(url).netloc)
        try:
            response = self.session.request(
                method="GET",
                url=url,
                params=params,
                headers={"User-Agent": USER_AGENT, "Accept": "application/json"},
                timeout=(timeout.connect, timeout.read),
            )
        except requests.RequestException as exc:
            raise RetryableHttpError(f"Request to {url} failed: {exc}") from exc

        self._check_status(url, response.status_code)
        try:
            return response.json()
        except ValueError as exc:
            raise InvalidPayloadError(f"{url} did not return JSON") from exc

    def _log_retry(self, state: RetryCallState) -> None:
        exc = state.outcome.exception() if state.outcome is not None else None
        log_event(
            self.logger,
            f"retrying after: {exc}",
            component="http",
            event="HTTP_RETRY",
            status="retry",
            error_code=getattr(exc, "error_code", None),
        )

    def get_json(
        self,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        timeout: TimeoutConfig | None = None,
    ) -> Any:
        retrying = Retrying(
            stop=stop_after_attempt(self.retry.max_attempts),
            wait=wait_exponential_jitter(initial=self.retry.multiplier, max=self.retry.max_wait, jitter=1.0),
            retry=retry_if_exception_type(RetryableHttpError),
            before_sleep=self._log_retry,
            reraise=True,
        )
        return retrying(self._fetch_once, url, params, timeout or self.timeout)
