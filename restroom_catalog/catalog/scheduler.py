"""Debounced region queries for continuous viewport movement."""

from __future__ import annotations

import logging
import threading
from typing import Callable

from restroom_catalog.catalog.catalog import ToiletCatalog
from restroom_catalog.common.geometry import Region
from restroom_catalog.common.logging import get_logger, log_debug_event, log_event
from restroom_catalog.common.models import RestroomRecord

ResultCallback = Callable[[Region, list[RestroomRecord]], None]
Dispatcher = Callable[[Callable[[], None]], None]


def _call_now(fn: Callable[[], None]) -> None:
    fn()


class RegionQueryScheduler:
    """Run a region query only after the viewport has settled.

    Each ``submit`` cancels the pending timer and arms a new one. The query
    runs on the timer thread; its result is handed to ``dispatch`` (the host's
    UI-thread marshaller) unless a newer submit has happened since, in which
    case it is dropped.
    """

    def __init__(
        self,
        catalog: ToiletCatalog,
        on_result: ResultCallback,
        *,
        delay: float | None = None,
        max_count: int | None = None,
        dispatch: Dispatcher | None = None,
        timer_factory: Callable[..., threading.Timer] = threading.Timer,
        logger: logging.Logger | None = None,
    ) -> None:
        self.catalog = catalog
        self.on_result = on_result
        self.delay = catalog.config.debounce_seconds if delay is None else delay
        self.max_count = catalog.config.scheduler_max_count if max_count is None else max_count
        self.dispatch = dispatch or _call_now
        self.timer_factory = timer_factory
        self.logger = logger or get_logger()
        self._lock = threading.Lock()
        self._timer: threading.Timer | None = None
        self._generation = 0
        self._closed = False

    @property
    def generation(self) -> int:
        with self._lock:
            return self._generation

    def submit(self, region: Region) -> int:
        settled = region.clamped(self.catalog.config.min_span, self.catalog.config.max_span)
        with self._lock:
            if self._closed:
                raise RuntimeError("scheduler is closed")
            if self._timer is not None:
                self._timer.cancel()
            self._generation += 1
            generation = self._generation
            timer = self.timer_factory(self.delay, self._run, args=(generation, settled))
            timer.daemon = True
            self._timer = timer
        timer.start()
        return generation

    def _is_current(self, generation: int) -> bool:
        with self._lock:
            return not self._closed and generation == self._generation

    def _run(self, generation: int, region: Region) -> None:
        if not self._is_current(generation):
            return
        records = self.catalog.query_region(region, self.max_count)
        if not self._is_current(generation):
            log_debug_event(
                self.logger,
                "dropping stale region result",
                component="scheduler",
                event="REGION_STALE",
                status="skipped",
                rows_out=len(records),
            )
            return

        def _deliver() -> None:
            # The host may marshal this later; re-check before applying.
            if self._is_current(generation):
                self.on_result(region, records)

        self.dispatch(_deliver)

    def cancel(self) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            self._generation += 1

    def close(self) -> None:
        self.cancel()
        with self._lock:
            self._closed = True
        log_event(self.logger, "region scheduler closed", component="scheduler", event="SCHEDULER_CLOSE", status="ok")
