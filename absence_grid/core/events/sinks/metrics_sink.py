"""
Prometheus metrics event sink.
"""
from __future__ import annotations

import logging
import os
from typing import Any

from prometheus_client import CollectorRegistry, Counter, Gauge, push_to_gateway

from absence_grid.core.events.events import (
    IntervalChangedEvent,
    PageLoadedEvent,
    PageLoadFailedEvent,
    PaginationResetEvent,
    StalePageDiscardedEvent,
)

LOGGER = logging.getLogger(__name__)


class PrometheusMetricsSink:
    """Translates domain events into Prometheus counters and gauges.

    Metrics live on an injectable CollectorRegistry so several grids (or test
    cases) never share collectors.

    Optional environment:
    - PROMETHEUS_PUSHGATEWAY_URL: when set, push_all() delivers the registry
      to that Pushgateway. Delivery is best-effort.
    """

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        self.registry = registry if registry is not None else CollectorRegistry()
        self._pushgateway_url = os.environ.get("PROMETHEUS_PUSHGATEWAY_URL")

        self._pages_loaded = Counter(
            "absence_grid_pages_loaded",
            "Pages appended to the resident row set.",
            registry=self.registry,
        )
        self._page_failures = Counter(
            "absence_grid_page_load_failures",
            "Page fetches that failed at the data provider.",
            registry=self.registry,
        )
        self._stale_pages = Counter(
            "absence_grid_stale_pages_discarded",
            "Page completions ignored because a reset happened meanwhile.",
            registry=self.registry,
        )
        self._interval_changes = Counter(
            "absence_grid_interval_changes",
            "Interval mutations by action.",
            labelnames=["action"],
            registry=self.registry,
        )
        self._loaded_rows = Gauge(
            "absence_grid_loaded_rows",
            "Rows currently materialized.",
            registry=self.registry,
        )
        self._total_rows = Gauge(
            "absence_grid_total_rows",
            "Rows available at the data provider.",
            registry=self.registry,
        )

    def on_event(self, event: Any) -> None:
        if isinstance(event, PageLoadedEvent):
            self._pages_loaded.inc()
            self._loaded_rows.set(event.loaded_count)
            self._total_rows.set(event.total_count)
        elif isinstance(event, PageLoadFailedEvent):
            self._page_failures.inc()
        elif isinstance(event, StalePageDiscardedEvent):
            self._stale_pages.inc()
        elif isinstance(event, PaginationResetEvent):
            self._loaded_rows.set(0)
            self._total_rows.set(event.total_count)
        elif isinstance(event, IntervalChangedEvent):
            self._interval_changes.labels(action=event.action).inc()

    def push_all(self, *, job: str) -> None:
        if not self._pushgateway_url:
            return

        push_to_gateway(
            gateway=self._pushgateway_url,
            job=job,
            registry=self.registry,
        )

        LOGGER.info("Prometheus metrics pushed", extra={"job": job})
