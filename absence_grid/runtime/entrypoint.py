from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any

from absence_grid.core.domain.pagination import PaginationController
from absence_grid.core.events.event_bus import EventBus
from absence_grid.core.events.sinks.file_recorder import FileRecorderSink
from absence_grid.core.events.sinks.metrics_sink import PrometheusMetricsSink
from absence_grid.core.events.sinks.sink_logging import LoggingEventSink
from absence_grid.grid.coordinator import GridCoordinator, GridView, Viewport
from absence_grid.grid.grid_config import GridConfig
from absence_grid.providers.in_memory import InMemoryDataProvider

LOGGER = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _load_json(path: Path) -> Any:
    if not path.exists():
        raise FileNotFoundError(path)
    return json.loads(path.read_text(encoding="utf-8"))


def _build_event_bus(*, events_path: Path | None) -> tuple[EventBus, PrometheusMetricsSink]:
    metrics = PrometheusMetricsSink()
    sinks: list[Any] = [LoggingEventSink(logging.getLogger("bus")), metrics]
    if events_path is not None:
        sinks.append(FileRecorderSink(events_path))
    return EventBus(sinks=sinks), metrics


def summarize_view(view: GridView) -> dict[str, Any]:
    """JSON-compatible summary of one computed grid."""
    return {
        "rows": {
            "start_index": view.row_window.start_index,
            "end_index": view.row_window.end_index,
            "total_extent": view.row_window.total_extent,
        },
        "columns": {
            "start_index": view.column_window.start_index,
            "end_index": view.column_window.end_index,
            "total_extent": view.column_window.total_extent,
        },
        "loaded_count": view.loaded_count,
        "total_count": view.total_count,
        "prefetch_requested": view.prefetch_requested,
        "absent_cells": [
            {
                "entity_id": cell.entity_id,
                "day": cell.day.isoformat(),
                "interval_id": cell.interval.id,
                "category": cell.interval.category.value,
            }
            for cell in view.absent_cells()
            if cell.interval is not None
        ],
    }


async def run_snapshot(
    *,
    config: GridConfig,
    provider: InMemoryDataProvider,
    viewport: Viewport,
    event_bus: EventBus,
) -> dict[str, Any]:
    pagination = PaginationController(provider, event_bus, page_size=config.page_size)
    await pagination.initialize()

    coordinator = GridCoordinator(pagination, config)
    try:
        view = coordinator.compute_grid(viewport)
        # Let a triggered prefetch land so the summary reflects it.
        await pagination.wait_idle()
    finally:
        coordinator.close()

    summary = summarize_view(view)
    summary["loaded_count_after_prefetch"] = pagination.loaded_count
    return summary


def main() -> None:
    parser = argparse.ArgumentParser("compute one absence grid snapshot")
    parser.add_argument("--config", type=Path, required=False, help="GridConfig JSON file")
    parser.add_argument("--entities", type=Path, required=True, help="Entities JSON file (list)")

    parser.add_argument("--scroll-top", type=float, default=0.0)
    parser.add_argument("--scroll-left", type=float, default=0.0)
    parser.add_argument("--width", type=float, default=1200.0)
    parser.add_argument("--height", type=float, default=800.0)

    parser.add_argument("--events-path", type=Path, default=None, help="Optional JSONL event log")
    parser.add_argument("--log-level", type=str, default="WARNING")

    args = parser.parse_args()

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    config = GridConfig.from_json_obj(_load_json(args.config)) if args.config else GridConfig()
    provider = InMemoryDataProvider.from_json_file(args.entities)
    viewport = Viewport(
        scroll_top=args.scroll_top,
        scroll_left=args.scroll_left,
        width=args.width,
        height=args.height,
    )

    event_bus, metrics = _build_event_bus(events_path=args.events_path)
    try:
        summary = asyncio.run(
            run_snapshot(
                config=config,
                provider=provider,
                viewport=viewport,
                event_bus=event_bus,
            )
        )
    finally:
        event_bus.close()

    try:
        metrics.push_all(job="absence_grid_snapshot")
    except Exception:
        LOGGER.exception("Prometheus push failed")

    json.dump(summary, sys.stdout, indent=2)
    sys.stdout.write("\n")


if __name__ == "__main__":
    main()
