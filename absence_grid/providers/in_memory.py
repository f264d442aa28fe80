"""In-memory DataProvider implementation.

Serves a fixed list of entities page by page. Used by the CLI and by tests;
an optional latency simulates a remote source.
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any, Iterable, Sequence

from absence_grid.core.domain.types import Entity


class InMemoryDataProvider:
    """DataProvider over a list of entities."""

    def __init__(self, entities: Iterable[Entity], *, latency_s: float = 0.0) -> None:
        self._entities: list[Entity] = list(entities)
        self._latency_s = float(latency_s)
        self.fetch_calls: list[tuple[int, int]] = []

    @classmethod
    def from_json_obj(cls, entities_obj: list[dict[str, Any]], **kwargs: Any) -> InMemoryDataProvider:
        return cls([Entity.model_validate(obj) for obj in entities_obj], **kwargs)

    @classmethod
    def from_json_file(cls, path: str | Path, **kwargs: Any) -> InMemoryDataProvider:
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(path)
        return cls.from_json_obj(json.loads(path.read_text(encoding="utf-8")), **kwargs)

    async def fetch_page(self, offset: int, limit: int) -> Sequence[Entity]:
        self.fetch_calls.append((offset, limit))
        if self._latency_s > 0.0:
            await asyncio.sleep(self._latency_s)
        if offset < 0 or limit < 0:
            raise ValueError(f"invalid page bounds offset={offset} limit={limit}")
        return self._entities[offset : offset + limit]

    def total_count(self) -> int:
        return len(self._entities)
