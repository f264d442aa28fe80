"""Grid configuration model."""

from __future__ import annotations

from datetime import date
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class GridConfig(BaseModel):
    """Structured grid configuration.

    JSON example:
        {
          "year": 2024,
          "row_height": 48,
          "cell_width": 40,
          "page_size": 50
        }
    """

    year: int = Field(default_factory=lambda: date.today().year, ge=1, le=9999)

    row_height: float = Field(default=48.0, gt=0)
    cell_width: float = Field(default=40.0, gt=0)

    # Render-ahead margins; smoothness only, no correctness impact.
    row_overscan: int = Field(default=5, ge=0)
    column_overscan: int = Field(default=10, ge=0)

    page_size: int = Field(default=50, gt=0)
    # Rows before the loaded boundary at which the next page is requested.
    # None means one page.
    prefetch_margin_rows: int | None = Field(default=None, ge=0)

    throttle_ms: float = Field(default=16.0, ge=0)
    debounce_ms: float = Field(default=150.0, ge=0)

    model_config = ConfigDict(extra="forbid")

    @classmethod
    def from_json_obj(cls, grid_obj: dict[str, Any]) -> GridConfig:
        """Create a GridConfig instance from a JSON-compatible object."""
        return cls.model_validate(grid_obj)

    @model_validator(mode="after")
    def validate_consistency(self) -> GridConfig:
        """Validate internal consistency of the grid configuration."""
        if self.debounce_ms and self.throttle_ms and self.debounce_ms < self.throttle_ms:
            raise ValueError("debounce_ms must not be shorter than throttle_ms")
        return self

    @property
    def effective_prefetch_margin(self) -> int:
        if self.prefetch_margin_rows is None:
            return self.page_size
        return self.prefetch_margin_rows
