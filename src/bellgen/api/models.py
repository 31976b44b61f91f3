"""Public runtime models for the import-first API."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import pandas as pd

from ..schema import defaults


@dataclass(frozen=True)
class TableConfig:
    """Caller-supplied description of the table to synthesize.

    ``max_col`` must be greater than ``min_col``; the engine assumes this and
    does not check it. Use :func:`bellgen.schema.validation.validate_table_config`
    before calling the engine directly.
    """

    first_row_expectation: float
    min_col: int
    max_col: int
    max_diff: float | None = None

    @property
    def columns(self) -> list[int]:
        return list(range(int(self.min_col), int(self.max_col) + 1))

    def resolved_max_diff(self) -> float:
        if self.max_diff is None:
            return float(defaults.DEFAULT_MAX_DIFF)
        return float(self.max_diff)


@dataclass(frozen=True)
class ShapeConfig:
    """How candidate bell shapes are drawn for each row."""

    strategy: str = defaults.DEFAULT_SHAPE_STRATEGY
    sigma: float = defaults.DEFAULT_SIGMA
    sigma_min: float = defaults.DEFAULT_SIGMA_MIN
    sigma_max: float = defaults.DEFAULT_SIGMA_MAX
    skew_max: float = defaults.DEFAULT_SKEW_MAX
    peak_band: tuple[int, int] | None = None
    band_weight: float = defaults.DEFAULT_BAND_WEIGHT


@dataclass
class RunConfig:
    """Top-level runtime options for table generation."""

    seed: int | None = None
    attempts: int | None = None
    row_workers: int | None = None
    sum_budget: int | None = None
    refine_budget: int | None = None
    log_level: str | None = None
    log_dir: str | None = None
    output_path: str | None = None
    shape: ShapeConfig | None = None


@dataclass
class RowData:
    """One synthesized row: a unimodal count vector summing to the total."""

    row_index: int
    target_expectation: float
    actual_expectation: float
    values: dict[int, int]
    sum: int
    peak_column: int
    sigma_left: float = 0.0
    sigma_right: float = 0.0
    score: float = 0.0

    @property
    def mean_error(self) -> float:
        return abs(self.actual_expectation - self.target_expectation)


@dataclass
class TableResult:
    """Column labels plus the ordered rows of a generated table."""

    columns: list[int]
    rows: list[RowData]

    def targets(self) -> list[float]:
        return [row.target_expectation for row in self.rows]

    def to_dataframe(self) -> pd.DataFrame:
        """Return a numeric frame with one record per row, indexed by row."""

        records = []
        for row in self.rows:
            record: dict[str, Any] = {
                "row": row.row_index,
                "target_expectation": row.target_expectation,
                "actual_expectation": row.actual_expectation,
            }
            for col in self.columns:
                record[col] = int(row.values.get(col, 0))
            record["sum"] = row.sum
            record["peak_column"] = row.peak_column
            records.append(record)
        return pd.DataFrame.from_records(records).set_index("row")


@dataclass
class GenerateResult:
    """Result payload returned by high-level generation APIs."""

    table: TableResult
    dataframe: pd.DataFrame
    quality_report: dict[str, Any]
    success: bool
    seed: int
    output_path: Path | None
    log_path: Path
    runtime_notes: list[str] = field(default_factory=list)

    def max_mean_error(self) -> float:
        """Return the worst per-row mean error from the quality report."""

        return float(self.quality_report.get("max_mean_error", 0.0))
