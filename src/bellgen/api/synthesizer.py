"""High-level import-first runtime API for table generation."""

from __future__ import annotations

import copy
from dataclasses import asdict
from pathlib import Path
from typing import Any

from ..engine.generation import generate_table
from ..runtime.logging_utils import close_run_logger, setup_run_logger
from ..schema import defaults
from ..schema.config import (
    build_shape_config,
    build_table_config,
    load_config,
    metadata_section,
    shape_section,
    table_section,
)
from ..schema.validation import (
    validate_metadata,
    validate_shape_section,
    validate_table_section,
)
from ..scoring.metrics import build_quality_report
from .export import export_excel, table_to_dataframe
from .models import GenerateResult, RunConfig

_VALID_LOG_LEVELS = {"info", "quiet", "debug"}


def _coerce_int(value: Any, fallback: int, minimum: int | None = None) -> int:
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        parsed = int(fallback)
    if minimum is not None:
        parsed = max(minimum, parsed)
    return parsed


def _normalize_choice(value: Any, allowed: set[str], fallback: str) -> str:
    text = str(value).strip().lower() if value is not None else ""
    if text in allowed:
        return text
    return fallback


def _first_set(*values: Any) -> Any:
    for value in values:
        if value is not None:
            return value
    return None


def _log_quality(logger, quality: dict[str, Any]) -> None:
    logger.info("[QUALITY REPORT]")
    logger.info(
        f"  max_mean_error={quality['max_mean_error']:.6f} "
        f"mean_mean_error={quality['mean_mean_error']:.6f} "
        f"expectation_spread={quality['expectation_spread']:.4f} "
        f"spread_ok={quality['spread_ok']} sums_ok={quality['sums_ok']} "
        f"unimodal_ok={quality['unimodal_ok']}"
    )
    logger.info("  worst_rows:")
    for row in quality["worst_rows"]:
        logger.info(
            f"    - row {row['row_index']}: target={row['target_expectation']:.4f} "
            f"actual={row['actual_expectation']:.4f} error={row['mean_error']:.6f} "
            f"peak_count={row['peak_count']}"
        )


class BellgenSynthesizer:
    """High-level facade for config-driven table generation."""

    def __init__(self, config: Any, run_config: RunConfig | None = None):
        self._config = load_config(config)
        self.run_config = run_config or RunConfig()

    def validate(self) -> tuple[list[str], list[str]]:
        """Return ``(warnings, errors)`` for the config and run overrides."""

        document = self._config
        warnings = validate_metadata(metadata_section(document))
        table_warnings, errors = validate_table_section(table_section(document))
        warnings.extend(table_warnings)

        shape = shape_section(document)
        if self.run_config.shape is not None:
            shape.update(asdict(self.run_config.shape))
        shape_warnings, shape_errors = validate_shape_section(shape)
        warnings.extend(shape_warnings)
        errors.extend(shape_errors)
        return warnings, errors

    def generate(self) -> GenerateResult:
        document = copy.deepcopy(self._config)
        metadata = metadata_section(document)
        run_cfg = self.run_config

        log_level = _normalize_choice(
            _first_set(run_cfg.log_level, metadata.get("log_level")),
            _VALID_LOG_LEVELS,
            defaults.DEFAULT_LOG_LEVEL,
        )
        logger, log_path = setup_run_logger(
            log_dir=_first_set(run_cfg.log_dir, metadata.get("log_dir")),
            name="bellgen",
            level=log_level,
        )
        runtime_notes: list[str] = []

        try:
            warnings, errors = self.validate()
            if warnings:
                logger.warning("[CONFIG WARNINGS]")
                for warning in warnings:
                    logger.warning(f"  - {warning}")
            if errors:
                raise ValueError("; ".join(errors))

            table_cfg = build_table_config(document)
            shape = build_shape_config(document, run_cfg.shape)
            seed = _coerce_int(
                _first_set(run_cfg.seed, metadata.get("seed")), defaults.DEFAULT_SEED
            )
            attempts = _coerce_int(
                _first_set(run_cfg.attempts, metadata.get("attempts")),
                defaults.DEFAULT_ATTEMPTS,
                minimum=1,
            )
            row_workers = _coerce_int(
                _first_set(run_cfg.row_workers, metadata.get("row_workers")),
                1,
                minimum=1,
            )
            sum_budget = _coerce_int(
                _first_set(run_cfg.sum_budget, metadata.get("sum_budget")),
                defaults.DEFAULT_SUM_BUDGET,
                minimum=1,
            )
            refine_budget = _coerce_int(
                _first_set(run_cfg.refine_budget, metadata.get("refine_budget")),
                defaults.DEFAULT_REFINE_BUDGET,
                minimum=1,
            )
            runtime_notes.append(f"Shape strategy: {shape.strategy}")
            if shape.strategy == "fixed" and attempts > 1:
                runtime_notes.append(
                    "Fixed shape strategy draws one candidate per row; "
                    f"attempts={attempts} ignored"
                )

            if log_level != "quiet":
                logger.info(
                    f"[RUN] seed={seed} columns={table_cfg.min_col}..{table_cfg.max_col} "
                    f"first={table_cfg.first_row_expectation} "
                    f"max_diff={table_cfg.resolved_max_diff()} attempts={attempts} "
                    f"row_workers={row_workers}"
                )

            table = generate_table(
                table_cfg,
                rng=seed,
                shape=shape,
                attempts=attempts,
                sum_budget=sum_budget,
                refine_budget=refine_budget,
                row_workers=row_workers,
                logger=logger,
                log_level=log_level,
            )

            quality = build_quality_report(
                table,
                max_diff=table_cfg.resolved_max_diff(),
                tolerance=defaults.DEFAULT_MEAN_TOLERANCE,
            )
            if log_level != "quiet":
                _log_quality(logger, quality)
            success = bool(
                quality["sums_ok"]
                and quality["unimodal_ok"]
                and quality["spread_ok"]
                and quality["within_tolerance"]
            )
            if not success:
                runtime_notes.append(
                    "Best-effort table: "
                    f"max_mean_error={quality['max_mean_error']:.4f} "
                    f"(tolerance {defaults.DEFAULT_MEAN_TOLERANCE})"
                )

            output_path = None
            requested_output = _first_set(
                run_cfg.output_path, metadata.get("output_path")
            )
            if requested_output is not None:
                output_path = export_excel(table, requested_output)
                if log_level != "quiet":
                    logger.info(f"[EXPORT] path={output_path}")
        finally:
            close_run_logger(logger)

        return GenerateResult(
            table=table,
            dataframe=table_to_dataframe(table),
            quality_report=quality,
            success=success,
            seed=seed,
            output_path=output_path,
            log_path=Path(log_path),
            runtime_notes=runtime_notes,
        )


def generate(config: Any, run_config: RunConfig | None = None) -> GenerateResult:
    """Generate a table from ``config`` in one call."""

    return BellgenSynthesizer(config, run_config).generate()
