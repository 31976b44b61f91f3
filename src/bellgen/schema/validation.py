"""
Configuration validation split into focused validators.

The engine trusts its inputs; these checks are what callers run before
invoking it. Each validator returns lists of messages instead of raising so
the facade and CLI can report everything at once.
"""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from dataclasses import asdict, is_dataclass
from typing import Any

from . import defaults


def _as_float(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(parsed):
        return None
    return parsed


def _as_int(value: Any) -> int | None:
    parsed = _as_float(value)
    if parsed is None or not parsed.is_integer():
        return None
    return int(parsed)


def validate_table_section(table: Mapping[str, Any]) -> tuple[list[str], list[str]]:
    """Validate the table fields.

    Args:
        table: Mapping with ``first_row_expectation``, ``min_col``,
            ``max_col`` and optional ``max_diff``.

    Returns:
        ``(warnings, errors)``
    """

    warnings: list[str] = []
    errors: list[str] = []

    for key in ("first_row_expectation", "min_col", "max_col"):
        if table.get(key) is None:
            errors.append(f"table.{key} is required")
    if errors:
        return warnings, errors

    first = _as_float(table["first_row_expectation"])
    if first is None:
        errors.append("table.first_row_expectation must be a finite number")

    min_col = _as_int(table["min_col"])
    if min_col is None:
        errors.append("table.min_col must be an integer")
    max_col = _as_int(table["max_col"])
    if max_col is None:
        errors.append("table.max_col must be an integer")

    if min_col is not None and max_col is not None and max_col <= min_col:
        errors.append("table.max_col must be greater than table.min_col")

    max_diff = table.get("max_diff")
    parsed_diff = None
    if max_diff is not None:
        parsed_diff = _as_float(max_diff)
        if parsed_diff is None:
            errors.append("table.max_diff must be a finite number")
        elif parsed_diff < 0:
            errors.append("table.max_diff must be >= 0")

    if errors:
        return warnings, errors

    if first < min_col or first > max_col:
        warnings.append(
            f"table.first_row_expectation={first} lies outside "
            f"[{min_col}, {max_col}]; rows will pile up at the boundary"
        )
    n_cols = max_col - min_col + 1
    if n_cols > defaults.LARGE_COLUMN_COUNT:
        warnings.append(
            f"{n_cols} columns requested; pair search slows down above "
            f"{defaults.LARGE_COLUMN_COUNT}"
        )
    if parsed_diff is not None and parsed_diff < defaults.SECOND_ROW_INCREMENT:
        warnings.append(
            f"table.max_diff={parsed_diff} is below the second-row increment "
            f"{defaults.SECOND_ROW_INCREMENT}; the increment will shrink to fit"
        )
    return warnings, errors


def validate_table_config(config: Any) -> tuple[list[str], list[str]]:
    """Validate a ``TableConfig`` or a snake_case mapping of its fields."""

    if is_dataclass(config) and not isinstance(config, type):
        section = asdict(config)
    elif isinstance(config, Mapping):
        section = dict(config)
    else:
        return [], ["table config must be a TableConfig or mapping"]
    return validate_table_section(section)


def validate_shape_section(shape: Mapping[str, Any]) -> tuple[list[str], list[str]]:
    warnings: list[str] = []
    errors: list[str] = []

    strategy = shape.get("strategy")
    if strategy is not None:
        if str(strategy).strip().lower() not in defaults.SHAPE_STRATEGIES:
            options = ", ".join(defaults.SHAPE_STRATEGIES)
            errors.append(f"shape.strategy must be one of: {options}")

    for key in ("sigma", "sigma_min", "sigma_max"):
        value = shape.get(key)
        if value is None:
            continue
        parsed = _as_float(value)
        if parsed is None or parsed <= 0:
            errors.append(f"shape.{key} must be a positive number")

    sigma_min = _as_float(shape.get("sigma_min", defaults.DEFAULT_SIGMA_MIN))
    sigma_max = _as_float(shape.get("sigma_max", defaults.DEFAULT_SIGMA_MAX))
    if sigma_min is not None and sigma_max is not None and sigma_max < sigma_min:
        errors.append("shape.sigma_max must be >= shape.sigma_min")

    skew_max = shape.get("skew_max")
    if skew_max is not None:
        parsed = _as_float(skew_max)
        if parsed is None or parsed < 0 or parsed >= 1:
            errors.append("shape.skew_max must be in [0, 1)")

    band_weight = shape.get("band_weight")
    if band_weight is not None:
        parsed = _as_float(band_weight)
        if parsed is None or parsed < 0:
            errors.append("shape.band_weight must be >= 0")

    band = shape.get("peak_band")
    if band is not None:
        if (
            isinstance(band, (str, bytes))
            or not isinstance(band, Sequence)
            or len(band) != 2
        ):
            errors.append("shape.peak_band must be a [low, high] pair")
        else:
            low, high = _as_int(band[0]), _as_int(band[1])
            if low is None or high is None:
                errors.append("shape.peak_band bounds must be integers")
            elif not 0 <= low <= high <= defaults.TOTAL:
                errors.append(
                    f"shape.peak_band must satisfy 0 <= low <= high <= {defaults.TOTAL}"
                )
            elif str(strategy or "").strip().lower() == "fixed":
                warnings.append(
                    "shape.peak_band with the fixed strategy only shapes one candidate"
                )

    return warnings, errors


def validate_metadata(metadata: Mapping[str, Any]) -> list[str]:
    """Validate the metadata section; problems are warnings, not errors."""

    warnings = []

    log_level = metadata.get("log_level")
    if log_level is not None and str(log_level).strip().lower() not in (
        "info",
        "quiet",
        "debug",
    ):
        warnings.append("metadata.log_level must be info, quiet, or debug")

    for key in ("log_dir", "output_path"):
        value = metadata.get(key)
        if value is not None and (not isinstance(value, str) or not value.strip()):
            warnings.append(f"metadata.{key} must be a non-empty string")

    seed = metadata.get("seed")
    if seed is not None and _as_int(seed) is None:
        warnings.append("metadata.seed must be an integer")

    for key in ("attempts", "row_workers", "sum_budget", "refine_budget"):
        value = metadata.get(key)
        if value is None:
            continue
        parsed = _as_int(value)
        if parsed is None:
            warnings.append(f"metadata.{key} must be an integer")
        elif parsed < 1:
            warnings.append(f"metadata.{key} must be >= 1")

    return warnings
