"""
Error measures for candidate rows and quality reporting for whole tables.
"""

from __future__ import annotations

import math
from typing import Any

from ..schema import defaults


def weighted_mean(values, labels, total=defaults.TOTAL) -> float:
    weighted = 0
    for count, label in zip(values, labels):
        weighted += count * label
    return float(weighted) / float(total)


def mean_error(values, labels, target, total=defaults.TOTAL) -> float:
    return abs(weighted_mean(values, labels, total) - float(target))


def band_violation(peak_count, peak_band) -> float:
    """Distance of ``peak_count`` outside ``peak_band``; 0 inside or unbanded."""

    if peak_band is None:
        return 0.0
    low, high = peak_band
    if peak_count < low:
        return float(low - peak_count)
    if peak_count > high:
        return float(peak_count - high)
    return 0.0


def candidate_score(
    values,
    labels,
    target,
    total=defaults.TOTAL,
    peak_band=None,
    band_weight=defaults.DEFAULT_BAND_WEIGHT,
) -> float:
    error = mean_error(values, labels, target, total)
    if peak_band is None or not len(values):
        return error
    return error + float(band_weight) * band_violation(max(values), peak_band)


def is_unimodal(values) -> bool:
    """True when some peak index splits ``values`` into up-then-down runs."""

    if any(v < 0 for v in values):
        return False
    idx = 0
    n = len(values)
    while idx + 1 < n and values[idx] <= values[idx + 1]:
        idx += 1
    while idx + 1 < n and values[idx] >= values[idx + 1]:
        idx += 1
    return idx >= n - 1


def expectation_spread(targets) -> float:
    if not targets:
        return 0.0
    return float(max(targets) - min(targets))


def build_quality_report(
    table,
    max_diff=None,
    tolerance=defaults.DEFAULT_MEAN_TOLERANCE,
    total=defaults.TOTAL,
    top_n=3,
) -> dict[str, Any]:
    """Summarize how well ``table`` meets the row and schedule invariants."""

    per_row = []
    for row in table.rows:
        counts = [int(row.values.get(col, 0)) for col in table.columns]
        per_row.append(
            {
                "row_index": int(row.row_index),
                "target_expectation": float(row.target_expectation),
                "actual_expectation": float(row.actual_expectation),
                "mean_error": float(row.mean_error),
                "sum": int(sum(counts)),
                "unimodal": bool(is_unimodal(counts)),
                "peak_count": int(max(counts)) if counts else 0,
            }
        )

    errors = [item["mean_error"] for item in per_row]
    spread = expectation_spread(table.targets())
    sums_ok = all(item["sum"] == total for item in per_row)
    unimodal_ok = all(item["unimodal"] for item in per_row)
    max_error = max(errors) if errors else 0.0
    mean_err = math.fsum(errors) / len(errors) if errors else 0.0

    spread_ok = True
    if max_diff is not None:
        spread_ok = spread <= float(max_diff) + 1e-9

    worst = sorted(per_row, key=lambda item: item["mean_error"], reverse=True)
    return {
        "rows": per_row,
        "max_mean_error": float(max_error),
        "mean_mean_error": float(mean_err),
        "expectation_spread": float(spread),
        "max_diff": None if max_diff is None else float(max_diff),
        "spread_ok": bool(spread_ok),
        "sums_ok": bool(sums_ok),
        "unimodal_ok": bool(unimodal_ok),
        "within_tolerance": bool(max_error <= float(tolerance)),
        "worst_rows": worst[: max(0, int(top_n))],
    }
