"""
Row synthesis with multi-candidate selection, and table assembly.
"""

from __future__ import annotations

from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass

from ..api.models import RowData, ShapeConfig, TableConfig, TableResult
from ..runtime.rng import RNG
from ..schema import defaults
from ..scoring.metrics import candidate_score, weighted_mean
from .adjustments import correct_sum, refine_mean
from .density import draw_shape, integerize, sample_density
from .expectations import build_expectations
from .unimodal import peak_index, repair_unimodal


@dataclass
class RowCandidate:
    values: list[int]
    score: float
    peak: int
    sigma_left: float
    sigma_right: float
    attempt: int


def run_pipeline(
    labels,
    target,
    sigma_left,
    sigma_right,
    shape=None,
    total=defaults.TOTAL,
    sum_budget=defaults.DEFAULT_SUM_BUDGET,
    refine_budget=defaults.DEFAULT_REFINE_BUDGET,
):
    """Density -> integers -> repair -> sum fix -> mean refinement.

    Returns ``(values, score, peak)``.
    """

    if shape is None:
        shape = ShapeConfig()
    peak = peak_index(labels, target)
    weights = sample_density(labels, target, sigma_left, sigma_right)
    counts = integerize(weights, peak, total=total).tolist()
    counts = repair_unimodal(counts, peak)
    counts = correct_sum(counts, labels, peak, target, total=total, budget=sum_budget)
    counts = refine_mean(
        counts,
        labels,
        peak,
        target,
        total=total,
        budget=refine_budget,
        peak_band=shape.peak_band,
        band_weight=shape.band_weight,
    )
    score = candidate_score(
        counts,
        labels,
        target,
        total=total,
        peak_band=shape.peak_band,
        band_weight=shape.band_weight,
    )
    return counts, score, peak


def synthesize_row(
    labels,
    target,
    rng,
    shape=None,
    attempts=defaults.DEFAULT_ATTEMPTS,
    total=defaults.TOTAL,
    sum_budget=defaults.DEFAULT_SUM_BUDGET,
    refine_budget=defaults.DEFAULT_REFINE_BUDGET,
) -> RowCandidate:
    """Run the pipeline for several shape draws and keep the lowest score."""

    if shape is None:
        shape = ShapeConfig()
    if str(shape.strategy).strip().lower() == "fixed":
        attempts = 1
    attempts = max(1, int(attempts))

    best = None
    for attempt in range(attempts):
        attempt_rng = rng.spawn("attempt", attempt)
        sigma_left, sigma_right = draw_shape(attempt_rng, shape)
        values, score, peak = run_pipeline(
            labels,
            target,
            sigma_left,
            sigma_right,
            shape=shape,
            total=total,
            sum_budget=sum_budget,
            refine_budget=refine_budget,
        )
        if best is None or score < best.score:
            best = RowCandidate(
                values=values,
                score=float(score),
                peak=peak,
                sigma_left=float(sigma_left),
                sigma_right=float(sigma_right),
                attempt=attempt,
            )
    return best


def _run_row(job):
    row_index, labels, target, seed, shape, attempts, sum_budget, refine_budget = job
    candidate = synthesize_row(
        labels,
        target,
        RNG(seed),
        shape=shape,
        attempts=attempts,
        sum_budget=sum_budget,
        refine_budget=refine_budget,
    )
    return row_index, candidate


def _assemble_row(row_index, labels, target, candidate, total) -> RowData:
    values = {label: int(count) for label, count in zip(labels, candidate.values)}
    return RowData(
        row_index=int(row_index),
        target_expectation=float(target),
        actual_expectation=weighted_mean(candidate.values, labels, total),
        values=values,
        sum=int(sum(candidate.values)),
        peak_column=int(labels[candidate.peak]),
        sigma_left=candidate.sigma_left,
        sigma_right=candidate.sigma_right,
        score=candidate.score,
    )


def _run_rows(jobs, row_workers, logger, log_level):
    if row_workers > 1 and len(jobs) > 1:
        worker_count = min(row_workers, len(jobs))
        if logger is not None and log_level != "quiet":
            logger.info(f"[ROW MODE] parallel workers={worker_count} rows={len(jobs)}")
        try:
            with ProcessPoolExecutor(max_workers=worker_count) as executor:
                return list(executor.map(_run_row, jobs))
        except Exception as exc:
            if logger is not None:
                logger.warning(
                    "[ROW MODE] "
                    f"parallel execution failed ({exc}); falling back to sequential"
                )
    return [_run_row(job) for job in jobs]


def generate_table(
    config: TableConfig,
    rng=None,
    shape=None,
    attempts=defaults.DEFAULT_ATTEMPTS,
    sum_budget=defaults.DEFAULT_SUM_BUDGET,
    refine_budget=defaults.DEFAULT_REFINE_BUDGET,
    row_workers=1,
    logger=None,
    log_level="info",
) -> TableResult:
    """Synthesize all rows for ``config``.

    ``config.max_col > config.min_col`` is a precondition. ``rng`` may be an
    :class:`RNG`, an integer seed, or ``None`` for the default seed; the same
    seed always yields the same table, whatever ``row_workers`` is.
    """

    if not isinstance(rng, RNG):
        rng = RNG(defaults.DEFAULT_SEED if rng is None else rng)
    if shape is None:
        shape = ShapeConfig()
    try:
        row_workers = max(1, int(row_workers))
    except (TypeError, ValueError):
        row_workers = 1

    total = defaults.TOTAL
    labels = config.columns
    targets = build_expectations(
        config.first_row_expectation,
        config.resolved_max_diff(),
        rng.spawn("expectations"),
    )
    if logger is not None and log_level != "quiet":
        preview = ", ".join(f"{t:.3f}" for t in targets)
        logger.info(f"[EXPECTATIONS] seed={rng.seed} targets=[{preview}]")

    jobs = [
        (
            row_index,
            labels,
            target,
            RNG.derive_seed(rng.seed, "row", row_index),
            shape,
            attempts,
            sum_budget,
            refine_budget,
        )
        for row_index, target in enumerate(targets, start=1)
    ]

    rows = []
    for row_index, candidate in _run_rows(jobs, row_workers, logger, log_level):
        target = targets[row_index - 1]
        row = _assemble_row(row_index, labels, target, candidate, total)
        if logger is not None:
            if row.sum != total:
                logger.warning(
                    f"[ROW {row_index}/{len(targets)}] sum={row.sum} "
                    f"budget exhausted before reaching {total}"
                )
            if log_level != "quiet":
                logger.info(
                    f"[ROW {row_index}/{len(targets)}] target={target:.4f} "
                    f"actual={row.actual_expectation:.4f} peak={row.peak_column} "
                    f"sigma=({row.sigma_left:.3f}, {row.sigma_right:.3f}) "
                    f"attempt={candidate.attempt + 1} score={row.score:.6f}"
                )
        rows.append(row)

    return TableResult(columns=list(labels), rows=rows)
