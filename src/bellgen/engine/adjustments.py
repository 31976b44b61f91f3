"""
Greedy single-unit adjustments that keep a count vector unimodal.

``correct_sum`` nudges one column at a time until the vector sums to the
total; ``refine_mean`` then moves single units between columns to pull the
weighted mean onto the target. Both loops are capped by an iteration budget,
which is their only termination guarantee.
"""

from ..schema import defaults
from ..scoring.metrics import band_violation
from .unimodal import edges_ok


def correct_sum(
    values,
    labels,
    peak,
    target,
    total=defaults.TOTAL,
    budget=defaults.DEFAULT_SUM_BUDGET,
):
    values = [int(v) for v in values]
    weighted = sum(v * label for v, label in zip(values, labels))
    current = sum(values)
    total = int(total)
    target = float(target)

    iterations = 0
    while current != total and iterations < budget:
        step = 1 if current < total else -1
        best_idx = None
        best_error = float("inf")

        for idx in range(len(values)):
            candidate = values[idx] + step
            if candidate < 0:
                continue
            values[idx] = candidate
            keeps_shape = edges_ok(values, (idx,), peak)
            values[idx] -= step
            if not keeps_shape:
                continue
            error = abs((weighted + step * labels[idx]) / total - target)
            if error < best_error:
                best_error = error
                best_idx = idx

        if best_idx is None:
            # Incrementing the peak never breaks the shape.
            if step < 0 and values[peak] <= 0:
                break
            best_idx = peak

        values[best_idx] += step
        weighted += step * labels[best_idx]
        current += step
        iterations += 1

    return values


def refine_mean(
    values,
    labels,
    peak,
    target,
    total=defaults.TOTAL,
    budget=defaults.DEFAULT_REFINE_BUDGET,
    peak_band=None,
    band_weight=defaults.DEFAULT_BAND_WEIGHT,
    eps=defaults.CONVERGENCE_EPS,
):
    """Steepest-descent unit transfers on ``|mean - target|`` (+ band penalty).

    Every move keeps the vector unimodal about ``peak``, so the peak entry is
    always the maximum and is the count checked against ``peak_band``.
    """

    values = [int(v) for v in values]
    weighted = sum(v * label for v, label in zip(values, labels))
    total = float(total)
    target = float(target)
    n = len(values)

    def _score(weighted_sum, peak_count):
        error = abs(weighted_sum / total - target)
        if peak_band is None:
            return error
        return error + band_weight * band_violation(peak_count, peak_band)

    for _ in range(int(budget)):
        current = _score(weighted, values[peak])
        if current < eps:
            break

        best_move = None
        best_gain = defaults.MIN_IMPROVEMENT
        for src in range(n):
            if values[src] <= 0:
                continue
            values[src] -= 1
            for dst in range(n):
                if dst == src:
                    continue
                values[dst] += 1
                if edges_ok(values, (src, dst), peak):
                    shifted = weighted + labels[dst] - labels[src]
                    gain = current - _score(shifted, values[peak])
                    if gain > best_gain:
                        best_gain = gain
                        best_move = (src, dst)
                values[dst] -= 1
            values[src] += 1

        if best_move is None:
            break
        src, dst = best_move
        values[src] -= 1
        values[dst] += 1
        weighted += labels[dst] - labels[src]

    return values
