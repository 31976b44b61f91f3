"""
Peak anchoring and single-peak constraints on integer count vectors.

All checks are relative to a fixed peak index ``p``: entries must be
non-decreasing on ``[0, p]`` and non-increasing on ``[p, n - 1]``.
"""


def peak_index(labels, target):
    """Index of the label closest to ``target``; ties go to the lower index."""

    best = 0
    best_dist = abs(labels[0] - target)
    for idx in range(1, len(labels)):
        dist = abs(labels[idx] - target)
        if dist < best_dist:
            best = idx
            best_dist = dist
    return best


def _edge_ok(values, k, peak):
    if k < 0 or k + 1 >= len(values):
        return True
    if k < peak:
        return values[k] <= values[k + 1]
    return values[k] >= values[k + 1]


def edges_ok(values, indices, peak):
    """Check only the constraints touching ``indices``."""

    for idx in indices:
        if not (_edge_ok(values, idx - 1, peak) and _edge_ok(values, idx, peak)):
            return False
    return True


def is_unimodal_about(values, peak):
    if any(v < 0 for v in values):
        return False
    return all(_edge_ok(values, k, peak) for k in range(len(values) - 1))


def repair_unimodal(values, peak):
    out = [int(v) for v in values]
    for idx in range(1, peak + 1):
        if out[idx] < out[idx - 1]:
            out[idx] = out[idx - 1]
    for idx in range(peak + 1, len(out)):
        if out[idx] > out[idx - 1]:
            out[idx] = out[idx - 1]
    return out
