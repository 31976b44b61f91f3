"""
Target-mean schedule for the rows of a table.

Row 1 is the caller's expectation, row 2 sits one increment above it and is
the maximum of the schedule, row 3 drops slightly below row 1, and the
remaining rows decay toward ``max(row1, row2) - max_diff`` in equal jittered
steps. Every value from row 3 on is kept inside ``[minimum, maximum]`` so the
whole schedule spans at most ``max_diff``.
"""

from ..schema import defaults


def _clamp(value, minimum, maximum, rng):
    if value < minimum:
        offset = rng.uniform(defaults.REANCHOR_OFFSET_MIN, defaults.REANCHOR_OFFSET_MAX)
        return minimum + min(offset, maximum - minimum)
    return min(value, maximum)


def expectation_bounds(first, max_diff):
    """Return ``(minimum, maximum)`` allowed for any target mean."""

    max_diff = max(0.0, float(max_diff))
    second = float(first) + min(defaults.SECOND_ROW_INCREMENT, max_diff)
    maximum = max(float(first), second)
    return maximum - max_diff, maximum


def build_expectations(first, max_diff, rng, row_count=defaults.ROW_COUNT):
    first = float(first)
    max_diff = max(0.0, float(max_diff))
    minimum, maximum = expectation_bounds(first, max_diff)
    second = first + min(defaults.SECOND_ROW_INCREMENT, max_diff)

    offset = rng.uniform(defaults.THIRD_ROW_OFFSET_MIN, defaults.THIRD_ROW_OFFSET_MAX)
    third = _clamp(first - offset, minimum, maximum, rng)

    targets = [first, second, third]
    remaining = int(row_count) - len(targets)
    if remaining <= 0:
        return targets[: int(row_count)]

    step = (third - minimum) / remaining
    jitter = abs(step) * defaults.DECAY_JITTER_FRAC
    for k in range(1, remaining + 1):
        value = third - step * k + rng.uniform(-jitter, jitter)
        targets.append(_clamp(value, minimum, maximum, rng))
    return targets
