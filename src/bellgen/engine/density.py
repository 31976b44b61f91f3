"""
Bell-shaped weights and their conversion to integer counts.
"""

import numpy as np

from ..schema import defaults


def draw_shape(rng, shape):
    """Draw ``(sigma_left, sigma_right)`` for one candidate.

    ``fixed`` uses ``shape.sigma`` on both sides without touching ``rng``;
    ``symmetric`` draws one sigma; ``skewed`` also draws a skew that widens
    one side and narrows the other.
    """

    strategy = str(shape.strategy).strip().lower()
    if strategy == "fixed":
        sigma = float(shape.sigma)
        return sigma, sigma

    sigma = rng.uniform(float(shape.sigma_min), float(shape.sigma_max))
    if strategy == "symmetric":
        return sigma, sigma

    skew_max = float(shape.skew_max)
    skew = rng.uniform(-skew_max, skew_max) if skew_max > 0 else 0.0
    return sigma * (1.0 + skew), sigma * (1.0 - skew)


def sample_density(labels, mean, sigma_left, sigma_right=None):
    if sigma_right is None:
        sigma_right = sigma_left
    x = np.asarray(labels, dtype=float)
    sigma = np.where(x < mean, float(sigma_left), float(sigma_right))
    return np.exp(-((x - float(mean)) ** 2) / (2.0 * sigma**2))


def integerize(weights, peak, total=defaults.TOTAL):
    """Scale ``weights`` to ``total`` and round each entry half up.

    When every weight underflowed to zero the whole total lands on ``peak``.
    """

    weights = np.asarray(weights, dtype=float)
    mass = float(weights.sum())
    if not np.isfinite(mass) or mass <= 0:
        counts = np.zeros(len(weights), dtype=int)
        counts[peak] = int(total)
        return counts
    scaled = weights * (float(total) / mass)
    return np.floor(scaled + 0.5).astype(int)
