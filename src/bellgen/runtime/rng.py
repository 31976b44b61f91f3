"""
Randomness utilities with deterministic seed derivation.
"""

import hashlib

import numpy as np


# Seed namespace convention:
# - Use one base seed for the entire table.
# - Derive per-row/per-attempt streams with RNG.spawn("row", r, "attempt", a).
# - Reserved namespaces: expectations, row, attempt.
class RNG:
    def __init__(self, seed=42):
        self.seed = int(seed)
        self.rng = np.random.default_rng(self.seed)

    @staticmethod
    def derive_seed(base_seed, *parts):
        h = hashlib.sha256()
        h.update(str(base_seed).encode())
        for part in parts:
            h.update(b":")
            h.update(str(part).encode())
        return int(h.hexdigest(), 16) % (2**32)

    def spawn(self, *parts):
        """Return an independent stream keyed by ``parts`` under this seed."""

        return RNG(self.derive_seed(self.seed, *parts))

    def uniform(self, low=0.0, high=1.0):
        return float(self.rng.uniform(low, high))
