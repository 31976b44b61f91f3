"""
Sample YAML configurations stored as strings.
"""

from typing import Any

from .config import load_config

CONFIG_DEFAULT = """
metadata:
  name: "interest_levels_default"
  seed: 42

table:
  first_row_expectation: 8.0
  min_col: 5
  max_col: 15
  max_diff: 2.5
"""

CONFIG_NARROW = """
metadata:
  name: "two_column_edge_case"
  seed: 7

table:
  first_row_expectation: 5.5
  min_col: 5
  max_col: 6
  max_diff: 0.5
"""

CONFIG_WIDE = """
metadata:
  name: "wide_range"
  seed: 11
  attempts: 5

table:
  first_row_expectation: 17.0
  min_col: 1
  max_col: 30
  max_diff: 4.0

shape:
  strategy: "skewed"
  sigma_min: 2.0
  sigma_max: 4.0
"""

CONFIG_BANDED = """
metadata:
  name: "peak_band_25_50"
  seed: 3

table:
  first_row_expectation: 8.0
  min_col: 5
  max_col: 15
  max_diff: 2.0

shape:
  strategy: "skewed"
  peak_band: [25, 50]
  band_weight: 0.01
"""

CONFIG_SYMMETRIC = """
metadata:
  name: "symmetric_fixed_sigma"
  seed: 5

table:
  firstRowExpectation: 10.0
  minCol: 5
  maxCol: 15

shape:
  strategy: "fixed"
  sigma: 1.8
"""


_SAMPLE_CONFIGS = {
    "default": CONFIG_DEFAULT,
    "narrow": CONFIG_NARROW,
    "wide": CONFIG_WIDE,
    "banded": CONFIG_BANDED,
    "symmetric": CONFIG_SYMMETRIC,
}


def available_sample_configs() -> list[str]:
    """Return sorted names for all built-in sample configurations."""

    return sorted(_SAMPLE_CONFIGS.keys())


def get_sample_config(name: str) -> dict[str, Any]:
    """Load one of the built-in sample configurations by name."""

    key = str(name).strip().lower()
    if key not in _SAMPLE_CONFIGS:
        options = ", ".join(available_sample_configs())
        raise ValueError(f"Unknown sample config '{name}'. Available: {options}")
    return load_config(_SAMPLE_CONFIGS[key])
