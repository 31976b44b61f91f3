"""
Default settings for table synthesis.
"""

TOTAL = 100
ROW_COUNT = 16

DEFAULT_SEED = 42
DEFAULT_LOG_LEVEL = "info"
DEFAULT_OUTPUT_NAME = "bellgen.xlsx"

# Expectation schedule
DEFAULT_MAX_DIFF = 2.5
SECOND_ROW_INCREMENT = 0.8
THIRD_ROW_OFFSET_MIN = 0.1
THIRD_ROW_OFFSET_MAX = 0.3
DECAY_JITTER_FRAC = 0.3
REANCHOR_OFFSET_MIN = 0.01
REANCHOR_OFFSET_MAX = 0.05

# Shape draws
DEFAULT_SHAPE_STRATEGY = "skewed"
SHAPE_STRATEGIES = ("fixed", "symmetric", "skewed")
DEFAULT_SIGMA = 1.8
DEFAULT_SIGMA_MIN = 1.2
DEFAULT_SIGMA_MAX = 2.4
DEFAULT_SKEW_MAX = 0.35
DEFAULT_BAND_WEIGHT = 0.01

# Search budgets
DEFAULT_ATTEMPTS = 4
DEFAULT_SUM_BUDGET = 200
DEFAULT_REFINE_BUDGET = 300
CONVERGENCE_EPS = 0.001
MIN_IMPROVEMENT = 1e-12

# Acceptance
DEFAULT_MEAN_TOLERANCE = 0.05
LARGE_COLUMN_COUNT = 30
