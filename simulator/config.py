"""
simulator/config.py
-------------------
Tunable parameters for the allocation engine and its callers.

Keeping these separate from simulator/constants.py (which holds the fixed
rule tables) keeps a clean boundary: this file owns bounds, thresholds and
defaults that a caller might reasonably want to adjust, while the rule
tables describe the hand-authored investment policy itself.
"""

# ---------------------------------------------------------------------------
# Input bounds (the form clamps to these before calling the engine)
# ---------------------------------------------------------------------------

BUDGET_MIN: float = 100.0
BUDGET_MAX: float = 10_000_000.0

HORIZON_MIN: int = 1
HORIZON_MAX: int = 30

CRYPTO_CAP_MIN: float = 0.0
CRYPTO_CAP_MAX: float = 10.0

# ---------------------------------------------------------------------------
# Horizon tilt
# ---------------------------------------------------------------------------
# Long horizons shift weight from fixed income into equity; short horizons
# shift it back (twice as hard). Horizons strictly between the two
# thresholds are left alone.

LONG_HORIZON_YEARS: int = 10
LONG_HORIZON_EQUITY_DELTA: float = 5.0

SHORT_HORIZON_YEARS: int = 3
SHORT_HORIZON_EQUITY_DELTA: float = -10.0

# ---------------------------------------------------------------------------
# Output cleanup
# ---------------------------------------------------------------------------

# Line items below this percentage are folded into one "Consolidated" row.
CONSOLIDATION_THRESHOLD_PCT: float = 0.4

# Absolute tolerance for the sum-to-100 invariant and region split check.
SUM_TOLERANCE: float = 1e-6

# ---------------------------------------------------------------------------
# Presentation
# ---------------------------------------------------------------------------

TOP_CAGR_ROWS: int = 8
CAGR_LABEL_MAX_CHARS: int = 18

DEFAULT_CSV_FILENAME: str = "portfolio_allocation.csv"

# Environment variable read by main.py for the log level.
LOG_LEVEL_ENV: str = "SIMULATOR_LOG_LEVEL"
DEFAULT_LOG_LEVEL: str = "WARNING"
