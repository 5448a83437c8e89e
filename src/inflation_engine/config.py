# Baseball roster positions recognized by the engine (UT covers DH/flex)
POSITIONS = ("C", "1B", "2B", "SS", "3B", "OF", "SP", "RP", "UT")

# Tier percentile cutoffs (percentile 0 = most valuable player in the pool)
ELITE_PERCENTILE_CUTOFF = 10
MID_PERCENTILE_CUTOFF = 40

# Budget depletion multiplier bounds
BUDGET_DEPLETION_MIN_MULTIPLIER = 0.1
BUDGET_DEPLETION_MAX_MULTIPLIER = 2.0

# Recalculation scheduling
DEFAULT_DEBOUNCE_MS = 100
IDLE_RECALC_THRESHOLD = 2000  # Projection pools this large run on the idle slot

# Trend analysis (percentage points, not decimal fractions)
DEFAULT_TREND_WINDOW = 10
TREND_THRESHOLD = 2

# League-wide defaults used when a caller has no budget config of its own
DEFAULT_TOTAL_BUDGET = 2600
DEFAULT_TOTAL_ROSTER_SPOTS = 230
