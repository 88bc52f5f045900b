"""Application constants."""

# Set numbering: siblings are moved above this offset before being renumbered 1..N
RENUMBER_SET_OFFSET = 1_000_000

# Raw rest durations above this (seconds) are treated as anomalous
MAX_RAW_DURATION_SECONDS = 1800

# Outlier cleaning (Tukey fence)
OUTLIER_MIN_SAMPLES = 4
IQR_MULTIPLIER = 1.5

# Scheduled cleaning clamps the fence to plausible rest times
SCHEDULED_MIN_REST_SECONDS = 10  # at least 10 seconds of rest
SCHEDULED_MAX_REST_SECONDS = 600  # longer pauses are plan data, not rest
