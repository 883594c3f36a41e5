"""Centralized constants for the Cadence scheduling core.

All magic numbers and configuration defaults live here so every layer
imports from a single source of truth.
"""

# ---------- Time ----------
SECONDS_PER_DAY = 86_400.0
MINUTES_PER_DAY = 60 * 24

# ---------- Queue Builder ----------
DEFAULT_LIMIT_DUE = 100
DEFAULT_LIMIT_NEW = 20
QUEUE_LIMIT_ERROR = "Queue limits must be non-negative."

# ---------- Classical (SM-2) ----------
SM2_DEFAULT_EASE = 2.5
SM2_MIN_EASE = 1.3
SM2_AGAIN_EASE_PENALTY = 0.2
SM2_HARD_EASE_PENALTY = 0.15
SM2_EASY_EASE_BONUS = 0.15
SM2_EASY_BONUS = 1.3
SM2_HARD_INTERVAL_FACTOR = 0.5
SM2_AGAIN_INTERVAL_DAYS = 10 / MINUTES_PER_DAY  # 10 minutes
SM2_FIRST_INTERVAL_DAYS = 1.0
SM2_SECOND_INTERVAL_DAYS = 6.0

# ---------- FSRS ----------
FSRS_DESIRED_RETENTION = 0.9
FSRS_MAXIMUM_INTERVAL = 36500
FSRS_LEARNING_STEPS_MINUTES = (1, 10)
FSRS_RELEARNING_STEPS_MINUTES = (10,)
