"""Centralized constants for the flashdeck application.

All magic numbers and configuration defaults live here so every layer
imports from a single source of truth.
"""

# ---------- Time ----------
MS_PER_DAY = 24 * 60 * 60 * 1000

# ---------- SM-2 ----------
DEFAULT_EASE_FACTOR = 2.5
MIN_EASE_FACTOR = 1.3
PASSING_QUALITY = 3  # inclusive
MIN_QUALITY = 0
MAX_QUALITY = 5
FIRST_INTERVAL = 1  # days
SECOND_INTERVAL = 6  # days
LAPSE_INTERVAL = 1  # days

# ---------- Session Queue ----------
DUE_CARDS_PER_NEW_CARD = 3

# ---------- Storage ----------
DEFAULT_STORAGE_KEY = "spaced-repetition-app-data"
CONFIG_DIR_NAME = ".config/flashdeck"
EXPORT_INDENT = 2
