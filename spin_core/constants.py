# FILE: spin_core/constants.py
from __future__ import annotations
from typing import List

# --- Modes ---
MODE_SIMPLE = "simple"
MODE_WEIGHTED = "weighted"
MODE_MULTIPLE = "multiple"
MODE_TEAMS = "teams"

MODES: List[str] = [MODE_SIMPLE, MODE_WEIGHTED, MODE_MULTIPLE, MODE_TEAMS]

MODE_LABELS = {
    MODE_SIMPLE: "Simple Mode",
    MODE_WEIGHTED: "Weighted Mode",
    MODE_MULTIPLE: "Multiple Mode",
    MODE_TEAMS: "Teams Mode",
}

# --- Wheel geometry ---
FULL_CIRCLE = 360.0

# spin animation range (full turns before settling)
MIN_SPIN_TURNS = 5
MAX_SPIN_TURNS = 10
MIN_SPIN_SECONDS = 3.0
MAX_SPIN_SECONDS = 5.0

# --- Weights (percent based on the setup screen) ---
DEFAULT_WEIGHT = 1.0
NEW_ITEM_PERCENT = 10.0
MAX_PERCENT = 100.0
PERCENT_LOW = 95.0
PERCENT_HIGH = 105.0

# --- Teams ---
MIN_TEAMS = 2
MAX_RECOMMENDED_TEAMS = 10
# safety valve: team evaluations allowed per item before placement turns size-only
ATTEMPT_FACTOR = 10

# --- Misc ---
MIN_ITEMS = 2
HISTORY_LIMIT = 10

APP_NAME = "Spin Picker"
EXPORT_VERSION = "1.0.0"
