"""Configuration for cashcat.

Paths and display defaults live here. Every path can be overridden with a
``CASHCAT_*`` environment variable so tests and deployments can point the
app at another data directory.
"""

from __future__ import annotations

import os
from pathlib import Path

_PROJECT_ROOT = Path(__file__).parent.parent.resolve()

DATA_DIR = Path(os.getenv("CASHCAT_DATA_DIR", _PROJECT_ROOT / "data"))
SEED_PATH = Path(os.getenv("CASHCAT_SEED_PATH", DATA_DIR / "seed.json"))
THEME_PATH = Path(os.getenv("CASHCAT_THEME_PATH", DATA_DIR / "theme.json"))

LOG_LEVEL = os.getenv("CASHCAT_LOG_LEVEL", "INFO").upper()
CURRENCY_SYMBOL = os.getenv("CASHCAT_CURRENCY_SYMBOL", "$")

# Percent of a budget ceiling at which a card turns orange
WARNING_THRESHOLD = 80
DEFAULT_TRACKING_START_DAY = 1
DEFAULT_BUDGET_COLOR = "#FF6B35"

BUDGET_COLORS = (
    "#FF6B35", "#2DD4BF", "#8B5CF6", "#F59E0B", "#EF4444", "#10B981",
    "#3B82F6", "#F97316", "#84CC16", "#EC4899", "#6366F1", "#14B8A6",
)
