"""UI themes and the one place the chosen theme is read from and saved to."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Dict, Optional, Union

from cashcat.config import THEME_PATH

logger = logging.getLogger(__name__)


class Theme(str, Enum):
    DEFAULT = "default"
    DARK = "dark"
    FOREST = "forest"
    OCEAN = "ocean"
    SUNSET = "sunset"


@dataclass(frozen=True)
class ThemeStyle:
    name: str
    description: str
    accent: str
    background: str
    card: str
    text_primary: str
    text_secondary: str
    plotly_template: str = "plotly_white"

    @property
    def is_dark(self) -> bool:
        return self.plotly_template == "plotly_dark"


THEME_STYLES: Dict[Theme, ThemeStyle] = {
    Theme.DEFAULT: ThemeStyle(
        "CashCat Orange", "Warm and friendly orange theme",
        accent="#F97316", background="#FFF7ED", card="#FFFFFF",
        text_primary="#1F2937", text_secondary="#4B5563",
    ),
    Theme.DARK: ThemeStyle(
        "Midnight", "Sleek dark theme for night owls",
        accent="#3B82F6", background="#111827", card="#1F2937",
        text_primary="#FFFFFF", text_secondary="#D1D5DB",
        plotly_template="plotly_dark",
    ),
    Theme.FOREST: ThemeStyle(
        "Forest", "Natural green theme for eco-conscious users",
        accent="#16A34A", background="#F0FDF4", card="#FFFFFF",
        text_primary="#1F2937", text_secondary="#4B5563",
    ),
    Theme.OCEAN: ThemeStyle(
        "Ocean", "Calm and professional blue theme",
        accent="#2563EB", background="#EFF6FF", card="#FFFFFF",
        text_primary="#1F2937", text_secondary="#4B5563",
    ),
    Theme.SUNSET: ThemeStyle(
        "Sunset", "Vibrant purple and pink sunset theme",
        accent="#9333EA", background="#FAF5FF", card="#FFFFFF",
        text_primary="#1F2937", text_secondary="#4B5563",
    ),
}


def style_for(theme: Union[Theme, str]) -> ThemeStyle:
    try:
        return THEME_STYLES[Theme(theme)]
    except ValueError:
        return THEME_STYLES[Theme.DEFAULT]


def load_theme(path: Optional[Path] = None) -> Theme:
    """Read the saved theme; a missing or unreadable file means the default."""
    target = path or THEME_PATH
    if not target.exists():
        return Theme.DEFAULT
    try:
        with target.open("r", encoding="utf-8") as handle:
            data = json.load(handle)
        return Theme(data.get("theme", Theme.DEFAULT.value))
    except (json.JSONDecodeError, OSError, ValueError, AttributeError) as e:
        logger.warning("Ignoring unreadable theme file %s: %s", target, e)
        return Theme.DEFAULT


def save_theme(theme: Union[Theme, str], path: Optional[Path] = None) -> None:
    target = path or THEME_PATH
    target.parent.mkdir(parents=True, exist_ok=True)
    with target.open("w", encoding="utf-8") as handle:
        json.dump({"theme": Theme(theme).value}, handle, indent=2, sort_keys=True)
    logger.debug("Saved theme %s to %s", Theme(theme).value, target)
