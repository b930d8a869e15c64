"""Theme colors for distribution charts."""

from __future__ import annotations

from enum import Enum
from typing import Union

BAR_COLOR = "rgb(255, 109, 4)"
TOOLTIP_BACKGROUND = "hsl(210, 20%, 23%)"


class ThemeMode(str, Enum):
    DARK = "dark"
    LIGHT = "light"


def resolve_theme(theme: Union[str, ThemeMode, None]) -> ThemeMode:
    """Convert str to ThemeMode. Anything but a dark name is LIGHT."""
    if isinstance(theme, ThemeMode):
        return theme
    if str(theme).lower() in ("dark", "plotly_dark"):
        return ThemeMode.DARK
    return ThemeMode.LIGHT


def get_theme_colors(theme: ThemeMode) -> tuple[str, str]:
    """Background and axis/text colors."""
    if theme is ThemeMode.DARK:
        return "hsl(210, 20%, 15%)", "hsl(210, 20%, 90%)"
    return "#ffffff", "hsl(210, 20%, 30%)"


def get_theme_template(theme: ThemeMode) -> str:
    if theme is ThemeMode.DARK:
        return "plotly_dark"
    return "plotly_white"
