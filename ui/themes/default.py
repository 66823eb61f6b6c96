"""
Default theme module for ProxyLogs Textual UI.

This module defines the default theme and the per-level styles used to
render log records.
"""

from typing import Dict

from textual.theme import Theme


DEFAULT_THEME_NAME = "proxylogs-default"

DefaultTheme = Theme(
    name=DEFAULT_THEME_NAME,
    primary="#3B82F6",
    secondary="#6C757D",
    warning="#EAB308",
    error="#EF4444",
    success="#28A745",
    accent="#17A2B8",
    dark=True,
    background="#1E1E1E",
    surface="#2D2D2D",
    panel="#3E3E3E",
)

# Rich styles for the level badge; unknown levels fall back to DEFAULT_LEVEL_STYLE
LEVEL_STYLES: Dict[str, str] = {
    'ERROR': "bold #EF4444",
    'WARN': "bold #EAB308",
    'INFO': "bold #3B82F6",
    'DEBUG': "#9CA3AF",
}
DEFAULT_LEVEL_STYLE = "#9CA3AF"

# Row tints that make errors and warnings stand out in the table
ROW_STYLES: Dict[str, str] = {
    'ERROR': "on #2A1416",
    'WARN': "on #2A240E",
}


def get_level_style(level: str) -> str:
    """
    Get the rich style for a log level.

    Args:
        level: Record level, known or not

    Returns:
        Rich style string
    """
    return LEVEL_STYLES.get(level, DEFAULT_LEVEL_STYLE)


def get_row_style(level: str) -> str:
    """Get the background style for a record row, empty for plain rows."""
    return ROW_STYLES.get(level, "")
