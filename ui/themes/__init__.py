"""
Themes module for ProxyLogs UI.

This module provides the theme components for the application.
"""

from .default import DefaultTheme, get_level_style, get_row_style

__all__ = [
    'DefaultTheme',
    'get_level_style',
    'get_row_style'
]
