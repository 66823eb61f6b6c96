"""
UI module for ProxyLogs.

This module provides the user interface components for the application.
"""

from .app import ProxyLogsApp
from .screens.main_screen import MainScreen
from .screens.log_console_screen import LogConsoleScreen
from .widgets.log_table import LogTable
from .widgets.search_filter import SearchFilter
from .themes.default import DefaultTheme

__all__ = [
    'ProxyLogsApp',
    'MainScreen',
    'LogConsoleScreen',
    'LogTable',
    'SearchFilter',
    'DefaultTheme'
]
