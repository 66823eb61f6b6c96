"""
Screens module for ProxyLogs UI.

This module provides the screen components for the application.
"""

from .main_screen import MainScreen
from .log_console_screen import LogConsoleScreen

__all__ = [
    'MainScreen',
    'LogConsoleScreen'
]
