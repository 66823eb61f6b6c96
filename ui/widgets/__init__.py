"""
Widgets module for ProxyLogs UI.

This module provides the widget components for the application.
"""

from .log_table import LogTable
from .search_filter import SearchFilter

__all__ = [
    'LogTable',
    'SearchFilter'
]
