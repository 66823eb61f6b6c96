"""Utilities module for ProxyLogs."""

from .file_utils import FileUtils
from .time_utils import TimeUtils
from .formatting import FormattingUtils

__all__ = ['FileUtils', 'TimeUtils', 'FormattingUtils']
