"""
Formatting utilities module for ProxyLogs.

This module renders log records into the flat text used for file export
and clipboard copy.
"""

from datetime import datetime, timezone
from typing import Any, Iterable, Optional
import json
import math
import re

from ..core.models import LogEntry

EXPORT_PREFIX = "proxy-logs-"
EXPORT_SUFFIX = ".log"

_UNSAFE_FILENAME_CHARS = re.compile(r"[^0-9A-Za-z-]")

# Integral floats below this print without exponent in JavaScript too.
_JS_EXPONENT_THRESHOLD = 1e21


def _js_numbers(data: Any) -> Any:
    """Convert floats to the values JavaScript's JSON.stringify writes."""
    if isinstance(data, float):
        if math.isnan(data) or math.isinf(data):
            return None
        if data.is_integer() and abs(data) < _JS_EXPONENT_THRESHOLD:
            return int(data)
        return data
    if isinstance(data, dict):
        return {key: _js_numbers(value) for key, value in data.items()}
    if isinstance(data, (list, tuple)):
        return [_js_numbers(value) for value in data]
    return data


class FormattingUtils:
    """
    Utility class for formatting operations.
    """

    @staticmethod
    def to_json(data: Any) -> str:
        """
        Serialize a payload to single-line JSON.

        Args:
            data: Structured payload

        Returns:
            Compact JSON text without spaces after separators
        """
        return json.dumps(_js_numbers(data), ensure_ascii=False, separators=(",", ":"), default=str)

    @staticmethod
    def to_pretty_json(data: Any) -> str:
        """
        Serialize a payload to JSON indented by two spaces.

        Args:
            data: Structured payload

        Returns:
            Multi-line JSON text
        """
        return json.dumps(_js_numbers(data), ensure_ascii=False, indent=2, default=str)

    @staticmethod
    def format_header(entry: LogEntry) -> str:
        """Render the bracketed timestamp, level and category fields."""
        return f"[{entry.timestamp}] [{entry.level}] [{entry.category}]"

    @staticmethod
    def format_line(entry: LogEntry) -> str:
        """
        Render a record as one export line.

        Args:
            entry: Log record

        Returns:
            "[timestamp] [level] [category] message", followed by
            " | <json>" when the record carries a payload
        """
        line = f"{FormattingUtils.format_header(entry)} {entry.message}"
        if entry.has_data:
            line += f" | {FormattingUtils.to_json(entry.data)}"
        return line

    @staticmethod
    def format_block(entry: LogEntry) -> str:
        """
        Render a record for the clipboard.

        Args:
            entry: Log record

        Returns:
            Header line, message line and an indented "Data:" section when
            the record carries a payload
        """
        block = f"{FormattingUtils.format_header(entry)}\n{entry.message}"
        if entry.has_data:
            block += f"\nData: {FormattingUtils.to_pretty_json(entry.data)}"
        return block

    @staticmethod
    def export_text(entries: Iterable[LogEntry]) -> str:
        """
        Render the given records as export file content.

        Args:
            entries: Records in display order

        Returns:
            Newline-joined export lines, empty string for no records
        """
        return "\n".join(FormattingUtils.format_line(entry) for entry in entries)

    @staticmethod
    def iso_timestamp(moment: Optional[datetime] = None) -> str:
        """
        Render a moment as UTC ISO-8601 with milliseconds and a "Z" suffix.

        Args:
            moment: Time to render (defaults to now); naive values are taken as UTC

        Returns:
            Timestamp such as "2024-01-01T00:00:00.000Z"
        """
        if moment is None:
            moment = datetime.now(timezone.utc)
        elif moment.tzinfo is None:
            moment = moment.replace(tzinfo=timezone.utc)

        stamp = moment.astimezone(timezone.utc).isoformat(timespec="milliseconds")
        return stamp.replace("+00:00", "Z")

    @staticmethod
    def export_filename(moment: Optional[datetime] = None) -> str:
        """
        Build the export artifact name for a moment in time.

        Args:
            moment: Export time (defaults to now); naive values are taken as UTC

        Returns:
            File name such as "proxy-logs-2024-01-01T00-00-00-000Z.log"
        """
        stamp = FormattingUtils.iso_timestamp(moment)
        return f"{EXPORT_PREFIX}{_UNSAFE_FILENAME_CHARS.sub('-', stamp)}{EXPORT_SUFFIX}"
