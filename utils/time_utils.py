"""
Time utilities module for ProxyLogs.

This module parses record timestamps and formats them for display.
"""

from datetime import datetime
from typing import Optional
import logging

from ..core.exceptions import MalformedTimestamp


class TimeUtils:
    """
    Utility class for time operations.
    """

    logger = logging.getLogger(__name__)

    # Formats tried when the value is not ISO-8601
    FALLBACK_FORMATS = [
        "%Y-%m-%d %H:%M:%S",
        "%Y-%m-%d %H:%M:%S.%f",
        "%Y/%m/%d %H:%M:%S",
        "%m/%d/%Y %H:%M:%S",
        "%d/%m/%Y %H:%M:%S",
    ]

    @staticmethod
    def parse_timestamp(timestamp_str: str) -> datetime:
        """
        Parse a record timestamp.

        Args:
            timestamp_str: ISO-8601 (optionally with a trailing "Z") or one of
                the fallback formats

        Returns:
            Parsed datetime, timezone-aware when the text carries an offset

        Raises:
            MalformedTimestamp: If the value is empty or cannot be parsed
        """
        text = (timestamp_str or "").strip()
        if not text:
            raise MalformedTimestamp(timestamp_str)

        iso_text = text[:-1] + "+00:00" if text.endswith(("Z", "z")) else text
        try:
            return datetime.fromisoformat(iso_text)
        except ValueError:
            pass

        for fmt in TimeUtils.FALLBACK_FORMATS:
            try:
                return datetime.strptime(text, fmt)
            except ValueError:
                continue

        raise MalformedTimestamp(timestamp_str)

    @staticmethod
    def format_display_time(timestamp_str: Optional[str]) -> str:
        """
        Format a record timestamp for the console's time column.

        Timezone-aware values are converted to local time, naive ones are
        shown as written.

        Args:
            timestamp_str: Raw record timestamp

        Returns:
            "HH:MM:SS.mmm", the raw value when it cannot be parsed, or "-"
            when it is empty
        """
        if not timestamp_str:
            return "-"

        try:
            dt = TimeUtils.parse_timestamp(timestamp_str)
        except MalformedTimestamp:
            TimeUtils.logger.debug(f"Showing raw timestamp: {timestamp_str!r}")
            return timestamp_str

        if dt.tzinfo is not None:
            dt = dt.astimezone()

        return f"{dt.strftime('%H:%M:%S')}.{dt.microsecond // 1000:03d}"
